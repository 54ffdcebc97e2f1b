from typing import Optional

from room_booking.booking.application import BookingLedger
from room_booking.booking.infrastructure import FileLedgerStore, default_room_catalog
from room_booking.core.config import Settings, get_settings
from room_booking.core.logging import get_logger, setup_logging


def bootstrap_app(settings: Optional[Settings] = None, configure_logging: bool = True):
    """Создает и настраивает все компоненты приложения."""
    settings = settings or get_settings()

    # 1. Логирование
    if configure_logging:
        setup_logging(settings)
    logger = get_logger("room_booking")

    # 2. Хранилище состояния
    store = FileLedgerStore(settings.storage_path, logger=logger)

    # 3. Реестр с каталогом аудиторий
    ledger = BookingLedger(
        institution_name=settings.INSTITUTION_NAME,
        store=store,
        rooms=default_room_catalog(),
        availability_rule=settings.AVAILABILITY_RULE,
        logger=logger,
    )

    return {
        "settings": settings,
        "store": store,
        "ledger": ledger,
    }
