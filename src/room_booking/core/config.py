"""
Конфигурация приложения на основе pydantic-settings.
Значения читаются из переменных окружения с префиксом ROOM_BOOKING_.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from room_booking.booking.domain import AvailabilityRule

STORAGE_FILE_SUFFIX = "_bookings.dat"


def storage_file_name(institution_name: str) -> str:
    """Имя файла хранилища: <название учреждения в нижнем регистре>_bookings.dat."""
    return (institution_name.strip() + STORAGE_FILE_SUFFIX).lower()


class Settings(BaseSettings):
    # Учреждение
    INSTITUTION_NAME: str = "Stirling"
    DATA_DIR: Path = Path(".")

    # Окружение и логирование
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Подбор аудиторий
    AVAILABILITY_RULE: AvailabilityRule = AvailabilityRule.LEGACY

    model_config = SettingsConfigDict(
        env_prefix="ROOM_BOOKING_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def storage_path(self) -> Path:
        return self.DATA_DIR / storage_file_name(self.INSTITUTION_NAME)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
