"""
Прикладной слой контекста бронирования.

Реестр (BookingLedger) владеет клиентами, каталогом аудиторий,
бронированиями и счетчиками идентификаторов. Каждая изменяющая операция
завершается полной записью состояния в хранилище.
"""

from datetime import date, time
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, ConfigDict

from ..shared_kernel import ClientId, RefNum, RoomNumber, StorageWriteError
from . import interfaces as ports
from .domain import (
    AvailabilityRule,
    Booking,
    BookingRequirements,
    Client,
    LedgerSnapshot,
    Room,
    RoomFinder,
)


class BookingResultStatus(str, Enum):
    """Итог попытки создать бронирование."""

    CREATED = "created"
    CLIENT_NOT_FOUND = "client_not_found"
    NO_ROOM_AVAILABLE = "no_room_available"


class BookingResult(BaseModel):
    """Результат создания бронирования."""

    model_config = ConfigDict(frozen=True)

    status: BookingResultStatus
    ref_num: Optional[RefNum] = None
    room_number: Optional[RoomNumber] = None

    @property
    def created(self) -> bool:
        return self.status == BookingResultStatus.CREATED


def format_time(value: time) -> str:
    """Время в виде HH:MM, секунды выводятся только если они не нулевые."""
    if value.second or value.microsecond:
        return value.isoformat()
    return value.isoformat(timespec="minutes")


def format_booking(booking: Booking, header: Tuple[str, object]) -> str:
    """Текстовый блок с данными бронирования для вывода пользователю."""
    client = booking.client
    requirements = booking.requirements
    label, value = header
    lines = [
        f"{label}: {value}",
        f"Client Name: {client.name}",
        f"Phone Number: {client.phone_number}",
        f"Email Address: {client.email}",
        f"Room Number: {booking.room.room_number}",
        f"Booking Date: {requirements.booking_date.isoformat()}",
        f"Booking Time: {format_time(requirements.booking_time)}",
        f"Booking Duration: {requirements.duration_hours}",
    ]
    return "\n\n" + "\n".join(lines)


class BookingLedger:
    """Реестр бронирований учреждения."""

    def __init__(
        self,
        institution_name: str,
        store: ports.ILedgerStore,
        rooms: Sequence[Room],
        availability_rule: AvailabilityRule = AvailabilityRule.LEGACY,
        logger: Optional[ports.ILogger] = None,
    ):
        """Инициализирует реестр.

        Если хранилище пусто, в него сразу записывается начальное состояние,
        иначе состояние восстанавливается из него.

        Raises:
            ValueError: пустое название учреждения или пустой каталог аудиторий
            StorageError: хранилище не удалось прочитать или записать
        """
        if institution_name is None or not institution_name.strip():
            raise ValueError("Название учреждения не может быть пустым")
        if not rooms:
            raise ValueError("Каталог аудиторий не может быть пустым")

        self._institution_name = institution_name.strip()
        self._store = store
        self._rooms: Tuple[Room, ...] = tuple(rooms)
        self._availability_rule = AvailabilityRule(availability_rule)
        self._logger = logger or structlog.get_logger(__name__)

        self._clients: List[Client] = []
        self._bookings: Dict[RefNum, Booking] = {}
        self._client_id_counter = 0
        self._ref_num_counter = 0

        snapshot = self._store.load()
        if snapshot is None:
            self._flush()
            self._logger.info(
                "Ledger storage created",
                institution=self._institution_name,
                path=str(self._store.path),
            )
        else:
            self._restore(snapshot)
            self._logger.info(
                "Ledger storage loaded",
                institution=self._institution_name,
                path=str(self._store.path),
                clients=len(self._clients),
                bookings=len(self._bookings),
            )

    # Состояние (только для чтения)

    @property
    def institution_name(self) -> str:
        return self._institution_name

    @property
    def availability_rule(self) -> AvailabilityRule:
        return self._availability_rule

    @property
    def rooms(self) -> Tuple[Room, ...]:
        return self._rooms

    @property
    def clients(self) -> List[Client]:
        return list(self._clients)

    @property
    def bookings(self) -> Dict[RefNum, Booking]:
        return dict(self._bookings)

    @property
    def client_id_counter(self) -> int:
        return self._client_id_counter

    @property
    def ref_num_counter(self) -> int:
        return self._ref_num_counter

    # Клиенты

    def add_client(
        self, name: str, phone_number: str, email: Optional[str] = None
    ) -> ClientId:
        """Регистрирует клиента и возвращает его идентификатор.

        Ошибки проверки данных (ValueError) пробрасываются вызывающему,
        состояние реестра при этом не меняется.
        """
        client = Client(
            client_id=self._client_id_counter + 1,
            name=name,
            phone_number=phone_number,
            email=email,
        )
        self._clients.append(client)
        self._client_id_counter += 1
        self._flush()

        self._logger.info("Client added", client_id=client.client_id)
        return client.client_id

    def find_client(self, client_id: ClientId) -> Optional[Client]:
        """Находит клиента по идентификатору (при дублях - последнего)."""
        located = None
        for client in self._clients:
            if client.client_id == client_id:
                located = client
        return located

    def update_client_contact(
        self,
        client_id: ClientId,
        phone_number: Optional[str] = None,
        email: Optional[str] = None,
    ) -> bool:
        """Обновляет телефон и/или email клиента. Возвращает False, если клиента нет."""
        client = self.find_client(client_id)
        if client is None:
            return False

        changes = {}
        if phone_number is not None:
            changes["phone_number"] = phone_number
        if email is not None:
            changes["email"] = email

        # Проверяем все новые значения до изменения общего объекта клиента
        validated = Client.model_validate({**client.model_dump(), **changes})
        for field_name in changes:
            setattr(client, field_name, getattr(validated, field_name))
        self._flush()

        self._logger.info("Client contact updated", client_id=client_id)
        return True

    # Бронирования

    def find_available_rooms(self, requirements: BookingRequirements) -> List[Room]:
        """Подходящие свободные аудитории, лучшие первыми."""
        return RoomFinder.search(
            self._bookings.values(),
            list(self._rooms),
            requirements,
            rule=self._availability_rule,
        )

    def create_booking(
        self, client_id: ClientId, requirements: BookingRequirements
    ) -> BookingResult:
        """Бронирует наиболее подходящую свободную аудиторию для клиента."""
        client = self.find_client(client_id)
        if client is None:
            self._logger.info("Booking refused: client not found", client_id=client_id)
            return BookingResult(status=BookingResultStatus.CLIENT_NOT_FOUND)

        candidates = self.find_available_rooms(requirements)
        if not candidates:
            self._logger.info(
                "Booking refused: no room available",
                client_id=client_id,
                computer_capacity=requirements.computer_capacity,
                booking_date=requirements.booking_date.isoformat(),
                booking_time=requirements.booking_time.isoformat(),
            )
            return BookingResult(status=BookingResultStatus.NO_ROOM_AVAILABLE)

        room = candidates[0]
        booking = Booking(
            ref_num=self._ref_num_counter + 1,
            room=room,
            client=client,
            requirements=requirements,
        )
        self._bookings[booking.ref_num] = booking
        self._ref_num_counter += 1
        self._flush()

        self._logger.info(
            "Booking created",
            ref_num=booking.ref_num,
            client_id=client_id,
            room_number=room.room_number,
        )
        return BookingResult(
            status=BookingResultStatus.CREATED,
            ref_num=booking.ref_num,
            room_number=room.room_number,
        )

    def cancel_booking(self, ref_num: RefNum) -> bool:
        """Отменяет бронирование. Состояние записывается в любом случае."""
        removed = self._bookings.pop(ref_num, None)
        self._flush()

        if removed is not None:
            self._logger.info("Booking cancelled", ref_num=ref_num)
        else:
            self._logger.info("Booking to cancel not found", ref_num=ref_num)
        return removed is not None

    # Отчеты

    def get_booking_summary(self, ref_num: RefNum) -> Optional[str]:
        """Сводка по бронированию или None, если бронирования нет."""
        booking = self._bookings.get(ref_num)
        if booking is None:
            return None
        return format_booking(booking, ("Reference Number", booking.ref_num))

    def generate_report_by_client(self, client_name: str) -> str:
        """Отчет по бронированиям клиента (имя без учета регистра)."""
        wanted = client_name.casefold()
        return self._report(
            booking
            for booking in self._bookings.values()
            if booking.client.name.casefold() == wanted
        )

    def generate_report_by_date_range(self, start_date: date, end_date: date) -> str:
        """Отчет по бронированиям строго между датами (границы не включаются)."""
        return self._report(
            booking
            for booking in self._bookings.values()
            if start_date < booking.booking_date < end_date
        )

    def generate_report(
        self,
        client_name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> str:
        """Отчет по имени клиента либо по диапазону дат."""
        by_range = start_date is not None or end_date is not None
        if client_name is not None and by_range:
            raise ValueError("Укажите либо имя клиента, либо диапазон дат")
        if client_name is not None:
            return self.generate_report_by_client(client_name)
        if start_date is None or end_date is None:
            raise ValueError("Для отчета по датам нужны обе границы диапазона")
        return self.generate_report_by_date_range(start_date, end_date)

    def _report(self, bookings: Iterable[Booking]) -> str:
        return "".join(
            format_booking(booking, ("Result No", number))
            for number, booking in enumerate(bookings, start=1)
        )

    # Хранилище

    def snapshot(self) -> LedgerSnapshot:
        """Снимок текущего состояния реестра."""
        return LedgerSnapshot(
            bookings=dict(self._bookings),
            clients=list(self._clients),
            client_id_counter=self._client_id_counter,
            ref_num_counter=self._ref_num_counter,
            institution_name=self._institution_name,
        )

    def _flush(self) -> None:
        try:
            self._store.save(self.snapshot())
        except StorageWriteError as e:
            # Изменения в памяти уже применены и не откатываются
            self._logger.error(
                "Ledger flush failed, in-memory state diverged from storage",
                path=str(self._store.path),
                error=str(e),
            )
            raise

    def _restore(self, snapshot: LedgerSnapshot) -> None:
        self._clients = list(snapshot.clients)
        self._client_id_counter = snapshot.client_id_counter
        self._ref_num_counter = snapshot.ref_num_counter
        self._institution_name = snapshot.institution_name

        # Бронирования ссылаются на тех же клиентов, что и список клиентов
        clients_by_id = {client.client_id: client for client in self._clients}
        self._bookings = {}
        for ref_num, booking in snapshot.bookings.items():
            client = clients_by_id.get(booking.client.client_id)
            if client is not None and client is not booking.client:
                booking = booking.model_copy(update={"client": client})
            self._bookings[ref_num] = booking
