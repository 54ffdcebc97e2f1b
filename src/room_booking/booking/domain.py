"""
Доменная модель контекста бронирования.

Содержит сущности (аудитория, клиент, бронирование), объект-значение
требований к бронированию и доменный сервис подбора аудитории.
"""

import re
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..shared_kernel import NOT_AVAILABLE, ClientId, RefNum, RoomNumber, add_hours

CLIENT_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z ]+$")
UK_PHONE_PATTERN = re.compile(r"^(\+44\s?7\d{3}|\(?07\d{3}\)?)\s?\d{3}\s?\d{3}$")
EMAIL_PATTERN = re.compile(r"^\w+@[a-zA-Z_]+?\.[a-zA-Z]{2,3}$")

MIN_DURATION_HOURS = 1
MAX_DURATION_HOURS = 24

SCHEMA_VERSION = 1


def is_valid_client_name(value: str) -> bool:
    """Имя состоит только из латинских букв и пробелов."""
    return bool(CLIENT_NAME_PATTERN.match(value))


def is_valid_uk_phone(value: str) -> bool:
    """Номер мобильного телефона в британском формате."""
    return bool(UK_PHONE_PATTERN.match(value))


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


class Room(BaseModel):
    """Аудитория из фиксированного каталога учреждения."""

    model_config = ConfigDict(frozen=True)

    room_number: RoomNumber
    computer_capacity: int = Field(..., ge=0)
    breakout_capacity: int = Field(0, ge=0)
    # Не участвуют в подборе, хранятся для полноты каталога
    has_printer: bool = False
    has_smartboard: bool = False

    def _identity(self):
        return (self.computer_capacity, self.breakout_capacity, self.room_number)

    def __eq__(self, other):
        if not isinstance(other, Room):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self):
        return hash(self._identity())


class Client(BaseModel):
    """Клиент учреждения.

    Идентификатор и имя задаются при создании и не меняются.
    Телефон и email можно обновить; новые значения проходят ту же проверку.
    """

    model_config = ConfigDict(validate_assignment=True)

    client_id: ClientId = Field(..., ge=1, frozen=True)
    name: str = Field(..., frozen=True)
    phone_number: str
    email: str = NOT_AVAILABLE

    @field_validator("email", mode="before")
    @classmethod
    def default_email(cls, v):
        return NOT_AVAILABLE if v is None else v

    @field_validator("name", "phone_number", "email")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"Поле {info.field_name} не может быть пустым")
        return v


class BookingRequirements(BaseModel):
    """Требования клиента к бронированию (объект-значение)."""

    model_config = ConfigDict(frozen=True)

    computer_capacity: int = Field(..., ge=0)
    duration_hours: int = Field(..., ge=MIN_DURATION_HOURS, le=MAX_DURATION_HOURS)
    booking_date: date
    booking_time: time
    # Устаревшие поля, в подборе не используются
    breakout_seats: int = Field(0, ge=0)
    smartboard: bool = False
    printer: bool = False

    @property
    def end_time(self) -> time:
        """Время окончания по часам (после полуночи начинается заново)."""
        return add_hours(self.booking_time, self.duration_hours)

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.booking_date, self.booking_time)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(hours=self.duration_hours)


class Booking(BaseModel):
    """Бронирование аудитории клиентом.

    Создается целиком и не изменяется; отмена удаляет бронирование из реестра.
    """

    model_config = ConfigDict(frozen=True)

    ref_num: RefNum = Field(..., ge=1)
    room: Room
    client: Client
    requirements: BookingRequirements

    @property
    def booking_date(self) -> date:
        return self.requirements.booking_date


class LedgerSnapshot(BaseModel):
    """Полное состояние реестра в порядке хранения в файле."""

    schema_version: int = SCHEMA_VERSION
    bookings: Dict[RefNum, Booking] = Field(default_factory=dict)
    clients: List[Client] = Field(default_factory=list)
    client_id_counter: int = Field(0, ge=0)
    ref_num_counter: int = Field(0, ge=0)
    institution_name: str

    @field_validator("schema_version")
    @classmethod
    def supported_version(cls, v: int) -> int:
        if v != SCHEMA_VERSION:
            raise ValueError(f"Неподдерживаемая версия схемы: {v}")
        return v

    @model_validator(mode="after")
    def consistent_identifiers(self) -> "LedgerSnapshot":
        for ref_num, booking in self.bookings.items():
            if ref_num != booking.ref_num:
                raise ValueError(
                    f"Ключ {ref_num} не совпадает с номером бронирования {booking.ref_num}"
                )
        if self.bookings and max(self.bookings) > self.ref_num_counter:
            raise ValueError("Счетчик номеров бронирований меньше выданного номера")
        if self.clients and max(c.client_id for c in self.clients) > self.client_id_counter:
            raise ValueError("Счетчик идентификаторов клиентов меньше выданного")
        return self


class AvailabilityRule(str, Enum):
    """Правила проверки занятости аудитории."""

    # Поведение исходной системы: запрошенное время раньше начала
    # существующего бронирования тоже считается конфликтом
    LEGACY = "legacy"
    # Честное пересечение полуоткрытых интервалов [начало, конец)
    INTERVAL = "interval"


class RoomFinder:
    """Доменный сервис подбора аудитории под требования клиента."""

    @classmethod
    def search(
        cls,
        bookings: Iterable[Booking],
        rooms: Sequence[Room],
        requirements: BookingRequirements,
        rule: AvailabilityRule = AvailabilityRule.LEGACY,
    ) -> List[Room]:
        """Возвращает подходящие аудитории, лучшие первыми.

        Аудитории, занятые в запрошенное время, и аудитории с недостаточным
        числом компьютеров отбрасываются. Остальные сортируются по запасу
        компьютеров сверх запрошенного; при равенстве сохраняется порядок
        каталога.
        """
        candidates = list(rooms)

        for booking in bookings:
            if cls.conflicts(booking, requirements, rule):
                candidates = [room for room in candidates if room != booking.room]

        requested = requirements.computer_capacity
        candidates = [room for room in candidates if room.computer_capacity >= requested]
        candidates.sort(key=lambda room: room.computer_capacity - requested)
        return candidates

    @classmethod
    def conflicts(
        cls,
        booking: Booking,
        requirements: BookingRequirements,
        rule: AvailabilityRule = AvailabilityRule.LEGACY,
    ) -> bool:
        """Проверяет, мешает ли существующее бронирование запрошенному."""
        existing = booking.requirements

        if rule == AvailabilityRule.INTERVAL:
            return (
                requirements.starts_at < existing.ends_at
                and existing.starts_at < requirements.ends_at
            )

        if existing.booking_date != requirements.booking_date:
            return False

        requested_time = requirements.booking_time
        start = existing.booking_time
        end = existing.end_time

        # Совпадает с началом или раньше начала
        if requested_time <= start:
            return True
        return start < requested_time < end
