"""
Общие фикстуры для тестов системы бронирования аудиторий.
"""
from datetime import date, time

import pytest

from room_booking.booking.application import BookingLedger
from room_booking.booking.domain import BookingRequirements, Room
from room_booking.booking.infrastructure import (
    FileLedgerStore,
    InMemoryLedgerStore,
    default_room_catalog,
)

BOOKING_DATE = date(2024, 6, 1)


@pytest.fixture
def catalog():
    """Каталог аудиторий учреждения."""
    return default_room_catalog()


@pytest.fixture
def make_requirements():
    """Фабрика требований к бронированию с разумными значениями по умолчанию."""

    def _make(
        computer_capacity=0,
        duration_hours=1,
        booking_date=BOOKING_DATE,
        booking_time=time(10, 0),
    ) -> BookingRequirements:
        return BookingRequirements(
            computer_capacity=computer_capacity,
            duration_hours=duration_hours,
            booking_date=booking_date,
            booking_time=booking_time,
        )

    return _make


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "stirling_bookings.dat"


@pytest.fixture
def file_store(store_path):
    return FileLedgerStore(store_path)


@pytest.fixture
def ledger(file_store, catalog) -> BookingLedger:
    """Реестр с файловым хранилищем во временной директории."""
    return BookingLedger("Stirling", file_store, catalog)


@pytest.fixture
def memory_ledger(catalog) -> BookingLedger:
    return BookingLedger("Stirling", InMemoryLedgerStore(), catalog)


@pytest.fixture
def small_catalog():
    """Две аудитории: на 12 и на 20 компьютеров."""
    return [
        Room(room_number=20, computer_capacity=20, breakout_capacity=0),
        Room(room_number=12, computer_capacity=12, breakout_capacity=0),
    ]
