"""
Общее ядро (Shared Kernel) системы бронирования аудиторий.

Содержит общие типы данных, исключения и утилиты.
"""

from .domain import (
    NOT_AVAILABLE,
    # Базовые типы
    ClientId,
    CorruptStoreError,
    # Исключения
    DomainException,
    RefNum,
    RoomNumber,
    StorageError,
    StorageReadError,
    StorageWriteError,
    # Утилиты
    add_hours,
)

__all__ = [
    # Базовые типы
    "ClientId",
    "RefNum",
    "RoomNumber",
    "NOT_AVAILABLE",
    # Исключения
    "DomainException",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "CorruptStoreError",
    # Утилиты
    "add_hours",
]
