"""
Основные типы и исключения общего ядра.
"""

from datetime import date, datetime, time, timedelta

# Идентификаторы выдаются реестром последовательно, начиная с 1
ClientId = int
RefNum = int
RoomNumber = int

# Значение email по умолчанию, если клиент его не указал
NOT_AVAILABLE = "N/A"


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class StorageError(DomainException):
    """Базовое исключение для ошибок хранилища."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class StorageReadError(StorageError):
    """Файл хранилища существует, но его не удалось прочитать."""

    pass


class StorageWriteError(StorageError):
    """Не удалось записать состояние в файл хранилища."""

    pass


class CorruptStoreError(StorageError):
    """Содержимое файла хранилища не соответствует ожидаемой схеме."""

    pass


# Общие утилиты
def add_hours(start: time, hours: int) -> time:
    """Прибавляет часы ко времени суток, переходя через полночь как часы."""
    moment = datetime.combine(date.min, start) + timedelta(hours=hours)
    return moment.time()
