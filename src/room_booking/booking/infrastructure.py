"""
Инфраструктурный слой контекста бронирования.

Содержит реализации хранилищ состояния реестра и каталог аудиторий.
"""
import contextlib
import os
from pathlib import Path
from typing import List, Optional, Union

import structlog
from pydantic import ValidationError

from ..shared_kernel import CorruptStoreError, StorageReadError, StorageWriteError
from . import interfaces as ports
from .domain import LedgerSnapshot, Room


def default_room_catalog() -> List[Room]:
    """Каталог аудиторий учреждения. Порядок задает приоритет при равном запасе."""
    return [
        Room(room_number=4, computer_capacity=0, breakout_capacity=12,
             has_printer=False, has_smartboard=False),
        Room(room_number=8, computer_capacity=18, breakout_capacity=10,
             has_printer=True, has_smartboard=True),
        Room(room_number=11, computer_capacity=20, breakout_capacity=0,
             has_printer=True, has_smartboard=True),
        Room(room_number=12, computer_capacity=6, breakout_capacity=0,
             has_printer=False, has_smartboard=True),
        Room(room_number=14, computer_capacity=18, breakout_capacity=2,
             has_printer=True, has_smartboard=True),
        Room(room_number=13, computer_capacity=18, breakout_capacity=10,
             has_printer=True, has_smartboard=True),
        Room(room_number=201, computer_capacity=14, breakout_capacity=10,
             has_printer=True, has_smartboard=True),
        Room(room_number=71, computer_capacity=0, breakout_capacity=20,
             has_printer=True, has_smartboard=False),
        Room(room_number=9, computer_capacity=18, breakout_capacity=0,
             has_printer=True, has_smartboard=True),
        Room(room_number=100, computer_capacity=12, breakout_capacity=6,
             has_printer=True, has_smartboard=True),
    ]


class FileLedgerStore(ports.ILedgerStore):
    """Хранилище состояния реестра в одном JSON-файле.

    Каждая запись полностью перезаписывает файл: данные сначала пишутся
    во временный файл рядом, затем он атомарно подменяет основной.
    """

    def __init__(self, file_path: Union[str, Path], logger: Optional[ports.ILogger] = None):
        """
        Инициализирует хранилище.

        Args:
            file_path: Путь к файлу с данными
            logger: Логгер; по умолчанию structlog
        """
        self._file_path = Path(file_path)
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.exists()

    def load(self) -> Optional[LedgerSnapshot]:
        """Загружает снимок состояния. Возвращает None, если файла нет."""
        if not self._file_path.exists():
            return None

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                raw_data = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(
                f"Не удалось прочитать файл {self._file_path}: {e}", path=self._file_path
            ) from e

        try:
            snapshot = LedgerSnapshot.model_validate_json(raw_data)
        except ValidationError as e:
            raise CorruptStoreError(
                f"Файл {self._file_path} поврежден или имеет неверный формат",
                path=self._file_path,
            ) from e

        self._logger.debug(
            "Ledger state loaded",
            path=str(self._file_path),
            clients=len(snapshot.clients),
            bookings=len(snapshot.bookings),
        )
        return snapshot

    def save(self, snapshot: LedgerSnapshot) -> None:
        """Сохраняет снимок состояния, заменяя файл целиком."""
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            # Создаем директорию, если она не существует
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json(indent=2))
            os.replace(tmp_path, self._file_path)
        except OSError as e:
            # Временный файл не должен оставаться после неудачной записи
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StorageWriteError(
                f"Не удалось записать файл {self._file_path}: {e}", path=self._file_path
            ) from e

        self._logger.debug(
            "Ledger state saved",
            path=str(self._file_path),
            clients=len(snapshot.clients),
            bookings=len(snapshot.bookings),
        )


class InMemoryLedgerStore(ports.ILedgerStore):
    """Хранилище в памяти. Хранит сериализованный снимок, как файловое."""

    def __init__(self, path: Union[str, Path] = "memory_bookings.dat"):
        self._path = Path(path)
        self._data: Optional[str] = None
        self.save_count = 0

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._data is not None

    def load(self) -> Optional[LedgerSnapshot]:
        if self._data is None:
            return None
        try:
            return LedgerSnapshot.model_validate_json(self._data)
        except ValidationError as e:
            raise CorruptStoreError("Снимок в памяти поврежден", path=self._path) from e

    def save(self, snapshot: LedgerSnapshot) -> None:
        self._data = snapshot.model_dump_json()
        self.save_count += 1
