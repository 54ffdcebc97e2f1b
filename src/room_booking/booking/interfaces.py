"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol

from .domain import LedgerSnapshot


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class ILedgerStore(Protocol):
    """Интерфейс хранилища полного состояния реестра."""

    @property
    def path(self) -> Path: ...

    def exists(self) -> bool: ...
    def load(self) -> Optional[LedgerSnapshot]: ...
    def save(self, snapshot: LedgerSnapshot) -> None: ...
