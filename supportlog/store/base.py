"""Record store interface shared by the in-memory and remote backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from supportlog.core.auth import Session

Row = Dict[str, Any]


class RecordStore(ABC):
    """Table-oriented persistence: select, insert, update and delete by column."""

    @abstractmethod
    def select(self, table: str, order_by: Optional[str] = None, ascending: bool = True) -> List[Row]:
        """Return every row of ``table``, optionally ordered by a column."""

    @abstractmethod
    def insert(self, table: str, rows: Iterable[Row]) -> List[Row]:
        """Insert rows and return them as stored (with ``id`` and ``created_at``)."""

    @abstractmethod
    def update(self, table: str, column: str, value: Any, patch: Row) -> None:
        """Apply ``patch`` to rows where ``column`` equals ``value``."""

    @abstractmethod
    def delete(self, table: str, column: str, value: Any) -> None:
        """Delete rows where ``column`` equals ``value``."""

    @abstractmethod
    def get_session(self) -> Optional[Session]:
        """Return the authenticated identity, if the backend knows one."""
