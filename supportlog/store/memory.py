"""In-memory record store used when no remote backend is configured."""
from __future__ import annotations

import copy
import itertools
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from supportlog.core.auth import DEFAULT_SESSION, Session
from supportlog.core.config import DEFAULT_TABLE
from supportlog.core.errors import MissingTableError
from supportlog.core.utils import utc_now_iso
from supportlog.store.base import RecordStore, Row

logger = logging.getLogger(__name__)


class InMemoryStore(RecordStore):
    """Mock backend keeping rows per table for the lifetime of the process."""

    def __init__(self, tables: Iterable[str] = (DEFAULT_TABLE,), session: Optional[Session] = DEFAULT_SESSION) -> None:
        self._tables: Dict[str, List[Row]] = {name: [] for name in tables}
        self._order: Dict[str, int] = {}
        self._counter = itertools.count()
        self.session = session

    def _rows(self, table: str) -> List[Row]:
        try:
            return self._tables[table]
        except KeyError:
            raise MissingTableError(table) from None

    def select(self, table: str, order_by: Optional[str] = None, ascending: bool = True) -> List[Row]:
        rows = self._rows(table)
        if order_by:
            # insertion sequence breaks ties so equal timestamps keep a stable order
            rows = sorted(
                rows,
                key=lambda row: (row.get(order_by) or "", self._order.get(row.get("id"), 0)),
                reverse=not ascending,
            )
        return copy.deepcopy(rows)

    def insert(self, table: str, rows: Iterable[Row]) -> List[Row]:
        target = self._rows(table)
        inserted: List[Row] = []
        for row in rows:
            stored = copy.deepcopy(dict(row))
            stored["id"] = str(uuid.uuid4())
            stored["created_at"] = utc_now_iso()
            self._order[stored["id"]] = next(self._counter)
            target.append(stored)
            inserted.append(copy.deepcopy(stored))
        logger.debug("Inserted %d rows into %s", len(inserted), table)
        return inserted

    def update(self, table: str, column: str, value: Any, patch: Row) -> None:
        for row in self._rows(table):
            if row.get(column) == value:
                row.update(copy.deepcopy(patch))

    def delete(self, table: str, column: str, value: Any) -> None:
        rows = self._rows(table)
        rows[:] = [row for row in rows if row.get(column) != value]

    def get_session(self) -> Optional[Session]:
        return self.session
