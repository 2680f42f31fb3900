"""Create, update and delete support records with optimistic local history."""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, replace
from typing import Any, List, Optional

from supportlog.core.auth import DEFAULT_SESSION, Role, RoleDirectory, Session, require_admin
from supportlog.core.config import DEFAULT_TABLE
from supportlog.core.errors import MissingTableError, StoreError, ValidationError, describe_error
from supportlog.core.models import (
    FIELD_TO_COLUMN,
    NO,
    STATUS_CLOSED,
    STATUS_OPEN,
    RecordType,
    SupportRecord,
)
from supportlog.core.utils import format_input_datetime
from supportlog.forms.state import EDITABLE_FIELDS, FormState
from supportlog.reporting.summary import generate_summary
from supportlog.store.base import RecordStore

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = EDITABLE_FIELDS - {"record_type"}


@dataclass(frozen=True)
class Banner:
    """Persistent store problem shown above every tab."""

    message: str
    level: str = "error"
    remediation: bool = False


class MemoryClipboard:
    """Keeps the last copied summary so the UI can offer it for copying."""

    def __init__(self) -> None:
        self.text = ""

    def copy(self, text: str) -> None:
        self.text = text


class RecordLifecycleController:
    """Owns the in-memory history and keeps it in step with the record store."""

    def __init__(
        self,
        store: RecordStore,
        form: FormState,
        session: Optional[Session] = None,
        clipboard: Optional[MemoryClipboard] = None,
        roles: Optional[RoleDirectory] = None,
        table: str = DEFAULT_TABLE,
    ) -> None:
        self.store = store
        self.form = form
        self.session = session or store.get_session() or DEFAULT_SESSION
        self.clipboard = clipboard or MemoryClipboard()
        self.roles = roles or RoleDirectory()
        self.table = table
        self.history: List[SupportRecord] = []
        self.selected_id: Optional[str] = None
        self.banner: Optional[Banner] = None

    @property
    def role(self) -> Role:
        return self.roles.resolve(self.session)

    @property
    def selected(self) -> Optional[SupportRecord]:
        return next((record for record in self.history if record.id == self.selected_id), None)

    def select(self, record_id: Optional[str]) -> None:
        self.selected_id = record_id

    def fetch_all(self) -> bool:
        """Reload history newest first; on failure keep it and raise the banner."""

        try:
            rows = self.store.select(self.table, order_by="created_at", ascending=False)
        except MissingTableError as exc:
            logger.error("Table %s is missing: %s", self.table, exc)
            message, level = describe_error(exc, self.table)
            self.banner = Banner(message, level, remediation=True)
            return False
        except StoreError as exc:
            logger.error("Could not load records: %s", exc)
            message, level = describe_error(exc, self.table)
            self.banner = Banner(message, level)
            return False

        try:
            history = [SupportRecord.from_row(row) for row in rows]
        except (TypeError, ValueError) as exc:
            logger.error("Could not read records from %s: %s", self.table, exc)
            self.banner = Banner(f'Registro inválido na tabela "{self.table}": {exc}')
            return False

        self.history = history
        self.banner = None
        logger.info("Loaded %d records from %s", len(self.history), self.table)
        return True

    def create(self) -> SupportRecord:
        """Persist the current draft and start a fresh one for the same analyst."""

        mode = self.form.mode
        issues = self.form.issues()
        if issues:
            logger.warning("Rejected %s draft: missing %s", mode.value, ", ".join(issues))
            raise ValidationError(issues)

        draft = self.form.draft
        now = self.form.clock()
        payload = replace(
            draft,
            id=None,
            created_at=None,
            record_type=mode,
            end_time=draft.end_time or format_input_datetime(now),
            status=STATUS_OPEN,
            escalation_validation=NO,
        )
        summary = generate_summary(payload, mode, self.form.locale)

        try:
            rows = self.store.insert(self.table, [payload.to_row()])
        except StoreError:
            logger.exception("Failed to save %s record", mode.value)
            raise

        if rows:
            saved = SupportRecord.from_row(rows[0])
        else:
            saved = replace(payload, id=f"temp-{int(now.timestamp() * 1000)}")
        self.history = [saved, *self.history]
        self._copy(summary)
        self.form.reset(preserve=("analyst_name",))
        logger.info("Saved %s record %s", mode.value, saved.id)
        return saved

    def update(self, record_id: str, field: str, value: Any) -> None:
        """Apply a field change locally first; restore the prior history on failure."""

        if field not in UPDATABLE_FIELDS:
            raise ValueError(f"Field cannot be updated: {field}")

        snapshot = copy.deepcopy(self.history)
        self.history = [
            replace(record, **{field: value}) if record.id == record_id else record
            for record in self.history
        ]
        stored_value = value.value if isinstance(value, RecordType) else value
        try:
            self.store.update(self.table, "id", record_id, {FIELD_TO_COLUMN[field]: stored_value})
        except StoreError:
            logger.exception("Failed to update %s on record %s; reverting", field, record_id)
            self.history = snapshot
            raise

    def toggle_status(self, record_id: str, current_status: str) -> None:
        new_status = STATUS_CLOSED if current_status == STATUS_OPEN else STATUS_OPEN
        self.update(record_id, "status", new_status)

    def delete(self, record_id: str) -> None:
        """Admin-only removal; a failed delete resynchronizes from the store."""

        require_admin(self.role, "excluir registros")

        self.history = [record for record in self.history if record.id != record_id]
        if self.selected_id == record_id:
            self.selected_id = None

        try:
            self.store.delete(self.table, "id", record_id)
        except StoreError:
            logger.exception("Failed to delete record %s; reloading history", record_id)
            self.fetch_all()
            raise
        logger.info("Deleted record %s", record_id)

    def _copy(self, text: str) -> None:
        try:
            self.clipboard.copy(text)
        except Exception:  # pragma: no cover - clipboard is best effort
            logger.exception("Failed to copy summary to clipboard")
