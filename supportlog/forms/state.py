"""Draft record held by the capture forms."""
from __future__ import annotations

import copy
import logging
from dataclasses import fields, replace
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from supportlog.core.models import RecordType, SupportRecord
from supportlog.core.utils import format_input_datetime
from supportlog.reporting.summary import generate_summary

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(item.name for item in fields(SupportRecord)) - {"id", "created_at"}


def validate_draft(draft: SupportRecord, mode: RecordType) -> List[str]:
    """Return the missing required fields for submitting ``draft`` in ``mode``."""

    issues: List[str] = []
    if not (draft.analyst_name or "").strip():
        issues.append("Nome do Analista")
    if RecordType(mode) == RecordType.GENERAL and not draft.subject:
        issues.append("Assunto")
    return issues


class FormState:
    """Holds the draft for the active tab and the mutators the widgets call."""

    def __init__(
        self,
        mode: RecordType = RecordType.GENERAL,
        clock: Optional[Callable[[], datetime]] = None,
        locale: str = "pt-BR",
    ) -> None:
        self.mode = RecordType(mode)
        self.clock = clock or datetime.now
        self.locale = locale
        self.draft = self._fresh_draft()

    def _now(self) -> str:
        return format_input_datetime(self.clock())

    def _fresh_draft(self) -> SupportRecord:
        now = self._now()
        return SupportRecord(start_time=now, escalation_date=now)

    def set_mode(self, mode: RecordType) -> None:
        self.mode = RecordType(mode)

    def set_field(self, name: str, value: Any) -> None:
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        if isinstance(value, list):
            value = list(value)
        self.draft = replace(self.draft, **{name: value})

    def toggle_set_member(self, name: str, value: str) -> None:
        """Add ``value`` to a list field if absent, remove it if present."""

        current = getattr(self.draft, name, None)
        if name not in EDITABLE_FIELDS or not isinstance(current, list):
            raise ValueError(f"Not a multi-value field: {name}")
        if value in current:
            updated = [item for item in current if item != value]
        else:
            updated = [*current, value]
        self.draft = replace(self.draft, **{name: updated})

    def reset(self, preserve: Iterable[str] = ()) -> None:
        preserve = list(preserve)
        unknown = set(preserve) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        kept = {name: copy.deepcopy(getattr(self.draft, name)) for name in preserve}
        self.draft = replace(self._fresh_draft(), **kept)
        logger.debug("Form reset (kept %s)", ", ".join(kept) or "nothing")

    def set_end_time_to_now(self) -> None:
        self.draft = replace(self.draft, end_time=self._now())

    def issues(self) -> List[str]:
        return validate_draft(self.draft, self.mode)

    @property
    def summary(self) -> str:
        return generate_summary(self.draft, self.mode, self.locale)
