"""Review helpers used by the Streamlit dashboard and the records view."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from supportlog.core.models import STATUS_CLOSED, STATUS_OPEN, SupportRecord
from supportlog.reporting.templates import type_label


def escalation_records(history: Iterable[SupportRecord]) -> List[SupportRecord]:
    """Records shown on the escalation dashboard."""

    return [record for record in history if record.in_escalation_dashboard]


def dashboard_stats(records: Iterable[SupportRecord]) -> Dict[str, int]:
    records = list(records)
    return {
        "total": len(records),
        "open": len([record for record in records if record.status == STATUS_OPEN]),
        "closed": len([record for record in records if record.status == STATUS_CLOSED]),
    }


def search_records(history: Iterable[SupportRecord], term: str) -> List[SupportRecord]:
    """Case-insensitive match on task, SR, analyst and location."""

    needle = (term or "").strip().lower()
    if not needle:
        return list(history)

    def _matches(record: SupportRecord) -> bool:
        haystacks = [record.task, record.sr, record.analyst_name, record.location_name]
        return any(needle in (value or "").lower() for value in haystacks)

    return [record for record in history if _matches(record)]


def records_to_rows(records: Iterable[SupportRecord]) -> List[Dict[str, Any]]:
    """Convert records to dictionaries for tabular rendering."""

    def _sanitize(value: Any) -> Any:
        if isinstance(value, str):
            return " ".join(value.split())
        if isinstance(value, list):
            return ", ".join(value)
        return value

    sanitized_rows = []
    for record in records:
        row = record.to_dict()
        row["type_label"] = type_label(record)
        sanitized_rows.append({key: _sanitize(value) for key, value in row.items()})
    return sanitized_rows
