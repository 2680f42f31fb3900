"""Mapping utilities aligning support records with the report columns."""
from typing import Iterable, List

from supportlog.core.models import YES, RecordType, SupportRecord
from supportlog.core.utils import format_display_date


EXPORT_HEADERS = [
    "Data/Hora",
    "Tipo",
    "Analista",
    "Local",
    "Task/SR",
    "Assunto",
    "Validado?",
    "Escalado Por",
    "Técnico",
    "Defeito Cliente",
]


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return value.replace(";", ",").replace("\r", " ").replace("\n", " ")


def type_label(record: SupportRecord) -> str:
    """``VLDD``/``NVLDD`` for validation records, the record type otherwise."""

    if record.record_type == RecordType.VALIDATION:
        return "VLDD" if record.is_validated == YES else "NVLDD"
    return RecordType(record.record_type).value


def _task_sr(record: SupportRecord) -> str:
    suffix = f"/ {record.sr}" if record.sr else ""
    return f"{record.task or ''} {suffix}"


def record_to_export_row(record: SupportRecord, locale: str = "pt-BR") -> List[str]:
    """Convert a SupportRecord into the report row, in header order."""

    return [
        format_display_date(record.start_time, locale),
        type_label(record),
        _clean_text(record.analyst_name),
        _clean_text(record.location_name),
        _clean_text(_task_sr(record)),
        _clean_text(record.subject),
        record.is_validated or "-",
        _clean_text(record.bank_analyst_name) or "-",
        _clean_text(record.technician_name) or "-",
        _clean_text(record.customer_complaint),
    ]


def records_to_export_rows(records: Iterable[SupportRecord], locale: str = "pt-BR") -> List[List[str]]:
    return [record_to_export_row(record, locale) for record in records]
