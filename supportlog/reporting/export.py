"""Semicolon-delimited reports of the record history."""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from supportlog.core.auth import Role, require_admin
from supportlog.core.errors import EmptyExportError
from supportlog.core.models import NO, YES, RecordType, SupportRecord
from supportlog.reporting.templates import EXPORT_HEADERS, records_to_export_rows

logger = logging.getLogger(__name__)

BOM = "\ufeff"
DELIMITER = ";"
CSV_MIME_TYPE = "text/csv"


class ExportFilter(str, Enum):
    ALL = "ALL"
    VALIDATED = "VALIDATED"
    NOT_VALIDATED = "NOT_VALIDATED"
    ESCALATED = "ESCALATED"


FILENAMES = {
    ExportFilter.ALL: "relatorio_completo_ura.csv",
    ExportFilter.VALIDATED: "relatorio_validado_vldd.csv",
    ExportFilter.NOT_VALIDATED: "relatorio_nao_validado_nvldd.csv",
    ExportFilter.ESCALATED: "relatorio_escaladas.csv",
}


@dataclass(frozen=True)
class ExportResult:
    filename: str
    content: str
    row_count: int
    mime_type: str = CSV_MIME_TYPE

    def encoded(self) -> bytes:
        return self.content.encode("utf-8")


def filter_records(history: Iterable[SupportRecord], kind: ExportFilter) -> List[SupportRecord]:
    kind = ExportFilter(kind)
    if kind == ExportFilter.VALIDATED:
        return [r for r in history if r.record_type == RecordType.VALIDATION and r.is_validated == YES]
    if kind == ExportFilter.NOT_VALIDATED:
        return [r for r in history if r.record_type == RecordType.VALIDATION and r.is_validated == NO]
    if kind == ExportFilter.ESCALATED:
        return [r for r in history if r.record_type == RecordType.ESCALATION]
    return list(history)


def render_csv(records: Iterable[SupportRecord], locale: str = "pt-BR") -> str:
    """Return BOM + header + one quoted row per record; the header is always present.

    The header line is left unquoted. Data rows quote every field and double
    embedded quotes so free text never breaks a row.
    """

    buffer = io.StringIO()
    buffer.write(BOM + DELIMITER.join(EXPORT_HEADERS))
    writer = csv.writer(buffer, delimiter=DELIMITER, quoting=csv.QUOTE_ALL, lineterminator="")
    for row in records_to_export_rows(records, locale):
        buffer.write("\n")
        writer.writerow(row)
    return buffer.getvalue()


def export_report(
    history: Iterable[SupportRecord],
    kind: ExportFilter,
    role: Role,
    locale: str = "pt-BR",
) -> ExportResult:
    """Build the named report for ``kind``; admin only, empty results are reported."""

    require_admin(role, "extrair relatórios")
    kind = ExportFilter(kind)
    selected = filter_records(history, kind)
    if not selected:
        logger.info("Export %s matched no records", kind.value)
        raise EmptyExportError(f"No records for filter {kind.value}")

    content = render_csv(selected, locale)
    logger.info("Exported %d records for filter %s", len(selected), kind.value)
    return ExportResult(filename=FILENAMES[kind], content=content, row_count=len(selected))
