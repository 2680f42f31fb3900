"""Helper sinks for writing reports to disk."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

from supportlog.core.models import SupportRecord
from supportlog.reporting.export import ExportResult
from supportlog.reporting.templates import EXPORT_HEADERS, records_to_export_rows


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def write_csv(result: ExportResult, output_dir: Path) -> Path:
    """Write an exported report under ``output_dir`` using its own file name."""

    output_path = output_dir / result.filename
    ensure_output_dir(output_path)
    output_path.write_bytes(result.encoded())
    return output_path


def write_excel(records: Iterable[SupportRecord], output_path: Path, locale: str = "pt-BR") -> None:
    """Write the report rows to an Excel workbook using openpyxl."""

    rows = records_to_export_rows(records, locale)
    if not rows:
        return

    try:
        from openpyxl import Workbook
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("openpyxl is required for Excel sinks") from exc

    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "support_records"
    sheet.append(EXPORT_HEADERS)
    for row in rows:
        sheet.append(row)
    workbook.save(output_path)
