"""Summaries, reports and file sinks."""
from supportlog.reporting.export import ExportFilter, ExportResult, export_report, filter_records, render_csv
from supportlog.reporting.sinks import write_csv, write_excel
from supportlog.reporting.summary import generate_summary
from supportlog.reporting.templates import EXPORT_HEADERS, record_to_export_row, type_label

__all__ = [
    "EXPORT_HEADERS",
    "ExportFilter",
    "ExportResult",
    "export_report",
    "filter_records",
    "generate_summary",
    "record_to_export_row",
    "render_csv",
    "type_label",
    "write_csv",
    "write_excel",
]
