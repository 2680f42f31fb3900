"""Support ticket logging: capture forms, summaries, history and reports."""
from supportlog.app import Application
from supportlog.core import (
    AppConfig,
    RecordType,
    Role,
    Session,
    SupportRecord,
    configure_logging,
    describe_error,
)
from supportlog.forms import FormState, validate_draft
from supportlog.lifecycle import RecordLifecycleController
from supportlog.reporting import ExportFilter, export_report, generate_summary, render_csv
from supportlog.review import dashboard_stats, escalation_records, search_records
from supportlog.store import InMemoryStore, RecordStore, RestRecordStore, create_store

__all__ = [
    "AppConfig",
    "Application",
    "ExportFilter",
    "FormState",
    "InMemoryStore",
    "RecordLifecycleController",
    "RecordStore",
    "RecordType",
    "RestRecordStore",
    "Role",
    "Session",
    "SupportRecord",
    "configure_logging",
    "create_store",
    "dashboard_stats",
    "describe_error",
    "escalation_records",
    "export_report",
    "generate_summary",
    "render_csv",
    "search_records",
    "validate_draft",
]
