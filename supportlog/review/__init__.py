"""Review utilities for the dashboard and records views."""
from supportlog.review.workflow import (
    dashboard_stats,
    escalation_records,
    records_to_rows,
    search_records,
)

__all__ = [
    "dashboard_stats",
    "escalation_records",
    "records_to_rows",
    "search_records",
]
