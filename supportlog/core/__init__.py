"""Core building blocks for the supportlog package."""
from supportlog.core.auth import DEFAULT_SESSION, Role, RoleDirectory, Session, allowed_tabs, role_from_name
from supportlog.core.config import AppConfig, SettingsStore
from supportlog.core.errors import (
    ConnectivityError,
    EmptyExportError,
    MissingTableError,
    PermissionDeniedError,
    StoreError,
    SupportLogError,
    ValidationError,
    describe_error,
)
from supportlog.core.logging import configure_logging
from supportlog.core.models import RecordType, SupportRecord

__all__ = [
    "DEFAULT_SESSION",
    "Role",
    "RoleDirectory",
    "Session",
    "allowed_tabs",
    "role_from_name",
    "AppConfig",
    "SettingsStore",
    "ConnectivityError",
    "EmptyExportError",
    "MissingTableError",
    "PermissionDeniedError",
    "StoreError",
    "SupportLogError",
    "ValidationError",
    "describe_error",
    "configure_logging",
    "RecordType",
    "SupportRecord",
]
