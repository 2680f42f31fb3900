"""Error taxonomy shared by the store, lifecycle and reporting layers."""
from __future__ import annotations

from typing import Iterable, List, Optional

MISSING_TABLE_CODE = "42P01"
# PostgREST reports a table missing from its schema cache with its own code.
MISSING_TABLE_CODES = frozenset({MISSING_TABLE_CODE, "PGRST205"})


class SupportLogError(Exception):
    """Base class for every error surfaced to operators."""


class ValidationError(SupportLogError):
    """A required field is missing; nothing was sent to the store."""

    def __init__(self, issues: Iterable[str]) -> None:
        self.issues: List[str] = list(issues)
        super().__init__("; ".join(self.issues))


class PermissionDeniedError(SupportLogError):
    """The current role may not perform the operation."""


class EmptyExportError(SupportLogError):
    """The chosen report filter matched no records."""


class StoreError(SupportLogError):
    """Failure reported by a record store, carrying the backend code."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class MissingTableError(StoreError):
    """The backing table does not exist."""

    def __init__(self, table: str, message: Optional[str] = None) -> None:
        self.table = table
        super().__init__(message or f'relation "{table}" does not exist', MISSING_TABLE_CODE)


class ConnectivityError(StoreError):
    """Generic transport or backend failure."""


def store_error_from_payload(table: str, code: Optional[str], message: str) -> StoreError:
    """Classify a backend error body into the matching store error."""

    if code in MISSING_TABLE_CODES:
        return MissingTableError(table, message)
    return ConnectivityError(message, code)


def describe_error(exc: Exception, table: str = "support_records") -> tuple[str, str]:
    """Return the operator-facing message and feedback level for an error."""

    if isinstance(exc, ValidationError):
        return f"Por favor, preencha: {', '.join(exc.issues)}.", "warning"
    if isinstance(exc, PermissionDeniedError):
        return f"Permissão negada. {exc}", "error"
    if isinstance(exc, EmptyExportError):
        return "Não há dados para exportar com este filtro.", "info"
    if isinstance(exc, MissingTableError):
        return (
            f'A tabela "{table}" não existe no banco de dados. '
            "Abra as Configurações e execute o script SQL para criá-la.",
            "error",
        )
    if isinstance(exc, StoreError):
        return f"Erro de conexão com o banco: {exc.message or 'verifique a conexão'}", "error"
    return f"Erro inesperado: {exc}", "error"
