"""Identity and role resolution for the logging tool."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

from supportlog.core.errors import PermissionDeniedError
from supportlog.core.models import RecordType

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    TECHNICIAN = "technician"
    USER = "user"


@dataclass(frozen=True)
class Session:
    """Authenticated identity as reported by the store's auth surface."""

    email: str
    user_id: Optional[str] = None


DEFAULT_SESSION = Session(email="admin@sistema.local")

TAB_GENERAL = "geral"
TAB_VALIDATION = "escala"
TAB_ESCALATION = "chamadoEscalado"
TAB_DASHBOARD = "dashboard"
TAB_RECORDS = "registros"

FORM_TABS: Dict[str, RecordType] = {
    TAB_GENERAL: RecordType.GENERAL,
    TAB_VALIDATION: RecordType.VALIDATION,
    TAB_ESCALATION: RecordType.ESCALATION,
}

_ADMIN_TABS = [TAB_GENERAL, TAB_VALIDATION, TAB_ESCALATION, TAB_DASHBOARD, TAB_RECORDS]


def role_from_name(name: Optional[str]) -> Role:
    """Legacy convention: derive the role from the identity's name prefix."""

    if not name:
        return Role.USER
    if name.startswith("admin"):
        return Role.ADMIN
    if name.startswith("tecnico"):
        return Role.TECHNICIAN
    return Role.ADMIN


class RoleDirectory:
    """Explicit identity-to-role assignments with a fallback resolver.

    Assignments are keyed by user id or email. Identities without an
    assignment are resolved by ``fallback`` (the name convention by default).
    """

    def __init__(
        self,
        assignments: Optional[Mapping[str, Role]] = None,
        fallback: Callable[[Optional[str]], Role] = role_from_name,
    ) -> None:
        self.assignments: Dict[str, Role] = {
            key.strip().lower(): Role(value) for key, value in (assignments or {}).items()
        }
        self.fallback = fallback

    def resolve(self, session: Optional[Session]) -> Role:
        if session is None:
            return Role.USER
        for key in (session.user_id, session.email):
            if key and key.lower() in self.assignments:
                return self.assignments[key.lower()]
        role = self.fallback(session.email)
        logger.debug("No explicit role for %s; using %s", session.email, role.value)
        return role

    @classmethod
    def parse(cls, raw: str) -> "RoleDirectory":
        """Build a directory from ``email=role`` pairs separated by commas."""

        assignments: Dict[str, Role] = {}
        for chunk in raw.split(","):
            if "=" not in chunk:
                continue
            identity, role = chunk.split("=", 1)
            try:
                assignments[identity.strip()] = Role(role.strip().lower())
            except ValueError:
                logger.warning("Ignoring unknown role %r for %s", role.strip(), identity.strip())
        return cls(assignments)


def allowed_tabs(role: Role) -> List[str]:
    """Tabs the role may open; technicians only get the two capture forms."""

    if role == Role.TECHNICIAN:
        return [TAB_GENERAL, TAB_VALIDATION]
    return list(_ADMIN_TABS)


def require_admin(role: Role, action: str) -> None:
    if role != Role.ADMIN:
        raise PermissionDeniedError(f"Apenas Administradores podem {action}.")
