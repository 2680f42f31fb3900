"""Pytest configuration to make the local package importable without installation."""
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from supportlog.core.auth import Session
from supportlog.core.errors import ConnectivityError
from supportlog.forms.state import FormState
from supportlog.lifecycle.controller import RecordLifecycleController
from supportlog.store.memory import InMemoryStore

FIXED_NOW = datetime(2024, 3, 5, 14, 30)


class FlakyStore(InMemoryStore):
    """In-memory store whose operations can be told to fail, recording every call."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise ConnectivityError(f"{operation} failed")

    def select(self, table, order_by=None, ascending=True):
        self._maybe_fail("select")
        return super().select(table, order_by, ascending)

    def insert(self, table, rows):
        self._maybe_fail("insert")
        return super().insert(table, rows)

    def update(self, table, column, value, patch):
        self._maybe_fail("update")
        return super().update(table, column, value, patch)

    def delete(self, table, column, value):
        self._maybe_fail("delete")
        return super().delete(table, column, value)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from real credentials and the user's settings file."""

    for key in (
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPPORTLOG_ROLES",
        "SUPPORTLOG_TABLE",
        "SUPPORTLOG_LOCALE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SUPPORTLOG_SETTINGS_FILE", str(tmp_path / "settings.json"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def form(clock) -> FormState:
    return FormState(clock=clock)


@pytest.fixture
def make_controller(store: FlakyStore, form: FormState):
    """Build a controller over the shared store and form for a given identity."""

    def _make(email: str = "admin@sistema.local") -> RecordLifecycleController:
        return RecordLifecycleController(store, form, session=Session(email=email))

    return _make


@pytest.fixture
def controller(make_controller) -> RecordLifecycleController:
    return make_controller()


@pytest.fixture
def general_draft(form: FormState) -> FormState:
    """Fill the form with the reference GENERAL draft."""

    values = {
        "analyst_name": "Ana",
        "location_name": "Agencia1",
        "task": "T1",
        "subject": "1200 - Dúvida técnica",
        "is_escalated": "Não",
        "problem_description": "p",
        "action_taken": "a",
        "valid_call": "Sim",
        "training_provided": "Não",
        "used_acfs": "Não",
    }
    for name, value in values.items():
        form.set_field(name, value)
    return form
