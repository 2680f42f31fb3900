"""Tests for creating, updating and deleting records against the store."""
import copy

import pytest

from supportlog.core.errors import ConnectivityError, PermissionDeniedError, ValidationError
from supportlog.core.models import NO, STATUS_CLOSED, STATUS_OPEN, YES, RecordType
from supportlog.forms.state import FormState
from supportlog.lifecycle.controller import RecordLifecycleController

GENERAL_VALUES = {
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


def _fill(form: FormState, **values) -> None:
    for name, value in values.items():
        form.set_field(name, value)


def test_create_rejects_missing_analyst_without_store_call(controller, store, form):
    form.set_field("subject", "1100 - Código")

    with pytest.raises(ValidationError) as excinfo:
        controller.create()

    assert excinfo.value.issues == ["Nome do Analista"]
    assert store.calls == []
    assert controller.history == []


def test_create_requires_subject_on_general_tab(controller, store, form):
    form.set_field("analyst_name", "Ana")

    with pytest.raises(ValidationError, match="Assunto"):
        controller.create()

    assert store.calls == []


def test_create_saves_record_and_resets_draft(controller, general_draft):
    saved = controller.create()

    assert controller.history == [saved]
    assert saved.id and not saved.id.startswith("temp-")
    assert saved.record_type == RecordType.GENERAL
    assert saved.status == STATUS_OPEN
    assert saved.escalation_validation == NO
    assert saved.end_time == "2024-03-05T14:30"

    assert controller.clipboard.text.startswith("=== REGISTRO DE ATENDIMENTO HW ===")
    assert "Analista: Ana" in controller.clipboard.text

    assert general_draft.draft.analyst_name == "Ana"
    assert general_draft.draft.task == ""
    assert general_draft.draft.subject == ""


def test_create_then_fetch_contains_draft_fields(controller, general_draft):
    controller.create()
    controller.history = []

    assert controller.fetch_all() is True

    assert len(controller.history) == 1
    fetched = controller.history[0]
    for name, value in GENERAL_VALUES.items():
        assert getattr(fetched, name) == value
    assert fetched.created_at


def test_create_uses_active_mode_for_record_type(controller, form):
    form.set_mode(RecordType.VALIDATION)
    _fill(form, analyst_name="Bia", is_validated=YES)
    form.toggle_set_member("sic_options", "Saques")

    saved = controller.create()

    assert saved.record_type == RecordType.VALIDATION
    assert saved.sic_options == ["Saques"]
    assert controller.clipboard.text.startswith("#VLDD#")


def test_create_keeps_explicit_end_time(controller, general_draft):
    general_draft.set_field("end_time", "2024-03-05T15:00")

    saved = controller.create()

    assert saved.end_time == "2024-03-05T15:00"


def test_create_failure_leaves_draft_and_history(controller, store, general_draft):
    store.failing.add("insert")
    before = copy.deepcopy(general_draft.draft)

    with pytest.raises(ConnectivityError):
        controller.create()

    assert controller.history == []
    assert general_draft.draft == before
    assert controller.clipboard.text == ""


def test_create_synthesizes_id_when_store_returns_nothing(controller, store, general_draft, monkeypatch):
    monkeypatch.setattr(store, "insert", lambda table, rows: [])

    saved = controller.create()

    assert saved.id == f"temp-{int(general_draft.clock().timestamp() * 1000)}"
    assert controller.history[0] is saved


def test_update_applies_locally_and_in_store(controller, general_draft, store):
    saved = controller.create()

    controller.update(saved.id, "escalation_validation", YES)

    assert controller.history[0].escalation_validation == YES
    assert store.select("support_records")[0]["escalationValidation"] == YES


def test_update_failure_restores_exact_snapshot(controller, store, form):
    _fill(form, **GENERAL_VALUES)
    first = controller.create()
    _fill(form, **{**GENERAL_VALUES, "task": "T2"})
    controller.create()
    snapshot = copy.deepcopy(controller.history)
    store.failing.add("update")

    with pytest.raises(ConnectivityError):
        controller.update(first.id, "status", STATUS_CLOSED)

    assert controller.history == snapshot


def test_update_refuses_record_type_changes(controller, general_draft, store):
    saved = controller.create()

    with pytest.raises(ValueError):
        controller.update(saved.id, "record_type", RecordType.ESCALATION)

    assert "update" not in store.calls


def test_toggle_status_flips_open_and_closed(controller, general_draft):
    saved = controller.create()

    controller.toggle_status(saved.id, STATUS_OPEN)
    assert controller.history[0].status == STATUS_CLOSED

    controller.toggle_status(saved.id, STATUS_CLOSED)
    assert controller.history[0].status == STATUS_OPEN


def test_technician_cannot_delete(make_controller, general_draft, store):
    admin = make_controller()
    saved = admin.create()
    technician = make_controller("tecnico.rui@banco.local")
    technician.fetch_all()
    before = copy.deepcopy(technician.history)
    store.calls.clear()

    with pytest.raises(PermissionDeniedError):
        technician.delete(saved.id)

    assert technician.history == before
    assert store.calls == []


def test_admin_delete_removes_record_and_selection(controller, general_draft, store):
    saved = controller.create()
    controller.select(saved.id)

    controller.delete(saved.id)

    assert controller.history == []
    assert controller.selected_id is None
    assert store.select("support_records") == []


def test_delete_failure_resynchronizes_from_store(controller, general_draft, store):
    saved = controller.create()
    store.failing.add("delete")

    with pytest.raises(ConnectivityError):
        controller.delete(saved.id)

    assert store.calls[-1] == "select"
    assert [record.id for record in controller.history] == [saved.id]


def test_fetch_all_orders_newest_first(controller, form):
    _fill(form, **GENERAL_VALUES)
    older = controller.create()
    _fill(form, **{**GENERAL_VALUES, "task": "T2"})
    newer = controller.create()
    controller.history = []

    controller.fetch_all()

    assert [record.id for record in controller.history] == [newer.id, older.id]


def test_fetch_all_flags_missing_table(store, form):
    controller = RecordLifecycleController(store, form, table="missing_table")
    controller.history = ["sentinel"]

    assert controller.fetch_all() is False

    assert controller.history == ["sentinel"]
    assert controller.banner.remediation is True
    assert "missing_table" in controller.banner.message


def test_fetch_all_flags_connection_errors(controller, store):
    store.failing.add("select")

    assert controller.fetch_all() is False

    assert controller.banner.remediation is False
    assert "select failed" in controller.banner.message


def test_successful_fetch_clears_banner(controller, store):
    store.failing.add("select")
    controller.fetch_all()
    store.failing.clear()

    controller.fetch_all()

    assert controller.banner is None


def test_controller_defaults_to_store_session(store, form):
    controller = RecordLifecycleController(store, form)

    assert controller.session.email == "admin@sistema.local"
    assert controller.role.value == "admin"


def test_update_failure_is_logged(controller, general_draft, store, caplog):
    saved = controller.create()
    store.failing.add("update")

    with caplog.at_level("ERROR", logger="supportlog.lifecycle.controller"):
        with pytest.raises(ConnectivityError):
            controller.update(saved.id, "status", STATUS_CLOSED)

    assert "reverting" in caplog.text


def test_fetch_all_keeps_history_when_a_row_cannot_be_read(controller, general_draft, store):
    saved = controller.create()
    store.insert("support_records", [{"recordType": "LEGACY", "task": "T0"}])

    assert controller.fetch_all() is False

    assert [record.id for record in controller.history] == [saved.id]
    assert controller.banner.remediation is False
    assert "LEGACY" in controller.banner.message
