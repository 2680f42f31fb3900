"""Tests for the in-memory and remote record stores."""
import pytest
import requests

from supportlog.core.config import AppConfig
from supportlog.core.errors import ConnectivityError, MissingTableError
from supportlog.core.models import RecordType, SupportRecord
from supportlog.store import InMemoryStore, RestRecordStore, create_store, setup_sql


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b"x"):
        self.status_code = status_code
        self._payload = payload
        self.content = content if payload is not None or status_code >= 400 else b""

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session`` and records each request."""

    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.responses = list(responses or [])
        self.error = error
        self.requests = []

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.responses.pop(0)

    def get(self, url, timeout=None):
        return self.request("GET", url)


def test_memory_store_assigns_identity_and_orders():
    store = InMemoryStore()
    first = store.insert("support_records", [{"task": "T1"}])[0]
    second = store.insert("support_records", [{"task": "T2"}])[0]

    assert first["id"] != second["id"]
    assert first["created_at"]
    newest_first = store.select("support_records", order_by="created_at", ascending=False)
    assert [row["task"] for row in newest_first] == ["T2", "T1"]


def test_memory_store_update_and_delete_by_column():
    store = InMemoryStore()
    row = store.insert("support_records", [{"status": "Aberto"}])[0]

    store.update("support_records", "id", row["id"], {"status": "Fechado"})
    assert store.select("support_records")[0]["status"] == "Fechado"

    store.delete("support_records", "id", row["id"])
    assert store.select("support_records") == []


def test_memory_store_returns_copies():
    store = InMemoryStore()
    store.insert("support_records", [{"sicOptions": ["Saques"]}])

    store.select("support_records")[0]["sicOptions"].append("Sensores")

    assert store.select("support_records")[0]["sicOptions"] == ["Saques"]


def test_memory_store_unknown_table_is_missing():
    with pytest.raises(MissingTableError) as excinfo:
        InMemoryStore().select("other")

    assert excinfo.value.code == "42P01"


def test_memory_store_session_stub():
    assert InMemoryStore().get_session().email == "admin@sistema.local"


def test_record_round_trips_through_store_columns():
    record = SupportRecord(record_type=RecordType.VALIDATION, analyst_name="Ana", sic_options=["Saques"])

    row = record.to_row()
    assert "id" not in row and "created_at" not in row
    assert row["analystName"] == "Ana"
    assert row["recordType"] == "VALIDATION"

    restored = SupportRecord.from_row({**row, "id": "9", "unknown": 1, "bankAnalystName": None})
    assert restored.id == "9"
    assert restored.record_type == RecordType.VALIDATION
    assert restored.bank_analyst_name == ""
    assert restored.sic_options == ["Saques"]


def test_rest_store_select_sends_order_and_key():
    session = FakeSession([FakeResponse(payload=[{"id": "1"}])])
    store = RestRecordStore("https://db.example.com/", "anon-key", session=session)

    rows = store.select("support_records", order_by="created_at", ascending=False)

    method, url, kwargs = session.requests[0]
    assert rows == [{"id": "1"}]
    assert method == "GET"
    assert url == "https://db.example.com/rest/v1/support_records"
    assert kwargs["params"] == {"select": "*", "order": "created_at.desc"}
    assert session.headers["apikey"] == "anon-key"
    assert session.headers["Authorization"] == "Bearer anon-key"


def test_rest_store_insert_asks_for_representation():
    session = FakeSession([FakeResponse(status_code=201, payload=[{"id": "abc", "task": "T1"}])])
    store = RestRecordStore("https://db.example.com", "k", session=session)

    rows = store.insert("support_records", [{"task": "T1"}])

    method, _, kwargs = session.requests[0]
    assert method == "POST"
    assert kwargs["headers"] == {"Prefer": "return=representation"}
    assert kwargs["json"] == [{"task": "T1"}]
    assert rows == [{"id": "abc", "task": "T1"}]


def test_rest_store_update_and_delete_filter_by_column():
    session = FakeSession([FakeResponse(status_code=204), FakeResponse(status_code=204)])
    store = RestRecordStore("https://db.example.com", "k", session=session)

    store.update("support_records", "id", "abc", {"status": "Fechado"})
    store.delete("support_records", "id", "abc")

    assert session.requests[0][0] == "PATCH"
    assert session.requests[0][2]["params"] == {"id": "eq.abc"}
    assert session.requests[0][2]["json"] == {"status": "Fechado"}
    assert session.requests[1][0] == "DELETE"
    assert session.requests[1][2]["params"] == {"id": "eq.abc"}


def test_rest_store_classifies_missing_table():
    body = {"code": "42P01", "message": 'relation "support_records" does not exist'}
    session = FakeSession([FakeResponse(status_code=404, payload=body)])
    store = RestRecordStore("https://db.example.com", "k", session=session)

    with pytest.raises(MissingTableError):
        store.select("support_records")


def test_rest_store_wraps_other_http_errors():
    session = FakeSession([FakeResponse(status_code=500, payload={"message": "boom", "code": "XX000"})])
    store = RestRecordStore("https://db.example.com", "k", session=session)

    with pytest.raises(ConnectivityError) as excinfo:
        store.delete("support_records", "id", "1")

    assert excinfo.value.code == "XX000"
    assert excinfo.value.message == "boom"


def test_rest_store_transport_failure_is_connectivity_error():
    session = FakeSession(error=requests.ConnectionError("refused"))
    store = RestRecordStore("https://db.example.com", "k", session=session)

    with pytest.raises(ConnectivityError, match="Failed to fetch"):
        store.select("support_records")


def test_rest_store_session_lookup():
    session = FakeSession([FakeResponse(payload={"id": "u1", "email": "tecnico@banco.local"})])
    store = RestRecordStore("https://db.example.com", "k", session=session)

    assert store.get_session().email == "tecnico@banco.local"

    session.responses = [FakeResponse(status_code=401, payload={"message": "no user"})]
    assert store.get_session() is None


def test_create_store_picks_backend_from_config():
    assert isinstance(create_store(AppConfig()), InMemoryStore)
    remote = create_store(AppConfig(store_url="https://db.example.com", store_key="k"))
    assert isinstance(remote, RestRecordStore)


def test_setup_sql_lists_store_columns():
    script = setup_sql("support_records")

    assert "create table if not exists support_records" in script
    assert '"analystName" text' in script
    assert '"sicOptions" text[]' in script
    assert "  task text" in script
