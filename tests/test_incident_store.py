import asyncio
import uuid
from datetime import datetime, timezone

import pytest

from modules.incidents import store as store_module
from modules.incidents.store import IncidentStore
from modules.incidents.utils import build_incident, check_fields
from modules.shared.errors import NotFoundError, StorageError, ValidationError

CREATED = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def make_row(**overrides):
    row = {
        "id": uuid.UUID("5d0c7a1e-93f4-4a0b-8c2e-7b6f1d2a3e4f"),
        "title": "Flooded underpass",
        "details": "Water is knee deep",
        "address": "Station Rd",
        "landmark": None,
        "image_url": "/uploads/incidentImage-1-2.jpg",
        "status": "Pending",
        "created_at": CREATED,
    }
    row.update(overrides)
    return row


class RecordingQuery:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def __call__(self, sql, params=None, fetch_one=False):
        self.calls.append((" ".join(sql.split()), params, fetch_one))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def query(monkeypatch):
    recorder = RecordingQuery()
    monkeypatch.setattr(store_module, "execute_query", recorder)
    return recorder


def test_create_inserts_pending_incident(query):
    query.result = {"id": "ignored"}
    fields = check_fields(" Flooded underpass ", "Water is knee deep", "Station Rd", "")
    incident = build_incident(fields, "/uploads/a.jpg")

    incident_id = asyncio.run(IncidentStore().create(incident))

    sql, params, fetch_one = query.calls[0]
    assert sql.startswith("INSERT INTO incidents")
    assert fetch_one is True
    assert params[0] == uuid.UUID(incident_id)
    assert params[1:] == ("Flooded underpass", "Water is knee deep", "Station Rd", None, "/uploads/a.jpg", "Pending")


def test_check_fields_rejects_missing_fields():
    with pytest.raises(ValidationError) as exc_info:
        check_fields(None, "details", "", None)
    assert "title is required" in exc_info.value.message
    assert "address" in exc_info.value.message


def test_build_incident_needs_an_image_url():
    fields = check_fields("Fallen tree", "Blocking the lane", "Oak Ave", None)
    with pytest.raises(ValidationError, match="image_url"):
        build_incident(fields, " ")


def test_list_all_orders_by_created_at_desc(query):
    query.result = [make_row(), make_row(id=uuid.uuid4(), title="Older")]

    incidents = asyncio.run(IncidentStore().list_all())

    sql, _, _ = query.calls[0]
    assert "ORDER BY created_at DESC" in sql
    assert [i.title for i in incidents] == ["Flooded underpass", "Older"]
    assert incidents[0].id == "5d0c7a1e-93f4-4a0b-8c2e-7b6f1d2a3e4f"


def test_update_status_touches_only_status(query):
    query.result = make_row(status="Resolved")
    incident_id = "5d0c7a1e-93f4-4a0b-8c2e-7b6f1d2a3e4f"

    incident = asyncio.run(IncidentStore().update_status(incident_id, "Resolved"))

    sql, params, _ = query.calls[0]
    assert "SET status = $1" in sql
    assert "created_at =" not in sql
    assert params == ("Resolved", uuid.UUID(incident_id))
    assert incident.status.value == "Resolved"
    assert incident.created_at == CREATED


def test_update_status_unknown_id(query):
    query.result = None
    with pytest.raises(NotFoundError):
        asyncio.run(IncidentStore().update_status(str(uuid.uuid4()), "Rejected"))


def test_update_status_malformed_id_skips_database(query):
    with pytest.raises(NotFoundError):
        asyncio.run(IncidentStore().update_status("42", "Rejected"))
    assert query.calls == []


def test_update_status_invalid_value_skips_database(query):
    with pytest.raises(ValidationError):
        asyncio.run(IncidentStore().update_status(str(uuid.uuid4()), "Done"))
    assert query.calls == []


def test_database_errors_become_storage_errors(query):
    query.error = ConnectionRefusedError("connection refused")
    with pytest.raises(StorageError) as exc_info:
        asyncio.run(IncidentStore().list_all())
    assert "connection refused" in exc_info.value.detail
