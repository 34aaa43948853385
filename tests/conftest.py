from typing import Any

import pytest

from filedrop.main import app
from filedrop.services.notifications import NotificationSink
from filedrop.storage.session_repository import SessionRepository


class FakeRecordsClient:
    """
    In-memory stand-in for the records backend.
    Set `overrides[method]` to a canned response to simulate backend failures.
    """

    def __init__(self):
        self.records: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.calls: list[tuple[str, str, Any]] = []
        self.overrides: dict[str, dict[str, Any]] = {}

    def seed(self, **fields) -> dict[str, Any]:
        rec = {"Id": self.next_id, "CreatedOn": "2026-01-01T00:00:00Z", **fields}
        self.records[self.next_id] = rec
        self.next_id += 1
        return rec

    async def fetch_records(self, record_type, params):
        self.calls.append(("fetch", record_type, params))
        if "fetch" in self.overrides:
            return self.overrides["fetch"]
        return {"success": True, "data": list(self.records.values())}

    async def get_record_by_id(self, record_type, record_id, params):
        self.calls.append(("get", record_type, record_id))
        if "get" in self.overrides:
            return self.overrides["get"]
        return {"data": self.records.get(record_id)}

    async def create_record(self, record_type, params):
        self.calls.append(("create", record_type, params))
        if "create" in self.overrides:
            return self.overrides["create"]
        results = [{"success": True, "data": self.seed(**r)} for r in params["records"]]
        return {"success": True, "results": results}

    async def update_record(self, record_type, params):
        self.calls.append(("update", record_type, params))
        if "update" in self.overrides:
            return self.overrides["update"]
        results = []
        for r in params["records"]:
            rec = self.records.get(r["Id"])
            if rec is None:
                results.append({"success": False, "message": f"Record {r['Id']} not found"})
                continue
            rec.update(r)
            results.append({"success": True, "data": dict(rec)})
        return {"success": True, "results": results}

    async def delete_record(self, record_type, params):
        self.calls.append(("delete", record_type, params))
        if "delete" in self.overrides:
            return self.overrides["delete"]
        results = []
        for rid in params["RecordIds"]:
            if self.records.pop(rid, None) is None:
                results.append({"success": False, "message": f"Record {rid} not found"})
            else:
                results.append({"success": True})
        return {"success": True, "results": results}


@pytest.fixture()
def fake_client() -> FakeRecordsClient:
    return FakeRecordsClient()


@pytest.fixture()
def notifier() -> NotificationSink:
    return NotificationSink(maxlen=50)


@pytest.fixture()
def repo(fake_client, notifier) -> SessionRepository:
    return SessionRepository(fake_client, notifier, record_type="uploadsession_c")


@pytest.fixture()
def app_state(fake_client, notifier):
    """
    Installs the fake backend and a fresh notifier on app.state,
    restoring the previous values after the test.
    """
    old_client = getattr(app.state, "records_client", None)
    old_notifier = getattr(app.state, "notifier", None)
    app.state.records_client = fake_client
    app.state.notifier = notifier
    yield app.state
    app.state.records_client = old_client
    app.state.notifier = old_notifier
