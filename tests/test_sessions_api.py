import json

from fastapi.testclient import TestClient

from filedrop.main import app

client = TestClient(app)


def test_health(app_state):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "records_backend": "configured"}


def test_create_then_get_round_trips_files(app_state):
    files = [{"name": "a.txt", "size": 3, "progress": 100}, {"name": "b", "tag": "extra"}]
    body = {"Name": "Batch 1", "Tags": "docs", "files": files, "totalSize": 3, "completedCount": 1}

    r = client.post("/sessions", json=body)
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["Id"] == 1
    assert created["Name"] == "Batch 1"
    assert created["totalSize"] == 3
    assert created["completedCount"] == 1
    assert created["startedAt"]

    r = client.get("/sessions/1")
    assert r.status_code == 200, r.text
    got = r.json()
    assert got["Tags"] == "docs"
    assert got["files"][0]["name"] == "a.txt"
    assert got["files"][1]["tag"] == "extra"
    assert json.loads(app_state.records_client.records[1]["file_data_c"]) == files


def test_list_sessions(app_state):
    app_state.records_client.seed(Name="S1")
    app_state.records_client.seed(Name="S2")

    r = client.get("/sessions")
    assert r.status_code == 200
    assert [s["Name"] for s in r.json()] == ["S1", "S2"]


def test_list_sessions_backend_failure_is_empty(app_state):
    app_state.records_client.overrides["fetch"] = {"success": False, "message": "boom"}

    r = client.get("/sessions")
    assert r.status_code == 200
    assert r.json() == []

    notes = client.get("/notifications").json()["notifications"]
    assert notes[-1]["message"] == "boom"
    assert notes[-1]["level"] == "error"


def test_get_missing_session_404(app_state):
    r = client.get("/sessions/77")
    assert r.status_code == 404
    assert "77" in r.json()["detail"]


def test_patch_only_sends_given_fields(app_state):
    app_state.records_client.seed(Name="Old", Tags="t")

    r = client.patch("/sessions/1", json={"Name": "New"})
    assert r.status_code == 200, r.text
    assert r.json()["Name"] == "New"
    assert r.json()["Tags"] == "t"

    _, _, params = app_state.records_client.calls[-1]
    assert params == {"records": [{"Id": 1, "Name": "New"}]}


def test_patch_failure_is_502(app_state):
    r = client.patch("/sessions/5", json={"Tags": "x"})
    assert r.status_code == 502
    assert r.json()["detail"]["failures"] == ["Record 5 not found"]


def test_delete_session(app_state):
    app_state.records_client.seed()

    r = client.delete("/sessions/1")
    assert r.status_code == 200
    assert r.json() == {"id": 1, "deleted": True}

    r = client.delete("/sessions/1")
    assert r.status_code == 200
    assert r.json() == {"id": 1, "deleted": False}


def test_backend_unavailable(app_state):
    app_state.records_client = None

    assert client.get("/sessions").json() == []
    assert client.get("/sessions/1").status_code == 503
    assert client.post("/sessions", json={}).status_code == 503
    assert client.delete("/sessions/1").status_code == 503


def test_clear_notifications(app_state):
    app_state.notifier.error("x")

    r = client.delete("/notifications")
    assert r.status_code == 204
    assert client.get("/notifications").json() == {"notifications": []}


def test_files_round_trip_unchanged_over_http(app_state):
    files = [
        {"name": "a.txt", "size": "12", "progress": 37.4, "uploaded_at": "2026-03-01"},
        {"name": 5, "parts": [[1, 2], None]},
        {},
    ]

    r = client.post("/sessions", json={"Name": "Loose", "files": files})
    assert r.status_code == 201, r.text
    assert r.json()["files"] == files

    r = client.get("/sessions/1")
    assert r.status_code == 200, r.text
    assert r.json()["files"] == files
    assert json.loads(app_state.records_client.records[1]["file_data_c"]) == files
