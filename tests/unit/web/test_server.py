"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from amarnote.app import App
from amarnote.config import Config
from amarnote.core.storage import MemoryStore
from amarnote.web.server import create_fastapi_app


@pytest.fixture
def client():
    config = Config(_env_file=None)
    with TestClient(create_fastapi_app(App(config, MemoryStore()), config)) as client:
        yield client


def create_note(client):
    response = client.post("/api/v1/notes")
    assert response.status_code == 201
    return response.json()


class TestNotesApi:
    """Tests for note endpoints."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_create_and_get(self, client):
        """Test that a created note can be fetched with camelCase fields."""
        note = create_note(client)

        fetched = client.get(f"/api/v1/notes/{note['id']}").json()

        assert fetched["id"] == note["id"]
        assert fetched["version"] == "v1"
        assert "createdAt" in fetched

    def test_update(self, client):
        note = create_note(client)

        response = client.patch(f"/api/v1/notes/{note['id']}", json={"title": "বাজার", "isLocked": True})

        assert response.status_code == 200
        assert (response.json()["title"], response.json()["isLocked"]) == ("বাজার", True)

    def test_not_found_body(self, client):
        """Test that unknown notes give a 404 with a message and an error type."""
        response = client.get("/api/v1/notes/missing")

        assert response.status_code == 404
        assert response.json()["type"] == "not_found"
        assert "missing" in response.json()["message"]

    def test_pin_archived_is_bad_request(self, client):
        note = create_note(client)
        client.post(f"/api/v1/notes/{note['id']}/archive")

        response = client.post(f"/api/v1/notes/{note['id']}/pin")

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_lists_and_search(self, client):
        note = create_note(client)
        client.patch(f"/api/v1/notes/{note['id']}", json={"title": "Groceries"})

        lists = client.get("/api/v1/notes").json()
        found = client.get("/api/v1/notes/search", params={"q": "grocer"}).json()

        assert [n["id"] for n in lists["active"]] == [note["id"]]
        assert [n["id"] for n in found] == [note["id"]]

    def test_delete(self, client):
        note = create_note(client)

        assert client.delete(f"/api/v1/notes/{note['id']}").status_code == 204
        assert client.get(f"/api/v1/notes/{note['id']}").status_code == 404


class TestHistoryApi:
    """Tests for version history endpoints."""

    def test_version_out_of_range(self, client):
        """Test that restoring a version that does not exist gives 422."""
        note = create_note(client)

        response = client.post(f"/api/v1/notes/{note['id']}/history/3/restore")

        assert response.status_code == 422
        assert response.json()["type"] == "out_of_range"

    def test_manual_version_and_restore(self, client):
        note = create_note(client)
        client.post(f"/api/v1/notes/{note['id']}/history", json={"message": "before edit"})

        restored = client.post(f"/api/v1/notes/{note['id']}/history/0/restore").json()

        assert restored["version"] == "v3"
        assert [entry["message"] for entry in restored["history"]] == ["before edit", "restored to v1"]


class TestExportApi:
    """Tests for export and import endpoints."""

    def test_export_markdown(self, client):
        note = create_note(client)
        client.patch(
            f"/api/v1/notes/{note['id']}",
            json={"title": "plan", "content": {"blocks": [{"type": "header", "data": {"text": "Plan", "level": 2}}]}},
        )

        response = client.get("/api/v1/export", params={"format": "md", "ids": [note["id"]]})

        assert response.status_code == 200
        assert response.text == "## Plan"
        assert response.headers["content-disposition"] == "attachment; filename*=UTF-8''plan.md"

    def test_import_file(self, client):
        response = client.post("/api/v1/import", files={"file": ("todo.md", "# Todo\n\n- [ ] call".encode(), "text/markdown")})

        assert response.status_code == 200
        (imported,) = response.json()["imported"]
        assert imported["title"] == "Todo"

    def test_import_unsupported(self, client):
        response = client.post("/api/v1/import", files={"file": ("notes.docx", b"x", "application/octet-stream")})

        assert response.status_code == 400


class TestTasksAndPrivacyApi:
    """Tests for task and privacy endpoints."""

    def test_task_overview(self, client):
        note = create_note(client)
        content = {"blocks": [{"type": "checklist", "data": {"items": [{"text": "a", "checked": True}, {"text": "b"}]}}]}
        client.patch(f"/api/v1/notes/{note['id']}", json={"content": content})

        overview = client.get("/api/v1/tasks").json()

        assert overview["completion_percentage"] == 50
        assert [t["title"] for t in overview["by_status"]["pending"]] == ["b"]

    def test_incognito_note(self, client):
        """Test that a duration creates an obfuscated note that can be revealed."""
        content = {"blocks": [{"type": "paragraph", "data": {"text": "গোপন"}}]}

        response = client.post("/api/v1/anonymous-notes", json={"content": content, "duration": "1hour"})

        assert response.status_code == 201
        note = response.json()
        assert note["id"].startswith("anon_")
        assert note["protection"] == "obfuscated"
        assert note["autoDeleteAt"] == note["createdAt"] + 60 * 60 * 1000
        revealed = client.get(f"/api/v1/notes/{note['id']}/reveal").json()
        assert revealed["content"]["blocks"][0]["data"]["text"] == "গোপন"
