"""
API tests for the editor service.

These tests exercise the HTTP endpoints using FastAPI's TestClient with a
fresh in-memory session per test.  The client is used as a context manager
so every request shares one event loop, which is where save timers and
runs live.
"""

from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from codepad.api.main import app, config, get_session
from codepad.executor import SimulatedExecutor
from codepad.languages import Language
from codepad.session import EditorSession
from codepad.storage import MemoryStorageBackend


# Use the same API key as in the config for tests
API_KEY_HEADER = {"x-api-key": config.api_key or ""}


@pytest.fixture
def memory_store() -> MemoryStorageBackend:
    return MemoryStorageBackend()


@pytest.fixture
def client(memory_store):
    """Provide a client bound to a fresh session backed by memory storage."""
    editor = EditorSession(
        memory_store,
        SimulatedExecutor(0, 0),
        save_delay=0.2,
        run_timeout=5,
    )
    app.dependency_overrides[get_session] = lambda: editor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health", headers=API_KEY_HEADER)
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_languages(client):
    response = client.get("/v1/languages", headers=API_KEY_HEADER)
    assert response.status_code == 200
    assert [item["label"] for item in response.json()] == ["JavaScript", "Python", "C++", "Java"]


def test_initial_snapshot(client):
    res = client.get("/v1/session", headers=API_KEY_HEADER)
    assert res.status_code == 200
    data = res.json()
    assert data["document"]["language"] == "javascript"
    assert data["document"]["text"] == Language.JAVASCRIPT.template
    assert data["theme"] == "dark"
    assert data["run"]["phase"] == "idle"
    assert data["layout"] == {"panel_height_px": 400, "is_fullscreen": False, "is_dragging": False}
    assert data["show_output"] is False
    assert {s["keys"] for s in data["shortcuts"]} == {"Ctrl+Enter", "F11"}


def test_edit_switch_and_restore(client, memory_store):
    res = client.put("/v1/session/document", json={"text": "console.log('x')"}, headers=API_KEY_HEADER)
    assert res.status_code == 200
    assert res.json()["pending_save"] is True

    res = client.put("/v1/session/language", json={"language": "python"}, headers=API_KEY_HEADER)
    assert res.status_code == 200
    assert res.json()["text"] == Language.PYTHON.template
    assert memory_store.values["code-javascript"] == "console.log('x')"

    res = client.put("/v1/session/language", json={"language": "javascript"}, headers=API_KEY_HEADER)
    assert res.json()["text"] == "console.log('x')"


def test_debounced_save_lands_after_quiet_period(client, memory_store):
    client.put("/v1/session/document", json={"text": "let a"}, headers=API_KEY_HEADER)
    client.put("/v1/session/document", json={"text": "let ab"}, headers=API_KEY_HEADER)
    time.sleep(0.8)
    assert memory_store.writes == [("code-javascript", "let ab")]


def test_unknown_language_is_400(client):
    res = client.put("/v1/session/language", json={"language": "rust"}, headers=API_KEY_HEADER)
    assert res.status_code == 400
    assert "rust" in res.json()["detail"]


def test_run_and_wait(client):
    res = client.post("/v1/session/run?wait=true", headers=API_KEY_HEADER)
    assert res.status_code == 200
    data = res.json()
    assert data["accepted"] is True
    assert data["run"]["phase"] == "settled"
    assert data["run"]["output"] == "Hello, World!\nFibonacci(10"
    assert data["run"]["error"] is None

    snapshot = client.get("/v1/session", headers=API_KEY_HEADER).json()
    assert snapshot["show_output"] is True

    res = client.delete("/v1/session/run", headers=API_KEY_HEADER)
    assert res.json()["phase"] == "idle"


def test_run_empty_document_is_rejected(client):
    client.put("/v1/session/document", json={"text": "  "}, headers=API_KEY_HEADER)
    res = client.post("/v1/session/run?wait=true", headers=API_KEY_HEADER)
    assert res.json()["accepted"] is False
    notices = client.get("/v1/session/notices", headers=API_KEY_HEADER).json()
    assert notices[-1] == {
        "level": "error",
        "message": "Please write some code first!",
        "duration_ms": 3000,
    }
    assert client.get("/v1/session/notices", headers=API_KEY_HEADER).json() == []


def test_indent(client):
    client.put("/v1/session/document", json={"text": "ab"}, headers=API_KEY_HEADER)
    res = client.post(
        "/v1/session/document/indent", json={"selection_start": 1}, headers=API_KEY_HEADER
    )
    assert res.json() == {"text": "a  b", "caret": 3}


def test_drag_resize_and_fullscreen(client):
    client.post("/v1/session/layout/drag/start", json={"y": 400}, headers=API_KEY_HEADER)
    res = client.post("/v1/session/layout/drag/move", json={"y": -600}, headers=API_KEY_HEADER)
    assert res.json()["panel_height_px"] == 200
    res = client.post("/v1/session/layout/drag/end", headers=API_KEY_HEADER)
    assert res.json()["is_dragging"] is False

    res = client.post("/v1/session/keys", json={"key": "F11"}, headers=API_KEY_HEADER)
    assert res.json() == {"handled": True}
    res = client.post("/v1/session/layout/fullscreen", json={}, headers=API_KEY_HEADER)
    assert res.json()["is_fullscreen"] is False
    res = client.post("/v1/session/layout/fullscreen", json={"enabled": True}, headers=API_KEY_HEADER)
    assert res.json()["is_fullscreen"] is True


def test_ctrl_enter_starts_run(client):
    res = client.post("/v1/session/keys", json={"key": "Enter", "ctrl": True}, headers=API_KEY_HEADER)
    assert res.json() == {"handled": True}
    res = client.post("/v1/session/keys", json={"key": "a"}, headers=API_KEY_HEADER)
    assert res.json() == {"handled": False}


def test_theme_toggle_and_copy(client, memory_store):
    res = client.post("/v1/session/theme/toggle", headers=API_KEY_HEADER)
    assert res.json() == {"theme": "light"}
    assert memory_store.values["editor-theme"] == "light"

    res = client.post("/v1/session/copy", headers=API_KEY_HEADER)
    assert res.json() == {"copied": True}


def test_reset(client):
    client.post("/v1/session/run?wait=true", headers=API_KEY_HEADER)
    client.post("/v1/session/layout/fullscreen", json={"enabled": True}, headers=API_KEY_HEADER)
    res = client.post("/v1/session/reset", headers=API_KEY_HEADER)
    data = res.json()
    assert data["run"]["phase"] == "idle"
    assert data["layout"]["is_fullscreen"] is False


def test_package_exports_app():
    import codepad.api

    assert codepad.api.app is app
    assert codepad.api.__all__ == ["app"]
