import pytest
from fastapi.testclient import TestClient

from api_server import create_app
from conftest import FailingClipboard
from notepad.controller import InteractionController
from notepad.di import build_container


@pytest.fixture
def container(repository, clipboard, scheduler):
    container = build_container({"storage": "memory", "clipboard": "memory"})
    container.register("repository", repository)
    container.register("clipboard", clipboard)
    container.register("scheduler", scheduler)
    return container


@pytest.fixture
def client(container):
    return TestClient(create_app(container))


def _create(client, text):
    client.put("/draft", json={"content": text})
    return client.post("/submit")


def test_list_notes_empty(client):
    response = client.get("/notes")

    assert response.status_code == 200
    assert response.json() == []


def test_submit_creates_note(client):
    response = _create(client, "Buy milk")

    assert response.status_code == 200
    data = response.json()
    assert data["content"] == "Buy milk"
    assert data["createdAt"] == "2024-03-01T09:30:00Z"

    notes = client.get("/notes").json()
    assert [n["id"] for n in notes] == [data["id"]]
    assert client.get("/state").json()["just_saved"] is True


def test_submit_blank_draft_returns_422(client):
    response = _create(client, "   ")

    assert response.status_code == 422
    assert response.json()["detail"] == "Please enter some text before saving"
    assert client.get("/notes").json() == []


def test_unencodable_draft_returns_422(client):
    response = client.put("/draft", json={"content": "x \ud800"})

    assert response.status_code == 422
    assert response.json()["detail"] == "Note text contains characters that cannot be saved"
    assert client.get("/state").json()["draft_content"] == ""
    assert client.post("/submit").status_code == 422

    notes = client.get("/notes")
    assert notes.status_code == 200
    assert notes.json() == []
    assert _create(client, "still works").status_code == 200


def test_edit_and_update_flow(client):
    note = _create(client, "Buy milk").json()

    state = client.post(f"/notes/{note['id']}/edit").json()
    assert state["editing_id"] == note["id"]
    assert state["draft_content"] == "Buy milk"

    client.put("/draft", json={"content": "Buy milk and eggs"})
    updated = client.post("/submit").json()

    assert updated["id"] == note["id"]
    assert client.get("/notes").json()[0]["content"] == "Buy milk and eggs"
    state = client.get("/state").json()
    assert state["editing_id"] is None
    assert state["just_updated"] is True


def test_edit_unknown_note_returns_404(client):
    response = client.post("/notes/ghost/edit")

    assert response.status_code == 404


def test_cancel_edit(client):
    note = _create(client, "A").json()
    client.post(f"/notes/{note['id']}/edit")

    state = client.post("/edit/cancel").json()

    assert state["editing_id"] is None
    assert state["draft_content"] == ""


def test_delete_requires_confirmation(client):
    a = _create(client, "A").json()
    b = _create(client, "B").json()

    state = client.post(f"/notes/{a['id']}/delete").json()
    assert state["pending_delete_id"] == a["id"]
    assert len(client.get("/notes").json()) == 2

    state = client.post("/delete/confirm").json()
    assert state["pending_delete_id"] is None
    assert [n["id"] for n in client.get("/notes").json()] == [b["id"]]


def test_cancel_delete_keeps_note(client):
    a = _create(client, "A").json()
    client.post(f"/notes/{a['id']}/delete")

    state = client.post("/delete/cancel").json()

    assert state["pending_delete_id"] is None
    assert len(client.get("/notes").json()) == 1


def test_copy_note(client, clipboard):
    note = _create(client, "copy me").json()

    response = client.post(f"/notes/{note['id']}/copy")

    assert response.json() == {"copied": True}
    assert clipboard.text == "copy me"
    assert client.get("/state").json()["last_copied_id"] == note["id"]


def test_copy_failure_reports_false(container, repository, scheduler):
    container.register(
        "controller",
        InteractionController(repository, FailingClipboard(), scheduler=scheduler),
    )
    client = TestClient(create_app(container))
    note = _create(client, "copy me").json()

    response = client.post(f"/notes/{note['id']}/copy")

    assert response.status_code == 200
    assert response.json() == {"copied": False}
    assert client.get("/state").json()["last_copied_id"] is None
