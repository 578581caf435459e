import pytest
from fastapi.testclient import TestClient

from backend import main
from backend.llm.base import StreamPart


@pytest.fixture
def client(monkeypatch, fake_model, fake_surface):
    monkeypatch.setattr(main.session_factory, "model", fake_model)
    monkeypatch.setattr(main.session_factory, "surface_factory", lambda: fake_surface)
    monkeypatch.setattr(main.session_factory, "greet", False)
    with TestClient(main.app) as test_client:
        yield test_client


def test_create_session_starts_idle(client):
    response = client.post("/sessions")

    assert response.status_code == 201
    payload = response.json()
    assert payload["chat_state"] == "IDLE"
    assert payload["messages"] == []
    assert payload["session_id"] in client.get("/sessions").json()


def test_greeting_on_create(client, fake_model, monkeypatch):
    monkeypatch.setattr(main.session_factory, "greet", True)
    fake_model.script([StreamPart.output("¡Hola! Soy tu asistente.")])

    payload = client.post("/sessions").json()

    assert [message["role"] for message in payload["messages"]] == ["assistant"]
    assert payload["messages"][0]["text"] == "¡Hola! Soy tu asistente."


def test_message_with_tool_call_and_confirmation(client, fake_model, fake_surface):
    session_id = client.post("/sessions").json()["session_id"]
    fake_model.script(
        [StreamPart.call("viewLocationGoogleMaps", {"query": "Calle Hidalgo 12, Mazamitla"})],
        [
            StreamPart.thought("Tengo todos los datos"),
            StreamPart.output(
                "<service_confirmation>\nName: Ana\nPhone: 3312345678\nDetails: \n"
                "Address: Calle Hidalgo 12, Mazamitla\n</service_confirmation>\nGracias, Ana."
            ),
        ],
    )

    response = client.post(f"/sessions/{session_id}/messages", json={"content": "Calle Hidalgo 12, Mazamitla"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["accepted"] is True
    turn = payload["turn"]
    assert turn["ok"] is True
    assert turn["speech_text"] == "Gracias, Ana."
    assert turn["tool_calls"] == [
        {"name": "view-location-google-maps", "arguments": {"query": "Calle Hidalgo 12, Mazamitla"}}
    ]
    assert turn["service"]["status"] == "Pendiente"
    assert turn["service"]["details"] == "No especificado"
    assert turn["service"]["price"] is None
    assert fake_surface.calls == [("view_location", ("Calle Hidalgo 12, Mazamitla",))]

    messages = payload["session"]["messages"]
    assert messages[1]["thought"] == " Tengo todos los datos"
    assert messages[1]["thinking_open"] is False
    assert messages[2]["text"].startswith("Calling function:")

    services = client.get("/services").json()
    assert services[0]["id"] == turn["service"]["id"]


def test_failed_turn_reports_error(client, fake_model):
    session_id = client.post("/sessions").json()["session_id"]
    fake_model.script([RuntimeError("model unavailable")])

    payload = client.post(f"/sessions/{session_id}/messages", json={"content": "Hola"}).json()

    assert payload["turn"]["ok"] is False
    assert payload["session"]["chat_state"] == "IDLE"
    assert payload["session"]["messages"][-1] == {
        **payload["session"]["messages"][-1],
        "role": "error",
        "text": "Error: model unavailable",
    }


def test_map_click_without_request_is_not_accepted(client):
    session_id = client.post("/sessions").json()["session_id"]

    payload = client.post(f"/sessions/{session_id}/map-click", json={"lat": 19.9, "lng": -103.0}).json()

    assert payload["accepted"] is False
    assert payload["turn"] is None


def test_unknown_session_and_delete(client):
    assert client.get("/sessions/missing").status_code == 404
    assert client.post("/sessions/missing/messages", json={"content": "Hola"}).status_code == 404

    session_id = client.post("/sessions").json()["session_id"]
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404


def test_empty_message_is_rejected(client):
    session_id = client.post("/sessions").json()["session_id"]

    assert client.post(f"/sessions/{session_id}/messages", json={"content": ""}).status_code == 422
