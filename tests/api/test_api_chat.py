import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch
import os

# Configure the app for tests BEFORE its startup event reads the environment
os.environ["SIMULATE_TYPING"] = "false"
os.environ["RETRY_DELAY_MS"] = "0"
os.environ["RANDOM_SEED"] = "11"
os.environ.pop("SUPPORTWISE_CATALOG_PATH", None)
os.environ.pop("SUPPORTWISE_VISITOR_FLAG_PATH", None)

from supportwise import messages
from supportwise.api import main
from supportwise.api.main import app


@pytest.fixture
def client():
    # Entering the context runs startup/shutdown, so every test gets fresh stores and sessions
    with TestClient(app) as test_client:
        yield test_client


def test_create_session(client):
    response = client.post("/api/sessions")
    assert response.status_code == 200
    data = response.json()
    assert data["session_id"]
    assert data["session_id"] in main.sessions

def test_chat_exact_question(client):
    response = client.post("/api/chat", json={"message": "What is EVA?"})
    assert response.status_code == 200
    data = response.json()
    assert data["session_id"] in main.sessions
    assert data["reply"].startswith("EVA (Eligibility Verification Agent) is our AI solution")
    assert data["matched_question"] == "What is EVA?"
    assert data["intent"] == "question"
    assert data["links"] == []

def test_chat_reply_links_are_extracted(client):
    response = client.post("/api/chat", json={"message": "How much does Thoughtful AI cost?"})
    data = response.json()
    assert data["links"] == [{"label": "sales@thoughtful.ai", "url": "mailto:sales@thoughtful.ai"}]
    assert '<a href="mailto:sales@thoughtful.ai" target="_blank" rel="noopener noreferrer">' in data["reply_html"]
    assert "<a " not in data["reply"]

def test_chat_continues_existing_session(client):
    session_id = client.post("/api/sessions").json()["session_id"]
    client.post("/api/chat", json={"message": "What is CAM?", "session_id": session_id})
    follow_up = client.post("/api/chat", json={"message": "tell me more", "session_id": session_id})
    assert follow_up.status_code == 200
    assert follow_up.json()["matched_question"] == "What is CAM?"

    messages_response = client.get(f"/api/sessions/{session_id}/messages")
    assert messages_response.status_code == 200
    user_messages = [m["content"] for m in messages_response.json() if m["type"] == "user"]
    assert user_messages == ["What is CAM?", "tell me more"]

def test_user_typed_anchor_is_not_rendered_as_link(client):
    typed = "<a href='https://evil.example/phish'>Reset your password</a>"
    session_id = client.post("/api/chat", json={"message": typed}).json()["session_id"]

    listed = client.get(f"/api/sessions/{session_id}/messages").json()
    user_message = next(m for m in listed if m["type"] == "user")
    assert user_message["content"] == typed
    assert user_message["content_html"] == "&lt;a href=&#x27;https://evil.example/phish&#x27;&gt;Reset your password&lt;/a&gt;"
    assert "<a " not in user_message["content_html"]

def test_chat_empty_message_is_rejected(client):
    assert client.post("/api/chat", json={"message": ""}).status_code == 422
    assert client.post("/api/chat", json={"message": "   "}).status_code == 422
    assert main.sessions == {}

def test_chat_unknown_session(client):
    response = client.post("/api/chat", json={"message": "What is EVA?", "session_id": "nope"})
    assert response.status_code == 404

def test_unknown_session_endpoints(client):
    assert client.get("/api/sessions/nope/messages").status_code == 404
    assert client.post("/api/sessions/nope/reset").status_code == 404
    feedback = {"session_id": "nope", "message_id": "m1", "helpful": True}
    assert client.post("/api/feedback", json=feedback).status_code == 404

def test_feedback(client):
    data = client.post("/api/chat", json={"message": "What is EVA?"}).json()
    feedback = {"session_id": data["session_id"], "message_id": data["message_id"], "helpful": False, "comment": "Too long"}
    response = client.post("/api/feedback", json=feedback)
    assert response.status_code == 200
    assert response.json() == {"status": "success"}

    stored = [m for m in client.get(f"/api/sessions/{data['session_id']}/messages").json() if m["id"] == data["message_id"]]
    assert stored[0]["feedback"] == {"helpful": False, "comment": "Too long"}

    missing = dict(feedback, message_id="missing")
    assert client.post("/api/feedback", json=missing).status_code == 404

def test_reset_session(client):
    session_id = client.post("/api/chat", json={"message": "What is EVA?"}).json()["session_id"]
    response = client.post(f"/api/sessions/{session_id}/reset")
    assert response.status_code == 200
    data = response.json()
    assert data["session_id"] == session_id
    assert data["messages"][0]["content"] in messages.FAREWELL_MESSAGES
    assert all(m["type"] == "bot" for m in data["messages"])

def test_suggestions(client):
    assert client.get("/api/analytics/suggestions").json() == []
    for _ in range(2):
        main.telemetry.track_query("Do you support Epic?", None, 0, 5.0)
    suggestions = client.get("/api/analytics/suggestions").json()
    assert suggestions[0]["query"] == "do you support epic?"
    assert suggestions[0]["count"] == 2

def test_fatal_pipeline_error_surfaces_as_500():
    with patch("supportwise.session.ChatSession.handle_send_message", new=AsyncMock(side_effect=RuntimeError("render failure"))):
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post("/api/chat", json={"message": "What is EVA?"})
    assert response.status_code == 500
