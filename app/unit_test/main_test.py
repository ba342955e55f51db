"""
HTTP tests for POST /api/chat.
The chat model is swapped for an AsyncMock through FastAPI dependency overrides,
so no request ever leaves the process.
"""

import logging
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from app import di
from app.config import Settings
from app.main import create_app

INVALID_MESSAGE = "Invalid message format. Message must be a non-empty string."


# ── Helpers ──────────────────────────────────────────────────

def _fake_llm(reply="Hi there!", error=None):
    llm = Mock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=reply), side_effect=error)
    return llm


def _client(settings: Settings, llm=None) -> TestClient:
    app = create_app(settings)
    if llm is not None:
        app.dependency_overrides[di.chat_model] = lambda: llm
    return TestClient(app, raise_server_exceptions=False)


# ── Fixtures ─────────────────────────────────────────────────

@pytest.fixture
def settings():
    return Settings(api_key="test-key")


@pytest.fixture
def llm():
    return _fake_llm()


@pytest.fixture
def client(settings, llm):
    return _client(settings, llm)


# ── Success path ─────────────────────────────────────────────

class TestChatSuccess:
    def test_hello_returns_model_reply(self, client, llm):
        resp = client.post("/api/chat", json={"message": "Hello"})

        assert resp.status_code == 200
        assert resp.json() == {"response": "Hi there!"}
        llm.ainvoke.assert_awaited_once()
        sent = llm.ainvoke.await_args.args[0]
        assert sent[-1].content == "Hello"

    def test_whitespace_message_is_accepted(self, client):
        resp = client.post("/api/chat", json={"message": "   "})
        assert resp.status_code == 200

    def test_extra_fields_are_ignored(self, client):
        resp = client.post("/api/chat", json={"message": "Hi", "history": []})
        assert resp.status_code == 200
        assert resp.json() == {"response": "Hi there!"}

    def test_same_request_twice_invokes_model_twice(self, client, llm):
        first = client.post("/api/chat", json={"message": "Hello"})
        second = client.post("/api/chat", json={"message": "Hello"})

        assert first.status_code == second.status_code == 200
        assert llm.ainvoke.await_count == 2

    def test_system_prompt_is_sent_first(self, llm):
        client = _client(Settings(api_key="k", system_prompt="Be brief."), llm)

        client.post("/api/chat", json={"message": "Hello"})

        sent = llm.ainvoke.await_args.args[0]
        assert [m.type for m in sent] == ["system", "human"]


# ── Validation: 400 before any model call ────────────────────

class TestChatValidation:
    @pytest.mark.parametrize(
        "body",
        [{}, {"message": None}, {"message": 42}, {"message": ""}, {"message": True}, {"message": ["Hi"]}],
    )
    def test_bad_message_returns_400(self, client, llm, body):
        resp = client.post("/api/chat", json=body)

        assert resp.status_code == 400
        assert resp.json() == {"error": INVALID_MESSAGE}
        llm.ainvoke.assert_not_called()

    def test_non_object_body_returns_400(self, client):
        resp = client.post("/api/chat", json=["Hello"])
        assert resp.status_code == 400
        assert resp.json() == {"error": INVALID_MESSAGE}

    def test_malformed_json_returns_400(self, client, llm):
        resp = client.post(
            "/api/chat", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": INVALID_MESSAGE}
        llm.ainvoke.assert_not_called()

    def test_validation_wins_over_missing_key(self):
        client = _client(Settings(api_key=None))
        resp = client.post("/api/chat", json={})
        assert resp.status_code == 400


# ── Configuration ────────────────────────────────────────────

class TestChatConfiguration:
    def test_missing_key_returns_500_without_calling_model(self, monkeypatch):
        fake_cls = Mock()
        monkeypatch.setattr(di, "ChatGoogleGenerativeAI", fake_cls)
        di.build_chat_model.cache_clear()
        client = _client(Settings(api_key=None))

        resp = client.post("/api/chat", json={"message": "Hello"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Gemini API key is not configured."}
        fake_cls.assert_not_called()

    def test_key_is_passed_to_model(self, monkeypatch):
        fake_cls = Mock(return_value=_fake_llm())
        monkeypatch.setattr(di, "ChatGoogleGenerativeAI", fake_cls)
        di.build_chat_model.cache_clear()
        client = _client(Settings(api_key="secret", model_name="gemini-test"))

        resp = client.post("/api/chat", json={"message": "Hello"})

        assert resp.status_code == 200
        fake_cls.assert_called_once_with(model="gemini-test", google_api_key="secret")
        di.build_chat_model.cache_clear()


# ── Upstream failures ────────────────────────────────────────

class TestChatUpstreamErrors:
    def test_model_exception_message_is_returned(self, settings):
        client = _client(settings, _fake_llm(error=RuntimeError("quota exceeded")))

        resp = client.post("/api/chat", json={"message": "Hello"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "quota exceeded"}

    def test_model_exception_without_message_uses_fallback(self, settings):
        client = _client(settings, _fake_llm(error=RuntimeError()))

        resp = client.post("/api/chat", json={"message": "Hello"})

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "An unexpected error occurred while processing your request."
        }

    @pytest.mark.parametrize("reply", ["", []])
    def test_empty_reply_returns_500(self, settings, reply):
        client = _client(settings, _fake_llm(reply=reply))

        resp = client.post("/api/chat", json={"message": "Hello"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "No response generated from AI."}

    def test_unhandled_error_is_wrapped(self, settings):
        app = create_app(settings)
        broken = Mock()
        broken.generate = AsyncMock(side_effect=KeyError("boom"))
        app.dependency_overrides[di.completion_agent] = lambda: broken
        client = TestClient(app, raise_server_exceptions=False)

        resp = client.post(
            "/api/chat", json={"message": "Hello"}, headers={"Origin": "http://example.com"}
        )

        assert resp.status_code == 500
        assert resp.json() == {"error": "An unexpected error occurred on the server."}
        assert resp.headers["access-control-allow-origin"] == "*"


# ── Routing ──────────────────────────────────────────────────

class TestRouting:
    def test_unknown_route_is_json_404(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    def test_get_on_chat_is_405(self, client):
        resp = client.get("/api/chat")
        assert resp.status_code == 405
        assert "error" in resp.json()

    def test_cors_headers_present(self, client):
        resp = client.post(
            "/api/chat", json={"message": "Hello"}, headers={"Origin": "http://example.com"}
        )
        assert resp.headers["access-control-allow-origin"] == "*"


# ── Startup logging ──────────────────────────────────────────

class TestStartupLogging:
    def test_key_status_is_logged_without_the_key(self, caplog):
        app = create_app(Settings(api_key="super-secret-key", port=8123))
        caplog.set_level(logging.INFO, logger="gateway")

        with TestClient(app):
            pass

        assert "Configured port: 8123" in caplog.text
        assert "API key configured: yes" in caplog.text
        assert "API key length: 16" in caplog.text
        assert "super-secret-key" not in caplog.text

    def test_missing_key_is_logged(self, caplog):
        app = create_app(Settings(api_key=None))
        caplog.set_level(logging.INFO, logger="gateway")

        with TestClient(app):
            pass

        assert "API key configured: no" in caplog.text
        assert "API key length: 0" in caplog.text
