"""
Chat API Integration Tests
"""

import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from agentscope_provider.api.chat import get_provider
from agentscope_provider.main import app
from agentscope_provider.providers.agentscope import AgentScopeProviderSettings, create_agentscope
from tests.helpers import sse


def _override_provider(handler):
    provider = create_agentscope(
        AgentScopeProviderSettings(
            user_id="demo-user",
            client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
    )
    app.dependency_overrides[get_provider] = lambda: provider


def _chunks(text: str) -> list:
    chunks = []
    for block in text.split("\n\n"):
        if block.startswith("data: "):
            data = block[len("data: "):]
            chunks.append(data if data == "[DONE]" else json.loads(data))
    return chunks


@pytest.fixture(autouse=True)
def reset_overrides():
    yield
    app.dependency_overrides = {}


@pytest.mark.asyncio
async def test_chat_streams_ui_message_chunks():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            headers={"content-type": "text/event-stream"},
            content=sse(
                'event: text\ndata: {"object":"content","type":"text","text":"hello","msg_id":"msg_1"}',
                'event: response\ndata: {"id":"resp_1","object":"response","status":"completed"}',
            ),
        )

    _override_provider(handler)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.post(
            "/api/chat",
            json={
                "messages": [{"id": "1", "role": "user", "parts": [{"type": "text", "text": "hi"}]}],
                "userId": "u42",
            },
        )

    assert resp.status_code == 200
    assert resp.headers["x-vercel-ai-ui-message-stream"] == "v1"
    assert resp.headers["content-type"].startswith("text/event-stream")

    chunks = _chunks(resp.text)
    assert chunks[-1] == "[DONE]"
    assert [c["type"] for c in chunks[:-1]] == [
        "start",
        "start-step",
        "text-start",
        "text-delta",
        "text-end",
        "finish-step",
        "finish",
    ]
    assert chunks[3]["delta"] == "hello"

    body = json.loads(captured[0].content)
    assert body["user_id"] == "u42"
    assert body["session_id"] == "test01"
    assert body["stream"] is True
    assert body["input"] == [
        {"object": "message", "type": "message", "role": "user", "content": [{"type": "text", "text": "hi"}]}
    ]


@pytest.mark.asyncio
async def test_chat_upstream_error_returns_json():
    _override_provider(lambda request: httpx.Response(503, json={"error": {"message": "busy"}}))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.post(
            "/api/chat",
            json={"messages": [{"role": "user", "parts": [{"type": "text", "text": "hi"}]}]},
        )

    assert resp.status_code == 503
    error = resp.json()["error"]
    assert error["message"] == "busy"
    assert error["retryable"] is True


@pytest.mark.asyncio
async def test_chat_rejects_unknown_role():
    _override_provider(lambda request: httpx.Response(200))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.post(
            "/api/chat",
            json={"messages": [{"role": "tool", "parts": []}]},
        )

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "unsupported_role"


@pytest.mark.asyncio
async def test_health_check():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
