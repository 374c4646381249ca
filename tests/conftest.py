"""
Shared pytest configuration.

Puts the project root on sys.path so `import gptchat` works without an
install, and provides helpers for sessions backed by a mocked transport.
"""

import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest


ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from gptchat import config as config_module  # noqa: E402
from gptchat.session import ConversationSession  # noqa: E402
from gptchat.transport import HTTPTransport  # noqa: E402


def completion_body(*contents: str, **extra) -> dict:
    """A chat completion response with one choice per content."""
    body = {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1677652288,
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
            for i, content in enumerate(contents)
        ],
        "usage": {"prompt_tokens": 9, "completion_tokens": 12, "total_tokens": 21},
    }
    body.update(extra)
    return body


def mock_transport(handler: Callable[[httpx.Request], httpx.Response]) -> HTTPTransport:
    return HTTPTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


class RecordingHandler:
    """MockTransport handler that records request bodies."""

    def __init__(self, response: httpx.Response | None = None, body: dict | None = None):
        self.response = response
        self.body = body if body is not None else completion_body("Hello!")
        self.requests: list[httpx.Request] = []

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(req.content) for req in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.response is not None:
            return self.response
        return httpx.Response(200, json=self.body)


@pytest.fixture
def make_session():
    sessions = []

    def _make(handler, api_key="sk-test", model="gpt-3.5-turbo") -> ConversationSession:
        session = ConversationSession(api_key, model=model, transport=mock_transport(handler))
        sessions.append(session)
        return session

    yield _make
    for session in sessions:
        session.transport.client.close()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config at an empty temp dir and clear GPTCHAT_* env vars."""
    for name in list(config_module.ENV_MAPPING.values()):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GPTCHAT_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setattr(config_module, "_config", None)
    yield tmp_path / "config"
