from __future__ import annotations

import json
from typing import Any

import pytest

from orchat.llm.base import TransportResponse

ENV_KEYS = [
    "OPENROUTER_API_KEY",
    "OPENROUTER_API_URL",
    "HTTP_REFERER",
    "X_TITLE",
    "ORCHAT_MODEL",
    "ORCHAT_SYSTEM_PROMPT",
    "ORCHAT_BACKEND",
    "ORCHAT_TIMEOUT_S",
    "ORCHAT_LOG_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell and `.env` out of the tests."""
    for k in ENV_KEYS:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setattr("orchat.config.load_dotenv", lambda **kwargs: False)


def completion(content: str) -> str:
    return json.dumps({"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]})


class ScriptedTransport:
    """Plays back a fixed list of responses; exceptions in the list are raised instead."""

    def __init__(self, *steps: TransportResponse | Exception) -> None:
        self.steps = list(steps)
        self.calls: list[tuple[str, dict[str, str], dict[str, Any]]] = []

    def post_json(self, url: str, headers: dict[str, str], body: dict[str, Any]) -> TransportResponse:
        self.calls.append((url, headers, json.loads(json.dumps(body))))
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def close(self) -> None:
        pass


def ok(content: str) -> TransportResponse:
    return TransportResponse(200, completion(content))
