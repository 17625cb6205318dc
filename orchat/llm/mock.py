from __future__ import annotations

import json
from typing import Any

from .base import TransportResponse


class EchoTransport:
    """Deterministic offline transport: useful to try the loop without an API key."""

    def __init__(self, prefix: str = "echo:") -> None:
        self.prefix = prefix
        self.requests: list[dict[str, Any]] = []

    def post_json(self, url: str, headers: dict[str, str], body: dict[str, Any]) -> TransportResponse:
        self.requests.append(body)
        messages = body.get("messages") or []
        last_user = next((m.get("content", "") for m in reversed(messages) if m.get("role") == "user"), "")
        payload = {
            "id": f"echo-{len(self.requests)}",
            "object": "chat.completion",
            "model": body.get("model", ""),
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": f"{self.prefix}{last_user}"},
                    "finish_reason": "stop",
                }
            ],
        }
        return TransportResponse(status_code=200, text=json.dumps(payload, ensure_ascii=False))

    def close(self) -> None:
        pass
