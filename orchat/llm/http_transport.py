from __future__ import annotations

from typing import Any

import httpx

from orchat.errors import TransportError

from .base import TransportResponse


class HttpxTransport:
    """
    Blocking JSON-over-HTTP transport backed by a single httpx.Client.
    Status codes are reported, not raised: deciding what a non-2xx means is the caller's job.
    """

    def __init__(self, *, timeout_s: float = 120.0, client: httpx.Client | None = None) -> None:
        self.timeout_s = timeout_s
        self._client = client or httpx.Client(timeout=timeout_s)

    def post_json(self, url: str, headers: dict[str, str], body: dict[str, Any]) -> TransportResponse:
        try:
            r = self._client.post(url, json=body, headers=headers)
        except httpx.RequestError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        return TransportResponse(status_code=r.status_code, text=r.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
