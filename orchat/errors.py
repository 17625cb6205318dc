from __future__ import annotations


def _truncate(text: str, limit: int = 2000) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [{len(text) - limit} more chars]"


class ChatError(Exception):
    """Base class for everything that can go wrong talking to the endpoint."""

    kind = "chat"


class ConfigError(ChatError):
    """Missing or invalid configuration. Fatal at startup."""

    kind = "config"


class TransportError(ChatError):
    """The request never produced an HTTP response (DNS, TLS, connect, timeout...)."""

    kind = "transport"


class ProtocolError(ChatError):
    """The endpoint answered with a non-2xx status."""

    kind = "protocol"

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = _truncate(body)
        msg = f"request failed with status {status_code}"
        if self.body:
            msg += f": {self.body}"
        super().__init__(msg)


class ParseError(ChatError):
    """The response body is not the expected chat-completions shape."""

    kind = "parse"

    def __init__(self, message: str, body: str = "") -> None:
        self.body = _truncate(body)
        super().__init__(message)


class EmptyReplyError(ParseError):
    kind = "empty_reply"
