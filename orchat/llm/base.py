from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol, get_args

Role = Literal["system", "user", "assistant"]
ROLES: tuple[str, ...] = get_args(Role)


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"unknown role {self.role!r}, expected one of: {'|'.join(ROLES)}")


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ChatTransport(Protocol):
    def post_json(self, url: str, headers: dict[str, str], body: dict[str, Any]) -> TransportResponse:
        """POST `body` as JSON. Raise TransportError if no response was received."""
        raise NotImplementedError
