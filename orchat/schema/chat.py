from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from orchat.llm.base import ChatMessage, Role


class RequestMessage(BaseModel):
    role: Role
    content: str

    @classmethod
    def from_message(cls, m: ChatMessage) -> RequestMessage:
        return cls(role=m.role, content=m.content)


class ChatRequest(BaseModel):
    """Request envelope. Built fresh for every call, never stored."""

    model: str
    messages: list[RequestMessage]

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ResponseMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: str


class Choice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: ResponseMessage


class ChatResponse(BaseModel):
    """
    Consumed subset of a chat-completions response.

    Only choices[0].message.content is read, so the other choices and the rest
    of the envelope stay untyped and cannot make a usable reply fail.
    """

    model_config = ConfigDict(extra="ignore")

    choices: list[Any] = Field(default_factory=list)
    # Some gateways answer 200 with an error object instead of choices.
    error: Any = None

    @model_validator(mode="after")
    def require_choice(self) -> ChatResponse:
        if not self.choices:
            if self.error is not None:
                raise ValueError(f"no choices, endpoint error: {_describe_error(self.error)}")
            raise ValueError("no choices in response")
        return self

    def first_choice(self) -> Choice:
        return Choice.model_validate(self.choices[0])

    def reply_text(self) -> str:
        return self.first_choice().message.content


def _describe_error(error: Any) -> str:
    if isinstance(error, dict):
        code = error.get("code")
        message = error.get("message", "")
        return f"{code}: {message}" if code is not None else str(message)
    return str(error)
