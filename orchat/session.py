from __future__ import annotations

from pydantic import ValidationError

from orchat.config import Settings
from orchat.errors import EmptyReplyError, ParseError, ProtocolError
from orchat.llm.base import ChatMessage, ChatTransport
from orchat.schema import ChatRequest, ChatResponse, RequestMessage


class ConversationSession:
    """
    In-memory, append-only transcript of one conversation.

    Every `submit` re-sends the whole history. A failed turn keeps its user
    message: the request may have reached the server even if we could not
    read the answer, so the next request carries it too.
    """

    def __init__(
        self,
        *,
        transport: ChatTransport,
        model: str,
        api_url: str,
        headers: dict[str, str] | None = None,
        system_prompt: str | None = None,
    ) -> None:
        self.transport = transport
        self.model = model
        self.api_url = api_url
        self.headers = dict(headers or {})
        self._history: list[ChatMessage] = []
        self._turns = 0
        if system_prompt:
            self._history.append(ChatMessage("system", system_prompt))

    @classmethod
    def from_settings(cls, settings: Settings, transport: ChatTransport) -> ConversationSession:
        return cls(
            transport=transport,
            model=settings.model,
            api_url=settings.api_url,
            headers=settings.headers(),
            system_prompt=settings.system_prompt,
        )

    @property
    def history(self) -> tuple[ChatMessage, ...]:
        return tuple(self._history)

    @property
    def turns(self) -> int:
        """Number of turns that ended with an assistant reply."""
        return self._turns

    def build_request(self, user_text: str) -> ChatRequest:
        """Envelope `submit(user_text)` would send, without touching history."""
        pending = [*self._history, ChatMessage("user", user_text)]
        return ChatRequest(model=self.model, messages=[RequestMessage.from_message(m) for m in pending])

    def submit(self, user_text: str) -> str:
        if not user_text or not user_text.strip():
            raise ValueError("user_text must be non-empty")

        request = self.build_request(user_text)
        self._history.append(ChatMessage("user", user_text))

        resp = self.transport.post_json(self.api_url, self.headers, request.to_body())
        if not resp.ok:
            raise ProtocolError(resp.status_code, resp.text)

        try:
            reply = ChatResponse.model_validate_json(resp.text).reply_text()
        except ValidationError as e:
            raise ParseError(f"unexpected response shape: {_first_error(e)}", resp.text) from e

        if not reply.strip():
            raise EmptyReplyError("endpoint returned an empty reply", resp.text)

        self._history.append(ChatMessage("assistant", reply))
        self._turns += 1
        return reply


def _first_error(e: ValidationError) -> str:
    errs = e.errors()
    if not errs:
        return str(e)
    first = errs[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first.get('msg', '')}" if loc else str(first.get("msg", ""))
