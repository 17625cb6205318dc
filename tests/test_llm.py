from __future__ import annotations

import json

import httpx
import pytest

from orchat.errors import TransportError
from orchat.llm.base import ChatMessage
from orchat.llm.http_transport import HttpxTransport
from orchat.llm.mock import EchoTransport

URL = "https://example.test/v1/chat/completions"


def test_chat_message_rejects_unknown_role():
    with pytest.raises(ValueError, match="unknown role"):
        ChatMessage("tool", "x")


def test_chat_message_is_immutable():
    m = ChatMessage("user", "x")
    with pytest.raises(AttributeError):
        m.content = "y"


def test_httpx_transport_posts_json_with_headers():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["title"] = request.headers.get("x-title")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "pong"}}]})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with HttpxTransport(client=client) as t:
        resp = t.post_json(URL, {"Authorization": "Bearer k", "X-Title": "t"}, {"model": "m", "messages": []})

    assert resp.ok
    assert json.loads(resp.text)["choices"][0]["message"]["content"] == "pong"
    assert seen == {
        "method": "POST",
        "url": URL,
        "auth": "Bearer k",
        "title": "t",
        "body": {"model": "m", "messages": []},
    }


def test_httpx_transport_reports_status_without_raising():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(503, text="busy")))
    with HttpxTransport(client=client) as t:
        resp = t.post_json(URL, {}, {})

    assert resp.status_code == 503
    assert not resp.ok
    assert resp.text == "busy"


def test_httpx_transport_wraps_network_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with HttpxTransport(client=client) as t:
        with pytest.raises(TransportError, match="ConnectError") as exc:
            t.post_json(URL, {}, {})

    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_echo_transport_echoes_last_user_message():
    t = EchoTransport()
    body = {
        "model": "m",
        "messages": [
            {"role": "user", "content": "a"},
            {"role": "assistant", "content": "b"},
            {"role": "user", "content": "c"},
        ],
    }

    resp = t.post_json(URL, {}, body)

    assert resp.status_code == 200
    assert json.loads(resp.text)["choices"][0]["message"]["content"] == "echo:c"
    assert t.requests == [body]
