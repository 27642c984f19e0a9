"""Unit tests for the Telegram Bot API client."""

import json

import httpx
import pytest

from hermes.domain.exceptions import ChatTransportError
from hermes.infrastructure.telegram import TelegramClient


def _client(handler) -> TelegramClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TelegramClient(
        token="123:abc",
        base_url="https://telegram.test/",
        http_client=http_client,
        poll_timeout=5,
    )


@pytest.mark.asyncio
async def test_get_updates_sends_offset_and_timeout():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True, "result": [{"update_id": 7}]})

    client = _client(handler)
    updates = await client.get_updates(offset=7)

    assert updates == [{"update_id": 7}]
    assert str(seen[0].url) == "https://telegram.test/bot123:abc/getUpdates"
    payload = json.loads(seen[0].content)
    assert payload == {"timeout": 5, "allowed_updates": ["message"], "offset": 7}


@pytest.mark.asyncio
async def test_send_message_with_parse_mode():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 1}})

    client = _client(handler)
    result = await client.send_message(42, "*hi*", parse_mode="Markdown")

    assert result == {"message_id": 1}
    assert seen == [{"chat_id": 42, "text": "*hi*", "parse_mode": "Markdown"}]


@pytest.mark.asyncio
async def test_api_error_raises_chat_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"ok": False, "error_code": 400, "description": "Bad Request: can't parse entities"},
        )

    client = _client(handler)
    with pytest.raises(ChatTransportError) as exc_info:
        await client.send_message(42, "*broken")

    assert exc_info.value.status_code == 400
    assert "can't parse entities" in exc_info.value.message


@pytest.mark.asyncio
async def test_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    client = _client(handler)
    with pytest.raises(ChatTransportError) as exc_info:
        await client.get_updates()

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Bad Gateway"
