"""Telegram Bot API client.

Talks to https://api.telegram.org/bot<token>/<method> using httpx. Only the
two methods the bot needs are wrapped: ``getUpdates`` for long polling and
``sendMessage`` for replies.
"""

import logging
from typing import Any

import httpx

from hermes.domain.exceptions import ChatTransportError

logger = logging.getLogger(__name__)


class TelegramClient:
    """Infrastructure adapter — connects to the Telegram Bot API.

    A single pooled ``httpx.AsyncClient`` is reused for every call; pass one
    in to control transport and timeouts (tests inject a MockTransport).
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.telegram.org",
        http_client: httpx.AsyncClient | None = None,
        poll_timeout: int = 30,
    ):
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._poll_timeout = poll_timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(poll_timeout + 10.0)
        )

    @property
    def provider_name(self) -> str:
        return "telegram"

    def _method_url(self, method: str) -> str:
        return f"{self._base_url}/bot{self._token}/{method}"

    async def _call(self, method: str, payload: dict[str, Any]) -> Any:
        """POST a Bot API method and return its ``result`` field."""
        response = await self._http_client.post(self._method_url(method), json=payload)

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code != 200 or not data.get("ok", False):
            raise ChatTransportError(
                provider=self.provider_name,
                status_code=data.get("error_code", response.status_code),
                message=data.get("description", response.text),
            )
        return data.get("result")

    async def get_updates(self, offset: int | None = None) -> list[dict[str, Any]]:
        """Long-poll for new message updates, blocking up to ``poll_timeout`` seconds."""
        payload: dict[str, Any] = {
            "timeout": self._poll_timeout,
            "allowed_updates": ["message"],
        }
        if offset is not None:
            payload["offset"] = offset
        return await self._call("getUpdates", payload) or []

    async def send_message(
        self,
        chat_id: int | str,
        text: str,
        *,
        parse_mode: str | None = None,
    ) -> dict[str, Any]:
        """Send a text message to a chat."""
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        return await self._call("sendMessage", payload)

    async def close(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()
