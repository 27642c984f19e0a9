"""Telegram bot — asyncio long-poll loop feeding the Command Dispatcher."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from hermes.application.services import CommandDispatcher
from hermes.domain.entities import RecordVariant
from hermes.domain.exceptions import ChatTransportError
from hermes.infrastructure.database.session import Database
from hermes.infrastructure.telegram import TelegramClient
from hermes.presentation.telegram.messages import PARSE_MODE, error_message, render_outcome

logger = logging.getLogger(__name__)

# Back-off after a failed getUpdates call, in seconds
RETRY_DELAY = 5

DispatcherFactory = Callable[[AsyncSession, RecordVariant], CommandDispatcher]


class TelegramBot:
    """Runs as an asyncio.Task inside FastAPI's lifespan.

    Each inbound message is dispatched in its own database session so that a
    command commits (or rolls back) before the reply is sent.
    """

    def __init__(
        self,
        client: TelegramClient,
        database: Database,
        variant: RecordVariant,
        dispatcher_factory: DispatcherFactory,
    ) -> None:
        self._client = client
        self._database = database
        self._variant = variant
        self._dispatcher_factory = dispatcher_factory
        self._running = False
        self._task: asyncio.Task | None = None
        self._offset: int | None = None

    @property
    def client(self) -> TelegramClient:
        return self._client

    async def start(self) -> None:
        """Start the long-poll loop."""
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("Telegram bot started (variant=%s)", self._variant.key)

    async def stop(self) -> None:
        """Gracefully stop the long-poll loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Telegram bot stopped")

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                break
            except (ChatTransportError, httpx.HTTPError) as e:
                logger.error("Telegram polling error: %s", e)
                await asyncio.sleep(RETRY_DELAY)
            except Exception:
                logger.exception("Telegram polling loop error")
                await asyncio.sleep(RETRY_DELAY)

    async def poll_once(self) -> int:
        """Fetch one batch of updates and handle each. Returns the batch size."""
        updates = await self._client.get_updates(offset=self._offset)
        for update in updates:
            self._offset = update["update_id"] + 1
            await self.handle_update(update)
        return len(updates)

    async def handle_update(self, update: dict[str, Any]) -> None:
        """Dispatch one update and send the reply, if any."""
        message = update.get("message") or {}
        text = message.get("text")
        sender = message.get("from") or {}
        chat = message.get("chat") or {}
        if not text or "id" not in sender or "id" not in chat:
            return

        chat_identity = str(sender["id"])
        display_name = f"@{sender['username']}" if sender.get("username") else sender.get("first_name", "")

        try:
            async with self._database.session() as session:
                dispatcher = self._dispatcher_factory(session, self._variant)
                outcome = await dispatcher.dispatch(chat_identity, text)
        except Exception:
            logger.exception("Failed to handle Telegram command from %s", chat_identity)
            await self._reply(chat["id"], error_message())
            return

        if outcome is None:
            return
        logger.info(
            "Command %s from %s → %s", outcome.command, chat_identity, outcome.kind.value
        )
        await self._reply(chat["id"], render_outcome(outcome, self._variant, display_name))

    async def _reply(self, chat_id: int | str, text: str) -> None:
        try:
            await self._client.send_message(chat_id, text, parse_mode=PARSE_MODE)
        except (ChatTransportError, httpx.HTTPError) as e:
            logger.error("Failed to send Telegram reply to chat %s: %s", chat_id, e)
