"""Command Dispatcher — maps inbound chat commands onto record operations.

Each command yields a ``CommandOutcome`` describing what happened; rendering
the outcome into a chat message is left to the transport.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from hermes.application.services.identity_registry import IdentityRegistry
from hermes.application.services.record_service import RecordService
from hermes.domain.entities import Record, RecordPatch
from hermes.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    RecordValidationError,
    TransientBackendError,
    UnlinkedIdentityError,
)

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    """Result categories of a dispatched command."""

    WELCOME = "welcome"
    HELP = "help"
    LINKED = "linked"
    PROFILE = "profile"
    UPDATED = "updated"
    USAGE = "usage"
    UNLINKED = "unlinked"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID = "invalid"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class FieldCommand:
    """A single-field update command: target record field and its display label."""

    field: str
    label: str


UPDATE_COMMANDS: dict[str, FieldCommand] = {
    "update_nama": FieldCommand("nama", "Nama"),
    "update_pangkat": FieldCommand("pangkat", "Pangkat"),
    "update_telepon": FieldCommand("telepon", "Telepon"),
    "update_ig": FieldCommand("ig_uname", "Instagram username"),
    "update_fb": FieldCommand("fb_uname", "Facebook username"),
    "update_tt": FieldCommand("tt_uname", "TikTok username"),
    "update_x": FieldCommand("x_uname", "X/Twitter username"),
    "update_yt": FieldCommand("yt_uname", "YouTube username"),
}


@dataclass(frozen=True)
class CommandOutcome:
    kind: OutcomeKind
    command: str
    record: Record | None = None
    field: str | None = None
    label: str | None = None
    value: str | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind in {
            OutcomeKind.WELCOME,
            OutcomeKind.HELP,
            OutcomeKind.LINKED,
            OutcomeKind.PROFILE,
            OutcomeKind.UPDATED,
        }


def parse_command(text: str) -> tuple[str, str] | None:
    """Split ``"/cmd@bot  argument "`` into ``("cmd", "argument")``.

    The leading slash and a ``@botname`` suffix are optional. Returns ``None``
    for empty input.
    """
    parts = (text or "").strip().split(maxsplit=1)
    if not parts:
        return None
    head = parts[0].removeprefix("/").split("@", 1)[0].lower()
    if not head:
        return None
    argument = parts[1].strip() if len(parts) > 1 else ""
    return head, argument


class CommandDispatcher:
    """Chat front-end logic over the Identity Registry and Record Service."""

    def __init__(self, registry: IdentityRegistry, service: RecordService):
        self._registry = registry
        self._service = service

    async def dispatch(self, chat_identity: str, text: str) -> CommandOutcome | None:
        """Handle one inbound command line. Unrecognized input returns ``None``."""
        parsed = parse_command(text)
        if parsed is None:
            return None
        command, argument = parsed

        if command == "start":
            return CommandOutcome(OutcomeKind.WELCOME, command)
        if command == "help":
            return CommandOutcome(OutcomeKind.HELP, command)
        if command == "link":
            if not argument:
                return CommandOutcome(OutcomeKind.USAGE, command)
            return await self._guarded(
                command, lambda: self._link(command, chat_identity, argument)
            )
        if command == "mydata":
            return await self._guarded(
                command, lambda: self._my_data(command, chat_identity)
            )

        target = UPDATE_COMMANDS.get(command)
        if target is None:
            return None
        if not argument:
            return CommandOutcome(
                OutcomeKind.USAGE, command, field=target.field, label=target.label
            )
        return await self._guarded(
            command, lambda: self._update(command, chat_identity, target, argument)
        )

    # ── Commands ─────────────────────────────────────────────────────

    async def _link(self, command: str, chat_identity: str, natural_key: str) -> CommandOutcome:
        record = await self._registry.link(natural_key, chat_identity)
        return CommandOutcome(OutcomeKind.LINKED, command, record=record)

    async def _my_data(self, command: str, chat_identity: str) -> CommandOutcome:
        record = await self._registry.require_linked(chat_identity)
        return CommandOutcome(OutcomeKind.PROFILE, command, record=record)

    async def _update(
        self, command: str, chat_identity: str, target: FieldCommand, value: str
    ) -> CommandOutcome:
        record = await self._registry.require_linked(chat_identity)
        updated = await self._service.patch_record(
            record.id, RecordPatch.single(target.field, value)
        )
        return CommandOutcome(
            OutcomeKind.UPDATED,
            command,
            record=updated,
            field=target.field,
            label=target.label,
            value=value,
        )

    async def _guarded(
        self, command: str, handler: Callable[[], Awaitable[CommandOutcome]]
    ) -> CommandOutcome:
        """Run a command, translating domain errors into failure outcomes."""
        try:
            return await handler()
        except UnlinkedIdentityError:
            return CommandOutcome(OutcomeKind.UNLINKED, command)
        except EntityNotFoundError as e:
            return CommandOutcome(OutcomeKind.NOT_FOUND, command, detail=str(e))
        except ConflictError as e:
            return CommandOutcome(OutcomeKind.CONFLICT, command, detail=str(e))
        except RecordValidationError as e:
            return CommandOutcome(OutcomeKind.INVALID, command, detail=e.message)
        except TransientBackendError as e:
            logger.warning("Command %s failed on backend: %s", command, e)
            return CommandOutcome(OutcomeKind.UNAVAILABLE, command, detail=str(e))
