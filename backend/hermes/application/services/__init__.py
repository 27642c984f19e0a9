from .record_service import RecordSearch, RecordService
from .identity_registry import IdentityRegistry
from .command_dispatcher import (
    UPDATE_COMMANDS,
    CommandDispatcher,
    CommandOutcome,
    FieldCommand,
    OutcomeKind,
    parse_command,
)

__all__ = [
    "RecordSearch",
    "RecordService",
    "IdentityRegistry",
    "UPDATE_COMMANDS",
    "CommandDispatcher",
    "CommandOutcome",
    "FieldCommand",
    "OutcomeKind",
    "parse_command",
]
