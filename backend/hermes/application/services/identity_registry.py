"""Identity Registry — links external chat identities to directory records.

A chat identity maps to at most one record and a record carries at most one
chat identity. Uniqueness is pre-checked here and enforced by the store's
unique constraint, which raises the same ``IdentityConflictError``.
"""

import logging

from hermes.application.interfaces import RecordRepository
from hermes.domain.entities import Record, RecordPatch
from hermes.domain.exceptions import (
    EntityNotFoundError,
    IdentityConflictError,
    UnlinkedIdentityError,
)

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """Link / resolve / unlink operations used by the chat front-end."""

    def __init__(self, repository: RecordRepository):
        self._repository = repository

    async def link(self, natural_key: str, chat_identity: str) -> Record:
        """Link ``chat_identity`` to the record owning ``natural_key``.

        Re-linking the same identity to the same record is a no-op. A record
        that was linked to a different identity is re-pointed to this one.
        """
        variant = self._repository.variant

        record = await self._repository.get_by_natural_key(natural_key)
        if record is None:
            raise EntityNotFoundError(
                variant.name, natural_key, field=variant.natural_key_field
            )

        current = await self._repository.get_by_chat_identity(chat_identity)
        if current is not None and current.natural_key != record.natural_key:
            raise IdentityConflictError(variant.name, chat_identity)

        if record.chat_identity == chat_identity:
            return record

        linked = await self._repository.apply_patch(
            record.id, RecordPatch(chat_identity=chat_identity)
        )
        logger.info(
            "Linked chat identity %s to %s %s=%s",
            chat_identity, variant.name, variant.natural_key_field, natural_key,
        )
        return linked

    async def resolve(self, chat_identity: str) -> Record | None:
        return await self._repository.get_by_chat_identity(chat_identity)

    async def require_linked(self, chat_identity: str) -> Record:
        record = await self.resolve(chat_identity)
        if record is None:
            raise UnlinkedIdentityError(chat_identity)
        return record

    async def unlink(self, chat_identity: str) -> Record:
        record = await self.require_linked(chat_identity)
        unlinked = await self._repository.apply_patch(
            record.id, RecordPatch(chat_identity=None)
        )
        logger.info("Unlinked chat identity %s", chat_identity)
        return unlinked
