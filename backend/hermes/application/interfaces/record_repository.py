"""Abstract repository interface (port) for Record persistence."""

from abc import ABC, abstractmethod
from typing import Any

from hermes.domain.entities import Record, RecordPatch, RecordVariant


class RecordRepository(ABC):
    """Port for record persistence, bound to a single record variant.

    Lookups return ``None`` on absence and never raise for it. Mutations raise
    the domain error taxonomy (``EntityNotFoundError``, ``ConflictError``
    subclasses, ``TransientBackendError``) and leave the store unchanged when
    they fail.
    """

    @property
    @abstractmethod
    def variant(self) -> RecordVariant:
        """The record variant this repository is bound to."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Record]:
        """All records ordered by name, case-insensitively."""
        ...

    @abstractmethod
    async def get_by_id(self, record_id: int) -> Record | None:
        """Retrieve a single record by its surrogate ID."""
        ...

    @abstractmethod
    async def get_by_natural_key(self, natural_key: str) -> Record | None:
        """Retrieve a single record by its caller-assigned key."""
        ...

    @abstractmethod
    async def get_by_chat_identity(self, chat_identity: str) -> Record | None:
        """Retrieve the record linked to a chat identity, if any."""
        ...

    @abstractmethod
    async def search_by_name(self, fragment: str) -> list[Record]:
        """Case-insensitive substring match on name, ordered by name."""
        ...

    @abstractmethod
    async def list_by_status(self, status: str) -> list[Record]:
        """Exact status match, ordered by name."""
        ...

    @abstractmethod
    async def search_by_metadata(self, key: str, value: str) -> list[Record]:
        """Records whose metadata ``key`` equals ``value``, ordered by name."""
        ...

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """Persist a new record and return it with the generated ID."""
        ...

    @abstractmethod
    async def replace(self, record: Record) -> Record:
        """Overwrite every replaceable field of an existing record."""
        ...

    @abstractmethod
    async def apply_patch(self, record_id: int, patch: RecordPatch) -> Record:
        """Write only the fields set in ``patch`` and return the updated record."""
        ...

    @abstractmethod
    async def patch_metadata_key(self, record_id: int, key: str, value: Any) -> Record:
        """Merge one key into the record's metadata without touching other keys."""
        ...

    @abstractmethod
    async def delete(self, record_id: int) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...
