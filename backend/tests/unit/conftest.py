"""Shared fakes for the unit tests."""

import copy
import json
from datetime import datetime, timezone
from typing import Any

import pytest

from hermes.application.interfaces import RecordRepository
from hermes.domain.entities import PERSONNEL, USER, REPLACEABLE_FIELDS, Record, RecordPatch, RecordVariant
from hermes.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    IdentityConflictError,
    RecordValidationError,
)


def _json_text(value: Any) -> str:
    return json.dumps(value) if isinstance(value, bool) else str(value)


class FakeRecordRepository(RecordRepository):
    """In-memory fake repository enforcing the same uniqueness rules as the store."""

    def __init__(self, variant: RecordVariant):
        self._variant = variant
        self._records: dict[int, Record] = {}
        self._next_id = 1

    @property
    def variant(self) -> RecordVariant:
        return self._variant

    def _sorted(self, records) -> list[Record]:
        return [copy.deepcopy(r) for r in sorted(records, key=lambda r: (r.nama.lower(), r.id))]

    def _check_unique(self, record_id: int | None, natural_key: str | None, chat_identity: str | None) -> None:
        for other in self._records.values():
            if other.id == record_id:
                continue
            if natural_key is not None and other.natural_key == natural_key:
                raise DuplicateEntityError(self._variant.name, self._variant.natural_key_field, natural_key)
            if chat_identity is not None and other.chat_identity == chat_identity:
                raise IdentityConflictError(self._variant.name, chat_identity)

    async def list_all(self) -> list[Record]:
        return self._sorted(self._records.values())

    async def get_by_id(self, record_id: int) -> Record | None:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record else None

    async def get_by_natural_key(self, natural_key: str) -> Record | None:
        matches = [r for r in self._records.values() if r.natural_key == natural_key]
        return copy.deepcopy(matches[0]) if matches else None

    async def get_by_chat_identity(self, chat_identity: str) -> Record | None:
        matches = [r for r in self._records.values() if r.chat_identity == chat_identity]
        return copy.deepcopy(matches[0]) if matches else None

    async def search_by_name(self, fragment: str) -> list[Record]:
        needle = fragment.lower()
        return self._sorted(r for r in self._records.values() if needle in r.nama.lower())

    async def list_by_status(self, status: str) -> list[Record]:
        return self._sorted(r for r in self._records.values() if r.status == status)

    async def search_by_metadata(self, key: str, value: str) -> list[Record]:
        return self._sorted(
            r for r in self._records.values()
            if key in r.metadata and _json_text(r.metadata[key]) == value
        )

    async def create(self, record: Record) -> Record:
        self._check_unique(None, record.natural_key, record.chat_identity)
        stored = copy.deepcopy(record)
        stored.id = self._next_id
        self._next_id += 1
        self._records[stored.id] = stored
        return copy.deepcopy(stored)

    async def replace(self, record: Record) -> Record:
        stored = self._records.get(record.id)
        if stored is None:
            raise EntityNotFoundError(self._variant.name, record.id)
        self._check_unique(record.id, record.natural_key, None)
        for name in REPLACEABLE_FIELDS:
            setattr(stored, name, copy.deepcopy(getattr(record, name)))
        stored.updated_at = record.updated_at
        return copy.deepcopy(stored)

    async def apply_patch(self, record_id: int, patch: RecordPatch) -> Record:
        stored = self._records.get(record_id)
        if stored is None:
            raise EntityNotFoundError(self._variant.name, record_id)
        changes = patch.changes()
        self._check_unique(record_id, changes.get("natural_key"), changes.get("chat_identity"))
        for name, value in changes.items():
            setattr(stored, name, value)
        stored.updated_at = datetime.now(timezone.utc)
        return copy.deepcopy(stored)

    async def patch_metadata_key(self, record_id: int, key: str, value: Any) -> Record:
        if not self._variant.has_metadata:
            raise RecordValidationError("metadata not supported", ("metadata",))
        stored = self._records.get(record_id)
        if stored is None:
            raise EntityNotFoundError(self._variant.name, record_id)
        stored.metadata = {**stored.metadata, key: value}
        return copy.deepcopy(stored)

    async def delete(self, record_id: int) -> bool:
        return self._records.pop(record_id, None) is not None


@pytest.fixture
def personnel_repo() -> FakeRecordRepository:
    return FakeRecordRepository(PERSONNEL)


@pytest.fixture
def user_repo() -> FakeRecordRepository:
    return FakeRecordRepository(USER)
