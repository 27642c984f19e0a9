"""Application service (use case) for personnel and user record operations."""

import logging
from dataclasses import dataclass
from typing import Any

from hermes.application.interfaces import RecordRepository
from hermes.application.schemas.record import RecordWrite
from hermes.domain.entities import DEFAULT_STATUS, Record, RecordPatch, RecordVariant
from hermes.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    RecordValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordSearch:
    """Listing criteria. Only one criterion is honored.

    Precedence: ``query`` (name fragment), then ``status``, then the
    ``meta_key`` / ``meta_value`` pair. Empty strings count as absent.
    """

    query: str | None = None
    status: str | None = None
    meta_key: str | None = None
    meta_value: str | None = None


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class RecordService:
    """Orchestrates record validation and conflict detection. Depends on the repository port (DI)."""

    def __init__(self, repository: RecordRepository):
        self._repository = repository

    @property
    def variant(self) -> RecordVariant:
        return self._repository.variant

    async def get_record(self, record_id: int) -> Record:
        record = await self._repository.get_by_id(record_id)
        if record is None:
            raise EntityNotFoundError(self.variant.name, record_id)
        return record

    async def list_records(self, criteria: RecordSearch | None = None) -> list[Record]:
        criteria = criteria or RecordSearch()
        if not _blank(criteria.query):
            return await self._repository.search_by_name(criteria.query)
        if not _blank(criteria.status):
            return await self._repository.list_by_status(criteria.status)
        if not _blank(criteria.meta_key):
            return await self.search_by_metadata(criteria.meta_key, criteria.meta_value or "")
        return await self._repository.list_all()

    async def search_by_metadata(self, key: str, value: str) -> list[Record]:
        self._require_metadata()
        return await self._repository.search_by_metadata(key, value)

    async def create_record(self, data: RecordWrite) -> Record:
        natural_key, values = self._validated_values(data)

        if await self._repository.get_by_natural_key(natural_key) is not None:
            raise DuplicateEntityError(
                self.variant.name, self.variant.natural_key_field, natural_key
            )

        record = Record(variant=self.variant.key, natural_key=natural_key, **values)
        created = await self._repository.create(record)
        logger.info(
            "Created %s id=%s %s=%s",
            self.variant.name, created.id, self.variant.natural_key_field, natural_key,
        )
        return created

    async def update_record(self, record_id: int, data: RecordWrite) -> Record:
        record = await self.get_record(record_id)
        natural_key, values = self._validated_values(data)

        if natural_key != record.natural_key:
            await self._ensure_natural_key_free(natural_key, record_id)

        replacement = Record(variant=self.variant.key, natural_key=natural_key, **values)
        record.replace_with(replacement)
        return await self._repository.replace(record)

    async def patch_record(self, record_id: int, patch: RecordPatch) -> Record:
        """Apply only the fields set in ``patch``; the rest of the record is untouched."""
        record = await self.get_record(record_id)

        if patch.is_set("nama") and _blank(patch.nama):
            raise RecordValidationError("nama must not be empty", ("nama",))
        if patch.is_set("status") and _blank(patch.status):
            raise RecordValidationError("status must not be empty", ("status",))
        if patch.is_set("natural_key"):
            if _blank(patch.natural_key):
                raise RecordValidationError(
                    f"{self.variant.natural_key_field} must not be empty",
                    (self.variant.natural_key_field,),
                )
            if patch.natural_key != record.natural_key:
                await self._ensure_natural_key_free(patch.natural_key, record_id)

        if not patch:
            return record

        updated = await self._repository.apply_patch(record_id, patch)
        logger.info(
            "Patched %s id=%s fields=%s",
            self.variant.name, record_id, sorted(patch.changes()),
        )
        return updated

    async def set_metadata_key(self, record_id: int, key: str, value: Any) -> Record:
        self._require_metadata()
        if _blank(key):
            raise RecordValidationError("Metadata key must not be empty", ("key",))
        await self.get_record(record_id)
        return await self._repository.patch_metadata_key(record_id, key, value)

    async def delete_record(self, record_id: int) -> bool:
        exists = await self._repository.get_by_id(record_id)
        if exists is None:
            raise EntityNotFoundError(self.variant.name, record_id)
        deleted = await self._repository.delete(record_id)
        logger.info("Deleted %s id=%s", self.variant.name, record_id)
        return deleted

    # ── Helpers ──────────────────────────────────────────────────────

    def _validated_values(self, data: RecordWrite) -> tuple[str, dict[str, Any]]:
        """Check required fields and return ``(natural_key, record field values)``."""
        natural_key = data.natural_key()
        values = data.field_values()

        if _blank(natural_key) or _blank(values.get("nama")):
            key_label = self.variant.natural_key_field.upper()
            raise RecordValidationError(
                f"{key_label} and nama are required",
                (self.variant.natural_key_field, "nama"),
            )

        if "metadata" in values and not self.variant.has_metadata:
            raise RecordValidationError(
                f"{self.variant.name} records do not support metadata", ("metadata",)
            )

        values["status"] = values.get("status") or DEFAULT_STATUS
        return natural_key, values

    async def _ensure_natural_key_free(self, natural_key: str, record_id: int) -> None:
        owner = await self._repository.get_by_natural_key(natural_key)
        if owner is not None and owner.id != record_id:
            raise DuplicateEntityError(
                self.variant.name, self.variant.natural_key_field, natural_key
            )

    def _require_metadata(self) -> None:
        if not self.variant.has_metadata:
            raise RecordValidationError(
                f"{self.variant.name} records do not support metadata", ("metadata",)
            )
