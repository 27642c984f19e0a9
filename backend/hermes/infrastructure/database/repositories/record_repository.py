"""Concrete repository implementation for Record backed by SQLAlchemy."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, String, cast, func, select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from hermes.application.interfaces import RecordRepository
from hermes.domain.entities import REPLACEABLE_FIELDS, Record, RecordPatch, RecordVariant
from hermes.domain.exceptions import (
    ConflictError,
    DuplicateEntityError,
    EntityNotFoundError,
    IdentityConflictError,
    RecordValidationError,
    TransientBackendError,
)
from hermes.infrastructure.database.models import RecordModel


def _escape_like(fragment: str) -> str:
    """Escape LIKE wildcards so the fragment is matched literally."""
    return (
        fragment.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )


# SQLite extracts JSON booleans as 1/0
_BOOLEAN_TEXTS = {"true": "1", "false": "0"}


def _same_json_text(stored: Any, value: str) -> bool:
    """Whether a stored metadata value renders as ``value`` in JSON text form."""
    if isinstance(stored, bool):
        return value == ("true" if stored else "false")
    if value in _BOOLEAN_TEXTS:
        return stored == value
    return True


def _column(field_name: str) -> str:
    """Map a domain field name to its ORM attribute name."""
    return "metadata_" if field_name == "metadata" else field_name


class SQLAlchemyRecordRepository(RecordRepository):
    """Implements the RecordRepository port using SQLAlchemy async sessions.

    Every query is scoped to the bound variant. Unique-constraint violations
    and connectivity failures roll the session back and are re-raised as
    domain errors.
    """

    def __init__(self, session: AsyncSession, variant: RecordVariant):
        self._session = session
        self._variant = variant

    @property
    def variant(self) -> RecordVariant:
        return self._variant

    def _to_entity(self, model: RecordModel) -> Record:
        """Map ORM model → domain entity."""
        return Record(
            id=model.id,
            variant=model.variant,
            natural_key=model.natural_key,
            nama=model.nama,
            jabatan=model.jabatan,
            unit_kerja=model.unit_kerja,
            email=model.email,
            telepon=model.telepon,
            alamat=model.alamat,
            tanggal_lahir=model.tanggal_lahir,
            tanggal_masuk=model.tanggal_masuk,
            status=model.status,
            pangkat=model.pangkat,
            rayon=model.rayon,
            ig_uname=model.ig_uname,
            fb_uname=model.fb_uname,
            tt_uname=model.tt_uname,
            x_uname=model.x_uname,
            yt_uname=model.yt_uname,
            metadata=dict(model.metadata_ or {}),
            chat_identity=model.chat_identity,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Record) -> RecordModel:
        """Map domain entity → ORM model (for creation)."""
        model = RecordModel(
            variant=self._variant.key,
            chat_identity=entity.chat_identity,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
        for name in REPLACEABLE_FIELDS:
            setattr(model, _column(name), getattr(entity, name))
        if not self._variant.has_metadata:
            model.metadata_ = {}
        return model

    # ── Error translation ────────────────────────────────────────────

    @asynccontextmanager
    async def _backend_errors(
        self,
        operation: str,
        *,
        natural_key: str | None = None,
        chat_identity: str | None = None,
    ) -> AsyncIterator[None]:
        try:
            yield
        except IntegrityError as exc:
            await self._session.rollback()
            raise self._conflict_from(exc, natural_key, chat_identity) from exc
        except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
            await self._session.rollback()
            raise TransientBackendError(operation, exc) from exc

    def _conflict_from(
        self,
        exc: IntegrityError,
        natural_key: str | None,
        chat_identity: str | None,
    ) -> ConflictError:
        message = str(exc.orig).lower()
        if "chat_identity" in message:
            return IdentityConflictError(self._variant.name, chat_identity or "")
        if "natural_key" in message:
            return DuplicateEntityError(
                self._variant.name, self._variant.natural_key_field, natural_key or ""
            )
        return ConflictError(str(exc.orig))

    # ── Queries ──────────────────────────────────────────────────────

    def _select(self) -> Select:
        return select(RecordModel).where(RecordModel.variant == self._variant.key)

    @staticmethod
    def _ordered(stmt: Select) -> Select:
        return stmt.order_by(func.lower(RecordModel.nama), RecordModel.id)

    async def _fetch_all(self, stmt: Select, operation: str) -> list[Record]:
        async with self._backend_errors(operation):
            result = await self._session.execute(self._ordered(stmt))
            return [self._to_entity(row) for row in result.scalars().all()]

    async def _fetch_one(self, stmt: Select, operation: str) -> Record | None:
        async with self._backend_errors(operation):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[Record]:
        return await self._fetch_all(self._select(), "list_all")

    async def get_by_id(self, record_id: int) -> Record | None:
        return await self._fetch_one(
            self._select().where(RecordModel.id == record_id), "get_by_id"
        )

    async def get_by_natural_key(self, natural_key: str) -> Record | None:
        return await self._fetch_one(
            self._select().where(RecordModel.natural_key == natural_key),
            "get_by_natural_key",
        )

    async def get_by_chat_identity(self, chat_identity: str) -> Record | None:
        return await self._fetch_one(
            self._select().where(RecordModel.chat_identity == chat_identity),
            "get_by_chat_identity",
        )

    async def search_by_name(self, fragment: str) -> list[Record]:
        pattern = f"%{_escape_like(fragment)}%"
        return await self._fetch_all(
            self._select().where(RecordModel.nama.ilike(pattern, escape="\\")),
            "search_by_name",
        )

    async def list_by_status(self, status: str) -> list[Record]:
        return await self._fetch_all(
            self._select().where(RecordModel.status == status), "list_by_status"
        )

    async def search_by_metadata(self, key: str, value: str) -> list[Record]:
        texts = [value]
        if value in _BOOLEAN_TEXTS:
            texts.append(_BOOLEAN_TEXTS[value])
        extracted = cast(RecordModel.metadata_[key].as_string(), String)
        records = await self._fetch_all(
            self._select().where(extracted.in_(texts)), "search_by_metadata"
        )
        return [r for r in records if _same_json_text(r.metadata.get(key), value)]

    # ── Mutations ────────────────────────────────────────────────────

    async def create(self, record: Record) -> Record:
        model = self._to_model(record)
        async with self._backend_errors(
            "create",
            natural_key=record.natural_key,
            chat_identity=record.chat_identity,
        ):
            self._session.add(model)
            await self._session.flush()
        return self._to_entity(model)

    async def replace(self, record: Record) -> Record:
        async with self._backend_errors("replace", natural_key=record.natural_key):
            model = await self._session.get(RecordModel, record.id)
            if model is None or model.variant != self._variant.key:
                raise EntityNotFoundError(self._variant.name, record.id)
            for name in REPLACEABLE_FIELDS:
                setattr(model, _column(name), getattr(record, name))
            if not self._variant.has_metadata:
                model.metadata_ = {}
            model.updated_at = record.updated_at
            await self._session.flush()
        return self._to_entity(model)

    async def apply_patch(self, record_id: int, patch: RecordPatch) -> Record:
        changes = patch.changes()
        if not changes:
            existing = await self.get_by_id(record_id)
            if existing is None:
                raise EntityNotFoundError(self._variant.name, record_id)
            return existing

        stmt = (
            update(RecordModel)
            .where(
                RecordModel.id == record_id,
                RecordModel.variant == self._variant.key,
            )
            .values(**changes, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        async with self._backend_errors(
            "apply_patch",
            natural_key=changes.get("natural_key"),
            chat_identity=changes.get("chat_identity"),
        ):
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                raise EntityNotFoundError(self._variant.name, record_id)
            model = await self._session.get(RecordModel, record_id, populate_existing=True)
        return self._to_entity(model)

    async def patch_metadata_key(self, record_id: int, key: str, value: Any) -> Record:
        if not self._variant.has_metadata:
            raise RecordValidationError(
                f"{self._variant.name} records do not support metadata", ("metadata",)
            )

        stmt = (
            self._select()
            .where(RecordModel.id == record_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        async with self._backend_errors("patch_metadata_key"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
            if model is None:
                raise EntityNotFoundError(self._variant.name, record_id)
            merged = dict(model.metadata_ or {})
            merged[key] = value
            model.metadata_ = merged
            model.updated_at = datetime.now(timezone.utc)
            await self._session.flush()
        return self._to_entity(model)

    async def delete(self, record_id: int) -> bool:
        async with self._backend_errors("delete"):
            model = await self._session.get(RecordModel, record_id)
            if model is None or model.variant != self._variant.key:
                return False
            await self._session.delete(model)
            await self._session.flush()
        return True
