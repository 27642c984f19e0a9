"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hermes.application.services import (
    CommandDispatcher,
    IdentityRegistry,
    RecordService,
)
from hermes.domain.entities import PERSONNEL, USER, RecordVariant
from hermes.infrastructure.database.repositories import SQLAlchemyRecordRepository
from hermes.infrastructure.database.session import get_db_session


def build_record_service(session: AsyncSession, variant: RecordVariant) -> RecordService:
    """Build a RecordService bound to ``session`` for one record variant."""
    return RecordService(SQLAlchemyRecordRepository(session, variant))


def build_command_dispatcher(session: AsyncSession, variant: RecordVariant) -> CommandDispatcher:
    """Build a CommandDispatcher whose registry and service share one session."""
    repository = SQLAlchemyRecordRepository(session, variant)
    return CommandDispatcher(
        registry=IdentityRegistry(repository),
        service=RecordService(repository),
    )


async def get_personnel_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[RecordService, None]:
    """Provides a RecordService for personnel records."""
    yield build_record_service(session, PERSONNEL)


async def get_user_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[RecordService, None]:
    """Provides a RecordService for user records."""
    yield build_record_service(session, USER)
