"""User CRUD endpoints."""

from hermes.application.schemas import UserResponse, UserWrite
from hermes.domain.entities import USER
from hermes.infrastructure.dependencies import get_user_service
from hermes.presentation.api.v1.endpoints.records import build_record_router

router = build_record_router(
    variant=USER,
    prefix="/users",
    tags=["Users"],
    write_schema=UserWrite,
    response_schema=UserResponse,
    service_dependency=get_user_service,
)
