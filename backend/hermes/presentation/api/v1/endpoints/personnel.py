"""Personnel CRUD endpoints."""

from hermes.application.schemas import PersonnelResponse, PersonnelWrite
from hermes.domain.entities import PERSONNEL
from hermes.infrastructure.dependencies import get_personnel_service
from hermes.presentation.api.v1.endpoints.records import build_record_router

router = build_record_router(
    variant=PERSONNEL,
    prefix="/personnel",
    tags=["Personnel"],
    write_schema=PersonnelWrite,
    response_schema=PersonnelResponse,
    service_dependency=get_personnel_service,
)
