"""Record CRUD endpoints shared by the personnel and user APIs.

Both variants expose the same surface; ``build_record_router`` binds it to a
variant's schemas and service dependency.
"""

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from hermes.application.schemas import (
    ItemEnvelope,
    ListEnvelope,
    MessageEnvelope,
    MetadataValue,
    RecordWrite,
)
from hermes.application.services import RecordSearch, RecordService
from hermes.domain.entities import RecordVariant
from hermes.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    RecordValidationError,
)


def build_record_router(
    *,
    variant: RecordVariant,
    prefix: str,
    tags: list[str],
    write_schema: type[RecordWrite],
    response_schema: type[BaseModel],
    service_dependency: Callable[..., Any],
) -> APIRouter:
    """Build the CRUD router for one record variant."""
    router = APIRouter(prefix=prefix, tags=tags)
    not_found = f"{variant.name} not found"
    duplicate = f"{variant.name} with this {variant.natural_key_field.upper()} already exists"

    def to_response(record) -> BaseModel:
        return response_schema.model_validate(record, from_attributes=True)

    @router.get("", response_model=ListEnvelope[response_schema])
    async def list_records(
        query: str | None = Query(None, description="Case-insensitive name fragment"),
        status_filter: str | None = Query(None, alias="status", description="Exact status match"),
        meta_key: str | None = Query(None, description="Metadata key to match"),
        meta_value: str | None = Query(None, description="Metadata value to match"),
        service: RecordService = Depends(service_dependency),
    ):
        """List all records, or search by name fragment, status or metadata value."""
        try:
            records = await service.list_records(
                RecordSearch(
                    query=query,
                    status=status_filter,
                    meta_key=meta_key,
                    meta_value=meta_value,
                )
            )
        except RecordValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
        data = [to_response(r) for r in records]
        return {"success": True, "data": data, "count": len(data)}

    @router.get("/{record_id}", response_model=ItemEnvelope[response_schema])
    async def get_record(
        record_id: int,
        service: RecordService = Depends(service_dependency),
    ):
        """Retrieve a single record by ID."""
        try:
            record = await service.get_record(record_id)
        except EntityNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return {"success": True, "data": to_response(record)}

    @router.post(
        "",
        response_model=ItemEnvelope[response_schema],
        status_code=status.HTTP_201_CREATED,
    )
    async def create_record(
        data: write_schema,  # type: ignore[valid-type]
        service: RecordService = Depends(service_dependency),
    ):
        """Create a new record."""
        try:
            record = await service.create_record(data)
        except RecordValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
        except ConflictError:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=duplicate)
        return {
            "success": True,
            "message": f"{variant.name} created successfully",
            "data": to_response(record),
        }

    @router.put("/{record_id}", response_model=ItemEnvelope[response_schema])
    async def update_record(
        record_id: int,
        data: write_schema,  # type: ignore[valid-type]
        service: RecordService = Depends(service_dependency),
    ):
        """Replace every mutable field of an existing record."""
        try:
            record = await service.update_record(record_id, data)
        except EntityNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        except RecordValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
        except ConflictError:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=duplicate)
        return {
            "success": True,
            "message": f"{variant.name} updated successfully",
            "data": to_response(record),
        }

    if variant.has_metadata:

        @router.patch(
            "/{record_id}/metadata/{key}",
            response_model=ItemEnvelope[response_schema],
        )
        async def set_metadata_key(
            record_id: int,
            key: str,
            body: MetadataValue,
            service: RecordService = Depends(service_dependency),
        ):
            """Write one metadata key, leaving the other keys untouched."""
            try:
                record = await service.set_metadata_key(record_id, key, body.value)
            except EntityNotFoundError:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
            except RecordValidationError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
            return {
                "success": True,
                "message": f"{variant.name} metadata updated successfully",
                "data": to_response(record),
            }

    @router.delete("/{record_id}", response_model=MessageEnvelope)
    async def delete_record(
        record_id: int,
        service: RecordService = Depends(service_dependency),
    ):
        """Delete a record by ID."""
        try:
            await service.delete_record(record_id)
        except EntityNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return {"success": True, "message": f"{variant.name} deleted successfully"}

    return router
