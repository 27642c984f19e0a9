"""Pydantic DTOs (Data Transfer Objects) for the personnel and user record APIs."""

from datetime import date, datetime
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, Field

T = TypeVar("T")


# ── Write schemas ────────────────────────────────────────────────────


class RecordWrite(BaseModel):
    """Fields shared by every record variant on create / full update.

    The natural key and ``nama`` are optional at the schema level so that the
    service can report missing values with its own validation error.
    """

    natural_key_field: ClassVar[str]

    nama: str | None = Field(None, max_length=255, examples=["Budi Santoso"])
    jabatan: str | None = Field(None, max_length=255, examples=["Kepala Bagian"])
    unit_kerja: str | None = Field(None, max_length=255, examples=["IT Department"])
    email: str | None = Field(None, max_length=255)
    telepon: str | None = Field(None, max_length=50)
    alamat: str | None = None
    tanggal_lahir: date | None = None
    tanggal_masuk: date | None = None
    status: str | None = Field(None, max_length=50, examples=["aktif"])
    pangkat: str | None = Field(None, max_length=100)
    rayon: str | None = Field(None, max_length=100)
    ig_uname: str | None = Field(None, max_length=100)
    fb_uname: str | None = Field(None, max_length=100)
    tt_uname: str | None = Field(None, max_length=100)
    x_uname: str | None = Field(None, max_length=100)
    yt_uname: str | None = Field(None, max_length=100)

    def natural_key(self) -> str | None:
        return getattr(self, self.natural_key_field)

    def field_values(self) -> dict[str, Any]:
        """Record field values keyed by domain field name, natural key excluded."""
        return self.model_dump(exclude={self.natural_key_field})


class PersonnelWrite(RecordWrite):
    """Schema for creating or replacing a personnel record."""

    natural_key_field: ClassVar[str] = "nip"

    nip: str | None = Field(None, max_length=50, examples=["198001012010011001"])
    additional_data: dict[str, Any] | None = Field(
        None, examples=[{"golongan": "III/a", "npwp": "12.345.678.9-012.000"}],
    )

    def field_values(self) -> dict[str, Any]:
        values = super().field_values()
        values["metadata"] = values.pop("additional_data") or {}
        return values


class UserWrite(RecordWrite):
    """Schema for creating or replacing a user record."""

    natural_key_field: ClassVar[str] = "uuid"

    uuid: str | None = Field(None, max_length=100, examples=["550e8400-e29b-41d4-a716-446655440001"])


class MetadataValue(BaseModel):
    """Body of a single metadata key write; any JSON value, null included."""

    value: Any


# ── Response schemas ─────────────────────────────────────────────────


class RecordResponse(BaseModel):
    """Fields returned for every record variant."""

    id: int
    nama: str
    jabatan: str | None
    unit_kerja: str | None
    email: str | None
    telepon: str | None
    alamat: str | None
    tanggal_lahir: date | None
    tanggal_masuk: date | None
    status: str
    pangkat: str | None
    rayon: str | None
    ig_uname: str | None
    fb_uname: str | None
    tt_uname: str | None
    x_uname: str | None
    yt_uname: str | None
    telegram_id: str | None = Field(
        None, validation_alias=AliasChoices("telegram_id", "chat_identity"),
    )
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PersonnelResponse(RecordResponse):
    nip: str = Field(validation_alias=AliasChoices("nip", "natural_key"))
    additional_data: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("additional_data", "metadata"),
    )


class UserResponse(RecordResponse):
    uuid: str = Field(validation_alias=AliasChoices("uuid", "natural_key"))


# ── Envelopes ────────────────────────────────────────────────────────


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    count: int


class ItemEnvelope(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    error: str | None = None
