"""Domain entity — pure Python business object for directory records."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

DEFAULT_STATUS = "aktif"

# Columns replaced wholesale by a full update. chat_identity only changes
# through linking, created_at never.
REPLACEABLE_FIELDS = (
    "natural_key",
    "nama",
    "jabatan",
    "unit_kerja",
    "email",
    "telepon",
    "alamat",
    "tanggal_lahir",
    "tanggal_masuk",
    "status",
    "pangkat",
    "rayon",
    "ig_uname",
    "fb_uname",
    "tt_uname",
    "x_uname",
    "yt_uname",
    "metadata",
)


@dataclass(frozen=True)
class RecordVariant:
    """Describes one record family sharing the common record shape.

    ``key`` discriminates rows in storage, ``natural_key_field`` is the wire
    name of the caller-assigned unique key, and ``has_metadata`` enables the
    open key-value map.
    """

    name: str
    key: str
    natural_key_field: str
    has_metadata: bool = False


PERSONNEL = RecordVariant(
    name="Personnel",
    key="personnel",
    natural_key_field="nip",
    has_metadata=True,
)
USER = RecordVariant(
    name="User",
    key="users",
    natural_key_field="uuid",
    has_metadata=False,
)

VARIANTS: dict[str, RecordVariant] = {v.key: v for v in (PERSONNEL, USER)}


def get_variant(key: str) -> RecordVariant:
    """Look up a variant by its storage key."""
    try:
        return VARIANTS[key]
    except KeyError:
        raise ValueError(
            f"Unknown record variant '{key}' (expected one of {sorted(VARIANTS)})"
        ) from None


@dataclass
class Record:
    """Core domain entity for a personnel or user directory entry."""

    variant: str
    natural_key: str
    nama: str
    id: int | None = None
    jabatan: str | None = None
    unit_kerja: str | None = None
    email: str | None = None
    telepon: str | None = None
    alamat: str | None = None
    tanggal_lahir: date | None = None
    tanggal_masuk: date | None = None
    status: str = DEFAULT_STATUS
    pangkat: str | None = None
    rayon: str | None = None
    ig_uname: str | None = None
    fb_uname: str | None = None
    tt_uname: str | None = None
    x_uname: str | None = None
    yt_uname: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    chat_identity: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def replace_with(self, other: "Record") -> None:
        """Overwrite every replaceable field from ``other`` and refresh updated_at."""
        for name in REPLACEABLE_FIELDS:
            setattr(self, name, getattr(other, name))
        self.updated_at = datetime.now(timezone.utc)
