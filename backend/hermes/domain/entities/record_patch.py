"""Typed partial update for a Record.

Every field defaults to ``...`` (unset). Only fields explicitly given a value,
``None`` included, are written; the rest of the record is left untouched.
"""

from dataclasses import dataclass, fields
from datetime import date
from typing import Any


@dataclass(frozen=True)
class RecordPatch:
    natural_key: str = ...  # type: ignore[assignment]
    nama: str = ...  # type: ignore[assignment]
    jabatan: str | None = ...  # type: ignore[assignment]
    unit_kerja: str | None = ...  # type: ignore[assignment]
    email: str | None = ...  # type: ignore[assignment]
    telepon: str | None = ...  # type: ignore[assignment]
    alamat: str | None = ...  # type: ignore[assignment]
    tanggal_lahir: date | None = ...  # type: ignore[assignment]
    tanggal_masuk: date | None = ...  # type: ignore[assignment]
    status: str = ...  # type: ignore[assignment]
    pangkat: str | None = ...  # type: ignore[assignment]
    rayon: str | None = ...  # type: ignore[assignment]
    ig_uname: str | None = ...  # type: ignore[assignment]
    fb_uname: str | None = ...  # type: ignore[assignment]
    tt_uname: str | None = ...  # type: ignore[assignment]
    x_uname: str | None = ...  # type: ignore[assignment]
    yt_uname: str | None = ...  # type: ignore[assignment]
    chat_identity: str | None = ...  # type: ignore[assignment]

    @classmethod
    def single(cls, field_name: str, value: Any) -> "RecordPatch":
        """Build a patch that sets exactly one field."""
        if field_name not in cls.field_names():
            raise ValueError(f"'{field_name}' is not a patchable record field")
        return cls(**{field_name: value})

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    def changes(self) -> dict[str, Any]:
        """Return ``{field: value}`` for every field that was set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not ...
        }

    def is_set(self, field_name: str) -> bool:
        return getattr(self, field_name) is not ...

    def __bool__(self) -> bool:
        return bool(self.changes())
