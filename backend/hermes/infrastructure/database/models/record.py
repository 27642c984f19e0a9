"""SQLAlchemy ORM model for the Record entity (personnel and user variants)."""

from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import JSON, Date, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hermes.infrastructure.database.base import Base


class RecordModel(Base):
    """ORM model — maps to the 'records' table, discriminated by ``variant``."""

    __tablename__ = "records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    variant: Mapped[str] = mapped_column(String(32), nullable=False)
    natural_key: Mapped[str] = mapped_column(String(100), nullable=False)
    nama: Mapped[str] = mapped_column(String(255), nullable=False)
    jabatan: Mapped[str | None] = mapped_column(String(255), nullable=True)
    unit_kerja: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    telepon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    alamat: Mapped[str | None] = mapped_column(Text, nullable=True)
    tanggal_lahir: Mapped[date | None] = mapped_column(Date, nullable=True)
    tanggal_masuk: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="aktif")
    pangkat: Mapped[str | None] = mapped_column(String(100), nullable=True)
    rayon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ig_uname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    fb_uname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tt_uname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    x_uname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    yt_uname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict,
    )
    chat_identity: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("variant", "natural_key", name="uq_records_variant_natural_key"),
        UniqueConstraint("variant", "chat_identity", name="uq_records_variant_chat_identity"),
        Index("ix_records_variant_nama", "variant", "nama"),
        Index("ix_records_variant_status", "variant", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<RecordModel(id={self.id}, variant='{self.variant}', "
            f"natural_key='{self.natural_key}', nama='{self.nama}')>"
        )
