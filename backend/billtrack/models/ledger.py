"""
Upload ledger model.

One row per completed bulk import. Rows are written once and only ever
deleted afterwards; deleting a row has no effect on the properties or wards
the run created.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from billtrack.core.database import Base


class UploadRecord(Base):
    """Summary of one bulk import run."""

    __tablename__ = "upload_records"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    filename: Mapped[str] = mapped_column(String(500), nullable=False)
    uploaded_by: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name of the uploader, not a foreign key.",
    )
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    success: Mapped[int] = mapped_column(Integer, nullable=False)
    failed: Mapped[int] = mapped_column(Integer, nullable=False)
    duplicate: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Success, Partial or Failed; derived from the counts.",
    )
    errors: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default="[]",
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_upload_records_timestamp", "timestamp"),
        CheckConstraint(
            "total = success + failed + duplicate",
            name="ck_upload_records_balanced",
        ),
    )

    def __repr__(self) -> str:
        return f"<UploadRecord {self.filename} {self.status}>"
