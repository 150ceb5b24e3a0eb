"""
Core data models: Wards, Properties, Deliveries.

A ward is identified by (corporate_name, ward_name) and owns a growing set
of mohalla names. A property is identified externally by property_id and
belongs to one ward. Its delivery_status moves only when a delivery is
recorded against it.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billtrack.core.database import Base
from billtrack.models.enums import CorrectionStatus, DeliveryStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ward(Base):
    """
    Administrative subdivision of a municipal corporation.

    mohallas is an ordered list used as a set: names are appended when first
    seen and never duplicated. Callers must assign a new list rather than
    mutate in place so the JSON column is flagged dirty.
    """

    __tablename__ = "wards"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    corporate_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    ward_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    mohallas: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default="[]",
        comment="Ordered, duplicate-free mohalla names.",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("corporate_name", "ward_name", name="uq_wards_corporate_ward"),
    )

    def __repr__(self) -> str:
        return f"<Ward {self.corporate_name}/{self.ward_name}>"


class Property(Base):
    """A billable unit, keyed externally by property_id."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    property_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Externally assigned identifier from the municipal register.",
    )
    ward_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("wards.id"),
        nullable=False,
    )
    mohalla: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    father_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    house_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    mobile_no: Mapped[str | None] = mapped_column(String(20), nullable=True)
    property_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    delivery_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DeliveryStatus.PENDING.value,
        server_default=DeliveryStatus.PENDING.value,
    )
    last_delivery_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("deliveries.id", use_alter=True, name="fk_properties_last_delivery"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )

    ward: Mapped["Ward"] = relationship("Ward", lazy="selectin")

    __table_args__ = (
        Index("idx_properties_ward", "ward_id"),
        Index("idx_properties_status", "delivery_status"),
        CheckConstraint(
            "delivery_status IN ('Pending', 'Delivered', 'Not Found')",
            name="ck_properties_delivery_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Property {self.property_id} [{self.delivery_status}]>"


class Delivery(Base):
    """One attempt to hand a bill to a property's occupant."""

    __tablename__ = "deliveries"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    staff_name: Mapped[str] = mapped_column(String(255), nullable=False)
    delivery_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    data_source: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="owner, family, tenant or not_found.",
    )
    receiver_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    receiver_mobile: Mapped[str | None] = mapped_column(String(20), nullable=True)
    photo_url: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    correction_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CorrectionStatus.NONE.value,
        server_default=CorrectionStatus.NONE.value,
    )

    # properties.last_delivery_id is a second path between the tables
    property: Mapped["Property"] = relationship(
        "Property", foreign_keys=[property_id], lazy="selectin"
    )

    __table_args__ = (
        Index("idx_deliveries_property", "property_id"),
        Index("idx_deliveries_staff_date", "staff_name", "delivery_date"),
        CheckConstraint(
            "data_source IN ('owner', 'family', 'tenant', 'not_found')",
            name="ck_deliveries_data_source",
        ),
        CheckConstraint(
            "correction_status IN ('None', 'Pending', 'Approved', 'Rejected')",
            name="ck_deliveries_correction_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Delivery {self.property_id} {self.data_source}>"
