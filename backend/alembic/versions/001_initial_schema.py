"""Initial schema: wards, properties, deliveries, upload records.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Extensions ──────────────────────────────────────────
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── Wards ───────────────────────────────────────────────
    op.create_table(
        "wards",
        sa.Column("id", UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text("uuid_generate_v4()")),
        sa.Column("corporate_name", sa.String(255), nullable=False),
        sa.Column("ward_name", sa.String(255), nullable=False),
        sa.Column("mohallas", JSONB, nullable=False,
                  server_default=sa.text("'[]'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("corporate_name", "ward_name",
                            name="uq_wards_corporate_ward"),
    )

    # ── Properties (last_delivery FK added after deliveries) ─
    op.create_table(
        "properties",
        sa.Column("id", UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text("uuid_generate_v4()")),
        sa.Column("property_id", sa.String(100), nullable=False, unique=True),
        sa.Column("ward_id", UUID(as_uuid=True),
                  sa.ForeignKey("wards.id"), nullable=False),
        sa.Column("mohalla", sa.String(255), nullable=False, server_default=""),
        sa.Column("owner_name", sa.String(255), nullable=False),
        sa.Column("father_name", sa.String(255), nullable=True),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("house_no", sa.String(100), nullable=True),
        sa.Column("mobile_no", sa.String(20), nullable=True),
        sa.Column("property_type", sa.String(100), nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("delivery_status", sa.String(20), nullable=False,
                  server_default="Pending"),
        sa.Column("last_delivery_id", UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "delivery_status IN ('Pending', 'Delivered', 'Not Found')",
            name="ck_properties_delivery_status",
        ),
    )
    op.create_index("idx_properties_ward", "properties", ["ward_id"])
    op.create_index("idx_properties_status", "properties", ["delivery_status"])

    # ── Deliveries ──────────────────────────────────────────
    op.create_table(
        "deliveries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text("uuid_generate_v4()")),
        sa.Column("property_id", UUID(as_uuid=True),
                  sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("staff_name", sa.String(255), nullable=False),
        sa.Column("delivery_date", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.Column("data_source", sa.String(20), nullable=False),
        sa.Column("receiver_name", sa.String(255), nullable=True),
        sa.Column("receiver_mobile", sa.String(20), nullable=True),
        sa.Column("photo_url", sa.Text, nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("correction_status", sa.String(20), nullable=False,
                  server_default="None"),
        sa.CheckConstraint(
            "data_source IN ('owner', 'family', 'tenant', 'not_found')",
            name="ck_deliveries_data_source",
        ),
        sa.CheckConstraint(
            "correction_status IN ('None', 'Pending', 'Approved', 'Rejected')",
            name="ck_deliveries_correction_status",
        ),
    )
    op.create_index("idx_deliveries_property", "deliveries", ["property_id"])
    op.create_index("idx_deliveries_staff_date", "deliveries", ["staff_name", "delivery_date"])

    op.create_foreign_key(
        "fk_properties_last_delivery", "properties", "deliveries",
        ["last_delivery_id"], ["id"],
    )

    # ── Upload records ──────────────────────────────────────
    op.create_table(
        "upload_records",
        sa.Column("id", UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text("uuid_generate_v4()")),
        sa.Column("filename", sa.String(500), nullable=False),
        sa.Column("uploaded_by", sa.String(255), nullable=False),
        sa.Column("total", sa.Integer, nullable=False),
        sa.Column("success", sa.Integer, nullable=False),
        sa.Column("failed", sa.Integer, nullable=False),
        sa.Column("duplicate", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("errors", JSONB, nullable=False,
                  server_default=sa.text("'[]'::jsonb")),
        sa.Column("timestamp", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("total = success + failed + duplicate",
                           name="ck_upload_records_balanced"),
    )
    op.create_index("idx_upload_records_timestamp", "upload_records", ["timestamp"])


def downgrade() -> None:
    op.drop_table("upload_records")
    op.drop_constraint("fk_properties_last_delivery", "properties", type_="foreignkey")
    op.drop_table("deliveries")
    op.drop_table("properties")
    op.drop_table("wards")
