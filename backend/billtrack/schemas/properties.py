"""Pydantic schemas for Properties."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from billtrack.models.enums import DeliveryStatus
from billtrack.schemas.wards import WardSummary


class PropertyCreate(BaseModel):
    """
    Manual property entry. delivery_status is not accepted: every property
    starts Pending and moves only when a delivery is recorded.
    """
    property_id: str = Field(..., min_length=1)
    ward_id: uuid.UUID
    mohalla: str = Field(..., min_length=1)
    owner_name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    father_name: str | None = None
    house_no: str | None = None
    mobile_no: str | None = None
    property_type: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class PropertyUpdate(BaseModel):
    """Partial update. Delivery fields are deliberately absent."""
    property_id: str | None = Field(None, min_length=1)
    ward_id: uuid.UUID | None = None
    mohalla: str | None = None
    owner_name: str | None = Field(None, min_length=1)
    address: str | None = Field(None, min_length=1)
    father_name: str | None = None
    house_no: str | None = None
    mobile_no: str | None = None
    property_type: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)

    @field_validator("property_id", "ward_id", "mohalla", "owner_name", "address")
    @classmethod
    def not_null(cls, v):
        # These may be omitted but not cleared
        if v is None:
            raise ValueError("may not be null")
        return v


class PropertyResponse(BaseModel):
    id: uuid.UUID
    property_id: str
    ward: WardSummary
    mohalla: str
    owner_name: str
    father_name: str | None
    address: str
    house_no: str | None
    mobile_no: str | None
    property_type: str | None
    latitude: float | None
    longitude: float | None
    delivery_status: DeliveryStatus
    last_delivery_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PaginatedProperties(BaseModel):
    properties: list[PropertyResponse]
    pagination: Pagination
