"""Pydantic schemas for Deliveries."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from billtrack.models.enums import CorrectionStatus, DataSource
from billtrack.schemas.properties import Pagination


class DeliveryCreate(BaseModel):
    property_id: uuid.UUID = Field(..., description="Internal id of the property")
    data_source: DataSource
    receiver_name: str | None = None
    receiver_mobile: str | None = None
    photo_url: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    remarks: str | None = None


class DeliveryUpdate(BaseModel):
    """
    Correction by the staff member who recorded the delivery.

    The property cannot be changed; a delivery for the wrong property is a
    new delivery.
    """
    data_source: DataSource | None = None
    receiver_name: str | None = None
    receiver_mobile: str | None = None
    photo_url: str | None = Field(None, min_length=1)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    remarks: str | None = None
    correction_status: CorrectionStatus | None = None

    @field_validator(
        "data_source", "photo_url", "latitude", "longitude", "correction_status"
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class DeliveryProperty(BaseModel):
    """The delivered-to property, as embedded in delivery responses."""
    id: uuid.UUID
    property_id: str
    owner_name: str
    address: str

    model_config = {"from_attributes": True}


class DeliveryResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    property: DeliveryProperty
    staff_name: str
    delivery_date: datetime
    data_source: DataSource
    receiver_name: str | None
    receiver_mobile: str | None
    photo_url: str
    latitude: float
    longitude: float
    remarks: str | None
    correction_status: CorrectionStatus

    model_config = {"from_attributes": True}


class PaginatedDeliveries(BaseModel):
    deliveries: list[DeliveryResponse]
    pagination: Pagination
