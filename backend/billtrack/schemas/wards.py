"""Pydantic schemas for Wards."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class WardCreate(BaseModel):
    corporate_name: str = Field(..., description="Municipal corporation name")
    ward_name: str = Field(..., description="Ward name, unique within the corporation")
    mohallas: list[str] = Field(default_factory=list)


class WardUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""
    corporate_name: str | None = None
    ward_name: str | None = None
    mohallas: list[str] | None = None


class WardResponse(BaseModel):
    id: uuid.UUID
    corporate_name: str
    ward_name: str
    mohallas: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WardSummary(BaseModel):
    """Compact ward embedded in property responses."""
    id: uuid.UUID
    corporate_name: str
    ward_name: str

    model_config = {"from_attributes": True}
