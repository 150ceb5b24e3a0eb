"""
Deliveries API routes — recording a delivery moves the property's status.

Endpoints:
  POST /api/v1/deliveries                 — Record a delivery (staff/admin)
  GET  /api/v1/deliveries                 — Filtered, paginated list
  GET  /api/v1/deliveries/staff-history   — The caller's own deliveries
  GET  /api/v1/deliveries/:id             — One delivery
  PUT  /api/v1/deliveries/:id             — Correct a delivery (recorder only)
"""

import math
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.api.deps import CurrentUser, get_current_user, require_staff_or_admin
from billtrack.core.database import get_db
from billtrack.models.enums import CorrectionStatus
from billtrack.schemas.deliveries import (
    DeliveryCreate,
    DeliveryResponse,
    DeliveryUpdate,
    PaginatedDeliveries,
)
from billtrack.schemas.properties import Pagination
from billtrack.services.deliveries import (
    get_delivery,
    list_deliveries,
    record_delivery,
    update_delivery,
)
from billtrack.services.errors import DeliveryNotFound, PropertyNotFound

router = APIRouter()


def _page(deliveries, total: int, page: int, limit: int) -> PaginatedDeliveries:
    return PaginatedDeliveries(
        deliveries=[DeliveryResponse.model_validate(d) for d in deliveries],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )


@router.post("/", response_model=DeliveryResponse, status_code=201)
async def create_delivery(
    payload: DeliveryCreate,
    user: CurrentUser = Depends(require_staff_or_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await record_delivery(db, payload, staff_name=user.name)
    except PropertyNotFound:
        raise HTTPException(status_code=404, detail="Property not found")


@router.get("/", response_model=PaginatedDeliveries)
async def get_deliveries(
    staff: str | None = Query(None, description="Recording staff member's name"),
    property_uuid: uuid.UUID | None = Query(None, alias="property", description="Filter by property id"),
    status: CorrectionStatus | None = Query(None, description="Filter by correction status"),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=500),
    _user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deliveries, total = await list_deliveries(
        db,
        staff_name=staff,
        property_uuid=property_uuid,
        correction_status=status,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )
    return _page(deliveries, total, page, limit)


@router.get("/staff-history", response_model=PaginatedDeliveries)
async def get_staff_history(
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=500),
    user: CurrentUser = Depends(require_staff_or_admin),
    db: AsyncSession = Depends(get_db),
):
    deliveries, total = await list_deliveries(
        db,
        staff_name=user.name,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )
    return _page(deliveries, total, page, limit)


@router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery_by_id(
    delivery_id: uuid.UUID,
    _user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await get_delivery(db, delivery_id)
    except DeliveryNotFound:
        raise HTTPException(status_code=404, detail="Delivery not found")


@router.put("/{delivery_id}", response_model=DeliveryResponse)
async def correct_delivery(
    delivery_id: uuid.UUID,
    payload: DeliveryUpdate,
    user: CurrentUser = Depends(require_staff_or_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        delivery = await get_delivery(db, delivery_id)
    except DeliveryNotFound:
        raise HTTPException(status_code=404, detail="Delivery not found")

    if delivery.staff_name != user.name:
        raise HTTPException(
            status_code=403, detail="Not authorized to update this delivery"
        )
    return await update_delivery(db, delivery, payload)
