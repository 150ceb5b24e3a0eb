"""
Properties API routes — CRUD with search, filters and pagination.

delivery_status and last_delivery_id are read-only here; they change only
through the deliveries endpoint.
"""

import math
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.api.deps import CurrentUser, get_current_user, require_admin
from billtrack.core.database import get_db
from billtrack.models.core import Property, Ward
from billtrack.models.enums import DeliveryStatus
from billtrack.schemas.properties import (
    PaginatedProperties,
    Pagination,
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
)
from billtrack.schemas.uploads import MessageResponse
from billtrack.services.properties import (
    add_property,
    get_by_property_id,
    property_exists,
)

router = APIRouter()


# ─── Helpers ───────────────────────────────────────────────────

async def _get_property_or_404(db: AsyncSession, property_uuid: uuid.UUID) -> Property:
    result = await db.execute(select(Property).where(Property.id == property_uuid))
    prop = result.scalar_one_or_none()
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


async def _get_ward_or_400(db: AsyncSession, ward_id: uuid.UUID) -> Ward:
    result = await db.execute(select(Ward).where(Ward.id == ward_id))
    ward = result.scalar_one_or_none()
    if not ward:
        raise HTTPException(status_code=400, detail="Ward not found")
    return ward


# ─── CRUD ──────────────────────────────────────────────────────

@router.get("/", response_model=PaginatedProperties)
async def list_properties(
    search: str | None = Query(None, description="Matches property ID, owner or address"),
    ward: uuid.UUID | None = Query(None, description="Filter by ward id"),
    status: DeliveryStatus | None = Query(None, description="Filter by delivery status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=500),
    _user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(Property)
    count_query = select(func.count(Property.id))

    if search:
        pattern = f"%{search.strip()}%"
        search_filter = or_(
            Property.property_id.ilike(pattern),
            Property.owner_name.ilike(pattern),
            Property.address.ilike(pattern),
        )
        query = query.where(search_filter)
        count_query = count_query.where(search_filter)

    if ward:
        query = query.where(Property.ward_id == ward)
        count_query = count_query.where(Property.ward_id == ward)

    if status:
        query = query.where(Property.delivery_status == status.value)
        count_query = count_query.where(Property.delivery_status == status.value)

    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(
        query.order_by(Property.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )

    return PaginatedProperties(
        properties=[PropertyResponse.model_validate(p) for p in result.scalars().all()],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )


@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property(
    payload: PropertyCreate,
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Manual entry. The ward must exist; the property starts Pending."""
    ward = await _get_ward_or_400(db, payload.ward_id)
    property_id = payload.property_id.strip()
    if await property_exists(db, property_id):
        raise HTTPException(status_code=400, detail="Property ID already exists")

    prop = await add_property(
        db,
        property_id=property_id,
        ward=ward,
        mohalla=payload.mohalla,
        owner_name=payload.owner_name,
        address=payload.address,
        house_no=payload.house_no,
        property_type=payload.property_type,
        father_name=payload.father_name,
        mobile_no=payload.mobile_no,
        latitude=payload.latitude,
        longitude=payload.longitude,
    )
    await db.refresh(prop)
    return prop


@router.get("/{property_uuid}", response_model=PropertyResponse)
async def get_property(
    property_uuid: uuid.UUID,
    _user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_property_or_404(db, property_uuid)


@router.put("/{property_uuid}", response_model=PropertyResponse)
async def update_property(
    property_uuid: uuid.UUID,
    payload: PropertyUpdate,
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    prop = await _get_property_or_404(db, property_uuid)
    changes = payload.model_dump(exclude_unset=True)

    ward_id = changes.pop("ward_id", None)
    if ward_id is not None:
        prop.ward = await _get_ward_or_400(db, ward_id)

    new_id = changes.get("property_id")
    if new_id is not None:
        changes["property_id"] = new_id = new_id.strip()
        clash = await get_by_property_id(db, new_id)
        if clash is not None and clash.id != prop.id:
            raise HTTPException(status_code=400, detail="Property ID already exists")

    for name, value in changes.items():
        setattr(prop, name, value)

    await db.flush()
    await db.refresh(prop)
    return prop


@router.delete("/{property_uuid}", response_model=MessageResponse)
async def delete_property(
    property_uuid: uuid.UUID,
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    prop = await _get_property_or_404(db, property_uuid)
    await db.delete(prop)
    await db.flush()
    return MessageResponse(message="Property deleted successfully")
