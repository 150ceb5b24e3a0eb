"""Wards API routes — CRUD over (corporate, ward) pairs and their mohallas."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.api.deps import CurrentUser, get_current_user, require_admin
from billtrack.core.database import get_db
from billtrack.models.core import Property, Ward
from billtrack.schemas.uploads import MessageResponse
from billtrack.schemas.wards import WardCreate, WardResponse, WardUpdate
from billtrack.services.wards import merge_mohallas

router = APIRouter()


# ─── Helpers ───────────────────────────────────────────────────

async def _get_ward_or_404(db: AsyncSession, ward_id: uuid.UUID) -> Ward:
    result = await db.execute(select(Ward).where(Ward.id == ward_id))
    ward = result.scalar_one_or_none()
    if not ward:
        raise HTTPException(status_code=404, detail="Ward not found")
    return ward


async def _flush_or_conflict(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Ward already exists")


# ─── CRUD ──────────────────────────────────────────────────────

@router.get("/", response_model=list[WardResponse])
async def list_wards(
    _user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Ward).order_by(Ward.corporate_name, Ward.ward_name)
    )
    return result.scalars().all()


@router.post("/", response_model=WardResponse, status_code=201)
async def create_ward(
    payload: WardCreate,
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if not payload.corporate_name.strip() or not payload.ward_name.strip():
        raise HTTPException(
            status_code=400,
            detail="Corporate name and ward name are required",
        )
    ward = Ward(
        corporate_name=payload.corporate_name.strip(),
        ward_name=payload.ward_name.strip(),
        mohallas=merge_mohallas([], *payload.mohallas),
    )
    db.add(ward)
    await _flush_or_conflict(db)
    await db.refresh(ward)
    return ward


@router.get("/{ward_id}", response_model=WardResponse)
async def get_ward(
    ward_id: uuid.UUID,
    _user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_ward_or_404(db, ward_id)


@router.put("/{ward_id}", response_model=WardResponse)
async def update_ward(
    ward_id: uuid.UUID,
    payload: WardUpdate,
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update. A supplied mohallas list replaces the current one."""
    ward = await _get_ward_or_404(db, ward_id)
    if payload.corporate_name:
        ward.corporate_name = payload.corporate_name.strip()
    if payload.ward_name:
        ward.ward_name = payload.ward_name.strip()
    if payload.mohallas is not None:
        ward.mohallas = merge_mohallas([], *payload.mohallas)
    await _flush_or_conflict(db)
    await db.refresh(ward)
    return ward


@router.delete("/{ward_id}", response_model=MessageResponse)
async def delete_ward(
    ward_id: uuid.UUID,
    _user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    ward = await _get_ward_or_404(db, ward_id)
    in_use = await db.execute(
        select(func.count(Property.id)).where(Property.ward_id == ward.id)
    )
    if in_use.scalar_one() > 0:
        raise HTTPException(
            status_code=400,
            detail="Ward has properties; reassign or delete them first",
        )
    await db.delete(ward)
    await db.flush()
    return MessageResponse(message="Ward deleted successfully")
