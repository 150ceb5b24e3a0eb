"""
Delivery recording and correction.

Recording a delivery is the only way a property's delivery_status and
last_delivery_id change: not_found moves the property to Not Found, any
other data source to Delivered. Correcting the data source of a property's
latest delivery moves the property's status with it.
"""

import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.core.logging import get_logger
from billtrack.models.core import Delivery, Property
from billtrack.models.enums import CorrectionStatus, DataSource, DeliveryStatus
from billtrack.schemas.deliveries import DeliveryCreate, DeliveryUpdate
from billtrack.services.errors import DeliveryNotFound, PropertyNotFound

logger = get_logger(__name__)


def status_for(data_source: DataSource) -> DeliveryStatus:
    if data_source == DataSource.NOT_FOUND:
        return DeliveryStatus.NOT_FOUND
    return DeliveryStatus.DELIVERED


async def record_delivery(
    db: AsyncSession,
    payload: DeliveryCreate,
    staff_name: str,
) -> Delivery:
    result = await db.execute(
        select(Property).where(Property.id == payload.property_id)
    )
    prop = result.scalar_one_or_none()
    if prop is None:
        raise PropertyNotFound(f"Property not found: {payload.property_id}")

    delivery = Delivery(
        property=prop,
        staff_name=staff_name,
        data_source=payload.data_source.value,
        receiver_name=payload.receiver_name,
        receiver_mobile=payload.receiver_mobile,
        photo_url=payload.photo_url,
        latitude=payload.latitude,
        longitude=payload.longitude,
        remarks=payload.remarks,
    )
    db.add(delivery)
    await db.flush()

    prop.delivery_status = status_for(payload.data_source).value
    prop.last_delivery_id = delivery.id
    await db.flush()

    logger.info(
        "Delivery %s recorded for %s by %s: %s",
        delivery.id,
        prop.property_id,
        staff_name,
        prop.delivery_status,
    )
    return delivery


async def get_delivery(db: AsyncSession, delivery_id: uuid.UUID) -> Delivery:
    result = await db.execute(select(Delivery).where(Delivery.id == delivery_id))
    delivery = result.scalar_one_or_none()
    if delivery is None:
        raise DeliveryNotFound(f"Delivery not found: {delivery_id}")
    return delivery


async def update_delivery(
    db: AsyncSession,
    delivery: Delivery,
    payload: DeliveryUpdate,
) -> Delivery:
    """Apply a partial correction. Ownership is checked by the caller."""
    changes = payload.model_dump(exclude_unset=True)
    for name, value in changes.items():
        if isinstance(value, (DataSource, CorrectionStatus)):
            value = value.value
        setattr(delivery, name, value)

    prop = delivery.property
    if "data_source" in changes and prop.last_delivery_id == delivery.id:
        prop.delivery_status = status_for(payload.data_source).value

    await db.flush()
    logger.info(
        "Delivery %s corrected by %s: %s",
        delivery.id,
        delivery.staff_name,
        ", ".join(sorted(changes)) or "no changes",
    )
    return delivery


async def list_deliveries(
    db: AsyncSession,
    *,
    staff_name: str | None = None,
    property_uuid: uuid.UUID | None = None,
    correction_status: CorrectionStatus | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Delivery], int]:
    """Filtered page of deliveries, newest first, with the unpaged total."""
    filters = []
    if staff_name:
        filters.append(Delivery.staff_name == staff_name)
    if property_uuid:
        filters.append(Delivery.property_id == property_uuid)
    if correction_status:
        filters.append(Delivery.correction_status == correction_status.value)
    if date_from:
        filters.append(Delivery.delivery_date >= date_from)
    if date_to:
        filters.append(Delivery.delivery_date <= date_to)

    total = (
        await db.execute(select(func.count(Delivery.id)).where(*filters))
    ).scalar_one()
    result = await db.execute(
        select(Delivery)
        .where(*filters)
        .order_by(Delivery.delivery_date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total
