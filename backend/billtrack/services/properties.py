"""Property record store: existence checks and inserts keyed by property_id."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.models.core import Property, Ward
from billtrack.models.enums import DeliveryStatus


async def get_by_property_id(db: AsyncSession, property_id: str) -> Property | None:
    result = await db.execute(
        select(Property).where(Property.property_id == property_id)
    )
    return result.scalar_one_or_none()


async def property_exists(db: AsyncSession, property_id: str) -> bool:
    result = await db.execute(
        select(func.count(Property.id)).where(Property.property_id == property_id)
    )
    return result.scalar_one() > 0


async def add_property(
    db: AsyncSession,
    *,
    property_id: str,
    ward: Ward,
    mohalla: str,
    owner_name: str,
    address: str,
    house_no: str | None = None,
    property_type: str | None = None,
    father_name: str | None = None,
    mobile_no: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> Property:
    """
    Insert a new property in Pending state.

    Uniqueness of property_id is enforced by the table; a clash surfaces as
    IntegrityError from the flush.
    """
    prop = Property(
        property_id=property_id,
        ward=ward,
        mohalla=mohalla,
        owner_name=owner_name,
        address=address,
        house_no=house_no or None,
        property_type=property_type or None,
        father_name=father_name or None,
        mobile_no=mobile_no or None,
        latitude=latitude,
        longitude=longitude,
        delivery_status=DeliveryStatus.PENDING.value,
        last_delivery_id=None,
    )
    db.add(prop)
    await db.flush()
    return prop
