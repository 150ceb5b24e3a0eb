"""
Seed data script — creates a small demo municipality.

  - 1 corporation ("Nagar Nigam Demo") with 3 wards
  - 3 mohallas per ward
  - 30 properties (10 per ward), all Pending

Usage:
  python -m scripts.seed_data

  Or import and call seed_demo() with a database session.
"""

import asyncio
import random

from sqlalchemy.ext.asyncio import AsyncSession

# Ensure models are imported so Base.metadata is populated
import billtrack.models  # noqa: F401
from billtrack.core.database import dispose_db, get_session_factory, init_db
from billtrack.core.logging import get_logger, setup_logging
from billtrack.services.properties import add_property
from billtrack.services.wards import resolve_ward

logger = get_logger(__name__)

CORPORATE_NAME = "Nagar Nigam Demo"

WARDS = {
    "Ward 1 - Civil Lines": ["Civil Lines", "Kutchery Road", "Station Road"],
    "Ward 2 - Old City": ["Chowk", "Sarafa Bazar", "Kotwali"],
    "Ward 3 - Rampur": ["Rampur", "Nai Basti", "Ganga Nagar"],
}

OWNER_FIRST = ["Ram", "Sita", "Mohan", "Anita", "Suresh", "Farida", "Imran", "Kavita"]
OWNER_LAST = ["Sharma", "Verma", "Khan", "Gupta", "Yadav", "Singh"]
PROPERTY_TYPES = ["Residential", "Commercial", "Mixed", "Vacant Plot"]

PROPERTIES_PER_WARD = 10


async def seed_demo(db: AsyncSession, seed: int = 42) -> dict[str, list]:
    """
    Create the demo wards and properties in the given session.

    Returns {"wards": [...ward ids], "properties": [...property_id strings]}.
    """
    rng = random.Random(seed)
    ward_ids = []
    property_ids = []

    for ward_index, (ward_name, mohallas) in enumerate(WARDS.items(), start=1):
        ward = None
        for mohalla in mohallas:
            ward, _created = await resolve_ward(db, CORPORATE_NAME, ward_name, mohalla)
        ward_ids.append(ward.id)

        for n in range(1, PROPERTIES_PER_WARD + 1):
            mohalla = mohallas[n % len(mohallas)]
            property_id = f"W{ward_index:02d}-{n:04d}"
            await add_property(
                db,
                property_id=property_id,
                ward=ward,
                mohalla=mohalla,
                owner_name=f"{rng.choice(OWNER_FIRST)} {rng.choice(OWNER_LAST)}",
                address=f"{n} {mohalla}",
                house_no=str(n),
                property_type=rng.choice(PROPERTY_TYPES),
            )
            property_ids.append(property_id)

    logger.info("Seeded %d wards and %d properties", len(ward_ids), len(property_ids))
    return {"wards": ward_ids, "properties": property_ids}


async def main() -> None:
    setup_logging()
    await init_db()
    async with get_session_factory()() as session:
        await seed_demo(session)
        await session.commit()
    await dispose_db()


if __name__ == "__main__":
    asyncio.run(main())
