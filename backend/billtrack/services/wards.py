"""Ward directory: lookup and grow-only upsert of (corporate, ward) pairs."""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.models.core import Ward


def merge_mohallas(existing: list[str], *names: str) -> list[str]:
    """Ordered union: keep existing order, append unseen names."""
    merged = list(existing)
    for name in names:
        if name not in merged:
            merged.append(name)
    return merged


async def find_ward(
    db: AsyncSession,
    corporate_name: str,
    ward_name: str,
) -> Ward | None:
    result = await db.execute(
        select(Ward).where(
            and_(
                Ward.corporate_name == corporate_name,
                Ward.ward_name == ward_name,
            )
        )
    )
    return result.scalar_one_or_none()


async def resolve_ward(
    db: AsyncSession,
    corporate_name: str,
    ward_name: str,
    mohalla: str,
) -> tuple[Ward, bool]:
    """
    Find the ward for (corporate_name, ward_name), creating it if absent.

    The mohalla is added to the ward's set when not already present.
    Returns (ward, created).
    """
    ward = await find_ward(db, corporate_name, ward_name)
    if ward is None:
        ward = Ward(
            corporate_name=corporate_name,
            ward_name=ward_name,
            mohallas=[mohalla],
        )
        db.add(ward)
        await db.flush()
        return ward, True

    if mohalla not in ward.mohallas:
        # Reassign so the JSON column is flagged dirty
        ward.mohallas = merge_mohallas(ward.mohallas, mohalla)
        await db.flush()
    return ward, False
