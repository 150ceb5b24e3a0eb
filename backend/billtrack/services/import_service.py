"""
Bulk property import.

Parses an uploaded property register, reconciles each row against the
ward directory and the property store, and writes one ledger entry.

Key flow per row, strictly in file order:
  1. Map positional columns B..L onto named fields
  2. Fail the row if property_id, owner_name or address is empty
  3. Duplicate if the property_id was inserted earlier in this run
  4. Duplicate if a property with that property_id already exists
  5. Find or create the ward; add the row's mohalla to its set
  6. Insert the property as Pending

Per-row problems never abort the run. Each row's writes run inside a
SAVEPOINT so a store error undoes only that row. The ledger entry is
written in the caller's transaction, so properties and their audit record
commit or roll back together.
"""

import enum

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.core.logging import get_logger
from billtrack.schemas.uploads import ImportResult, ImportSummary
from billtrack.services.ledger import ImportCounts, UploadLedger
from billtrack.services.parser import PropertyRow, open_rows
from billtrack.services.properties import add_property, property_exists
from billtrack.services.wards import resolve_ward

logger = get_logger(__name__)


class RowOutcome(str, enum.Enum):
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    FAILED = "failed"


def _describe(exc: Exception) -> str:
    """Short message for a row failure; driver errors without the SQL echo."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc) or exc.__class__.__name__


# ─── Row Reconciliation ───────────────────────────────────────

async def reconcile_row(
    db: AsyncSession,
    row: PropertyRow,
    inserted_ids: set[str],
) -> tuple[RowOutcome, str | None]:
    """
    Classify and apply a single row.

    inserted_ids holds the property_ids created so far in this run; it is
    updated on success. Returns (outcome, error message or None).
    """
    prefix = f"Row {row.row_number}"

    if not row.has_required_fields:
        return RowOutcome.FAILED, f"{prefix}: Missing required fields"

    if row.property_id in inserted_ids:
        return (
            RowOutcome.DUPLICATE,
            f"{prefix}: Property ID {row.property_id} appears earlier in this file",
        )

    try:
        async with db.begin_nested():
            if await property_exists(db, row.property_id):
                return (
                    RowOutcome.DUPLICATE,
                    f"{prefix}: Property ID {row.property_id} already exists",
                )

            ward, _created = await resolve_ward(
                db, row.corporate_name, row.ward_name, row.corporate_mohalla
            )
            await add_property(
                db,
                property_id=row.property_id,
                ward=ward,
                mohalla=row.corporate_mohalla,
                owner_name=row.owner_name,
                address=row.address,
                house_no=row.house_no,
                property_type=row.property_type,
            )
    except Exception as e:
        message = _describe(e)
        logger.warning("%s: import failed: %s", prefix, message)
        return RowOutcome.FAILED, f"{prefix}: {message}"

    inserted_ids.add(row.property_id)
    return RowOutcome.SUCCESS, None


# ─── Core Import Logic ────────────────────────────────────────

async def run_import(
    db: AsyncSession,
    file_bytes: bytes,
    *,
    filename: str,
    uploaded_by: str,
    quoted: bool = False,
) -> ImportResult:
    """
    Execute the import pipeline and record it in the upload ledger.

    Raises ImportFileError (before any write) when the file has no data
    rows or is in an unsupported format.
    """
    rows = open_rows(file_bytes, quoted=quoted)

    counts = ImportCounts()
    errors: list[str] = []
    inserted_ids: set[str] = set()

    for raw in rows:
        counts.total += 1
        outcome, message = await reconcile_row(
            db, PropertyRow.from_raw(raw), inserted_ids
        )
        if outcome is RowOutcome.SUCCESS:
            counts.success += 1
        elif outcome is RowOutcome.DUPLICATE:
            counts.duplicate += 1
        else:
            counts.failed += 1
        if message:
            errors.append(message)

    ledger = UploadLedger(db)
    record = await ledger.record(
        counts, errors, filename=filename, uploaded_by=uploaded_by
    )

    logger.info(
        "Imported %s (%s) by %s: total=%d success=%d failed=%d duplicate=%d status=%s",
        filename,
        rows.file_format,
        uploaded_by,
        counts.total,
        counts.success,
        counts.failed,
        counts.duplicate,
        record.status,
        extra={"upload_id": str(record.id)},
    )

    return ImportResult(
        summary=ImportSummary(
            total=counts.total,
            success=counts.success,
            failed=counts.failed,
            duplicate=counts.duplicate,
            status=counts.status,
        ),
        errors=errors or None,
    )
