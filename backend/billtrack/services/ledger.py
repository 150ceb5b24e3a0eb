"""
Upload ledger: the persisted history of bulk import runs.

UploadLedger is constructed per unit of work with the session it should
write through. It never touches wards or properties.
"""

import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from billtrack.models.enums import UploadStatus
from billtrack.models.ledger import UploadRecord
from billtrack.services.errors import UploadRecordNotFound

# Column widths of upload_records; record() truncates to these.
FILENAME_MAX = 500
UPLOADED_BY_MAX = 255


def derive_status(success: int, failed: int, duplicate: int) -> UploadStatus:
    """Success when nothing failed or duplicated, Failed when nothing succeeded."""
    if failed == 0 and duplicate == 0:
        return UploadStatus.SUCCESS
    if success == 0:
        return UploadStatus.FAILED
    return UploadStatus.PARTIAL


@dataclass
class ImportCounts:
    """Running tallies of one import. total counts every data row seen."""
    total: int = 0
    success: int = 0
    failed: int = 0
    duplicate: int = 0

    @property
    def status(self) -> UploadStatus:
        return derive_status(self.success, self.failed, self.duplicate)

    @property
    def is_balanced(self) -> bool:
        return self.total == self.success + self.failed + self.duplicate


class UploadLedger:
    """Repository over upload_records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        counts: ImportCounts,
        errors: list[str],
        *,
        filename: str,
        uploaded_by: str,
    ) -> UploadRecord:
        if not counts.is_balanced:
            raise ValueError(
                f"Unbalanced import counts: total={counts.total} "
                f"success={counts.success} failed={counts.failed} "
                f"duplicate={counts.duplicate}"
            )
        record = UploadRecord(
            filename=filename[:FILENAME_MAX],
            uploaded_by=uploaded_by[:UPLOADED_BY_MAX],
            total=counts.total,
            success=counts.success,
            failed=counts.failed,
            duplicate=counts.duplicate,
            status=counts.status.value,
            errors=list(errors),
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def list(self, limit: int = 50) -> list[UploadRecord]:
        result = await self.db.execute(
            select(UploadRecord)
            .order_by(UploadRecord.timestamp.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get(self, record_id: uuid.UUID) -> UploadRecord:
        result = await self.db.execute(
            select(UploadRecord).where(UploadRecord.id == record_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise UploadRecordNotFound(f"Upload record not found: {record_id}")
        return record

    async def delete(self, record_id: uuid.UUID) -> None:
        record = await self.get(record_id)
        await self.db.delete(record)
        await self.db.flush()
