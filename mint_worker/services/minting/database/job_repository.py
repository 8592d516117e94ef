"""
Repository for minting job operations.
"""

from datetime import timedelta
from typing import Dict, List, Optional

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from mint_worker.core.config import WorkerConfig
from mint_worker.core.database import Database
from mint_worker.core.exceptions import (
    DatabaseError,
    JobStoreError,
    MintingRecordNotFoundError,
    ValidationError,
)
from mint_worker.models import MintingRecord, MintStatus
from mint_worker.models.base import utcnow
from mint_worker.services.minting.types import MintJob


logger = structlog.get_logger(__name__)


class MintJobRepository:
    """
    Repository for the minting_records table.

    Reads pending work for the run loop and applies single-row lifecycle
    updates on behalf of the outcome recorder. Every lifecycle update is
    conditional on the row still being pending, so terminal rows are never
    mutated again.
    """

    def __init__(self, database: Database, config: WorkerConfig):
        self.database = database
        self.config = config
        self.logger = logger.bind(service="mint_job_repository")

    async def fetch_pending(self, limit: Optional[int] = None) -> List[MintJob]:
        """
        Get pending jobs, fewest retries first, then oldest first.

        Args:
            limit: Max rows to return, defaults to the configured batch size

        Returns:
            Immutable job snapshots, possibly empty
        """
        limit = self.config.batch_size if limit is None else limit
        if limit < 1:
            raise ValidationError("Fetch limit must be positive", {"limit": limit})

        stmt = select(MintingRecord).where(MintingRecord.status == MintStatus.PENDING)

        if self.config.apply_retry_delay and self.config.retry_delay > 0:
            cutoff = utcnow() - timedelta(seconds=self.config.retry_delay)
            stmt = stmt.where(
                or_(
                    MintingRecord.retry_count == 0,
                    MintingRecord.updated_at <= cutoff,
                )
            )

        stmt = stmt.order_by(
            MintingRecord.retry_count.asc(),
            MintingRecord.created_at.asc(),
            MintingRecord.id.asc(),
        ).limit(limit)

        try:
            async with self.database.session() as db:
                result = await db.execute(stmt)
                jobs = [MintJob.from_record(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            self.logger.error("Failed to fetch pending mints", error=str(e))
            raise DatabaseError(f"Failed to fetch pending mints: {e}") from e

        self.logger.debug("Fetched pending mints", count=len(jobs), limit=limit)
        return jobs

    async def mark_completed(self, job_id: int, transaction_digest: str) -> bool:
        """Set a pending job to completed. Returns False if the row was not pending."""
        now = utcnow()
        return await self._update_pending(
            job_id,
            "completed",
            status=MintStatus.COMPLETED,
            transaction_digest=transaction_digest,
            error_message=None,
            completed_at=now,
            updated_at=now,
        )

    async def mark_failed(self, job_id: int, retry_count: int, error_message: str) -> bool:
        """Set a pending job to terminally failed."""
        return await self._update_pending(
            job_id,
            "failed",
            status=MintStatus.FAILED,
            retry_count=retry_count,
            error_message=error_message,
            updated_at=utcnow(),
        )

    async def requeue(self, job_id: int, retry_count: int, error_message: str) -> bool:
        """Keep a job pending with an incremented retry count."""
        return await self._update_pending(
            job_id,
            "requeue",
            retry_count=retry_count,
            error_message=error_message,
            updated_at=utcnow(),
        )

    async def _update_pending(self, job_id: int, operation: str, **values) -> bool:
        stmt = (
            update(MintingRecord)
            .where(
                MintingRecord.id == job_id,
                MintingRecord.status == MintStatus.PENDING,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        try:
            async with self.database.session() as db:
                result = await db.execute(stmt)
                updated = result.rowcount == 1
        except SQLAlchemyError as e:
            self.logger.error(
                "Error updating mint record",
                job_id=job_id,
                operation=operation,
                error=str(e)
            )
            raise JobStoreError(
                f"Failed to {operation} mint record {job_id}: {e}",
                {"job_id": job_id, "operation": operation}
            ) from e

        if not updated:
            self.logger.warning(
                "Mint record no longer pending, update skipped",
                job_id=job_id,
                operation=operation
            )
        return updated

    async def status_breakdown(self) -> Dict[str, int]:
        """Count rows per status, read fresh from the table."""
        try:
            async with self.database.session() as db:
                result = await db.execute(
                    select(MintingRecord.status, func.count(MintingRecord.id))
                    .group_by(MintingRecord.status)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            self.logger.error("Error getting stats", error=str(e))
            raise DatabaseError(f"Failed to read status breakdown: {e}") from e

        breakdown = {status.value: 0 for status in MintStatus}
        for status, count in rows:
            breakdown[MintStatus(status).value] = int(count)
        return breakdown

    async def create_job(
        self,
        mint_id: str,
        card_type: str,
        level: int,
        title: str,
        recipient: str,
        rarity: str,
        rank: Optional[int] = None,
    ) -> MintingRecord:
        """Insert a new pending job, the way the producer does."""
        record = MintingRecord(
            mint_id=mint_id,
            card_type=card_type,
            level=level,
            title=title,
            recipient=recipient,
            rarity=rarity,
            rank=rank,
            status=MintStatus.PENDING,
            retry_count=0,
        )
        try:
            async with self.database.session() as db:
                db.add(record)
                await db.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to create mint record {mint_id}: {e}") from e
        return record

    async def get_by_mint_id(self, mint_id: str) -> MintingRecord:
        """Load one record by its caller-assigned id."""
        try:
            async with self.database.session() as db:
                result = await db.execute(
                    select(MintingRecord).where(MintingRecord.mint_id == mint_id)
                )
                record = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load mint record {mint_id}: {e}") from e
        if record is None:
            raise MintingRecordNotFoundError(mint_id)
        return record

    async def recent_records(self, limit: int = 20) -> List[MintingRecord]:
        """Most recently created records, newest first."""
        try:
            async with self.database.session() as db:
                result = await db.execute(
                    select(MintingRecord)
                    .order_by(MintingRecord.created_at.desc(), MintingRecord.id.desc())
                    .limit(limit)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load recent mint records: {e}") from e

    async def delete_pending(self) -> int:
        """Delete pending rows. Operator tooling only, never used by the worker."""
        try:
            async with self.database.session() as db:
                result = await db.execute(
                    delete(MintingRecord)
                    .where(MintingRecord.status == MintStatus.PENDING)
                    .execution_options(synchronize_session=False)
                )
                deleted = result.rowcount
        except SQLAlchemyError as e:
            self.logger.error("Error deleting pending mint records", error=str(e))
            raise DatabaseError(f"Failed to delete pending mint records: {e}") from e
        self.logger.info("Deleted pending mint records", count=deleted)
        return deleted
