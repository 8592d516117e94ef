"""
Progress reporting for the minting worker.
"""

import structlog

from mint_worker.core.exceptions import DatabaseError
from mint_worker.services.minting.database.job_repository import MintJobRepository
from mint_worker.services.minting.types import ProgressReport, WorkerStats


logger = structlog.get_logger(__name__)


class ProgressReporter:
    """Combines run counters with a fresh status breakdown from the job store."""

    def __init__(self, repository: MintJobRepository):
        self.repository = repository
        self.logger = logger.bind(service="progress_reporter")

    async def report(self, stats: WorkerStats, final: bool = False) -> ProgressReport:
        try:
            breakdown = await self.repository.status_breakdown()
        except DatabaseError as e:
            self.logger.warning("Could not read job store stats", error=str(e))
            breakdown = {}

        report = ProgressReport(
            runtime_seconds=round(stats.runtime_seconds, 1),
            processed=stats.total_processed,
            completed=stats.completed,
            failed=stats.failed,
            retries=stats.retries,
            database=breakdown,
        )

        self.logger.info(
            "Final report" if final else "Progress report",
            runtime_seconds=report.runtime_seconds,
            processed=report.processed,
            completed=report.completed,
            failed=report.failed,
            retries=report.retries,
            db_pending=breakdown.get("pending", 0),
            db_completed=breakdown.get("completed", 0),
            db_failed=breakdown.get("failed", 0)
        )
        return report
