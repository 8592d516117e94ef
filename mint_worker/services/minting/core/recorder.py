"""
Retry/outcome recorder - the only writer of job lifecycle state.
"""

import structlog

from mint_worker.core.config import WorkerConfig
from mint_worker.core.exceptions import JobStoreError
from mint_worker.services.minting.database.job_repository import MintJobRepository
from mint_worker.services.minting.types import MintJob, RecordedTransition, SubmissionResult


logger = structlog.get_logger(__name__)


class OutcomeRecorder:
    """Applies attempt outcomes to the job store with the retry policy."""

    def __init__(self, repository: MintJobRepository, config: WorkerConfig):
        self.repository = repository
        self.max_retries = config.max_retries
        self.logger = logger.bind(service="outcome_recorder")

    async def apply(self, job: MintJob, result: SubmissionResult) -> RecordedTransition:
        """
        Record one attempt.

        Success completes the job. A failure increments the retry count and
        either requeues the job or, once the count reaches max_retries, fails
        it terminally. Database errors propagate as JobStoreError.
        """
        try:
            if result.is_definitive_success:
                applied = await self.repository.mark_completed(job.id, result.reference)
                transition = RecordedTransition.COMPLETED
            else:
                error_message = result.error or "Unknown error"
                new_retry_count = job.retry_count + 1

                if new_retry_count >= self.max_retries:
                    applied = await self.repository.mark_failed(job.id, new_retry_count, error_message)
                    transition = RecordedTransition.FAILED
                else:
                    applied = await self.repository.requeue(job.id, new_retry_count, error_message)
                    transition = RecordedTransition.REQUEUED
        except JobStoreError:
            self.logger.error("Failed to record mint outcome", mint_id=job.mint_id, job_id=job.id)
            raise

        if not applied:
            return RecordedTransition.SKIPPED

        if transition == RecordedTransition.COMPLETED:
            self.logger.info("Mint completed", mint_id=job.mint_id, digest=result.reference)
        elif transition == RecordedTransition.FAILED:
            self.logger.warning(
                "Mint failed permanently",
                mint_id=job.mint_id,
                retry_count=job.retry_count + 1,
                error=result.error
            )
        else:
            self.logger.info(
                "Mint requeued",
                mint_id=job.mint_id,
                retry_count=job.retry_count + 1,
                max_retries=self.max_retries,
                error=result.error
            )
        return transition
