"""
Concurrency-bounded executor for mint submissions.
"""

import asyncio
from typing import Iterator, List, Sequence

import structlog

from mint_worker.core.config import WorkerConfig
from mint_worker.services.minting.transactions.base import TransactionSubmitter
from mint_worker.services.minting.types import JobOutcome, MintJob, SubmissionResult


logger = structlog.get_logger(__name__)


class BoundedExecutor:
    """
    Runs jobs through the submitter with at most `concurrency_limit`
    submissions in flight.

    A batch is split into chunks no larger than the limit. All jobs of a chunk
    run concurrently behind a semaphore and the chunk is fully drained before
    `execute` returns, so callers can record outcomes before starting the
    next chunk. A failing job never affects its siblings.
    """

    def __init__(self, submitter: TransactionSubmitter, config: WorkerConfig):
        self.submitter = submitter
        self.concurrency_limit = config.concurrency_limit
        self._semaphore = asyncio.Semaphore(self.concurrency_limit)
        self.logger = logger.bind(service="bounded_executor")

    def chunks(self, jobs: Sequence[MintJob]) -> Iterator[List[MintJob]]:
        """Split jobs into order-preserving chunks of at most the concurrency limit."""
        for i in range(0, len(jobs), self.concurrency_limit):
            yield list(jobs[i:i + self.concurrency_limit])

    async def execute(self, jobs: Sequence[MintJob]) -> List[JobOutcome]:
        """
        Submit jobs concurrently and collect one outcome per job.

        Returns:
            Outcomes in the same order as the input jobs
        """
        if not jobs:
            return []

        results = await asyncio.gather(
            *(self._run_one(job) for job in jobs),
            return_exceptions=True
        )

        outcomes = []
        for job, result in zip(jobs, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                self.logger.error(
                    "Unexpected error processing mint",
                    mint_id=job.mint_id,
                    error=str(result)
                )
                result = SubmissionResult.failure(str(result) or type(result).__name__)
            outcomes.append(JobOutcome(job=job, result=result))

        succeeded = sum(1 for o in outcomes if o.result.is_definitive_success)
        self.logger.info(
            "Chunk executed",
            size=len(outcomes),
            succeeded=succeeded,
            failed=len(outcomes) - succeeded
        )
        return outcomes

    async def _run_one(self, job: MintJob) -> SubmissionResult:
        async with self._semaphore:
            result = await self.submitter.submit(job)

        if result.success and not result.reference:
            return SubmissionResult.failure("Submitter reported success without a transaction reference")
        return result
