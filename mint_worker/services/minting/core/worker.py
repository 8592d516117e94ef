"""
Minting worker run loop.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import structlog

from mint_worker.core.config import WorkerConfig
from mint_worker.core.database import Database
from mint_worker.core.exceptions import WorkerError
from mint_worker.services.minting.database.job_repository import MintJobRepository
from mint_worker.services.minting.transactions.base import TransactionSubmitter
from mint_worker.services.minting.types import WorkerState, WorkerStats
from .executor import BoundedExecutor
from .recorder import OutcomeRecorder
from .reporter import ProgressReporter


logger = structlog.get_logger(__name__)


class MintingWorker:
    """
    Drains pending minting records until the job store is observed empty.

    Each iteration fetches a batch, executes it chunk by chunk and records
    every outcome of a chunk before the next chunk starts. The loop stops
    after `empty_poll_threshold` consecutive empty polls, or cooperatively
    after `request_stop()`: the in-flight chunk is always finished and
    recorded first.

    Exactly one worker may run against a given job store; there is no
    claim step, so two instances would process the same pending rows.
    """

    def __init__(
        self,
        config: WorkerConfig,
        repository: MintJobRepository,
        submitter: TransactionSubmitter,
        database: Optional[Database] = None,
    ):
        self.config = config
        self.repository = repository
        self.submitter = submitter
        self.database = database
        self.logger = logger.bind(service="minting_worker")

        self.executor = BoundedExecutor(submitter, config)
        self.recorder = OutcomeRecorder(repository, config)
        self.reporter = ProgressReporter(repository)

        self.state = WorkerState.RUNNING
        self.stats = WorkerStats()
        self.empty_polls = 0
        self._stop_event = asyncio.Event()
        self._active = False

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def request_stop(self) -> None:
        """Ask the loop to stop after the in-flight chunk."""
        if not self.stop_requested:
            self.logger.info("Shutting down minting worker")
        self._stop_event.set()

    async def initialize(self) -> None:
        """Connect to the job store and the submitter. Failures here are fatal."""
        self.logger.info(
            "Initializing minting worker",
            batch_size=self.config.batch_size,
            max_retries=self.config.max_retries,
            concurrency_limit=self.config.concurrency_limit,
            poll_interval=self.config.poll_interval,
            apply_retry_delay=self.config.apply_retry_delay
        )
        if self.database:
            await self.database.connect()
        await self.submitter.initialize()

    async def shutdown(self) -> None:
        """Release submitter and job store connections."""
        await self.submitter.close()
        if self.database:
            await self.database.close()

    async def process_batch(self) -> int:
        """
        Fetch one batch and process it.

        Returns:
            Number of jobs attempted; 0 means nothing ran, either because the
            poll found no pending work or because a stop was already requested
        """
        jobs = await self.repository.fetch_pending(self.config.batch_size)
        self.stats.polls += 1

        if not jobs:
            return 0

        if self.stop_requested:
            self.logger.info("Stop requested, leaving fetched jobs pending", size=len(jobs))
            return 0

        self.logger.info("Processing batch", size=len(jobs))
        self.stats.batches += 1

        attempted = 0
        for chunk in self.executor.chunks(jobs):
            if self.stop_requested:
                self.logger.info("Stop requested, leaving remaining jobs pending")
                break

            outcomes = await self.executor.execute(chunk)
            for outcome in outcomes:
                transition = await self.recorder.apply(outcome.job, outcome.result)
                self.stats.record(transition)
            attempted += len(outcomes)

        return attempted

    async def run(self) -> WorkerStats:
        """
        Run until drained or stopped.

        Returns:
            Final run statistics
        """
        if self._active:
            raise WorkerError("Minting worker is already running")

        self._active = True
        self.stats = WorkerStats()
        self.state = WorkerState.RUNNING
        self.empty_polls = 0
        initialized = False

        try:
            await self.initialize()
            initialized = True
            self.logger.info("Starting minting worker loop")

            while not self.stop_requested:
                attempted = await self.process_batch()
                if attempted == 0 and self.stop_requested:
                    break

                if attempted == 0:
                    self.empty_polls += 1
                    if self.empty_polls >= self.config.empty_poll_threshold:
                        self.state = WorkerState.STOPPED
                        self.logger.info(
                            "No more pending mints found",
                            empty_polls=self.empty_polls
                        )
                    else:
                        self.state = WorkerState.DRAINING
                else:
                    self.empty_polls = 0
                    self.state = WorkerState.RUNNING

                await self.reporter.report(self.stats)

                if self.state == WorkerState.STOPPED:
                    break

                await self._wait(self.config.poll_interval)

        except Exception as e:
            self.logger.error("Fatal error in minting worker", error=str(e))
            raise

        finally:
            self.state = WorkerState.STOPPED
            self.stats.end_time = datetime.now(timezone.utc)
            if initialized:
                await self.reporter.report(self.stats, final=True)
            await self.shutdown()
            self._active = False

        return self.stats

    async def _wait(self, seconds: float) -> None:
        """Sleep between polls, waking early on a stop request."""
        if seconds <= 0:
            await asyncio.sleep(0)
            return

        self.logger.debug("Waiting before next poll", seconds=seconds)
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
