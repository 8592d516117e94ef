"""
Dry run submitter - exercises the worker without blockchain access.
"""

import random
from typing import Optional

import structlog

from mint_worker.core.config import SolanaConfig
from mint_worker.services.minting.types import MintJob, SubmissionResult
from .base import TransactionSubmitter


logger = structlog.get_logger(__name__)


class DryRunSubmitter(TransactionSubmitter):
    """Logs the mint that would be sent and simulates its outcome."""

    def __init__(self, failure_rate: float = 0.1, rng: Optional[random.Random] = None):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self.failure_rate = failure_rate
        self.rng = rng or random.Random()
        self.logger = logger.bind(service="dry_run_submitter", dry_run=True)

    async def initialize(self) -> None:
        self.logger.info(
            "Dry run mode - no blockchain transactions will be executed",
            failure_rate=self.failure_rate
        )

    async def submit(self, job: MintJob) -> SubmissionResult:
        args = job.mint_arguments()
        self.logger.info(
            "Would mint card",
            mint_id=job.mint_id,
            call=SolanaConfig.MINT_INSTRUCTION,
            **args
        )

        if self.rng.random() < self.failure_rate:
            self.logger.info("Would fail (simulated error)", mint_id=job.mint_id)
            return SubmissionResult.failure("Simulated failure")

        digest = f"dryrun{self.rng.getrandbits(64):016x}"
        self.logger.info("Would succeed", mint_id=job.mint_id, digest=digest)
        return SubmissionResult.ok(digest)
