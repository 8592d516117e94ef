"""
Transaction submitter interface.
"""

from abc import ABC, abstractmethod

from mint_worker.services.minting.types import MintJob, SubmissionResult


class TransactionSubmitter(ABC):
    """
    Submits one mint operation and reports a definitive outcome.

    Implementations return a failed SubmissionResult instead of raising for
    expected failures (rejected transactions, RPC errors, timeouts).
    """

    async def initialize(self) -> None:
        """Validate credentials and open connections."""

    async def close(self) -> None:
        """Release connections."""

    @abstractmethod
    async def submit(self, job: MintJob) -> SubmissionResult:
        """Submit the mint for one job."""
