"""
Core minting worker components.
"""

from mint_worker.services.minting.types import (
    JobOutcome,
    MintJob,
    ProgressReport,
    RecordedTransition,
    SubmissionResult,
    WorkerState,
    WorkerStats,
)
from .executor import BoundedExecutor
from .recorder import OutcomeRecorder
from .reporter import ProgressReporter
from .worker import MintingWorker

__all__ = [
    "JobOutcome",
    "MintJob",
    "ProgressReport",
    "RecordedTransition",
    "SubmissionResult",
    "WorkerState",
    "WorkerStats",
    "BoundedExecutor",
    "OutcomeRecorder",
    "ProgressReporter",
    "MintingWorker",
]
