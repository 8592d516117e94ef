"""
Types for minting job processing.
"""

from datetime import datetime, timezone
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any

from mint_worker.models import MintingRecord


class WorkerState(Enum):
    """Run loop state."""
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class RecordedTransition(Enum):
    """What the recorder did with an attempt outcome."""
    COMPLETED = "completed"
    REQUEUED = "requeued"
    FAILED = "failed"
    SKIPPED = "skipped"  # row was no longer pending


@dataclass(frozen=True)
class MintJob:
    """Immutable snapshot of a pending minting record."""
    id: int
    mint_id: str
    card_type: str
    level: int
    title: str
    recipient: str
    rarity: str
    rank: Optional[int]
    retry_count: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: MintingRecord) -> "MintJob":
        return cls(
            id=record.id,
            mint_id=record.mint_id,
            card_type=record.card_type,
            level=record.level,
            title=record.title,
            recipient=record.recipient,
            rarity=record.rarity,
            rank=record.rank,
            retry_count=record.retry_count or 0,
            created_at=record.created_at,
        )

    def mint_arguments(self) -> Dict[str, Any]:
        """Payload handed to the transaction submitter."""
        return {
            "card_type": self.card_type,
            "level": self.level,
            "title": self.title,
            "recipient": self.recipient,
            "rarity": self.rarity,
            "rank": self.rank or 1,
        }


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one submission attempt."""
    success: bool
    reference: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, reference: str) -> "SubmissionResult":
        return cls(success=True, reference=reference)

    @classmethod
    def failure(cls, error: str) -> "SubmissionResult":
        return cls(success=False, error=error or "Unknown error")

    @property
    def is_definitive_success(self) -> bool:
        """Only a success carrying a reference counts as minted."""
        return self.success and bool(self.reference)


@dataclass(frozen=True)
class JobOutcome:
    """A job paired with the result of its attempt."""
    job: MintJob
    result: SubmissionResult


@dataclass
class WorkerStats:
    """Running counters for one worker run."""
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    end_time: Optional[datetime] = None
    total_processed: int = 0
    completed: int = 0
    failed: int = 0
    retries: int = 0
    skipped: int = 0
    batches: int = 0
    polls: int = 0

    @property
    def runtime_seconds(self) -> float:
        end = self.end_time or datetime.now(timezone.utc)
        return (end - self.start_time).total_seconds()

    def record(self, transition: RecordedTransition) -> None:
        self.total_processed += 1
        if transition == RecordedTransition.COMPLETED:
            self.completed += 1
        elif transition == RecordedTransition.FAILED:
            self.failed += 1
        elif transition == RecordedTransition.REQUEUED:
            self.retries += 1
        else:
            self.skipped += 1


@dataclass
class ProgressReport:
    """Snapshot emitted at every iteration boundary."""
    runtime_seconds: float
    processed: int
    completed: int
    failed: int
    retries: int
    database: Dict[str, int] = field(default_factory=dict)
