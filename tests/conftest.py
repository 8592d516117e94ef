"""
Shared fixtures: in-memory job store, worker config and a scripted submitter.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Union

import pytest

from mint_worker.core.config import WorkerConfig
from mint_worker.core.database import Database
from mint_worker.services.minting.database import MintJobRepository
from mint_worker.services.minting.transactions.base import TransactionSubmitter
from mint_worker.services.minting.types import MintJob, SubmissionResult


Script = Union[SubmissionResult, Exception, Callable[[MintJob], SubmissionResult]]


class FakeSubmitter(TransactionSubmitter):
    """
    Submitter driven by a per-mint_id script.

    Each script entry is consumed in order; once exhausted the last entry
    repeats. Unscripted jobs succeed with a digest derived from their mint_id.
    """

    def __init__(self, delay: float = 0.0):
        self.scripts: Dict[str, List[Script]] = {}
        self.calls: List[MintJob] = []
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.initialized = False
        self.closed = False
        self.on_submit: Optional[Callable[[MintJob], None]] = None

    def script(self, mint_id: str, *outcomes: Script) -> None:
        self.scripts[mint_id] = list(outcomes)

    async def initialize(self) -> None:
        self.initialized = True

    async def close(self) -> None:
        self.closed = True

    async def submit(self, job: MintJob) -> SubmissionResult:
        self.calls.append(job)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.on_submit:
                self.on_submit(job)
            await asyncio.sleep(self.delay)

            outcomes = self.scripts.get(job.mint_id)
            if not outcomes:
                return SubmissionResult.ok(f"digest-{job.mint_id}")
            outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]

            if isinstance(outcome, Exception):
                raise outcome
            if callable(outcome):
                return outcome(job)
            return outcome
        finally:
            self.in_flight -= 1

    def submitted_ids(self) -> List[str]:
        return [job.mint_id for job in self.calls]


@pytest.fixture
def isolated_logging():
    """Remove handlers installed by setup_logging once the test ends."""
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def worker_config():
    return WorkerConfig(
        batch_size=100,
        max_retries=3,
        retry_delay=0,
        poll_interval=0,
        concurrency_limit=10,
        empty_poll_threshold=3,
    )


@pytest.fixture
def repository(database, worker_config):
    return MintJobRepository(database, worker_config)


@pytest.fixture
def submitter():
    return FakeSubmitter()


@pytest.fixture
def make_job(repository):
    """Insert a pending minting record and return it."""
    counter = {"n": 0}

    async def _make(mint_id: Optional[str] = None, **overrides):
        counter["n"] += 1
        fields = {
            "mint_id": mint_id or f"mint-{counter['n']:03d}",
            "card_type": "Brella",
            "level": 1,
            "title": "Inspector Gadget's Brella",
            "recipient": "0xabc",
            "rarity": "Common",
            "rank": None,
        }
        fields.update(overrides)
        return await repository.create_job(**fields)

    return _make
