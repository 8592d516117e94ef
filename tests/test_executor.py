"""
Tests for the concurrency-bounded executor.
"""

import pytest

from mint_worker.core.config import WorkerConfig
from mint_worker.services.minting.core import BoundedExecutor
from mint_worker.services.minting.types import MintJob, SubmissionResult

from .conftest import FakeSubmitter


def job(n: int) -> MintJob:
    return MintJob(
        id=n,
        mint_id=f"mint-{n:03d}",
        card_type="Laser",
        level=2,
        title="Inspector Gadget's Laser",
        recipient="0xabc",
        rarity="Rare",
        rank=None,
        retry_count=0,
    )


def test_chunks_never_exceed_concurrency_limit():
    executor = BoundedExecutor(FakeSubmitter(), WorkerConfig(concurrency_limit=10))
    jobs = [job(n) for n in range(25)]

    chunks = list(executor.chunks(jobs))

    assert [len(c) for c in chunks] == [10, 10, 5]
    assert [j for c in chunks for j in c] == jobs


def test_chunks_of_empty_batch():
    executor = BoundedExecutor(FakeSubmitter(), WorkerConfig(concurrency_limit=4))
    assert list(executor.chunks([])) == []


@pytest.mark.asyncio
async def test_execute_bounds_in_flight_submissions():
    submitter = FakeSubmitter(delay=0.01)
    executor = BoundedExecutor(submitter, WorkerConfig(concurrency_limit=3))

    outcomes = await executor.execute([job(n) for n in range(7)])

    assert len(outcomes) == 7
    assert submitter.max_in_flight <= 3
    assert submitter.max_in_flight > 1


@pytest.mark.asyncio
async def test_execute_preserves_input_order():
    submitter = FakeSubmitter()
    executor = BoundedExecutor(submitter, WorkerConfig(concurrency_limit=5))
    jobs = [job(n) for n in range(5)]

    outcomes = await executor.execute(jobs)

    assert [o.job for o in outcomes] == jobs
    assert all(o.result.reference == f"digest-{o.job.mint_id}" for o in outcomes)


@pytest.mark.asyncio
async def test_failing_job_does_not_affect_siblings():
    submitter = FakeSubmitter()
    submitter.script("mint-001", RuntimeError("rpc exploded"))
    submitter.script("mint-002", SubmissionResult.failure("insufficient gas"))
    executor = BoundedExecutor(submitter, WorkerConfig(concurrency_limit=4))

    outcomes = await executor.execute([job(n) for n in range(4)])
    results = {o.job.mint_id: o.result for o in outcomes}

    assert results["mint-000"].is_definitive_success
    assert results["mint-003"].is_definitive_success
    assert not results["mint-001"].success
    assert results["mint-001"].error == "rpc exploded"
    assert results["mint-002"].error == "insufficient gas"


@pytest.mark.asyncio
async def test_success_without_reference_is_a_failure():
    submitter = FakeSubmitter()
    submitter.script("mint-000", SubmissionResult(success=True))
    executor = BoundedExecutor(submitter, WorkerConfig(concurrency_limit=2))

    [outcome] = await executor.execute([job(0)])

    assert not outcome.result.success
    assert "without a transaction reference" in outcome.result.error


@pytest.mark.asyncio
async def test_execute_empty_chunk():
    submitter = FakeSubmitter()
    executor = BoundedExecutor(submitter, WorkerConfig())

    assert await executor.execute([]) == []
    assert submitter.calls == []
