"""
Tests for progress reporting.
"""

from unittest.mock import AsyncMock

import pytest

from mint_worker.core.exceptions import DatabaseError
from mint_worker.services.minting.core import ProgressReporter, RecordedTransition, WorkerStats


@pytest.mark.asyncio
async def test_report_combines_run_and_store_counts(repository, make_job):
    first = await make_job()
    await make_job()
    await repository.mark_completed(first.id, "0x1")

    stats = WorkerStats()
    stats.record(RecordedTransition.COMPLETED)
    stats.record(RecordedTransition.REQUEUED)

    report = await ProgressReporter(repository).report(stats)

    assert report.processed == 2
    assert report.completed == 1
    assert report.retries == 1
    assert report.failed == 0
    assert report.database == {"pending": 1, "completed": 1, "failed": 0}


@pytest.mark.asyncio
async def test_report_survives_store_errors():
    repository = AsyncMock()
    repository.status_breakdown.side_effect = DatabaseError("connection lost")

    report = await ProgressReporter(repository).report(WorkerStats(), final=True)

    assert report.database == {}
    assert report.processed == 0
