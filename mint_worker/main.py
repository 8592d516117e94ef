"""
Main entry point for the minting worker.
Wires settings, job store and submitter together and runs until drained.
"""

import asyncio
import signal
import sys
from typing import Optional

import structlog

from mint_worker.core.config import Settings, WorkerConfig, get_settings
from mint_worker.core.database import Database
from mint_worker.core.exceptions import MintWorkerException
from mint_worker.core.logging import setup_logging
from mint_worker.services.minting.core import MintingWorker
from mint_worker.services.minting.database import MintJobRepository
from mint_worker.services.minting.transactions import (
    DryRunSubmitter,
    SolanaMintSubmitter,
    TransactionSubmitter,
)

logger = structlog.get_logger(__name__)


def build_submitter(settings: Settings, dry_run: bool = False) -> TransactionSubmitter:
    if dry_run:
        return DryRunSubmitter(failure_rate=settings.dry_run_failure_rate)
    return SolanaMintSubmitter(settings)


def build_worker(
    settings: Settings,
    dry_run: bool = False,
    database: Optional[Database] = None,
    submitter: Optional[TransactionSubmitter] = None,
) -> MintingWorker:
    """Assemble a worker from settings. Configuration errors surface here."""
    config = WorkerConfig.from_settings(settings)
    database = database or Database.from_settings(settings)
    repository = MintJobRepository(database, config)
    return MintingWorker(
        config,
        repository,
        submitter or build_submitter(settings, dry_run),
        database=database,
    )


async def run_worker(
    settings: Optional[Settings] = None,
    dry_run: bool = False,
    worker: Optional[MintingWorker] = None,
) -> int:
    """
    Run the worker to completion.

    Returns:
        Process exit code: 0 when drained or stopped, 1 on a fatal error
    """
    settings = settings or get_settings()
    setup_logging(settings)

    try:
        worker = worker or build_worker(settings, dry_run=dry_run)
    except MintWorkerException as e:
        logger.error("Invalid worker configuration", error=e.message, code=e.code)
        return 1

    loop = asyncio.get_running_loop()
    handled = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, worker.request_stop)
            handled.append(sig)
        except (NotImplementedError, ValueError):
            logger.debug("Signal handlers not supported", signal=sig.name)

    logger.info("Starting minting worker", dry_run=dry_run, environment=settings.environment)

    try:
        stats = await worker.run()
    except MintWorkerException as e:
        logger.error("Worker failed", error=e.message, code=e.code, details=e.details)
        return 1
    except Exception as e:
        logger.error("Worker failed", error=str(e))
        return 1
    finally:
        for sig in handled:
            loop.remove_signal_handler(sig)

    logger.info(
        "Minting worker finished",
        processed=stats.total_processed,
        completed=stats.completed,
        failed=stats.failed,
        retries=stats.retries
    )
    return 0


def main(dry_run: bool = False) -> None:
    sys.exit(asyncio.run(run_worker(dry_run=dry_run)))


if __name__ == "__main__":
    main(dry_run="--dry-run" in sys.argv[1:])
