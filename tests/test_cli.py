"""
Tests for the command line interface.
"""

import asyncio

import pytest
from typer.testing import CliRunner

from mint_worker.cli import app
from mint_worker.core.config import WorkerConfig, get_settings
from mint_worker.core.database import Database
from mint_worker.services.minting.database import MintJobRepository
from mint_worker.services.minting.seed import CARD_TYPES, TEST_WALLETS

runner = CliRunner()


@pytest.fixture
def database_url(tmp_path, monkeypatch, isolated_logging):
    url = f"sqlite+aiosqlite:///{tmp_path / 'mints.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("POLL_INTERVAL", "0")
    monkeypatch.setenv("DRY_RUN_FAILURE_RATE", "0")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def read_store(url: str):
    async def _read():
        database = Database(url)
        try:
            repository = MintJobRepository(database, WorkerConfig())
            return await repository.status_breakdown(), await repository.recent_records(100)
        finally:
            await database.close()

    return asyncio.run(_read())


def test_seed_and_stats(database_url):
    assert runner.invoke(app, ["init-db"]).exit_code == 0

    result = runner.invoke(app, ["seed", "4"])
    assert result.exit_code == 0
    assert "Successfully created 4" in result.output

    breakdown, records = read_store(database_url)
    assert breakdown == {"pending": 4, "completed": 0, "failed": 0}
    for record in records:
        assert record.card_type in CARD_TYPES
        assert record.recipient in TEST_WALLETS
        assert record.title == f"Inspector Gadget's {record.card_type}"
        assert record.rank == record.level
        assert len(record.mint_id) == 32

    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 0
    assert "pending" in result.output


def test_dry_run_drains_store(database_url):
    runner.invoke(app, ["init-db"])
    runner.invoke(app, ["seed", "3"])

    result = runner.invoke(app, ["run", "--dry-run"])

    assert result.exit_code == 0
    breakdown, records = read_store(database_url)
    assert breakdown == {"pending": 0, "completed": 3, "failed": 0}
    assert all(r.transaction_digest.startswith("dryrun") for r in records)

    result = runner.invoke(app, ["show", "--limit", "2"])
    assert result.exit_code == 0
    assert "Minting Records" in result.output


def test_clear_pending(database_url):
    runner.invoke(app, ["init-db"])
    runner.invoke(app, ["seed", "2"])

    result = runner.invoke(app, ["clear"], input="n\n")
    assert "cancelled" in result.output
    assert read_store(database_url)[0]["pending"] == 2

    result = runner.invoke(app, ["clear", "--yes"])
    assert result.exit_code == 0
    assert "Cleared 2" in result.output
    assert read_store(database_url)[0]["pending"] == 0


def test_run_without_solana_credentials_fails(database_url, monkeypatch):
    for name in ("SOLANA_ADMIN_PRIVATE_KEY", "SOLANA_PROGRAM_ID", "SOLANA_ADMIN_CAP_ID"):
        monkeypatch.delenv(name, raising=False)
    runner.invoke(app, ["init-db"])

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 1


@pytest.mark.parametrize("args", [["show"], ["clear", "--yes"]])
def test_missing_table_reports_error(database_url, args):
    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "Error" in result.output
