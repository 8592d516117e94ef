"""
Command line interface for the minting worker and its job store.
"""

import asyncio
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from mint_worker.core.config import WorkerConfig, get_settings
from mint_worker.core.database import Database, create_database
from mint_worker.core.exceptions import MintWorkerException
from mint_worker.core.logging import setup_logging
from mint_worker.main import run_worker
from mint_worker.models import MintStatus
from mint_worker.services.minting.database import MintJobRepository
from mint_worker.services.minting.seed import seed_test_mints

console = Console()
app = typer.Typer(help="NFT minting worker commands")

STATUS_STYLES = {
    MintStatus.PENDING: "yellow",
    MintStatus.COMPLETED: "green",
    MintStatus.FAILED: "red",
}


def _open(database_url: Optional[str]) -> Tuple[Database, MintJobRepository]:
    settings = get_settings()
    setup_logging(settings)
    database = create_database(settings, database_url)
    return database, MintJobRepository(database, WorkerConfig.from_settings(settings))


def _short(value: Optional[str], length: int = 12) -> str:
    if not value:
        return "-"
    return value if len(value) <= length else f"{value[:length]}..."


DatabaseUrlOption = typer.Option(None, "--database-url", help="Override DATABASE_URL")


@app.command()
def run(dry_run: bool = typer.Option(False, "--dry-run", help="Simulate mints without sending transactions")):
    """Run the minting worker until the job store is drained."""
    exit_code = asyncio.run(run_worker(get_settings(), dry_run=dry_run))
    raise typer.Exit(code=exit_code)


@app.command("init-db")
def init_db(database_url: Optional[str] = DatabaseUrlOption):
    """Create the minting_records table."""
    async def _init():
        database, _ = _open(database_url)
        try:
            await database.create_tables()
        finally:
            await database.close()
        console.print("✅ Database initialized successfully!")

    asyncio.run(_init())


@app.command()
def seed(
    count: int = typer.Argument(10, min=1, help="Number of test mints to create"),
    database_url: Optional[str] = DatabaseUrlOption,
):
    """Seed the job store with random pending test mints."""
    console.print(f"🔨 Creating {count} test minting records...")

    async def _seed():
        database, repository = _open(database_url)
        try:
            records = await seed_test_mints(repository, count)
        finally:
            await database.close()

        for record in records:
            console.print(
                f"✅ Created: {record.card_type} ({record.rarity}, Level {record.level}) "
                f"→ {_short(record.recipient, 10)}"
            )
        console.print(f"🎉 Successfully created {len(records)} test minting records!")

    try:
        asyncio.run(_seed())
    except MintWorkerException as e:
        console.print(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)


@app.command()
def show(
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of records to show"),
    database_url: Optional[str] = DatabaseUrlOption,
):
    """Show the most recent minting records."""
    async def _show():
        database, repository = _open(database_url)
        try:
            return await repository.recent_records(limit)
        finally:
            await database.close()

    try:
        records = asyncio.run(_show())
    except MintWorkerException as e:
        console.print(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)

    if not records:
        console.print("No minting records found")
        return

    table = Table(title="Minting Records")
    table.add_column("ID", justify="right")
    table.add_column("Mint ID", style="cyan")
    table.add_column("Card")
    table.add_column("Rarity")
    table.add_column("Level", justify="right")
    table.add_column("Recipient")
    table.add_column("Status")
    table.add_column("Retries", justify="right")
    table.add_column("Digest / Error")

    for record in records:
        status = MintStatus(record.status)
        table.add_row(
            str(record.id),
            _short(record.mint_id),
            record.card_type,
            record.rarity,
            str(record.level),
            _short(record.recipient, 10),
            f"[{STATUS_STYLES[status]}]{status.value}[/]",
            str(record.retry_count),
            _short(record.transaction_digest or record.error_message, 24),
        )

    console.print(table)


@app.command()
def stats(database_url: Optional[str] = DatabaseUrlOption):
    """Show the job store status breakdown."""
    async def _stats():
        database, repository = _open(database_url)
        try:
            return await repository.status_breakdown()
        finally:
            await database.close()

    try:
        breakdown = asyncio.run(_stats())
    except MintWorkerException as e:
        console.print(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)

    table = Table(title="Minting Status")
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right")
    for status in MintStatus:
        table.add_row(status.value, str(breakdown.get(status.value, 0)))
    table.add_row("total", str(sum(breakdown.values())), style="bold")

    console.print(table)


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    database_url: Optional[str] = DatabaseUrlOption,
):
    """Delete all pending minting records."""
    if not yes:
        confirm = typer.confirm("Are you sure you want to delete all pending records?")
        if not confirm:
            console.print("❌ Operation cancelled")
            return

    async def _clear():
        database, repository = _open(database_url)
        try:
            return await repository.delete_pending()
        finally:
            await database.close()

    try:
        deleted = asyncio.run(_clear())
    except MintWorkerException as e:
        console.print(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)

    console.print(f"🗑️ Cleared {deleted} pending records")


if __name__ == "__main__":
    app()
