"""Script to import transactions from a CSV file into the database."""

import asyncio
import io
import logging
from pathlib import Path

import typer

from components.core import config
from components.core.database import DatabaseManager
from components.core.log_config import configure_logging
from components.transaction.repository import TransactionRepository

logger = logging.getLogger(__name__)

app = typer.Typer(help="Import transactions from a CSV file.", no_args_is_help=True)


async def import_file(csv_path: Path, manager: DatabaseManager) -> bool:
    """Import one CSV file; nothing is written if any row is invalid."""
    if not csv_path.exists():
        logger.error("File not found at %s", csv_path)
        return False

    file_content = csv_path.read_bytes()
    logger.info("Reading %s (%d bytes)", csv_path, len(file_content))

    async with manager.get_db() as session:
        repo = TransactionRepository(session)
        success, message, errors, imported = await repo.import_from_csv(io.BytesIO(file_content))

    if not success:
        logger.error("Import failed: %s", message)
        for error in errors:
            logger.error("Row %s: %s", error["row"], error["message"])
        return False

    logger.info("%s", message)
    return True


async def run_import(csv_path: Path) -> bool:
    manager = DatabaseManager()
    await manager.create_all()
    try:
        return await import_file(csv_path, manager)
    finally:
        await manager.dispose()


@app.command()
def main(
    csv_path: Path = typer.Argument(..., help="CSV file with date, amount, description, category, account columns"),
) -> None:
    """Import transactions from a CSV file into the database."""
    configure_logging(config.get_settings().LOG_LEVEL)
    if not asyncio.run(run_import(csv_path)):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
