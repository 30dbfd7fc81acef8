"""Seed CLI — load the label catalogue into an already-migrated database.

Usage:
    python -m truckest.seed [--database-url URL]

Idempotent: rows that already exist (matched by name) are left alone.
"""

import argparse
import asyncio
import logging

from truckest.config import get_settings
from truckest.db.session import create_session_factory
from truckest.infrastructure.observability import setup_logging
from truckest.services.reference_data import seed_reference_data

logger = logging.getLogger(__name__)


async def run_seed(database_url: str) -> int:
    engine, session_factory = create_session_factory(database_url)
    try:
        async with session_factory() as db:
            return await seed_reference_data(db)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed the TruckEst label catalogue")
    parser.add_argument("--database-url", default=settings.database_url)
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, "text")
    added = asyncio.run(run_seed(args.database_url))
    logger.info(f"Seed complete: {added} row(s) added")


if __name__ == "__main__":
    main()
