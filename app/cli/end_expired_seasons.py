"""Standalone cron runner that closes auto-end seasons past their end date.

Seasons are also closed lazily whenever the season list is read; this runner
keeps the flags accurate for days when nobody opens the app.

Usage:
    python -m app.cli.end_expired_seasons [--today YYYY-MM-DD]

Exit codes:
    0 - Success
    1 - Failure (check logs for details)
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from app.services.season_service import end_expired_seasons
from app.utils.db_async import SessionLocal, dispose_engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("end_expired_seasons")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="End seasons whose end date has passed.")
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Treat this day as today (YYYY-MM-DD). Defaults to the current date.",
    )
    return parser.parse_args(argv)


async def main(today: Optional[date] = None) -> int:
    """Close expired seasons.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    start_time = datetime.now(timezone.utc)
    logger.info("Starting scheduled season expiry check")

    try:
        async with SessionLocal() as db:
            async with db.begin():
                ended = await end_expired_seasons(db, today=today)

        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(f"Season expiry check complete in {elapsed:.1f}s: {len(ended)} ended")
        return 0

    except Exception as e:
        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.error(f"Season expiry check failed after {elapsed:.1f}s: {e}", exc_info=True)
        return 1

    finally:
        await dispose_engine()


if __name__ == "__main__":
    args = parse_args()
    exit_code = asyncio.run(main(today=args.today))
    sys.exit(exit_code)
