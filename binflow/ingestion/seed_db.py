"""
Demo Data Seeding

Fills an empty database with a few days of plausible bin tipping entries so
the dashboard has something to show. Every entry goes through the same
find-or-create path as the API, so re-running the seed adds tippings to the
existing shift reports rather than duplicating them.

Usage:
    python -m binflow.ingestion.seed_db --days 7 --managers "John Smith,Aroha Ngata"
"""

import argparse
import asyncio
import random
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence

import structlog

from binflow.config import get_settings
from binflow.config.logging import configure_logging
from binflow.database.connection import close_database, create_tables, get_db, init_database
from binflow.database.models import DowntimeReason
from binflow.shifts.clock import BusinessClock, get_business_clock
from binflow.shifts.resolver import ShiftKeyResolver

logger = structlog.get_logger(__name__)

DEFAULT_MANAGERS = ("John Smith", "Aroha Ngata")
SHIFT_LABEL = "Day Shift"
# Hourly entries across a day shift, lunch at 12:00
ENTRY_HOURS = range(8, 17)
LUNCH_HOUR = 12


def generate_day_entries(day: date, line_manager: str, rng: random.Random) -> List[Dict]:
    """One bin tipping entry per hour of the shift"""
    entries = []
    for hour in ENTRY_HOURS:
        is_lunch = hour == LUNCH_HOUR
        down_time = 0 if is_lunch or rng.random() > 0.3 else rng.randint(5, 25)
        reason = ""
        if down_time:
            reason = rng.choice(list(DowntimeReason)).value
        entries.append({
            "when": datetime.combine(day, time(hour, 0)),
            "line_manager": line_manager,
            "shift": SHIFT_LABEL,
            "time_of_day": time(hour, 0),
            "bins_tipped": 0 if is_lunch else rng.randint(8, 20),
            "average_bin_weight": 0.0 if is_lunch else round(rng.uniform(38.0, 52.0), 1),
            "down_time": down_time,
            "reason": reason,
            "is_lunch_break": is_lunch,
        })
    return entries


async def seed_demo_data(
    days: int = 7,
    managers: Sequence[str] = DEFAULT_MANAGERS,
    clock: Optional[BusinessClock] = None,
    seed: Optional[int] = None,
) -> int:
    """
    Write demo tippings for the last ``days`` business days, today included.

    Returns:
        int: Number of bin tippings written
    """
    clock = clock or get_business_clock()
    resolver = ShiftKeyResolver(clock)
    rng = random.Random(seed)
    today = clock.today()

    written = 0
    async with get_db() as db:
        for offset in range(days):
            day = today - timedelta(days=offset)
            for manager in managers:
                for entry in generate_day_entries(day, manager, rng):
                    await resolver.record_tipping(db, **entry)
                    written += 1
            logger.info("Seeded day", date=str(day), managers=len(managers))

    logger.info("Demo seeding completed", bin_tippings=written, days=days)
    return written


async def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed BinFlow with demo shift data")
    parser.add_argument("--days", type=int, default=7, help="Number of days to seed (default: 7)")
    parser.add_argument(
        "--managers",
        default=",".join(DEFAULT_MANAGERS),
        help="Comma separated line manager names",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    args = parser.parse_args(argv)

    configure_logging()
    managers = [m.strip() for m in args.managers.split(",") if m.strip()]

    logger.info("Starting database seeding...", database=get_settings().database.async_url.split("@")[-1])
    engine = await init_database()
    await create_tables(engine)
    try:
        await seed_demo_data(days=args.days, managers=managers, seed=args.seed)
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        raise
    finally:
        await close_database()


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
