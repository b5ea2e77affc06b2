#!/usr/bin/env python3
"""
Script to list cows that should begin their dry period.

Loads the herd from the configured database and prints every cow whose
expected delivery is 1 to 60 days away and that is in calf but not yet dry.

Usage:
  python scripts/dry_period_report.py [--date YYYY-MM-DD]
"""

import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.application.errors import InfrastructureError
from src.config.settings import get_settings
from src.infrastructure.db.session import create_engine, create_session_factory
from src.infrastructure.scheduler.dry_period_tasks import report_dry_period_candidates
from src.utils.datetime_tz import farm_today


async def run_report(as_of: date | None = None) -> int:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    today = as_of or farm_today(settings.farm_timezone)

    try:
        advisories = await report_dry_period_candidates(session_factory, today)
    finally:
        await engine.dispose()

    if not advisories:
        print(f"No cows due for a dry period as of {today}")
        return 0

    print(f"Cows due for a dry period as of {today}:")
    for advisory in advisories:
        cow = advisory.cow
        print(
            f"   {cow.tag_number:<10} {cow.name:<20} "
            f"calves {cow.expected_delivery_date} ({advisory.days_until_delivery} days)"
        )
    return len(advisories)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="List cows due to begin their dry period")
    parser.add_argument("--date", help="Report date (YYYY-MM-DD), defaults to today on the farm")

    args = parser.parse_args()

    as_of = None
    if args.date:
        try:
            as_of = date.fromisoformat(args.date)
        except ValueError:
            print(f"Error: '{args.date}' is not a valid date")
            sys.exit(1)

    logging.basicConfig(level=get_settings().log_level.upper())
    try:
        asyncio.run(run_report(as_of))
    except InfrastructureError as exc:
        print(f"Error: dry period report failed: {exc.message}")
        sys.exit(1)
