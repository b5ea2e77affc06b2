from __future__ import annotations

import logging
from datetime import date

from src.application.errors import InfrastructureError
from src.domain.services.dry_period import DryPeriodAdvisory, scan_all
from src.infrastructure.repos.herd_sqlalchemy import SQLAlchemyHerdStore

logger = logging.getLogger(__name__)


async def report_dry_period_candidates(session_factory, today: date) -> list[DryPeriodAdvisory]:
    """Log every cow due to start her dry period; read-only.

    A store failure is logged and re-raised so callers never mistake it for
    an empty report.
    """
    store = SQLAlchemyHerdStore(session_factory)
    try:
        cows = await store.load()
    except InfrastructureError as exc:
        logger.error("report_dry_period_candidates failed: %s", exc.message)
        raise

    advisories = scan_all(cows, today)
    if not advisories:
        logger.info("Dry period: no candidates as of %s", today)
        return advisories

    for advisory in advisories:
        logger.info(
            "Dry period due: cow %s (%s) calves %s, in %d days",
            advisory.cow.tag_number,
            advisory.cow.name,
            advisory.cow.expected_delivery_date,
            advisory.days_until_delivery,
        )
    logger.info("Dry period: %d candidates as of %s", len(advisories), today)
    return advisories
