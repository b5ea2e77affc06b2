from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

GESTATION_DAYS = 283


def derive_delivery_date(ai_dates: Sequence[date]) -> date | None:
    """Expected delivery for the most recently recorded AI date.

    The last entry in insertion order governs, not the latest calendar
    value: operators backfill services out of order and the newest entry is
    treated as their current information.
    """
    if not ai_dates:
        return None
    return ai_dates[-1] + timedelta(days=GESTATION_DAYS)
