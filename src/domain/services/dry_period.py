from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from src.domain.models.cow import Cow

DRY_PERIOD_WINDOW_DAYS = 60


@dataclass(frozen=True, slots=True)
class DryPeriodAdvisory:
    cow: Cow
    days_until_delivery: int


def days_until_delivery(cow: Cow, today: date) -> int | None:
    if cow.expected_delivery_date is None:
        return None
    return (cow.expected_delivery_date - today).days


def _advisory_for(cow: Cow, today: date) -> DryPeriodAdvisory | None:
    status = cow.lactation_status
    if not status.in_calf or status.dry:
        return None
    days = days_until_delivery(cow, today)
    if days is None:
        return None
    if 0 < days <= DRY_PERIOD_WINDOW_DAYS:
        return DryPeriodAdvisory(cow=cow, days_until_delivery=days)
    return None


def scan(herd: Iterable[Cow], today: date) -> DryPeriodAdvisory | None:
    """Return only the first candidate so the operator sees one advisory at a time."""
    for cow in herd:
        advisory = _advisory_for(cow, today)
        if advisory is not None:
            return advisory
    return None


def scan_all(herd: Iterable[Cow], today: date) -> list[DryPeriodAdvisory]:
    advisories = []
    for cow in herd:
        advisory = _advisory_for(cow, today)
        if advisory is not None:
            advisories.append(advisory)
    return advisories
