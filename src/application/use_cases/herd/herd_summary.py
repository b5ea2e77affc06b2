from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from src.domain.models.cow import Cow
from src.domain.services.dry_period import DryPeriodAdvisory, days_until_delivery, scan_all

UPCOMING_DELIVERY_DAYS = 30


@dataclass(slots=True)
class HerdSummary:
    as_of: date
    total: int = 0
    lactating: int = 0
    dry: int = 0
    in_calf: int = 0
    unspecified: int = 0
    upcoming_deliveries: int = 0
    dry_period_candidates: list[DryPeriodAdvisory] = field(default_factory=list)


def execute(cows: Sequence[Cow], today: date) -> HerdSummary:
    summary = HerdSummary(as_of=today, total=len(cows))
    for cow in cows:
        status = cow.lactation_status
        if status.lactating:
            summary.lactating += 1
        if status.dry:
            summary.dry += 1
        if status.in_calf:
            summary.in_calf += 1
        if status.is_unspecified:
            summary.unspecified += 1
        days = days_until_delivery(cow, today)
        if days is not None and 0 <= days <= UPCOMING_DELIVERY_DAYS:
            summary.upcoming_deliveries += 1
    summary.dry_period_candidates = scan_all(cows, today)
    return summary
