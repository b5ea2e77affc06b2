from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel


class DryPeriodCandidate(BaseModel):
    cow_id: UUID
    tag_number: str
    name: str
    expected_delivery_date: date
    days_until_delivery: int


class HerdSummaryResponse(BaseModel):
    as_of: date
    total: int
    lactating: int
    dry: int
    in_calf: int
    unspecified: int
    upcoming_deliveries: int
    dry_period_candidates_count: int
    dry_period_candidates: list[DryPeriodCandidate]
