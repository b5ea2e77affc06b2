from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from src.application.use_cases.herd import herd_summary
from src.application.use_cases.herd.herd_lifecycle import HerdLifecycle
from src.interfaces.http.deps import get_herd, get_today
from src.interfaces.http.schemas.dashboard import DryPeriodCandidate, HerdSummaryResponse

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/herd-summary", response_model=HerdSummaryResponse)
async def get_herd_summary(
    today: date = Depends(get_today),
    herd: HerdLifecycle = Depends(get_herd),
) -> HerdSummaryResponse:
    summary = herd_summary.execute(await herd.list_cows(), today)
    candidates = [
        DryPeriodCandidate(
            cow_id=advisory.cow.id,
            tag_number=advisory.cow.tag_number,
            name=advisory.cow.name,
            expected_delivery_date=advisory.cow.expected_delivery_date,
            days_until_delivery=advisory.days_until_delivery,
        )
        for advisory in summary.dry_period_candidates
    ]
    return HerdSummaryResponse(
        as_of=summary.as_of,
        total=summary.total,
        lactating=summary.lactating,
        dry=summary.dry,
        in_calf=summary.in_calf,
        unspecified=summary.unspecified,
        upcoming_deliveries=summary.upcoming_deliveries,
        dry_period_candidates_count=len(candidates),
        dry_period_candidates=candidates,
    )
