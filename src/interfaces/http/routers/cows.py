from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from src.application.use_cases.herd.herd_lifecycle import (
    AddCowInput,
    HerdLifecycle,
    UpdateCowInput,
)
from src.domain.value_objects.lactation_status import LactationStatus, validate_status
from src.interfaces.http.deps import get_herd, get_today
from src.interfaces.http.schemas.cows import (
    AiDateCreate,
    CowCreate,
    CowResponse,
    CowsListResponse,
    CowUpdate,
    DryPeriodAdvisoryResponse,
    LactationStatusSchema,
    StatusValidationResponse,
)

router = APIRouter(prefix="/cows", tags=["cows"])


@router.get("/", response_model=CowsListResponse)
async def list_cows_endpoint(herd: HerdLifecycle = Depends(get_herd)) -> CowsListResponse:
    cows = await herd.list_cows()
    return CowsListResponse(
        items=[CowResponse.model_validate(cow) for cow in cows],
        total=len(cows),
    )


@router.post("/", response_model=CowResponse, status_code=status.HTTP_201_CREATED)
async def create_cow_endpoint(
    payload: CowCreate,
    herd: HerdLifecycle = Depends(get_herd),
) -> CowResponse:
    cow = await herd.add_cow(
        AddCowInput(
            tag_number=payload.tag_number,
            name=payload.name,
            breed=payload.breed,
            date_of_birth=payload.date_of_birth,
            lactating=payload.lactation_status.lactating,
            dry=payload.lactation_status.dry,
            in_calf=payload.lactation_status.in_calf,
            health_status=payload.health_status,
            insurance=payload.insurance,
            notes=payload.notes,
            purchase_date=payload.purchase_date,
            purchase_price=payload.purchase_price,
        )
    )
    return CowResponse.model_validate(cow)


@router.get("/lactating", response_model=CowsListResponse)
async def list_lactating_cows_endpoint(
    herd: HerdLifecycle = Depends(get_herd),
) -> CowsListResponse:
    """Cows that can be selected on the milk production form."""
    cows = await herd.lactating_cows()
    return CowsListResponse(
        items=[CowResponse.model_validate(cow) for cow in cows],
        total=len(cows),
    )


@router.post("/status/validate", response_model=StatusValidationResponse)
async def validate_status_endpoint(payload: LactationStatusSchema) -> StatusValidationResponse:
    result = validate_status(
        LactationStatus(
            lactating=payload.lactating,
            dry=payload.dry,
            in_calf=payload.in_calf,
        )
    )
    return StatusValidationResponse(valid=result.valid, reason=result.reason)


@router.get("/dry-period/advisory", response_model=DryPeriodAdvisoryResponse)
async def get_dry_period_advisory(
    today: date = Depends(get_today),
    herd: HerdLifecycle = Depends(get_herd),
) -> DryPeriodAdvisoryResponse:
    advisory = await herd.current_advisory(today)
    if advisory is None:
        return DryPeriodAdvisoryResponse(present=False)
    return DryPeriodAdvisoryResponse(
        present=True,
        cow_id=advisory.cow.id,
        tag_number=advisory.cow.tag_number,
        name=advisory.cow.name,
        expected_delivery_date=advisory.cow.expected_delivery_date,
        days_until_delivery=advisory.days_until_delivery,
    )


@router.get("/{cow_id}", response_model=CowResponse)
async def get_cow_endpoint(cow_id: UUID, herd: HerdLifecycle = Depends(get_herd)) -> CowResponse:
    return CowResponse.model_validate(await herd.get_cow(cow_id))


@router.put("/{cow_id}", response_model=CowResponse)
async def update_cow_endpoint(
    cow_id: UUID,
    payload: CowUpdate,
    herd: HerdLifecycle = Depends(get_herd),
) -> CowResponse:
    flags = payload.lactation_status
    cow = await herd.update_cow(
        cow_id,
        UpdateCowInput(
            version=payload.version,
            tag_number=payload.tag_number,
            name=payload.name,
            breed=payload.breed,
            date_of_birth=payload.date_of_birth,
            lactating=flags.lactating if flags else None,
            dry=flags.dry if flags else None,
            in_calf=flags.in_calf if flags else None,
            health_status=payload.health_status,
            insurance=payload.insurance,
            notes=payload.notes,
            purchase_date=payload.purchase_date,
            purchase_price=payload.purchase_price,
        ),
    )
    return CowResponse.model_validate(cow)


@router.delete("/{cow_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cow_endpoint(cow_id: UUID, herd: HerdLifecycle = Depends(get_herd)) -> Response:
    await herd.remove_cow(cow_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{cow_id}/ai-dates", response_model=CowResponse, status_code=status.HTTP_201_CREATED
)
async def add_ai_date_endpoint(
    cow_id: UUID,
    payload: AiDateCreate,
    herd: HerdLifecycle = Depends(get_herd),
) -> CowResponse:
    return CowResponse.model_validate(await herd.add_ai_date(cow_id, payload.ai_date))


@router.delete("/{cow_id}/ai-dates/{index}", response_model=CowResponse)
async def remove_ai_date_endpoint(
    cow_id: UUID,
    index: int,
    herd: HerdLifecycle = Depends(get_herd),
) -> CowResponse:
    return CowResponse.model_validate(await herd.remove_ai_date(cow_id, index))


@router.post("/{cow_id}/dry-period/accept", response_model=CowResponse)
async def accept_dry_period_endpoint(
    cow_id: UUID,
    herd: HerdLifecycle = Depends(get_herd),
) -> CowResponse:
    return CowResponse.model_validate(await herd.accept_dry_period(cow_id))


@router.post("/{cow_id}/dry-period/defer", response_model=CowResponse)
async def defer_dry_period_endpoint(
    cow_id: UUID,
    herd: HerdLifecycle = Depends(get_herd),
) -> CowResponse:
    return CowResponse.model_validate(await herd.defer_dry_period(cow_id))
