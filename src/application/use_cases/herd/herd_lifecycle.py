from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from uuid import UUID

from src.application.errors import (
    AppError,
    ConflictError,
    InfrastructureError,
    NotFound,
    ValidationError,
)
from src.application.interfaces.repositories.herd import HerdStore
from src.domain.models.cow import Cow
from src.domain.services.dry_period import DryPeriodAdvisory, scan, scan_all
from src.domain.value_objects.lactation_status import LactationStatus, validate_status

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AddCowInput:
    tag_number: str
    name: str
    breed: str | None = None
    date_of_birth: date | None = None
    lactating: bool = False
    dry: bool = True
    in_calf: bool = False
    health_status: str | None = None
    insurance: str | None = None
    notes: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None


@dataclass(slots=True)
class UpdateCowInput:
    version: int | None = None
    tag_number: str | None = None
    name: str | None = None
    breed: str | None = None
    date_of_birth: date | None = None
    lactating: bool | None = None
    dry: bool | None = None
    in_calf: bool | None = None
    health_status: str | None = None
    insurance: str | None = None
    notes: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None


_DESCRIPTIVE_FIELDS = (
    "tag_number",
    "name",
    "breed",
    "date_of_birth",
    "health_status",
    "insurance",
    "notes",
    "purchase_date",
    "purchase_price",
)


def _clone(cow: Cow) -> Cow:
    return replace(cow, ai_dates=list(cow.ai_dates))


def _ensure_valid_status(status: LactationStatus) -> None:
    result = validate_status(status)
    if not result.valid:
        raise ValidationError(result.reason, details={"field": "lactation_status"})


def _ensure_required(field_name: str, value: str | None, label: str) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required", details={"field": field_name})


class HerdLifecycle:
    """Owns the canonical herd and applies every mutation to it.

    Each operation works on a copy of the herd, validates, persists the whole
    collection and only then swaps the copy in. A failed save leaves the
    in-memory herd at the last persisted snapshot.
    """

    def __init__(self, store: HerdStore) -> None:
        self._store = store
        self._cows: list[Cow] = []
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self, today: date | None = None) -> list[Cow]:
        async with self._lock:
            await self._load_locked()
            if today is not None:
                advisory = scan(self._cows, today)
                if advisory is not None:
                    logger.info(
                        "Dry period due for cow %s (%s): delivery in %d days",
                        advisory.cow.tag_number,
                        advisory.cow.name,
                        advisory.days_until_delivery,
                    )
            return [_clone(cow) for cow in self._cows]

    async def _load_locked(self) -> None:
        try:
            cows = await self._store.load()
        except AppError:
            raise
        except Exception as exc:
            logger.error("Loading herd failed: %s", exc, exc_info=True)
            raise InfrastructureError("Could not load herd") from exc
        self._cows = list(cows)
        self._loaded = True
        logger.info("Herd loaded: %d cows", len(self._cows))

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self._load_locked()

    async def _persist(self, cows: list[Cow]) -> None:
        try:
            await self._store.save(cows)
        except AppError as exc:
            logger.error("Persisting herd failed, in-memory herd left unchanged: %s", exc.message)
            raise
        except Exception as exc:
            logger.error("Persisting herd failed: %s", exc, exc_info=True)
            raise InfrastructureError("Could not persist herd") from exc
        self._cows = cows

    def _working_copy(self) -> list[Cow]:
        return [_clone(cow) for cow in self._cows]

    @staticmethod
    def _index_of(cows: list[Cow], cow_id: UUID) -> int:
        for index, cow in enumerate(cows):
            if cow.id == cow_id:
                return index
        raise NotFound(f"Cow {cow_id} not found")

    @staticmethod
    def _ensure_unique_tag(cows: list[Cow], tag_number: str, exclude: UUID | None = None) -> None:
        for cow in cows:
            if cow.id != exclude and cow.tag_number == tag_number:
                raise ConflictError(
                    f"Tag number {tag_number} already exists in herd",
                    details={"field": "tag_number"},
                )

    # Read side

    async def list_cows(self) -> list[Cow]:
        async with self._lock:
            await self._ensure_loaded()
            return self._working_copy()

    async def get_cow(self, cow_id: UUID) -> Cow:
        async with self._lock:
            await self._ensure_loaded()
            return _clone(self._cows[self._index_of(self._cows, cow_id)])

    async def lactating_cows(self) -> list[Cow]:
        cows = await self.list_cows()
        return [cow for cow in cows if cow.lactation_status.lactating]

    async def current_advisory(self, today: date) -> DryPeriodAdvisory | None:
        return scan(await self.list_cows(), today)

    async def all_advisories(self, today: date) -> list[DryPeriodAdvisory]:
        return scan_all(await self.list_cows(), today)

    # Mutations

    async def add_cow(self, payload: AddCowInput) -> Cow:
        _ensure_required("tag_number", payload.tag_number, "Tag number")
        _ensure_required("name", payload.name, "Name")
        status = LactationStatus(
            lactating=payload.lactating, dry=payload.dry, in_calf=payload.in_calf
        )
        _ensure_valid_status(status)
        async with self._lock:
            await self._ensure_loaded()
            cows = self._working_copy()
            self._ensure_unique_tag(cows, payload.tag_number.strip())
            cow = Cow.create(
                tag_number=payload.tag_number.strip(),
                name=payload.name.strip(),
                breed=payload.breed,
                date_of_birth=payload.date_of_birth,
                lactation_status=status,
                health_status=payload.health_status,
                insurance=payload.insurance,
                notes=payload.notes,
                purchase_date=payload.purchase_date,
                purchase_price=payload.purchase_price,
            )
            cows.append(cow)
            await self._persist(cows)
        logger.info("Cow %s added (tag %s)", cow.id, cow.tag_number)
        return _clone(cow)

    async def update_cow(self, cow_id: UUID, payload: UpdateCowInput) -> Cow:
        async with self._lock:
            await self._ensure_loaded()
            cows = self._working_copy()
            index = self._index_of(cows, cow_id)
            cow = cows[index]
            if payload.version is not None and payload.version != cow.version:
                raise ConflictError("Version mismatch while updating cow")

            data: dict = {}
            for field_name in _DESCRIPTIVE_FIELDS:
                value = getattr(payload, field_name)
                if value is not None:
                    data[field_name] = value
            status = cow.lactation_status.with_flags(
                lactating=payload.lactating, dry=payload.dry, in_calf=payload.in_calf
            )
            if not data and status == cow.lactation_status:
                return _clone(cow)

            if "tag_number" in data:
                _ensure_required("tag_number", data["tag_number"], "Tag number")
                data["tag_number"] = data["tag_number"].strip()
                self._ensure_unique_tag(cows, data["tag_number"], exclude=cow_id)
            if "name" in data:
                _ensure_required("name", data["name"], "Name")
                data["name"] = data["name"].strip()
            _ensure_valid_status(status)

            for field_name, value in data.items():
                setattr(cow, field_name, value)
            cow.lactation_status = status
            cow.bump_version()
            await self._persist(cows)
        logger.info("Cow %s updated: %s", cow_id, ", ".join(sorted(data)) or "lactation_status")
        return _clone(cow)

    async def remove_cow(self, cow_id: UUID) -> None:
        async with self._lock:
            await self._ensure_loaded()
            cows = self._working_copy()
            removed = cows.pop(self._index_of(cows, cow_id))
            await self._persist(cows)
        logger.info("Cow %s removed (tag %s)", removed.id, removed.tag_number)

    async def add_ai_date(self, cow_id: UUID, ai_date: date) -> Cow:
        async with self._lock:
            await self._ensure_loaded()
            cows = self._working_copy()
            cow = cows[self._index_of(cows, cow_id)]
            cow.add_ai_date(ai_date)
            _ensure_valid_status(cow.lactation_status)
            await self._persist(cows)
        logger.info(
            "AI date %s recorded for cow %s; expected delivery %s",
            ai_date,
            cow_id,
            cow.expected_delivery_date,
        )
        return _clone(cow)

    async def remove_ai_date(self, cow_id: UUID, index: int) -> Cow:
        async with self._lock:
            await self._ensure_loaded()
            cows = self._working_copy()
            cow = cows[self._index_of(cows, cow_id)]
            if index < 0 or index >= len(cow.ai_dates):
                raise ValidationError(
                    f"AI date index {index} out of range",
                    details={"field": "index", "count": len(cow.ai_dates)},
                )
            removed = cow.remove_ai_date(index)
            _ensure_valid_status(cow.lactation_status)
            await self._persist(cows)
        logger.info(
            "AI date %s removed from cow %s; expected delivery %s",
            removed,
            cow_id,
            cow.expected_delivery_date,
        )
        return _clone(cow)

    async def accept_dry_period(self, cow_id: UUID) -> Cow:
        async with self._lock:
            await self._ensure_loaded()
            cows = self._working_copy()
            cow = cows[self._index_of(cows, cow_id)]
            cow.begin_dry_period()
            _ensure_valid_status(cow.lactation_status)
            await self._persist(cows)
        logger.info("Dry period started for cow %s (tag %s)", cow.id, cow.tag_number)
        return _clone(cow)

    async def defer_dry_period(self, cow_id: UUID) -> Cow:
        # Nothing is remembered; the next scan surfaces the same cow again.
        cow = await self.get_cow(cow_id)
        logger.info("Dry period advisory deferred for cow %s", cow_id)
        return cow
