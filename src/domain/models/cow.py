from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from src.domain.services.gestation import derive_delivery_date
from src.domain.value_objects.lactation_status import LactationStatus


@dataclass(slots=True)
class Cow:
    id: UUID
    tag_number: str
    name: str
    breed: str | None = None
    date_of_birth: date | None = None
    lactation_status: LactationStatus = field(default_factory=LactationStatus)
    # Insertion order is meaningful; never sort.
    ai_dates: list[date] = field(default_factory=list)
    expected_delivery_date: date | None = None

    # Opaque to the status engine
    health_status: str | None = None
    insurance: str | None = None
    notes: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        tag_number: str,
        name: str,
        breed: str | None = None,
        date_of_birth: date | None = None,
        lactation_status: LactationStatus | None = None,
        health_status: str | None = None,
        insurance: str | None = None,
        notes: str | None = None,
        purchase_date: date | None = None,
        purchase_price: Decimal | None = None,
    ) -> Cow:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            tag_number=tag_number,
            name=name,
            breed=breed,
            date_of_birth=date_of_birth,
            lactation_status=lactation_status or LactationStatus(),
            ai_dates=[],
            expected_delivery_date=None,
            health_status=health_status,
            insurance=insurance,
            notes=notes,
            purchase_date=purchase_date,
            purchase_price=purchase_price,
            created_at=now,
            updated_at=now,
            version=1,
        )

    def add_ai_date(self, ai_date: date) -> None:
        self.ai_dates.append(ai_date)
        self.expected_delivery_date = derive_delivery_date(self.ai_dates)
        if not self.lactation_status.in_calf:
            self.lactation_status = self.lactation_status.with_flags(in_calf=True)
        self.bump_version()

    def remove_ai_date(self, index: int) -> date:
        removed = self.ai_dates.pop(index)
        self.expected_delivery_date = derive_delivery_date(self.ai_dates)
        if self.expected_delivery_date is None:
            self.lactation_status = self.lactation_status.with_flags(in_calf=False)
        self.bump_version()
        return removed

    def begin_dry_period(self) -> None:
        self.lactation_status = self.lactation_status.with_flags(lactating=False, dry=True)
        self.bump_version()

    def bump_version(self) -> None:
        self.version += 1
        self.updated_at = datetime.now(timezone.utc)
