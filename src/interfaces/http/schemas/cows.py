from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from src.config.settings import get_settings
from src.utils.datetime_tz import parse_calendar_date


def _calendar_date_or_none(value):
    # Older clients send full ISO timestamps for calendar dates
    if value is None or value == "":
        return None
    if not isinstance(value, (str, date)):
        # Numbers and the like are left to pydantic's own date parsing
        return value
    return parse_calendar_date(value, get_settings().farm_timezone)


class LactationStatusSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lactating: bool = False
    dry: bool = True
    in_calf: bool = False


class LactationStatusPatch(BaseModel):
    lactating: bool | None = None
    dry: bool | None = None
    in_calf: bool | None = None


class StatusValidationResponse(BaseModel):
    valid: bool
    reason: str | None = None


class CowBase(BaseModel):
    breed: str | None = None
    date_of_birth: date | None = None
    health_status: str | None = None
    insurance: str | None = None
    notes: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None

    @field_validator("date_of_birth", "purchase_date", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return _calendar_date_or_none(v)


class CowCreate(CowBase):
    tag_number: str
    name: str
    lactation_status: LactationStatusSchema = LactationStatusSchema()


class CowUpdate(CowBase):
    version: int | None = None
    tag_number: str | None = None
    name: str | None = None
    lactation_status: LactationStatusPatch | None = None


class AiDateCreate(BaseModel):
    ai_date: date

    @field_validator("ai_date", mode="before")
    @classmethod
    def normalize_ai_date(cls, v):
        return _calendar_date_or_none(v)


class CowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tag_number: str
    name: str
    breed: str | None
    date_of_birth: date | None
    lactation_status: LactationStatusSchema
    ai_dates: list[date]
    expected_delivery_date: date | None
    health_status: str | None
    insurance: str | None
    notes: str | None
    purchase_date: date | None
    purchase_price: Decimal | None
    created_at: datetime
    updated_at: datetime
    version: int


class CowsListResponse(BaseModel):
    items: list[CowResponse]
    total: int


class DryPeriodAdvisoryResponse(BaseModel):
    present: bool
    cow_id: UUID | None = None
    tag_number: str | None = None
    name: str | None = None
    expected_delivery_date: date | None = None
    days_until_delivery: int | None = None
