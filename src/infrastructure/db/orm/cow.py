from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class DateList(TypeDecorator):
    """Stores an ordered list of dates as ARRAY in PostgreSQL, JSON in SQLite."""

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(ARRAY(Date))
        else:
            return dialect.type_descriptor(Text)

    def process_bind_param(self, value, dialect):
        if value is None:
            value = []
        if dialect.name == "postgresql":
            return list(value)
        else:
            return json.dumps([d.isoformat() for d in value])

    def process_result_value(self, value, dialect):
        if dialect.name == "postgresql":
            return list(value) if value is not None else []
        else:
            if not value:
                return []
            return [date.fromisoformat(item) for item in json.loads(value)]


TAG_CONSTRAINT = "ux_cows_tag_number"


class CowORM(Base):
    __tablename__ = "cows"
    __table_args__ = (UniqueConstraint("tag_number", name=TAG_CONSTRAINT),)

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    # Herd iteration order; the advisory scan depends on it
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    tag_number: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    breed: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)

    lactating: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    dry: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    in_calf: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    ai_dates: Mapped[list[date]] = mapped_column(DateList, nullable=False)
    expected_delivery_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    health_status: Mapped[str | None] = mapped_column(String(64), nullable=True)
    insurance: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
