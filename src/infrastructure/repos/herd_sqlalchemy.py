from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError, InfrastructureError
from src.application.interfaces.repositories.herd import HerdStore
from src.domain.models.cow import Cow
from src.domain.value_objects.lactation_status import LactationStatus
from src.infrastructure.db.orm.cow import TAG_CONSTRAINT, CowORM

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on DateTime(timezone=True)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_duplicate_tag(exc: IntegrityError) -> bool:
    # Postgres names the constraint, SQLite names the column
    message = str(exc.orig)
    return TAG_CONSTRAINT in message or "UNIQUE constraint failed: cows.tag_number" in message


class SQLAlchemyHerdStore(HerdStore):
    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    def _to_domain(self, orm: CowORM) -> Cow:
        return Cow(
            id=orm.id,
            tag_number=orm.tag_number,
            name=orm.name,
            breed=orm.breed,
            date_of_birth=orm.date_of_birth,
            lactation_status=LactationStatus(
                lactating=orm.lactating,
                dry=orm.dry,
                in_calf=orm.in_calf,
            ),
            ai_dates=list(orm.ai_dates or []),
            expected_delivery_date=orm.expected_delivery_date,
            health_status=orm.health_status,
            insurance=orm.insurance,
            notes=orm.notes,
            purchase_date=orm.purchase_date,
            purchase_price=orm.purchase_price,
            created_at=_aware(orm.created_at),
            updated_at=_aware(orm.updated_at),
            version=orm.version,
        )

    def _apply(self, orm: CowORM, cow: Cow, position: int) -> None:
        orm.position = position
        orm.tag_number = cow.tag_number
        orm.name = cow.name
        orm.breed = cow.breed
        orm.date_of_birth = cow.date_of_birth
        orm.lactating = cow.lactation_status.lactating
        orm.dry = cow.lactation_status.dry
        orm.in_calf = cow.lactation_status.in_calf
        orm.ai_dates = list(cow.ai_dates)
        orm.expected_delivery_date = cow.expected_delivery_date
        orm.health_status = cow.health_status
        orm.insurance = cow.insurance
        orm.notes = cow.notes
        orm.purchase_date = cow.purchase_date
        orm.purchase_price = cow.purchase_price
        orm.created_at = cow.created_at
        orm.updated_at = cow.updated_at
        orm.version = cow.version

    async def load(self) -> list[Cow]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(CowORM).order_by(CowORM.position))
                return [self._to_domain(orm) for orm in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise InfrastructureError("Could not load herd") from exc

    async def save(self, cows: Sequence[Cow]) -> None:
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(CowORM))
                existing = {orm.id: orm for orm in result.scalars().all()}
                kept = set()
                for position, cow in enumerate(cows):
                    orm = existing.get(cow.id)
                    if orm is None:
                        orm = CowORM(id=cow.id)
                        session.add(orm)
                    self._apply(orm, cow, position)
                    kept.add(cow.id)
                for cow_id, orm in existing.items():
                    if cow_id not in kept:
                        await session.delete(orm)
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if _is_duplicate_tag(exc):
                    raise ConflictError("Tag number already exists in herd") from exc
                logger.error("Herd save violated a constraint: %s", exc)
                raise InfrastructureError("Could not persist herd") from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Herd save rolled back: %s", exc)
                raise InfrastructureError("Could not persist herd") from exc
        logger.debug("Herd saved: %d cows", len(cows))
