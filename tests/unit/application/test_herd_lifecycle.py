from __future__ import annotations

from dataclasses import replace
from datetime import date
from uuid import uuid4

import pytest

from src.application.errors import (
    ConflictError,
    InfrastructureError,
    NotFound,
    ValidationError,
)
from src.application.use_cases.herd.herd_lifecycle import (
    AddCowInput,
    HerdLifecycle,
    UpdateCowInput,
)
from src.domain.models.cow import Cow
from src.domain.value_objects.lactation_status import LactationStatus


class StubStore:
    def __init__(self, cows: list[Cow] | None = None) -> None:
        self.stored = [replace(c, ai_dates=list(c.ai_dates)) for c in cows or []]
        self.load_calls = 0
        self.save_calls = 0
        self.fail_next_save = False

    async def load(self) -> list[Cow]:
        self.load_calls += 1
        return [replace(c, ai_dates=list(c.ai_dates)) for c in self.stored]

    async def save(self, cows) -> None:
        if self.fail_next_save:
            self.fail_next_save = False
            raise InfrastructureError("Store unavailable")
        self.save_calls += 1
        self.stored = [replace(c, ai_dates=list(c.ai_dates)) for c in cows]


async def make_herd(*cows: Cow) -> tuple[HerdLifecycle, StubStore]:
    store = StubStore(list(cows))
    herd = HerdLifecycle(store)
    await herd.load()
    return herd, store


@pytest.mark.asyncio
async def test_add_cow_defaults_to_dry_and_persists():
    herd, store = await make_herd()
    cow = await herd.add_cow(AddCowInput(tag_number="C001", name="Daisy"))
    assert cow.lactation_status == LactationStatus(lactating=False, dry=True, in_calf=False)
    assert store.save_calls == 1
    assert [c.id for c in store.stored] == [cow.id]


@pytest.mark.asyncio
async def test_add_cow_rejects_lactating_and_dry():
    herd, store = await make_herd()
    with pytest.raises(ValidationError) as exc_info:
        await herd.add_cow(
            AddCowInput(tag_number="C001", name="Daisy", lactating=True, dry=True)
        )
    assert exc_info.value.message == "A cow cannot be both lactating and dry"
    assert store.save_calls == 0
    assert await herd.list_cows() == []


@pytest.mark.asyncio
async def test_add_cow_requires_tag_and_name():
    herd, store = await make_herd()
    with pytest.raises(ValidationError):
        await herd.add_cow(AddCowInput(tag_number="  ", name="Daisy"))
    with pytest.raises(ValidationError):
        await herd.add_cow(AddCowInput(tag_number="C001", name=""))
    assert store.save_calls == 0


@pytest.mark.asyncio
async def test_add_cow_rejects_duplicate_tag():
    herd, store = await make_herd(Cow.create(tag_number="C001", name="Daisy"))
    with pytest.raises(ConflictError):
        await herd.add_cow(AddCowInput(tag_number="C001", name="Other"))
    assert store.save_calls == 0


@pytest.mark.asyncio
async def test_update_cow_rejects_invalid_status_without_writing():
    existing = Cow.create(
        tag_number="C001",
        name="Daisy",
        lactation_status=LactationStatus(lactating=True, dry=False, in_calf=False),
    )
    herd, store = await make_herd(existing)
    with pytest.raises(ValidationError) as exc_info:
        await herd.update_cow(existing.id, UpdateCowInput(dry=True, name="Renamed"))
    assert exc_info.value.message == "A cow cannot be both lactating and dry"
    assert store.save_calls == 0
    cow = await herd.get_cow(existing.id)
    assert cow.name == "Daisy"
    assert cow.lactation_status.dry is False


@pytest.mark.asyncio
async def test_update_cow_applies_fields_and_bumps_version():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, store = await make_herd(existing)
    updated = await herd.update_cow(
        existing.id,
        UpdateCowInput(version=1, name="Daisy II", lactating=True, dry=False),
    )
    assert updated.name == "Daisy II"
    assert updated.lactation_status == LactationStatus(lactating=True, dry=False, in_calf=False)
    assert updated.version == 2
    assert store.stored[0].name == "Daisy II"


@pytest.mark.asyncio
async def test_update_cow_version_mismatch_raises():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, _ = await make_herd(existing)
    with pytest.raises(ConflictError):
        await herd.update_cow(existing.id, UpdateCowInput(version=7, name="New"))


@pytest.mark.asyncio
async def test_update_without_changes_does_not_persist():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, store = await make_herd(existing)
    cow = await herd.update_cow(existing.id, UpdateCowInput())
    assert cow.version == 1
    assert store.save_calls == 0


@pytest.mark.asyncio
async def test_unknown_cow_is_not_found_for_every_operation():
    herd, store = await make_herd(Cow.create(tag_number="C001", name="Daisy"))
    missing = uuid4()
    with pytest.raises(NotFound):
        await herd.get_cow(missing)
    with pytest.raises(NotFound):
        await herd.update_cow(missing, UpdateCowInput(name="X"))
    with pytest.raises(NotFound):
        await herd.remove_cow(missing)
    with pytest.raises(NotFound):
        await herd.add_ai_date(missing, date(2024, 3, 1))
    with pytest.raises(NotFound):
        await herd.remove_ai_date(missing, 0)
    with pytest.raises(NotFound):
        await herd.accept_dry_period(missing)
    with pytest.raises(NotFound):
        await herd.defer_dry_period(missing)
    assert store.save_calls == 0
    assert len(await herd.list_cows()) == 1


@pytest.mark.asyncio
async def test_add_ai_date_sets_in_calf_and_delivery():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, store = await make_herd(existing)
    cow = await herd.add_ai_date(existing.id, date(2024, 3, 1))
    assert cow.ai_dates == [date(2024, 3, 1)]
    assert cow.expected_delivery_date == date(2024, 12, 9)
    assert cow.lactation_status.in_calf is True
    assert store.stored[0].expected_delivery_date == date(2024, 12, 9)


@pytest.mark.asyncio
async def test_backfilled_ai_date_governs_delivery():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, _ = await make_herd(existing)
    await herd.add_ai_date(existing.id, date(2024, 6, 1))
    cow = await herd.add_ai_date(existing.id, date(2024, 3, 1))
    assert cow.ai_dates == [date(2024, 6, 1), date(2024, 3, 1)]
    assert cow.expected_delivery_date == date(2024, 12, 9)


@pytest.mark.asyncio
async def test_remove_only_ai_date_clears_pregnancy_state():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, store = await make_herd(existing)
    await herd.add_ai_date(existing.id, date(2024, 3, 1))
    cow = await herd.remove_ai_date(existing.id, 0)
    assert cow.ai_dates == []
    assert cow.expected_delivery_date is None
    assert cow.lactation_status.in_calf is False
    assert store.stored[0].lactation_status.in_calf is False


@pytest.mark.asyncio
async def test_remove_ai_date_out_of_range():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, store = await make_herd(existing)
    with pytest.raises(ValidationError):
        await herd.remove_ai_date(existing.id, 0)
    await herd.add_ai_date(existing.id, date(2024, 3, 1))
    with pytest.raises(ValidationError):
        await herd.remove_ai_date(existing.id, -1)
    assert store.save_calls == 1


@pytest.mark.asyncio
async def test_accept_dry_period_then_rescan():
    existing = Cow.create(
        tag_number="C001",
        name="Daisy",
        lactation_status=LactationStatus(lactating=True, dry=False, in_calf=False),
    )
    herd, store = await make_herd(existing)
    await herd.add_ai_date(existing.id, date(2024, 3, 1))
    today = date(2024, 10, 10)

    advisory = await herd.current_advisory(today)
    assert advisory is not None
    assert advisory.cow.id == existing.id
    assert advisory.days_until_delivery == 60

    cow = await herd.accept_dry_period(existing.id)
    assert cow.lactation_status == LactationStatus(lactating=False, dry=True, in_calf=True)
    assert store.stored[0].lactation_status.dry is True
    assert await herd.current_advisory(today) is None
    assert await herd.current_advisory(date(2024, 11, 30)) is None

    # Next cycle: new AI date and dry cleared by the operator
    await herd.update_cow(existing.id, UpdateCowInput(lactating=True, dry=False))
    await herd.add_ai_date(existing.id, date(2025, 3, 1))
    advisory = await herd.current_advisory(date(2025, 11, 1))
    assert advisory is not None
    assert advisory.cow.id == existing.id


@pytest.mark.asyncio
async def test_defer_keeps_candidate_and_does_not_write():
    existing = Cow.create(
        tag_number="C001",
        name="Daisy",
        lactation_status=LactationStatus(lactating=True, dry=False, in_calf=False),
    )
    herd, store = await make_herd(existing)
    await herd.add_ai_date(existing.id, date(2024, 3, 1))
    saves = store.save_calls

    cow = await herd.defer_dry_period(existing.id)
    assert cow.lactation_status.lactating is True
    assert store.save_calls == saves
    advisory = await herd.current_advisory(date(2024, 11, 1))
    assert advisory is not None
    assert advisory.cow.id == existing.id


@pytest.mark.asyncio
async def test_persistence_failure_rolls_back_in_memory_herd():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, store = await make_herd(existing)
    store.fail_next_save = True
    with pytest.raises(InfrastructureError):
        await herd.add_ai_date(existing.id, date(2024, 3, 1))
    cow = await herd.get_cow(existing.id)
    assert cow.ai_dates == []
    assert cow.lactation_status.in_calf is False
    assert cow.version == 1


@pytest.mark.asyncio
async def test_unexpected_store_error_is_wrapped():
    herd, store = await make_herd()

    async def broken_save(cows):
        raise OSError("disk full")

    store.save = broken_save  # type: ignore
    with pytest.raises(InfrastructureError):
        await herd.add_cow(AddCowInput(tag_number="C001", name="Daisy"))
    assert await herd.list_cows() == []


@pytest.mark.asyncio
async def test_remove_cow_keeps_order_of_the_rest():
    a = Cow.create(tag_number="A", name="A")
    b = Cow.create(tag_number="B", name="B")
    c = Cow.create(tag_number="C", name="C")
    herd, store = await make_herd(a, b, c)
    await herd.remove_cow(b.id)
    assert [cow.tag_number for cow in await herd.list_cows()] == ["A", "C"]
    assert [cow.tag_number for cow in store.stored] == ["A", "C"]


@pytest.mark.asyncio
async def test_returned_cows_are_copies():
    existing = Cow.create(tag_number="C001", name="Daisy")
    herd, _ = await make_herd(existing)
    cow = await herd.get_cow(existing.id)
    cow.ai_dates.append(date(2024, 3, 1))
    assert (await herd.get_cow(existing.id)).ai_dates == []


@pytest.mark.asyncio
async def test_lazy_load_on_first_use():
    store = StubStore([Cow.create(tag_number="C001", name="Daisy")])
    herd = HerdLifecycle(store)
    assert not herd.loaded
    assert len(await herd.list_cows()) == 1
    await herd.list_cows()
    assert store.load_calls == 1


@pytest.mark.asyncio
async def test_lactating_cows_filters_on_flag():
    milking = Cow.create(
        tag_number="M",
        name="Milking",
        lactation_status=LactationStatus(lactating=True, dry=False),
    )
    herd, _ = await make_herd(milking, Cow.create(tag_number="D", name="Dry"))
    assert [cow.tag_number for cow in await herd.lactating_cows()] == ["M"]


@pytest.mark.asyncio
async def test_load_logs_current_advisory(caplog):
    existing = Cow.create(
        tag_number="C007",
        name="Bella",
        lactation_status=LactationStatus(lactating=True, dry=False, in_calf=False),
    )
    herd, store = await make_herd(existing)
    await herd.add_ai_date(existing.id, date(2024, 3, 1))

    reloaded = HerdLifecycle(store)
    with caplog.at_level("INFO", logger="src.application.use_cases.herd.herd_lifecycle"):
        cows = await reloaded.load(date(2024, 10, 10))

    assert [c.id for c in cows] == [existing.id]
    assert "Dry period due for cow C007 (Bella): delivery in 60 days" in caplog.text
