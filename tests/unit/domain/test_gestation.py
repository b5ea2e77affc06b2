from __future__ import annotations

from datetime import date

from src.domain.services.gestation import GESTATION_DAYS, derive_delivery_date


def test_gestation_is_283_days():
    assert GESTATION_DAYS == 283


def test_single_ai_date():
    assert derive_delivery_date([date(2024, 3, 1)]) == date(2024, 12, 9)


def test_no_ai_dates_gives_none():
    assert derive_delivery_date([]) is None


def test_last_inserted_entry_governs_not_latest_value():
    # Second entry is chronologically earlier but was recorded last
    ai_dates = [date(2024, 6, 1), date(2024, 3, 1)]
    assert derive_delivery_date(ai_dates) == date(2024, 12, 9)


def test_crosses_year_boundary():
    assert derive_delivery_date([date(2023, 5, 20)]) == date(2024, 2, 27)
