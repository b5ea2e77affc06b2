from __future__ import annotations

from datetime import date

from fastapi import Query, Request

from src.application.use_cases.herd.herd_lifecycle import HerdLifecycle
from src.config.settings import Settings
from src.utils.datetime_tz import farm_today


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings not configured")
    return settings


def get_herd(request: Request) -> HerdLifecycle:
    herd = getattr(request.app.state, "herd", None)
    if herd is None:
        raise RuntimeError("Herd lifecycle not configured")
    return herd


def get_today(
    request: Request,
    on: date | None = Query(None, alias="date", description="Defaults to today on the farm"),
) -> date:
    if on is not None:
        return on
    return farm_today(get_app_settings(request).farm_timezone)
