from __future__ import annotations

from datetime import datetime, time, timedelta

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_storage, get_timezone
from app.core.config import get_settings
from app.core.timeutils import UTC, day_bounds, get_zone, parse_datetime
from app.schemas.stats import DailySummary, TradingStats
from app.storage.base import Storage

router = APIRouter(prefix="/api/stats", tags=["stats"])


def _stats_window(start: datetime | None, end: datetime | None, timezone: str) -> tuple[datetime, datetime]:
    """Resolve the queried range; the end always covers its whole local day.

    Without a start the window opens at local midnight ``stats_window_days``
    before today; without an end it closes at the end of today.
    """
    tz = get_zone(timezone)
    today = datetime.now(tz).date()

    if start is None:
        first_day = today - timedelta(days=get_settings().stats_window_days)
        start_utc = datetime.combine(first_day, time.min, tzinfo=tz).astimezone(UTC)
    else:
        start_utc = parse_datetime(start, timezone)

    if end is None:
        last_day = today
    elif end.tzinfo is None:
        last_day = end.date()
    else:
        last_day = end.astimezone(tz).date()
    _, end_utc = day_bounds(last_day, timezone)
    return start_utc, end_utc


@router.get("", response_model=TradingStats)
async def get_stats(
    start: datetime | None = Query(default=None, alias="startDate"),
    end: datetime | None = Query(default=None, alias="endDate"),
    timezone: str = Depends(get_timezone),
    storage: Storage = Depends(get_storage),
) -> TradingStats:
    start_utc, end_utc = _stats_window(start, end, timezone)
    return await storage.get_stats_by_date_range(start_utc, end_utc, timezone)


@router.get("/daily", response_model=list[DailySummary])
async def get_daily_stats(
    start: datetime | None = Query(default=None, alias="startDate"),
    end: datetime | None = Query(default=None, alias="endDate"),
    timezone: str = Depends(get_timezone),
    storage: Storage = Depends(get_storage),
) -> list[DailySummary]:
    start_utc, end_utc = _stats_window(start, end, timezone)
    return await storage.get_daily_summaries(start_utc, end_utc, timezone)
