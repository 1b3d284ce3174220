from __future__ import annotations

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import HTTPException, Query, status

from app.core.config import get_settings
from app.core.timeutils import InvalidTimezoneError, get_zone
from app.db.session import get_session
from app.storage.base import Storage
from app.storage.database import DatabaseStorage
from app.storage.memory import MemStorage


@lru_cache()
def get_memory_storage() -> MemStorage:
    return MemStorage(seed_notes=get_settings().seed_example_notes)


async def get_storage() -> AsyncGenerator[Storage, None]:
    if get_settings().storage_backend == "database":
        async for session in get_session():
            yield DatabaseStorage(session)
    else:
        yield get_memory_storage()


def get_timezone(timezone: str | None = Query(default=None)) -> str:
    name = timezone or get_settings().default_timezone
    try:
        get_zone(name)
    except InvalidTimezoneError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return name
