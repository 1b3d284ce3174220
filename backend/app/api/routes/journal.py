from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_storage, get_timezone
from app.schemas.journal import JournalEntryCreate, JournalEntryRead, JournalEntryUpdate
from app.storage.base import Storage

router = APIRouter(prefix="/api/journal", tags=["journal"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")


@router.get("", response_model=list[JournalEntryRead])
async def list_journal_entries(storage: Storage = Depends(get_storage)) -> list[JournalEntryRead]:
    return await storage.get_all_journal_entries()


@router.get("/date/{day}", response_model=list[JournalEntryRead])
async def journal_entries_for_day(
    day: date,
    timezone: str = Depends(get_timezone),
    storage: Storage = Depends(get_storage),
) -> list[JournalEntryRead]:
    return await storage.get_journal_entries_by_date(day, timezone)


@router.get("/{entry_id}", response_model=JournalEntryRead)
async def get_journal_entry(entry_id: int, storage: Storage = Depends(get_storage)) -> JournalEntryRead:
    entry = await storage.get_journal_entry_by_id(entry_id)
    if entry is None:
        raise _not_found()
    return entry


@router.post("", response_model=JournalEntryRead, status_code=status.HTTP_201_CREATED)
async def create_journal_entry(
    payload: JournalEntryCreate, storage: Storage = Depends(get_storage)
) -> JournalEntryRead:
    return await storage.create_journal_entry(payload)


@router.put("/{entry_id}", response_model=JournalEntryRead)
async def update_journal_entry(
    entry_id: int, payload: JournalEntryUpdate, storage: Storage = Depends(get_storage)
) -> JournalEntryRead:
    entry = await storage.update_journal_entry(entry_id, payload)
    if entry is None:
        raise _not_found()
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_journal_entry(entry_id: int, storage: Storage = Depends(get_storage)) -> Response:
    if not await storage.delete_journal_entry(entry_id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
