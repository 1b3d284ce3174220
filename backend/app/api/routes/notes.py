from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_storage
from app.schemas.note import NoteCreate, NoteRead, NoteUpdate
from app.storage.base import Storage

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=list[NoteRead])
async def list_notes(storage: Storage = Depends(get_storage)) -> list[NoteRead]:
    return await storage.get_all_notes()


@router.get("/folder/{folder}", response_model=list[NoteRead])
async def notes_in_folder(folder: str, storage: Storage = Depends(get_storage)) -> list[NoteRead]:
    return await storage.get_notes_by_folder(folder)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(note_id: int, storage: Storage = Depends(get_storage)) -> NoteRead:
    note = await storage.get_note_by_id(note_id)
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note


@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(payload: NoteCreate, storage: Storage = Depends(get_storage)) -> NoteRead:
    return await storage.create_note(payload)


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(note_id: int, payload: NoteUpdate, storage: Storage = Depends(get_storage)) -> NoteRead:
    note = await storage.update_note(note_id, payload)
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(note_id: int, storage: Storage = Depends(get_storage)) -> Response:
    if not await storage.delete_note(note_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
