from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_storage
from app.schemas.playbook import PlaybookCreate, PlaybookRead, PlaybookUpdate
from app.storage.base import Storage

router = APIRouter(prefix="/api/playbooks", tags=["playbooks"])


@router.get("", response_model=list[PlaybookRead])
async def list_playbooks(storage: Storage = Depends(get_storage)) -> list[PlaybookRead]:
    return await storage.get_all_playbooks()


@router.get("/{playbook_id}", response_model=PlaybookRead)
async def get_playbook(playbook_id: int, storage: Storage = Depends(get_storage)) -> PlaybookRead:
    playbook = await storage.get_playbook_by_id(playbook_id)
    if playbook is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Playbook not found")
    return playbook


@router.post("", response_model=PlaybookRead, status_code=status.HTTP_201_CREATED)
async def create_playbook(payload: PlaybookCreate, storage: Storage = Depends(get_storage)) -> PlaybookRead:
    return await storage.create_playbook(payload)


@router.put("/{playbook_id}", response_model=PlaybookRead)
async def update_playbook(
    playbook_id: int, payload: PlaybookUpdate, storage: Storage = Depends(get_storage)
) -> PlaybookRead:
    playbook = await storage.update_playbook(playbook_id, payload)
    if playbook is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Playbook not found")
    return playbook


@router.delete("/{playbook_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_playbook(playbook_id: int, storage: Storage = Depends(get_storage)) -> Response:
    if not await storage.delete_playbook(playbook_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Playbook not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
