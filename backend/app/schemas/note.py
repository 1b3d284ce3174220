from __future__ import annotations

from pydantic import Field

from app.schemas.common import CamelModel, UtcDatetime

DEFAULT_FOLDER = "All notes"


class NoteCreate(CamelModel):
    title: str = Field(min_length=1)
    content: str
    folder: str | None = None
    tags: list[str] | None = None


class NoteUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = None
    folder: str | None = None
    tags: list[str] | None = None


class NoteRead(CamelModel):
    id: int
    title: str
    content: str
    folder: str = DEFAULT_FOLDER
    tags: list[str] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime
