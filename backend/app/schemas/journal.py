from __future__ import annotations

from pydantic import Field

from app.schemas.common import CamelModel, UtcDatetime


class JournalEntryCreate(CamelModel):
    date: UtcDatetime
    title: str = Field(min_length=1)
    content: str
    mood: int | None = Field(default=3, ge=1, le=5)
    market_notes: str | None = None
    images: list[str] | None = None


class JournalEntryUpdate(CamelModel):
    date: UtcDatetime | None = None
    title: str | None = Field(default=None, min_length=1)
    content: str | None = None
    mood: int | None = Field(default=None, ge=1, le=5)
    market_notes: str | None = None
    images: list[str] | None = None


class JournalEntryRead(CamelModel):
    id: int
    date: UtcDatetime
    title: str
    content: str
    mood: int | None = None
    market_notes: str | None = None
    images: list[str] = Field(default_factory=list)
