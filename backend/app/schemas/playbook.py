from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, UtcDatetime


class PlaybookCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    rules: Any

    @field_validator("rules")
    @classmethod
    def rules_required(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("rules must not be null")
        return value


class PlaybookUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    rules: Any = None


class PlaybookRead(CamelModel):
    id: int
    name: str
    description: str | None = None
    rules: Any
    created_at: UtcDatetime
    updated_at: UtcDatetime
