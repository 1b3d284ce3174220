from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.timeutils import ensure_utc, utcnow
from app.db.base import Base
from app.models import JournalEntry, Note, Playbook, Trade
from app.schemas.journal import JournalEntryCreate, JournalEntryRead, JournalEntryUpdate
from app.schemas.note import NoteCreate, NoteRead, NoteUpdate
from app.schemas.playbook import PlaybookCreate, PlaybookRead, PlaybookUpdate
from app.schemas.trade import TradeCreate, TradeRead, TradeUpdate
from app.storage.base import (
    Storage,
    journal_values,
    note_values,
    partial_changes,
    trade_changes,
    trade_values,
)

logger = logging.getLogger(__name__)

ReadT = TypeVar("ReadT", bound=BaseModel)


class DatabaseStorage(Storage):
    """SQLAlchemy-backed store; one instance wraps one session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _fetch(self, stmt, schema: type[ReadT]) -> list[ReadT]:
        result = await self.session.execute(stmt)
        return [schema.model_validate(row) for row in result.scalars().all()]

    async def _get(self, model: type[Base], record_id: int, schema: type[ReadT]) -> ReadT | None:
        row = await self.session.get(model, record_id)
        return schema.model_validate(row) if row is not None else None

    async def _insert(self, row: Base, schema: type[ReadT]) -> ReadT:
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return schema.model_validate(row)

    async def _apply(self, model: type[Base], record_id: int, changes: dict[str, Any], schema: type[ReadT]) -> ReadT | None:
        row = await self.session.get(model, record_id)
        if row is None:
            return None
        for name, value in changes.items():
            setattr(row, name, value)
        await self.session.commit()
        await self.session.refresh(row)
        return schema.model_validate(row)

    async def _delete(self, model: type[Base], record_id: int) -> bool:
        row = await self.session.get(model, record_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.commit()
        return True

    # Trades
    async def get_all_trades(self) -> list[TradeRead]:
        stmt = select(Trade).order_by(Trade.entry_time.desc(), Trade.id)
        return await self._fetch(stmt, TradeRead)

    async def get_trade_by_id(self, trade_id: int) -> TradeRead | None:
        return await self._get(Trade, trade_id, TradeRead)

    async def get_trades_by_symbol(self, symbol: str) -> list[TradeRead]:
        stmt = select(Trade).where(Trade.symbol == symbol).order_by(Trade.entry_time.desc(), Trade.id)
        return await self._fetch(stmt, TradeRead)

    async def get_trades_by_date_range(self, start: datetime, end: datetime) -> list[TradeRead]:
        stmt = (
            select(Trade)
            .where(and_(Trade.entry_time >= ensure_utc(start), Trade.entry_time <= ensure_utc(end)))
            .order_by(Trade.entry_time.desc(), Trade.id)
        )
        return await self._fetch(stmt, TradeRead)

    async def create_trade(self, payload: TradeCreate) -> TradeRead:
        trade = await self._insert(Trade(**trade_values(payload)), TradeRead)
        logger.debug("Stored trade %s (%s, pnl=%s)", trade.id, trade.symbol, trade.pnl)
        return trade

    async def update_trade(self, trade_id: int, update: TradeUpdate) -> TradeRead | None:
        current = await self._get(Trade, trade_id, TradeRead)
        if current is None:
            return None
        return await self._apply(Trade, trade_id, trade_changes(current, update), TradeRead)

    async def delete_trade(self, trade_id: int) -> bool:
        return await self._delete(Trade, trade_id)

    # Journal
    async def get_all_journal_entries(self) -> list[JournalEntryRead]:
        stmt = select(JournalEntry).order_by(JournalEntry.date.desc(), JournalEntry.id)
        return await self._fetch(stmt, JournalEntryRead)

    async def get_journal_entry_by_id(self, entry_id: int) -> JournalEntryRead | None:
        return await self._get(JournalEntry, entry_id, JournalEntryRead)

    async def get_journal_entries_by_date_range(self, start: datetime, end: datetime) -> list[JournalEntryRead]:
        stmt = (
            select(JournalEntry)
            .where(and_(JournalEntry.date >= ensure_utc(start), JournalEntry.date <= ensure_utc(end)))
            .order_by(JournalEntry.date.desc(), JournalEntry.id)
        )
        return await self._fetch(stmt, JournalEntryRead)

    async def create_journal_entry(self, payload: JournalEntryCreate) -> JournalEntryRead:
        return await self._insert(JournalEntry(**journal_values(payload)), JournalEntryRead)

    async def update_journal_entry(self, entry_id: int, update: JournalEntryUpdate) -> JournalEntryRead | None:
        changes = partial_changes(update, frozenset({"date", "title", "content", "images"}))
        return await self._apply(JournalEntry, entry_id, changes, JournalEntryRead)

    async def delete_journal_entry(self, entry_id: int) -> bool:
        return await self._delete(JournalEntry, entry_id)

    # Notes
    async def get_all_notes(self) -> list[NoteRead]:
        stmt = select(Note).order_by(Note.updated_at.desc(), Note.id)
        return await self._fetch(stmt, NoteRead)

    async def get_note_by_id(self, note_id: int) -> NoteRead | None:
        return await self._get(Note, note_id, NoteRead)

    async def get_notes_by_folder(self, folder: str) -> list[NoteRead]:
        stmt = select(Note).where(Note.folder == folder).order_by(Note.updated_at.desc(), Note.id)
        return await self._fetch(stmt, NoteRead)

    async def create_note(self, payload: NoteCreate) -> NoteRead:
        return await self._insert(Note(**note_values(payload)), NoteRead)

    async def update_note(self, note_id: int, update: NoteUpdate) -> NoteRead | None:
        changes = partial_changes(update, frozenset({"title", "content", "folder", "tags"}))
        changes["updated_at"] = utcnow()
        return await self._apply(Note, note_id, changes, NoteRead)

    async def delete_note(self, note_id: int) -> bool:
        return await self._delete(Note, note_id)

    # Playbooks
    async def get_all_playbooks(self) -> list[PlaybookRead]:
        stmt = select(Playbook).order_by(Playbook.updated_at.desc(), Playbook.id)
        return await self._fetch(stmt, PlaybookRead)

    async def get_playbook_by_id(self, playbook_id: int) -> PlaybookRead | None:
        return await self._get(Playbook, playbook_id, PlaybookRead)

    async def create_playbook(self, payload: PlaybookCreate) -> PlaybookRead:
        return await self._insert(Playbook(**payload.model_dump()), PlaybookRead)

    async def update_playbook(self, playbook_id: int, update: PlaybookUpdate) -> PlaybookRead | None:
        changes = partial_changes(update, frozenset({"name", "rules"}))
        changes["updated_at"] = utcnow()
        return await self._apply(Playbook, playbook_id, changes, PlaybookRead)

    async def delete_playbook(self, playbook_id: int) -> bool:
        return await self._delete(Playbook, playbook_id)
