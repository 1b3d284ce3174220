from __future__ import annotations

import itertools
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, TypeVar

from pydantic import BaseModel

from app.core.timeutils import ensure_utc, utcnow
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

RecordT = TypeVar("RecordT", bound=BaseModel)

EXAMPLE_NOTES = [
    NoteCreate(
        title="Trade Notes",
        content="Example note for trade analysis",
        folder="Trade Notes",
        tags=["example", "setup"],
    ),
    NoteCreate(
        title="Daily Journal",
        content="Example note for daily journal",
        folder="Daily Journal",
        tags=["example", "journal"],
    ),
    NoteCreate(
        title="Sessions Recap",
        content="Example note for session recaps",
        folder="Sessions Recap",
        tags=["example", "recap"],
    ),
    NoteCreate(
        title="My notes",
        content="Example personal note",
        folder="My notes",
        tags=["example", "personal"],
    ),
]


def _copies(records: Iterable[RecordT], key: Callable[[RecordT], Any], reverse: bool = True) -> list[RecordT]:
    return [record.model_copy(deep=True) for record in sorted(records, key=key, reverse=reverse)]


def _copy(record: RecordT | None) -> RecordT | None:
    return record.model_copy(deep=True) if record is not None else None


def _within(moment: datetime, start: datetime, end: datetime) -> bool:
    return ensure_utc(start) <= moment <= ensure_utc(end)


class MemStorage(Storage):
    """Process-local store keyed by integer ids that are never reused."""

    def __init__(self, seed_notes: bool = False) -> None:
        self._trades: dict[int, TradeRead] = {}
        self._journal_entries: dict[int, JournalEntryRead] = {}
        self._notes: dict[int, NoteRead] = {}
        self._playbooks: dict[int, PlaybookRead] = {}

        self._trade_ids = itertools.count(1)
        self._journal_entry_ids = itertools.count(1)
        self._note_ids = itertools.count(1)
        self._playbook_ids = itertools.count(1)

        if seed_notes:
            for note in EXAMPLE_NOTES:
                self._insert_note(note)

    # Trades
    async def get_all_trades(self) -> list[TradeRead]:
        return _copies(self._trades.values(), key=lambda trade: trade.entry_time)

    async def get_trade_by_id(self, trade_id: int) -> TradeRead | None:
        return _copy(self._trades.get(trade_id))

    async def get_trades_by_symbol(self, symbol: str) -> list[TradeRead]:
        matching = (trade for trade in self._trades.values() if trade.symbol == symbol)
        return _copies(matching, key=lambda trade: trade.entry_time)

    async def get_trades_by_date_range(self, start: datetime, end: datetime) -> list[TradeRead]:
        matching = (trade for trade in self._trades.values() if _within(trade.entry_time, start, end))
        return _copies(matching, key=lambda trade: trade.entry_time)

    async def create_trade(self, payload: TradeCreate) -> TradeRead:
        trade = TradeRead(id=next(self._trade_ids), **trade_values(payload))
        self._trades[trade.id] = trade
        logger.debug("Stored trade %s (%s, pnl=%s)", trade.id, trade.symbol, trade.pnl)
        return _copy(trade)

    async def update_trade(self, trade_id: int, update: TradeUpdate) -> TradeRead | None:
        existing = self._trades.get(trade_id)
        if existing is None:
            return None
        updated = TradeRead.model_validate({**existing.model_dump(), **trade_changes(existing, update)})
        self._trades[trade_id] = updated
        return _copy(updated)

    async def delete_trade(self, trade_id: int) -> bool:
        return self._trades.pop(trade_id, None) is not None

    # Journal
    async def get_all_journal_entries(self) -> list[JournalEntryRead]:
        return _copies(self._journal_entries.values(), key=lambda entry: entry.date)

    async def get_journal_entry_by_id(self, entry_id: int) -> JournalEntryRead | None:
        return _copy(self._journal_entries.get(entry_id))

    async def get_journal_entries_by_date_range(self, start: datetime, end: datetime) -> list[JournalEntryRead]:
        matching = (entry for entry in self._journal_entries.values() if _within(entry.date, start, end))
        return _copies(matching, key=lambda entry: entry.date)

    async def create_journal_entry(self, payload: JournalEntryCreate) -> JournalEntryRead:
        entry = JournalEntryRead(id=next(self._journal_entry_ids), **journal_values(payload))
        self._journal_entries[entry.id] = entry
        return _copy(entry)

    async def update_journal_entry(self, entry_id: int, update: JournalEntryUpdate) -> JournalEntryRead | None:
        existing = self._journal_entries.get(entry_id)
        if existing is None:
            return None
        changes = partial_changes(update, frozenset({"date", "title", "content", "images"}))
        updated = existing.model_copy(update=changes, deep=True)
        self._journal_entries[entry_id] = updated
        return _copy(updated)

    async def delete_journal_entry(self, entry_id: int) -> bool:
        return self._journal_entries.pop(entry_id, None) is not None

    # Notes
    async def get_all_notes(self) -> list[NoteRead]:
        return _copies(self._notes.values(), key=lambda note: note.updated_at)

    async def get_note_by_id(self, note_id: int) -> NoteRead | None:
        return _copy(self._notes.get(note_id))

    async def get_notes_by_folder(self, folder: str) -> list[NoteRead]:
        matching = (note for note in self._notes.values() if note.folder == folder)
        return _copies(matching, key=lambda note: note.updated_at)

    async def create_note(self, payload: NoteCreate) -> NoteRead:
        return _copy(self._insert_note(payload))

    def _insert_note(self, payload: NoteCreate) -> NoteRead:
        now = utcnow()
        note = NoteRead(id=next(self._note_ids), created_at=now, updated_at=now, **note_values(payload))
        self._notes[note.id] = note
        return note

    async def update_note(self, note_id: int, update: NoteUpdate) -> NoteRead | None:
        existing = self._notes.get(note_id)
        if existing is None:
            return None
        changes = partial_changes(update, frozenset({"title", "content", "folder", "tags"}))
        changes["updated_at"] = utcnow()
        updated = existing.model_copy(update=changes, deep=True)
        self._notes[note_id] = updated
        return _copy(updated)

    async def delete_note(self, note_id: int) -> bool:
        return self._notes.pop(note_id, None) is not None

    # Playbooks
    async def get_all_playbooks(self) -> list[PlaybookRead]:
        return _copies(self._playbooks.values(), key=lambda playbook: playbook.updated_at)

    async def get_playbook_by_id(self, playbook_id: int) -> PlaybookRead | None:
        return _copy(self._playbooks.get(playbook_id))

    async def create_playbook(self, payload: PlaybookCreate) -> PlaybookRead:
        now = utcnow()
        playbook = PlaybookRead(id=next(self._playbook_ids), created_at=now, updated_at=now, **payload.model_dump())
        self._playbooks[playbook.id] = playbook
        return _copy(playbook)

    async def update_playbook(self, playbook_id: int, update: PlaybookUpdate) -> PlaybookRead | None:
        existing = self._playbooks.get(playbook_id)
        if existing is None:
            return None
        changes = partial_changes(update, frozenset({"name", "rules"}))
        changes["updated_at"] = utcnow()
        updated = existing.model_copy(update=changes, deep=True)
        self._playbooks[playbook_id] = updated
        return _copy(updated)

    async def delete_playbook(self, playbook_id: int) -> bool:
        return self._playbooks.pop(playbook_id, None) is not None
