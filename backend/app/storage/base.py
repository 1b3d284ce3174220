from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from app.core.timeutils import day_bounds
from app.models.enums import TradeStatus
from app.schemas.journal import JournalEntryCreate, JournalEntryRead, JournalEntryUpdate
from app.schemas.note import DEFAULT_FOLDER, NoteCreate, NoteRead, NoteUpdate
from app.schemas.playbook import PlaybookCreate, PlaybookRead, PlaybookUpdate
from app.schemas.stats import DailySummary, TradingStats
from app.schemas.trade import TradeCreate, TradeRead, TradeUpdate
from app.services.pnl import PNL_INPUT_FIELDS, calculate_pnl
from app.services.statistics import compute_statistics, daily_summaries

TRADE_DEFAULTS: dict[str, Any] = {
    "tags": list,
    "images": list,
    "fees": lambda: Decimal("0"),
    "status": lambda: TradeStatus.OPEN,
    "account": lambda: "default",
}

# Fields that an update may not clear; a null for one of these is ignored.
NON_NULLABLE_TRADE_FIELDS = frozenset(
    {"symbol", "direction", "entry_price", "quantity", "entry_time", *TRADE_DEFAULTS}
)


def trade_values(payload: TradeCreate) -> dict[str, Any]:
    """Column values for a new trade: defaults applied and P&L computed."""
    values = payload.model_dump()
    for name, factory in TRADE_DEFAULTS.items():
        if values.get(name) is None:
            values[name] = factory()
    values["pnl"] = _pnl_of(values)
    return values


def trade_changes(current: TradeRead, update: TradeUpdate) -> dict[str, Any]:
    """Fields to write for a partial update, including a recomputed P&L when due."""
    changes = {
        name: value
        for name, value in update.model_dump(exclude_unset=True).items()
        if value is not None or name not in NON_NULLABLE_TRADE_FIELDS
    }
    if PNL_INPUT_FIELDS & changes.keys():
        merged = {**current.model_dump(), **changes}
        changes["pnl"] = _pnl_of(merged)
    return changes


def _pnl_of(values: dict[str, Any]) -> Decimal | None:
    return calculate_pnl(
        values.get("entry_price"),
        values.get("exit_price"),
        values.get("quantity"),
        values.get("direction"),
        values.get("fees"),
    )


def journal_values(payload: JournalEntryCreate) -> dict[str, Any]:
    values = payload.model_dump()
    if values.get("images") is None:
        values["images"] = []
    return values


def note_values(payload: NoteCreate) -> dict[str, Any]:
    values = payload.model_dump()
    if not values.get("folder"):
        values["folder"] = DEFAULT_FOLDER
    if values.get("tags") is None:
        values["tags"] = []
    return values


def partial_changes(update: JournalEntryUpdate | NoteUpdate | PlaybookUpdate, required: frozenset[str]) -> dict[str, Any]:
    return {
        name: value
        for name, value in update.model_dump(exclude_unset=True).items()
        if value is not None or name not in required
    }


class Storage(ABC):
    """Persistence interface shared by the in-memory and database stores.

    Lookups of unknown ids return ``None`` (or ``False`` for deletes) instead
    of raising; the HTTP layer turns that into a 404.
    """

    # Trades
    @abstractmethod
    async def get_all_trades(self) -> list[TradeRead]: ...

    @abstractmethod
    async def get_trade_by_id(self, trade_id: int) -> TradeRead | None: ...

    @abstractmethod
    async def get_trades_by_symbol(self, symbol: str) -> list[TradeRead]: ...

    @abstractmethod
    async def get_trades_by_date_range(self, start: datetime, end: datetime) -> list[TradeRead]: ...

    @abstractmethod
    async def create_trade(self, payload: TradeCreate) -> TradeRead: ...

    @abstractmethod
    async def update_trade(self, trade_id: int, update: TradeUpdate) -> TradeRead | None: ...

    @abstractmethod
    async def delete_trade(self, trade_id: int) -> bool: ...

    # Journal
    @abstractmethod
    async def get_all_journal_entries(self) -> list[JournalEntryRead]: ...

    @abstractmethod
    async def get_journal_entry_by_id(self, entry_id: int) -> JournalEntryRead | None: ...

    @abstractmethod
    async def get_journal_entries_by_date_range(self, start: datetime, end: datetime) -> list[JournalEntryRead]: ...

    @abstractmethod
    async def create_journal_entry(self, payload: JournalEntryCreate) -> JournalEntryRead: ...

    @abstractmethod
    async def update_journal_entry(self, entry_id: int, update: JournalEntryUpdate) -> JournalEntryRead | None: ...

    @abstractmethod
    async def delete_journal_entry(self, entry_id: int) -> bool: ...

    # Notes
    @abstractmethod
    async def get_all_notes(self) -> list[NoteRead]: ...

    @abstractmethod
    async def get_note_by_id(self, note_id: int) -> NoteRead | None: ...

    @abstractmethod
    async def get_notes_by_folder(self, folder: str) -> list[NoteRead]: ...

    @abstractmethod
    async def create_note(self, payload: NoteCreate) -> NoteRead: ...

    @abstractmethod
    async def update_note(self, note_id: int, update: NoteUpdate) -> NoteRead | None: ...

    @abstractmethod
    async def delete_note(self, note_id: int) -> bool: ...

    # Playbooks
    @abstractmethod
    async def get_all_playbooks(self) -> list[PlaybookRead]: ...

    @abstractmethod
    async def get_playbook_by_id(self, playbook_id: int) -> PlaybookRead | None: ...

    @abstractmethod
    async def create_playbook(self, payload: PlaybookCreate) -> PlaybookRead: ...

    @abstractmethod
    async def update_playbook(self, playbook_id: int, update: PlaybookUpdate) -> PlaybookRead | None: ...

    @abstractmethod
    async def delete_playbook(self, playbook_id: int) -> bool: ...

    async def get_journal_entries_by_date(self, day: date, timezone: str = "UTC") -> list[JournalEntryRead]:
        start, end = day_bounds(day, timezone)
        return await self.get_journal_entries_by_date_range(start, end)

    async def get_stats_by_date_range(self, start: datetime, end: datetime, timezone: str = "UTC") -> TradingStats:
        trades = await self.get_trades_by_date_range(start, end)
        return compute_statistics(trades, timezone)

    async def get_daily_summaries(self, start: datetime, end: datetime, timezone: str = "UTC") -> list[DailySummary]:
        trades = await self.get_trades_by_date_range(start, end)
        return daily_summaries(trades, timezone)
