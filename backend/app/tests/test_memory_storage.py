from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from app.models.enums import TradeDirection, TradeStatus
from app.schemas.journal import JournalEntryCreate, JournalEntryUpdate
from app.schemas.note import NoteCreate, NoteUpdate
from app.schemas.playbook import PlaybookCreate, PlaybookUpdate
from app.schemas.trade import TradeUpdate
from app.storage.memory import MemStorage


def _at(day: int, hour: int = 10) -> datetime:
    return datetime(2024, 3, day, hour, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_create_applies_defaults_and_pnl(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade(exit_price="110", status="closed"))

    assert trade.id == 1
    assert trade.pnl == Decimal("100.00")
    assert trade.tags == []
    assert trade.images == []
    assert trade.fees == Decimal("0")
    assert trade.account == "default"
    assert trade.status == TradeStatus.CLOSED


@pytest.mark.asyncio
async def test_open_trade_defaults(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade(tags=None, account=None))

    assert trade.pnl is None
    assert trade.status == TradeStatus.OPEN
    assert trade.account == "default"
    assert trade.tags == []


@pytest.mark.asyncio
async def test_missing_ids_return_none(memory_storage, make_trade) -> None:
    assert await memory_storage.get_trade_by_id(42) is None
    assert await memory_storage.update_trade(42, TradeUpdate(notes="x")) is None
    assert await memory_storage.delete_trade(42) is False


@pytest.mark.asyncio
async def test_all_trades_most_recent_first(memory_storage, make_trade) -> None:
    for day in (5, 3, 9):
        await memory_storage.create_trade(make_trade(entry_time=_at(day)))

    trades = await memory_storage.get_all_trades()

    assert [trade.entry_time.day for trade in trades] == [9, 5, 3]


@pytest.mark.asyncio
async def test_date_range_is_inclusive(memory_storage, make_trade) -> None:
    for day in (1, 2, 3, 4):
        await memory_storage.create_trade(make_trade(entry_time=_at(day)))

    trades = await memory_storage.get_trades_by_date_range(_at(2), _at(3))

    assert [trade.entry_time.day for trade in trades] == [3, 2]


@pytest.mark.asyncio
async def test_trades_by_symbol(memory_storage, make_trade) -> None:
    await memory_storage.create_trade(make_trade(symbol="AAPL"))
    await memory_storage.create_trade(make_trade(symbol="MSFT"))

    trades = await memory_storage.get_trades_by_symbol("MSFT")

    assert [trade.symbol for trade in trades] == ["MSFT"]


@pytest.mark.asyncio
async def test_adding_exit_price_computes_pnl_without_closing(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade())
    assert trade.pnl is None

    updated = await memory_storage.update_trade(trade.id, TradeUpdate(exit_price="95"))

    assert updated.pnl == Decimal("-50.00")
    assert updated.status == TradeStatus.OPEN


@pytest.mark.asyncio
async def test_pnl_recomputed_when_inputs_change(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade(exit_price="110"))

    with_fees = await memory_storage.update_trade(trade.id, TradeUpdate(fees="4"))
    assert with_fees.pnl == Decimal("96.00")

    flipped = await memory_storage.update_trade(trade.id, TradeUpdate(direction=TradeDirection.SHORT))
    assert flipped.pnl == Decimal("-104.00")

    resized = await memory_storage.update_trade(trade.id, TradeUpdate(quantity="1"))
    assert resized.pnl == Decimal("-14.00")


@pytest.mark.asyncio
async def test_unrelated_update_keeps_pnl(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade(exit_price="110"))

    updated = await memory_storage.update_trade(trade.id, TradeUpdate(notes="clean breakout", status="closed"))

    assert updated.pnl == Decimal("100.00")
    assert updated.notes == "clean breakout"
    assert updated.status == TradeStatus.CLOSED


@pytest.mark.asyncio
async def test_clearing_exit_price_clears_pnl(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade(exit_price="110"))

    updated = await memory_storage.update_trade(trade.id, TradeUpdate(exit_price=None))

    assert updated.exit_price is None
    assert updated.pnl is None


@pytest.mark.asyncio
async def test_null_for_required_field_is_ignored(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade(tags=["a"]))

    updated = await memory_storage.update_trade(trade.id, TradeUpdate(symbol=None, tags=None))

    assert updated.symbol == "AAPL"
    assert updated.tags == ["a"]


@pytest.mark.asyncio
async def test_ids_are_not_reused(memory_storage, make_trade) -> None:
    first = await memory_storage.create_trade(make_trade())
    assert await memory_storage.delete_trade(first.id) is True
    assert await memory_storage.delete_trade(first.id) is False

    second = await memory_storage.create_trade(make_trade())

    assert second.id == first.id + 1


@pytest.mark.asyncio
async def test_returned_records_are_copies(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade(tags=["setup"]))
    trade.tags.append("mutated")

    stored = await memory_storage.get_trade_by_id(trade.id)

    assert stored.tags == ["setup"]


@pytest.mark.asyncio
async def test_stats_by_date_range(memory_storage, make_trade) -> None:
    await memory_storage.create_trade(make_trade(exit_price="110", status="closed", entry_time=_at(4)))
    await memory_storage.create_trade(make_trade(exit_price="95", status="closed", entry_time=_at(5)))
    await memory_storage.create_trade(make_trade(entry_time=_at(5, 12)))
    await memory_storage.create_trade(make_trade(exit_price="200", status="closed", entry_time=_at(20)))

    stats = await memory_storage.get_stats_by_date_range(_at(1, 0), _at(10, 0))

    assert stats.total_trades == 3
    assert stats.closed_trades == 2
    assert stats.open_trades == 1
    assert stats.total_pnl == 50.0
    assert stats.profit_factor == 2.0
    assert stats.day_win_rate == 50.0


@pytest.mark.asyncio
async def test_stats_for_empty_range(memory_storage, make_trade) -> None:
    await memory_storage.create_trade(make_trade(exit_price="110", status="closed", entry_time=_at(4)))

    stats = await memory_storage.get_stats_by_date_range(_at(10), _at(11))

    assert stats.total_trades == 0
    assert stats.win_rate == 0


@pytest.mark.asyncio
async def test_journal_entries_by_local_day(memory_storage) -> None:
    for moment in (datetime(2024, 3, 5, 3, tzinfo=timezone.utc), _at(5, 15), _at(6, 15)):
        await memory_storage.create_journal_entry(JournalEntryCreate(date=moment, title="Recap", content="..."))

    in_utc = await memory_storage.get_journal_entries_by_date(date(2024, 3, 5))
    in_new_york = await memory_storage.get_journal_entries_by_date(date(2024, 3, 5), "America/New_York")

    assert len(in_utc) == 2
    assert [entry.date.hour for entry in in_new_york] == [15]


@pytest.mark.asyncio
async def test_journal_entry_update_and_delete(memory_storage) -> None:
    entry = await memory_storage.create_journal_entry(JournalEntryCreate(date=_at(5), title="Recap", content="..."))
    assert entry.mood == 3
    assert entry.images == []

    updated = await memory_storage.update_journal_entry(entry.id, JournalEntryUpdate(mood=5, market_notes="Trend day"))

    assert updated.mood == 5
    assert updated.market_notes == "Trend day"
    assert updated.title == "Recap"
    assert await memory_storage.delete_journal_entry(entry.id) is True
    assert await memory_storage.get_journal_entry_by_id(entry.id) is None


@pytest.mark.asyncio
async def test_seeded_notes_and_folders() -> None:
    storage = MemStorage(seed_notes=True)

    notes = await storage.get_all_notes()
    recaps = await storage.get_notes_by_folder("Sessions Recap")

    assert len(notes) == 4
    assert [note.title for note in recaps] == ["Sessions Recap"]


@pytest.mark.asyncio
async def test_note_update_touches_updated_at(memory_storage) -> None:
    note = await memory_storage.create_note(NoteCreate(title="Idea", content="Fade the open"))
    assert note.folder == "All notes"

    updated = await memory_storage.update_note(note.id, NoteUpdate(content="Fade the gap"))

    assert updated.content == "Fade the gap"
    assert updated.created_at == note.created_at
    assert updated.updated_at >= note.updated_at
    assert await memory_storage.update_note(99, NoteUpdate(content="x")) is None


@pytest.mark.asyncio
async def test_playbook_crud(memory_storage) -> None:
    playbook = await memory_storage.create_playbook(
        PlaybookCreate(name="Opening range", rules=[{"rule": "Wait 15 minutes"}])
    )
    assert playbook.description is None

    updated = await memory_storage.update_playbook(playbook.id, PlaybookUpdate(description="ORB"))

    assert updated.description == "ORB"
    assert updated.rules == [{"rule": "Wait 15 minutes"}]
    assert [item.id for item in await memory_storage.get_all_playbooks()] == [playbook.id]
    assert await memory_storage.delete_playbook(playbook.id) is True
    assert await memory_storage.get_all_playbooks() == []


@pytest.mark.asyncio
async def test_updated_prices_are_normalized(memory_storage, make_trade) -> None:
    trade = await memory_storage.create_trade(make_trade())

    updated = await memory_storage.update_trade(trade.id, TradeUpdate(exit_price="110.500", fees="1.00"))

    assert str(updated.exit_price) == "110.5"
    assert str(updated.fees) == "1"
    assert updated.pnl == Decimal("104.00")
