from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable

from app.core.timeutils import local_date
from app.models.enums import TradeStatus
from app.schemas.stats import DailySummary, TradingStats
from app.schemas.trade import TradeRead
from app.services.pnl import round_cents

# Reported when there are winners but no losing P&L at all, in place of an
# infinite ratio.
INFINITE_PROFIT_FACTOR = Decimal("999")

ZERO = Decimal("0")


def _as_float(value: Decimal) -> float:
    return float(round_cents(value))


def closed_trades(trades: Iterable[TradeRead]) -> list[TradeRead]:
    return [trade for trade in trades if trade.status == TradeStatus.CLOSED and trade.pnl is not None]


def _daily_pnl(trades: Iterable[TradeRead], timezone: str) -> dict[date, list[Decimal]]:
    buckets: dict[date, list[Decimal]] = defaultdict(list)
    for trade in trades:
        buckets[local_date(trade.entry_time, timezone)].append(trade.pnl)
    return buckets


def daily_summaries(trades: Iterable[TradeRead], timezone: str = "UTC") -> list[DailySummary]:
    buckets = _daily_pnl(closed_trades(trades), timezone)
    return [
        DailySummary(date=day, trade_count=len(pnls), total_pnl=_as_float(sum(pnls, ZERO)))
        for day, pnls in sorted(buckets.items(), key=lambda item: item[0])
    ]


def compute_statistics(trades: Iterable[TradeRead], timezone: str = "UTC") -> TradingStats:
    """Aggregate performance figures over a set of trades.

    Only closed trades with a known P&L take part in the win/loss figures.
    A breakeven trade is a loss, while a breakeven day is neither a winning
    nor a losing day. Days are calendar days of ``entry_time`` in ``timezone``.
    """
    trades = list(trades)
    if not trades:
        return TradingStats()

    closed = closed_trades(trades)
    if not closed:
        return TradingStats(total_trades=len(trades), open_trades=len(trades))

    pnls = [trade.pnl for trade in closed]
    wins = [pnl for pnl in pnls if pnl > 0]
    losses = [pnl for pnl in pnls if pnl <= 0]

    total_pnl = sum(pnls, ZERO)
    gross_profit = sum(wins, ZERO)
    gross_loss = abs(sum(losses, ZERO))

    avg_win = gross_profit / len(wins) if wins else ZERO
    avg_loss = gross_loss / len(losses) if losses else ZERO
    win_rate = Decimal(len(wins)) / len(closed) * 100
    avg_win_loss_ratio = avg_win / avg_loss if avg_loss > 0 else ZERO

    if gross_loss > 0:
        profit_factor = gross_profit / gross_loss
    elif gross_profit > 0:
        profit_factor = INFINITE_PROFIT_FACTOR
    else:
        profit_factor = ZERO

    winning_days = 0
    losing_days = 0
    for day_pnls in _daily_pnl(closed, timezone).values():
        day_total = sum(day_pnls, ZERO)
        if day_total > 0:
            winning_days += 1
        elif day_total < 0:
            losing_days += 1
    scored_days = winning_days + losing_days
    day_win_rate = Decimal(winning_days) / scored_days * 100 if scored_days else ZERO

    return TradingStats(
        total_trades=len(trades),
        closed_trades=len(closed),
        open_trades=len(trades) - len(closed),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=_as_float(win_rate),
        day_win_rate=_as_float(day_win_rate),
        total_pnl=_as_float(total_pnl),
        gross_profit=_as_float(gross_profit),
        gross_loss=_as_float(gross_loss),
        avg_win=_as_float(avg_win),
        avg_loss=_as_float(avg_loss),
        profit_factor=_as_float(profit_factor),
        largest_win=_as_float(max(pnls)),
        largest_loss=_as_float(min(pnls)),
        avg_win_loss_ratio=_as_float(avg_win_loss_ratio),
        winning_days=winning_days,
        losing_days=losing_days,
    )
