from __future__ import annotations

from datetime import date

from pydantic import Field

from app.schemas.common import CamelModel


class TradingStats(CamelModel):
    total_trades: int = 0
    closed_trades: int = 0
    open_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    day_win_rate: float = 0.0
    total_pnl: float = Field(default=0.0, alias="totalPnL")
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    avg_win_loss_ratio: float = 0.0
    winning_days: int = 0
    losing_days: int = 0


class DailySummary(CamelModel):
    date: date
    trade_count: int
    total_pnl: float = Field(alias="totalPnL")
