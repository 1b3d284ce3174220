from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from app.models.enums import TradeDirection, TradeStatus
from app.schemas.common import CamelModel, OptionalDecimal, OptionalPositiveDecimal, PlainDecimal, UtcDatetime


class TradeCreate(CamelModel):
    symbol: str = Field(min_length=1)
    direction: TradeDirection
    entry_price: Decimal
    exit_price: OptionalDecimal = None
    quantity: Decimal = Field(gt=0)
    entry_time: UtcDatetime
    exit_time: UtcDatetime | None = None
    stop_loss: OptionalDecimal = None
    take_profit: OptionalDecimal = None
    fees: OptionalDecimal = None
    setup: str | None = None
    notes: str | None = None
    tags: list[str] | None = None
    status: TradeStatus | None = None
    account: str | None = None
    images: list[str] | None = None
    trading_view_url: str | None = None


class TradeUpdate(CamelModel):
    symbol: str | None = Field(default=None, min_length=1)
    direction: TradeDirection | None = None
    entry_price: OptionalDecimal = None
    exit_price: OptionalDecimal = None
    quantity: OptionalPositiveDecimal = None
    entry_time: UtcDatetime | None = None
    exit_time: UtcDatetime | None = None
    stop_loss: OptionalDecimal = None
    take_profit: OptionalDecimal = None
    fees: OptionalDecimal = None
    setup: str | None = None
    notes: str | None = None
    tags: list[str] | None = None
    status: TradeStatus | None = None
    account: str | None = None
    images: list[str] | None = None
    trading_view_url: str | None = None


class TradeRead(CamelModel):
    id: int
    symbol: str
    direction: TradeDirection
    entry_price: PlainDecimal
    exit_price: PlainDecimal | None = None
    quantity: PlainDecimal
    entry_time: UtcDatetime
    exit_time: UtcDatetime | None = None
    pnl: Decimal | None = None  # None for open positions
    fees: PlainDecimal = Decimal("0")
    stop_loss: PlainDecimal | None = None
    take_profit: PlainDecimal | None = None
    setup: str | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    status: TradeStatus = TradeStatus.OPEN
    account: str = "default"
    images: list[str] = Field(default_factory=list)
    trading_view_url: str | None = None
