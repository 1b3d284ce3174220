from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, Enum, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.timeutils import utcnow
from app.db.base import Base
from app.models.enums import TradeDirection, TradeStatus


class Trade(Base):
    __tablename__ = "trades"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    symbol: Mapped[str] = mapped_column(String(50), index=True)
    direction: Mapped[TradeDirection] = mapped_column(
        Enum(TradeDirection, name="trade_direction", values_callable=lambda e: [m.value for m in e])
    )
    entry_price: Mapped[Decimal] = mapped_column(Numeric(18, 6))
    exit_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 6))
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 4))
    entry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    exit_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    pnl: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    fees: Mapped[Decimal] = mapped_column(Numeric(18, 6), default=Decimal("0"))
    stop_loss: Mapped[Decimal | None] = mapped_column(Numeric(18, 6))
    take_profit: Mapped[Decimal | None] = mapped_column(Numeric(18, 6))
    setup: Mapped[str | None] = mapped_column(String(200))
    notes: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    status: Mapped[TradeStatus] = mapped_column(
        Enum(TradeStatus, name="trade_status", values_callable=lambda e: [m.value for m in e]),
        default=TradeStatus.OPEN,
    )
    account: Mapped[str] = mapped_column(String(100), default="default")
    images: Mapped[list[str]] = mapped_column(JSON, default=list)
    trading_view_url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
