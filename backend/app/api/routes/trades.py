from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_storage, get_timezone
from app.core.timeutils import EARLIEST, LATEST, parse_datetime
from app.schemas.trade import TradeCreate, TradeRead, TradeUpdate
from app.storage.base import Storage

router = APIRouter(prefix="/api/trades", tags=["trades"])

logger = logging.getLogger(__name__)


@router.get("", response_model=list[TradeRead])
async def list_trades(
    symbol: str | None = None,
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    timezone: str = Depends(get_timezone),
    storage: Storage = Depends(get_storage),
) -> list[TradeRead]:
    start_utc = parse_datetime(start, timezone)
    end_utc = parse_datetime(end, timezone)

    if start_utc is None and end_utc is None:
        if symbol:
            return await storage.get_trades_by_symbol(symbol)
        return await storage.get_all_trades()

    trades = await storage.get_trades_by_date_range(start_utc or EARLIEST, end_utc or LATEST)
    if symbol:
        trades = [trade for trade in trades if trade.symbol == symbol]
    return trades


@router.get("/{trade_id}", response_model=TradeRead)
async def get_trade(trade_id: int, storage: Storage = Depends(get_storage)) -> TradeRead:
    trade = await storage.get_trade_by_id(trade_id)
    if trade is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trade not found")
    return trade


@router.post("", response_model=TradeRead, status_code=status.HTTP_201_CREATED)
async def create_trade(payload: TradeCreate, storage: Storage = Depends(get_storage)) -> TradeRead:
    trade = await storage.create_trade(payload)
    logger.info("Created trade %s for %s", trade.id, trade.symbol)
    return trade


@router.put("/{trade_id}", response_model=TradeRead)
async def update_trade(trade_id: int, payload: TradeUpdate, storage: Storage = Depends(get_storage)) -> TradeRead:
    trade = await storage.update_trade(trade_id, payload)
    if trade is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trade not found")
    logger.info("Updated trade %s", trade_id)
    return trade


@router.delete("/{trade_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trade(trade_id: int, storage: Storage = Depends(get_storage)) -> Response:
    if not await storage.delete_trade(trade_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trade not found")
    logger.info("Deleted trade %s", trade_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
