from __future__ import annotations

from enum import Enum as PyEnum


class TradeDirection(str, PyEnum):
    LONG = "long"
    SHORT = "short"


class TradeStatus(str, PyEnum):
    OPEN = "open"
    CLOSED = "closed"
