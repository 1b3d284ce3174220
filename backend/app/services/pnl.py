from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from app.models.enums import TradeDirection

CENT = Decimal("0.01")

# Fields whose change invalidates a stored P&L.
PNL_INPUT_FIELDS = frozenset({"entry_price", "exit_price", "quantity", "direction", "fees"})


def to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_pnl(
    entry_price: Any,
    exit_price: Any,
    quantity: Any,
    direction: TradeDirection | str | None,
    fees: Any = 0,
) -> Decimal | None:
    """Realized P&L of a trade, net of fees, rounded to cents.

    Returns ``None`` when the trade has no exit price or when any of the other
    inputs cannot be read as a number; a malformed trade has an indeterminate
    P&L rather than raising.
    """
    entry = to_decimal(entry_price)
    exit_ = to_decimal(exit_price)
    qty = to_decimal(quantity)
    if entry is None or exit_ is None or qty is None:
        return None

    if direction == TradeDirection.LONG:
        gross = (exit_ - entry) * qty
    elif direction == TradeDirection.SHORT:
        gross = (entry - exit_) * qty
    else:
        return None

    return round_cents(gross - (to_decimal(fees) or Decimal("0")))
