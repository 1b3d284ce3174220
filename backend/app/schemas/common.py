from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.timeutils import ensure_utc


def _plain_decimal(value: Decimal | None) -> Decimal | None:
    """Drops storage padding: 100.000000 -> 100, 100.500000 -> 100.5."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
OptionalDecimal = Annotated[Decimal | None, BeforeValidator(_blank_to_none)]
OptionalPositiveDecimal = Annotated[Annotated[Decimal, Field(gt=0)] | None, BeforeValidator(_blank_to_none)]
PlainDecimal = Annotated[Decimal, AfterValidator(_plain_decimal)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
