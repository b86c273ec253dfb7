"""
Screen booking price calculation.

Shared by the booking wizard (to show a quote) and the API (which recomputes
the quote on submission and never trusts a client supplied total).
"""
import enum
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

SECONDS_PER_HOUR = 3600


class PricingType(str, enum.Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"

    @property
    def unit_hours(self) -> int:
        return UNIT_HOURS[self]

    @classmethod
    def parse(cls, value) -> "PricingType":
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            raise ValueError(f"Unknown pricing type: {value!r}") from None


UNIT_HOURS = {
    PricingType.HOURLY: 1,
    PricingType.DAILY: 24,
    PricingType.WEEKLY: 24 * 7,
}


@dataclass(frozen=True)
class PriceQuote:
    pricing_type: PricingType
    duration: int          # whole hours, ceil'd, stored verbatim on the booking
    units: int             # billed units (>= 1)
    unit_price: Decimal
    total_price: Decimal

    def as_dict(self) -> dict:
        return {
            "pricingType": self.pricing_type.value,
            "duration": self.duration,
            "units": self.units,
            "unitPrice": str(self.unit_price),
            "totalPrice": str(self.total_price),
        }


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so floats like 0.1 do not leak binary noise
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Invalid price: {value!r}") from None


def hours_between(start: datetime, end: datetime) -> int:
    """Hours from start to end, any partial hour rounds up."""
    seconds = (end - start).total_seconds()
    return math.ceil(seconds / SECONDS_PER_HOUR)


def billing_units(pricing_type, hours: int) -> int:
    unit_hours = PricingType.parse(pricing_type).unit_hours
    return max(1, math.ceil(hours / unit_hours))


def calculate_price(pricing_type, price_per_unit, start: datetime, end: datetime) -> PriceQuote:
    """
    Quote a booking window.

    Ordering of start/end is not checked here; callers validate the window.
    """
    ptype = PricingType.parse(pricing_type)
    unit_price = to_decimal(price_per_unit)
    if unit_price <= 0:
        raise ValueError("price_per_unit must be positive")

    hours = hours_between(start, end)
    units = billing_units(ptype, hours)
    return PriceQuote(
        pricing_type=ptype,
        duration=hours,
        units=units,
        unit_price=unit_price,
        total_price=unit_price * units,
    )


def default_end(pricing_type, start: datetime) -> datetime:
    """One billing unit after start."""
    return start + timedelta(hours=PricingType.parse(pricing_type).unit_hours)
