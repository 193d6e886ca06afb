"""Stock confidence decay model.

Pure functions only: no I/O, no clock. Callers pass the day counts in.
"""

import math
import re
from datetime import date, timedelta

from src.models.enums import LifespanSource

QUANTITY_BOOST_FACTOR = 0.1

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d*\.?\d+)")


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def base_confidence(days_since_purchase: int, effective_lifespan_days: int) -> float:
    """Linear decay from 1.0 on the purchase day to 0.0 at the end of the lifespan."""
    if days_since_purchase <= 0:
        return 1.0
    if effective_lifespan_days <= 0:
        # Nothing left to decay
        return 0.0
    return _clamp(1.0 - days_since_purchase / effective_lifespan_days)


def confidence(
    days_since_purchase: int,
    effective_lifespan_days: int,
    quantity: float = 1,
) -> float:
    """Confidence in [0, 1] that an item is still on hand.

    Larger purchases last a little longer: quantities above one add
    ln(quantity) * 0.1 before clamping. Once the lifespan has elapsed the
    item is fully decayed whatever the quantity.
    """
    if days_since_purchase <= 0:
        return 1.0
    if days_since_purchase >= effective_lifespan_days:
        return 0.0

    score = 1.0 - days_since_purchase / effective_lifespan_days
    if quantity > 1:
        score += math.log(quantity) * QUANTITY_BOOST_FACTOR
    return _clamp(score)


def depletion_date(last_purchased: date, effective_lifespan_days: int) -> date:
    """Date the stock is expected to run out."""
    return last_purchased + timedelta(days=effective_lifespan_days)


def days_between(earlier: date, later: date) -> int:
    """Whole days from earlier to later (negative if later is before earlier)."""
    return (later - earlier).days


def resolve_lifespan(
    *candidates: tuple[int | None, LifespanSource],
) -> tuple[int, LifespanSource]:
    """Pick the first non-null lifespan from an ordered override → statistical → default chain.

    The last candidate must always carry a value.
    """
    for days, source in candidates:
        if days is not None:
            return days, source
    raise ValueError("lifespan chain has no default")


def plausible_frequency(
    avg_frequency_days: int | None,
    category_shelf_life_days: int,
    cap_multiplier: int,
) -> int | None:
    """Observed purchase cadence, or None when it is far beyond the category shelf life.

    Receipts with wrong dates can produce cadences of hundreds of days for
    perishables; those fall back to the category default.
    """
    if avg_frequency_days is None:
        return None
    if avg_frequency_days > category_shelf_life_days * cap_multiplier:
        return None
    return avg_frequency_days


def parse_quantity(value: str | float | int | None) -> float:
    """Numeric part of a quantity ("2 lb" -> 2.0). Missing or unusable values count as 1."""
    if value is None:
        return 1.0
    if isinstance(value, int | float):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 1.0
        number = float(match.group(1))
    if not math.isfinite(number) or number <= 0:
        return 1.0
    return number


def format_quantity(value: float) -> str:
    """Compact text form used for stored quantity averages ("1.5", "2"), three decimals max."""
    rounded = round(value, 3)
    if rounded.is_integer():
        return str(int(rounded))
    return str(rounded)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (3.5 -> 4, 6.5 -> 7)."""
    return math.floor(value + 0.5)
