# sge/core/utils.py

import math
from datetime import datetime, timezone
from typing import Any, Optional, Tuple


def utcnow() -> datetime:
    """Naive UTC now; MongoDB hands back naive datetimes so everything stored stays naive."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def add_months(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_window(now: datetime, offset: int = 0) -> Tuple[datetime, datetime]:
    """Half-open [start, end) window of the calendar month `offset` months from `now`."""
    year, month = add_months(now.year, now.month, offset)
    next_year, next_month = add_months(year, month, 1)
    return datetime(year, month, 1), datetime(next_year, next_month, 1)


def quarter_start(now: datetime) -> datetime:
    return datetime(now.year, ((now.month - 1) // 3) * 3 + 1, 1)


def round_half_up(value: float, digits: int = 0) -> float | int:
    """Rounds .5 away from zero for positives (dashboard figures expect 2.5 -> 3, not 2)."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def to_number(value: Any) -> Optional[float]:
    """Coerces to float; returns None for anything that is not a finite number."""
    if isinstance(value, bool):
        return float(value)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
