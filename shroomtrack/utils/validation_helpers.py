from __future__ import annotations

import math
from typing import Optional

from ..services.errors import ValidationError
from .timezone_utils import TimezoneUtils

__all__ = ["finite_number", "whole_number", "parse_timestamp"]


def finite_number(label: str, value, minimum: Optional[float] = None, positive: bool = False) -> float:
    """Coerce ``value`` to a finite float; NaN and infinities are rejected."""
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{label} must be a finite number")
    if positive and number <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    if minimum is not None and number < minimum:
        if minimum == 0:
            raise ValidationError(f"{label} cannot be negative")
        raise ValidationError(f"{label} must be at least {minimum:g}")
    return number


def whole_number(label: str, value, positive: bool = True) -> int:
    """Accept ints and integral floats/strings ("3", 3.0); 2.7 is refused, never truncated."""
    number = finite_number(label, value)
    if not number.is_integer():
        raise ValidationError(f"{label} must be a whole number")
    if positive and number <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    return int(number)


def parse_timestamp(label: str, value):
    try:
        return TimezoneUtils.parse(value)
    except (TypeError, ValueError, OverflowError, OSError):
        raise ValidationError(f"Invalid date for {label}: {value!r}")
