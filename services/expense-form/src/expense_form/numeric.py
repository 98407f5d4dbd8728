from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

_NON_NUMERIC_CHARS = re.compile(r"[^0-9.\-]")
# Wide enough for any finite float at cent precision.
_ROUNDING_CONTEXT = Context(prec=400)


def to_number(value: Any) -> float:
    """
    Coerce free-text numeric input into a finite float.

    Every character other than digits, '.' and '-' is dropped before parsing,
    so "-12.5kg" becomes -12.5 and "$1,200" becomes 1200. Anything that still
    fails to parse ("", "1.2.3", "12-5") or overflows to infinity yields 0.
    Never raises.
    """
    cleaned = _NON_NUMERIC_CHARS.sub("", "" if value is None else str(value))
    if not cleaned:
        return 0.0

    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def round_half_up(value: float, places: int = 2) -> Decimal:
    """
    Round the exact binary value of `value` to `places` decimals, ties away
    from zero. A result of zero is always unsigned.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT)
    return rounded.copy_abs() if rounded.is_zero() else rounded


def format_amount(value: float) -> str:
    """Render a number with exactly two decimals."""
    return str(round_half_up(value, 2))
