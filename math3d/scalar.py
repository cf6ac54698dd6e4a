"""Float helpers and trig primitives that report domain failures as None."""

from __future__ import annotations

import math
from typing import Optional


def sqrt(value: float) -> Optional[float]:
    if value < 0.0:
        return None
    return math.sqrt(value)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def absolute(value: float) -> float:
    return abs(value)


def loosely_equal(a: float, b: float, tolerance: float = 1e-5) -> bool:
    return abs(a - b) <= tolerance


def sin(value: float) -> float:
    return math.sin(value)


def cos(value: float) -> float:
    return math.cos(value)


def atan2(y: float, x: float) -> float:
    return math.atan2(y, x)


def acos(value: float) -> Optional[float]:
    """Arccosine, or None when value is outside [-1, 1] (NaN included)."""
    if not (-1.0 <= value <= 1.0):
        return None
    return math.acos(value)


def asin(value: float) -> Optional[float]:
    """Arcsine, or None when value is outside [-1, 1] (NaN included)."""
    if not (-1.0 <= value <= 1.0):
        return None
    return math.asin(value)
