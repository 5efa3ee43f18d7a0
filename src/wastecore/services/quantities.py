"""Safe numeric parsing for request quantities."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ParsedQuantity:
    """Result of a quantity parse. ``valid`` is False when ``value`` is a zero fallback."""

    value: float
    valid: bool


_INVALID = ParsedQuantity(value=0.0, valid=False)


def parse_quantity(raw: Any) -> ParsedQuantity:
    """Coerce a stored quantity to a finite, non-negative float.

    Accepts ints, floats and numeric strings. Anything else (``None``, bools,
    blank or non-numeric strings, NaN, infinities, negatives) yields zero with
    ``valid=False``.
    """
    if raw is None or isinstance(raw, bool):
        return _INVALID
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return _INVALID
        try:
            value = float(text)
        except ValueError:
            return _INVALID
    else:
        return _INVALID

    if not math.isfinite(value) or value < 0:
        return _INVALID
    return ParsedQuantity(value=value, valid=True)


def quantity_or_zero(raw: Any) -> float:
    return parse_quantity(raw).value
