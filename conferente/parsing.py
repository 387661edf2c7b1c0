"""Free-text weight and quantity parsing for the weighing form."""

from __future__ import annotations

import math
import re

_SEPARATORS = re.compile(r"\s+")
# leading number of a token, so "1500g" reads as 1500
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_float(token: str) -> float | None:
    match = _LEADING_NUMBER.match(token.strip())
    if match is None:
        return None
    value = float(match.group())
    if not math.isfinite(value):
        return None
    return value


def parse_average(text: str | None) -> float:
    """Average every number typed in a field.

    Operators weighing several identical containers type each scale reading,
    e.g. "1500 1520 1490" or "1500,5 + 1600". Decimal commas are accepted and
    "+" works as a separator. Garbage tokens are ignored.

    Returns:
        The arithmetic mean of the valid tokens, or 0.0 if there are none.
    """
    if not text:
        return 0.0

    clean = text.replace(",", ".").replace("+", " ")
    values = [
        v
        for v in (_to_float(tok) for tok in _SEPARATORS.split(clean) if tok)
        if v is not None
    ]
    if not values:
        return 0.0
    return sum(values) / len(values)


def parse_number(text: str | None) -> float:
    """Parse a single weight such as "100,5". Returns 0.0 if unparseable."""
    if not text:
        return 0.0
    value = _to_float(text.strip().replace(",", "."))
    return value if value is not None else 0.0


def parse_quantity(text: str | int | None) -> int:
    """Parse a box/packaging count.

    Blank or unparseable input counts as 0, negatives clamp to 0 and
    decimals are truncated.
    """
    if text is None:
        return 0
    if isinstance(text, int):
        return max(text, 0)

    value = parse_number(str(text))
    return max(int(value), 0)


def grams_to_kg(grams: float) -> float:
    """Tare fields are typed in grams; the data model stores kilograms."""
    return grams / 1000.0
