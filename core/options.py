# core/options.py
from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, List, Sequence

from core.models import MIN_OPTIONS, TOTAL_PERCENTAGE, Option

EDITABLE_FIELDS = ("text", "percentage")


def coerce_percentage(value: Any) -> int:
    """
    User input -> integer percentage in [0, 100].
    Empty / unparsable / NaN input counts as 0, anything out of range
    (infinities included) is clamped, fractions round half up.
    """
    if isinstance(value, int):
        # ints of any size clamp without going through float
        return int(min(TOTAL_PERCENTAGE, max(0, value)))
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(num):
        return 0
    if num >= TOTAL_PERCENTAGE:
        return TOTAL_PERCENTAGE
    if num <= 0:
        return 0
    return int(math.floor(num + 0.5))


def default_options() -> List[Option]:
    return [Option() for _ in range(MIN_OPTIONS)]


def total_percentage(options: Sequence[Option]) -> int:
    return sum(o.percentage for o in options)


def update_option_field(options: Sequence[Option], index: int, field: str, value: Any) -> List[Option]:
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"unknown option field: {field!r}")
    if not 0 <= index < len(options):
        raise IndexError(f"option index {index} out of range (0..{len(options) - 1})")

    out = list(options)
    if field == "percentage":
        out[index] = replace(out[index], percentage=coerce_percentage(value))
    else:
        out[index] = replace(out[index], text=value)
    return out


def add_option(options: Sequence[Option]) -> List[Option]:
    return list(options) + [Option()]


def remove_option(options: Sequence[Option], index: int) -> List[Option]:
    # the list never drops below MIN_OPTIONS; a refused removal is a no-op
    if len(options) <= MIN_OPTIONS:
        return list(options)
    return [o for i, o in enumerate(options) if i != index]
