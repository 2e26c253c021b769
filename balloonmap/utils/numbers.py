import math
from typing import Any


def safe_number(value: Any) -> float | None:
    """
    Coerce a raw JSON value to a finite float, or None when it cannot be one.

    Numbers pass through if finite, strings are parsed as floats, anything
    else (bool, None, dict, list...) is rejected. Never raises.
    """
    # bool is an int subclass; true/false in the feed are not coordinates
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            num = float(value)
        except OverflowError:
            return None
        return num if math.isfinite(num) else None
    if isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
        return num if math.isfinite(num) else None
    return None
