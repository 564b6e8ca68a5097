from __future__ import annotations

import math


def safe_ratio(num: float, den: float, fallback: float = 0.0) -> float:
    return float(num) / float(den) if den > 0 else fallback


def ceil_units(value: float, places: int = 9) -> int:
    # 278 / 0.1 lands a hair off 2780.0 in binary floats.
    return int(math.ceil(round(float(value), places)))
