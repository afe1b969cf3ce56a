from __future__ import annotations

import math


def percent(part: float, whole: float) -> int:
    """Whole-number percentage rounded half up; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))
