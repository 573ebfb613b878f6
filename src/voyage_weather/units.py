"""Unit conversions and rounding helpers."""

from __future__ import annotations

import math

KNOTS_PER_MS = 1.94384


def ms_to_knots(speed_ms: float) -> float:
    """Convert metres per second to knots."""
    return speed_ms * KNOTS_PER_MS


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3, -2.5 -> -2).

    Python's built-in round() uses banker's rounding, which would make
    displayed values disagree with the thresholds they are checked against.
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Round half up to an int."""
    return int(round_half_up(value))
