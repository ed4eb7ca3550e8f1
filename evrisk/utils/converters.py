"""Numeric helpers shared by the risk calculators.

This module is the single source of truth for rounding and clamping.
All calculators should import from here instead of defining their own.
"""

import math


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a value into the closed interval [lo, hi].

    Examples:
        >>> clamp(120, 0, 100)
        100
        >>> clamp(-3.5, 0, 100)
        0
    """
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounding up.

    Python's built-in ``round`` uses banker's rounding (``round(72.5) == 72``),
    which would make scores sit one point lower at exact halves.

    Examples:
        >>> round_half_up(72.5)
        73
        >>> round_half_up(72.49)
        72
    """
    return math.floor(value + 0.5)


def round_tenth_half_up(value: float) -> float:
    """Round to one decimal place, with halves rounding up.

    Examples:
        >>> round_tenth_half_up(6.25)
        6.3
        >>> round_tenth_half_up(8.100000000000001)
        8.1
    """
    return math.floor(value * 10 + 0.5) / 10


def clamp_score(value: float) -> int:
    """Round a raw score and clamp it into [0, 100]."""
    return int(clamp(round_half_up(value), 0, 100))
