"""
PassForge Mathematical Utilities
=================================

Small numeric helpers shared by the analyzers and generators.

Python's built-in :func:`round` uses banker's rounding (half to even).
Scores, day counts and displayed entropies in PassForge round half away
from zero for non-negative inputs, so ``round_half_up(2.5) == 3`` and
``round_to(41.65, 1) == 41.7``.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round a non-negative *value* to the nearest integer, ties upward."""
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int = 1) -> float:
    """Round *value* to *digits* decimals with ties upward."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, lower: float, upper: float) -> float:
    """Constrain *value* to the closed interval [*lower*, *upper*]."""
    return max(lower, min(value, upper))


def pow2(bits: float) -> float:
    """``2 ** bits`` that saturates to ``inf`` instead of raising."""
    try:
        return math.pow(2.0, bits)
    except OverflowError:
        return math.inf
