"""
Quick Strength Check
=====================

Dependency-free strength heuristics suitable for per-keystroke feedback,
where running the full scorer would be too slow.

Score model (0-100)::

    +10 for each length threshold reached: 8, 12, 16, 20
    +10 for each class present: lowercase, uppercase, digit, symbol
    +20 when none of the common-pattern expressions match
"""

from __future__ import annotations

import re

from passforge.analyzers.strength import classify, has_common_pattern
from passforge.core.models import MinimumRequirementsResult, QuickStrengthResult


_LENGTH_STEPS: tuple[int, ...] = (8, 12, 16, 20)
_CLASS_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"[0-9]"),
    re.compile(r"[^a-zA-Z0-9]"),
)

_REQUIREMENTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[a-z]"), "One lowercase letter"),
    (re.compile(r"[A-Z]"), "One uppercase letter"),
    (re.compile(r"[0-9]"), "One number"),
)


def quick_strength_check(password: str) -> QuickStrengthResult:
    """Fast 0-100 score and band without the external scorer."""
    if not password:
        return QuickStrengthResult(score=0, strength=classify(0))

    score = 10 * sum(1 for step in _LENGTH_STEPS if len(password) >= step)
    score += 10 * sum(1 for pattern in _CLASS_RES if pattern.search(password))
    if not has_common_pattern(password):
        score += 20

    return QuickStrengthResult(score=score, strength=classify(score))


def meets_minimum_requirements(password: str) -> MinimumRequirementsResult:
    """Check the classic "8 characters, mixed case, one digit" rule.

    Returns the unmet requirements in a stable order.
    """
    missing: list[str] = []
    if len(password) < 8:
        missing.append("At least 8 characters")
    for pattern, label in _REQUIREMENTS:
        if not pattern.search(password):
            missing.append(label)
    return MinimumRequirementsResult(meets=not missing, missing=tuple(missing))


def format_totp_code(code: str) -> str:
    """Insert a space into six-character TOTP codes: ``"123456"`` -> ``"123 456"``."""
    if len(code) == 6:
        return f"{code[:3]} {code[3:]}"
    return code
