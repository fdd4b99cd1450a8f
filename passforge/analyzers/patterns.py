"""
Structural Pattern Detector
============================

Detects the structural weaknesses that dominate real-world password
guessing: keyboard walks, repeated characters, alphabetic and numeric
runs, embedded years and common dictionary words.

Every check is case-insensitive.  Within a category only the first hit
is reported; categories are evaluated independently and always returned
in the fixed order keyboard, repetitive, sequential, year, dictionary.

References:
    - Weir, M., Aggarwal, S., de Medeiros, B., & Glodek, B. (2009).
      Password Cracking Using Probabilistic Context-Free Grammars.
      IEEE S&P.
    - Bonneau, J. (2012). The Science of Guessing. IEEE S&P.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple, Optional

from passforge.core.models import PatternFinding, PatternKind


# ===================================================================== #
#  Pattern Tables
# ===================================================================== #

KEYBOARD_PATTERNS: tuple[str, ...] = (
    "qwerty", "qwertyuiop", "asdf", "asdfghjkl", "zxcv", "zxcvbnm",
    "1234", "12345", "123456", "1234567", "12345678", "123456789",
    "abcd", "abcde", "abcdef", "abcdefg",
)

REPETITIVE_PATTERNS: tuple[str, ...] = (
    "aaa", "bbb", "ccc", "111", "222", "333",
    "aaaa", "bbbb", "1111", "2222", "aaaaa", "11111",
)

SEQUENTIAL_PATTERNS: tuple[str, ...] = (
    "abc", "123", "xyz", "abcd", "1234", "wxyz", "abcde", "12345",
)

COMMON_WORDS: tuple[str, ...] = (
    "password", "admin", "qwerty", "letmein",
    "welcome", "monkey", "dragon", "master",
)

_REPEATED_CHAR_RE = re.compile(r"(.)\1{2,}")
_YEAR_RE = re.compile(r"19\d{2}|20\d{2}")
_ALL_SAME_RE = re.compile(r"^(.)\1+$")


class _Hit(NamedTuple):
    matched: str
    description: str


# ===================================================================== #
#  Matchers (return the triggering text with its description)
# ===================================================================== #


def _find_keyboard(lowered: str) -> Optional[_Hit]:
    for pattern in KEYBOARD_PATTERNS:
        if pattern in lowered:
            return _Hit(pattern, f'keyboard pattern "{pattern}"')
    return None


def _find_repetitive(lowered: str) -> Optional[_Hit]:
    for pattern in REPETITIVE_PATTERNS:
        if pattern in lowered:
            return _Hit(pattern, f'repetitive pattern "{pattern}"')
    match = _REPEATED_CHAR_RE.search(lowered)
    if match:
        return _Hit(match.group(0), f'repeated character "{match.group(1)}"')
    return None


def _find_sequential(lowered: str) -> Optional[_Hit]:
    for pattern in SEQUENTIAL_PATTERNS:
        if pattern in lowered:
            return _Hit(pattern, f'sequential pattern "{pattern}"')
        reversed_run = pattern[::-1]
        if reversed_run in lowered:
            return _Hit(reversed_run, f'sequential pattern "{pattern}" (reversed)')
    return None


def _find_year(lowered: str) -> Optional[_Hit]:
    match = _YEAR_RE.search(lowered)
    if match:
        return _Hit(match.group(), f'year pattern "{match.group()}"')
    return None


def _find_dictionary(lowered: str) -> Optional[_Hit]:
    for word in COMMON_WORDS:
        if word in lowered:
            return _Hit(word, f'dictionary word "{word}"')
    match = _ALL_SAME_RE.match(lowered)
    if match:
        return _Hit(lowered, f'all-same-character "{match.group(1)}"')
    return None


# ===================================================================== #
#  Standalone checks (return a description or None)
# ===================================================================== #


def _describe(finder: Callable[[str], Optional[_Hit]], password: str) -> Optional[str]:
    hit = finder(password.lower())
    return hit.description if hit else None


def check_keyboard_patterns(password: str) -> Optional[str]:
    """First keyboard walk contained in *password*, e.g. ``keyboard pattern "qwerty"``."""
    return _describe(_find_keyboard, password)


def check_repetitive_patterns(password: str) -> Optional[str]:
    """Listed repetition first, then any character repeated three or more times."""
    return _describe(_find_repetitive, password)


def check_sequential_patterns(password: str) -> Optional[str]:
    """Forward run first, then the reversed run, per listed sequence."""
    return _describe(_find_sequential, password)


def check_year_patterns(password: str) -> Optional[str]:
    return _describe(_find_year, password)


def check_dictionary_words(password: str) -> Optional[str]:
    return _describe(_find_dictionary, password)


# ===================================================================== #
#  Detector
# ===================================================================== #

_FINDERS: tuple[tuple[PatternKind, Callable[[str], Optional[_Hit]]], ...] = (
    (PatternKind.KEYBOARD, _find_keyboard),
    (PatternKind.REPETITIVE, _find_repetitive),
    (PatternKind.SEQUENTIAL, _find_sequential),
    (PatternKind.YEAR, _find_year),
    (PatternKind.DICTIONARY, _find_dictionary),
)


class PatternDetector:
    """Runs every pattern check and collects :class:`PatternFinding` records.

    Usage::

        findings = PatternDetector().detect("Qwerty2024!")
        [f.kind.value for f in findings]   # ['keyboard', 'year', 'dictionary']
    """

    def detect(self, password: str) -> list[PatternFinding]:
        findings: list[PatternFinding] = []
        if not password:
            return findings

        lowered = password.lower()
        for kind, finder in _FINDERS:
            hit = finder(lowered)
            if hit is not None:
                findings.append(PatternFinding(
                    kind=kind,
                    matched=hit.matched,
                    description=hit.description,
                ))

        return findings


def detect_patterns(password: str) -> list[PatternFinding]:
    """Module-level convenience wrapper around :meth:`PatternDetector.detect`."""
    return PatternDetector().detect(password)
