"""
Nominal Entropy Estimator
==========================

Estimates password entropy as the size of the brute-force search space
implied by the character classes a password uses:

    H = length * log2(charset_size)

Character classes:
- Lowercase ``[a-z]``: 26
- Uppercase ``[A-Z]``: 26
- Digits ``[0-9]``: 10
- Symbols (anything else, including spaces and non-ASCII): 32
- Extended Unicode (any code point above 0x7F): flat +1000

This is a *nominal* measure.  It says nothing about how predictable the
characters are; ``"aaaaaaaaaaaa"`` scores the same as a random
twelve-letter string.  Pattern detection and the external scorer cover
that gap.

References:
    - NIST SP 800-63 (2006), Appendix A: Estimating Password Entropy.
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
"""

from __future__ import annotations

import math
import re


_LOWER_RE = re.compile(r"[a-z]")
_UPPER_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"[0-9]")
_SYMBOL_RE = re.compile(r"[^a-zA-Z0-9]")

_LOWER_POOL = 26
_UPPER_POOL = 26
_DIGIT_POOL = 10
_SYMBOL_POOL = 32
_UNICODE_BONUS = 1000


def charset_size(password: str) -> int:
    """Return the character pool size implied by *password*'s classes."""
    pool = 0
    if _LOWER_RE.search(password):
        pool += _LOWER_POOL
    if _UPPER_RE.search(password):
        pool += _UPPER_POOL
    if _DIGIT_RE.search(password):
        pool += _DIGIT_POOL
    if _SYMBOL_RE.search(password):
        pool += _SYMBOL_POOL
    if any(ord(c) > 0x7F for c in password):
        pool += _UNICODE_BONUS
    return pool


def estimate_entropy(password: str) -> float:
    """Nominal entropy of *password* in bits (unrounded).

    Returns ``0.0`` for an empty string.
    """
    pool = charset_size(password)
    if not password or pool == 0:
        return 0.0
    return len(password) * math.log2(pool)


class EntropyEstimator:
    """Object form of :func:`estimate_entropy` for injection into engines.

    Usage::

        estimator = EntropyEstimator()
        bits = estimator.estimate("Pass123")   # ~41.7
    """

    def estimate(self, password: str) -> float:
        return estimate_entropy(password)

    def charset_size(self, password: str) -> int:
        return charset_size(password)
