"""
CSPRNG Adapter
===============

Uniform random integers drawn from the operating system's entropy source
(:mod:`secrets`).  Indices are produced by rejection sampling so that no
character or word is favoured by modulo bias:

    limit = floor(2^k / n) * n
    draw r uniformly from [0, 2^k) until r < limit; return r mod n

Single bytes (k = 8) are used when ``n <= 256``, 32-bit words otherwise.

References:
    - NIST SP 800-90A Rev. 1 (2015). Recommendation for Random Number
      Generation Using Deterministic Random Bit Generators.
    - Lemire, D. (2019). Fast Random Integer Generation in an Interval.
      ACM TOMACS 29(1).
"""

from __future__ import annotations

import secrets
from typing import Sequence, TypeVar

T = TypeVar("T")

_BYTE_SPACE = 256
_WORD_SPACE = 2 ** 32


def random_bytes(count: int) -> bytes:
    """*count* bytes from the OS CSPRNG."""
    return secrets.token_bytes(count)


def random_uint32() -> int:
    return int.from_bytes(random_bytes(4), "big")


def random_below(upper: int) -> int:
    """Uniform integer in ``[0, upper)`` without modulo bias.

    Raises:
        ValueError: If *upper* is not positive or exceeds 2**32.
    """
    if upper <= 0:
        raise ValueError("Upper bound must be positive")
    if upper > _WORD_SPACE:
        raise ValueError("Upper bound must not exceed 2**32")

    if upper <= _BYTE_SPACE:
        limit = (_BYTE_SPACE // upper) * upper
        while True:
            value = random_bytes(1)[0]
            if value < limit:
                return value % upper

    limit = (_WORD_SPACE // upper) * upper
    while True:
        value = random_uint32()
        if value < limit:
            return value % upper


def random_choice(items: Sequence[T]) -> T:
    """Uniformly chosen element of a non-empty sequence."""
    return items[random_below(len(items))]
