"""
Offline Crack Cost Estimator
=============================

Estimates the dollar cost of an offline brute-force attack against a
password hash, given the password's nominal entropy and the server-side
hash algorithm.

Model::

    attempts  = 2^bits / 2                      (expected, uniform search)
    rate      = 1e10 / multiplier[algorithm]    (hashes per second, one GPU)
    cost_usd  = attempts / rate / 3600 * 1.00   (one dollar per GPU-hour)
    cost_usd  = min(cost_usd, 1e15)

Multipliers express how much slower each algorithm is than a single
SHA-256 evaluation on commodity GPU hardware.

References:
    - Hashcat benchmark tables (RTX 4090, 2023).
    - OWASP Password Storage Cheat Sheet (2023).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Union

from passforge.core.models import HashAlgorithm
from shared.math_utils import pow2


BASE_HASH_RATE: float = 1e10
GPU_COST_PER_HOUR: float = 1.0
MAX_CRACK_COST: float = 1e15

HASH_MULTIPLIERS: Mapping[HashAlgorithm, float] = MappingProxyType({
    HashAlgorithm.ARGON2ID: 1000.0,
    HashAlgorithm.SCRYPT: 500.0,
    HashAlgorithm.BCRYPT: 100.0,
    HashAlgorithm.PBKDF2: 10.0,
    HashAlgorithm.SHA256: 1.0,
    HashAlgorithm.SHA1: 0.5,
    HashAlgorithm.MD5: 0.1,
})


class CrackCostEstimator:
    """Estimates brute-force cost for a (bits, algorithm) pair.

    The estimate is monotonically non-decreasing in *bits* for a fixed
    algorithm, and for fixed *bits* orders algorithms by their multiplier
    (argon2id most expensive, md5 cheapest) until the cap is reached.
    """

    def __init__(
        self,
        *,
        base_hash_rate: float = BASE_HASH_RATE,
        cost_per_hour: float = GPU_COST_PER_HOUR,
        cap: float = MAX_CRACK_COST,
    ) -> None:
        self._base_rate = base_hash_rate
        self._cost_per_hour = cost_per_hour
        self._cap = cap

    def estimate(
        self,
        bits: float,
        algorithm: Union[HashAlgorithm, str] = HashAlgorithm.ARGON2ID,
    ) -> float:
        algorithm = HashAlgorithm(algorithm)
        attempts = pow2(bits) / 2
        rate = self._base_rate / HASH_MULTIPLIERS[algorithm]
        cost = attempts / rate / 3600 * self._cost_per_hour
        return min(cost, self._cap)


def estimate_crack_cost(
    bits: float,
    algorithm: Union[HashAlgorithm, str] = HashAlgorithm.ARGON2ID,
) -> float:
    """Module-level convenience wrapper around :meth:`CrackCostEstimator.estimate`."""
    return CrackCostEstimator().estimate(bits, algorithm)


_MAGNITUDES: tuple[tuple[float, str], ...] = (
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


def format_crack_cost(usd: float) -> str:
    """Render a dollar amount compactly.

    >>> format_crack_cost(0)
    '$0 (instant)'
    >>> format_crack_cost(0.00042)
    '$0.0004'
    >>> format_crack_cost(12_500)
    '$12.50K'
    >>> format_crack_cost(1e15)
    '$1000.00T+'
    """
    if usd <= 0:
        return "$0 (instant)"
    if usd < 1:
        return f"${usd:.4f}"
    if usd < 1_000:
        return f"${usd:.2f}"
    if usd >= 1e12:
        return f"${usd / 1e12:.2f}T+"
    for threshold, suffix in _MAGNITUDES:
        if usd >= threshold:
            return f"${usd / threshold:.2f}{suffix}"
    return f"${usd:.2f}"
