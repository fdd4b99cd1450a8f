"""
Argon2id Hashing Wrapper
=========================

Thin asynchronous wrapper around ``argon2-cffi`` for hashing and
verifying passwords with Argon2id, plus calibration helpers that pick
cost parameters for a target latency.

Defaults follow the OWASP 2023 minimum for Argon2id: 19 MiB of memory,
2 iterations, 1 lane, a 32-byte digest and a 16-byte random salt.

Hashing runs in a worker thread (:func:`asyncio.to_thread`) so the event
loop stays responsive.  Verification fails closed: a malformed encoded
hash, a mismatch and an engine error all return ``False``.

References:
    - Biryukov, A., Dinu, D., & Khovratovich, D. (2016). Argon2: the
      memory-hard function for password hashing. RFC 9106 (2021).
    - OWASP Password Storage Cheat Sheet (2023).
"""

from __future__ import annotations

import asyncio
import base64
import math
import time
from typing import Optional

from argon2.exceptions import VerificationError, InvalidHashError
from argon2.exceptions import HashingError as _EngineHashingError
from argon2.low_level import Type, hash_secret, verify_secret

from passforge.core.models import Argon2Options, HashResult, HashTimeEstimate
from passforge.generators.random_source import random_bytes
from shared.logger import ForgeLogger
from shared.math_utils import round_half_up


_log = ForgeLogger("hashing")

SALT_LENGTH = 16
BASE_HASH_TIME_MS = 150.0
BENCHMARK_PASSWORD = "benchmark-password-test-123"
MAX_RECOMMENDED_ITERATIONS = 4
MAX_MEMORY_GROWTH = 2.5


class HashingError(RuntimeError):
    """Raised when the Argon2id engine fails to produce a hash."""


def get_default_argon2_options() -> Argon2Options:
    return Argon2Options()


def _raw_digest(encoded: str) -> bytes:
    """Decode the digest segment of a PHC string (unpadded base64)."""
    segment = encoded.rsplit("$", 1)[-1]
    return base64.b64decode(segment + "=" * (-len(segment) % 4))


def _hash_sync(password: str, options: Argon2Options, salt: bytes) -> HashResult:
    encoded = hash_secret(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=options.iterations,
        memory_cost=options.memory_kib,
        parallelism=options.parallelism,
        hash_len=options.hash_length,
        type=Type.ID,
    ).decode("ascii")
    return HashResult(hash=_raw_digest(encoded), salt=salt, encoded=encoded)


async def hash_password(
    password: str,
    options: Optional[Argon2Options] = None,
) -> HashResult:
    """Hash *password* with Argon2id and a fresh random salt.

    Raises:
        HashingError: If the engine rejects the parameters or fails.
    """
    opts = options if options is not None else get_default_argon2_options()
    salt = random_bytes(SALT_LENGTH)
    try:
        with _log.timed("argon2id hash"):
            return await asyncio.to_thread(_hash_sync, password, opts, salt)
    except (_EngineHashingError, UnicodeError) as exc:
        _log.error("Argon2id hashing failed", memory_kib=opts.memory_kib, iterations=opts.iterations)
        raise HashingError(f"Failed to hash password: {exc}") from exc


def _verify_sync(password: str, encoded: str) -> bool:
    return verify_secret(encoded.encode("ascii"), password.encode("utf-8"), Type.ID)


async def verify_password(password: str, encoded: str) -> bool:
    """Constant-time check of *password* against a PHC-encoded Argon2id hash."""
    try:
        return await asyncio.to_thread(_verify_sync, password, encoded)
    except VerificationError:
        return False
    except (InvalidHashError, UnicodeError, ValueError) as exc:
        _log.warning("Argon2id verification error", error=type(exc).__name__)
        return False


# ===================================================================== #
#  Calibration
# ===================================================================== #


def estimate_hashing_time(options: Optional[Argon2Options] = None) -> HashTimeEstimate:
    """Rough latency range (ms), scaled linearly in memory and iterations."""
    opts = options if options is not None else get_default_argon2_options()
    defaults = get_default_argon2_options()
    scaled = (
        BASE_HASH_TIME_MS
        * (opts.memory_kib / defaults.memory_kib)
        * (opts.iterations / defaults.iterations)
    )
    return HashTimeEstimate(
        min=math.floor(scaled * 0.8),
        max=math.ceil(scaled * 1.5),
        optimal=round_half_up(scaled),
    )


async def benchmark_hashing(
    options: Optional[Argon2Options] = None,
    runs: int = 3,
) -> int:
    """Average wall-clock milliseconds of *runs* hashes with *options*."""
    if runs < 1:
        raise ValueError("runs must be at least 1")
    timings: list[float] = []
    for _ in range(runs):
        start = time.perf_counter()
        await hash_password(BENCHMARK_PASSWORD, options)
        timings.append((time.perf_counter() - start) * 1000)
    return round_half_up(sum(timings) / len(timings))


async def recommend_options(target_ms: int = 300) -> Argon2Options:
    """Scale the default parameters toward *target_ms* on this machine.

    Memory grows first (up to 2.5x), then iterations (capped at 4).  A
    machine slower than the target at default cost keeps the defaults.
    """
    defaults = get_default_argon2_options()
    measured = await benchmark_hashing(defaults, runs=1)
    _log.info("Calibration benchmark", measured_ms=measured, target_ms=target_ms)

    if measured <= 0 or measured > target_ms:
        return defaults

    ratio = target_ms / measured
    memory_growth = min(ratio, MAX_MEMORY_GROWTH)
    iteration_growth = ratio / memory_growth

    return Argon2Options(
        memory_kib=math.floor(defaults.memory_kib * memory_growth),
        iterations=min(
            math.ceil(defaults.iterations * iteration_growth),
            MAX_RECOMMENDED_ITERATIONS,
        ),
        parallelism=defaults.parallelism,
        hash_length=defaults.hash_length,
    )
