"""
PassForge Hashing
==================

Argon2id password hashing, verification and cost calibration backed by
``argon2-cffi``.
"""

from passforge.hashing.argon2id import (
    HashingError,
    benchmark_hashing,
    estimate_hashing_time,
    get_default_argon2_options,
    hash_password,
    recommend_options,
    verify_password,
)

__all__ = [
    "HashingError",
    "benchmark_hashing",
    "estimate_hashing_time",
    "get_default_argon2_options",
    "hash_password",
    "recommend_options",
    "verify_password",
]
