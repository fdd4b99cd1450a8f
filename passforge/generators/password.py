"""
Random Password Generator
==========================

Generates uniformly random passwords from a configurable character set
using the CSPRNG adapter in :mod:`passforge.generators.random_source`.

Entropy of a generated password is exact rather than estimated, because
each character is drawn uniformly and independently::

    H = length * log2(|charset|)

When several character classes are selected the generator retries (up to
100 times) until every selected class appears at least once.  This
rejects a tiny fraction of the space and is ignored in the entropy
figure.
"""

from __future__ import annotations

import math
import re
from typing import Optional

from passforge.analyzers.strength import classify
from passforge.core.models import GeneratedPassword, PasswordGeneratorOptions
from passforge.generators.random_source import random_below
from shared.logger import ForgeLogger
from shared.math_utils import round_to


_log = ForgeLogger("generator")

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
NUMBERS = "0123456789"
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
AMBIGUOUS_CHARS = "0Ol1I"

MIN_LENGTH = 8
MAX_LENGTH = 128
MIN_CHARSET = 4
MAX_DIVERSITY_ATTEMPTS = 100
MAX_BATCH = 100

_CONSONANTS = "bcdfghjklmnpqrstvwxyz"
_VOWELS = "aeiou"
_PRONOUNCEABLE_POOL = 20

_DIVERSITY_CHECKS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("include_uppercase", re.compile(r"[A-Z]")),
    ("include_lowercase", re.compile(r"[a-z]")),
    ("include_numbers", re.compile(r"[0-9]")),
    ("include_symbols", re.compile("[" + re.escape(SYMBOLS) + "]")),
)


def get_default_options() -> PasswordGeneratorOptions:
    """16 characters, all four classes, ambiguous characters allowed."""
    return PasswordGeneratorOptions()


def build_charset(options: PasswordGeneratorOptions) -> str:
    """Characters the generator draws from for *options*."""
    if options.custom_charset:
        return options.custom_charset

    charset = ""
    if options.include_uppercase:
        charset += UPPERCASE
    if options.include_lowercase:
        charset += LOWERCASE
    if options.include_numbers:
        charset += NUMBERS
    if options.include_symbols:
        charset += SYMBOLS

    if options.exclude_ambiguous:
        charset = "".join(c for c in charset if c not in AMBIGUOUS_CHARS)
    return charset


def _validate(options: PasswordGeneratorOptions, charset: str) -> None:
    if not MIN_LENGTH <= options.length <= MAX_LENGTH:
        raise ValueError(
            f"Password length must be between {MIN_LENGTH} and {MAX_LENGTH} characters"
        )
    if not charset:
        raise ValueError("At least one character set must be selected")
    if len(charset) < MIN_CHARSET and not options.custom_charset:
        raise ValueError("Character set too small. Enable more character types.")


def _is_diverse(password: str, options: PasswordGeneratorOptions) -> bool:
    if options.custom_charset:
        return True
    return all(
        pattern.search(password)
        for flag, pattern in _DIVERSITY_CHECKS
        if getattr(options, flag)
    )


def generate_password(options: Optional[PasswordGeneratorOptions] = None) -> GeneratedPassword:
    """Generate one random password.

    Raises:
        ValueError: On a length outside 8..128, an empty character set,
            or fewer than four characters without a custom charset.
    """
    opts = options if options is not None else get_default_options()
    charset = build_charset(opts)
    _validate(opts, charset)

    password = ""
    for _ in range(MAX_DIVERSITY_ATTEMPTS):
        password = "".join(charset[random_below(len(charset))] for _ in range(opts.length))
        if _is_diverse(password, opts):
            break
    else:
        _log.warning("Diversity not reached", attempts=MAX_DIVERSITY_ATTEMPTS)

    entropy = opts.length * math.log2(len(charset))
    return GeneratedPassword(
        password=password,
        entropy=round_to(entropy, 1),
        strength=classify(entropy),
    )


def generate_passwords(
    count: int,
    options: Optional[PasswordGeneratorOptions] = None,
) -> list[GeneratedPassword]:
    """Generate *count* independent passwords (1..100)."""
    if not 1 <= count <= MAX_BATCH:
        raise ValueError(f"Count must be between 1 and {MAX_BATCH}")
    return [generate_password(options) for _ in range(count)]


def generate_pronounceable_password(length: int = 12) -> GeneratedPassword:
    """Consonant/vowel alternation with a digit in every fourth slot.

    ``length // 4`` randomly chosen positions are upper-cased (positions
    may repeat).  Entropy is approximated as ``length * log2(20)``.
    """
    if not MIN_LENGTH <= length <= MAX_LENGTH:
        raise ValueError(f"Length must be between {MIN_LENGTH} and {MAX_LENGTH}")

    chars: list[str] = []
    for index in range(length):
        if index % 4 == 3:
            pool = NUMBERS
        elif index % 2 == 0:
            pool = _CONSONANTS
        else:
            pool = _VOWELS
        chars.append(pool[random_below(len(pool))])

    for _ in range(length // 4):
        position = random_below(length)
        chars[position] = chars[position].upper()

    entropy = length * math.log2(_PRONOUNCEABLE_POOL)
    return GeneratedPassword(
        password="".join(chars),
        entropy=entropy,
        strength=classify(entropy),
    )
