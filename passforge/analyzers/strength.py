"""
Strength Classification and Composite Analysis
================================================

Two layers live here:

1. **Classifiers.**  Pure band mappings shared across PassForge:
   :func:`classify` (four bands, used for scores *and* generator
   entropies) and :func:`classify_entropy` (five bands, used by the
   rotation engine).  :func:`format_crack_time` renders a duration.

2. **Composite analyzer.**  :class:`StrengthAnalyzer` combines an external
   strength scorer (zxcvbn by default) with local weakness heuristics and
   nominal entropy into one :class:`StrengthResult`.

Score model::

    base    = {0: 20, 1: 40, 2: 60, 3: 80, 4: 95}[scorer.score]
    penalty = min(10 * len(weaknesses), 40)
    score   = max(0, base - penalty)

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security.
    - NIST SP 800-63B (2017), Section 5.1.1.2.
"""

from __future__ import annotations

import re
from typing import Optional, Protocol

from zxcvbn import zxcvbn

from passforge.analyzers.entropy import estimate_entropy
from passforge.core.models import (
    EntropyBand,
    ScorerFeedback,
    ScorerResult,
    StrengthBand,
    StrengthResult,
)
from shared.logger import ForgeLogger
from shared.math_utils import round_half_up, round_to


_log = ForgeLogger("strength")


# ===================================================================== #
#  Classifiers
# ===================================================================== #


def classify(score: float) -> StrengthBand:
    """Four-band classification: <40 weak, <60 medium, <80 strong, else very-strong."""
    return StrengthBand.from_score(score)


def classify_entropy(bits: float) -> EntropyBand:
    """Five-band classification: <40, <60, <80, <100, else."""
    return EntropyBand.from_bits(bits)


_TIME_UNITS: tuple[tuple[float, float, str], ...] = (
    # (upper bound in seconds, divisor, unit)
    (60, 1, "second"),
    (3_600, 60, "minute"),
    (86_400, 3_600, "hour"),
    (2_592_000, 86_400, "day"),
    (31_536_000, 2_592_000, "month"),
    (3_153_600_000, 31_536_000, "year"),
)


def format_crack_time(seconds: float) -> str:
    """Render *seconds* as ``instant``, ``5 minutes``, ``1 year`` or ``centuries``."""
    if seconds < 1:
        return "instant"
    for upper, divisor, unit in _TIME_UNITS:
        if seconds < upper:
            amount = round_half_up(seconds / divisor)
            return f"{amount} {unit if amount == 1 else unit + 's'}"
    return "centuries"


# ===================================================================== #
#  Weakness heuristics
# ===================================================================== #

COMMON_PATTERN_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^123+"),
    re.compile(r"^abc+", re.IGNORECASE),
    re.compile(r"qwerty", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"admin", re.IGNORECASE),
    re.compile(r"letmein", re.IGNORECASE),
    re.compile(r"welcome", re.IGNORECASE),
    re.compile(r"monkey", re.IGNORECASE),
    re.compile(r"dragon", re.IGNORECASE),
    re.compile(r"master", re.IGNORECASE),
    re.compile(r"^(.)\1+$"),
)

_KEYBOARD_FRAGMENTS: tuple[str, ...] = ("qwert", "asdf", "zxcv", "12345", "09876")
_YEAR_RE = re.compile(r"19\d{2}|20\d{2}")
_REPEATED_SEQUENCE_RE = re.compile(r"(.{2,})\1{2,}")

_CLASS_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"[0-9]"),
    re.compile(r"[^a-zA-Z0-9]"),
)

_SCORE_MAP: dict[int, int] = {0: 20, 1: 40, 2: 60, 3: 80, 4: 95}
_MAX_PENALTY = 40
_PENALTY_PER_WEAKNESS = 10
_WEAKNESS_SUGGESTION = "Avoid common patterns and increase complexity"


def has_common_pattern(password: str) -> bool:
    return any(pattern.search(password) for pattern in COMMON_PATTERN_RES)


def character_class_count(password: str) -> int:
    """Number of classes (lower, upper, digit, symbol) present."""
    return sum(1 for pattern in _CLASS_RES if pattern.search(password))


def find_weaknesses(password: str) -> list[str]:
    """Heuristic weakness labels, in a fixed order."""
    weaknesses: list[str] = []
    lowered = password.lower()

    if has_common_pattern(password):
        weaknesses.append("Contains common pattern or dictionary word")
    if any(fragment in lowered for fragment in _KEYBOARD_FRAGMENTS):
        weaknesses.append("Contains keyboard pattern")
    if _YEAR_RE.search(password):
        weaknesses.append("Contains year or date pattern")
    if _REPEATED_SEQUENCE_RE.search(password):
        weaknesses.append("Contains repeated sequences")
    if len(password) < 8:
        weaknesses.append("Password is too short (minimum 8 characters)")
    if character_class_count(password) < 3:
        weaknesses.append("Password lacks character diversity")

    return weaknesses


# ===================================================================== #
#  External scorer
# ===================================================================== #


class StrengthScorer(Protocol):
    """Anything that rates a password on zxcvbn's 0..4 scale."""

    def score(self, password: str) -> ScorerResult: ...


class ZxcvbnScorer:
    """:class:`StrengthScorer` backed by the ``zxcvbn`` package.

    zxcvbn refuses or becomes very slow on long inputs, so only the first
    :attr:`MAX_INPUT_LENGTH` characters are scored.  Crack times come
    back as :class:`decimal.Decimal` and are converted to ``float``.
    """

    MAX_INPUT_LENGTH = 72

    def __init__(self, user_inputs: Optional[list[str]] = None) -> None:
        self._user_inputs = list(user_inputs or [])

    def score(self, password: str) -> ScorerResult:
        result = zxcvbn(password[: self.MAX_INPUT_LENGTH], user_inputs=self._user_inputs)
        feedback = result.get("feedback") or {}
        crack_times = result.get("crack_times_seconds") or {}
        return ScorerResult(
            score=int(result["score"]),
            crack_time_seconds=float(
                crack_times.get("online_no_throttling_10_per_second", 0)
            ),
            feedback=ScorerFeedback(
                warning=feedback.get("warning") or "",
                suggestions=tuple(feedback.get("suggestions") or ()),
            ),
        )


# ===================================================================== #
#  Composite analyzer
# ===================================================================== #


class StrengthAnalyzer:
    """Composite password strength analysis.

    Usage::

        analyzer = StrengthAnalyzer()
        result = analyzer.analyze("Tr0ub4dor&3")
        result.strength, result.crack_time, result.weaknesses

    Args:
        scorer: External scorer; defaults to :class:`ZxcvbnScorer`.
    """

    def __init__(self, scorer: Optional[StrengthScorer] = None) -> None:
        self._scorer = scorer if scorer is not None else ZxcvbnScorer()

    def analyze(self, password: str) -> StrengthResult:
        if not password:
            return StrengthResult(
                score=0,
                strength=StrengthBand.WEAK,
                entropy=0.0,
                crack_time="instant",
                crack_time_seconds=0.0,
                feedback=ScorerFeedback(
                    warning="Password is empty",
                    suggestions=("Enter a password",),
                ),
                weaknesses=("Password is empty",),
            )

        scored = self._scorer.score(password)
        weaknesses = find_weaknesses(password)

        base = _SCORE_MAP.get(scored.score, _SCORE_MAP[0])
        penalty = min(_PENALTY_PER_WEAKNESS * len(weaknesses), _MAX_PENALTY)
        final_score = max(0, base - penalty)

        suggestions = list(scored.feedback.suggestions)
        if weaknesses:
            suggestions.append(_WEAKNESS_SUGGESTION)

        _log.debug(
            "Strength analysed",
            length=len(password),
            scorer_score=scored.score,
            weaknesses=len(weaknesses),
            score=final_score,
        )

        return StrengthResult(
            score=final_score,
            strength=classify(final_score),
            entropy=round_to(estimate_entropy(password), 1),
            crack_time=format_crack_time(scored.crack_time_seconds),
            crack_time_seconds=scored.crack_time_seconds,
            feedback=ScorerFeedback(
                warning=scored.feedback.warning,
                suggestions=tuple(suggestions),
            ),
            weaknesses=tuple(weaknesses),
        )


def analyze_password_strength(
    password: str,
    scorer: Optional[StrengthScorer] = None,
) -> StrengthResult:
    """Module-level convenience wrapper around :meth:`StrengthAnalyzer.analyze`."""
    return StrengthAnalyzer(scorer).analyze(password)
