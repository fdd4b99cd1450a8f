"""
Rotation Policy Engine
=======================

Recommends when a password should be rotated, combining nominal entropy
with account attributes and breach signals.

Decision order (first match wins):

1. **Breached** -- the password itself is in a breach corpus: expired at
   creation, rotate immediately.
2. **Similar breach** -- similar passwords were breached less than 90
   days ago: accelerated 30-day period.
3. **Entropy-based** -- base period from the five entropy bands::

       very-weak  (<40 bits)    30 days
       weak       (<60 bits)    90 days
       moderate   (<80 bits)   180 days
       strong     (<100 bits)  365 days
       very-strong             730 days

   scaled by risk profile (low x2.0, medium x1.0, high x0.5), doubled
   with MFA, then capped at 90 days for privileged accounts, rounded to
   whole days.

NIST SP 800-63B discourages *forced* periodic rotation; the periods here
are recommendations for re-evaluation, and the strongest band maps to the
"no forced rotation" schedule.

References:
    - NIST SP 800-63B (2017), Section 5.1.1.2.
    - Microsoft Security Baseline (2019): dropping password-expiration
      policies.
"""

from __future__ import annotations

import asyncio
import datetime as _dt
import math
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from passforge.analyzers.crack_cost import CrackCostEstimator
from passforge.analyzers.entropy import estimate_entropy
from passforge.analyzers.strength import classify_entropy
from passforge.core.models import (
    EntropyBand,
    ExpiryEstimate,
    ExpiryOptions,
    ExpiryRequest,
    RiskProfile,
)
from shared.logger import ForgeLogger
from shared.math_utils import clamp, round_half_up


_log = ForgeLogger("expiry")

_DAY = _dt.timedelta(days=1)

BASE_ROTATION_DAYS: Mapping[EntropyBand, int] = MappingProxyType({
    EntropyBand.VERY_WEAK: 30,
    EntropyBand.WEAK: 90,
    EntropyBand.MODERATE: 180,
    EntropyBand.STRONG: 365,
    EntropyBand.VERY_STRONG: 730,
})

RISK_MULTIPLIERS: Mapping[RiskProfile, float] = MappingProxyType({
    RiskProfile.LOW: 2.0,
    RiskProfile.MEDIUM: 1.0,
    RiskProfile.HIGH: 0.5,
})

MFA_MULTIPLIER = 2.0
PRIVILEGED_MAX_DAYS = 90
SIMILAR_BREACH_WINDOW_DAYS = 90
SIMILAR_BREACH_PERIOD_DAYS = 30
SIMILAR_BREACH_RECOMMEND_DAYS = 7
RECOMMEND_WITHIN_DAYS = 30

REASON_BREACHED = "Password found in breach database - immediate rotation required"
REASON_SIMILAR_BREACH = "Similar passwords breached recently - accelerated 30-day rotation"

OptionsInput = Union[ExpiryOptions, Mapping[str, Any], None]


def _resolve_options(options: OptionsInput) -> ExpiryOptions:
    if options is None:
        return ExpiryOptions()
    if isinstance(options, ExpiryOptions):
        return options
    return ExpiryOptions.model_validate(dict(options))


def _as_utc(value: _dt.datetime) -> _dt.datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=_dt.timezone.utc)
    return value.astimezone(_dt.timezone.utc)


def _whole_days_until(target: _dt.datetime, now: _dt.datetime) -> int:
    return max(0, math.floor((target - now) / _DAY))


def _entropy_reason(bits: float, options: ExpiryOptions) -> str:
    if bits >= 100:
        reason = "Very strong password - extended rotation period"
    elif bits >= 80:
        reason = "Strong password - standard rotation period"
    elif bits >= 60:
        reason = "Moderate password - regular rotation recommended"
    else:
        reason = "Weak password - frequent rotation required"

    if options.has_mfa:
        reason += " (MFA protection extends period)"
    if options.is_privileged:
        reason += " (privileged access - 90-day maximum enforced)"
    if options.risk_profile is RiskProfile.HIGH:
        reason += " (high-risk account - reduced period)"
    return reason


class RotationPolicyEngine:
    """Computes :class:`ExpiryEstimate` records.

    The engine is stateless; the crack cost estimator can be swapped for
    a differently calibrated one.

    Usage::

        engine = RotationPolicyEngine()
        estimate = engine.estimate("Pass123", created_at, ExpiryOptions(has_mfa=True))
        estimate.rotation_period_days    # 180
    """

    def __init__(self, crack_cost: Optional[CrackCostEstimator] = None) -> None:
        self._crack_cost = crack_cost if crack_cost is not None else CrackCostEstimator()

    # ------------------------------------------------------------------ #
    #  Period computation
    # ------------------------------------------------------------------ #

    @staticmethod
    def rotation_period(bits: float, options: ExpiryOptions) -> int:
        """Effective period in days for the entropy-based path."""
        period = float(BASE_ROTATION_DAYS[classify_entropy(bits)])
        period *= RISK_MULTIPLIERS[options.risk_profile]
        if options.has_mfa:
            period *= MFA_MULTIPLIER
        if options.is_privileged:
            period = min(period, PRIVILEGED_MAX_DAYS)
        return round_half_up(period)

    # ------------------------------------------------------------------ #
    #  Estimate
    # ------------------------------------------------------------------ #

    def estimate(
        self,
        password: str,
        created_at: _dt.datetime,
        options: OptionsInput = None,
        *,
        now: Optional[_dt.datetime] = None,
    ) -> ExpiryEstimate:
        opts = _resolve_options(options)
        created = _as_utc(created_at)
        current = _as_utc(now) if now is not None else _dt.datetime.now(_dt.timezone.utc)

        bits = estimate_entropy(password)
        cost = self._crack_cost.estimate(bits, opts.hash_algorithm)

        if opts.is_breached:
            _log.info("Breached password, immediate rotation", length=len(password))
            return ExpiryEstimate(
                expiry_date=created,
                days_remaining=0,
                recommend_rotation=True,
                reason=REASON_BREACHED,
                next_check_date=current,
                rotation_period_days=0,
                entropy=bits,
                estimated_crack_cost=cost,
            )

        breach_age = opts.days_since_breach_found
        if (
            opts.has_similar_breaches
            and breach_age is not None
            and 0 <= breach_age < SIMILAR_BREACH_WINDOW_DAYS
        ):
            expiry = created + SIMILAR_BREACH_PERIOD_DAYS * _DAY
            remaining = _whole_days_until(expiry, current)
            return ExpiryEstimate(
                expiry_date=expiry,
                days_remaining=remaining,
                recommend_rotation=remaining <= SIMILAR_BREACH_RECOMMEND_DAYS,
                reason=REASON_SIMILAR_BREACH,
                next_check_date=current + SIMILAR_BREACH_RECOMMEND_DAYS * _DAY,
                rotation_period_days=SIMILAR_BREACH_PERIOD_DAYS,
                entropy=bits,
                estimated_crack_cost=cost,
            )

        period = self.rotation_period(bits, opts)
        expiry = created + period * _DAY
        remaining = _whole_days_until(expiry, current)
        days_to_next_check = clamp(remaining - 30, 30, 90)

        _log.debug(
            "Rotation period computed",
            band=classify_entropy(bits).value,
            period_days=period,
            days_remaining=remaining,
        )

        return ExpiryEstimate(
            expiry_date=expiry,
            days_remaining=remaining,
            recommend_rotation=remaining <= RECOMMEND_WITHIN_DAYS,
            reason=_entropy_reason(bits, opts),
            next_check_date=current + days_to_next_check * _DAY,
            rotation_period_days=period,
            entropy=bits,
            estimated_crack_cost=cost,
        )


# ===================================================================== #
#  Public async API
# ===================================================================== #

_ENGINE = RotationPolicyEngine()


async def calculate_expiry(
    password: str,
    created_at: _dt.datetime,
    options: OptionsInput = None,
    *,
    now: Optional[_dt.datetime] = None,
) -> ExpiryEstimate:
    """Recommend a rotation schedule for *password* created at *created_at*.

    Args:
        password: The password (only its length and classes are used).
        created_at: When the password was set; naive values are UTC.
        options: Account attributes (record or mapping of fields);
            defaults to a medium-risk account without MFA, hashed with
            argon2id.
        now: Reference time; defaults to the current UTC time.
    """
    return _ENGINE.estimate(password, created_at, options, now=now)


BatchItem = Union[ExpiryRequest, Mapping[str, object]]


async def calculate_expiry_batch(
    items: Iterable[BatchItem],
    shared_options: OptionsInput = None,
    *,
    now: Optional[_dt.datetime] = None,
) -> list[ExpiryEstimate]:
    """Estimate many passwords sequentially, preserving input order.

    Fields set on an item's own options override *shared_options*.
    """
    base = _resolve_options(shared_options)
    results: list[ExpiryEstimate] = []
    for item in items:
        request = item if isinstance(item, ExpiryRequest) else ExpiryRequest.model_validate(item)
        results.append(
            await calculate_expiry(
                request.password,
                request.created_at,
                base.merged(request.options),
                now=now,
            )
        )
        await asyncio.sleep(0)
    _log.info("Batch expiry complete", count=len(results))
    return results


def should_rotate_now(estimate: ExpiryEstimate) -> bool:
    """``True`` when the password has expired or rotation is recommended."""
    return estimate.days_remaining == 0 or estimate.recommend_rotation


_SCHEDULES: tuple[tuple[int, str], ...] = (
    (30, "Monthly rotation"),
    (90, "Quarterly rotation"),
    (180, "Semi-annual rotation"),
    (365, "Annual rotation"),
)


def get_rotation_schedule(rotation_period_days: int) -> str:
    """Human-readable schedule name for a rotation period."""
    if rotation_period_days == 0:
        return "Immediate rotation required"
    for limit, label in _SCHEDULES:
        if rotation_period_days <= limit:
            return label
    return "Extended rotation period (no forced rotation)"
