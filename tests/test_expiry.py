import asyncio
import datetime as _dt

import pytest

from passforge.analyzers.crack_cost import estimate_crack_cost
from passforge.analyzers.entropy import estimate_entropy
from passforge.analyzers.expiry import (
    REASON_BREACHED,
    REASON_SIMILAR_BREACH,
    RotationPolicyEngine,
    calculate_expiry,
    calculate_expiry_batch,
    get_rotation_schedule,
    should_rotate_now,
)
from passforge.core.models import ExpiryOptions, ExpiryRequest, HashAlgorithm, RiskProfile

DAY = _dt.timedelta(days=1)


def _expiry(password, created_at, options=None, now=None):
    return asyncio.run(calculate_expiry(password, created_at, options, now=now or created_at))


class TestEntropyBands:
    """Base periods for a medium-risk account without MFA."""

    @pytest.mark.parametrize(
        "password, period",
        [
            ("short", 30),                 # ~23.5 bits
            ("Pass123", 90),               # ~41.7 bits
            ("Password1234", 180),         # ~71.5 bits
            ("Password1234!@", 365),       # ~91.8 bits
            ("SecurePassword2024!", 730),  # ~124.5 bits
        ],
    )
    def test_base_period(self, created_at, password, period):
        estimate = _expiry(password, created_at)
        assert estimate.rotation_period_days == period
        assert estimate.expiry_date == created_at + period * DAY
        assert estimate.days_remaining == period

    def test_entropy_and_cost_reported(self, created_at):
        estimate = _expiry("Pass123", created_at)
        assert estimate.entropy == pytest.approx(estimate_entropy("Pass123"))
        assert estimate.estimated_crack_cost == pytest.approx(
            estimate_crack_cost(estimate.entropy, HashAlgorithm.ARGON2ID)
        )

    def test_hash_algorithm_changes_cost_only(self, created_at):
        slow = _expiry("Pass123", created_at)
        fast = _expiry("Pass123", created_at, ExpiryOptions(hash_algorithm="md5"))
        assert fast.estimated_crack_cost < slow.estimated_crack_cost
        assert fast.rotation_period_days == slow.rotation_period_days


class TestModifiers:

    @pytest.mark.parametrize(
        "options, period",
        [
            (ExpiryOptions(risk_profile=RiskProfile.LOW), 180),
            (ExpiryOptions(risk_profile=RiskProfile.HIGH), 45),
            (ExpiryOptions(has_mfa=True), 180),
            (ExpiryOptions(risk_profile="high", has_mfa=True), 90),
            (ExpiryOptions(risk_profile="low", has_mfa=True), 360),
        ],
    )
    def test_risk_and_mfa(self, created_at, options, period):
        assert _expiry("Pass123", created_at, options).rotation_period_days == period

    def test_privileged_cap(self, created_at):
        options = ExpiryOptions(risk_profile="low", has_mfa=True, is_privileged=True)
        assert _expiry("SecurePassword2024!", created_at, options).rotation_period_days == 90

    def test_privileged_cap_does_not_raise_short_periods(self, created_at):
        options = ExpiryOptions(is_privileged=True)
        assert _expiry("short", created_at, options).rotation_period_days == 30

    def test_rounding_half_up(self, created_at):
        # 30 * 0.5 = 15 exactly; no fractional days survive
        estimate = _expiry("short", created_at, ExpiryOptions(risk_profile="high"))
        assert estimate.rotation_period_days == 15

    def test_mapping_options(self, created_at):
        as_mapping = _expiry("SecurePassword2024!", created_at, {"is_privileged": True})
        as_record = _expiry("SecurePassword2024!", created_at, ExpiryOptions(is_privileged=True))
        assert as_mapping == as_record
        assert as_mapping.rotation_period_days == 90

    def test_period_helper(self):
        bits = estimate_entropy("Pass123")
        assert RotationPolicyEngine.rotation_period(bits, ExpiryOptions(has_mfa=True)) == 180


class TestReasons:

    def test_weak(self, created_at):
        reason = _expiry("Pass123", created_at).reason
        assert reason == "Weak password - frequent rotation required"

    @pytest.mark.parametrize(
        "password, prefix",
        [
            ("Password1234", "Moderate password"),
            ("Password1234!@", "Strong password"),
            ("SecurePassword2024!", "Very strong password"),
        ],
    )
    def test_band_prefix(self, created_at, password, prefix):
        assert _expiry(password, created_at).reason.startswith(prefix)

    def test_suffix_order(self, created_at):
        options = ExpiryOptions(risk_profile="high", has_mfa=True, is_privileged=True)
        reason = _expiry("Pass123", created_at, options).reason
        assert reason == (
            "Weak password - frequent rotation required"
            " (MFA protection extends period)"
            " (privileged access - 90-day maximum enforced)"
            " (high-risk account - reduced period)"
        )


class TestBreachSignals:

    def test_breached_expires_at_creation(self, created_at):
        now = created_at + 10 * DAY
        estimate = _expiry(
            "SecurePassword2024!", created_at, ExpiryOptions(is_breached=True), now=now
        )
        assert estimate.expiry_date == created_at
        assert estimate.days_remaining == 0
        assert estimate.recommend_rotation is True
        assert estimate.rotation_period_days == 0
        assert estimate.next_check_date == now
        assert estimate.reason == REASON_BREACHED

    def test_breach_beats_similar_breach(self, created_at):
        options = ExpiryOptions(is_breached=True, has_similar_breaches=True, days_since_breach_found=3)
        assert _expiry("Pass123", created_at, options).reason == REASON_BREACHED

    def test_recent_similar_breach(self, created_at):
        options = ExpiryOptions(has_similar_breaches=True, days_since_breach_found=10)
        estimate = _expiry("SecurePassword2024!", created_at, options)
        assert estimate.rotation_period_days == 30
        assert estimate.expiry_date == created_at + 30 * DAY
        assert estimate.days_remaining == 30
        assert estimate.recommend_rotation is False
        assert estimate.next_check_date == created_at + 7 * DAY
        assert estimate.reason == REASON_SIMILAR_BREACH

    def test_similar_breach_close_to_expiry(self, created_at):
        options = ExpiryOptions(has_similar_breaches=True, days_since_breach_found=10)
        estimate = _expiry("Pass123", created_at, options, now=created_at + 25 * DAY)
        assert estimate.days_remaining == 5
        assert estimate.recommend_rotation is True

    @pytest.mark.parametrize("age", [90, 365, None])
    def test_old_or_unknown_similar_breach_ignored(self, created_at, age):
        options = ExpiryOptions(has_similar_breaches=True, days_since_breach_found=age)
        assert _expiry("Pass123", created_at, options).rotation_period_days == 90


class TestTimeline:

    def test_expired_password(self, created_at):
        estimate = _expiry("Pass123", created_at, now=created_at + 400 * DAY)
        assert estimate.days_remaining == 0
        assert estimate.recommend_rotation is True
        assert should_rotate_now(estimate)

    def test_next_check_is_clamped(self, created_at):
        short = _expiry("Pass123", created_at)
        long = _expiry("SecurePassword2024!", created_at)
        assert short.next_check_date == created_at + 60 * DAY
        assert long.next_check_date == created_at + 90 * DAY

    def test_next_check_minimum(self, created_at):
        estimate = _expiry("short", created_at)
        assert estimate.recommend_rotation is True
        assert estimate.next_check_date == created_at + 30 * DAY

    def test_naive_datetimes_are_utc(self, created_at):
        naive = created_at.replace(tzinfo=None)
        estimate = asyncio.run(calculate_expiry("Pass123", naive, now=naive))
        assert estimate.expiry_date == created_at + 90 * DAY
        assert estimate.days_remaining == 90

    def test_fresh_strong_password_not_due(self, created_at):
        assert not should_rotate_now(_expiry("SecurePassword2024!", created_at))


class TestBatch:

    def test_order_and_option_merge(self, created_at):
        items = [
            {"password": "Pass123", "created_at": created_at, "options": {"has_mfa": True}},
            ExpiryRequest(password="Pass123", created_at=created_at),
            {"password": "short", "created_at": created_at},
        ]
        results = asyncio.run(calculate_expiry_batch(
            items,
            ExpiryOptions(risk_profile=RiskProfile.LOW),
            now=created_at,
        ))
        assert [r.rotation_period_days for r in results] == [360, 180, 60]

    def test_item_override_wins(self, created_at):
        items = [{
            "password": "Pass123",
            "created_at": created_at,
            "options": {"risk_profile": "high"},
        }]
        results = asyncio.run(calculate_expiry_batch(
            items, ExpiryOptions(risk_profile="low", has_mfa=True), now=created_at
        ))
        assert results[0].rotation_period_days == 90

    def test_shared_options_mapping(self, created_at):
        items = [
            {"password": "Pass123", "created_at": created_at},
            {"password": "Pass123", "created_at": created_at, "options": {"has_mfa": False}},
        ]
        results = asyncio.run(calculate_expiry_batch(
            items, {"risk_profile": "low", "has_mfa": True}, now=created_at
        ))
        assert [r.rotation_period_days for r in results] == [360, 180]

    def test_empty(self):
        assert asyncio.run(calculate_expiry_batch([])) == []


@pytest.mark.parametrize(
    "period, label",
    [
        (0, "Immediate rotation required"),
        (15, "Monthly rotation"),
        (30, "Monthly rotation"),
        (31, "Quarterly rotation"),
        (90, "Quarterly rotation"),
        (180, "Semi-annual rotation"),
        (365, "Annual rotation"),
        (730, "Extended rotation period (no forced rotation)"),
    ],
)
def test_rotation_schedule(period, label):
    assert get_rotation_schedule(period) == label
