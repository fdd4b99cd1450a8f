import pytest

from passforge.analyzers.quick_check import (
    format_totp_code,
    meets_minimum_requirements,
    quick_strength_check,
)
from passforge.core.models import StrengthBand


class TestQuickStrengthCheck:

    def test_empty(self):
        result = quick_strength_check("")
        assert result.score == 0
        assert result.strength is StrengthBand.WEAK

    def test_common_prefix_gets_no_bonus(self):
        # one class, no length step, "abc" prefix matches a common pattern
        assert quick_strength_check("abc").score == 10

    def test_mid_range(self):
        result = quick_strength_check("hunter22")
        assert result.score == 10 + 20 + 20
        assert result.strength is StrengthBand.MEDIUM

    def test_maximum(self):
        result = quick_strength_check("Xk9#mP2$vL7!qR4&w8Zt")
        assert result.score == 100
        assert result.strength is StrengthBand.VERY_STRONG


class TestMinimumRequirements:

    def test_missing_in_stable_order(self):
        result = meets_minimum_requirements("abc")
        assert not result.meets
        assert result.missing == (
            "At least 8 characters",
            "One uppercase letter",
            "One number",
        )

    def test_met(self):
        result = meets_minimum_requirements("Abcdefg1")
        assert result.meets
        assert result.missing == ()


@pytest.mark.parametrize(
    "code, expected",
    [("123456", "123 456"), ("12345", "12345"), ("1234567", "1234567"), ("", "")],
)
def test_format_totp_code(code, expected):
    assert format_totp_code(code) == expected
