import math

import pytest

from passforge.analyzers.entropy import EntropyEstimator, charset_size, estimate_entropy


class TestCharsetSize:
    """Pool size is the sum of the classes present."""

    @pytest.mark.parametrize(
        "password, expected",
        [
            ("abc", 26),
            ("ABC", 26),
            ("123", 10),
            ("!?", 32),
            ("aB", 52),
            ("aB3", 62),
            ("aB3!", 94),
            (" ", 32),
        ],
    )
    def test_ascii_classes(self, password, expected):
        assert charset_size(password) == expected

    def test_non_ascii_adds_unicode_bonus(self):
        # "é" is also outside [a-zA-Z0-9], so the symbol pool counts too
        assert charset_size("é") == 32 + 1000
        assert charset_size("aé") == 26 + 32 + 1000

    def test_empty(self):
        assert charset_size("") == 0


class TestEstimateEntropy:

    def test_empty_is_zero(self):
        assert estimate_entropy("") == 0.0

    def test_formula(self):
        assert estimate_entropy("Pass123") == pytest.approx(7 * math.log2(62))
        assert estimate_entropy("short") == pytest.approx(5 * math.log2(26))

    def test_unrounded(self):
        bits = estimate_entropy("Pass123")
        assert bits != round(bits, 1)

    def test_longer_is_never_weaker(self):
        assert estimate_entropy("abcdefgh") > estimate_entropy("abcdefg")

    def test_estimator_object_matches_function(self):
        estimator = EntropyEstimator()
        assert estimator.estimate("Tr0ub4dor&3") == estimate_entropy("Tr0ub4dor&3")
        assert estimator.charset_size("Tr0ub4dor&3") == 94
