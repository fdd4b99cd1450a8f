import pytest

from passforge.analyzers.patterns import (
    PatternDetector,
    check_dictionary_words,
    check_keyboard_patterns,
    check_repetitive_patterns,
    check_sequential_patterns,
    check_year_patterns,
    detect_patterns,
)
from passforge.core.models import PatternKind


class TestStandaloneChecks:

    def test_keyboard_first_listed_match(self):
        assert check_keyboard_patterns("xQWERTYx") == 'keyboard pattern "qwerty"'
        assert check_keyboard_patterns("zzz") is None

    def test_repetitive_listed_pattern(self):
        assert check_repetitive_patterns("xaaax") == 'repetitive pattern "aaa"'

    def test_repetitive_falls_back_to_any_character(self):
        assert check_repetitive_patterns("zzzz9") == 'repeated character "z"'
        assert check_repetitive_patterns("aabb") is None

    def test_sequential_forward_and_reversed(self):
        assert check_sequential_patterns("xabc") == 'sequential pattern "abc"'
        assert check_sequential_patterns("cbax") == 'sequential pattern "abc" (reversed)'
        assert check_sequential_patterns("987") is None

    def test_year(self):
        assert check_year_patterns("summer1999") == 'year pattern "1999"'
        assert check_year_patterns("winter2024!") == 'year pattern "2024"'
        assert check_year_patterns("1850") is None

    def test_dictionary_word(self):
        assert check_dictionary_words("MyPassword") == 'dictionary word "password"'

    def test_dictionary_all_same_character(self):
        assert check_dictionary_words("xxxx") == 'all-same-character "x"'
        assert check_dictionary_words("xy") is None


class TestPatternDetector:

    def test_empty_password(self):
        assert PatternDetector().detect("") == []

    def test_kind_order_is_fixed(self):
        findings = PatternDetector().detect("Qwerty2024!")
        assert [f.kind for f in findings] == [
            PatternKind.KEYBOARD,
            PatternKind.YEAR,
            PatternKind.DICTIONARY,
        ]

    def test_one_finding_per_kind(self):
        findings = detect_patterns("aaaa")
        kinds = [f.kind for f in findings]
        assert kinds == [PatternKind.REPETITIVE, PatternKind.DICTIONARY]
        assert len(set(kinds)) == len(kinds)

    def test_matched_is_the_triggering_text(self):
        findings = detect_patterns("cba")
        assert len(findings) == 1
        assert findings[0].matched == "cba"
        assert findings[0].description.endswith("(reversed)")

    @pytest.mark.parametrize(
        "password, run, char",
        [
            ("xzzzy", "zzz", "z"),
            ('x"""y', '"""', '"'),
            ("ab####", "####", "#"),
        ],
    )
    def test_repeated_run_keeps_whole_run(self, password, run, char):
        findings = detect_patterns(password)
        assert len(findings) == 1
        assert findings[0].kind is PatternKind.REPETITIVE
        assert findings[0].matched == run
        assert findings[0].description == f'repeated character "{char}"'

    def test_matched_is_lower_cased(self):
        findings = detect_patterns("QWERTY!")
        assert [(f.kind, f.matched) for f in findings] == [
            (PatternKind.KEYBOARD, "qwerty"),
            (PatternKind.DICTIONARY, "qwerty"),
        ]

    @pytest.mark.parametrize("password", ["Xk9#mP2$vL7!qR4&", "correct-horse-battery-staple"])
    def test_clean_passwords(self, password):
        assert detect_patterns(password) == []
