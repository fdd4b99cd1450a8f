import math

import pytest

from passforge.analyzers.strength import classify
from passforge.core.models import PasswordGeneratorOptions, StrengthBand
from passforge.generators import random_source
from passforge.generators.password import (
    AMBIGUOUS_CHARS,
    LOWERCASE,
    NUMBERS,
    SYMBOLS,
    UPPERCASE,
    build_charset,
    generate_password,
    generate_passwords,
    generate_pronounceable_password,
    get_default_options,
)
from shared.math_utils import round_to


class TestRandomSource:

    def test_range(self):
        for upper in (1, 2, 7, 256, 257, 1000, 2 ** 32):
            value = random_source.random_below(upper)
            assert 0 <= value < upper

    @pytest.mark.parametrize("upper", [0, -5, 2 ** 32 + 1])
    def test_invalid_bounds(self, upper):
        with pytest.raises(ValueError):
            random_source.random_below(upper)

    def test_rejection_sampling_discards_biased_bytes(self, monkeypatch):
        # for n=3 the limit is 255, so 0xff is rejected and 0x05 -> 5 % 3
        draws = iter([b"\xff", b"\x05"])
        monkeypatch.setattr(random_source, "random_bytes", lambda count: next(draws))
        assert random_source.random_below(3) == 2

    def test_word_path_for_large_bounds(self, monkeypatch):
        # n=1000: limit = 4294967000; the first word is rejected
        words = iter([(2 ** 32 - 1).to_bytes(4, "big"), (1234).to_bytes(4, "big")])
        monkeypatch.setattr(random_source, "random_bytes", lambda count: next(words))
        assert random_source.random_below(1000) == 234

    def test_choice(self):
        assert random_source.random_choice("x") == "x"
        assert random_source.random_choice(("a", "b")) in ("a", "b")

    def test_bytes(self):
        assert len(random_source.random_bytes(16)) == 16


class TestGeneratePassword:

    def test_defaults(self):
        options = get_default_options()
        assert options.length == 16
        result = generate_password()
        charset = build_charset(options)
        assert len(result.password) == 16
        assert set(result.password) <= set(charset)
        assert result.entropy == round_to(16 * math.log2(len(charset)), 1)
        assert result.strength is StrengthBand.VERY_STRONG

    def test_every_selected_class_present(self):
        for _ in range(20):
            password = generate_password(PasswordGeneratorOptions(length=8)).password
            assert any(c in UPPERCASE for c in password)
            assert any(c in LOWERCASE for c in password)
            assert any(c in NUMBERS for c in password)
            assert any(c in SYMBOLS for c in password)

    def test_exclude_ambiguous(self):
        options = PasswordGeneratorOptions(length=64, exclude_ambiguous=True)
        assert not set(build_charset(options)) & set(AMBIGUOUS_CHARS)
        assert not set(generate_password(options).password) & set(AMBIGUOUS_CHARS)

    def test_single_class(self):
        options = PasswordGeneratorOptions(
            length=12,
            include_uppercase=False,
            include_lowercase=False,
            include_symbols=False,
        )
        result = generate_password(options)
        assert result.password.isdigit()
        assert result.entropy == round_to(12 * math.log2(10), 1)
        assert result.strength is classify(12 * math.log2(10))

    def test_custom_charset_bypasses_minimum_size(self):
        result = generate_password(PasswordGeneratorOptions(length=10, custom_charset="ab"))
        assert set(result.password) <= {"a", "b"}
        assert result.entropy == 10.0

    @pytest.mark.parametrize("length", [7, 129])
    def test_length_bounds(self, length):
        with pytest.raises(ValueError, match="between 8 and 128"):
            generate_password(PasswordGeneratorOptions(length=length))

    def test_empty_charset(self):
        options = PasswordGeneratorOptions(
            include_uppercase=False,
            include_lowercase=False,
            include_numbers=False,
            include_symbols=False,
        )
        with pytest.raises(ValueError, match="At least one character set"):
            generate_password(options)

    def test_batch(self):
        results = generate_passwords(5)
        assert len(results) == 5
        assert len({r.password for r in results}) == 5

    @pytest.mark.parametrize("count", [0, 101])
    def test_batch_bounds(self, count):
        with pytest.raises(ValueError, match="Count must be between 1 and 100"):
            generate_passwords(count)


class TestPronounceable:

    def test_structure(self):
        password = generate_pronounceable_password(16).password
        assert len(password) == 16
        for index, char in enumerate(password):
            if index % 4 == 3:
                assert char.isdigit()
            elif index % 2 == 0:
                assert char.lower() in "bcdfghjklmnpqrstvwxyz"
            else:
                assert char.lower() in "aeiou"

    def test_entropy(self):
        result = generate_pronounceable_password()
        assert len(result.password) == 12
        assert result.entropy == pytest.approx(12 * math.log2(20))
        assert result.strength is StrengthBand.MEDIUM

    @pytest.mark.parametrize("length", [7, 129])
    def test_bounds(self, length):
        with pytest.raises(ValueError, match="Length must be between 8 and 128"):
            generate_pronounceable_password(length)
