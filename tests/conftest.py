"""Shared fixtures for the PassForge test suite."""

from __future__ import annotations

import datetime as _dt

import pytest

from passforge.core.models import Argon2Options, ScorerFeedback, ScorerResult


class FakeScorer:
    """Deterministic stand-in for the zxcvbn scorer."""

    def __init__(self, score: int = 4, crack_time_seconds: float = 1e10,
                 warning: str = "", suggestions: tuple[str, ...] = ()) -> None:
        self.result = ScorerResult(
            score=score,
            crack_time_seconds=crack_time_seconds,
            feedback=ScorerFeedback(warning=warning, suggestions=suggestions),
        )
        self.calls: list[str] = []

    def score(self, password: str) -> ScorerResult:
        self.calls.append(password)
        return self.result


@pytest.fixture
def created_at() -> _dt.datetime:
    return _dt.datetime(2024, 1, 1, tzinfo=_dt.timezone.utc)


@pytest.fixture
def fake_scorer() -> FakeScorer:
    return FakeScorer()


@pytest.fixture
def fast_argon2() -> Argon2Options:
    """Smallest legal Argon2id cost, keeps hashing tests fast."""
    return Argon2Options(memory_kib=8, iterations=1, parallelism=1, hash_length=32)


@pytest.fixture
def make_scorer():
    """Factory for :class:`FakeScorer` with custom score and feedback."""
    return FakeScorer
