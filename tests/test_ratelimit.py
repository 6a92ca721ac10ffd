"""Tests for batch cooldowns and the daily article quota."""

from __future__ import annotations

from datetime import date

from paperscraper.ratelimit import RateLimiter


class _Clock:
    def __init__(self, day: date) -> None:
        self.day = day

    def __call__(self) -> date:
        return self.day


class TestBatchCooldown:
    def test_no_cooldown_before_first_date(self) -> None:
        limiter = RateLimiter(3, 15, 0)
        assert limiter.cooldown_seconds() == 0.0

    def test_cooldown_after_full_batch(self) -> None:
        limiter = RateLimiter(3, 15, 0)
        waits = []
        for _ in range(7):
            waits.append(limiter.cooldown_seconds())
            limiter.mark_date()
        assert waits == [0.0, 0.0, 0.0, 900.0, 0.0, 0.0, 900.0]

    def test_disabled_by_zero_batch_or_cooldown(self) -> None:
        for limiter in (RateLimiter(0, 15, 0), RateLimiter(2, 0, 0)):
            limiter.mark_date()
            limiter.mark_date()
            assert limiter.cooldown_seconds() == 0.0


class TestDailyQuota:
    def test_unlimited(self) -> None:
        limiter = RateLimiter(3, 15, 0)
        limiter.mark_article()
        assert limiter.remaining() is None

    def test_counts_down_to_zero(self) -> None:
        limiter = RateLimiter(3, 15, 2)
        assert limiter.remaining() == 2
        limiter.mark_article()
        limiter.mark_article()
        limiter.mark_article()
        assert limiter.remaining() == 0

    def test_resets_on_a_new_day(self) -> None:
        clock = _Clock(date(2024, 1, 1))
        limiter = RateLimiter(3, 15, 1, today=clock)
        limiter.mark_article()
        assert limiter.remaining() == 0

        clock.day = date(2024, 1, 2)
        assert limiter.remaining() == 1
