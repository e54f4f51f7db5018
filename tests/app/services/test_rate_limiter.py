"""Testes do RateLimiter (janela fixa + cooldown por comando)."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.services import RateLimitDecision, RateLimiter


@pytest.fixture
def limiter(fake_clock) -> RateLimiter:
    return RateLimiter(max_per_window=10, window_ms=60_000, cooldown_ms=2_000, clock=fake_clock)


class TestWindow:
    """Contagem por janela fixa."""

    def test_allows_up_to_limit_then_denies(self, limiter: RateLimiter) -> None:
        for index in range(10):
            assert limiter.check("user-1", f"cmd-{index}").allowed

        decision = limiter.check("user-1", "cmd-10")

        assert decision.allowed is False
        assert decision.reason == "window_exhausted"
        assert decision.retry_after_seconds == 60

    def test_same_command_spaced_beyond_cooldown(self, limiter: RateLimiter, fake_clock) -> None:
        for _ in range(10):
            assert limiter.check("user-1", "session").allowed
            fake_clock.advance(2_000)

        decision = limiter.check("user-1", "session")
        assert decision.allowed is False
        assert decision.reason == "window_exhausted"
        assert decision.retry_after_seconds == 40

    def test_window_resets_after_expiry(self, limiter: RateLimiter, fake_clock) -> None:
        for index in range(10):
            limiter.check("user-1", f"cmd-{index}")
        assert not limiter.check("user-1", "extra").allowed

        fake_clock.advance(60_000)

        assert limiter.check("user-1", "extra").allowed
        entry = limiter.get_entry("user-1")
        assert entry is not None
        assert entry.window_count == 1
        assert entry.window_reset_at == 120_000

    def test_retry_after_rounds_up(self, limiter: RateLimiter, fake_clock) -> None:
        for index in range(10):
            limiter.check("user-1", f"cmd-{index}")
        fake_clock.advance(58_500)

        decision = limiter.check("user-1", "extra")
        assert decision.retry_after_seconds == 2

    def test_principals_are_independent(self, limiter: RateLimiter) -> None:
        for index in range(10):
            limiter.check("user-1", f"cmd-{index}")

        assert not limiter.check("user-1", "other").allowed
        assert limiter.check("user-2", "other").allowed

    def test_exhaustion_logs_warning(
        self, limiter: RateLimiter, caplog: pytest.LogCaptureFixture
    ) -> None:
        for index in range(10):
            limiter.check("user-1", f"cmd-{index}")

        with caplog.at_level(logging.WARNING, logger="app.services.rate_limiter"):
            limiter.check("user-1", "extra")

        [record] = [r for r in caplog.records if r.getMessage() == "command_rate_limit_exceeded"]
        assert record.principal_id == "user-1"
        assert record.limit == 10


class TestCooldown:
    """Cooldown entre execuções do mesmo comando."""

    def test_same_command_within_cooldown_is_denied(
        self, limiter: RateLimiter, fake_clock
    ) -> None:
        assert limiter.check("user-1", "session").allowed

        decision = limiter.check("user-1", "session")
        assert decision == RateLimitDecision.deny(2, "cooldown")

        fake_clock.advance(1_500)
        assert limiter.check("user-1", "session").retry_after_seconds == 1

        fake_clock.advance(500)
        assert limiter.check("user-1", "session").allowed

    def test_different_command_is_not_throttled(self, limiter: RateLimiter) -> None:
        assert limiter.check("user-1", "session").allowed
        assert limiter.check("user-1", "profile").allowed
        assert limiter.check("user-1", "session").allowed

    def test_cooldown_takes_precedence_over_window(self, limiter: RateLimiter) -> None:
        for index in range(10):
            limiter.check("user-1", f"cmd-{index}")

        decision = limiter.check("user-1", "cmd-9")
        assert decision.reason == "cooldown"

    def test_denial_does_not_mutate_entry(self, limiter: RateLimiter) -> None:
        limiter.check("user-1", "session")
        before = limiter.get_entry("user-1")

        limiter.check("user-1", "session")

        assert limiter.get_entry("user-1") == before

    def test_zero_cooldown(self, fake_clock) -> None:
        limiter = RateLimiter(max_per_window=3, cooldown_ms=0, clock=fake_clock)
        assert [limiter.check("u", "same").allowed for _ in range(4)] == [
            True,
            True,
            True,
            False,
        ]


class TestMaintenance:
    """sweep, reset e get_entry."""

    def test_sweep_removes_only_expired(self, limiter: RateLimiter, fake_clock) -> None:
        limiter.check("old", "cmd")
        fake_clock.advance(30_000)
        limiter.check("recent", "cmd")
        fake_clock.advance(30_000)

        assert limiter.sweep() == 1
        assert limiter.get_entry("old") is None
        assert limiter.get_entry("recent") is not None
        assert len(limiter) == 1

    def test_sweep_is_noop_when_nothing_expired(self, limiter: RateLimiter) -> None:
        limiter.check("user-1", "cmd")
        assert limiter.sweep() == 0

    def test_get_entry_returns_copy(self, limiter: RateLimiter) -> None:
        limiter.check("user-1", "cmd")
        entry = limiter.get_entry("user-1")
        assert entry is not None
        entry.window_count = 99

        assert limiter.get_entry("user-1").window_count == 1

    def test_reset(self, limiter: RateLimiter) -> None:
        limiter.check("a", "cmd")
        limiter.check("b", "cmd")

        limiter.reset("a")
        assert len(limiter) == 1
        limiter.reset()
        assert len(limiter) == 0

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_per_window": 0}, {"window_ms": 0}, {"cooldown_ms": -1}],
    )
    def test_invalid_arguments(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            RateLimiter(**kwargs)


class TestConcurrency:
    def test_parallel_checks_never_exceed_limit(self, fake_clock) -> None:
        limiter = RateLimiter(max_per_window=10, clock=fake_clock)
        barrier = threading.Barrier(50)

        def attempt(index: int) -> bool:
            barrier.wait()
            return limiter.check("user-1", f"cmd-{index}").allowed

        with ThreadPoolExecutor(max_workers=50) as pool:
            results = list(pool.map(attempt, range(50)))

        assert sum(results) == 10
        assert limiter.get_entry("user-1").window_count == 10
