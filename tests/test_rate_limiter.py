"""Tests for the fixed-window rate limiter."""

import time

from app.services.rate_limiter import RateLimiter


class TestRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = RateLimiter()
        results = [limiter.check("1.2.3.4", "search", 3) for _ in range(4)]

        assert [r.success for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    def test_identifiers_and_endpoints_are_independent(self):
        limiter = RateLimiter()
        limiter.check("1.2.3.4", "search", 1)

        assert not limiter.check("1.2.3.4", "search", 1).success
        assert limiter.check("5.6.7.8", "search", 1).success
        assert limiter.check("1.2.3.4", "click", 1).success

    def test_reset_time_is_window_end_in_ms(self):
        limiter = RateLimiter(window_seconds=60)
        before = int(time.time() * 1000)
        result = limiter.check("1.2.3.4", "search", 5)

        assert before + 60_000 <= result.reset_time <= int(time.time() * 1000) + 60_000
        # Same window for subsequent requests
        assert limiter.check("1.2.3.4", "search", 5).reset_time == result.reset_time

    def test_headers(self):
        result = RateLimiter().check("1.2.3.4", "search", 30)

        assert result.headers == {
            "X-RateLimit-Limit": "30",
            "X-RateLimit-Remaining": "29",
            "X-RateLimit-Reset": str(result.reset_time),
        }

    def test_reset_clears_counters(self):
        limiter = RateLimiter()
        limiter.check("1.2.3.4", "search", 1)
        limiter.reset()

        assert limiter.check("1.2.3.4", "search", 1).success
