import asyncio

import pytest

from linkharvest.crawler import CancellationToken
from linkharvest.utils import RateLimiter


def test_fixed_delay_ignores_failures():
    limiter = RateLimiter(default_delay=1.0)
    limiter.request_completed("https://a.test/", 0.1, success=False)
    limiter.request_completed("https://a.test/", 0.1, success=False)
    assert limiter.crawl_delay == 1.0


def test_adaptive_backoff_grows_and_is_capped():
    limiter = RateLimiter(default_delay=1.0, adaptive=True, backoff_factor=2.0, max_delay=5.0)

    limiter.request_completed("https://a.test/", 0.1, success=False)
    assert limiter.crawl_delay == 2.0
    limiter.request_completed("https://a.test/", 0.1, success=False)
    limiter.request_completed("https://a.test/", 0.1, success=False)
    assert limiter.crawl_delay == 5.0


def test_adaptive_delay_recovers_to_default():
    limiter = RateLimiter(default_delay=1.0, adaptive=True, recovery_factor=0.5)
    limiter.request_completed("https://a.test/", 0.1, success=False)
    limiter.request_completed("https://a.test/", 0.1, success=True)
    assert limiter.crawl_delay == 1.0
    limiter.request_completed("https://a.test/", 0.1, success=True)
    assert limiter.crawl_delay == 1.0


def test_adaptive_backoff_from_zero_delay():
    limiter = RateLimiter(default_delay=0, adaptive=True)
    limiter.request_completed("https://a.test/", 0.1, success=False)
    assert limiter.crawl_delay > 0


def test_wait_sleeps_for_current_delay():
    limiter = RateLimiter(default_delay=0.01)
    asyncio.run(limiter.wait())
    asyncio.run(limiter.wait())

    stats = limiter.get_stats()
    assert stats["waits"] == 2
    assert stats["total_wait_seconds"] == pytest.approx(0.02)


def test_zero_delay_does_not_sleep():
    limiter = RateLimiter(default_delay=0)
    asyncio.run(limiter.wait())
    assert limiter.wait_count == 1
    assert limiter.total_wait == 0


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        RateLimiter(default_delay=-1)


def test_reset():
    limiter = RateLimiter(default_delay=1.0, adaptive=True)
    limiter.request_completed("https://a.test/", 0.2, success=False)
    limiter.reset()
    assert limiter.crawl_delay == 1.0
    assert limiter.get_stats()["recent_requests"] == 0


def test_wait_ends_early_when_cancelled():
    limiter = RateLimiter(default_delay=1.0, adaptive=True, max_delay=60.0)
    limiter.request_completed("https://a.test/", 0.1, success=False)
    token = CancellationToken()

    async def scenario():
        asyncio.get_running_loop().call_later(0.01, token.cancel, "test")
        await asyncio.wait_for(limiter.wait(token), timeout=1)

    asyncio.run(scenario())

    assert token.cancelled
    assert limiter.wait_count == 1
    assert limiter.total_wait < 1


def test_wait_skipped_when_already_cancelled():
    limiter = RateLimiter(default_delay=30)
    token = CancellationToken()
    token.cancel("test")

    asyncio.run(asyncio.wait_for(limiter.wait(token), timeout=1))
    assert limiter.total_wait < 1


def test_wait_with_token_runs_full_delay_when_not_cancelled():
    limiter = RateLimiter(default_delay=0.01)
    token = CancellationToken()

    asyncio.run(limiter.wait(token))
    asyncio.run(limiter.wait(token))

    assert not token.cancelled
    assert limiter.total_wait == pytest.approx(0.02)
