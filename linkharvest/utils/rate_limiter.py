import asyncio
import time
import logging
from collections import deque
from typing import Dict

logger = logging.getLogger(__name__)


class RateLimiter:
    """Politeness throttle applied between consecutive page visits

    With adaptive=False the delay is a fixed constant. With adaptive=True the
    delay grows on failed visits and decays back towards the base delay on
    successful ones.
    """

    def __init__(self, default_delay=1.0, adaptive=False, backoff_factor=2.0,
                 recovery_factor=0.95, max_delay=60.0):
        if default_delay < 0:
            raise ValueError(f"default_delay must be >= 0, got {default_delay}")
        self.default_delay = default_delay
        self.adaptive = adaptive
        self.backoff_factor = backoff_factor
        self.recovery_factor = recovery_factor
        self.max_delay = max(max_delay, default_delay)
        self.crawl_delay = default_delay

        self.total_wait = 0.0
        self.wait_count = 0

        # Request history for adaptive rate limiting
        self.request_history: deque = deque(maxlen=10)

    async def wait(self, cancel_token=None):
        """Sleep for the current delay before the next visit

        With a cancel_token the sleep ends early once the token is set.
        """
        delay = self.crawl_delay
        self.wait_count += 1
        if delay <= 0:
            return

        logger.debug(f"Politeness delay: waiting {delay:.1f}s")
        if cancel_token is None:
            await asyncio.sleep(delay)
            self.total_wait += delay
            return

        started = time.monotonic()
        if await cancel_token.sleep(delay):
            self.total_wait += time.monotonic() - started
            logger.debug("Politeness delay cut short by cancellation")
        else:
            self.total_wait += delay

    def request_completed(self, url: str, response_time: float, success: bool):
        """Called after each visit to update state"""
        self.request_history.append({
            'timestamp': time.time(),
            'url': url,
            'response_time': response_time,
            'success': success
        })

        if self.adaptive:
            self._adaptive_rate_adjustment(success, response_time)

    def _adaptive_rate_adjustment(self, success: bool, response_time: float):
        """Adjust the delay based on the outcome of the last visit"""
        if not success:
            # A zero base delay still needs a floor to grow from
            base = self.crawl_delay or 0.5
            self.crawl_delay = min(base * self.backoff_factor, self.max_delay)
            logger.info(f"Visit failed, increasing delay to {self.crawl_delay:.1f}s")

        elif response_time > 10:
            self.crawl_delay = min(max(self.crawl_delay, 0.5) * 1.2, self.max_delay)
            logger.info(f"Slow response, increasing delay to {self.crawl_delay:.1f}s")

        else:
            self.crawl_delay = max(
                self.default_delay,
                self.crawl_delay * self.recovery_factor
            )

    def reset(self):
        self.crawl_delay = self.default_delay
        self.total_wait = 0.0
        self.wait_count = 0
        self.request_history.clear()

    def get_stats(self) -> Dict:
        """Get throttle statistics"""
        history = list(self.request_history)
        return {
            'crawl_delay': self.crawl_delay,
            'default_delay': self.default_delay,
            'adaptive': self.adaptive,
            'waits': self.wait_count,
            'total_wait_seconds': round(self.total_wait, 3),
            'recent_requests': len(history),
            'avg_response_time': sum(r['response_time'] for r in history) / len(history) if history else 0
        }
