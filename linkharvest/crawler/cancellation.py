import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """Set from outside the crawl to stop it after the current visit

    The crawler checks the token before dequeuing each entry and, once set,
    still writes what it has collected to the sink. A politeness delay in
    progress through sleep() ends as soon as the token is set.
    """

    def __init__(self):
        self._cancelled = False
        self._wakeup: Optional[asyncio.Event] = None
        self.reason = None

    def cancel(self, reason: str = "cancelled"):
        if not self._cancelled:
            logger.info(f"Crawl cancellation requested: {reason}")
        self._cancelled = True
        self.reason = reason
        if self._wakeup is not None:
            self._wakeup.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def sleep(self, delay: float) -> bool:
        """Sleep for delay seconds unless cancelled first; True if cancelled"""
        if self._cancelled:
            return True

        # One event per sleep, so the token works across event loops
        self._wakeup = asyncio.Event()
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        finally:
            self._wakeup = None
        return True
