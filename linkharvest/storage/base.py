from abc import ABC, abstractmethod
from typing import Sequence


class OutputSink(ABC):
    """Destination for the URLs collected by a crawl"""

    @abstractmethod
    async def write(self, urls: Sequence[str]) -> None:
        """Persist urls in the given order, raising SinkError on failure"""
        pass
