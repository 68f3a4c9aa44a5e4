"""
Base Renderer Interface - how the crawler discovers outbound links
"""

from abc import ABC, abstractmethod
from typing import List


class Renderer(ABC):
    """Loads a page and reports the links it contains

    A renderer is acquired once per crawl (async with) and reused for every
    visit. Implementations raise RenderError for any per-page failure.
    """

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        """Acquire the underlying session"""

    async def close(self) -> None:
        """Release the underlying session"""

    @abstractmethod
    async def visit_and_extract_links(self, url: str) -> List[str]:
        """Navigate to url and return the href of every anchor on the page"""
        pass
