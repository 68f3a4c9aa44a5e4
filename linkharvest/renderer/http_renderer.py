"""
HTTP Renderer - fetches raw HTML with aiohttp, no script execution
"""

import asyncio
import logging
from typing import List, Optional

import aiohttp

from .base import Renderer
from ..config import BrowserConfig
from ..errors import RenderError
from ..parser import HTMLParser

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ('text/html', 'application/xhtml+xml')


class HTTPRenderer(Renderer):
    """Lightweight renderer for sites that do not need JavaScript

    Shares the user agent and extra headers of the browser configuration so
    both renderers present the same client to the target.
    """

    def __init__(self, config: Optional[BrowserConfig] = None, timeout: float = 30.0):
        self.config = config or BrowserConfig()
        self.timeout = timeout
        self.session = None

    async def start(self):
        headers = {'User-Agent': self.config.user_agent}
        headers.update(self.config.extra_http_headers)
        self.session = aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        logger.info("HTTP session opened")

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None
            logger.info("HTTP session closed")

    async def visit_and_extract_links(self, url: str) -> List[str]:
        if not self.session:
            raise RuntimeError("Session not initialized. Use 'async with' or call start() first")

        try:
            async with self.session.get(url) as response:
                if response.status >= 400:
                    raise RenderError(url, status_code=response.status,
                                      message=f"HTTP {response.status}")

                content_type = response.headers.get('Content-Type', '').lower()
                if content_type and not content_type.startswith(HTML_CONTENT_TYPES):
                    logger.debug(f"Not HTML ({content_type}), no links read from {url}")
                    return []

                content = await response.text(errors='replace')
                final_url = str(response.url)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RenderError(url, e) from e

        parser = HTMLParser(final_url)
        return parser.extract_links(content)
