"""
Browser Renderer - visits pages in headless Chromium through Playwright
"""

import logging
from typing import List, Optional

from playwright.async_api import async_playwright, Error as PlaywrightError

from .base import Renderer
from .stealth import build_init_script
from ..config import BrowserConfig
from ..errors import RenderError

logger = logging.getLogger(__name__)

# SVG anchors expose href as an SVGAnimatedString, so fall back to the raw attribute
EXTRACT_HREFS_JS = """
anchors => anchors.map(a => (typeof a.href === 'string' ? a.href : a.getAttribute('href')))
"""


class PlaywrightRenderer(Renderer):
    """Renders pages in a single browser context and page reused across visits"""

    def __init__(self, config: Optional[BrowserConfig] = None, timeout: float = 30.0,
                 wait_until: str = 'networkidle'):
        self.config = config or BrowserConfig()
        self.timeout_ms = int(timeout * 1000)
        self.wait_until = wait_until
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    async def start(self):
        """Launch the browser and prepare the shared context and page"""
        config = self.config
        logger.info(f"Starting browser (headless={config.headless})")

        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=config.headless,
                args=config.launch_args
            )

            context_options = {
                'viewport': {'width': config.viewport.width, 'height': config.viewport.height},
                'device_scale_factor': config.viewport.device_scale_factor,
                'user_agent': config.user_agent,
                'extra_http_headers': config.extra_http_headers,
            }
            if config.timezone_id:
                context_options['timezone_id'] = config.timezone_id
            if config.geolocation is not None:
                context_options['geolocation'] = {
                    'latitude': config.geolocation.latitude,
                    'longitude': config.geolocation.longitude,
                    'accuracy': config.geolocation.accuracy
                }

            self.context = await self.browser.new_context(**context_options)

            for override in config.permissions:
                await self.context.grant_permissions(override.permissions, origin=override.origin)

            script = build_init_script(config.fingerprint)
            if script:
                await self.context.add_init_script(script=script)

            self.page = await self.context.new_page()
            self.page.set_default_navigation_timeout(self.timeout_ms)

        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            await self.close()
            raise

        logger.info("Browser ready")

    async def close(self):
        """Clean up browser resources"""
        try:
            if self.page:
                await self.page.close()
            if self.context:
                await self.context.close()
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            self.page = None
            self.context = None
            self.browser = None
            self.playwright = None

        logger.info("Browser closed")

    async def visit_and_extract_links(self, url: str) -> List[str]:
        if not self.page:
            raise RuntimeError("Browser not initialized. Use 'async with' or call start() first")

        try:
            await self.page.goto(url, wait_until=self.wait_until, timeout=self.timeout_ms)
            hrefs = await self.page.eval_on_selector_all('a', EXTRACT_HREFS_JS)
        except PlaywrightError as e:
            raise RenderError(url, e) from e

        return [href for href in hrefs if isinstance(href, str)]
