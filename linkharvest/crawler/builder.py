"""
Crawler Builder - Fluent API for assembling a BFS crawler
"""

from typing import Optional
from .base import BFSCrawler
from .cancellation import CancellationToken
from ..config import BrowserConfig, CrawlSettings
from ..renderer import Renderer, PlaywrightRenderer, HTTPRenderer
from ..storage import OutputSink, CSVSink
from ..utils.error_handler import ErrorHandler
from ..utils.rate_limiter import RateLimiter
from ..monitoring import MetricsCollector, ProgressReporter, LogManager


class CrawlerBuilder:
    """Builder for creating crawlers with renderer, sink and monitoring"""

    def __init__(self, seed_url: str):
        self.seed_url = seed_url
        self._max_depth = 3
        self._renderer: Optional[Renderer] = None
        self._sink: Optional[OutputSink] = None
        self._politeness_delay = 1.0
        self._adaptive_backoff = False
        self._error_handler = ErrorHandler()
        self._cancel_token: Optional[CancellationToken] = None
        self._monitoring = False
        self._report_interval = 30.0
        self._log_manager: Optional[LogManager] = None

    def max_depth(self, depth: int):
        """Set maximum expansion depth"""
        self._max_depth = depth
        return self

    def with_renderer(self, renderer: Renderer):
        self._renderer = renderer
        return self

    def with_browser(self, config: Optional[BrowserConfig] = None, timeout: float = 30.0):
        """Render pages in headless Chromium"""
        config = config or BrowserConfig().for_origin(self.seed_url)
        self._renderer = PlaywrightRenderer(config, timeout=timeout)
        return self

    def with_http(self, config: Optional[BrowserConfig] = None, timeout: float = 30.0):
        """Fetch pages over plain HTTP without running scripts"""
        self._renderer = HTTPRenderer(config, timeout=timeout)
        return self

    def with_sink(self, sink: OutputSink):
        self._sink = sink
        return self

    def output(self, path: str):
        """Write collected URLs to a CSV file"""
        self._sink = CSVSink(path)
        return self

    def politeness_delay(self, seconds: float, adaptive: bool = False):
        """Set the delay between visits, optionally backing off on failures"""
        self._politeness_delay = seconds
        self._adaptive_backoff = adaptive
        return self

    def on_error(self, listener):
        """Register a callback receiving an ErrorInfo for each failed visit"""
        self._error_handler.add_listener(listener)
        return self

    def with_cancellation(self, token: CancellationToken):
        self._cancel_token = token
        return self

    def with_monitoring(self, enable: bool = True, report_interval: float = 30.0,
                        log_manager: Optional[LogManager] = None):
        """Add metrics collection, periodic progress reports and metrics export"""
        self._monitoring = enable
        self._report_interval = report_interval
        self._log_manager = log_manager
        return self

    @classmethod
    def from_settings(cls, settings: CrawlSettings, log_manager: Optional[LogManager] = None):
        """Builder preconfigured from process settings"""
        builder = (cls(settings.seed_url)
                   .max_depth(settings.max_depth)
                   .output(settings.output_path)
                   .politeness_delay(settings.politeness_delay, adaptive=settings.adaptive_backoff))

        if settings.renderer == "http":
            builder.with_http(settings.browser_config(), timeout=settings.render_timeout)
        else:
            builder.with_browser(settings.browser_config(), timeout=settings.render_timeout)

        if log_manager:
            builder.with_monitoring(report_interval=settings.report_interval, log_manager=log_manager)
        return builder

    def build(self) -> BFSCrawler:
        """Build the configured crawler"""
        if self._renderer is None:
            self.with_browser()
        if self._sink is None:
            self._sink = CSVSink()

        metrics_collector = None
        progress_reporter = None
        if self._monitoring:
            metrics_collector = MetricsCollector()
            progress_reporter = ProgressReporter(metrics_collector, report_interval=self._report_interval)

        return BFSCrawler(
            self.seed_url,
            self._max_depth,
            self._renderer,
            self._sink,
            rate_limiter=RateLimiter(default_delay=self._politeness_delay, adaptive=self._adaptive_backoff),
            error_handler=self._error_handler,
            metrics_collector=metrics_collector,
            progress_reporter=progress_reporter,
            log_manager=self._log_manager,
            cancel_token=self._cancel_token
        )
