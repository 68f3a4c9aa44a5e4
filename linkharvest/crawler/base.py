"""
BFS Crawler - breadth-first traversal of the link graph from a seed URL
"""

import time
import logging
from typing import Callable, List, Optional, Tuple

from .frontier import Frontier, FrontierEntry
from .result import CrawlResult, VisitRecord, VisitState
from .cancellation import CancellationToken
from ..errors import ConfigError, RenderError
from ..renderer.base import Renderer
from ..storage.base import OutputSink
from ..utils.error_handler import ErrorHandler, ErrorInfo
from ..utils.rate_limiter import RateLimiter
from ..utils.url_filter import is_absolute_http_url
from ..monitoring import MetricsCollector, ProgressReporter, LogManager

logger = logging.getLogger(__name__)


class BFSCrawler:
    """
    Visits pages in breadth-first order up to max_depth

    The renderer is the only source of new edges. Every URL is marked visited
    when dequeued, before it is rendered, so each URL is attempted at most
    once. A render failure only affects its own page. Once the frontier is
    empty (or the crawl is cancelled) the collected URLs go to the sink.
    """

    def __init__(self, seed_url: str, max_depth: int, renderer: Renderer, sink: OutputSink,
                 rate_limiter: Optional[RateLimiter] = None,
                 error_handler: Optional[ErrorHandler] = None,
                 metrics_collector: Optional[MetricsCollector] = None,
                 progress_reporter: Optional[ProgressReporter] = None,
                 log_manager: Optional[LogManager] = None,
                 cancel_token: Optional[CancellationToken] = None):
        if not seed_url:
            raise ConfigError("seed_url must not be empty")
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise ConfigError(f"max_depth must be an integer >= 0, got {max_depth!r}")

        self.seed_url = seed_url
        self.max_depth = max_depth
        self.renderer = renderer
        self.sink = sink
        self.rate_limiter = rate_limiter or RateLimiter(default_delay=1.0)
        self.error_handler = error_handler or ErrorHandler()
        self.metrics_collector = metrics_collector
        self.progress_reporter = progress_reporter
        self.log_manager = log_manager
        self.cancel_token = cancel_token

        self.frontier = Frontier()
        self.visited = set()

    async def crawl(self) -> CrawlResult:
        """Main crawling workflow"""
        self.frontier.clear()
        self.visited = set()
        self.rate_limiter.reset()
        self.error_handler.reset()
        if self.metrics_collector:
            self.metrics_collector.reset()
        result = CrawlResult(seed_url=self.seed_url, max_depth=self.max_depth)
        start_time = time.time()

        logger.info(f"Starting crawl of {self.seed_url} (max_depth={self.max_depth})")

        try:
            async with self.renderer:
                if self.progress_reporter:
                    await self.progress_reporter.start_reporting()

                try:
                    await self._crawl_loop(result)
                finally:
                    if self.progress_reporter:
                        await self.progress_reporter.stop_reporting()

                result.elapsed = time.time() - start_time
                logger.info(
                    f"Crawl finished: {len(result.urls)} visited, "
                    f"{len(result.failed_urls)} failed, "
                    f"{result.duplicates_discarded} duplicates discarded in {result.elapsed:.1f}s"
                )

                await self.sink.write(list(result.urls))
                path = getattr(self.sink, 'path', None)
                result.output_path = str(path) if path is not None else None
        finally:
            self._export_final_report(result)

        return result

    async def _crawl_loop(self, result: CrawlResult):
        """Drain the frontier in FIFO order"""
        self.frontier.push(self.seed_url, 0)

        while self.frontier:
            if self.cancel_token and self.cancel_token.cancelled:
                logger.warning(
                    f"Crawl cancelled ({self.cancel_token.reason}) with "
                    f"{len(self.frontier)} entries left in the frontier"
                )
                result.cancelled = True
                break

            entry = self.frontier.pop()
            self._update_queue_depth()

            if entry.url in self.visited:
                logger.debug(f"Skipping already visited URL: {entry.url} (depth {entry.depth})")
                result.visits.append(
                    VisitRecord(url=entry.url, depth=entry.depth, state=VisitState.DISCARDED)
                )
                result.duplicates_discarded += 1
                if self.metrics_collector:
                    self.metrics_collector.record_duplicate_discarded(entry.url)
                continue

            self.visited.add(entry.url)
            await self._visit(entry, result)

            # Politeness delay before the next entry, whatever the outcome
            if self.frontier:
                await self.rate_limiter.wait(self.cancel_token)

    async def _visit(self, entry: FrontierEntry, result: CrawlResult):
        """Render one page and expand its links"""
        record = VisitRecord(url=entry.url, depth=entry.depth)
        result.visits.append(record)
        logger.info(f"Visiting: {entry.url} at depth {entry.depth}")

        start_time = time.time()
        try:
            links = await self.renderer.visit_and_extract_links(entry.url)
        except RenderError as e:
            record.response_time = time.time() - start_time
            record.state = VisitState.FAILED
            record.error = e.detail

            info = self.error_handler.record_failure(e, depth=entry.depth,
                                                     response_time=record.response_time)
            if self.metrics_collector:
                self.metrics_collector.record_render_failure(entry.url, info.error_type.value)
            self.rate_limiter.request_completed(entry.url, record.response_time, success=False)
            if self.log_manager:
                self.log_manager.log_failed_visit(info)
            return

        links = links or []
        record.response_time = time.time() - start_time
        record.state = VisitState.SUCCEEDED
        record.links_found = len(links)
        result.urls.append(entry.url)

        if entry.depth < self.max_depth:
            enqueued, filtered = self._enqueue_links(links, entry.depth + 1)
            record.links_enqueued = enqueued
            result.links_filtered += filtered
            if self.metrics_collector:
                self.metrics_collector.record_links(enqueued, filtered)

        self.rate_limiter.request_completed(entry.url, record.response_time, success=True)
        if self.metrics_collector:
            self.metrics_collector.record_page_visited(
                entry.url, entry.depth, record.response_time, record.links_found
            )
        if self.log_manager:
            self.log_manager.log_visit(entry.url, entry.depth, record.response_time,
                                       record.links_found, record.links_enqueued)

        logger.debug(f"Found {record.links_found} links on {entry.url}, queued {record.links_enqueued}")

    def _enqueue_links(self, links: List[str], depth: int) -> Tuple[int, int]:
        """Queue absolute http(s) links not yet visited; returns (enqueued, filtered)"""
        enqueued = filtered = 0
        for link in links:
            if link in self.visited or not is_absolute_http_url(link):
                filtered += 1
                continue
            self.frontier.push(link, depth)
            enqueued += 1

        self._update_queue_depth()
        return enqueued, filtered

    def _update_queue_depth(self):
        if self.metrics_collector:
            self.metrics_collector.update_queue_depth(len(self.frontier))

    def _export_final_report(self, result: CrawlResult):
        if not (self.progress_reporter and self.log_manager):
            return

        report = self.progress_reporter.get_final_report()
        report['result'] = {
            'seed_url': result.seed_url,
            'max_depth': result.max_depth,
            'attempted': len(result.attempted),
            'visited': len(result.urls),
            'failed_urls': result.failed_urls,
            'cancelled': result.cancelled,
            'output_path': result.output_path
        }
        report['errors'] = self.error_handler.get_error_summary()
        report['throttle'] = self.rate_limiter.get_stats()

        try:
            self.log_manager.export_metrics_json(report, "crawl_report.json")
        except OSError as e:
            logger.error(f"Could not export crawl metrics: {e}")


async def run_crawl(seed_url: str, max_depth: int, renderer: Renderer, sink: OutputSink, *,
                    politeness_delay: float = 1.0,
                    cancel_token: Optional[CancellationToken] = None,
                    on_error: Optional[Callable[[ErrorInfo], None]] = None) -> List[str]:
    """Crawl breadth-first from seed_url and return the visited URLs in order

    RenderError is handled per page; SinkError propagates.
    """
    crawler = BFSCrawler(
        seed_url,
        max_depth,
        renderer,
        sink,
        rate_limiter=RateLimiter(default_delay=politeness_delay),
        error_handler=ErrorHandler([on_error] if on_error else None),
        cancel_token=cancel_token
    )
    result = await crawler.crawl()
    return result.urls
