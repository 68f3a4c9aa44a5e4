import time
import psutil
import logging
import threading
from datetime import datetime
from dataclasses import asdict
from typing import Dict, Any, List
from collections import deque
from urllib.parse import urlparse
from .crawl_metrics import CrawlMetrics
from .system_metrics import SystemMetrics
from .domain_metrics import DomainMetrics

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Collects and aggregates metrics for a crawl run"""

    def __init__(self, history_size: int = 100):
        self._lock = threading.Lock()
        self.metrics_history: deque = deque(maxlen=history_size)
        self.response_times: deque = deque(maxlen=100)
        self.reset()

    def reset(self):
        """Start a new run: zero every counter and restart the clock"""
        with self._lock:
            self.start_time = time.time()
            self.crawl_metrics = CrawlMetrics()
            self.system_metrics = SystemMetrics()
            self.domain_metrics: Dict[str, DomainMetrics] = {}
            self.metrics_history.clear()
            self.response_times.clear()

    def record_page_visited(self, url: str, depth: int, response_time: float,
                            links_found: int = 0):
        """Record a successful page visit"""
        with self._lock:
            domain_metric = self._domain(url)

            self.crawl_metrics.pages_visited += 1
            self.crawl_metrics.deepest_depth = max(self.crawl_metrics.deepest_depth, depth)
            self.response_times.append(response_time)

            domain_metric.pages_visited += 1
            domain_metric.total_response_time += response_time
            domain_metric.last_visited = datetime.now()

            self._update_calculated_metrics()

    def record_render_failure(self, url: str, error_type: str):
        """Record a failed page visit"""
        with self._lock:
            self.crawl_metrics.pages_failed += 1
            self._domain(url).errors += 1
            failures = self.crawl_metrics.failure_types
            failures[error_type] = failures.get(error_type, 0) + 1

            self._update_calculated_metrics()

    def record_duplicate_discarded(self, url: str):
        """Record a frontier entry dropped because its URL was already visited"""
        with self._lock:
            self.crawl_metrics.duplicates_discarded += 1

    def record_links(self, enqueued: int, filtered: int):
        with self._lock:
            self.crawl_metrics.links_enqueued += enqueued
            self.crawl_metrics.links_filtered += filtered

    def update_queue_depth(self, depth: int):
        """Update current frontier size"""
        with self._lock:
            self.crawl_metrics.queue_depth = depth

    def collect_system_metrics(self):
        """Collect current system resource metrics"""
        try:
            self.system_metrics.cpu_percent = psutil.cpu_percent(interval=None)
            memory = psutil.virtual_memory()
            self.system_metrics.memory_used_mb = memory.used / (1024 * 1024)
            self.system_metrics.memory_percent = memory.percent

            try:
                process = psutil.Process()
                self.system_metrics.process_rss_mb = process.memory_info().rss / (1024 * 1024)
                self.system_metrics.open_files = process.num_fds() if hasattr(process, 'num_fds') else len(process.open_files())
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                self.system_metrics.open_files = 0

        except Exception as e:
            logger.warning(f"Failed to collect system metrics: {e}")

    def _domain(self, url: str) -> DomainMetrics:
        domain = urlparse(url).netloc.lower() or "unknown"
        if domain not in self.domain_metrics:
            self.domain_metrics[domain] = DomainMetrics(domain=domain)
        return self.domain_metrics[domain]

    def _update_calculated_metrics(self):
        """Update calculated metrics like rates and averages"""
        elapsed_time = time.time() - self.start_time

        if elapsed_time > 0:
            self.crawl_metrics.pages_per_second = self.crawl_metrics.pages_visited / elapsed_time

        total_attempts = self.crawl_metrics.pages_visited + self.crawl_metrics.pages_failed
        if total_attempts > 0:
            self.crawl_metrics.success_rate = (self.crawl_metrics.pages_visited / total_attempts) * 100

        if self.response_times:
            self.crawl_metrics.avg_response_time = sum(self.response_times) / len(self.response_times)

        for domain_metric in self.domain_metrics.values():
            total_domain_attempts = domain_metric.pages_visited + domain_metric.errors
            if total_domain_attempts > 0:
                domain_metric.success_rate = (domain_metric.pages_visited / total_domain_attempts) * 100
            if domain_metric.pages_visited:
                domain_metric.avg_response_time = domain_metric.total_response_time / domain_metric.pages_visited

    def get_current_snapshot(self) -> Dict[str, Any]:
        """Get current metrics snapshot"""
        with self._lock:
            self.collect_system_metrics()

            return {
                'timestamp': datetime.now().isoformat(),
                'uptime_seconds': time.time() - self.start_time,
                'crawl_metrics': asdict(self.crawl_metrics),
                'system_metrics': asdict(self.system_metrics),
                'domain_metrics': {
                    domain: asdict(metrics) for domain, metrics in self.domain_metrics.items()
                }
            }

    def store_historical_snapshot(self):
        """Keep the current snapshot; the final report lists them as the progress timeline"""
        snapshot = self.get_current_snapshot()
        with self._lock:
            self.metrics_history.append(snapshot)

    def get_history(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self.metrics_history)
