import time
import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Any
from .metrics_collector import MetricsCollector

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Reports crawl progress and statistics"""

    def __init__(self, metrics_collector: MetricsCollector, report_interval: float = 30.0):
        self.metrics = metrics_collector
        self.report_interval = report_interval
        self.reporting_task = None

    async def start_reporting(self):
        """Start periodic progress reporting"""
        self.reporting_task = asyncio.create_task(self._reporting_loop())

    async def stop_reporting(self):
        """Stop progress reporting"""
        if self.reporting_task:
            self.reporting_task.cancel()
            try:
                await self.reporting_task
            except asyncio.CancelledError:
                pass
            self.reporting_task = None
            # Close the timeline with the end-of-crawl state
            self.metrics.store_historical_snapshot()

    async def _reporting_loop(self):
        while True:
            await asyncio.sleep(self.report_interval)
            self.log_progress_report()
            self.metrics.store_historical_snapshot()

    def log_progress_report(self):
        """Log a progress report"""
        snapshot = self.metrics.get_current_snapshot()
        crawl_metrics = snapshot['crawl_metrics']
        system_metrics = snapshot['system_metrics']

        lines = [
            f"CRAWL PROGRESS REPORT - {datetime.now().strftime('%H:%M:%S')}",
            f"  Pages visited: {crawl_metrics['pages_visited']}",
            f"  Pages failed: {crawl_metrics['pages_failed']}",
            f"  Pages/second: {crawl_metrics['pages_per_second']:.2f}",
            f"  Frontier size: {crawl_metrics['queue_depth']}",
            f"  Deepest depth: {crawl_metrics['deepest_depth']}",
            f"  Success rate: {crawl_metrics['success_rate']:.1f}%",
            f"  Avg response time: {crawl_metrics['avg_response_time']:.2f}s",
            f"  Duplicates discarded: {crawl_metrics['duplicates_discarded']}",
            f"  Links enqueued/filtered: {crawl_metrics['links_enqueued']}/{crawl_metrics['links_filtered']}",
            f"  CPU: {system_metrics['cpu_percent']:.1f}%",
            f"  Memory: {system_metrics['process_rss_mb']:.0f} MB process, "
            f"{system_metrics['memory_percent']:.1f}% system",
        ]

        domain_metrics = snapshot['domain_metrics']
        for domain, metrics in domain_metrics.items():
            lines.append(
                f"  {domain}: {metrics['pages_visited']} pages, "
                f"{metrics['success_rate']:.1f}% success, "
                f"{metrics['avg_response_time']:.2f}s avg"
            )

        logger.info("\n".join(lines))

    def get_final_report(self) -> Dict[str, Any]:
        """Generate final crawl report"""
        snapshot = self.metrics.get_current_snapshot()

        return {
            'final_snapshot': snapshot,
            'progress_timeline': self.metrics.get_history(),
            'performance_summary': self._generate_performance_summary(),
            'domain_summary': self._generate_domain_summary(),
            'efficiency_metrics': self._generate_efficiency_metrics()
        }

    def _generate_performance_summary(self) -> Dict[str, Any]:
        crawl_metrics = self.metrics.crawl_metrics
        elapsed_time = time.time() - self.metrics.start_time

        return {
            'total_runtime_minutes': elapsed_time / 60,
            'pages_per_minute': (crawl_metrics.pages_visited / elapsed_time) * 60 if elapsed_time > 0 else 0,
            'success_rate': crawl_metrics.success_rate,
            'deepest_depth': crawl_metrics.deepest_depth
        }

    def _generate_domain_summary(self) -> List[Dict[str, Any]]:
        return [
            {
                'domain': domain,
                'pages_visited': metrics.pages_visited,
                'success_rate': metrics.success_rate,
                'avg_response_time': metrics.avg_response_time,
                'total_errors': metrics.errors
            }
            for domain, metrics in self.metrics.domain_metrics.items()
        ]

    def _generate_efficiency_metrics(self) -> Dict[str, Any]:
        crawl_metrics = self.metrics.crawl_metrics

        dequeued = crawl_metrics.pages_visited + crawl_metrics.pages_failed + crawl_metrics.duplicates_discarded
        attempts = crawl_metrics.pages_visited + crawl_metrics.pages_failed
        links_seen = crawl_metrics.links_enqueued + crawl_metrics.links_filtered

        return {
            'duplication_rate': (crawl_metrics.duplicates_discarded / dequeued * 100) if dequeued > 0 else 0,
            'error_rate': (crawl_metrics.pages_failed / attempts * 100) if attempts > 0 else 0,
            'link_filter_rate': (crawl_metrics.links_filtered / links_seen * 100) if links_seen > 0 else 0
        }
