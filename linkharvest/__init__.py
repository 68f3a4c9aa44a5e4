"""
linkharvest - breadth-first link crawler backed by a headless browser
"""

from .crawler import BFSCrawler, CrawlerBuilder, CancellationToken, CrawlResult, run_crawl
from .errors import CrawlerError, ConfigError, RenderError, SinkError

__version__ = "1.0.0"

__all__ = [
    'BFSCrawler',
    'CrawlerBuilder',
    'CancellationToken',
    'CrawlResult',
    'run_crawl',
    'CrawlerError',
    'ConfigError',
    'RenderError',
    'SinkError'
]
