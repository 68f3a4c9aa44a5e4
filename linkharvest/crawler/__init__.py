"""
BFS crawler - traversal engine, frontier and builder
"""

from .base import BFSCrawler, run_crawl
from .builder import CrawlerBuilder
from .cancellation import CancellationToken
from .frontier import Frontier, FrontierEntry
from .result import CrawlResult, VisitRecord, VisitState

__all__ = [
    'BFSCrawler',
    'run_crawl',
    'CrawlerBuilder',
    'CancellationToken',
    'Frontier',
    'FrontierEntry',
    'CrawlResult',
    'VisitRecord',
    'VisitState'
]
