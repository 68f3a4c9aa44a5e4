from dataclasses import dataclass, field
from typing import Dict


@dataclass
class CrawlMetrics:
    """Core crawling metrics"""
    pages_visited: int = 0
    pages_failed: int = 0
    pages_per_second: float = 0.0
    queue_depth: int = 0
    deepest_depth: int = 0
    success_rate: float = 0.0
    avg_response_time: float = 0.0
    links_enqueued: int = 0
    links_filtered: int = 0
    duplicates_discarded: int = 0
    failure_types: Dict[str, int] = field(default_factory=dict)
