"""
Crawl Result - Data structures for the outcome of a crawl run
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


class VisitState(Enum):
    """Lifecycle of a frontier entry; no state leads back to PENDING"""
    PENDING = "pending"
    DISCARDED = "discarded"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class VisitRecord:
    """Outcome of one dequeued frontier entry"""
    url: str
    depth: int
    state: VisitState = VisitState.PENDING
    links_found: int = 0
    links_enqueued: int = 0
    response_time: float = 0.0
    error: Optional[str] = None


@dataclass
class CrawlResult:
    """Result of a crawl run; urls is the BFS-ordered result sequence"""
    seed_url: str
    max_depth: int
    urls: List[str] = field(default_factory=list)
    visits: List[VisitRecord] = field(default_factory=list)
    duplicates_discarded: int = 0
    links_filtered: int = 0
    cancelled: bool = False
    elapsed: float = 0.0
    output_path: Optional[str] = None

    @property
    def attempted(self) -> List[VisitRecord]:
        """Entries that were rendered, successfully or not"""
        return [v for v in self.visits if v.state is not VisitState.DISCARDED]

    @property
    def failed_urls(self) -> List[str]:
        return [v.url for v in self.visits if v.state is VisitState.FAILED]
