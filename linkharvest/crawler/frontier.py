"""
Frontier - FIFO queue of pages waiting to be visited
"""

from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class FrontierEntry:
    """A pending visit discovered at a given depth"""
    url: str
    depth: int = 0


class Frontier:
    """Strict arrival-order queue

    Duplicate URLs are accepted here; the crawler drops them when dequeued.
    """

    def __init__(self):
        self._entries = deque()

    def push(self, url: str, depth: int) -> FrontierEntry:
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")
        entry = FrontierEntry(url=url, depth=depth)
        self._entries.append(entry)
        return entry

    def pop(self) -> FrontierEntry:
        """Remove and return the oldest entry, IndexError when empty"""
        return self._entries.popleft()

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)

    def __bool__(self):
        return bool(self._entries)

    def __iter__(self):
        return iter(self._entries)
