# error_scout/crawler/frontier.py
"""
Breadth-first frontier with a visited set and per-URL provenance.

A URL becomes *visited* when it is popped and claimed for a visit, not when it
is pushed, so the first discovery to reach the head of the queue wins the
provenance.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Optional

from error_scout.crawler.models import FrontierEntry

__all__ = ("Frontier",)


class Frontier:
    """FIFO queue of :class:`FrontierEntry` plus the visited set."""

    def __init__(self) -> None:
        self._queue: Deque[FrontierEntry] = deque()
        # url -> found_on, insertion order is visit order
        self._sources: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def push(self, entry: FrontierEntry) -> bool:
        """Append *entry* unless its URL was already visited. Returns True if queued."""
        if entry.url in self._sources:
            return False
        self._queue.append(entry)
        return True

    def pop_next(self) -> Optional[FrontierEntry]:
        if not self._queue:
            return None
        return self._queue.popleft()

    def peek(self) -> Optional[FrontierEntry]:
        return self._queue[0] if self._queue else None

    def queued_urls(self) -> List[str]:
        """Distinct URLs still in the queue that are not visited yet, in queue order."""
        return [url for url in dict.fromkeys(e.url for e in self._queue) if url not in self._sources]

    def is_visited(self, url: str) -> bool:
        return url in self._sources

    def mark_visited(self, entry: FrontierEntry) -> bool:
        """Record *entry* as visited. Returns False if its URL was visited before."""
        if entry.url in self._sources:
            return False
        self._sources[entry.url] = entry.found_on
        return True

    @property
    def visited(self) -> List[str]:
        return list(self._sources)

    @property
    def visited_count(self) -> int:
        return len(self._sources)

    @property
    def url_sources(self) -> Dict[str, str]:
        return dict(self._sources)
