# File: error_scout/aggregator.py
"""error_scout.aggregator: состояние обхода (frontier, посещённые URL, найденные ошибки) и итоговый снимок."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from error_scout.crawler.frontier import Frontier
from error_scout.crawler.models import (
    START,
    BrokenLinkRecord,
    ConsoleErrorRecord,
    FrontierEntry,
    PageOutcome,
    ResourceErrorRecord,
)
from error_scout.crawler.scope import ScopePolicy
from error_scout.logger import get_logger
from error_scout.utils import utc_now_iso

__all__ = ["CrawlState", "EndReason", "CrawlSnapshot", "CrawlAggregate"]

logger = get_logger("aggregator")


class CrawlState(str, Enum):
    RUNNING = "running"
    DONE = "done"


class EndReason(str, Enum):
    """Причина завершения обхода."""

    COMPLETED = "completed"
    MAX_PAGES = "max_pages"
    DEADLINE = "deadline"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class CrawlSnapshot:
    """Итог обхода для генераторов отчётов; поля после finish() не переназначаются."""

    start_url: str
    started_at: str
    finished_at: str
    end_reason: EndReason
    pending: int
    visited: List[str] = field(default_factory=list)
    url_sources: Dict[str, str] = field(default_factory=dict)
    console_errors: List[ConsoleErrorRecord] = field(default_factory=list)
    resource_errors: List[ResourceErrorRecord] = field(default_factory=list)
    broken_links: List[BrokenLinkRecord] = field(default_factory=list)

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "pages_checked": len(self.visited),
            "console_errors_found": len(self.console_errors),
            "broken_links_found": len(self.broken_links),
            "resource_404s_found": len(self.resource_errors),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Структура JSON-отчёта."""
        return {
            "start_url": self.start_url,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "end_reason": self.end_reason.value,
            "pending": self.pending,
            "summary": self.summary,
            "visited_pages": list(self.visited),
            "console_errors": [asdict(r) for r in self.console_errors],
            "broken_links": [asdict(r) for r in self.broken_links],
            "resource_404s": [asdict(r) for r in self.resource_errors],
            "url_sources": dict(self.url_sources),
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


class CrawlAggregate:
    """
    Верхнеуровневое состояние одного обхода.

    Два состояния: RUNNING, пока идёт обход, и DONE после :meth:`finish`.
    В состоянии DONE агрегат доступен только для чтения.
    """

    def __init__(self, start_url: str, policy: Optional[ScopePolicy] = None) -> None:
        self.start_url = start_url
        self.policy = policy or ScopePolicy.derive(start_url)
        self.frontier = Frontier()
        self.console_errors: List[ConsoleErrorRecord] = []
        self.resource_errors: List[ResourceErrorRecord] = []
        self.broken_links: List[BrokenLinkRecord] = []
        self.state = CrawlState.RUNNING
        self.started_at = utc_now_iso()
        self._snapshot: Optional[CrawlSnapshot] = None
        self.frontier.push(FrontierEntry(start_url, START))

    @property
    def is_done(self) -> bool:
        return self.state is CrawlState.DONE

    @property
    def visited_count(self) -> int:
        return self.frontier.visited_count

    def _ensure_running(self) -> None:
        if self.is_done:
            raise RuntimeError("Crawl aggregate is finalized and read-only")

    def claim_next(self) -> Optional[FrontierEntry]:
        """
        Pop entries until one is in scope and unvisited, mark it visited and return it.

        Returns None when the frontier is exhausted.
        """
        self._ensure_running()
        while True:
            entry = self.frontier.pop_next()
            if entry is None:
                return None
            if not self.policy.is_in_scope(entry.url):
                logger.debug("Out of scope, skipped: %s", entry.url)
                continue
            if not self.frontier.mark_visited(entry):
                logger.debug("Already visited, skipped: %s", entry.url)
                continue
            return entry

    def has_pending(self) -> bool:
        """
        True if an unvisited in-scope URL is still queued.

        Stale head entries (already visited or out of scope) are dropped on the
        way, so the next :meth:`claim_next` starts at real work.
        """
        while True:
            head = self.frontier.peek()
            if head is None:
                return False
            if self.policy.is_in_scope(head.url) and not self.frontier.is_visited(head.url):
                return True
            self.frontier.pop_next()

    def pending_count(self) -> int:
        """Number of distinct unvisited in-scope URLs left in the frontier."""
        return sum(1 for url in self.frontier.queued_urls() if self.policy.is_in_scope(url))

    def record_outcome(self, entry: FrontierEntry, outcome: PageOutcome) -> int:
        """Store the visit result and enqueue its in-scope links. Returns the number enqueued."""
        self._ensure_running()
        if outcome.is_broken:
            self.broken_links.append(
                BrokenLinkRecord(
                    url=entry.url,
                    found_on=entry.found_on,
                    status=outcome.status,
                    error=outcome.error or "",
                )
            )
        queued = 0
        for link in outcome.links:
            if self.policy.is_in_scope(link) and self.frontier.push(FrontierEntry(link, entry.url)):
                queued += 1
        return queued

    def add_console_error(self, record: ConsoleErrorRecord) -> None:
        if self.is_done:
            logger.debug("Console error after crawl end dropped: %s", record.error)
            return
        self.console_errors.append(record)

    def add_resource_error(self, record: ResourceErrorRecord) -> None:
        if self.is_done:
            logger.debug("Resource error after crawl end dropped: %s", record.resource_url)
            return
        self.resource_errors.append(record)

    def finish(self, reason: EndReason = EndReason.COMPLETED) -> CrawlSnapshot:
        """Перевести агрегат в DONE и вернуть снимок (повторный вызов возвращает тот же снимок)."""
        if self._snapshot is not None:
            return self._snapshot
        self.state = CrawlState.DONE
        self._snapshot = CrawlSnapshot(
            start_url=self.start_url,
            started_at=self.started_at,
            finished_at=utc_now_iso(),
            end_reason=reason,
            pending=self.pending_count(),
            visited=self.frontier.visited,
            url_sources=self.frontier.url_sources,
            console_errors=list(self.console_errors),
            resource_errors=list(self.resource_errors),
            broken_links=list(self.broken_links),
        )
        return self._snapshot

    @property
    def snapshot(self) -> Optional[CrawlSnapshot]:
        return self._snapshot
