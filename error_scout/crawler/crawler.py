# === FILE: error_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Any, List, Optional, Tuple

from playwright.async_api import async_playwright

from error_scout.aggregator import CrawlAggregate, CrawlSnapshot, EndReason
from error_scout.crawler.events import EventCorrelator
from error_scout.crawler.models import ERROR, FrontierEntry, PageOutcome
from error_scout.crawler.visitor import PageVisitor
from error_scout.logger import get_logger

__all__ = ("BrowserCrawler", "BrowserLaunchError")


class BrowserLaunchError(RuntimeError):
    """The headless browser could not be started; the crawl cannot run at all."""


class BrowserCrawler:
    """
    Breadth-first crawler driving a headless browser.

    Use as an async context manager: the browser is launched on enter and
    released on exit, also when the crawl fails or is cancelled. Passing
    ``browser=`` skips the launch; the caller then owns that browser.

    Each worker gets its own browser context, page and :class:`EventCorrelator`.
    Frontier access is serialized through one :class:`asyncio.Condition`.
    """

    def __init__(self, config, browser: Any = None) -> None:
        self.config = config
        self._validate_config()
        self.workers: int = getattr(config, "workers", 1)
        self.max_pages: Optional[int] = getattr(config, "max_pages", None)
        self.deadline: Optional[float] = getattr(config, "deadline", None)
        self.visitor = PageVisitor(
            nav_timeout=getattr(config, "nav_timeout", 30.0),
            settle_delay=getattr(config, "settle_delay", 1.0),
        )
        self.aggregate = CrawlAggregate(str(config.start_url))
        self.logger = get_logger("crawler")
        self.browser = browser
        self._owns_browser = browser is None
        self._playwright: Any = None
        self._sessions: List[Tuple[Any, Any, EventCorrelator]] = []
        self._cond: Optional[asyncio.Condition] = None
        self._in_flight = 0
        self._end_reason: Optional[EndReason] = None
        self._stop_requested = False
        self._deadline_at: Optional[float] = None

    async def __aenter__(self) -> BrowserCrawler:
        if self._owns_browser:
            await self._launch_browser()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._close_sessions()
        if self._owns_browser:
            if self.browser is not None:
                try:
                    await self.browser.close()
                except Exception as e:
                    self.logger.debug("Browser close failed: %s", e)
                self.browser = None
            if self._playwright is not None:
                try:
                    await self._playwright.stop()
                except Exception as e:
                    self.logger.debug("Playwright stop failed: %s", e)
                self._playwright = None

    def stop(self) -> None:
        """Ask the crawl to end after the visits already in progress."""
        self._stop_requested = True

    async def crawl(self) -> CrawlSnapshot:
        if self.browser is None:
            raise RuntimeError("Browser not initialized, use 'async with BrowserCrawler(...)'")
        agg = self.aggregate
        self.logger.info("Crawling URLs containing: %s", agg.policy.describe())
        start = time.monotonic()
        if self.deadline is not None:
            self._deadline_at = start + self.deadline
        self._cond = asyncio.Condition()

        await self._open_sessions()
        workers = [
            asyncio.create_task(self._worker(page, correlator), name=f"error-scout-worker-{i}")
            for i, (_, page, correlator) in enumerate(self._sessions)
        ]
        try:
            await asyncio.gather(*workers)
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        snapshot = agg.finish(self._end_reason or EndReason.COMPLETED)
        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (%s)", len(snapshot.visited), duration, snapshot.end_reason.value
        )
        if snapshot.pending:
            self.logger.info("Left in frontier: %d", snapshot.pending)
        return snapshot

    async def _worker(self, page: Any, correlator: EventCorrelator) -> None:
        assert self._cond is not None
        while True:
            async with self._cond:
                entry = await self._next_entry()
                if entry is None:
                    self._cond.notify_all()
                    return
                self._in_flight += 1
                self.logger.info("Checking [%d]: %s", self.aggregate.visited_count, entry.url)
            try:
                outcome = await self.visitor.visit(page, entry.url, correlator)
            except Exception as e:
                # navigation failures never get here, only broken page plumbing
                self.logger.error("Unexpected failure visiting %s: %s", entry.url, e)
                outcome = PageOutcome(status=ERROR, error=str(e) or type(e).__name__)
            # record before in_flight drops: idle workers read in_flight == 0 with an empty frontier as the end
            async with self._cond:
                queued = self.aggregate.record_outcome(entry, outcome)
                self._in_flight -= 1
                self.logger.debug("%s -> %s (+%d queued)", entry.url, outcome.status, queued)
                self._cond.notify_all()

    async def _next_entry(self) -> Optional[FrontierEntry]:
        """Claim the next entry, waiting while other workers may still enqueue links. Caller holds the lock."""
        assert self._cond is not None
        while True:
            reason = self._limit_reached()
            if reason is not None:
                self._end_reason = self._end_reason or reason
                return None
            entry = self.aggregate.claim_next()
            if entry is not None:
                return entry
            if self._in_flight == 0:
                return None
            await self._wait_for_work()

    async def _wait_for_work(self) -> None:
        assert self._cond is not None
        if self._deadline_at is None:
            await self._cond.wait()
            return
        remaining = self._deadline_at - time.monotonic()
        try:
            await asyncio.wait_for(self._cond.wait(), timeout=max(remaining, 0))
        except asyncio.TimeoutError:
            pass

    def _limit_reached(self) -> Optional[EndReason]:
        if self._stop_requested:
            return EndReason.STOPPED
        if self._deadline_at is not None and time.monotonic() >= self._deadline_at:
            return EndReason.DEADLINE
        if (
            self.max_pages is not None
            and self.aggregate.visited_count >= self.max_pages
            and self.aggregate.has_pending()
        ):
            return EndReason.MAX_PAGES
        return None

    async def _launch_browser(self) -> None:
        engine = getattr(self.config, "browser", "chromium")
        try:
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, engine)
            self.browser = await launcher.launch(headless=getattr(self.config, "headless", True))
        except Exception as e:
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
            raise BrowserLaunchError(f"Could not launch {engine}: {e}") from e
        self.logger.debug("Browser launched: %s", engine)

    async def _open_sessions(self) -> None:
        options = {}
        user_agent = getattr(self.config, "user_agent", None)
        if user_agent:
            options["user_agent"] = user_agent
        count_nav = getattr(self.config, "count_navigation_as_resource", False)
        try:
            for _ in range(self.workers):
                context = await self.browser.new_context(**options)
                try:
                    page = await context.new_page()
                    correlator = EventCorrelator(self.aggregate, count_navigation_as_resource=count_nav)
                    correlator.attach(page)
                except Exception:
                    await context.close()
                    raise
                self._sessions.append((context, page, correlator))
        except Exception as e:
            raise BrowserLaunchError(f"Could not open browser session: {e}") from e

    async def _close_sessions(self) -> None:
        while self._sessions:
            context, _, correlator = self._sessions.pop()
            correlator.detach()
            try:
                await context.close()
            except Exception as e:
                self.logger.debug("Context close failed: %s", e)

    def _validate_config(self) -> None:
        if not hasattr(self.config, "start_url"):
            raise AttributeError("config missing 'start_url'")
        if getattr(self.config, "workers", 1) < 1:
            raise ValueError("workers must be >= 1")
