# error_scout/crawler/visitor.py
"""
Page visit driver: navigate, settle, extract links, classify the HTTP outcome.
"""
from __future__ import annotations

import asyncio
from typing import Any, Optional

from playwright.async_api import Error as PlaywrightError

from error_scout.crawler.events import EventCorrelator
from error_scout.crawler.link_extractor import extract_links
from error_scout.crawler.models import ERROR, PageOutcome
from error_scout.logger import get_logger

__all__ = ("PageVisitor", "classify_status")

logger = get_logger("visitor")


def classify_status(status: int) -> Optional[str]:
    """Return the broken-link message for *status*, or None if the page loaded fine."""
    if status == 404:
        return "Page not found"
    if status >= 400:
        return f"HTTP error {status}"
    return None


class PageVisitor:
    """Drives one browser page through a single visit. Never raises for per-page failures."""

    def __init__(self, nav_timeout: float = 30.0, settle_delay: float = 1.0) -> None:
        self.nav_timeout = nav_timeout
        self.settle_delay = settle_delay

    async def visit(self, page: Any, url: str, correlator: Optional[EventCorrelator] = None) -> PageOutcome:
        # must precede goto so the page's own events are attributed to url
        if correlator is not None:
            correlator.set_active_page(url)

        try:
            response = await page.goto(
                url,
                wait_until="networkidle",
                timeout=self.nav_timeout * 1000,
            )
        except PlaywrightError as exc:
            # TimeoutError included
            logger.warning("Failed to load %s: %s", url, _first_line(exc))
            return PageOutcome(status=ERROR, error=_first_line(exc))

        if response is None:
            logger.warning("Failed to load %s: no response received", url)
            return PageOutcome(status=ERROR, error="No response received")

        status = response.status
        problem = classify_status(status)
        if problem is not None:
            if status == 404:
                logger.warning("  404 Not Found: %s", url)
            else:
                logger.warning("  HTTP %s: %s", status, url)
            return PageOutcome(status=status, error=problem)

        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)

        try:
            html = await page.content()
        except PlaywrightError as exc:
            # document vanished (late redirect, crash): keep the status, skip the links
            logger.warning("Could not read rendered document of %s: %s", url, _first_line(exc))
            return PageOutcome(status=status)
        return PageOutcome(status=status, links=extract_links(html, page.url or url))


def _first_line(exc: BaseException) -> str:
    text = getattr(exc, "message", None) or str(exc)
    return text.splitlines()[0] if text else type(exc).__name__
