# error_scout/crawler/events.py
"""
Attribution of asynchronous browser events to the page being visited.

One :class:`EventCorrelator` is bound to one browser page. Events are tagged
with whichever URL that page was last told to visit; an event that fires
after the page has already moved on (a slow sub-resource, a late timer) is
attributed to the next URL. Pages of other workers never leak in, because
each worker has its own page and correlator.
"""
from __future__ import annotations

from typing import Any, Optional

from playwright.async_api import Error as PlaywrightError

from error_scout.aggregator import CrawlAggregate
from error_scout.crawler.models import ConsoleErrorRecord, ResourceErrorRecord
from error_scout.crawler.scope import url_origin
from error_scout.logger import get_logger
from error_scout.utils import utc_now_iso

__all__ = ("EventCorrelator", "PAGE_ERROR_PREFIX")

PAGE_ERROR_PREFIX = "PAGE ERROR: "

logger = get_logger("events")


def _is_main_document(response: Any) -> bool:
    """True if *response* answers the top-level navigation of its page."""
    request = response.request
    if not request.is_navigation_request():
        return False
    try:
        frame = request.frame
    except PlaywrightError:
        # service worker requests have no frame
        return False
    return frame.parent_frame is None


class EventCorrelator:
    """Listens to console, pageerror and response events of one page."""

    def __init__(self, aggregate: CrawlAggregate, *, count_navigation_as_resource: bool = False) -> None:
        self.aggregate = aggregate
        self.count_navigation_as_resource = count_navigation_as_resource
        self.active_page: str = ""
        self._origin = aggregate.policy.origin
        self._page: Optional[Any] = None

    def set_active_page(self, url: str) -> None:
        self.active_page = url

    def attach(self, page: Any) -> None:
        """Subscribe to *page* events for the rest of the crawl."""
        page.on("console", self.on_console_message)
        page.on("pageerror", self.on_page_error)
        page.on("response", self.on_response)
        self._page = page

    def detach(self) -> None:
        if self._page is None:
            return
        self._page.remove_listener("console", self.on_console_message)
        self._page.remove_listener("pageerror", self.on_page_error)
        self._page.remove_listener("response", self.on_response)
        self._page = None

    def _current_url(self) -> str:
        if self.active_page:
            return self.active_page
        return getattr(self._page, "url", "") or ""

    def on_console_message(self, msg: Any) -> None:
        if msg.type != "error":
            return
        self.aggregate.add_console_error(
            ConsoleErrorRecord(url=self._current_url(), error=msg.text, timestamp=utc_now_iso())
        )

    def on_page_error(self, error: Any) -> None:
        message = getattr(error, "message", None) or str(error)
        self.aggregate.add_console_error(
            ConsoleErrorRecord(
                url=self._current_url(),
                error=f"{PAGE_ERROR_PREFIX}{message}",
                timestamp=utc_now_iso(),
            )
        )

    def on_response(self, response: Any) -> None:
        if response.status != 404:
            return
        resource_url = response.url
        if url_origin(resource_url) != self._origin:
            return
        if not self.aggregate.policy.is_in_scope(resource_url):
            return
        if not self.count_navigation_as_resource and _is_main_document(response):
            return
        logger.warning("  404 Resource: %s", resource_url)
        self.aggregate.add_resource_error(
            ResourceErrorRecord(
                resource_url=resource_url,
                page_url=self._current_url(),
                status=404,
                timestamp=utc_now_iso(),
            )
        )
