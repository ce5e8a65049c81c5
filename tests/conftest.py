# File: tests/conftest.py
"""
Shared fixtures: a scripted stand-in for the Playwright browser so the crawl
engine can be exercised without launching Chromium.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from error_scout.config import CrawlerConfig
from error_scout.crawler.crawler import BrowserCrawler
from error_scout.logger import configure

BASE = "https://x.test"
SEED = f"{BASE}/context:proj"


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line("markers", "browser: needs a real Playwright browser (skipped if unavailable)")


# --------------------------------------------------------------------------- #
#                          Fake Playwright objects                             #
# --------------------------------------------------------------------------- #


@dataclass
class FakeDoc:
    """What the fake browser 'renders' for one URL."""

    status: int = 200
    html: str = ""
    console: List[Tuple[str, str]] = field(default_factory=list)
    page_errors: List[str] = field(default_factory=list)
    resources: List[Tuple[str, int]] = field(default_factory=list)
    # console errors that only fire once the next navigation has started
    late_console: List[str] = field(default_factory=list)
    timeout: bool = False
    no_response: bool = False
    delay: float = 0.0


def links_html(*hrefs: str) -> str:
    return "<html><body>" + "".join(f'<a href="{h}">link</a>' for h in hrefs) + "</body></html>"


class FakeFrame:
    parent_frame = None


class FakeRequest:
    def __init__(self, navigation: bool) -> None:
        self._navigation = navigation
        self.frame = FakeFrame()

    def is_navigation_request(self) -> bool:
        return self._navigation


class FakeResponse:
    def __init__(self, url: str, status: int, navigation: bool = False) -> None:
        self.url = url
        self.status = status
        self.request = FakeRequest(navigation)


@dataclass
class FakeConsoleMessage:
    type: str
    text: str


class FakePageError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FakePage:
    def __init__(self, site: Dict[str, FakeDoc], browser: Optional[FakeBrowser] = None) -> None:
        self.site = site
        self.browser = browser
        self.url = "about:blank"
        self.visits: List[str] = []
        self.goto_kwargs: List[dict] = []
        self._handlers: Dict[str, List[Callable]] = {}
        self._pending: List[Tuple[str, object]] = []

    def on(self, event: str, handler: Callable) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable) -> None:
        self._handlers.get(event, []).remove(handler)

    def listener_count(self) -> int:
        return sum(len(h) for h in self._handlers.values())

    def emit(self, event: str, payload: object) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler(payload)

    async def goto(self, url: str, wait_until: str = "load", timeout: float = 30000):
        if self.browser is None:
            return await self._navigate(url, wait_until, timeout)
        self.browser.navigating += 1
        self.browser.peak_navigating = max(self.browser.peak_navigating, self.browser.navigating)
        try:
            return await self._navigate(url, wait_until, timeout)
        finally:
            self.browser.navigating -= 1

    async def _navigate(self, url: str, wait_until: str, timeout: float):
        self.visits.append(url)
        self.goto_kwargs.append({"wait_until": wait_until, "timeout": timeout})
        for event, payload in self._pending:
            self.emit(event, payload)
        self._pending = []

        doc = self.site.get(url, FakeDoc(status=404, html="<h1>Not Found</h1>"))
        if doc.delay:
            await asyncio.sleep(doc.delay)
        if doc.timeout:
            raise PlaywrightTimeoutError(f"Timeout {int(timeout)}ms exceeded.\n=== logs ===")
        self.url = url
        self.emit("response", FakeResponse(url, doc.status, navigation=True))
        for resource_url, status in doc.resources:
            self.emit("response", FakeResponse(resource_url, status))
        for kind, text in doc.console:
            self.emit("console", FakeConsoleMessage(kind, text))
        for message in doc.page_errors:
            self.emit("pageerror", FakePageError(message))
        self._pending = [("console", FakeConsoleMessage("error", t)) for t in doc.late_console]
        if doc.no_response:
            return None
        return FakeResponse(url, doc.status, navigation=True)

    async def content(self) -> str:
        return self.site.get(self.url, FakeDoc()).html


class FakeContext:
    def __init__(self, site: Dict[str, FakeDoc], options: dict, browser: Optional[FakeBrowser] = None) -> None:
        self.site = site
        self.options = options
        self.browser = browser
        self.pages: List[FakePage] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage(self.site, self.browser)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, site: Dict[str, FakeDoc]) -> None:
        self.site = site
        self.contexts: List[FakeContext] = []
        self.closed = False
        # navigations in progress across all tabs
        self.navigating = 0
        self.peak_navigating = 0

    async def new_context(self, **options) -> FakeContext:
        context = FakeContext(self.site, options, self)
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        self.closed = True

    @property
    def all_visits(self) -> List[str]:
        return [url for ctx in self.contexts for page in ctx.pages for url in page.visits]


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest.fixture(autouse=True)
def reset_logging():
    """CliRunner swaps sys.stdout; rebuild handlers on the real stream afterwards."""
    yield
    configure(level="INFO")


@pytest.fixture()
def make_config() -> Callable[..., CrawlerConfig]:
    def _make(start_url: str = SEED, **overrides) -> CrawlerConfig:
        overrides.setdefault("settle_delay", 0.0)
        overrides.setdefault("nav_timeout", 5.0)
        return CrawlerConfig(start_url=start_url, **overrides)

    return _make


async def run_fake_crawl(config: CrawlerConfig, site: Dict[str, FakeDoc], browser: Optional[FakeBrowser] = None):
    """Crawl *site* through a FakeBrowser; returns (snapshot, browser)."""
    browser = browser or FakeBrowser(site)
    async with BrowserCrawler(config, browser=browser) as crawler:
        snapshot = await asyncio.wait_for(crawler.crawl(), timeout=15)
    return snapshot, browser
