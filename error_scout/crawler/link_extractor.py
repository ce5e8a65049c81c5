# error_scout/crawler/link_extractor.py
"""
Link extraction from a rendered document.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag


def document_base(soup: BeautifulSoup, page_url: str) -> str:
    """Return the URL relative links resolve against (``<base href>`` or the page URL)."""
    base = soup.find("base", href=True)
    if isinstance(base, Tag):
        href = base.get("href")
        if isinstance(href, str) and href.strip():
            return urljoin(page_url, href.strip())
    return page_url


def extract_links(html: str, page_url: str) -> List[str]:
    """
    Extract absolute http(s) URLs of every ``<a href>`` in *html*, in document order.

    Drops links containing ``#`` or ``javascript:``. Duplicates are kept;
    deduplication happens when links are queued.
    """
    soup = BeautifulSoup(html, "html.parser")
    base = document_base(soup, page_url)
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or "#" in raw or "javascript:" in raw:
            continue
        absolute = urljoin(base, raw)
        if urlparse(absolute).scheme in ("http", "https"):
            links.append(absolute)
    return links
