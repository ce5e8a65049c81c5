# error_scout/crawler/models.py
"""
Data models for the ErrorScout crawl engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

#: provenance of the seed URL
START = "START"
#: status of a navigation that failed before any HTTP response arrived
ERROR = "ERROR"

Status = Union[int, str]


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    """A URL waiting to be visited and the page it was discovered on."""

    url: str
    found_on: str = START


@dataclass(slots=True)
class PageOutcome:
    """Result of visiting one URL: HTTP status (or ERROR), outbound links, error message."""

    status: Status
    links: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_broken(self) -> bool:
        return self.status == ERROR or (isinstance(self.status, int) and self.status >= 400)


@dataclass(frozen=True, slots=True)
class ConsoleErrorRecord:
    url: str
    error: str
    timestamp: str


@dataclass(frozen=True, slots=True)
class ResourceErrorRecord:
    resource_url: str
    page_url: str
    status: int
    timestamp: str


@dataclass(frozen=True, slots=True)
class BrokenLinkRecord:
    url: str
    found_on: str
    status: Status
    error: str
