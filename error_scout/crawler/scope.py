# error_scout/crawler/scope.py
"""
Scope policy: which URLs belong to the crawled project.

A URL is in scope when it shares the seed's origin and, if the seed names a
project (``context:<token>``), it contains ``context:<token>`` or ``o:<token>``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Optional
from urllib.parse import urlsplit

__all__ = ("ScopePolicy", "derive_scope", "is_in_scope", "url_origin")

_PROJECT_RE = re.compile(r"context:([^/?#]+)")
_PROJECT_PREFIXES = ("context:", "o:")
_DEFAULT_PORTS = {"http": 80, "https": 443}


def url_origin(url: str) -> Optional[str]:
    """Return ``scheme://host[:port]`` for *url*, or None if it cannot be parsed."""
    try:
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not host:
        return None
    scheme = parts.scheme.lower()
    origin = f"{scheme}://{host}"
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        origin += f":{port}"
    return origin


@dataclass(frozen=True, slots=True)
class ScopePolicy:
    origin: str
    required_substrings: FrozenSet[str] = frozenset()

    @classmethod
    def derive(cls, seed_url: str) -> ScopePolicy:
        """Build the policy from the seed URL. Raises ValueError if the seed has no origin."""
        origin = url_origin(seed_url)
        if origin is None:
            raise ValueError(f"Cannot derive crawl scope from {seed_url!r}")
        match = _PROJECT_RE.search(seed_url)
        if match is None:
            return cls(origin)
        token = match.group(1)
        return cls(origin, frozenset(prefix + token for prefix in _PROJECT_PREFIXES))

    def is_in_scope(self, url: str) -> bool:
        if not isinstance(url, str) or url_origin(url) != self.origin:
            return False
        if not self.required_substrings:
            return True
        return any(s in url for s in self.required_substrings)

    def describe(self) -> str:
        if not self.required_substrings:
            return f"{self.origin} (same origin)"
        return " OR ".join(sorted(self.required_substrings))


def derive_scope(seed_url: str) -> ScopePolicy:
    return ScopePolicy.derive(seed_url)


def is_in_scope(policy: ScopePolicy, url: str) -> bool:
    return policy.is_in_scope(url)
