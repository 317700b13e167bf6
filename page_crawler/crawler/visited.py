# page_crawler/crawler/visited.py
"""
URL membership sets keyed by a 64-bit FNV-1a fingerprint.

The same class serves two roles in a crawl:

* the *visited* set, filled by the orchestrator when a URL is dequeued;
* the *seen* set, filled by link admission when a URL is enqueued. Every
  visited URL passed through the frontier first, so seen is a superset of
  visited and :meth:`VisitedSet.add_if_absent` on it keeps duplicates out of
  the frontier.

Distinct URLs with colliding fingerprints are treated as one; pass
``exact=True`` to key by the URL string instead.
"""
from __future__ import annotations

import threading
from typing import Final, Hashable, Set

FNV64_OFFSET: Final[int] = 0xCBF29CE484222325
FNV64_PRIME: Final[int] = 0x100000001B3
_MASK64: Final[int] = 0xFFFFFFFFFFFFFFFF


def fingerprint(url: str) -> int:
    """64-bit FNV-1a hash of the UTF-8 encoded *url*."""
    h = FNV64_OFFSET
    for byte in url.encode("utf-8"):
        h ^= byte
        h = (h * FNV64_PRIME) & _MASK64
    return h


class VisitedSet:
    """Monotone, thread-safe set of URLs; members are never removed."""

    def __init__(self, *, exact: bool = False) -> None:
        self._exact = exact
        self._keys: Set[Hashable] = set()
        self._count = 0
        self._lock = threading.Lock()

    def _key(self, url: str) -> Hashable:
        return url if self._exact else fingerprint(url)

    def add(self, url: str) -> bool:
        """Record *url*; returns True if it was not a member yet."""
        key = self._key(url)
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            self._count += 1
            return True

    # Same operation, named for the reserve-before-enqueue call sites.
    add_if_absent = add

    def contains(self, url: str) -> bool:
        key = self._key(url)
        with self._lock:
            return key in self._keys

    def size(self) -> int:
        with self._lock:
            return self._count

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.contains(url)

    def __len__(self) -> int:
        return self.size()
