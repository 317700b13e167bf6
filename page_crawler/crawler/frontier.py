# page_crawler/crawler/frontier.py
"""
Frontier queue: FIFO of URLs discovered but not yet fetched.

Shared between the event loop (dequeue) and parser threads (enqueue), so every
public method takes the internal lock. Emptiness is reported by
:meth:`Frontier.try_dequeue` itself.
"""
from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Tuple


class Frontier:
    """Thread-safe FIFO with running enqueue/dequeue totals."""

    def __init__(self) -> None:
        self._urls: Deque[str] = deque()
        self._lock = threading.Lock()
        self._total_enqueued = 0
        self._total_dequeued = 0

    def enqueue(self, url: str) -> None:
        """Append *url* to the tail."""
        with self._lock:
            self._urls.append(url)
            self._total_enqueued += 1

    def try_dequeue(self) -> Tuple[str, bool]:
        """
        Remove and return the head as ``(url, True)``.

        Returns ``("", False)`` when the frontier is empty.
        """
        with self._lock:
            if not self._urls:
                return "", False
            self._total_dequeued += 1
            return self._urls.popleft(), True

    def size(self) -> int:
        with self._lock:
            return len(self._urls)

    @property
    def total_enqueued(self) -> int:
        with self._lock:
            return self._total_enqueued

    @property
    def total_dequeued(self) -> int:
        with self._lock:
            return self._total_dequeued

    def __len__(self) -> int:
        return self.size()
