"""Deduplication filters for URLs and response content."""

from __future__ import annotations

import hashlib
import threading
from abc import ABC, abstractmethod


class Filter(ABC):
    """Deduplication of crawled items."""

    @abstractmethod
    def unique_url(self, url: str) -> bool:
        """Return True the first time a URL is seen."""

    @abstractmethod
    def unique_content(self, data: bytes) -> bool:
        """Return True the first time a content body is seen."""

    @abstractmethod
    def close(self) -> None:
        """Release the resources held by the filter."""

    def __enter__(self) -> Filter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SimpleFilter(Filter):
    """Exact-match filter; content is compared by its MD5 digest."""

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def _first_time(self, key: str) -> bool:
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def unique_url(self, url: str) -> bool:
        return self._first_time(url)

    def unique_content(self, data: bytes) -> bool:
        return self._first_time(hashlib.md5(data).hexdigest())

    def close(self) -> None:
        with self._lock:
            self._seen.clear()