"""Shared helpers built from the user options for a crawl."""

from __future__ import annotations

import threading
import time

from .extensions import Validator
from .filters import Filter, SimpleFilter
from .options import Options
from .scope import ScopeManager
from .writer import StandardWriter


class RateLimiter:
    """Allows at most max_count takes per period; max_count <= 0 means no limit."""

    def __init__(self, max_count: int = 0, period: float = 1.0) -> None:
        self.max_count = max_count
        self.period = period
        self._tokens = 0
        self._window_end = 0.0
        self._lock = threading.Lock()

    def take(self) -> None:
        """Block until a request may be sent."""
        if self.max_count <= 0:
            return
        with self._lock:
            now = time.monotonic()
            if now >= self._window_end:
                self._window_end = now + self.period
                self._tokens = self.max_count
            if self._tokens <= 0:
                time.sleep(max(0.0, self._window_end - now))
                self._window_end += self.period
                self._tokens = self.max_count
            self._tokens -= 1


class CrawlerOptions:
    """Validators, filters, scope rules, output and rate limiting for a crawl."""

    def __init__(self, options: Options) -> None:
        self.options = options
        self.extensions_validator = Validator(options.extensions_match, options.extension_filter)
        try:
            self.scope_manager = ScopeManager(
                options.scope, options.out_of_scope, options.field_scope, options.no_scope
            )
        except ValueError as exc:
            raise ValueError(f"could not create scope manager: {exc}") from exc
        self.unique_filter: Filter = SimpleFilter()
        try:
            self.output_writer = StandardWriter(
                not options.no_colors,
                options.json,
                options.verbose,
                options.store_response,
                options.output_file,
                options.fields,
                options.store_fields,
                options.store_response_dir,
            )
        except ValueError as exc:
            raise ValueError(f"could not create output writer: {exc}") from exc
        if options.rate_limit > 0:
            self.rate_limit = RateLimiter(options.rate_limit, 1.0)
        elif options.rate_limit_minute > 0:
            self.rate_limit = RateLimiter(options.rate_limit_minute, 60.0)
        else:
            self.rate_limit = RateLimiter(0)

    def close(self) -> None:
        self.unique_filter.close()
        self.output_writer.close()

    def __enter__(self) -> CrawlerOptions:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()