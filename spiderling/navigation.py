"""Crawl navigation items: requests found in pages and responses received."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin, urlsplit

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


@dataclass
class HttpRequest:
    """The HTTP request that produced a response."""

    method: str = "GET"
    url: str = ""
    host: str = ""
    proto: str = "HTTP/1.1"
    headers: dict[str, list[str]] = field(default_factory=dict)
    body: bytes | str = b""


@dataclass
class HttpResponse:
    """An HTTP response together with the request that produced it."""

    status_code: int = 0
    status: str = ""
    proto: str = "HTTP/1.1"
    headers: dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    request: HttpRequest = field(default_factory=HttpRequest)

    def header(self, name: str) -> str:
        """Return the first value of a header, matched case-insensitively, or ''."""
        wanted = name.lower()
        for key, values in self.headers.items():
            if key.lower() == wanted and values:
                return values[0]
        return ""


@dataclass
class Request:
    """A navigation request for the crawler."""

    method: str = "GET"
    url: str = ""
    body: str = ""
    depth: int = 0
    headers: dict[str, str] = field(default_factory=dict)
    tag: str = ""
    attribute: str = ""
    root_hostname: str = ""
    source: str = ""

    def request_url(self) -> str:
        """Return the key identifying this request for deduplication."""
        match self.method:
            case "GET":
                return self.url
            case "POST":
                return f"{self.url}:{self.body}"
        return ""


@dataclass
class Response:
    """A response produced by crawler navigation."""

    resp: HttpResponse | None = None
    depth: int = 0
    document: Any = None
    body: bytes = b""
    root_hostname: str = ""
    options: Any = None

    def absolute_url(self, path: str) -> str:
        """Resolve a path against the response URL.

        Returns '' when the path is a fragment, has a disallowed extension,
        or cannot be parsed.
        """
        if path.startswith("#") or not self._validate_path(path):
            return ""
        if self.resp is None:
            return ""
        if _CONTROL_CHARS.search(path) or _BAD_ESCAPE.search(path) or path.startswith(":"):
            return ""
        try:
            joined = urljoin(self.resp.request.url, path)
        except ValueError:
            return ""
        return joined.partition("#")[0]

    def _validate_path(self, path: str) -> bool:
        validator = getattr(self.options, "extensions_validator", None)
        if validator is not None:
            return validator.validate_path(path)
        return True

    def validate_scope(self, abs_url: str) -> bool:
        """Tell whether an absolute URL is in scope; raises ValueError if unparsable."""
        urlsplit(abs_url)
        manager = getattr(self.options, "scope_manager", None)
        if manager is not None:
            return manager.validate(abs_url, self.root_hostname)
        return True


def new_navigation_request(
    path: str, source: str, tag: str, attribute: str, resp: Response
) -> Request:
    """Build a GET navigation request for a path found in a response."""
    return Request(
        method="GET",
        url=resp.absolute_url(path),
        root_hostname=resp.root_hostname,
        depth=resp.depth,
        source=source,
        attribute=attribute,
        tag=tag,
    )