"""HTTP client for the crawler with retries, proxying and redirect reporting."""

from __future__ import annotations

import time
import warnings
from collections.abc import Callable, Mapping
from http.cookiejar import DefaultCookiePolicy
from urllib.parse import urljoin, urlsplit

import requests
from requests.adapters import HTTPAdapter

from .navigation import HttpRequest, HttpResponse
from .options import Options

RedirectCallback = Callable[[HttpResponse, int], None]

MAX_REQUESTS = 10
DEFAULT_DEPTH = 2

_REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
_SENSITIVE_HEADERS = frozenset({"authorization", "www-authenticate", "cookie", "cookie2"})
_PROTOCOLS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2.0"}

warnings.filterwarnings("ignore", message="Unverified HTTPS request")


def _redirect_method(status: int, method: str, body: bytes | str | None) -> tuple[str, bytes | str | None]:
    if status in (301, 302, 303):
        if (status == 303 and method not in ("GET", "HEAD")) or (
            status in (301, 302) and method == "POST"
        ):
            method = "GET"
        return method, None
    return method, body


class HttpClient:
    """Sends requests, retrying connection failures and reporting each redirect."""

    def __init__(self, options: Options, redirect_callback: RedirectCallback | None = None) -> None:
        self.proxies: dict[str, str] = {}
        if options.proxy:
            try:
                urlsplit(options.proxy)
            except ValueError as exc:
                raise ValueError(f"could not parse proxy url {options.proxy}: {exc}") from exc
            self.proxies = {"http": options.proxy, "https": options.proxy}
        self.retries = max(options.retries, 0)
        self.timeout: float | None = options.timeout if options.timeout > 0 else None
        self.redirect_callback = redirect_callback
        self.retry_wait_min = 1.0
        self.retry_wait_max = 30.0

        self._session = requests.Session()
        self._session.trust_env = False
        self._session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        adapter = HTTPAdapter(pool_connections=10, pool_maxsize=100, max_retries=0)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    def _prepare(
        self, method: str, url: str, headers: Mapping[str, str], body: bytes | str | None
    ) -> requests.PreparedRequest:
        request = requests.Request(method=method, url=url, headers=dict(headers), data=body)
        return self._session.prepare_request(request)

    def _send(self, prepared: requests.PreparedRequest) -> requests.Response:
        attempt = 0
        while True:
            try:
                return self._session.send(
                    prepared,
                    allow_redirects=False,
                    timeout=self.timeout,
                    verify=False,
                    proxies=self.proxies,
                )
            except (requests.ConnectionError, requests.Timeout):
                if attempt >= self.retries:
                    raise
                time.sleep(min(self.retry_wait_min * 2**attempt, self.retry_wait_max))
                attempt += 1

    @staticmethod
    def _convert(raw: requests.Response, prepared: requests.PreparedRequest) -> HttpResponse:
        version = getattr(raw.raw, "version", 11)
        proto = _PROTOCOLS.get(version, "HTTP/1.1")
        url = prepared.url or ""
        request = HttpRequest(
            method=prepared.method or "GET",
            url=url,
            host=urlsplit(url).netloc,
            proto=proto,
            headers={key: [value] for key, value in prepared.headers.items()},
            body=prepared.body or b"",
        )
        return HttpResponse(
            status_code=raw.status_code,
            status=f"{raw.status_code} {raw.reason or ''}".rstrip(),
            proto=proto,
            headers={key: [value] for key, value in raw.headers.items()},
            body=raw.content,
            request=request,
        )

    def do(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
        depth: int = DEFAULT_DEPTH,
    ) -> HttpResponse:
        """Send a request, following redirects, and return the final response.

        Raises requests.TooManyRedirects after ten requests in one chain and
        the requests exceptions for failures that outlast the retries.
        """
        method = method.upper()
        current_headers = dict(headers or {})
        prepared = self._prepare(method, url, current_headers, body)
        requests_made = 1
        while True:
            raw = self._send(prepared)
            try:
                location = raw.headers.get("Location", "")
                if raw.status_code not in _REDIRECT_STATUSES or not location:
                    return self._convert(raw, prepared)
                if requests_made >= MAX_REQUESTS:
                    raise requests.TooManyRedirects(
                        f"stopped after {MAX_REQUESTS} redirects", response=raw
                    )
                response = self._convert(raw, prepared)
                status = raw.status_code
            finally:
                raw.close()

            if self.redirect_callback is not None:
                self.redirect_callback(response, depth)

            previous_url = prepared.url or url
            next_url = urljoin(previous_url, location)
            method, body = _redirect_method(status, method, body)
            if urlsplit(next_url).netloc != urlsplit(previous_url).netloc:
                current_headers = {
                    key: value
                    for key, value in current_headers.items()
                    if key.lower() not in _SENSITIVE_HEADERS
                }
            prepared = self._prepare(method, next_url, current_headers, body)
            requests_made += 1

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def build_client(options: Options, redirect_callback: RedirectCallback | None = None) -> HttpClient:
    """Build the HTTP client described by the options."""
    return HttpClient(options, redirect_callback)