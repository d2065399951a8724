"""Crawler engine that fetches pages over plain HTTP and parses their HTML.

It does not run a browser: links are found in headers, tags and text only.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .crawler_options import CrawlerOptions
from .crawlqueue import VarietyQueue
from .httpclient import HttpClient, build_client
from .known_files import KnownFiles
from .navigation import HttpResponse, Request, Response
from .parser import parse_response
from .result import Result
from .utils import is_url, web_user_agent

logger = logging.getLogger(__name__)

_SWITCHING_PROTOCOLS = 101
_DEFAULT_CONCURRENCY = 64
_IDLE_WAIT = 0.01


class Engine(ABC):
    """A crawler engine."""

    @abstractmethod
    def crawl(self, root_url: str) -> None:
        """Crawl starting from a root URL."""

    @abstractmethod
    def close(self) -> None:
        """Release the resources held by the engine."""

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class _Counter:
    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def add(self, delta: int) -> None:
        with self._lock:
            self._value += delta

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    for key in [key for key in headers if key.lower() == name.lower()]:
        del headers[key]
    headers[name] = value


class Crawler(Engine):
    """Standard crawler that fetches pages with an HTTP client."""

    def __init__(self, options: CrawlerOptions) -> None:
        self.options = options
        self.headers = options.options.parse_custom_headers()
        self.known_files: KnownFiles | None = None
        self._known_files_client: HttpClient | None = None
        if options.options.known_files:
            try:
                self._known_files_client = build_client(options.options)
            except ValueError as exc:
                raise ValueError(f"could not create http client: {exc}") from exc
            self.known_files = KnownFiles(self._known_files_client, options.options.known_files)

    def close(self) -> None:
        if self._known_files_client is not None:
            self._known_files_client.close()

    def crawl(self, root_url: str) -> None:
        """Crawl a URL; raises TimeoutError when the crawl duration runs out."""
        try:
            hostname = urlsplit(root_url).hostname or ""
        except ValueError as exc:
            raise ValueError(f"could not parse root URL: {exc}") from exc

        opts = self.options.options
        deadline = time.monotonic() + opts.crawl_duration if opts.crawl_duration > 0 else None

        queue = VarietyQueue(opts.strategy)
        queue.push(Request(method="GET", url=root_url, depth=0), 0)
        callback = self._make_parse_response_callback(queue)

        if self.known_files is not None:
            try:
                self.known_files.request(root_url, callback)
            except Exception as exc:  # noqa: BLE001 - known files are best effort
                logger.warning("Could not parse known files for %s: %s", root_url, exc)

        def on_redirect(resp: HttpResponse, depth: int) -> None:
            document = BeautifulSoup(resp.body, "html.parser")
            parse_response(
                Response(
                    depth=depth + 1,
                    options=self.options,
                    root_hostname=hostname,
                    resp=resp,
                    body=resp.body,
                    document=document,
                ),
                callback,
            )

        try:
            client = build_client(opts, on_redirect)
        except ValueError as exc:
            raise ValueError(f"could not create http client: {exc}") from exc

        limit = opts.concurrency if opts.concurrency > 0 else _DEFAULT_CONCURRENCY
        slots = threading.BoundedSemaphore(limit)
        running = _Counter()
        pool = ThreadPoolExecutor(max_workers=limit)
        try:
            while True:
                if deadline is not None and time.monotonic() >= deadline:
                    raise TimeoutError("crawl duration exceeded")
                if running.value == 0 and len(queue) == 0:
                    break
                item = queue.pop()
                if not isinstance(item, Request):
                    time.sleep(_IDLE_WAIT)
                    continue
                if not is_url(item.url):
                    continue
                slots.acquire()
                running.add(1)
                pool.submit(
                    self._process, item, hostname, client, deadline, callback, running, slots
                )
        finally:
            pool.shutdown(wait=True)
            client.close()

    def _process(
        self,
        request: Request,
        hostname: str,
        client: HttpClient,
        deadline: float | None,
        callback: Callable[[Request], None],
        running: _Counter,
        slots: threading.BoundedSemaphore,
    ) -> None:
        try:
            self.options.rate_limit.take()
            if self.options.options.delay > 0:
                time.sleep(self.options.options.delay)
            if deadline is not None and time.monotonic() >= deadline:
                return
            resp = self._make_request(request, hostname, request.depth, client)
            if resp.resp is None or resp.document is None:
                return
            parse_response(resp, callback)
        except Exception as exc:  # noqa: BLE001 - one failed page must not stop the crawl
            logger.warning("Could not request seed URL: %s", exc)
        finally:
            running.add(-1)
            slots.release()

    def _make_request(
        self, request: Request, root_hostname: str, depth: int, client: HttpClient
    ) -> Response:
        response = Response(
            depth=request.depth + 1, options=self.options, root_hostname=root_hostname
        )
        headers: dict[str, str] = {}
        _set_header(headers, "User-Agent", web_user_agent())
        for name, value in (*request.headers.items(), *self.headers.items()):
            _set_header(headers, name, value)
        body = request.body if request.body and request.method != "GET" else None

        resp = client.do(request.method, request.url, headers, body, depth)
        if resp.status_code == _SWITCHING_PROTOCOLS:
            return response
        data = resp.body[: max(self.options.options.body_read_size, 0)]
        if not self.options.unique_filter.unique_content(data):
            return Response()

        resp.body = data
        self.options.output_writer.write(None, resp)
        response.body = data
        response.resp = resp
        response.document = BeautifulSoup(data, "html.parser")
        return response

    def _make_parse_response_callback(self, queue: VarietyQueue) -> Callable[[Request], None]:
        def callback(nr: Request) -> None:
            if not nr.url or not is_url(nr.url):
                return
            try:
                urlsplit(nr.url)
            except ValueError:
                return
            if not self.options.unique_filter.unique_url(nr.request_url()):
                return

            result = Result(
                timestamp=datetime.now().astimezone(),
                body=nr.body,
                url=nr.url,
                source=nr.source,
                tag=nr.tag,
                attribute=nr.attribute,
            )
            if nr.method != "GET":
                result.method = nr.method
            try:
                in_scope = self.options.scope_manager.validate(nr.url, nr.root_hostname)
            except ValueError:
                return
            opts = self.options.options
            if in_scope or opts.display_out_scope:
                self.options.output_writer.write(result, None)
            if opts.on_result is not None:
                opts.on_result(result)
            if nr.depth >= opts.max_depth or not in_scope:
                return
            queue.push(nr, nr.depth)

        return callback