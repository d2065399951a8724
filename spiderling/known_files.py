"""Crawling of well-known files: robots.txt and sitemap.xml."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from xml.etree.ElementTree import ParseError

from defusedxml import ElementTree
from defusedxml.common import DefusedXmlException

from .navigation import HttpResponse, Request, Response, new_navigation_request
from .utils import web_user_agent

Callback = Callable[[Request], None]

_KNOWN_FILES_DEPTH = 2


def _fetch(client: Any, url: str) -> HttpResponse:
    return client.do(
        "GET",
        url,
        headers={"User-Agent": web_user_agent()},
        body=None,
        depth=_KNOWN_FILES_DEPTH,
    )


def _local_name(tag: Any) -> str:
    return tag.rpartition("}")[2] if isinstance(tag, str) else ""


class RobotsTxtCrawler:
    """Finds endpoints in the Allow and Disallow rules of robots.txt."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def visit(self, url: str, callback: Callback) -> None:
        resp = _fetch(self.client, f"{url.removesuffix('/')}/robots.txt")
        self.parse(resp.body.decode("utf-8", errors="replace"), resp, callback)

    def parse(self, text: str, resp: HttpResponse, callback: Callback) -> None:
        context = Response(depth=_KNOWN_FILES_DEPTH, resp=resp)
        for line in text.split("\n"):
            directive, separator, value = line.removesuffix("\r").partition(": ")
            if not separator:
                continue
            directive = directive.lower()
            if directive.startswith("allow") or directive == "disallow":
                callback(
                    new_navigation_request(
                        value.strip(" "), resp.request.url, "file", "robotstxt", context
                    )
                )


class SitemapXmlCrawler:
    """Finds endpoints in the url and sitemap locations of sitemap.xml."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def visit(self, url: str, callback: Callback) -> None:
        resp = _fetch(self.client, f"{url.removesuffix('/')}/sitemap.xml")
        try:
            self.parse(resp.body, resp, callback)
        except ValueError as exc:
            raise ValueError(f"could not parse sitemap: {exc}") from exc

    def parse(self, text: str | bytes, resp: HttpResponse, callback: Callback) -> None:
        """Report every location; raises ValueError when the XML cannot be decoded."""
        try:
            root = ElementTree.fromstring(text)
        except (ParseError, DefusedXmlException) as exc:
            raise ValueError(f"could not decode xml: {exc}") from exc
        context = Response(depth=_KNOWN_FILES_DEPTH, resp=resp)
        children = list(root)
        for kind in ("url", "sitemap"):
            for element in children:
                if _local_name(element.tag) != kind:
                    continue
                location = next(
                    (child for child in element if _local_name(child.tag) == "loc"), None
                )
                loc = "".join(location.itertext()) if location is not None else ""
                callback(
                    new_navigation_request(
                        loc.strip(" \t\n"), resp.request.url, "file", "sitemapxml", context
                    )
                )


class KnownFiles:
    """Runs the known-file crawlers selected by name ('robotstxt', 'sitemapxml' or all)."""

    def __init__(self, client: Any, files: str = "") -> None:
        self.client = client
        match files:
            case "robotstxt":
                crawlers: list[Any] = [RobotsTxtCrawler(client)]
            case "sitemapxml":
                crawlers = [SitemapXmlCrawler(client)]
            case _:
                crawlers = [RobotsTxtCrawler(client), SitemapXmlCrawler(client)]
        self._visitors = [crawler.visit for crawler in crawlers]

    def request(self, url: str, callback: Callback) -> None:
        """Visit every known file of a URL, stopping at the first failure."""
        for visit in self._visitors:
            visit(url, callback)