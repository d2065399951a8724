"""Endpoint extraction and small helpers for parsing HTML attribute values."""

from __future__ import annotations

import re

_PAGE_BODY_RE = re.compile(
    r"((?:(?:[.]{1,2}/[A-Za-z0-9\-_/\\?&@.?=]+)"
    r"|https?://[A-Za-z0-9_\-.]+(?:[.]{0,2})?/[A-Za-z0-9\-_/\\?&@.?=]+"
    r"|(?:/[A-Za-z0-9\-_/\\?&@.]+\.(?:aspx?|action|cfm|cgi|do|pl|css|x?html?|js(?:p|on)?|pdf|php5?|py|rss))))"
)

_RELATIVE_ENDPOINTS_RE = re.compile(
    r"""["' ]((?:(?:(?:https?://[A-Za-z0-9_\-.]+)+(?:[.]{0,2})?/[A-Za-z0-9/\-_.]+)"""
    r"""|[A-Za-z0-9\-_/]+\.(?:aspx?|js(?:on|p)?|html|php5?|html|action|do)(?:[?|#][^"|']+)?))["' ]"""
)

_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 11_1) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/87.0.4280.88 Safari/537.36"
)


def _unique_matches(pattern: re.Pattern[str], data: str) -> list[str]:
    return list(dict.fromkeys(match.group(1) for match in pattern.finditer(data)))


def extract_body_endpoints(data: str) -> list[str]:
    """Return the unique endpoints found in a page body, in order of appearance."""
    return _unique_matches(_PAGE_BODY_RE, data)


def extract_relative_endpoints(data: str) -> list[str]:
    """Return the unique quoted endpoints found in script text, in order of appearance."""
    return _unique_matches(_RELATIVE_ENDPOINTS_RE, data)


def is_url(url: str) -> bool:
    """Tell whether a string is an http or https URL."""
    return url.startswith(("http://", "https://"))


def parse_srcset_tag(value: str) -> list[str]:
    """Return the URLs of the image candidates in a srcset attribute."""
    urls: list[str] = []
    pos, length = 0, len(value)
    while True:
        while pos < length and (value[pos].isspace() or value[pos] == ","):
            pos += 1
        if pos >= length:
            break
        start = pos
        while pos < length and not value[pos].isspace():
            pos += 1
        url = value[start:pos]
        if url.endswith(","):
            url = url.rstrip(",")
            if url:
                urls.append(url)
            continue
        in_parens = False
        while pos < length:
            char = value[pos]
            pos += 1
            if char == "(":
                in_parens = True
            elif char == ")":
                in_parens = False
            elif char == "," and not in_parens:
                break
        urls.append(url)
    return urls


def parse_link_tag(value: str) -> list[str]:
    """Return the <...> URLs listed in a Link header value."""
    urls = []
    for chunk in value.split(","):
        for piece in chunk.split(";"):
            piece = piece.strip(" ")
            if piece and piece[0] == "<" and piece[-1] == ">":
                urls.append(piece.strip("<>"))
    return urls


def parse_refresh_tag(value: str) -> str:
    """Return the URL of a Refresh header value, or an empty string."""
    chunks = value.split("url=")
    if len(chunks) < 2:
        return ""
    chunk = chunks[1]
    if chunk.endswith(";"):
        chunk = chunk[:-1]
    return chunk


def web_user_agent() -> str:
    """Return the browser user agent sent with every request."""
    return _USER_AGENT