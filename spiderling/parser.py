"""Runs the response parsers that find new navigation requests in crawled responses."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from urllib.parse import urlsplit

from .navigation import Request, Response, new_navigation_request
from .tag_parsers import (
    body_a_tag_parser,
    body_applet_tag_parser,
    body_audio_tag_parser,
    body_background_tag_parser,
    body_base_href_tag_parser,
    body_blockquote_cite_tag_parser,
    body_button_formaction_tag_parser,
    body_embed_tag_parser,
    body_frame_src_tag_parser,
    body_frame_tag_parser,
    body_html_doctype_tag_parser,
    body_html_manifest_tag_parser,
    body_iframe_tag_parser,
    body_img_tag_parser,
    body_import_implementation_tag_parser,
    body_input_src_tag_parser,
    body_isindex_action_tag_parser,
    body_link_href_tag_parser,
    body_map_area_ping_tag_parser,
    body_meta_content_tag_parser,
    body_object_tag_parser,
    body_script_src_tag_parser,
    body_svg_tag_parser,
    body_table_tag_parser,
    body_video_tag_parser,
)
from .utils import (
    extract_body_endpoints,
    extract_relative_endpoints,
    parse_link_tag,
    parse_refresh_tag,
)

Callback = Callable[[Request], None]
ResponseParser = Callable[[Response, Callback], None]


class ParserType(Enum):
    """What part of a response a parser needs."""

    HEADER = 1
    BODY = 2
    CONTENT = 3


def _scrape_enabled(resp: Response) -> bool:
    options = getattr(resp.options, "options", None)
    return bool(getattr(options, "scrape_js_responses", False))


def _emit(resp: Response, callback: Callback, value: str, tag: str, attribute: str) -> None:
    callback(new_navigation_request(value, resp.resp.request.url, tag, attribute, resp))


# Header based parsers


def header_content_location_parser(resp: Response, callback: Callback) -> None:
    """Report the Content-Location header."""
    if header := resp.resp.header("Content-Location"):
        _emit(resp, callback, header, "header", "content-location")


def header_link_parser(resp: Response, callback: Callback) -> None:
    """Report the URLs of the Link header."""
    if header := resp.resp.header("Link"):
        for value in parse_link_tag(header):
            _emit(resp, callback, value, "header", "link")


def header_location_parser(resp: Response, callback: Callback) -> None:
    """Report the Location header."""
    if header := resp.resp.header("Location"):
        _emit(resp, callback, header, "header", "location")


def header_refresh_parser(resp: Response, callback: Callback) -> None:
    """Report the URL of the Refresh header."""
    header = resp.resp.header("Refresh")
    if not header:
        return
    if value := parse_refresh_tag(header):
        _emit(resp, callback, value, "header", "refresh")


# Regex based parsers


def script_content_regex_parser(resp: Response, callback: Callback) -> None:
    """Report endpoints quoted in inline scripts, when JS scraping is enabled."""
    for script in resp.document.find_all("script"):
        if not _scrape_enabled(resp):
            return
        text = script.get_text()
        if not text:
            continue
        for endpoint in extract_relative_endpoints(text):
            _emit(resp, callback, endpoint, "script", "text")


def script_js_file_regex_parser(resp: Response, callback: Callback) -> None:
    """Report endpoints quoted in JavaScript and CSS files, when JS scraping is enabled."""
    if not _scrape_enabled(resp):
        return
    content_type = resp.resp.header("Content-Type")
    path = urlsplit(resp.resp.request.url).path
    if not (path.endswith((".js", ".css")) or "/javascript" in content_type):
        return
    for endpoint in extract_relative_endpoints(resp.body.decode("utf-8", errors="replace")):
        _emit(resp, callback, endpoint, "js", "regex")


def body_scrape_endpoints_parser(resp: Response, callback: Callback) -> None:
    """Report endpoint-like strings anywhere in the body, when JS scraping is enabled."""
    if not _scrape_enabled(resp):
        return
    for endpoint in extract_body_endpoints(resp.body.decode("utf-8", errors="replace")):
        _emit(resp, callback, endpoint, "html", "regex")


_RESPONSE_PARSERS: tuple[tuple[ParserType, ResponseParser], ...] = (
    (ParserType.HEADER, header_content_location_parser),
    (ParserType.HEADER, header_link_parser),
    (ParserType.HEADER, header_location_parser),
    (ParserType.HEADER, header_refresh_parser),
    (ParserType.BODY, body_a_tag_parser),
    (ParserType.BODY, body_link_href_tag_parser),
    (ParserType.BODY, body_background_tag_parser),
    (ParserType.BODY, body_audio_tag_parser),
    (ParserType.BODY, body_applet_tag_parser),
    (ParserType.BODY, body_img_tag_parser),
    (ParserType.BODY, body_object_tag_parser),
    (ParserType.BODY, body_svg_tag_parser),
    (ParserType.BODY, body_table_tag_parser),
    (ParserType.BODY, body_video_tag_parser),
    (ParserType.BODY, body_button_formaction_tag_parser),
    (ParserType.BODY, body_blockquote_cite_tag_parser),
    (ParserType.BODY, body_frame_src_tag_parser),
    (ParserType.BODY, body_map_area_ping_tag_parser),
    (ParserType.BODY, body_base_href_tag_parser),
    (ParserType.BODY, body_import_implementation_tag_parser),
    (ParserType.BODY, body_embed_tag_parser),
    (ParserType.BODY, body_frame_tag_parser),
    (ParserType.BODY, body_iframe_tag_parser),
    (ParserType.BODY, body_input_src_tag_parser),
    (ParserType.BODY, body_isindex_action_tag_parser),
    (ParserType.BODY, body_script_src_tag_parser),
    (ParserType.BODY, body_meta_content_tag_parser),
    (ParserType.BODY, script_content_regex_parser),
    (ParserType.BODY, body_html_manifest_tag_parser),
    (ParserType.BODY, body_html_doctype_tag_parser),
    (ParserType.CONTENT, script_js_file_regex_parser),
    (ParserType.CONTENT, body_scrape_endpoints_parser),
)


def parse_response(resp: Response, callback: Callback) -> None:
    """Run every parser whose input is present in the response."""
    for parser_type, parser in _RESPONSE_PARSERS:
        if parser_type is ParserType.HEADER and resp.resp is not None:
            parser(resp, callback)
        elif parser_type is ParserType.BODY and resp.document is not None:
            parser(resp, callback)
        elif parser_type is ParserType.CONTENT and resp.body:
            parser(resp, callback)