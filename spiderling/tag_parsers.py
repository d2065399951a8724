"""Parsers that find crawlable endpoints in the tags of an HTML document."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from typing import Any

from bs4 import Doctype, NavigableString

from .navigation import Request, Response, new_navigation_request
from .utils import extract_relative_endpoints, parse_srcset_tag

Callback = Callable[[Request], None]

_DOCTYPE_ID = re.compile(r"""^\s*\S+\s+(public|system)\s*(["'])(.*?)\2""", re.IGNORECASE | re.DOTALL)


def _attr(item: Any, *names: str) -> str:
    """Return the first present attribute among names, or ''."""
    for name in names:
        value = item.get(name)
        if value is None:
            continue
        if isinstance(value, list):
            return " ".join(value)
        return str(value)
    return ""


def _emit(resp: Response, callback: Callback, value: str, tag: str, attribute: str) -> None:
    source = resp.resp.request.url if resp.resp is not None else ""
    callback(new_navigation_request(value, source, tag, attribute, resp))


def _find(resp: Response, name: str, required: str | None = None) -> Iterator[Any]:
    attrs = {required: True} if required else {}
    yield from resp.document.find_all(name, attrs=attrs)


def _single(
    resp: Response, callback: Callback, name: str, attr: str, tag: str, attribute: str
) -> None:
    for item in _find(resp, name, attr):
        if value := _attr(item, attr):
            _emit(resp, callback, value, tag, attribute)


def body_a_tag_parser(resp: Response, callback: Callback) -> None:
    """Report href and ping of anchor tags."""
    for item in _find(resp, "a"):
        if href := _attr(item, "href"):
            _emit(resp, callback, href, "a", "href")
        if ping := _attr(item, "ping"):
            _emit(resp, callback, ping, "a", "ping")


def body_link_href_tag_parser(resp: Response, callback: Callback) -> None:
    """Report href of link tags."""
    _single(resp, callback, "link", "href", "link", "href")


def body_embed_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src of embed tags."""
    _single(resp, callback, "embed", "src", "embed", "src")


def body_frame_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src of frame tags."""
    _single(resp, callback, "frame", "src", "frame", "src")


def body_iframe_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src of iframes and the endpoints quoted in their srcdoc."""
    for item in _find(resp, "iframe"):
        if src := _attr(item, "src"):
            _emit(resp, callback, src, "iframe", "src")
        if srcdoc := _attr(item, "srcdoc"):
            for endpoint in extract_relative_endpoints(srcdoc):
                _emit(resp, callback, endpoint, "iframe", "srcdoc")


def body_input_src_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src of image inputs."""
    for item in _find(resp, "input", "type"):
        if _attr(item, "type").lower() != "image":
            continue
        if src := _attr(item, "src"):
            _emit(resp, callback, src, "input-image", "src")


def body_isindex_action_tag_parser(resp: Response, callback: Callback) -> None:
    """Report action of isindex tags."""
    _single(resp, callback, "isindex", "action", "isindex", "action")


def body_script_src_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src of script tags."""
    _single(resp, callback, "script", "src", "script", "src")


def body_background_tag_parser(resp: Response, callback: Callback) -> None:
    """Report background of body tags."""
    _single(resp, callback, "body", "background", "body", "background")


def body_audio_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src of audio tags and src and srcset of their sources."""
    for item in _find(resp, "audio"):
        if src := _attr(item, "src"):
            _emit(resp, callback, src, "audio", "src")
        for source in item.find_all("source"):
            if src := _attr(source, "src"):
                _emit(resp, callback, src, "audio", "source")
            if srcset := _attr(source, "srcset"):
                for value in parse_srcset_tag(srcset):
                    _emit(resp, callback, value, "audio", "sourcesrcset")


def body_applet_tag_parser(resp: Response, callback: Callback) -> None:
    """Report archive and codebase of applet tags."""
    for item in _find(resp, "applet"):
        if archive := _attr(item, "archive"):
            _emit(resp, callback, archive, "applet", "archive")
        if codebase := _attr(item, "codebase"):
            _emit(resp, callback, codebase, "applet", "codebase")


def body_img_tag_parser(resp: Response, callback: Callback) -> None:
    """Report the source attributes of img tags; data: sources end the tag."""
    for item in _find(resp, "img"):
        for attribute in ("dynsrc", "longdesc", "lowsrc"):
            if value := _attr(item, attribute):
                _emit(resp, callback, value, "img", attribute)
        src = _attr(item, "src")
        if src and src != "#":
            if src.startswith("data:"):
                continue
            _emit(resp, callback, src, "img", "src")
        if srcset := _attr(item, "srcset"):
            for value in parse_srcset_tag(srcset):
                _emit(resp, callback, value, "img", "srcset")


def body_object_tag_parser(resp: Response, callback: Callback) -> None:
    """Report data and codebase of object tags and values of their params."""
    for item in _find(resp, "object"):
        if data := _attr(item, "data"):
            _emit(resp, callback, data, "src", "data")
        if codebase := _attr(item, "codebase"):
            _emit(resp, callback, codebase, "src", "codebase")
        for param in item.find_all("param"):
            if value := _attr(param, "value"):
                _emit(resp, callback, value, "src", "value")


def body_svg_tag_parser(resp: Response, callback: Callback) -> None:
    """Report href of images and scripts inside svg tags."""
    for item in _find(resp, "svg"):
        for image in item.find_all("image"):
            if href := _attr(image, "href", "xlink:href"):
                _emit(resp, callback, href, "svg", "image-href")
        for script in item.find_all("script"):
            if href := _attr(script, "href", "xlink:href"):
                _emit(resp, callback, href, "svg", "script-href")


def body_table_tag_parser(resp: Response, callback: Callback) -> None:
    """Report background of table tags and of their cells."""
    for item in _find(resp, "table"):
        if background := _attr(item, "background"):
            _emit(resp, callback, background, "table", "background")
        for cell in item.find_all("td"):
            if background := _attr(cell, "background"):
                _emit(resp, callback, background, "table", "td-background")


def body_video_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src and poster of video tags and src of their tracks."""
    for item in _find(resp, "video"):
        if src := _attr(item, "src"):
            _emit(resp, callback, src, "video", "src")
        if poster := _attr(item, "poster"):
            _emit(resp, callback, poster, "video", "poster")
        for track in item.find_all("track"):
            if src := _attr(track, "src"):
                _emit(resp, callback, src, "video", "track-src")


def body_blockquote_cite_tag_parser(resp: Response, callback: Callback) -> None:
    """Report cite of blockquote tags."""
    _single(resp, callback, "blockquote", "cite", "blockquote", "cite")


def body_frame_src_tag_parser(resp: Response, callback: Callback) -> None:
    """Report src of frame tags."""
    _single(resp, callback, "frame", "src", "frame", "src")


def body_map_area_ping_tag_parser(resp: Response, callback: Callback) -> None:
    """Report ping of area tags."""
    _single(resp, callback, "area", "ping", "area", "ping")


def body_base_href_tag_parser(resp: Response, callback: Callback) -> None:
    """Report href of base tags."""
    _single(resp, callback, "base", "href", "base", "href")


def body_import_implementation_tag_parser(resp: Response, callback: Callback) -> None:
    """Report implementation of import tags."""
    _single(resp, callback, "import", "implementation", "import", "implementation")


def body_button_formaction_tag_parser(resp: Response, callback: Callback) -> None:
    """Report formaction of button tags."""
    _single(resp, callback, "button", "formaction", "button", "formaction")


def body_html_manifest_tag_parser(resp: Response, callback: Callback) -> None:
    """Report manifest of html tags."""
    _single(resp, callback, "html", "manifest", "html", "manifest")


def body_html_doctype_tag_parser(resp: Response, callback: Callback) -> None:
    """Report the system identifier of a leading doctype declaration."""
    first = next(
        (
            node
            for node in getattr(resp.document, "contents", ())
            if not (type(node) is NavigableString and not node.strip())
        ),
        None,
    )
    if not isinstance(first, Doctype):
        return
    match = _DOCTYPE_ID.match(str(first))
    if match is None or match.group(1).lower() != "system":
        return
    _emit(resp, callback, match.group(3), "html", "doctype")


def body_meta_content_tag_parser(resp: Response, callback: Callback) -> None:
    """Report the endpoints quoted in the content of meta tags."""
    for item in _find(resp, "meta", "content"):
        for endpoint in extract_relative_endpoints(_attr(item, "content")):
            _emit(resp, callback, endpoint, "meta", "refresh")