"""Validation of URL paths against file extension allow and deny lists."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import unquote, urlsplit

_DEFAULT_DENYLIST = (
    ".3g2", ".3gp", ".7z", ".apk", ".arj", ".avi", ".axd", ".bmp", ".csv", ".deb", ".dll",
    ".doc", ".drv", ".eot", ".exe", ".flv", ".gif", ".gifv", ".gz", ".h264", ".ico", ".iso",
    ".jar", ".jpeg", ".jpg", ".lock", ".m4a", ".m4v", ".map", ".mkv", ".mov", ".mp3", ".mp4",
    ".mpeg", ".mpg", ".msi", ".ogg", ".ogm", ".ogv", ".otf", ".pdf", ".pkg", ".png", ".ppt",
    ".psd", ".rar", ".rm", ".rpm", ".svg", ".swf", ".sys", ".tar.gz", ".tar", ".tif", ".tiff",
    ".ttf", ".txt", ".vob", ".wav", ".webm", ".wmv", ".woff", ".woff2", ".xcf", ".xls", ".xlsx",
    ".zip",
)


def _normalize(extension: str) -> str:
    extension = extension.lower()
    return extension if extension.startswith(".") else f".{extension}"


def _extension(path: str) -> str:
    """Return the extension of the last path element, including the dot."""
    last = path.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


class Validator:
    """Decides whether a path's extension is allowed for crawling."""

    def __init__(
        self,
        extensions_match: Iterable[str] | None = None,
        extensions_filter: Iterable[str] | None = None,
    ) -> None:
        self.extensions_match = frozenset(_normalize(ext) for ext in extensions_match or ())
        self.extensions_filter = frozenset(
            _normalize(ext) for ext in (*_DEFAULT_DENYLIST, *(extensions_filter or ()))
        )

    def validate_path(self, item: str) -> bool:
        """Return True if the extension of the item is allowed."""
        try:
            path = unquote(urlsplit(item).path)
        except ValueError:
            path = item
        extension = _extension(path).lower()
        if self.extensions_match:
            return extension in self.extensions_match
        return extension not in self.extensions_filter