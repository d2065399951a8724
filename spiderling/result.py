"""Crawl results and their JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime

_ZERO_TIMESTAMP = "0001-01-01T00:00:00Z"

_HTML_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


def _format_timestamp(timestamp: datetime | None) -> str:
    if timestamp is None:
        return _ZERO_TIMESTAMP
    if timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()
    text = (
        f"{timestamp.year:04d}-{timestamp.month:02d}-{timestamp.day:02d}"
        f"T{timestamp.hour:02d}:{timestamp.minute:02d}:{timestamp.second:02d}"
    )
    if timestamp.microsecond:
        text += "." + f"{timestamp.microsecond:06d}".rstrip("0")
    offset = timestamp.utcoffset()
    if not offset:
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    total = abs(total)
    return f"{text}{sign}{total // 3600:02d}:{total % 3600 // 60:02d}"


@dataclass
class Result:
    """An endpoint found by the crawler."""

    timestamp: datetime | None = None
    method: str = ""
    body: str = ""
    url: str = ""
    source: str = ""
    tag: str = ""
    attribute: str = ""

    def to_json(self) -> str:
        """Return the result as one compact JSON object; empty fields are left out."""
        payload = {"timestamp": _format_timestamp(self.timestamp)}
        for key, value in (
            ("method", self.method),
            ("body", self.body),
            ("endpoint", self.url),
            ("source", self.source),
            ("tag", self.tag),
            ("attribute", self.attribute),
        ):
            if value:
                payload[key] = value
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        return text.translate(_HTML_ESCAPES)