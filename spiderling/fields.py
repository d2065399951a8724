"""Selection of URL parts ("fields") for output and per-host storage."""

from __future__ import annotations

import re
from collections.abc import Iterable
from contextlib import suppress
from pathlib import Path
from typing import NamedTuple
from urllib.parse import parse_qsl, unquote, urlencode, urlsplit

from .publicsuffix import effective_tld_plus_one
from .result import Result

FIELD_NAMES = (
    "url",
    "path",
    "fqdn",
    "rdn",
    "rurl",
    "qurl",
    "qpath",
    "file",
    "key",
    "value",
    "kv",
    "dir",
    "udir",
)

STORE_FIELDS_DIRECTORY = "spiderling_output"


class _URLParts(NamedTuple):
    scheme: str
    hostname: str
    path: str
    query: dict[str, list[str]]
    rdn: str
    root_url: str


def _split(url: str) -> _URLParts | None:
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    host = parts.netloc.rpartition("@")[2]
    if host.startswith("["):
        hostname = host[1:].partition("]")[0]
    else:
        hostname = host.partition(":")[0]
    query: dict[str, list[str]] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        query.setdefault(key, []).append(value)
    try:
        rdn = effective_tld_plus_one(hostname)
    except ValueError:
        rdn = ""
    return _URLParts(
        scheme=parts.scheme,
        hostname=hostname,
        path=unquote(parts.path),
        query=query,
        rdn=rdn,
        root_url=f"{parts.scheme}://{host}",
    )


def _encode_query(query: dict[str, list[str]]) -> str:
    return urlencode([(key, value) for key in sorted(query) for value in query[key]])


def _file_name(path: str) -> str:
    if path in ("", "/"):
        return ""
    base = path.rstrip("/").rsplit("/", 1)[-1] or "/"
    return base if "." in base else ""


def _directory(path: str) -> str:
    if path in ("", "/") or "/" not in path[1:]:
        return ""
    return path[: path[1:].rfind("/") + 2]


def _query_parts(query: dict[str, list[str]]) -> tuple[list[str], list[str], list[str]]:
    keys = list(query)
    values = [value for items in query.values() for value in items]
    pairs = [f"{key}={value}" for key, items in query.items() for value in items]
    return keys, values, pairs


def validate_field_names(names: str) -> None:
    """Raise ValueError unless every comma separated name is a known field."""
    for part in names.split(","):
        if part not in FIELD_NAMES:
            raise ValueError(f"invalid field {part} specified: {names}")


def format_field(result: Result, fields: str) -> str:
    """Replace field names in a template with the parts of the result URL.

    Returns '' when nothing in the template was replaced.
    """
    parts = _split(result.url)
    if parts is None:
        return ""
    keys, values, pairs = _query_parts(parts.query)
    replacements = {
        "url": result.url,
        "rurl": parts.root_url,
        "rdn": parts.rdn,
        "path": parts.path,
        "fqdn": parts.hostname,
    }
    if keys:
        replacements["qurl"] = result.url
        replacements["qpath"] = f"{parts.path}?{_encode_query(parts.query)}"
    else:
        replacements["qurl"] = ""
        replacements["qpath"] = ""
    if keys or values or pairs:
        replacements["key"] = "\n".join(keys)
        replacements["kv"] = "\n".join(pairs)
        replacements["value"] = "\n".join(values)
    if parts.path not in ("", "/"):
        if file_name := _file_name(parts.path):
            replacements["file"] = file_name
        if directory := _directory(parts.path):
            replacements["udir"] = f"{parts.root_url}{directory}"
            replacements["dir"] = directory
    pattern = re.compile("|".join(re.escape(name) for name in replacements))
    replaced = pattern.sub(lambda match: replacements[match.group(0)], fields)
    return "" if replaced == fields else replaced


def _value(result: Result, parts: _URLParts, field: str) -> str:
    match field:
        case "url":
            return result.url
        case "path":
            return parts.path
        case "fqdn":
            return parts.hostname
        case "rdn":
            return parts.rdn
        case "rurl":
            return parts.root_url
        case "file":
            return _file_name(parts.path)
        case "dir":
            return _directory(parts.path)
        case "udir":
            directory = _directory(parts.path)
            return f"{parts.root_url}{directory}" if directory else ""
        case "qpath":
            return f"{parts.path}?{_encode_query(parts.query)}" if parts.query else ""
        case "qurl":
            return result.url if parts.query else ""
        case "key":
            return "\n".join(_query_parts(parts.query)[0])
        case "value":
            return "\n".join(_query_parts(parts.query)[1])
        case "kv":
            return "\n".join(_query_parts(parts.query)[2])
    return ""


def get_value_for_field(result: Result, field: str) -> str:
    """Return the value of one field for the result URL, or ''."""
    parts = _split(result.url)
    if parts is None:
        return ""
    return _value(result, parts, field)


def store_fields(
    result: Result, fields: Iterable[str], directory: str | Path = STORE_FIELDS_DIRECTORY
) -> None:
    """Append each non-empty field value to a per-host, per-field file."""
    parts = _split(result.url)
    if parts is None:
        return
    for field in fields:
        value = _value(result, parts, field)
        if not value:
            continue
        target = Path(directory) / f"{parts.scheme}_{parts.hostname}_{field}.txt"
        with suppress(OSError), target.open("a", encoding="utf-8") as handle:
            handle.write(value + "\n")