"""Storage of raw HTTP requests and responses on disk."""

from __future__ import annotations

import hashlib
import os
from urllib.parse import unquote, urlsplit

from .navigation import HttpResponse

INDEX_FILE = "index.txt"
DEFAULT_RESPONSE_DIR = "spiderling_responses"


def _as_bytes(data: bytes | str | None) -> bytes:
    if data is None:
        return b""
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def _header_lines(headers: dict[str, list[str]]) -> str:
    return "".join(f"{key}: {'; '.join(values)}\n" for key, values in headers.items())


def response_hash(url: str) -> str:
    """Return the SHA-1 hex digest naming the stored response of a URL."""
    return hashlib.sha1(url.encode("utf-8")).hexdigest()


def format_response(resp: HttpResponse) -> bytes:
    """Render a request and its response as a plain-text dump."""
    request = resp.request
    split = urlsplit(request.url)
    path = unquote(split.path)
    if split.fragment:
        path = f"{path}#{split.fragment}"
    chunks = [
        (
            f"{request.url}\n\n\n"
            f"{request.method} {path} {request.proto}\n"
            f"Host: {request.host}\n"
            f"{_header_lines(request.headers)}"
        ).encode("utf-8")
    ]
    request_body = _as_bytes(request.body)
    if request_body:
        chunks += [b"\n", request_body]
    chunks.append(b"\n\n")
    chunks.append(f"{resp.proto} {resp.status}\n{_header_lines(resp.headers)}\n".encode("utf-8"))
    chunks.append(_as_bytes(resp.body))
    return b"".join(chunks)


def response_host(url: str) -> str:
    """Return the host (with port) of a URL, assuming https when no scheme is given."""
    if "://" not in url:
        url = f"https://{url}"
    try:
        netloc = urlsplit(url).netloc
    except ValueError as exc:
        raise ValueError(f"could not parse url {url}") from exc
    return netloc.rpartition("@")[2]


def response_file_name(directory: str, domain: str, url: str) -> str:
    """Return the file path for a stored response, creating the host directory."""
    folder = os.path.join(directory, domain)
    os.makedirs(folder, exist_ok=True)
    return os.path.join(folder, f"{response_hash(url)}.txt")


def update_index(directory: str, resp: HttpResponse) -> None:
    """Append a line for the response to the existing index file of the directory."""
    descriptor = os.open(os.path.join(directory, INDEX_FILE), os.O_APPEND | os.O_WRONLY)
    with os.fdopen(descriptor, "a", encoding="utf-8") as index:
        url = resp.request.url
        domain = response_host(url)
        index.write(f"{response_file_name(directory, domain, url)} {url} ({resp.status})\n")