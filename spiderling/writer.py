"""Output of crawl results to the screen, an output file and on-disk stores."""

from __future__ import annotations

import os
import re
import shutil
import sys
import threading
from pathlib import Path

from .fields import STORE_FIELDS_DIRECTORY, format_field, validate_field_names
from .fields import store_fields as _store_fields
from .navigation import HttpResponse
from .responses import (
    DEFAULT_RESPONSE_DIR,
    INDEX_FILE,
    format_response,
    response_file_name,
    response_host,
    update_index,
)
from .result import Result

_DECOLORIZER = re.compile(rb"\x1b\[[0-9;]*[a-zA-Z]")
_BLUE = "\x1b[34m"
_GREEN = "\x1b[32m"
_RESET = "\x1b[0m"


class FileWriter:
    """Buffered writer that puts each record on its own line of a file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._file = open(path, "wb")

    def write(self, data: bytes | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._file.write(data + b"\n")

    def close(self) -> None:
        """Flush everything to disk and close the file."""
        if self._file.closed:
            return
        self._file.flush()
        try:
            os.fsync(self._file.fileno())
        except OSError:
            pass
        self._file.close()

    def __enter__(self) -> FileWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class StandardWriter:
    """Writes results to the screen and optionally to a file and per-host stores."""

    def __init__(
        self,
        colors: bool = False,
        json: bool = False,
        verbose: bool = False,
        store_response: bool = False,
        file: str = "",
        fields: str = "",
        store_fields: str = "",
        store_response_dir: str = "",
    ) -> None:
        self.colors = colors
        self.json = json
        self.verbose = verbose
        self.fields = fields
        self.store_fields: list[str] = []
        self.store_fields_directory = STORE_FIELDS_DIRECTORY
        self.output_file: FileWriter | None = None
        self.store_response = store_response
        self.store_response_dir = store_response_dir
        self._lock = threading.Lock()

        if fields:
            try:
                validate_field_names(fields)
            except ValueError as exc:
                raise ValueError(f"could not validate fields: {exc}") from exc
        if store_fields:
            os.makedirs(self.store_fields_directory, exist_ok=True)
            try:
                validate_field_names(store_fields)
            except ValueError as exc:
                raise ValueError(f"could not validate store fields: {exc}") from exc
            self.store_fields = store_fields.split(",")
        if file:
            self.output_file = FileWriter(file)
        if store_response:
            self.store_response_dir = store_response_dir or DEFAULT_RESPONSE_DIR
            shutil.rmtree(self.store_response_dir, ignore_errors=True)
            os.makedirs(self.store_response_dir, exist_ok=True)
            Path(self.store_response_dir, INDEX_FILE).write_bytes(b"")

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{_RESET}" if self.colors else text

    def format_json(self, result: Result) -> bytes:
        """Return the result as a JSON line."""
        return result.to_json().encode("utf-8")

    def format_screen(self, result: Result) -> bytes:
        """Return the result as shown on screen."""
        if self.fields:
            return format_field(result, self.fields).encode("utf-8")
        parts = []
        if self.verbose:
            parts.append(f"[{self._paint(result.tag, _BLUE)}] ")
        if result.method and self.verbose:
            parts.append(f"[{self._paint(result.method, _GREEN)}] ")
        parts.append(result.url)
        if result.body and self.verbose:
            parts.append(f" [{result.body}]")
        return "".join(parts).encode("utf-8")

    def write(self, event: Result | None, resp: HttpResponse | None = None) -> None:
        """Write a result to screen and file, and store the response if enabled."""
        with self._lock:
            if event is not None:
                if self.store_fields:
                    _store_fields(event, self.store_fields, self.store_fields_directory)
                data = self.format_json(event) if self.json else self.format_screen(event)
                if not data:
                    return
                sys.stdout.write(data.decode("utf-8", errors="replace") + "\n")
                sys.stdout.flush()
                if self.output_file is not None:
                    self.output_file.write(data if self.json else _DECOLORIZER.sub(b"", data))
            if self.store_response and resp is not None:
                self._store(resp)

    def _store(self, resp: HttpResponse) -> None:
        url = resp.request.url
        try:
            domain = response_host(url)
        except ValueError:
            return
        path = response_file_name(self.store_response_dir, domain, url)
        data = format_response(resp)
        update_index(self.store_response_dir, resp)
        with FileWriter(path) as stored:
            stored.write(data)

    def close(self) -> None:
        if self.output_file is not None:
            self.output_file.close()

    def __enter__(self) -> StandardWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()