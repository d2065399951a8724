"""User-facing configuration of the crawler."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from .result import Result

OnResultCallback = Callable[[Result], None]


@dataclass
class Options:
    """Options that control what and how the crawler crawls."""

    urls: list[str] = field(default_factory=list)
    scope: list[str] = field(default_factory=list)
    out_of_scope: list[str] = field(default_factory=list)
    no_scope: bool = False
    display_out_scope: bool = False
    extensions_match: list[str] = field(default_factory=list)
    extension_filter: list[str] = field(default_factory=list)
    max_depth: int = 0
    body_read_size: int = 0
    timeout: int = 0
    crawl_duration: int = 0
    delay: int = 0
    rate_limit: int = 0
    retries: int = 0
    rate_limit_minute: int = 0
    concurrency: int = 0
    parallelism: int = 0
    form_config: str = ""
    proxy: str = ""
    strategy: str = ""
    field_scope: str = "rdn"
    output_file: str = ""
    known_files: str = ""
    fields: str = ""
    store_fields: str = ""
    no_colors: bool = False
    json: bool = False
    silent: bool = False
    verbose: bool = False
    version: bool = False
    scrape_js_responses: bool = False
    custom_headers: list[str] = field(default_factory=list)
    headless: bool = False
    automatic_form_fill: bool = False
    use_installed_chrome: bool = False
    show_browser: bool = False
    headless_optional_arguments: list[str] = field(default_factory=list)
    headless_no_sandbox: bool = False
    system_chrome_path: str = ""
    on_result: OnResultCallback | None = None
    store_response: bool = False
    store_response_dir: str = ""

    def parse_custom_headers(self) -> dict[str, str]:
        """Return the 'name: value' custom headers as a mapping."""
        headers = {}
        for item in self.custom_headers:
            name, separator, value = item.partition(":")
            if separator:
                headers[name.strip(" ")] = value.strip(" ")
        return headers

    def parse_headless_optional_arguments(self) -> dict[str, str]:
        """Return the 'key=value' browser arguments with both sides non-empty."""
        arguments = {}
        for item in self.headless_optional_arguments:
            key, separator, value = item.partition("=")
            key, value = key.strip(), value.strip()
            if separator and key and value:
                arguments[key] = value
        return arguments