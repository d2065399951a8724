"""Crawl scope rules based on hostnames and URL regular expressions."""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Iterable
from enum import Enum
from urllib.parse import SplitResult, urlsplit

from .publicsuffix import public_suffix


class ScopeField(Enum):
    DN = "dn"
    RDN = "rdn"
    FQDN = "fqdn"


def _compile_all(patterns: Iterable[str] | None) -> list[re.Pattern[str]]:
    compiled = []
    for pattern in patterns or ():
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ValueError(f"could not compile regex {pattern}: {exc}") from exc
    return compiled


def _hostname(netloc: str) -> str:
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host[1:].partition("]")[0]
    return host.partition(":")[0]


def _is_ip(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def get_domain_rdn_and_dn(domain: str) -> tuple[str, str]:
    """Return the registered domain and its name without the public suffix.

    Raises ValueError for domains with empty labels.
    """
    if domain.startswith(".") or domain.endswith(".") or ".." in domain:
        raise ValueError(f"publicsuffix: empty label in domain {domain!r}")
    suffix = public_suffix(domain)
    if len(domain) <= len(suffix):
        return domain, ""
    index = len(domain) - len(suffix) - 1
    if domain[index] != ".":
        return domain, ""
    start = domain.rfind(".", 0, index) + 1
    return domain[start:], domain[start:index]


class ScopeManager:
    """Decides whether a URL lies within the crawl scope."""

    def __init__(
        self,
        in_scope: Iterable[str] | None = None,
        out_of_scope: Iterable[str] | None = None,
        field_scope: str = "rdn",
        no_scope: bool = False,
    ) -> None:
        try:
            self.field_scope = ScopeField(field_scope)
        except ValueError:
            raise ValueError(f"invalid dns scope field specified: {field_scope}") from None
        self.no_scope = no_scope
        self.in_scope = _compile_all(in_scope)
        self.out_of_scope = _compile_all(out_of_scope)

    def validate(self, url: str | SplitResult, root_hostname: str) -> bool:
        """Return True if the URL matches the scope rules for the root hostname."""
        if self.no_scope:
            return True
        parsed = urlsplit(url) if isinstance(url, str) else url
        text = url if isinstance(url, str) else url.geturl()
        dns_validated = self._validate_dns(_hostname(parsed.netloc), root_hostname)
        if self.in_scope or self.out_of_scope:
            return self._validate_url(text) and dns_validated
        return dns_validated

    def _validate_url(self, url: str) -> bool:
        if any(pattern.search(url) for pattern in self.out_of_scope):
            return False
        if not self.in_scope:
            return True
        return any(pattern.search(url) for pattern in self.in_scope)

    def _validate_dns(self, hostname: str, root_hostname: str) -> bool:
        if self.field_scope is ScopeField.FQDN or _is_ip(hostname):
            return hostname.casefold() == root_hostname.casefold()
        rdn, dn = get_domain_rdn_and_dn(root_hostname)
        if self.field_scope is ScopeField.DN:
            return dn in hostname
        return hostname.endswith(rdn)