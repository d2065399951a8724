"""A web crawling library that discovers endpoints from pages, headers, scripts and known files."""

__version__ = "0.1.0"