from __future__ import annotations


class HarvesterError(Exception):
    """Base error for crawl, store and export operations."""

    def __init__(self, message: str, vendor: str | None = None) -> None:
        self.vendor = vendor
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.vendor:
            return f"[{self.vendor}] {message}"
        return message


class FetchError(HarvesterError):
    """A source could not be reached or returned an unusable response."""

    def __init__(
        self,
        message: str,
        vendor: str | None = None,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message, vendor)


class ParseFailure(HarvesterError):
    """A single release name or payload did not match the expected shape."""

    def __init__(self, message: str, vendor: str | None = None, *, name: str = "") -> None:
        self.name = name
        super().__init__(message, vendor)


class StoreError(HarvesterError):
    """The record store could not persist or answer a query."""


class ConfigError(HarvesterError):
    """Settings are missing or unreadable."""


__all__ = [
    "ConfigError",
    "FetchError",
    "HarvesterError",
    "ParseFailure",
    "StoreError",
]
