"""Scrape error taxonomy."""

from __future__ import annotations


class ScrapeError(Exception):
    """A failure that ends the current scrape with up = 0."""


class TransportError(ScrapeError):
    """The request could not be sent or no response was received."""


class UpstreamError(ScrapeError):
    """The API answered, but not with usable data."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            message = f"Invalid response from API (HTTP {status_code}). Reason: {reason}"
        else:
            message = f"Invalid response from API. Reason: {reason}"
        super().__init__(message)


class NotReadyError(UpstreamError):
    """The requested filters are still warming up."""

    def __init__(self, filter_ids: list[str]) -> None:
        self.filter_ids = list(filter_ids)
        super().__init__(f"filters warming up: {', '.join(self.filter_ids)}")
