from __future__ import annotations


class ScrapeError(Exception):
    pass


class FetchError(ScrapeError):
    """Non-success status, network failure, timeout or empty body."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class MissingFileError(ScrapeError, FileNotFoundError):
    pass


class MalformedDateError(ScrapeError, ValueError):
    pass
