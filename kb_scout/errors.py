"""Exception hierarchy shared by the crawler, the engine and the outer surfaces."""
from __future__ import annotations

__all__ = ("KBScoutError", "FetchError", "ExtractError", "PassFailure", "CompletionError")


class KBScoutError(Exception):
    """Base class for all KBScout errors."""


class FetchError(KBScoutError):
    """A URL could not be retrieved: timeout, network error or non-success status."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ExtractError(KBScoutError):
    """Fetched content could not be parsed as markup at all."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class PassFailure(KBScoutError):
    """An unexpected error escaped a full crawl pass."""


class CompletionError(KBScoutError):
    """The completion service failed to produce a response."""
