"""
Exceptions raised by the scraper.

Only fatal conditions are exceptions.  A missing optional modal or a
result card without a price is logged and skipped, never raised.
"""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for every error the scraper raises on purpose."""


class MissingParameter(ScraperError):
    """The request did not carry a pincode."""


class LaunchFailure(ScraperError):
    """The browser process could not be started."""


class NavigationTimeout(ScraperError):
    """The initial page load did not settle within its bound."""


class MandatorySelectorTimeout(ScraperError):
    """A required element never appeared.

    ``state`` is the navigation state (or search term) that could not be
    reached, for logs and debug artifact names.
    """

    def __init__(self, message: str, *, state: str | None = None) -> None:
        super().__init__(message)
        self.state = state


class ScrapeFailed(ScraperError):
    """Request-level failure wrapping whatever went wrong underneath."""

    PREFIX = "Browser automation error: "

    @classmethod
    def wrap(cls, exc: BaseException) -> "ScrapeFailed":
        return cls(f"{cls.PREFIX}{exc}")
