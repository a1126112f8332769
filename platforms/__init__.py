from .base import BaseScraper, BrowserSession, acquire_session, release_session
from .blinkit import BlinkitScraper, scrape_blinkit

__all__ = [
    "BaseScraper",
    "BlinkitScraper",
    "BrowserSession",
    "acquire_session",
    "release_session",
    "scrape_blinkit",
]
