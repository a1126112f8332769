"""
Browser session lifecycle shared by every site scraper.

One scrape request owns exactly one ``BrowserSession``: a Playwright
driver, one Chromium process, one context and one page.  Nothing is pooled
or shared between requests.  ``BaseScraper`` is an async context manager
whose ``__aexit__`` releases the session on every exit path, so a failure
at any step still tears the browser down.

Stealth stack applied to every session:
  1. Realistic desktop User-Agent and viewport on the context.
  2. playwright-stealth 2.0 evasions (webdriver flag, plugins, languages,
     chrome.runtime, permissions, WebGL, ...) when ``settings["stealth"]``.
  3. ``--disable-blink-features=AutomationControlled`` launch flag.
"""

from __future__ import annotations

import abc
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)
from playwright_stealth import Stealth

from config.blinkit import BROWSER_ARGS, LOCALE, NAVIGATOR_LANGUAGES, VIEWPORT, get_settings
from errors import LaunchFailure

logger = logging.getLogger(__name__)


async def _close_quietly(closables, pw: Playwright) -> None:
    """Close each of *closables* in order, then stop *pw*.  Never raises."""
    for obj in closables:
        try:
            await obj.close()
        except Exception as exc:
            logger.debug("Ignoring close error on %s: %s", type(obj).__name__, exc)
    try:
        await pw.stop()
    except Exception as exc:
        logger.debug("Ignoring Playwright stop error: %s", exc)


class BrowserSession:
    """One browser process plus the single page a scrape works on."""

    def __init__(
        self,
        pw: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ) -> None:
        self._pw = pw
        self._browser = browser
        self._context = context
        self.page = page

    async def close(self) -> None:
        """Close page, context, browser and driver.  Never raises."""
        await _close_quietly((self.page, self._context, self._browser), self._pw)


AcquireFn = Callable[[dict[str, Any]], Awaitable[BrowserSession]]


async def acquire_session(settings: dict[str, Any]) -> BrowserSession:
    """Launch a fresh headless browser and open one page.

    Raises ``LaunchFailure`` if Playwright or Chromium cannot start.
    """
    try:
        pw = await async_playwright().start()
    except Exception as exc:
        raise LaunchFailure(f"Could not start Playwright: {exc}") from exc

    try:
        browser = await pw.chromium.launch(
            headless=settings["headless"],
            args=BROWSER_ARGS,
        )
    except Exception as exc:
        await _close_quietly((), pw)
        raise LaunchFailure(f"Could not launch Chromium: {exc}") from exc

    try:
        context = await browser.new_context(
            viewport=VIEWPORT,
            user_agent=settings["user_agent"],
            locale=LOCALE,
            timezone_id="Asia/Kolkata",
        )
        if settings.get("stealth"):
            await Stealth(
                navigator_user_agent_override=settings["user_agent"],
                navigator_languages_override=NAVIGATOR_LANGUAGES,
            ).apply_stealth_async(context)
        page = await context.new_page()
    except Exception:
        # The browser is already running; do not leak it.
        await _close_quietly((browser,), pw)
        raise

    logger.info(
        "Browser ready (headless=%s, stealth=%s)",
        settings["headless"], bool(settings.get("stealth")),
    )
    return BrowserSession(pw, browser, context, page)


async def release_session(session: BrowserSession) -> None:
    await session.close()
    logger.info("Browser closed")


class BaseScraper(abc.ABC):
    """Skeleton shared by site scrapers.

    Usage::

        async with BlinkitScraper("400001") as scraper:
            result = await scraper.scrape()

    *acquire* defaults to ``acquire_session``; tests pass a factory that
    returns a scripted fake session instead of launching Chromium.
    """

    name = "base"

    def __init__(
        self,
        settings: dict[str, Any] | None = None,
        *,
        acquire: AcquireFn | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self._acquire = acquire or acquire_session
        self._session: BrowserSession | None = None

    # ------------------------------------------------------------------
    # Async context manager: browser lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "BaseScraper":
        self._session = await self._acquire(self.settings)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        try:
            if exc_val is not None and self.settings.get("debug_artifacts"):
                await self.save_debug_info(session.page, f"failed_{exc_type.__name__}")
        finally:
            await release_session(session)

    @property
    def page(self) -> Page:
        assert self._session is not None, "BaseScraper must be used as an async context manager"
        return self._session.page

    # ------------------------------------------------------------------
    # Debug helpers
    # ------------------------------------------------------------------

    async def save_debug_info(self, page: Page, label: str) -> None:
        """Save a screenshot and the first 50 KB of HTML for *label*.

        Errors are logged and swallowed so this never masks the failure
        that triggered it.
        """
        debug_dir = Path(self.settings["debug_dir"])
        prefix = f"{self.name}_{label}"
        try:
            debug_dir.mkdir(parents=True, exist_ok=True)
            logger.info("[%s] DEBUG url=%s", self.name, page.url)
            await page.screenshot(path=str(debug_dir / f"{prefix}.png"), full_page=True)
            html = await page.content()
            (debug_dir / f"{prefix}.html").write_text(html[:50_000], encoding="utf-8")
            logger.info("[%s] Debug artifacts saved: %s", self.name, debug_dir / prefix)
        except Exception as exc:
            logger.warning("[%s] Failed to save debug info: %s", self.name, exc)

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def scrape(self) -> Any:
        ...
