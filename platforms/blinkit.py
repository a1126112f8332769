"""
Scraper for Blinkit product search.

Flow:
  1. Load blinkit.com and wait for the network to go idle.
  2. Click through the "download the app" sheet if it shows up.
  3. Click "select manually" on the location prompt if it shows up.
  4. Type the pincode into the location search and pick the first match.
  5. Click the header search bar, which routes client-side to /s/.
  6. Wait for the real search input on the new view.
  7. For each fixed term: search, read the grid, clear the box.

Steps 2-3 are optional; every other step is fatal on timeout.  One page
is reused for both terms, so each term is fully extracted and the input
cleared before the next search is typed.  The next term's results are
only read once the grid's first card has changed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from playwright.async_api import Page

from config.blinkit import SEARCH_TERMS, SELECTORS, STEP_TIMEOUTS_MS
from errors import MissingParameter, NavigationTimeout, ScrapeFailed
from handlers import (
    NavState,
    NavStep,
    StepKind,
    dismiss_modal,
    drive_navigation,
    extract_products,
    reset_search,
    submit_search,
)
from models import ScrapeResult
from .base import AcquireFn, BaseScraper

logger = logging.getLogger(__name__)


class BlinkitScraper(BaseScraper):
    """Collects the first page of results for each of ``SEARCH_TERMS``."""

    name = "blinkit"

    def __init__(self, pincode: str, settings: dict[str, Any] | None = None, **kwargs: Any) -> None:
        super().__init__(settings, **kwargs)
        self.pincode = pincode

    async def scrape(self) -> ScrapeResult:
        await drive_navigation(self.page, self.navigation_steps(), label=self.name)

        results: dict[str, list] = {}
        first_card: str | None = None
        for term in SEARCH_TERMS:
            first_card = await submit_search(self.page, term, replacing=first_card)
            results[term] = await extract_products(self.page)
            await reset_search(self.page, settle_sec=self.settings["reset_settle_sec"])

        logger.info(
            "[%s] Scrape complete: %s",
            self.name,
            ", ".join(f"{term}={len(items)}" for term, items in results.items()),
        )
        return ScrapeResult(**results)

    # ------------------------------------------------------------------
    # Navigation steps
    # ------------------------------------------------------------------

    def navigation_steps(self) -> list[NavStep]:
        modal_settle = self.settings["modal_settle_sec"]

        async def close_app_modal(page: Page) -> None:
            await dismiss_modal(page, "app_continue", settle_sec=modal_settle)

        async def close_location_modal(page: Page) -> None:
            await dismiss_modal(page, "location_manual", settle_sec=modal_settle)

        return [
            NavStep(
                NavState.PAGE_LOADED, StepKind.MANDATORY, self._open_home,
                "load home page", error=NavigationTimeout,
            ),
            NavStep(
                NavState.APP_MODAL_HANDLED, StepKind.OPTIONAL, close_app_modal,
                "'continue on web' button",
            ),
            NavStep(
                NavState.LOCATION_MODAL_HANDLED, StepKind.OPTIONAL, close_location_modal,
                "'select manually' button",
            ),
            NavStep(
                NavState.LOCATION_SET, StepKind.MANDATORY, self._set_location,
                "set delivery location",
            ),
            NavStep(
                NavState.SEARCH_PAGE_OPEN, StepKind.MANDATORY, self._open_search_page,
                "open search page",
            ),
            NavStep(
                NavState.SEARCH_INPUT_READY, StepKind.MANDATORY, self._wait_for_search_input,
                "wait for search input",
            ),
        ]

    async def _open_home(self, page: Page) -> None:
        await page.goto(
            self.settings["base_url"],
            wait_until=self.settings["wait_until"],
            timeout=self.settings["goto_timeout_ms"],
        )

    async def _set_location(self, page: Page) -> None:
        location_input = SELECTORS["location_input"]
        suggestion = SELECTORS["location_suggestion"]

        await page.wait_for_selector(location_input, timeout=STEP_TIMEOUTS_MS["location_input"])
        await page.locator(location_input).press_sequentially(self.pincode)
        logger.info("[%s] Pincode %s typed, waiting for suggestions", self.name, self.pincode)
        await page.wait_for_selector(suggestion, timeout=STEP_TIMEOUTS_MS["location_suggestion"])
        # page.click picks the first match: the top suggestion.
        await page.click(suggestion)
        logger.info("[%s] Location set", self.name)
        await _settle(self.settings["location_settle_sec"])

    async def _open_search_page(self, page: Page) -> None:
        link = SELECTORS["search_link"]
        await page.wait_for_selector(link, timeout=STEP_TIMEOUTS_MS["search_link"])
        await page.click(link)
        # The /s/ transition has no event to await.  This is only a floor;
        # the next step polls for the input.
        await _settle(self.settings["search_transition_sec"])

    async def _wait_for_search_input(self, page: Page) -> None:
        await page.wait_for_selector(
            SELECTORS["search_input"], timeout=STEP_TIMEOUTS_MS["search_input"],
        )


async def _settle(seconds: float) -> None:
    if seconds > 0:
        await asyncio.sleep(seconds)


async def scrape_blinkit(
    pincode: str | None,
    *,
    settings: dict[str, Any] | None = None,
    acquire: AcquireFn | None = None,
) -> ScrapeResult:
    """Run one full scrape for *pincode* in its own browser.

    Raises ``MissingParameter`` for a blank pincode before any browser
    work.  Every other failure is re-raised once as ``ScrapeFailed``,
    after the browser has been closed.
    """
    pincode = (pincode or "").strip()
    if not pincode:
        raise MissingParameter("Pincode is required")

    logger.info("Starting scrape for pincode: %s", pincode)
    try:
        async with BlinkitScraper(pincode, settings, acquire=acquire) as scraper:
            return await scraper.scrape()
    except Exception as exc:
        logger.error("Scrape for pincode %s failed: %s", pincode, exc, exc_info=True)
        raise ScrapeFailed.wrap(exc) from exc
