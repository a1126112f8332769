"""
Search box driving.

The search page is a single-page view: submitting a new term replaces the
result grid in place, so the same input is reused for every term.  The
caller must run ``reset_search`` after extracting one term and before
submitting the next.

Because the grid is replaced in place, the previous term's cards stay in
the DOM until the new ones arrive.  A plain "is there a card" wait would
pass immediately on them, so later searches pass the first card id seen
for the previous term and wait until the grid's first card differs.
"""

import asyncio
import logging

from playwright.async_api import Page, TimeoutError as PlaywrightTimeout

from config.blinkit import SELECTORS, STEP_TIMEOUTS_MS
from errors import MandatorySelectorTimeout

logger = logging.getLogger(__name__)

_JS_GRID_REPLACED = """
([selector, staleId]) => {
    const card = document.querySelector(selector);
    return card !== null && card.id !== staleId;
}
"""


async def submit_search(page: Page, term: str, *, replacing: str | None = None) -> str | None:
    """Type *term* into the search input, submit, wait for result cards.

    When *replacing* is the first card id of the grid already on screen,
    the wait only ends once a different first card has rendered.

    Returns the first card id of the new grid.  Raises
    ``MandatorySelectorTimeout`` when no (new) card renders in time.
    """
    selector = SELECTORS["search_input"]
    card = SELECTORS["result_card"]
    logger.info("Searching for %r", term)
    await page.wait_for_selector(selector, timeout=STEP_TIMEOUTS_MS["search_input"])
    # Triple click selects whatever is left in the box.
    await page.click(selector, click_count=3)
    await page.locator(selector).press_sequentially(term)
    await page.keyboard.press("Enter")

    card_timeout = STEP_TIMEOUTS_MS["result_card"]
    try:
        if replacing is None:
            await page.wait_for_selector(card, timeout=card_timeout)
        else:
            await page.wait_for_function(
                _JS_GRID_REPLACED, arg=[card, replacing], timeout=card_timeout,
            )
    except PlaywrightTimeout as exc:
        raise MandatorySelectorTimeout(
            f"No results rendered for {term!r} within {card_timeout}ms",
            state=term,
        ) from exc

    first_id = await page.locator(card).first.get_attribute("id")
    logger.info("Results for %r rendered (first card %s)", term, first_id)
    return first_id


async def reset_search(page: Page, *, settle_sec: float = 0) -> None:
    """Clear the search input so the next term starts from an empty box."""
    selector = SELECTORS["search_input"]
    await page.click(selector, click_count=3)
    await page.keyboard.press("Backspace")
    if settle_sec > 0:
        await asyncio.sleep(settle_sec)
    logger.debug("Search input cleared")
