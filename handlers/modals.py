"""
Interstitial dismissal.

Blinkit shows up to two dialogs before the location picker: a "download
the app" sheet and a "detect my location" prompt.  Either may be absent
depending on cookies, geography and A/B bucket.  ``dismiss_modal`` raises
Playwright's ``TimeoutError`` when the dialog never shows up; the
navigation driver decides whether that matters.
"""

import asyncio
import logging

from playwright.async_api import Page

from config.blinkit import SELECTORS, STEP_TIMEOUTS_MS

logger = logging.getLogger(__name__)


async def dismiss_modal(
    page: Page,
    role: str,
    *,
    settle_sec: float = 0,
) -> None:
    """Wait for the ``SELECTORS[role]`` button, click it, let the dialog close."""
    selector = SELECTORS[role]
    timeout = STEP_TIMEOUTS_MS[role]
    logger.debug("Waiting up to %dms for %s (%s)", timeout, role, selector)
    await page.wait_for_selector(selector, timeout=timeout)
    await page.click(selector)
    logger.info("Modal button %s clicked", role)
    if settle_sec > 0:
        await asyncio.sleep(settle_sec)
