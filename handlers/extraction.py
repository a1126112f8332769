"""
Result card extraction.

All cards are read in a single ``evaluate()`` round-trip.  The browser
side only reports what it saw (``null`` for a missing sub-element); the
decision about which cards qualify is made here in Python so it can be
tested without a browser.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from playwright.async_api import Page

from config.blinkit import MAX_RESULTS_PER_TERM, SELECTORS
from models import Product

logger = logging.getLogger(__name__)

_JS_READ_CARDS = """
(sel) => {
    const cards = document.querySelectorAll(sel.card);
    return Array.from(cards, (card) => {
        const nameEl = card.querySelector(sel.name);
        const priceEl = card.querySelector(sel.price);
        return {
            name: nameEl ? nameEl.innerText : null,
            price: priceEl ? priceEl.innerText : null,
        };
    });
}
"""


def _clean(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def normalize_cards(
    cards: Iterable[dict[str, Any]],
    *,
    limit: int = MAX_RESULTS_PER_TERM,
) -> list[Product]:
    """Turn raw card dicts into at most *limit* products, in page order.

    A card qualifies only when both name and price are non-blank; other
    cards are skipped, never defaulted.
    """
    products: list[Product] = []
    skipped = 0
    for card in cards:
        name = _clean(card.get("name"))
        price = _clean(card.get("price"))
        if not name or not price:
            skipped += 1
            continue
        products.append(Product(name=name, price=price))
        if len(products) >= limit:
            break
    if skipped:
        logger.debug("Skipped %d card(s) without name or price", skipped)
    return products


async def extract_products(page: Page) -> list[Product]:
    """Read the currently rendered result grid."""
    cards = await page.evaluate(
        _JS_READ_CARDS,
        {
            "card": SELECTORS["result_card"],
            "name": SELECTORS["result_name"],
            "price": SELECTORS["result_price"],
        },
    )
    products = normalize_cards(cards or [])
    logger.info("Extracted %d product(s) from %d card(s)", len(products), len(cards or []))
    return products
