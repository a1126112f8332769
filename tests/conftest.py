"""Shared fixtures for the Blinkit scraper test suite.

``FakePage`` is a small scripted stand-in for a Playwright ``Page``: a
selector "exists" when it is in ``page.present``; anything else times out
immediately with Playwright's own ``TimeoutError``.  Typing into the
search input and pressing Enter switches the result grid to whatever
``results`` holds for the typed term.  With ``grid_lag`` set, the old
grid stays rendered after Enter until something polls for the new one.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure the scraper package is importable from tests/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from playwright.async_api import TimeoutError as PlaywrightTimeout

from config.blinkit import SELECTORS, get_settings

RESULT_CARD = SELECTORS["result_card"]

ALL_SELECTORS = frozenset(
    SELECTORS[role]
    for role in (
        "app_continue",
        "location_manual",
        "location_input",
        "location_suggestion",
        "search_link",
        "search_input",
    )
)


class FakeKeyboard:
    def __init__(self, page: "FakePage") -> None:
        self._page = page

    async def press(self, key: str) -> None:
        self._page.calls.append(("press", key))
        self._page._on_key(key)


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self._page = page
        self._selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def press_sequentially(self, text: str) -> None:
        self._page._type(self._selector, text)

    async def get_attribute(self, name: str) -> str | None:
        if self._selector == RESULT_CARD and name == "id":
            return self._page.first_card_id()
        return None


class FakePage:
    def __init__(
        self,
        *,
        present: set[str] | frozenset[str] = ALL_SELECTORS,
        results: dict[str, list[dict[str, Any]]] | None = None,
        goto_error: Exception | None = None,
        click_errors: dict[str, Exception] | None = None,
        grid_lag: bool = False,
    ) -> None:
        self.present = set(present)
        self.results = results or {}
        self.goto_error = goto_error
        self.click_errors = click_errors or {}
        self.grid_lag = grid_lag
        self.calls: list[tuple] = []
        self.values: dict[str, str] = {}
        # Term whose cards are in the DOM right now.
        self.current_term: str | None = None
        self.pending_term: str | None = None
        self.url = "about:blank"
        self.keyboard = FakeKeyboard(self)
        self._selected: set[str] = set()
        self._focused: str | None = None

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def first_card_id(self) -> str | None:
        cards = self.results.get(self.current_term) or []
        if not cards:
            return None
        return cards[0].get("id") or f"{self.current_term}-0"

    def _render_pending(self) -> None:
        if self.pending_term is not None:
            self.current_term, self.pending_term = self.pending_term, None

    async def goto(self, url: str, wait_until: str | None = None, timeout: float | None = None) -> None:
        self.calls.append(("goto", url, wait_until, timeout))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url

    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> None:
        self.calls.append(("wait", selector, timeout))
        if selector == RESULT_CARD:
            # Any rendered card satisfies the wait, stale or not.
            if self.first_card_id() is None:
                self._render_pending()
            if self.first_card_id() is not None:
                return
        elif selector in self.present:
            return
        raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {selector!r}")

    async def wait_for_function(self, expression: str, *, arg: Any = None, timeout: float | None = None) -> None:
        self.calls.append(("wait_function", arg, timeout))
        selector, stale_id = arg
        # Polling lets the lagging grid catch up.
        self._render_pending()
        card_id = self.first_card_id() if selector == RESULT_CARD else None
        if card_id is None or card_id == stale_id:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for function")

    async def click(self, selector: str, click_count: int = 1) -> None:
        self.calls.append(("click", selector, click_count))
        if selector in self.click_errors:
            raise self.click_errors[selector]
        if selector not in self.present:
            raise PlaywrightTimeout(f"Timeout exceeded clicking {selector!r}")
        self._focused = selector
        if click_count >= 3:
            self._selected.add(selector)
        else:
            self._selected.discard(selector)

    def _type(self, selector: str, text: str) -> None:
        self.calls.append(("type", selector, text))
        self._focused = selector
        if selector in self._selected:
            self.values[selector] = text
            self._selected.discard(selector)
        else:
            self.values[selector] = self.values.get(selector, "") + text

    def _on_key(self, key: str) -> None:
        if key == "Enter":
            self.pending_term = self.values.get(SELECTORS["search_input"], "")
            if not self.grid_lag:
                self._render_pending()
        elif key == "Backspace" and self._focused in self._selected:
            self.values[self._focused] = ""
            self._selected.discard(self._focused)

    async def evaluate(self, script: str, arg: Any = None) -> list[dict[str, Any]]:
        self.calls.append(("evaluate", self.current_term))
        return [dict(card) for card in self.results.get(self.current_term, [])]

    async def screenshot(self, path: str, full_page: bool = False) -> None:
        Path(path).write_bytes(b"\x89PNG")

    async def content(self) -> str:
        return "<html><body>stub</body></html>"


class FakeSession:
    def __init__(self, tracker: "SessionTracker") -> None:
        self._tracker = tracker
        self.page = tracker.page

    async def close(self) -> None:
        self._tracker.released += 1


class SessionTracker:
    """Acquire callable that hands out ``FakeSession``s and counts them."""

    def __init__(self, page: FakePage | None = None, launch_error: Exception | None = None) -> None:
        self.page = page or FakePage()
        self.launch_error = launch_error
        self.acquired = 0
        self.released = 0
        self.settings: dict[str, Any] | None = None

    async def acquire(self, settings: dict[str, Any]) -> FakeSession:
        self.settings = settings
        if self.launch_error is not None:
            raise self.launch_error
        self.acquired += 1
        return FakeSession(self)


def make_cards(prefix: str, count: int, price: str = "₹999") -> list[dict[str, Any]]:
    return [{"name": f"{prefix} {i}", "price": price} for i in range(1, count + 1)]


@pytest.fixture
def fast_settings(tmp_path):
    """Settings with every settle delay at zero and no real stealth/debug."""
    return get_settings(
        base_url="https://blinkit.test/",
        stealth=False,
        modal_settle_sec=0,
        location_settle_sec=0,
        search_transition_sec=0,
        reset_settle_sec=0,
        debug_artifacts=False,
        debug_dir=str(tmp_path / "debug"),
    )


@pytest.fixture
def stub_results():
    """Result grids for the 400001 scenario.

    headphones: 3 cards, the middle one has no price.
    earbuds: 12 complete cards.
    """
    return {
        "headphones": [
            {"name": "boAt Rockerz 450", "price": "₹1,499"},
            {"name": "JBL Tune 510BT", "price": None},
            {"name": "Sony WH-CH520", "price": "₹4,490"},
        ],
        "earbuds": make_cards("Earbuds", 12),
    }


@pytest.fixture
def make_page(stub_results):
    """Factory for a ``FakePage`` with some selectors removed."""

    def _make(*, missing=(), results=None, **kwargs):
        present = set(ALL_SELECTORS) - {SELECTORS[role] for role in missing}
        return FakePage(
            present=present,
            results=stub_results if results is None else results,
            **kwargs,
        )

    return _make


@pytest.fixture
def tracker(make_page):
    return SessionTracker(make_page())
