"""
Blinkit target configuration.

Everything that couples the scraper to Blinkit's markup lives here:
the selector table, per-step wait bounds, browser launch flags and the
fixed search terms.  When the site changes its class names, this is the
only file that should need editing.

Selectors use ``[class*="..."]`` substring matches because Blinkit ships
styled-components class names with hashed suffixes
(``DownloadAppModal__ContinueLink-sc-1wef47t-12``).

Runtime knobs (settle delays, headless, stealth, debug output) are read
from the environment by ``get_settings()`` at call time, so a ``.env``
loaded by the entry point is honoured.
"""

from __future__ import annotations

import os
from typing import Any

# ---------------------------------------------------------------------------
# Browser / Playwright defaults
# ---------------------------------------------------------------------------

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--disable-infobars",
]

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

VIEWPORT = {"width": 1366, "height": 768}

# Context locale and what stealth reports as navigator.languages; keep
# the two in agreement.
LOCALE = "en-IN"
NAVIGATOR_LANGUAGES = ("en-IN", "en")

BASE_URL = "https://blinkit.com/"

# 'networkidle' here, unlike most sites: Blinkit renders the modals and
# the location widget only after its bootstrap XHRs finish.
WAIT_UNTIL = "networkidle"

GOTO_TIMEOUT_MS = 60_000

# ---------------------------------------------------------------------------
# Selector table
# ---------------------------------------------------------------------------

SELECTORS = {
    # "Continue on web" link inside the download-the-app interstitial
    "app_continue": 'div[class*="DownloadAppModal__ContinueLink"]',
    # "Select manually" inside the detect-my-location dialog
    "location_manual": 'div[class*="GetLocationModal__SelectManually"]',
    "location_input": 'input[placeholder="search delivery location"]',
    "location_suggestion": 'div[class*="LocationSearchList__LocationListContainer"]',
    # Header search bar is a link to /s/, not an input
    "search_link": 'a[class*="SearchBar__Button"]',
    "search_input": 'input[class*="SearchBarContainer__Input"]',
    "result_card": 'div[role="button"][class][id]',
    "result_name": ".tw-text-300.tw-font-semibold",
    "result_price": ".tw-text-200.tw-font-semibold",
}

STEP_TIMEOUTS_MS = {
    "app_continue": 10_000,
    "location_manual": 5_000,
    "location_input": 10_000,
    "location_suggestion": 10_000,
    "search_link": 10_000,
    "search_input": 30_000,
    "result_card": 15_000,
}

# ---------------------------------------------------------------------------
# Search terms and output shape
# ---------------------------------------------------------------------------

# Order matters: results are collected on one page, term by term.
SEARCH_TERMS = ("headphones", "earbuds")

MAX_RESULTS_PER_TERM = 10

# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------

BLINKIT_DEFAULTS: dict[str, Any] = {
    "base_url": BASE_URL,
    "headless": True,
    "stealth": True,
    "user_agent": USER_AGENT,
    "goto_timeout_ms": GOTO_TIMEOUT_MS,
    "wait_until": WAIT_UNTIL,
    # Pause after clicking through either optional modal.
    "modal_settle_sec": 2.0,
    # Pause after choosing a location suggestion; the home feed reloads.
    "location_settle_sec": 2.0,
    # Floor before polling for the real search input.  The /s/ route is a
    # client-side transition with no event to await; 3 s was found by trial.
    "search_transition_sec": 3.0,
    # Pause after clearing the search input between terms.
    "reset_settle_sec": 1.0,
    "debug_artifacts": False,
    "debug_dir": "debug_screenshots",
}

_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(float(raw.strip()), 0.0)
    except ValueError:
        return default


def get_settings(**overrides: Any) -> dict[str, Any]:
    """Return scraper settings: defaults, then env vars, then *overrides*."""
    d = BLINKIT_DEFAULTS
    settings = {
        "base_url": os.getenv("BLINKIT_URL") or d["base_url"],
        "headless": _env_bool("HEADLESS", d["headless"]),
        "stealth": _env_bool("STEALTH", d["stealth"]),
        "user_agent": os.getenv("USER_AGENT") or d["user_agent"],
        "goto_timeout_ms": _env_int("GOTO_TIMEOUT_MS", d["goto_timeout_ms"]),
        "wait_until": d["wait_until"],
        "modal_settle_sec": _env_float("MODAL_SETTLE_SEC", d["modal_settle_sec"]),
        "location_settle_sec": _env_float("LOCATION_SETTLE_SEC", d["location_settle_sec"]),
        "search_transition_sec": _env_float("SEARCH_TRANSITION_SEC", d["search_transition_sec"]),
        "reset_settle_sec": _env_float("RESET_SETTLE_SEC", d["reset_settle_sec"]),
        "debug_artifacts": _env_bool("DEBUG_ARTIFACTS", d["debug_artifacts"]),
        "debug_dir": os.getenv("DEBUG_DIR") or d["debug_dir"],
    }
    settings.update(overrides)
    return settings
