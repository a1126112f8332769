"""
One-off Blinkit scrape from the command line.

Usage:
    python main.py 400001            # scrape and print JSON to stdout
    python main.py 400001 --visible  # show the browser window

Environment variables (see config/blinkit.py for the full list):
    HEADLESS=false           # same as --visible
    SEARCH_TRANSITION_SEC=5  # longer settle before the search input poll
    DEBUG_ARTIFACTS=true     # screenshot + HTML on failure
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from config.blinkit import get_settings
from errors import ScraperError
from platforms import scrape_blinkit

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger("cli")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape Blinkit headphones and earbuds listings.")
    parser.add_argument("pincode", help="Delivery pincode to set before searching")
    parser.add_argument("--visible", action="store_true", help="Run with a visible browser window")
    return parser.parse_args(argv)


async def run(pincode: str, *, visible: bool = False) -> int:
    settings = get_settings()
    if visible:
        settings["headless"] = False
    try:
        result = await scrape_blinkit(pincode, settings=settings)
    except ScraperError as exc:
        logger.error("%s", exc)
        return 1
    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    args = _parse_args()
    sys.exit(asyncio.run(run(args.pincode, visible=args.visible)))
