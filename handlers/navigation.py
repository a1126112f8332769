"""
Step driver for getting from a blank page to a usable search box.

A site flow is declared as a list of ``NavStep`` entries, each naming the
state it reaches and whether it may be skipped.  ``drive_navigation``
runs them in order:

* OPTIONAL steps (interstitials that only show up sometimes) swallow
  Playwright timeouts and errors; the state still advances.
* MANDATORY steps turn a Playwright timeout into the step's ``error``
  class and stop the flow.  Nothing is retried.

Adding a new interstitial means adding a step to the list, not touching
this module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, TimeoutError as PlaywrightTimeout

from errors import MandatorySelectorTimeout, ScraperError

logger = logging.getLogger(__name__)


class NavState(str, Enum):
    INIT = "init"
    PAGE_LOADED = "page_loaded"
    APP_MODAL_HANDLED = "app_modal_handled"
    LOCATION_MODAL_HANDLED = "location_modal_handled"
    LOCATION_SET = "location_set"
    SEARCH_PAGE_OPEN = "search_page_open"
    SEARCH_INPUT_READY = "search_input_ready"


class StepKind(str, Enum):
    OPTIONAL = "optional"
    MANDATORY = "mandatory"


@dataclass(frozen=True)
class NavStep:
    """One transition: run ``action`` on the page to reach ``target``."""

    target: NavState
    kind: StepKind
    action: Callable[[Page], Awaitable[None]]
    description: str
    error: type[ScraperError] = MandatorySelectorTimeout


async def drive_navigation(
    page: Page,
    steps: Sequence[NavStep],
    *,
    label: str = "",
) -> NavState:
    """Run *steps* in order and return the last state reached.

    Raises the failing step's ``error`` (chained to the Playwright
    timeout) when a mandatory step times out.  Non-timeout Playwright
    errors in mandatory steps propagate unchanged.
    """
    state = NavState.INIT
    for step in steps:
        logger.info("[%s] %s -> %s: %s", label, state.value, step.target.value, step.description)
        try:
            await step.action(page)
        except PlaywrightTimeout as exc:
            if step.kind is StepKind.OPTIONAL:
                logger.info(
                    "[%s] %s not present, continuing", label, step.description,
                )
            else:
                logger.error(
                    "[%s] Timed out in %s -> %s (%s)",
                    label, state.value, step.target.value, step.description,
                )
                raise _step_error(step, exc) from exc
        except PlaywrightError as exc:
            if step.kind is not StepKind.OPTIONAL:
                raise
            logger.warning(
                "[%s] %s failed (%s), continuing", label, step.description, exc,
            )
        state = step.target

    logger.info("[%s] Navigation finished in state %s", label, state.value)
    return state


def _step_error(step: NavStep, exc: PlaywrightTimeout) -> ScraperError:
    message = f"{step.description} timed out: {exc.message}"
    if issubclass(step.error, MandatorySelectorTimeout):
        return step.error(message, state=step.target.value)
    return step.error(message)
