# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Wait strategies for browser-driven scenarios.
#
# Key Features:
#   - Condition polling with exponential backoff and an explicit timeout
#   - Pre-configured scenarios (element, navigation, scroll, cookie banner)
#   - Fixed delays for animation / page settle (documented fallback only)
#   - Allure integration for step reporting
#
# Usage:
#   ok = await wait_until(check, scenario="navigation", description="URL changed")
#   ref = await poll_until(probe, config=WaitConfig(timeout=2.0))
#   await wait_for_page_load(page)
#
# ================================================================================

import asyncio
import inspect
import random
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, TypeVar, Union

import allure
from loguru import logger
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config_loader import get_timeout


T = TypeVar('T')

CheckFn = Callable[[], Union[Tuple[bool, T], Awaitable[Tuple[bool, T]]]]


@dataclass
class WaitConfig:
    """
    Configuration for wait operations.

    Attributes:
        initial_interval: Initial wait interval in seconds
        multiplier: Multiplier for exponential backoff
        max_interval: Maximum interval between attempts
        timeout: Total timeout in seconds
        jitter: Add random jitter to the interval
    """
    initial_interval: float = 0.1
    multiplier: float = 2.0
    max_interval: float = 1.0
    timeout: float = 10.0
    jitter: bool = False

    @classmethod
    def from_millis(cls, timeout_ms: int, **kwargs) -> "WaitConfig":
        """Build a config whose total budget is given in milliseconds."""
        return cls(timeout=timeout_ms / 1000.0, **kwargs)


WAIT_SCENARIOS: Dict[str, WaitConfig] = {
    "default": WaitConfig(),

    # Element lookups against a rendered page
    "element": WaitConfig(
        initial_interval=0.1,
        multiplier=2.0,
        max_interval=1.0,
        timeout=10.0
    ),

    # URL changes after a click
    "navigation": WaitConfig(
        initial_interval=0.25,
        multiplier=2.0,
        max_interval=2.0,
        timeout=15.0
    ),

    # Scroll offset settling after smooth scroll
    "scroll": WaitConfig(
        initial_interval=0.1,
        multiplier=1.5,
        max_interval=0.5,
        timeout=3.0
    ),

    # Consent overlays are injected late by some CMP scripts
    "cookie_banner": WaitConfig(
        initial_interval=0.2,
        multiplier=2.0,
        max_interval=1.0,
        timeout=5.0
    ),
}


class WaitTimeoutError(Exception):
    """Raised when a wait operation times out."""
    pass


def get_wait_config(scenario: str) -> WaitConfig:
    """
    Get wait configuration for a specific scenario.

    Args:
        scenario: Scenario name (e.g., "element", "navigation")

    Returns:
        WaitConfig for the scenario, or default if not found
    """
    return WAIT_SCENARIOS.get(scenario, WAIT_SCENARIOS["default"])


def calculate_next_interval(
    current_interval: float,
    config: WaitConfig
) -> float:
    """
    Calculate the next wait interval with exponential backoff and jitter.

    Args:
        current_interval: Current interval in seconds
        config: Wait configuration

    Returns:
        Next interval in seconds
    """
    next_interval = min(
        current_interval * config.multiplier,
        config.max_interval
    )

    if config.jitter:
        # +/- 25%
        jitter_factor = 0.75 + (random.random() * 0.5)
        next_interval = next_interval * jitter_factor

    return next_interval


async def _poll(
    check_fn: CheckFn,
    config: WaitConfig,
    description: str,
) -> Tuple[bool, Optional[T], Any]:
    """
    Core polling loop shared by poll_until and wait_until.

    The check always runs at least once, even with a zero timeout.

    Returns:
        (matched, result, last_observed)
    """
    deadline = time.monotonic() + config.timeout
    current_interval = config.initial_interval
    attempt = 0
    last_observed: Any = None

    while True:
        attempt += 1
        try:
            outcome = check_fn()
            if inspect.isawaitable(outcome):
                outcome = await outcome
            success, result = outcome
            last_observed = result
            if success:
                logger.debug(f"Condition met after {attempt} attempts: {description}")
                return True, result, result
        except PlaywrightTimeoutError as e:
            last_observed = str(e)
            logger.debug(f"Attempt {attempt} timed out: {e}")

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.debug(f"Gave up after {attempt} attempts: {description}")
            return False, None, last_observed

        await asyncio.sleep(min(current_interval, remaining))
        current_interval = calculate_next_interval(current_interval, config)


async def poll_until(
    check_fn: CheckFn,
    scenario: str = "default",
    description: str = "Waiting for condition",
    config: Optional[WaitConfig] = None
) -> Optional[T]:
    """
    Poll a condition with exponential backoff until it holds or the budget ends.

    Args:
        check_fn: Sync or async function returning (success, result)
        scenario: Predefined scenario name for configuration
        description: Human-readable description for logging
        config: Optional custom WaitConfig (overrides scenario)

    Returns:
        Result from check_fn when successful, None on timeout
    """
    _, result, _ = await _poll(check_fn, config or get_wait_config(scenario), description)
    return result


async def wait_until(
    check_fn: CheckFn,
    scenario: str = "default",
    description: str = "Waiting for condition",
    config: Optional[WaitConfig] = None
) -> T:
    """
    Wait for a condition with exponential backoff.

    Args:
        check_fn: Sync or async function returning (success, result)
        scenario: Predefined scenario name for configuration
        description: Human-readable description for logging
        config: Optional custom WaitConfig (overrides scenario)

    Returns:
        Result from check_fn when successful

    Raises:
        WaitTimeoutError: If timeout is reached without success

    Example:
        async def url_changed():
            return page.url != start_url, page.url

        new_url = await wait_until(url_changed, scenario="navigation")
    """
    if config is None:
        config = get_wait_config(scenario)

    start = time.monotonic()
    matched, result, last_observed = await _poll(check_fn, config, description)

    if not matched:
        elapsed = time.monotonic() - start
        error_msg = (
            f"Timeout after {elapsed:.1f}s waiting for: {description}. "
            f"Last result: {last_observed}"
        )
        logger.error(error_msg)
        raise WaitTimeoutError(error_msg)

    return result


# ================================================================================
# Fixed Delays
# ================================================================================
#
# The target site's animation timing is not observable, so these remain as
# plain delays. Prefer wait_until whenever a post-condition can be checked.

async def wait_fixed(page: Page, duration: int) -> None:
    """Unconditionally wait `duration` milliseconds."""
    await page.wait_for_timeout(duration)


async def wait_for_animation(page: Page, wait_time: Optional[int] = None) -> None:
    """Wait for a CSS transition / smooth scroll to finish."""
    await wait_fixed(page, get_timeout("animation") if wait_time is None else wait_time)


async def wait_for_navigation(page: Page, wait_time: Optional[int] = None) -> None:
    """Give a click-triggered navigation or anchor scroll time to settle."""
    await wait_fixed(page, get_timeout("medium") if wait_time is None else wait_time)


@allure.step("Wait for page load")
async def wait_for_page_load(
    page: Page,
    additional_wait: Optional[int] = None,
    state: str = "load",
    timeout: Optional[int] = None,
) -> None:
    """
    Fixed settle delay followed by a best-effort readiness check.

    A readiness timeout is logged and ignored; missing content surfaces later
    as an element that never appeared.

    Args:
        page: Playwright page
        additional_wait: Settle delay in ms (default: timeouts.page_load)
        state: Load state to wait for
        timeout: Readiness timeout in ms (default: timeouts.navigation)
    """
    await wait_fixed(page, get_timeout("page_load") if additional_wait is None else additional_wait)
    try:
        await page.wait_for_load_state(
            state,
            timeout=get_timeout("navigation") if timeout is None else timeout,
        )
    except PlaywrightTimeoutError as e:
        logger.warning(f"Page did not reach '{state}' state: {e}")


async def wait_for_element(
    page: Page,
    selector: str,
    timeout: Optional[int] = None,
) -> None:
    """Wait for the first match of `selector` to become visible."""
    await page.locator(selector).first.wait_for(
        state="visible",
        timeout=get_timeout("element") if timeout is None else timeout,
    )


async def wait_for_text(
    page: Page,
    text: str,
    timeout: Optional[int] = None,
) -> None:
    """Wait for `text` to become visible anywhere on the page."""
    await page.get_by_text(text).first.wait_for(
        state="visible",
        timeout=get_timeout("element") if timeout is None else timeout,
    )


__all__ = [
    "WaitConfig",
    "WAIT_SCENARIOS",
    "WaitTimeoutError",
    "get_wait_config",
    "calculate_next_interval",
    "poll_until",
    "wait_until",
    "wait_fixed",
    "wait_for_animation",
    "wait_for_navigation",
    "wait_for_page_load",
    "wait_for_element",
    "wait_for_text",
]
