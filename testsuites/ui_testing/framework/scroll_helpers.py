# ================================================================================
# Scroll Helpers Module
# ================================================================================
#
# Viewport scroll sampling and scroll commands.
#
# Scroll positions are plain floats sampled on demand; they are only ever
# compared before/after an action, never persisted.
#
# ================================================================================

from typing import Awaitable, Callable, Optional, Union

import allure
from loguru import logger
from playwright.async_api import Page

from .config_loader import get_timeout
from .smart_locator import ElementRef
from .wait_helpers import wait_fixed


ScrollTarget = Union[str, int, float]

SCROLL_POSITION_JS = "() => window.scrollY || window.pageYOffset || 0"

SCROLL_TO_JS = """([target, smooth]) => {
    let top = target;
    if (target === "top") {
        top = 0;
    } else if (target === "bottom") {
        top = document.documentElement.scrollHeight;
    }
    window.scrollTo({ top: top, left: 0, behavior: smooth ? "smooth" : "auto" });
}"""


async def get_scroll_position(page: Page) -> float:
    """Current vertical scroll offset in pixels."""
    return float(await page.evaluate(SCROLL_POSITION_JS) or 0)


async def has_scrolled(page: Page, initial_position: float) -> bool:
    """True if the current offset differs from `initial_position`."""
    return await get_scroll_position(page) != initial_position


def _validate_target(target: ScrollTarget) -> ScrollTarget:
    if isinstance(target, str) and target not in ("top", "bottom"):
        raise ValueError(f"Unsupported scroll target: {target!r} (use 'top', 'bottom' or pixels)")
    return target


async def scroll_to(
    page: Page,
    target: ScrollTarget,
    duration: Optional[int] = None,
) -> None:
    """
    Scroll the window to `target` and block for `duration` ms.

    Single attempt; a zero duration jumps instantly instead of animating.

    Args:
        page: Playwright page
        target: "top", "bottom" or an absolute offset in pixels
        duration: Time to wait for the smooth scroll (default: timeouts.short)
    """
    target = _validate_target(target)
    duration = get_timeout("short") if duration is None else duration
    with allure.step(f"Scroll to {target}"):
        await page.evaluate(SCROLL_TO_JS, [target, duration > 0])
        if duration > 0:
            await wait_fixed(page, duration)
    logger.debug(f"Scrolled to {target}")


async def scroll_to_element(ref: ElementRef, wait_time: Optional[int] = None) -> None:
    """Scroll the first match of `ref` into view, then wait for the animation."""
    with allure.step(f"Scroll to {ref.name}"):
        await ref.scroll_into_view()
        page = ref.locator.page
        await wait_fixed(page, get_timeout("animation") if wait_time is None else wait_time)


async def verify_scroll_after_action(
    page: Page,
    action: Callable[[], Awaitable[None]],
    wait_time: Optional[int] = None,
) -> float:
    """
    Assert that `action` moved the viewport.

    Returns:
        The scroll offset after the action
    """
    before = await get_scroll_position(page)
    await action()
    await wait_fixed(page, get_timeout("medium") if wait_time is None else wait_time)
    after = await get_scroll_position(page)
    assert after != before, f"Expected page to scroll, offset stayed at {before}"
    return after


__all__ = [
    "SCROLL_POSITION_JS",
    "SCROLL_TO_JS",
    "get_scroll_position",
    "has_scrolled",
    "scroll_to",
    "scroll_to_element",
    "verify_scroll_after_action",
]
