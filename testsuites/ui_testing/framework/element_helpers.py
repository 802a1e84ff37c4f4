# ================================================================================
# Element Helpers Module
# ================================================================================
#
# Thin selector/text helpers for scenarios that do not go through a page
# object accessor.
#
# Key Features:
#   - Presence checks that never raise (element_exists, text_exists)
#   - Visibility assertions with a bounded wait
#   - Forced clicks by selector or by visible text
#   - Allure step integration
#
# ================================================================================

import re
from typing import Optional, Union

import allure
from loguru import logger
from playwright.async_api import Page

from .config_loader import get_timeout
from .smart_locator import (
    ElementNotVisibleError,
    ElementRef,
    LocatorDescriptor,
    SmartLocator,
    css_rule,
)


async def body_text(page: Page) -> str:
    """Rendered text of the document body (hidden nodes excluded)."""
    return await page.locator("body").inner_text()


async def element_exists(page: Page, selector: str) -> bool:
    """True if `selector` currently matches at least one node."""
    return await page.locator(selector).count() > 0


async def text_exists(page: Page, text: Union[str, re.Pattern]) -> bool:
    """True if `text` appears in the rendered body text."""
    content = await body_text(page)
    if isinstance(text, re.Pattern):
        return text.search(content) is not None
    return text in content


async def get_element_count(page: Page, selector: str) -> int:
    return await page.locator(selector).count()


async def find(
    page: Page,
    selector: str,
    timeout: Optional[int] = None,
) -> ElementRef:
    """Resolve a raw CSS selector through the SmartLocator (absent if missing)."""
    return await SmartLocator(page).resolve(
        LocatorDescriptor(selector, (css_rule(selector),)),
        timeout=timeout,
    )


@allure.step("Verify element visible: {selector}")
async def verify_element_visible(
    page: Page,
    selector: str,
    timeout: Optional[int] = None,
) -> ElementRef:
    budget = get_timeout("visible") if timeout is None else timeout
    ref = await find(page, selector, timeout=budget)
    return await ref.should_be_visible(timeout=budget)


@allure.step("Verify text visible: {text}")
async def verify_text_visible(
    page: Page,
    text: Union[str, re.Pattern],
    timeout: Optional[int] = None,
) -> ElementRef:
    budget = get_timeout("visible") if timeout is None else timeout
    ref = await SmartLocator(page).resolve(
        LocatorDescriptor.page_text(f"text {text!r}", text),
        timeout=budget,
    )
    return await ref.should_be_visible(timeout=budget)


async def verify_text_not_visible(
    page: Page,
    text: Union[str, re.Pattern],
) -> None:
    """Assert no node rendering `text` is visible."""
    ref = await SmartLocator(page).resolve(
        LocatorDescriptor.page_text(f"text {text!r}", text),
        timeout=0,
    )
    if await ref.is_visible():
        raise ElementNotVisibleError(f"Text {text!r} should not be visible")


@allure.step("Click element: {selector}")
async def click_element(page: Page, selector: str, force: bool = True) -> None:
    logger.info(f"Clicking element: {selector}")
    await page.locator(selector).first.click(force=force)


@allure.step("Click text: {text}")
async def click_text(
    page: Page,
    text: Union[str, re.Pattern],
    element_type: str = "a",
    force: bool = True,
) -> None:
    """Click the first `element_type` node containing `text`."""
    logger.info(f"Clicking {element_type} with text: {text}")
    await SmartLocator(page).click(
        LocatorDescriptor.text(f"{element_type} {text!r}", text, element_type),
        force=force,
    )


__all__ = [
    "body_text",
    "element_exists",
    "text_exists",
    "get_element_count",
    "find",
    "verify_element_visible",
    "verify_text_visible",
    "verify_text_not_visible",
    "click_element",
    "click_text",
]
