"""
================================================================================
Cookie Consent Controller
================================================================================

Detects the consent banner by its text signature and accepts it through the
first visible accept-style button.

States:
    UNKNOWN -> PRESENT | ABSENT   (single body text query)
    PRESENT -> ABSENT             (accept button clicked)

Dismissal is best-effort: a missing button or a browser error is logged and
leaves the state unresolved. Calling dismiss() on an absent banner is a no-op.

================================================================================
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Tuple

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .config_loader import get_timeout
from .constants import COOKIE_BANNER_TEXT
from .element_helpers import text_exists, verify_text_not_visible
from .smart_locator import ElementRef
from .wait_helpers import wait_fixed


ACCEPT_LABELS: Tuple[str, ...] = ("okay", "accept", "agree", "got it", "ok")
ACCEPT_FRAGMENTS: Tuple[str, ...] = ("okay", "accept")


class BannerState(Enum):
    UNKNOWN = "unknown"
    PRESENT = "present"
    ABSENT = "absent"


def is_accept_label(text: Optional[str]) -> bool:
    """True if a button label reads like a consent acceptance."""
    label = (text or "").strip().lower()
    if not label:
        return False
    return label in ACCEPT_LABELS or any(fragment in label for fragment in ACCEPT_FRAGMENTS)


class CookieConsentController:
    """
    Consent banner detection and dismissal for one page.

    Usage:
        consent = CookieConsentController(page)
        await consent.dismiss()          # no-op when there is no banner
        await consent.verify_dismissed()
    """

    BUTTON_SELECTOR = "button"

    def __init__(
        self,
        page: Page,
        banner_text: str = COOKIE_BANNER_TEXT,
        animation_wait: Optional[int] = None,
    ):
        self.page = page
        self.banner_text = banner_text
        self.animation_wait = get_timeout("animation") if animation_wait is None else animation_wait
        self.state = BannerState.UNKNOWN
        self._banner_pattern = re.compile(re.escape(banner_text), re.IGNORECASE)

    async def detect(self) -> BannerState:
        """Resolve the banner state from the rendered body text."""
        present = await text_exists(self.page, self._banner_pattern)
        self.state = BannerState.PRESENT if present else BannerState.ABSENT
        logger.debug(f"Cookie banner state: {self.state.value}")
        return self.state

    async def find_accept_button(self) -> Optional[ElementRef]:
        """First visible button whose label is an accept phrase."""
        buttons = self.page.locator(self.BUTTON_SELECTOR)
        for index in range(await buttons.count()):
            button = buttons.nth(index)
            if not await button.is_visible():
                continue
            label = await button.inner_text()
            if is_accept_label(label):
                return ElementRef(f"cookie accept ({label.strip()})", button)
        return None

    @allure.step("Dismiss cookie banner if present")
    async def dismiss(self) -> bool:
        """
        Accept the consent banner if it is showing.

        Returns:
            True if an accept button was clicked
        """
        if await self.detect() is BannerState.ABSENT:
            return False

        button = await self.find_accept_button()
        if button is None:
            logger.warning("Cookie banner present but no accept button found, continuing")
            return False

        try:
            await button.click(force=True)
        except PlaywrightError as e:
            logger.warning(f"Cookie accept click failed, continuing: {e}")
            return False

        await wait_fixed(self.page, self.animation_wait)
        await self.detect()
        logger.info(f"Cookie banner dismissed via {button.name}")
        return True

    @allure.step("Verify cookie banner dismissed")
    async def verify_dismissed(self) -> None:
        """Assert the banner text is no longer rendered."""
        await verify_text_not_visible(self.page, self._banner_pattern)
        self.state = BannerState.ABSENT


__all__ = [
    "ACCEPT_LABELS",
    "ACCEPT_FRAGMENTS",
    "BannerState",
    "CookieConsentController",
    "is_accept_label",
]
