"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation and history handling
    - Descriptor-based element location (SmartLocator)
    - Viewport presets
    - Failure diagnostics for Allure (URL, locator health)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

import allure
from loguru import logger
from playwright.async_api import Page

from autotest_tools.report_tools.allure_utils import attach_text

from .browser_manager import set_viewport
from .config_loader import ConfigLoader, get_timeout
from .constants import BASE_URL
from .smart_locator import ElementRef, LocatorDescriptor, SmartLocator
from .wait_helpers import wait_for_page_load


class BasePage:
    """
    Base class for all page objects.

    Provides common functionality for:
        - Navigation and URL handling
        - Descriptor resolution through a per-page SmartLocator
        - Viewport switching
        - Failure diagnostics

    Usage:
        class PricingPage(BasePage):
            URL_PATH = "/pricing"
            TITLE = LocatorDescriptor.page_text("title", "Pricing")

            async def title(self) -> ElementRef:
                return await self.find(self.TITLE)
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        page: Page,
        base_url: Optional[str] = None,
        element_timeout: Optional[int] = None,
        visible_timeout: Optional[int] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Site root (default: ui.base_url)
            element_timeout: Resolution budget in ms (default: timeouts.element)
            visible_timeout: Visibility budget in ms (default: timeouts.visible)
        """
        self.page = page
        if not base_url:
            base_url = ConfigLoader().get("ui.base_url", BASE_URL)
        self.base_url = base_url.rstrip("/")
        self.smart = SmartLocator(
            page,
            default_timeout=element_timeout,
            visible_timeout=visible_timeout,
        )

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    @property
    def current_url(self) -> str:
        return self.page.url

    async def navigate(self, wait_for: str = "load") -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        with allure.step(f"Navigate to {self.URL_PATH}"):
            await self.page.goto(
                self.url,
                wait_until=wait_for,
                timeout=get_timeout("navigation"),
            )
            logger.debug(f"Navigated to: {self.url}")

    async def wait_for_page_load(self, additional_wait: Optional[int] = None) -> None:
        """Settle delay plus best-effort load state check."""
        await wait_for_page_load(self.page, additional_wait)

    @allure.step("Reload page")
    async def reload(self) -> None:
        await self.page.reload(wait_until="load", timeout=get_timeout("navigation"))
        await self.wait_for_page_load()

    @allure.step("Go back")
    async def go_back(self) -> None:
        await self.page.go_back(wait_until="load", timeout=get_timeout("navigation"))

    @allure.step("Go forward")
    async def go_forward(self) -> None:
        await self.page.go_forward(wait_until="load", timeout=get_timeout("navigation"))

    async def set_viewport(self, name: str) -> Dict[str, int]:
        """Resize to a named preset (desktop, laptop, tablet, mobile, large_mobile)."""
        with allure.step(f"Set viewport: {name}"):
            return await set_viewport(self.page, name)

    # =========================================================================
    # Descriptor Resolution
    # =========================================================================

    async def find(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> ElementRef:
        """Resolve a descriptor; an absent ElementRef when nothing matched."""
        return await self.smart.resolve(descriptor, timeout=timeout)

    async def require(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> ElementRef:
        """Resolve a descriptor that must exist (raises ElementNotFoundError)."""
        return await self.smart.require(descriptor, timeout=timeout)

    async def is_visible(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> bool:
        """
        Check if element is visible.

        Args:
            descriptor: Element descriptor
            timeout: Resolution budget in ms

        Returns:
            True if any matched node is visible
        """
        return await self.smart.is_visible(descriptor, timeout=timeout)

    async def click(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
        force: bool = True,
    ) -> None:
        """Click the first visible match of a descriptor."""
        await self.smart.click(descriptor, timeout=timeout, force=force)

    async def get_text(
        self,
        descriptor: LocatorDescriptor,
        timeout: Optional[int] = None,
    ) -> str:
        return await self.smart.get_text(descriptor, timeout=timeout)

    # =========================================================================
    # Debug Utilities
    # =========================================================================

    def capture_failure(self, test_name: str) -> None:
        """
        Attach debugging information on test failure.

        Attaches:
            - Current URL
            - Locator health report
        """
        with allure.step(f"Capture failure details: {test_name}"):
            attach_text(self.page.url, name="Current URL")
            attach_text(self.get_locator_health_report(), name="Locator Health")

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.smart.get_health_report()


__all__ = [
    "BasePage",
]
