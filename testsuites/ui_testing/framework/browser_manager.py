"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One Playwright browser per manager
    - Context isolation per scenario
    - Browser, headless mode and viewport from configuration
    - Named viewport presets for responsive checks

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from .config_loader import ConfigLoader
from .constants import VIEWPORTS


SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    Manages browser instances and contexts for UI testing.

    Features:
        - Single browser instance per manager
        - Isolated contexts for test independence
        - Configurable browser settings (ui.browser, ui.headless, ui.viewport)

    Usage:
        async with BrowserManager() as manager:
            page = await manager.new_page()
            await page.goto("https://fundix.pro/")
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--ignore-certificate-errors",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        viewport: Optional[Dict[str, int]] = None,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode (default: ui.headless)
            browser_type: 'chromium', 'firefox' or 'webkit' (default: ui.browser)
            viewport: Context viewport (default: ui.viewport)
        """
        config = ConfigLoader()
        self.headless = config.get("ui.headless", True) if headless is None else headless
        self.browser_type = browser_type or config.get("ui.browser", "chromium")
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{self.browser_type}', "
                f"expected one of {', '.join(SUPPORTED_BROWSERS)}"
            )
        self.viewport = viewport or {
            "width": int(config.get("ui.viewport.width", 1920)),
            "height": int(config.get("ui.viewport.height", 1080)),
        }

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry - start browser."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close browser."""
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()
        browser_launcher = getattr(self._playwright, self.browser_type)

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
        }
        if self.browser_type != "chromium":
            launch_options.pop("args")

        try:
            self._browser = await browser_launcher.launch(**launch_options)
        except PlaywrightError:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.debug(
            f"Browser started: {self.browser_type} "
            f"(headless={self.headless})"
        )

    async def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                await context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(
        self,
        **options: Any,
    ) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.

        Args:
            **options: Additional context options

        Returns:
            New BrowserContext
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {
            **self.DEFAULT_CONTEXT_OPTIONS,
            "viewport": dict(self.viewport),
            **options,
        }
        context = await self._browser.new_context(**context_options)
        self._contexts.append(context)

        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """
        Create new page in new or existing context.

        Args:
            context: Existing context to use (creates new if None)
            **context_options: Options for new context

        Returns:
            New Page
        """
        if context is None:
            context = await self.new_context(**context_options)

        return await context.new_page()

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


def get_viewport(name: str) -> Dict[str, int]:
    """
    Look up a named viewport preset.

    Raises:
        KeyError: If the preset does not exist
    """
    if name not in VIEWPORTS:
        raise KeyError(f"Unknown viewport '{name}', expected one of {', '.join(VIEWPORTS)}")
    return dict(VIEWPORTS[name])


async def set_viewport(page: Page, name: str) -> Dict[str, int]:
    """Resize `page` to the named viewport preset."""
    size = get_viewport(name)
    await page.set_viewport_size(size)
    logger.debug(f"Viewport set to {name} ({size['width']}x{size['height']})")
    return size


__all__ = [
    "BrowserManager",
    "SUPPORTED_BROWSERS",
    "get_viewport",
    "set_viewport",
]
