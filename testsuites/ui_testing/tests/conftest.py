"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for UI tests, providing fixtures for browser
management, page objects, and test setup/teardown.

Key Features:
- Browser and page lifecycle management (one browser per scenario)
- Landing page fixtures (fresh and already-visited)
- Local DOM fixture serving a bundled copy of the landing page
- Failure diagnostics (URL + locator health) attached to Allure

================================================================================
"""

from pathlib import Path
from typing import AsyncGenerator

import pytest
from loguru import logger
from playwright.async_api import BrowserContext, Page, Route
from playwright.async_api import Error as PlaywrightError

from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.constants import BASE_URL
from testsuites.ui_testing.pages.landing_page import LandingPage


LOCAL_LANDING_HTML = Path(__file__).parent / "fixtures" / "landing.html"


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="function")
async def browser_manager() -> AsyncGenerator[BrowserManager, None]:
    """
    Function-scoped browser manager fixture.

    Skips the scenario when no Playwright browser can be launched
    (e.g. `playwright install` has not been run).
    """
    manager = BrowserManager()
    try:
        await manager.start()
    except PlaywrightError as e:
        pytest.skip(f"Playwright browser unavailable: {e}")
    yield manager
    await manager.close()


@pytest.fixture(scope="function")
async def context(browser_manager: BrowserManager) -> AsyncGenerator[BrowserContext, None]:
    """
    Function-scoped browser context fixture.

    Creates a new browser context for each test, providing isolation.
    """
    context = await browser_manager.new_context()
    yield context


@pytest.fixture(scope="function")
async def page(context: BrowserContext) -> AsyncGenerator[Page, None]:
    """
    Function-scoped page fixture.

    Creates a new page for each test within the browser context.
    """
    page = await context.new_page()
    yield page


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def landing_page(page: Page) -> LandingPage:
    """
    Provides LandingPage instance for the configured site.
    """
    return LandingPage(page)


@pytest.fixture
async def opened_landing_page(landing_page: LandingPage) -> LandingPage:
    """
    Provides LandingPage that has already been visited (cookie banner handled).
    """
    return await landing_page.visit()


@pytest.fixture
async def local_landing_page(page: Page) -> LandingPage:
    """
    LandingPage backed by the bundled HTML copy.

    Every document request to https://fundix.pro/ is answered with
    tests/fixtures/landing.html; sub-resources get an empty 204.
    """
    html = LOCAL_LANDING_HTML.read_text(encoding="utf-8")

    async def serve(route: Route) -> None:
        if route.request.resource_type == "document":
            await route.fulfill(status=200, content_type="text/html", body=html)
        else:
            await route.fulfill(status=204, body="")

    await page.route(f"{BASE_URL}**", serve)
    return LandingPage(page, base_url=BASE_URL, element_timeout=3000, visible_timeout=3000)


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Attach the current URL and locator health report when a UI test fails.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        funcargs = getattr(item, "funcargs", {})
        for name in ("landing_page", "local_landing_page", "opened_landing_page"):
            page_object = funcargs.get(name)
            if isinstance(page_object, LandingPage):
                try:
                    page_object.capture_failure(item.name)
                except PlaywrightError as e:
                    logger.warning(f"Failed to capture failure details: {e}")
                break
