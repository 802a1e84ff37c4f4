"""
================================================================================
Visual Elements Tests (Async / Playwright)
================================================================================

Logo display, typography, comparison markers, images and responsive
layouts on the live site. Style checks read computed CSS values and are
soft-failed: they report, they do not gate.

================================================================================
"""

import allure
import pytest

from testsuites.ui_testing.framework.constants import VIEWPORTS
from testsuites.ui_testing.pages.landing_page import LandingPage


pytestmark = [pytest.mark.live]


def _pixels(value: str) -> float:
    return float(value.replace("px", "") or 0)


@allure.epic("UI Testing")
@allure.feature("Visual Elements")
class TestBranding:

    @allure.story("Logo")
    @allure.title("Logo is displayed in the header")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.smoke_ui
    @pytest.mark.asyncio
    async def test_logo_displayed(self, opened_landing_page: LandingPage):
        logo = await opened_landing_page.logo()

        await logo.should_be_visible()
        assert "Fundix" in await logo.text()

    @allure.story("Comparison Table")
    @allure.title("Comparison table shows checkmarks")
    @allure.severity(allure.severity_level.MINOR)
    @pytest.mark.P2
    @pytest.mark.regression_ui
    @pytest.mark.soft_fail
    @pytest.mark.asyncio
    async def test_checkmarks(self, opened_landing_page: LandingPage):
        table = await opened_landing_page.comparison_table()

        assert await table["checkmarks"].count() > 0


@allure.epic("UI Testing")
@allure.feature("Visual Elements")
class TestTypography:

    @allure.story("Typography")
    @allure.title("Hero headline uses a large font")
    @allure.severity(allure.severity_level.MINOR)
    @pytest.mark.P3
    @pytest.mark.regression_ui
    @pytest.mark.soft_fail
    @pytest.mark.asyncio
    async def test_heading_font_size(self, opened_landing_page: LandingPage):
        headline = await (await opened_landing_page.hero_headline()).should_be_visible()

        assert _pixels(await headline.css("font-size")) >= 24

    @allure.story("Typography")
    @allure.title("Body text is readable")
    @allure.severity(allure.severity_level.MINOR)
    @pytest.mark.P3
    @pytest.mark.regression_ui
    @pytest.mark.soft_fail
    @pytest.mark.asyncio
    async def test_body_font_size(self, opened_landing_page: LandingPage):
        subheadline = await (await opened_landing_page.hero_subheadline()).should_be_visible()

        assert _pixels(await subheadline.css("font-size")) >= 12

    @allure.story("Buttons")
    @allure.title("Get funded button shows a pointer cursor")
    @allure.severity(allure.severity_level.MINOR)
    @pytest.mark.P3
    @pytest.mark.regression_ui
    @pytest.mark.soft_fail
    @pytest.mark.asyncio
    async def test_button_cursor(self, opened_landing_page: LandingPage):
        button = await (await opened_landing_page.get_funded_button()).should_be_visible()
        await button.hover()

        assert await button.css("cursor") == "pointer"


@allure.epic("UI Testing")
@allure.feature("Visual Elements")
class TestImagesAndLayout:

    @allure.story("Images")
    @allure.title("Visible images have loaded")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression_ui
    @pytest.mark.soft_fail
    @pytest.mark.asyncio
    async def test_images_loaded(self, opened_landing_page: LandingPage):
        broken = await opened_landing_page.page.locator("img").evaluate_all(
            "els => els.filter(el => el.complete && el.naturalWidth === 0).map(el => el.src)"
        )

        assert not broken, f"Images failed to load: {broken}"

    @allure.story("Responsive")
    @allure.title("Layout renders on {viewport}")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression_ui
    @pytest.mark.parametrize("viewport", list(VIEWPORTS))
    @pytest.mark.asyncio
    async def test_responsive_layout(self, opened_landing_page: LandingPage, viewport: str):
        size = await opened_landing_page.set_viewport(viewport)
        await opened_landing_page.page.wait_for_timeout(500)

        assert opened_landing_page.page.viewport_size == size
        await (await opened_landing_page.logo()).should_be_visible()
        await opened_landing_page.verify_hero_section()
