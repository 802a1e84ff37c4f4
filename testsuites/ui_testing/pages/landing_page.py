"""
================================================================================
Landing Page Object (Async / Playwright)
================================================================================

Page object for the Fundix marketing landing page.

Design goals:
  - Every element is a class-level LocatorDescriptor (typed, ordered rules)
  - Accessors return ElementRef handles; absence is a value, not an error
  - visit() dismisses the cookie banner without blocking the scenario

================================================================================
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import allure
from loguru import logger

from testsuites.ui_testing.framework.cookie_consent import CookieConsentController
from testsuites.ui_testing.framework.constants import (
    COOKIE_BANNER_TEXT,
    FEATURE_CARD_KEYS,
    GET_FUNDED,
    HEADER_NAVIGATION_KEYS,
    KEY_FEATURE_KEYS,
    LOGO_TEXT,
    NAVIGATION_LINKS,
    STEP_KEYS,
    TEXT_PATTERNS,
    TRUST_CARD_KEYS,
)
from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.framework.smart_locator import (
    ElementNotVisibleError,
    ElementRef,
    LocatorDescriptor,
    css_rule,
    fragment_rule,
    text_rule,
)


PARENT = "xpath=.."
HEADER_SCOPES = ("header", '[class*="header"]')


def _text_descriptors(keys: Tuple[str, ...]) -> Dict[str, LocatorDescriptor]:
    return {key: LocatorDescriptor.page_text(key, TEXT_PATTERNS[key]) for key in keys}


def _in_header(*elements: str) -> Tuple[str, ...]:
    """Descendant selectors of `elements` under every header scope."""
    return tuple(f"{scope} {element}" for scope in HEADER_SCOPES for element in elements)


class LandingPage(BasePage):
    """Fundix landing page object (async)."""

    URL_PATH = "/"
    PAGE_TITLE = "Fundix"

    # Header: every rule is scoped to the header element
    LOGO = LocatorDescriptor("logo", (
        text_rule(LOGO_TEXT, *_in_header("a", '[class*="logo"]')),
        css_rule(", ".join(_in_header('[class*="logo"]'))),
    ))
    HEADER_NAVIGATION = {
        key: LocatorDescriptor.text(
            f"{NAVIGATION_LINKS[key]} header link", NAVIGATION_LINKS[key], *_in_header("a")
        )
        for key in HEADER_NAVIGATION_KEYS
    }
    HEADER_GET_FUNDED_BUTTON = LocatorDescriptor.text(
        "Get funded header button", GET_FUNDED, *_in_header("button", "a")
    )

    # Document-wide navigation (header or footer)
    NAVIGATION = {
        key: LocatorDescriptor.text(f"{label} link", label, "a")
        for key, label in NAVIGATION_LINKS.items()
    }
    GET_FUNDED_BUTTON = LocatorDescriptor.text("Get funded button", GET_FUNDED, "button", "a")
    HEADER = LocatorDescriptor("header", (css_rule("header"), fragment_rule("header")))

    # Hero
    HERO_HEADLINE = LocatorDescriptor.page_text("hero headline", TEXT_PATTERNS["hero_headline"])
    HERO_SUBHEADLINE = LocatorDescriptor.page_text("hero subheadline", TEXT_PATTERNS["hero_subheadline"])
    GOOGLE_PLAY_BUTTON = LocatorDescriptor.text(
        "Google Play button", TEXT_PATTERNS["google_play"], "button", "a"
    )

    # Content sections
    FEATURE_CARDS = _text_descriptors(FEATURE_CARD_KEYS)
    KEY_FEATURES = _text_descriptors(KEY_FEATURE_KEYS)
    STEPS = _text_descriptors(STEP_KEYS)
    TRUST_CARDS = _text_descriptors(TRUST_CARD_KEYS)
    COMPARISON_HEADING = LocatorDescriptor.page_text("comparison table", TEXT_PATTERNS["why_choose"])
    COMPARISON_FUNDIX_COLUMN = LocatorDescriptor.text("Fundix column", "Fundix", "th", "td")
    COMPARISON_OTHERS_COLUMN = LocatorDescriptor.text("Others column", "Others", "th", "td")
    CHECKMARKS = LocatorDescriptor("checkmarks", (
        css_rule('[class*="check"], svg[class*="check"], [aria-label*="check"]'),
    ))
    CROSSES = LocatorDescriptor("crosses", (
        css_rule('[class*="cross"], svg[class*="cross"], [aria-label*="cross"]'),
    ))

    # Footer
    FOOTER = LocatorDescriptor("footer", (css_rule("footer"), fragment_rule("footer")))
    COPYRIGHT = LocatorDescriptor.page_text("copyright", TEXT_PATTERNS["copyright"])

    # Cookie consent
    COOKIE_BANNER = LocatorDescriptor.page_text("cookie banner", TEXT_PATTERNS["cookie_banner"])
    COOKIE_ACCEPT_BUTTON = LocatorDescriptor.text(
        "cookie accept button", TEXT_PATTERNS["cookie_accept"], "button"
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.consent = CookieConsentController(self.page, banner_text=COOKIE_BANNER_TEXT)

    # =========================================================================
    # Navigation
    # =========================================================================

    @allure.step("Open landing page")
    async def visit(self) -> "LandingPage":
        """Open the site root, let it settle, then dismiss the cookie banner if shown."""
        await self.navigate()
        await self.wait_for_page_load()
        await self.dismiss_cookie_banner_if_present()
        return self

    async def dismiss_cookie_banner_if_present(self) -> bool:
        return await self.consent.dismiss()

    @allure.step("Click navigation link: {key}")
    async def click_navigation_link(self, key: str) -> None:
        await self.click(self._navigation_descriptor(key))

    @allure.step("Click Get funded button")
    async def click_get_funded_button(self) -> None:
        ref = await self.smart.require(self.GET_FUNDED_BUTTON)
        await ref.first.click(force=True)

    # =========================================================================
    # Header
    # =========================================================================

    async def logo(self, timeout: Optional[int] = None) -> ElementRef:
        return (await self.find(self.LOGO, timeout)).first

    async def navigation_link(self, key: str, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self._navigation_descriptor(key), timeout)

    async def navigation_links(self, timeout: Optional[int] = None) -> Dict[str, ElementRef]:
        return {key: await self.navigation_link(key, timeout) for key in NAVIGATION_LINKS}

    async def get_funded_button(self, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self.GET_FUNDED_BUTTON, timeout)

    async def header(self, timeout: Optional[int] = None) -> ElementRef:
        return (await self.find(self.HEADER, timeout)).first

    async def header_link(self, text: str, timeout: Optional[int] = None) -> ElementRef:
        """Anchor inside the header containing `text`."""
        return await self.find(
            LocatorDescriptor.text(f"header link {text!r}", text, *_in_header("a")),
            timeout,
        )

    # =========================================================================
    # Hero
    # =========================================================================

    async def hero_headline(self, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self.HERO_HEADLINE, timeout)

    async def hero_subheadline(self, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self.HERO_SUBHEADLINE, timeout)

    async def google_play_button(self, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self.GOOGLE_PLAY_BUTTON, timeout)

    # =========================================================================
    # Content Sections
    # =========================================================================

    async def feature_card(self, key: str, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self._lookup(self.FEATURE_CARDS, key, "feature card"), timeout)

    async def feature_cards(self, timeout: Optional[int] = None) -> Dict[str, ElementRef]:
        return {key: await self.feature_card(key, timeout) for key in self.FEATURE_CARDS}

    async def key_feature(self, key: str, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self._lookup(self.KEY_FEATURES, key, "key feature"), timeout)

    async def key_features(self, timeout: Optional[int] = None) -> Dict[str, ElementRef]:
        return {key: await self.key_feature(key, timeout) for key in self.KEY_FEATURES}

    async def step(self, key: str, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self._lookup(self.STEPS, key, "step"), timeout)

    async def steps(self, timeout: Optional[int] = None) -> Dict[str, ElementRef]:
        return {key: await self.step(key, timeout) for key in self.STEPS}

    async def trust_card(self, key: str, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self._lookup(self.TRUST_CARDS, key, "trust card"), timeout)

    async def trust_cards(self, timeout: Optional[int] = None) -> Dict[str, ElementRef]:
        return {key: await self.trust_card(key, timeout) for key in self.TRUST_CARDS}

    async def comparison_table(self, timeout: Optional[int] = None) -> Dict[str, ElementRef]:
        """
        The "Why choose Fundix" comparison block.

        Keys: table (heading's parent), fundix_column, others_column,
        checkmarks, crosses.
        """
        heading = await self.find(self.COMPARISON_HEADING, timeout)
        return {
            "table": heading.first.within(PARENT),
            "fundix_column": await self.find(self.COMPARISON_FUNDIX_COLUMN, timeout),
            "others_column": await self.find(self.COMPARISON_OTHERS_COLUMN, timeout),
            "checkmarks": await self.find(self.CHECKMARKS, timeout),
            "crosses": await self.find(self.CROSSES, timeout),
        }

    # =========================================================================
    # Footer
    # =========================================================================

    async def footer(self, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self.FOOTER, timeout)

    async def footer_links(self, timeout: Optional[int] = None) -> ElementRef:
        return (await self.footer(timeout)).within("a")

    async def footer_link(self, text: str, timeout: Optional[int] = None) -> ElementRef:
        """Anchor inside the footer containing `text`."""
        return await self.find(
            LocatorDescriptor.text(f"footer link {text!r}", text, "footer a", '[class*="footer"] a'),
            timeout,
        )

    async def copyright_text(self, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self.COPYRIGHT, timeout)

    # =========================================================================
    # Cookie Consent
    # =========================================================================

    async def cookie_banner(self, timeout: Optional[int] = None) -> ElementRef:
        """Container of the consent text (parent of the text node)."""
        text = await self.find(self.COOKIE_BANNER, timeout)
        return text.first.within(PARENT)

    async def cookie_accept_button(self, timeout: Optional[int] = None) -> ElementRef:
        return await self.find(self.COOKIE_ACCEPT_BUTTON, timeout)

    # =========================================================================
    # Verifications
    # =========================================================================

    def header_descriptors(self) -> List[Tuple[str, LocatorDescriptor]]:
        """Logo, the desktop navigation links and the CTA, in display order."""
        items = [("logo", self.LOGO)]
        items.extend((NAVIGATION_LINKS[key], self.HEADER_NAVIGATION[key]) for key in HEADER_NAVIGATION_KEYS)
        items.append((GET_FUNDED, self.HEADER_GET_FUNDED_BUTTON))
        return items

    @allure.step("Verify header elements")
    async def verify_header_elements(self) -> None:
        """
        Assert the logo, five navigation links and "Get funded" are visible.

        Each element gets its own wait; the final verdict comes from one
        combined re-check so a late-rendering header is judged as a whole.

        Raises:
            ElementNotVisibleError: Naming every element that is not visible
        """
        items = self.header_descriptors()
        for name, descriptor in items:
            try:
                await (await self.find(descriptor)).should_be_visible()
            except ElementNotVisibleError as e:
                logger.debug(f"Header element pending: {e}")

        missing = [
            name for name, descriptor in items
            if not await (await self.find(descriptor, timeout=0)).is_visible()
        ]
        if missing:
            raise ElementNotVisibleError(f"Header elements not visible: {', '.join(missing)}")
        logger.info("All header elements visible")

    @allure.step("Verify hero section")
    async def verify_hero_section(self) -> None:
        await (await self.hero_headline()).should_be_visible()
        await (await self.hero_subheadline()).should_be_visible()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _navigation_descriptor(self, key: str) -> LocatorDescriptor:
        return self._lookup(self.NAVIGATION, key, "navigation link")

    @staticmethod
    def _lookup(
        descriptors: Dict[str, LocatorDescriptor],
        key: str,
        kind: str,
    ) -> LocatorDescriptor:
        if key not in descriptors:
            raise KeyError(f"Unknown {kind} '{key}', expected one of {', '.join(descriptors)}")
        return descriptors[key]


__all__ = ["LandingPage"]
