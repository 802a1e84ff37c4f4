"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the Fundix landing page suite.

Components:
    - smart_locator: Descriptor-based element location with ordered strategies
    - wait_helpers / scroll_helpers: Backoff polling, fixed delays, scrolling
    - url_helpers / element_helpers: URL and element assertions
    - cookie_consent: Cookie banner detection and dismissal
    - link_checker: Link discovery and HTTP status checks
    - soft_fail: Per-scenario soft-fail policy
    - page_base: Base page object for common operations
    - browser_manager: Browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .smart_locator import (
    ElementNotFoundError,
    ElementNotVisibleError,
    ElementRef,
    LocatorDescriptor,
    SmartLocator,
)
from .page_base import BasePage
from .browser_manager import BrowserManager
from .cookie_consent import CookieConsentController
from .link_checker import LinkChecker

__all__ = [
    "SmartLocator",
    "ElementRef",
    "LocatorDescriptor",
    "ElementNotFoundError",
    "ElementNotVisibleError",
    "BasePage",
    "BrowserManager",
    "CookieConsentController",
    "LinkChecker",
]
