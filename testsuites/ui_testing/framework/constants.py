"""
================================================================================
Landing Page Test Data
================================================================================

Centralized test data for the Fundix landing page: link labels, text
patterns, viewport presets and company information.

Timeouts live in config.yaml (see config_loader.get_timeout).

================================================================================
"""

import re
from typing import Dict, Pattern, Tuple


BASE_URL = "https://fundix.pro/"
DOMAIN = "fundix.pro"

# Header/footer navigation labels keyed by page-object accessor name
NAVIGATION_LINKS: Dict[str, str] = {
    "how_it_works": "How it works",
    "why_us": "Why us",
    "pro_traders": "Pro traders",
    "faq": "FAQ",
    "blog": "Blog",
    "legal_documents": "Legal documents",
}

# Links that must be visible in the header on desktop
HEADER_NAVIGATION_KEYS: Tuple[str, ...] = (
    "how_it_works",
    "why_us",
    "pro_traders",
    "faq",
    "blog",
)

GET_FUNDED = "Get funded"
LOGO_TEXT = "Fundix"


def _i(pattern: str) -> Pattern:
    return re.compile(pattern, re.IGNORECASE)


TEXT_PATTERNS: Dict[str, Pattern] = {
    "hero_headline": _i(r"Join our free internship|Your skills, our capital"),
    "hero_subheadline": _i(r"Unlock up to \$10M|Let's grow together"),
    "google_play": _i(r"GET IT ON Google Play|Google Play"),
    "free_internship": _i(r"Free internship|You bring the skill"),
    "funded_capital": _i(r"Funded capital|\$10,000,000"),
    "transparency": _i(r"Transparency is #1 priority"),
    "build_wealth": _i(r"Build your personal wealth"),
    "up_to_10m": _i(r"up to \$10M|Funded account"),
    "instant_withdrawals": _i(r"24/7|Instant withdrawals"),
    "zero_costs": _i(r"Zero|Participation costs"),
    "unlimited_attempts": _i(r"∞|Internship attempts"),
    "step_1": _i(r"Step 1|Pass free internship"),
    "step_2": _i(r"Step 2|Get funded"),
    "step_3": _i(r"Step 3|Earn as you trade"),
    "why_choose": _i(r"Why choose Fundix"),
    "trusted_by_traders": _i(r"Trusted by traders"),
    "best_trading_conditions": _i(r"Best trading conditions"),
    "rating": _i(r"4\.7|rating"),
    "cookie_banner": _i(r"We use cookies"),
    "cookie_accept": _i(r"Okay|Accept|Got it"),
    "copyright": _i(r"©.*All Rights Reserved|Copyright"),
}

FEATURE_CARD_KEYS: Tuple[str, ...] = (
    "free_internship",
    "funded_capital",
    "transparency",
    "build_wealth",
)

KEY_FEATURE_KEYS: Tuple[str, ...] = (
    "up_to_10m",
    "instant_withdrawals",
    "zero_costs",
    "unlimited_attempts",
)

STEP_KEYS: Tuple[str, ...] = ("step_1", "step_2", "step_3")

TRUST_CARD_KEYS: Tuple[str, ...] = (
    "trusted_by_traders",
    "best_trading_conditions",
    "rating",
)

TRADING_CONDITIONS: Tuple[str, ...] = (
    "Zero commissions",
    "No requotes",
    "Institutional spreads",
    "Best execution",
    "Personalized support",
)

VIEWPORTS: Dict[str, Dict[str, int]] = {
    "desktop": {"width": 1920, "height": 1080},
    "laptop": {"width": 1366, "height": 768},
    "tablet": {"width": 768, "height": 1024},
    "mobile": {"width": 375, "height": 667},
    "large_mobile": {"width": 414, "height": 896},
}

COMPANY_INFO: Dict[str, str] = {
    "name": "Amega Capital Ltd",
    "location": "Saint Lucia",
    "domain": DOMAIN,
}

COOKIE_BANNER_TEXT = "We use cookies"


__all__ = [
    "BASE_URL",
    "DOMAIN",
    "NAVIGATION_LINKS",
    "HEADER_NAVIGATION_KEYS",
    "GET_FUNDED",
    "LOGO_TEXT",
    "TEXT_PATTERNS",
    "FEATURE_CARD_KEYS",
    "KEY_FEATURE_KEYS",
    "STEP_KEYS",
    "TRUST_CARD_KEYS",
    "TRADING_CONDITIONS",
    "VIEWPORTS",
    "COMPANY_INFO",
    "COOKIE_BANNER_TEXT",
]
