"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the Fundix site.

Each page class encapsulates:
    - Element locator descriptors
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .landing_page import LandingPage

__all__ = [
    "LandingPage",
]
