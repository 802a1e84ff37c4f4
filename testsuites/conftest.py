"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers, gates live-site scenarios and applies the
soft-fail policy to test reports.

================================================================================
"""

import pytest

from testsuites.ui_testing.framework.config_loader import ConfigLoader
from testsuites.ui_testing.framework.soft_fail import (
    downgrade_report,
    should_downgrade,
    soft_fail_enabled,
)


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke_ui: Quick verification of the landing page"
    )
    config.addinivalue_line(
        "markers", "regression_ui: Full landing page regression suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests simulating user flows"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "unit: Framework unit tests (no browser)"
    )
    config.addinivalue_line(
        "markers", "live: Scenarios against the real site (enable with UI_LIVE=1)"
    )

    # Policy markers
    config.addinivalue_line(
        "markers",
        "soft_fail(enabled=True): report a failed call phase as passed "
        "(soft_fail(False) opts out of the ui.soft_fail default)",
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds domain markers by location and skips live scenarios unless
    ui.live is enabled.
    """
    live_enabled = bool(ConfigLoader().get("ui.live", False))
    skip_live = pytest.mark.skip(
        reason="live site scenario (enable with UI_LIVE=1 or run_tests.py --live)"
    )

    for item in items:
        path = str(item.path)

        # Auto-add 'ui' marker to tests in ui_testing directory
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)

        # Auto-add 'unit' marker to tests in unit directory
        if "unit" in item.path.parts:
            item.add_marker(pytest.mark.unit)

        if not live_enabled and item.get_closest_marker("live") is not None:
            item.add_marker(skip_live)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Downgrade call-phase failures of soft-fail scenarios to passed."""
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and should_downgrade(report, soft_fail_enabled(item)):
        downgrade_report(report)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    loader = ConfigLoader()
    return [
        "",
        "=" * 60,
        "Fundix Landing Page Test Suite",
        f"Target: {loader.get('ui.base_url', 'https://fundix.pro/')}",
        f"Live scenarios: {'enabled' if loader.get('ui.live', False) else 'skipped'}",
        f"Soft-fail default: {loader.get('ui.soft_fail', False)}",
        "=" * 60,
        "",
    ]
