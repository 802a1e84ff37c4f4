"""
================================================================================
Soft-Fail Policy
================================================================================

Per-scenario opt-in for reporting a failed assertion as passed.

A scenario is soft-failing when it carries `@pytest.mark.soft_fail` (or
`soft_fail(True)`), or when `ui.soft_fail` is enabled and the scenario does
not opt out with `soft_fail(False)`. Only call-phase failures are ever
downgraded; fixture setup and teardown errors always surface.

Usage:
    @pytest.mark.soft_fail
    async def test_optional_widget(landing_page): ...

================================================================================
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from .config_loader import ConfigLoader


SOFT_FAIL_MARKER = "soft_fail"
SOFT_FAIL_PROPERTY = "soft_failed"


def soft_fail_default() -> bool:
    """Suite-wide default from `ui.soft_fail` (env UI_SOFT_FAIL)."""
    return bool(ConfigLoader().get("ui.soft_fail", False))


def soft_fail_enabled(item: Any, default: Optional[bool] = None) -> bool:
    """
    Decide whether `item` runs in soft-fail mode.

    Args:
        item: pytest Item
        default: Value used when the item has no marker (default: config)

    Returns:
        True if failures of this item are downgraded
    """
    marker = item.get_closest_marker(SOFT_FAIL_MARKER)
    if marker is None:
        return soft_fail_default() if default is None else default
    if marker.args:
        return bool(marker.args[0])
    return bool(marker.kwargs.get("enabled", True))


def should_downgrade(report: Any, enabled: bool) -> bool:
    """True for a failed call-phase report of a soft-fail item."""
    return enabled and report.when == "call" and report.failed


def downgrade_report(report: Any) -> str:
    """
    Rewrite a failed report as passed, keeping the failure message.

    Returns:
        The failure message that was suppressed
    """
    message = str(report.longrepr) if report.longrepr else "failure"
    summary = message.strip().splitlines()[-1] if message.strip() else message
    report.outcome = "passed"
    report.longrepr = None
    report.user_properties.append((SOFT_FAIL_PROPERTY, summary))
    logger.warning(f"Soft-failed {report.nodeid}: {summary}")
    return summary


__all__ = [
    "SOFT_FAIL_MARKER",
    "SOFT_FAIL_PROPERTY",
    "soft_fail_default",
    "soft_fail_enabled",
    "should_downgrade",
    "downgrade_report",
]
