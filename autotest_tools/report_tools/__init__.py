"""
================================================================================
Report Tools
================================================================================

Allure attachment helpers and report post-processing.

================================================================================
"""

from .allure_utils import (
    AllureReportProcessor,
    TestResultSummary,
    attach_json,
    attach_link_results,
    attach_text,
)

__all__ = [
    "AllureReportProcessor",
    "TestResultSummary",
    "attach_json",
    "attach_link_results",
    "attach_text",
]
