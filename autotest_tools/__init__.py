"""
================================================================================
Autotest Tools
================================================================================

Support utilities shared by the test suites and the runner.

Modules:
    - common: Logging setup and filesystem helpers
    - report_tools: Allure attachments and report processing

Example:
    from autotest_tools.common import init_logger
    from autotest_tools.report_tools import attach_json

    init_logger(level="DEBUG")
    attach_json({"status": 200}, name="Response")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
