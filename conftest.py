"""
Repository-level pytest configuration.

Why this exists:
  - Configure loguru once per test session
  - Expose the repository root to fixtures that read bundled files

Logging level comes from LOG_LEVEL, then `logging.level` in
testsuites/config/config.yaml.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from autotest_tools.common import init_logger
from testsuites.ui_testing.framework.config_loader import ConfigLoader


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _session_logging() -> Generator[None, None, None]:
    """Initialize the loguru sinks before the first test runs."""
    init_logger(level=ConfigLoader().get("logging.level", "INFO"))
    yield
