"""
Test suites package.

This repository intentionally keeps `testsuites` importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - CI/CD module imports

Scenarios only read public pages of the target site; no credentials are needed.
"""
