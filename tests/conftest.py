"""Pytest configuration and shared fixtures for asana-client-core tests."""

import pytest


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear Asana and test environment variables before each test.

    This prevents test pollution when testing settings and credential resolution.
    """
    import os

    test_prefixes = ("TEST_", "ASANA_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield

    # .env files are loaded straight into os.environ, outside monkeypatch
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            del os.environ[key]
