"""
Unit test fixtures.

Isolates unit tests from environment variables (.env file)
to ensure tests verify actual default values.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

import os

import pytest

# Environment variables that affect ClipAnchorSettings defaults
CONFIG_ENV_VARS = [
    "CLIPANCHOR_PREFIX_LENGTH",
    "CLIPANCHOR_MIN_PASSAGE_LENGTH",
    "CLIPANCHOR_MAX_PASSAGE_LENGTH",
    "CLIPANCHOR_CONTINUITY_MIN_SHARED",
    "CLIPANCHOR_CONTINUITY_MIN_RATIO",
    "CLIPANCHOR_CONTINUITY_SAMPLE_SIZE",
    "CLIPANCHOR_POLL_INTERVAL_SECONDS",
    "CLIPANCHOR_POLL_MAX_ATTEMPTS",
    "CLIPANCHOR_STORE_PATH",
    "CLIPANCHOR_LOG_LEVEL",
    "CLIPANCHOR_LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env_for_unit_tests(monkeypatch, tmp_path):
    """
    Remove all config-related environment variables and change working
    directory to avoid loading .env file.

    This ensures unit tests verify actual default values, not values
    from .env file or system environment.
    """
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    # Change to temp directory to avoid loading .env from project root
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    yield
    os.chdir(original_dir)
