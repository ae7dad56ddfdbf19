"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state.
"""

from __future__ import annotations

import logging
from datetime import datetime
from unittest.mock import patch

import pytest

# Friday 16 October 2026, 10:00 local
REFERENCE_NOW = datetime(2026, 10, 16, 10, 0, 0)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Send log and config files to *tmp_path* and reset the cached singletons."""
    import flowtask.utils.logger as logger_mod
    from flowtask.services.config_service import get_config_service

    logger_mod._logger = None
    logging.getLogger("flowtask").handlers.clear()
    get_config_service.cache_clear()

    tmpdir = str(tmp_path)
    with patch("flowtask.utils.logger.user_log_dir", return_value=tmpdir):
        with patch("flowtask.services.config_service.user_config_dir", return_value=tmpdir):
            yield tmp_path

    get_config_service.cache_clear()
    for handler in logging.getLogger("flowtask").handlers:
        handler.close()
    logging.getLogger("flowtask").handlers.clear()
    logger_mod._logger = None


@pytest.fixture()
def now() -> datetime:
    """Fixed reference time for relative phrases."""
    return REFERENCE_NOW


@pytest.fixture()
def no_dates():
    """A date search that never finds anything."""
    return lambda text, now: None
