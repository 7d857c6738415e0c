"""
Pytest configuration and shared fixtures for analytics tests.
"""

from datetime import datetime

import pytest

from eventmetrics.core.config import Settings
from helpers import make_series


@pytest.fixture
def quiet_settings():
    """Settings with console progress lines disabled."""
    return Settings(verbose=False)


@pytest.fixture
def monthly_growth_series():
    """Revenue growing 100 -> 130 over four months."""
    return make_series("revenue", [100, 110, 120, 130])


@pytest.fixture
def analysis_window():
    return (datetime(2024, 1, 1), datetime(2024, 12, 31))
