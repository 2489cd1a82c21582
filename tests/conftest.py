"""Shared fixtures."""

from collections.abc import Generator

import pytest
from aioresponses import aioresponses as aioresponses_cls

from api_selfcheck.config import HarnessConfig


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Intercept aiohttp requests."""
    with aioresponses_cls() as mocked:
        yield mocked


@pytest.fixture
def fast_config() -> HarnessConfig:
    """Config with a short time limit so timeout tests stay quick."""
    return HarnessConfig(time_limit_ms=100)
