"""Pytest configuration and fixtures for the propeller-config tests."""

import pytest

from propeller_config.controller import register_config_section
from propeller_config.registry import ConfigRegistry
from propeller_config.settings import get_cli_settings


@pytest.fixture
def registry() -> ConfigRegistry:
    """An isolated registry, independent of the process-wide one."""
    return ConfigRegistry()


@pytest.fixture
def section(registry):
    """The propeller section bound into an isolated registry."""
    return register_config_section(registry)


@pytest.fixture(autouse=True)
def _clear_cli_settings():
    get_cli_settings.cache_clear()
    yield
    get_cli_settings.cache_clear()
