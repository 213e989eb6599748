"""Shared fixtures for clidispatch tests."""

import pytest

from clidispatch.commands import register_builtin_commands
from clidispatch.config import DispatchConfig
from clidispatch.dispatcher import Dispatcher
from clidispatch.logging import configure_logging
from clidispatch.registry import CommandRegistry

API_KEY_ENV = DispatchConfig().api_key_env


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    """Keep debug events out of captured output."""
    configure_logging(verbose=False)


@pytest.fixture(autouse=True)
def clean_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without a stored credential.

    Setting before deleting makes monkeypatch restore the variable's
    absence even when a test (or the login command) sets it directly.
    """
    monkeypatch.setenv(API_KEY_ENV, 'placeholder')
    monkeypatch.delenv(API_KEY_ENV)


@pytest.fixture
def registry() -> CommandRegistry:
    registry = CommandRegistry()
    register_builtin_commands(registry)
    return registry


@pytest.fixture
def dispatcher(registry: CommandRegistry) -> Dispatcher:
    return Dispatcher(registry)
