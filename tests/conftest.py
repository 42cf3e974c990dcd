"""Shared pytest fixtures for scopewire tests."""

import pytest

from scopewire.container import Container
from scopewire.lock_mode import LockMode
from scopewire.providers import Lifetime

pytest_plugins = ["scopewire.integrations.pytest_plugin", "pytester"]


@pytest.fixture()
def container() -> Container:
    """Default container with transient default lifetime."""
    return Container()


@pytest.fixture()
def container_singleton() -> Container:
    """Container with lifetime singleton as default."""
    return Container(default_lifetime=Lifetime.SINGLETON)


@pytest.fixture()
def container_unlocked() -> Container:
    """Container without construction locks."""
    return Container(lock_mode=LockMode.NONE)
