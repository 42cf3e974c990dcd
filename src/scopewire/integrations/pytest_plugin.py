"""Pytest fixtures for tests that build object graphs with scopewire.

Enable the plugin from a ``conftest.py``:

.. code-block:: python

    pytest_plugins = ["scopewire.integrations.pytest_plugin"]


    @pytest.fixture()
    def scopewire_container() -> Container:
        container = Container()
        container.register(Clock, FrozenClock, lifetime=Lifetime.SINGLETON)
        return container

"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from scopewire.container import Container, Scope


@pytest.fixture()
def scopewire_container() -> Iterator[Container]:
    """Fixture hook for the plugin-managed root container.

    The default is an empty container, disposed after the test. Override this
    fixture in your own test suite to provide registrations.
    """
    container = Container()
    yield container
    container.dispose()


@pytest.fixture()
def scopewire_scope(scopewire_container: Container) -> Iterator[Scope]:
    """A scope of ``scopewire_container`` disposed at test teardown."""
    with scopewire_container.create_scope() as scope:
        yield scope
