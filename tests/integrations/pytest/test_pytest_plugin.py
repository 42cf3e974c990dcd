from __future__ import annotations

from collections.abc import Iterator

import pytest

from scopewire.container import Container, Scope
from scopewire.providers import Lifetime


class Connection:
    pass


@pytest.fixture()
def scopewire_container() -> Iterator[Container]:
    container = Container()
    container.register(Connection, Connection, lifetime=Lifetime.SCOPED)
    yield container
    container.dispose()


def test_scope_fixture_uses_overridden_container(
    scopewire_container: Container,
    scopewire_scope: Scope,
) -> None:
    assert scopewire_scope.parent is scopewire_container
    assert isinstance(scopewire_scope.resolve(Connection), Connection)


def test_each_test_gets_a_fresh_scope(scopewire_scope: Scope) -> None:
    assert len(scopewire_scope.lifecycle) == 0
    assert not scopewire_scope.is_disposed


def test_scope_fixture_is_disposed_at_teardown(pytester: pytest.Pytester) -> None:
    pytester.makepyfile(
        """
        import pytest

        from scopewire.container import Container
        from scopewire.providers import Lifetime

        DISPOSED = []


        @pytest.fixture()
        def scopewire_container():
            container = Container()
            container.register("conn", object, lifetime=Lifetime.SCOPED, dispose=DISPOSED.append)
            return container


        def test_uses_scope(scopewire_scope):
            scopewire_scope.resolve("conn")
            assert DISPOSED == []


        def test_runs_after(scopewire_scope):
            assert len(DISPOSED) == 1
        """,
    )

    result = pytester.runpytest("-p", "scopewire.integrations.pytest_plugin", "-p", "no:randomly")

    result.assert_outcomes(passed=2)


def test_default_container_fixture_is_empty(pytester: pytest.Pytester) -> None:
    pytester.makepyfile(
        """
        def test_default(scopewire_container, scopewire_scope):
            assert len(scopewire_container.registry) == 0
            assert scopewire_scope.parent is scopewire_container
        """,
    )

    result = pytester.runpytest("-p", "scopewire.integrations.pytest_plugin")

    result.assert_outcomes(passed=1)
