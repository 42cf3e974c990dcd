"""Scope overrides and disposal order.

This module covers:

1. Overriding a parent registration inside a scope.
2. Disposal hooks running in reverse creation order on scope exit.
3. Singleton hooks running only when the root container is disposed.
4. ``ScopeDisposedError`` when using a disposed scope.
"""

from __future__ import annotations

from scopewire import Container, Lifetime
from scopewire.exceptions import ScopeDisposedError


def main() -> None:
    closed: list[str] = []
    container = Container()
    container.register("env", lambda: "production", lifetime=Lifetime.SINGLETON)
    container.register("engine", lambda: "engine", lifetime=Lifetime.SINGLETON, dispose=closed.append)
    container.register("session", lambda engine: "session", ["engine"], Lifetime.SCOPED, dispose=closed.append)
    container.register("unit_of_work", lambda session: "uow", ["session"], Lifetime.SCOPED, dispose=closed.append)

    with container.create_scope() as scope:
        scope.register("env", lambda: "testing")
        print(f"scope_env={scope.resolve('env')}")  # => scope_env=testing
        scope.resolve("unit_of_work")

    print(f"root_env={container.resolve('env')}")  # => root_env=production
    print(f"closed_on_scope_exit={closed}")  # => closed_on_scope_exit=['uow', 'session']

    container.dispose()
    print(f"closed_on_root_dispose={closed[2:]}")  # => closed_on_root_dispose=['engine']

    try:
        scope.resolve("env")
    except ScopeDisposedError as error:
        error_name = type(error).__name__
    print(f"disposed_scope_error={error_name}")  # => disposed_scope_error=ScopeDisposedError


if __name__ == "__main__":
    main()
