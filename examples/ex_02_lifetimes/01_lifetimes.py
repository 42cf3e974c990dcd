"""Transient, singleton and scoped lifetimes side by side.

A singleton logger is shared by everything, a scoped repository is shared
within one scope, and a transient service is rebuilt on every resolve.
"""

from __future__ import annotations

from scopewire import Container, Lifetime


class Logger:
    pass


class Repository:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger


class Service:
    def __init__(self, repository: Repository, logger: Logger) -> None:
        self.repository = repository
        self.logger = logger


def main() -> None:
    container = Container()
    container.register(Logger, Logger, lifetime=Lifetime.SINGLETON)
    container.register(Repository, Repository, [Logger], Lifetime.SCOPED)
    container.register(Service, Service, [Repository, Logger], Lifetime.TRANSIENT)

    with container.create_scope() as scope:
        first = scope.resolve(Service)
        second = scope.resolve(Service)

    print(f"transient_rebuilt={first is not second}")  # => transient_rebuilt=True
    print(f"scoped_shared={first.repository is second.repository}")  # => scoped_shared=True
    print(f"singleton_shared={first.logger is second.logger}")  # => singleton_shared=True

    with container.create_scope() as other_scope:
        third = other_scope.resolve(Service)

    print(
        f"scoped_per_scope={third.repository is not first.repository}",
    )  # => scoped_per_scope=True
    print(
        f"singleton_across_scopes={third.logger is first.logger}",
    )  # => singleton_across_scopes=True


if __name__ == "__main__":
    main()
