"""Resolution errors and what they report.

Every error derives from ``ScopewireError`` and carries the contracts
involved, so callers can log or assert on them.
"""

from __future__ import annotations

from scopewire import (
    CircularDependencyError,
    Container,
    ProviderFailedError,
    ScopewireError,
    UnregisteredDependencyError,
)


def _fail() -> object:
    msg = "connection refused"
    raise ConnectionError(msg)


def main() -> None:
    container = Container()
    container.register("api", lambda client: client, ["client"])

    try:
        container.resolve("api")
    except UnregisteredDependencyError as error:
        print(f"missing={error.contract} path={error.path}")  # => missing=client path=['api']

    container.register("a", lambda b: b, ["b"])
    container.register("b", lambda a: a, ["a"])
    try:
        container.resolve("a")
    except CircularDependencyError as error:
        print(f"cycle={' -> '.join(error.cycle)}")  # => cycle=a -> b -> a

    container.register("client", _fail)
    try:
        container.resolve("api")
    except ProviderFailedError as error:
        print(f"failed={error.contract} cause={type(error.cause).__name__}")  # => failed=client cause=ConnectionError
        print(f"is_base_error={isinstance(error, ScopewireError)}")  # => is_base_error=True


if __name__ == "__main__":
    main()
