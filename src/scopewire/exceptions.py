from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def describe_contract(contract: Any) -> str:
    """Return a short human readable label for a contract identifier."""
    if isinstance(contract, type):
        return contract.__qualname__
    return repr(contract)


def _describe_path(path: Sequence[Any]) -> str:
    return " -> ".join(describe_contract(contract) for contract in path)


class ScopewireError(Exception):
    """Represent a base class for all scopewire-specific failures.

    Catch this type when you want to handle any container error path without
    matching each concrete exception class individually.
    """


class InvalidRegistrationError(ScopewireError):
    """Signal a malformed registration.

    Raised by ``Container.register``, ``Container.add_instance`` and
    ``Container.add_concrete`` when the factory is missing or not callable,
    when a dependency is not a valid contract identifier, when the factory
    cannot accept the declared dependencies, or when a contract is registered
    twice without ``replace=True``.

    The failing registration call has no effect; earlier registrations stay
    intact.
    """


class UnregisteredDependencyError(ScopewireError):
    """Signal that a contract has no registration in the container or its parents.

    ``path`` holds the contracts that were under construction when the missing
    contract was requested, so the dependent that needs it is visible.

    Typical fix is registering the contract on the container, or on the scope
    that resolves it.
    """

    def __init__(self, contract: Any, path: Sequence[Any] = ()) -> None:
        self.contract = contract
        self.path = list(path)
        msg = f"Contract {describe_contract(contract)} is not registered"
        if self.path:
            msg = f"{msg} (required by {_describe_path(self.path)})"
        super().__init__(msg)


class CircularDependencyError(ScopewireError):
    """Signal a dependency cycle detected during resolution.

    ``cycle`` starts and ends with the contract that closed the loop, for
    example ``[A, B, A]``. ``path`` is the whole resolution stack, including
    the contracts that led into the cycle.

    Cycles are never broken implicitly. Typical fix is removing one edge of the
    cycle or resolving one side lazily from application code.
    """

    def __init__(self, cycle: Sequence[Any], path: Sequence[Any] = ()) -> None:
        self.cycle = list(cycle)
        self.path = list(path) if path else list(cycle)
        super().__init__(f"Circular dependency detected: {_describe_path(self.cycle)}")


class ProviderFailedError(ScopewireError):
    """Signal that a registered factory raised or produced an unusable result.

    ``contract`` is the contract whose factory failed and ``cause`` the
    original exception, which is also chained as ``__cause__``. Failed
    constructions are never cached.
    """

    def __init__(self, contract: Any, cause: BaseException | None, detail: str | None = None) -> None:
        self.contract = contract
        self.cause = cause
        reason = detail if detail is not None else f"{type(cause).__name__}: {cause}"
        super().__init__(f"Provider for {describe_contract(contract)} failed: {reason}")


class ContractViolationError(ProviderFailedError):
    """Signal that a provider produced an instance that does not satisfy its contract shape."""

    def __init__(self, contract: Any, instance: object, shape: Any) -> None:
        self.instance = instance
        self.shape = shape
        detail = (
            f"produced {type(instance).__qualname__}, which does not satisfy "
            f"{describe_contract(shape)}"
        )
        super().__init__(contract, None, detail)


class ScopeDisposedError(ScopewireError):
    """Signal use of a container or scope after ``dispose`` was called.

    Typical fix is creating a fresh scope with ``Container.create_scope`` for
    each unit of work instead of reusing a disposed one.
    """


class DisposalError(ScopewireError):
    """Signal that one or more disposal hooks raised.

    Every hook runs even if an earlier one fails. ``failures`` lists
    ``(contract, exception)`` pairs in the order the hooks ran; the first
    failure is chained as ``__cause__``.
    """

    def __init__(self, failures: Sequence[tuple[Any, BaseException]]) -> None:
        self.failures = list(failures)
        labels = ", ".join(describe_contract(contract) for contract, _ in self.failures)
        super().__init__(f"{len(self.failures)} disposal hook(s) failed: {labels}")
