from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from scopewire.exceptions import CircularDependencyError
from scopewire.providers import ContractId


class ResolutionContext:
    """Track the contracts under construction for one top-level resolve call.

    A context is created by ``Container.resolve`` and dropped when the call
    returns or raises. It is never stored on the container, so concurrent
    resolutions cannot observe each other's stacks.
    """

    __slots__ = ("_stack",)

    def __init__(self) -> None:
        self._stack: list[ContractId] = []

    @property
    def path(self) -> list[ContractId]:
        """A copy of the current stack, outermost contract first."""
        return list(self._stack)

    def check(self, contract: ContractId) -> None:
        """Raise ``CircularDependencyError`` if ``contract`` is already being constructed."""
        if contract not in self._stack:
            return
        start = self._stack.index(contract)
        cycle = [*self._stack[start:], contract]
        raise CircularDependencyError(cycle, [*self._stack, contract])

    @contextmanager
    def entering(self, contract: ContractId) -> Iterator[None]:
        """Push ``contract`` for the duration of the block."""
        self.check(contract)
        self._stack.append(contract)
        try:
            yield
        finally:
            self._stack.pop()

    def __contains__(self, contract: object) -> bool:
        return contract in self._stack

    def __repr__(self) -> str:
        return f"ResolutionContext({self._stack!r})"
