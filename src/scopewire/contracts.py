from __future__ import annotations

import inspect
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from typing_extensions import get_protocol_members, is_protocol

T = TypeVar("T")


@dataclass(frozen=True)
class Contract(Generic[T]):
    """A named token identifying an abstraction clients depend on.

    Classes and protocols can be used as contract identifiers directly. Use
    ``Contract`` when several registrations share a type, or when the
    abstraction has no type of its own:

    .. code-block:: python

        PRIMARY_DB: Contract[Database] = Contract("db.primary", shape=Database)
        REPLICA_DB: Contract[Database] = Contract("db.replica", shape=Database)

    Equality is by ``name`` and ``shape``, so two tokens built with the same
    arguments identify the same registration.
    """

    name: str
    shape: type[T] | None = None
    """Optional class or protocol every produced instance must satisfy."""

    def __repr__(self) -> str:
        if self.shape is None:
            return f"Contract({self.name!r})"
        return f"Contract({self.name!r}, shape={self.shape.__qualname__})"


def is_valid_identifier(candidate: object) -> bool:
    """Return true when ``candidate`` can be used as a contract identifier."""
    if candidate is None:
        return False
    if not isinstance(candidate, Hashable):
        return False
    try:
        hash(candidate)
    except TypeError:
        return False
    return True


def shape_of(contract: Any) -> type[Any] | None:
    """Return the shape produced instances of ``contract`` must satisfy, if any."""
    if isinstance(contract, Contract):
        return contract.shape
    if isinstance(contract, type):
        return contract
    return None


def instance_satisfies(shape: type[Any], instance: object) -> bool:
    """Check a produced instance against a contract shape.

    Runtime-checkable protocols and ordinary classes use ``isinstance``. Other
    protocols are checked structurally by member presence.
    """
    if not is_protocol(shape):
        return isinstance(instance, shape)
    if _is_runtime_checkable(shape):
        return isinstance(instance, shape)
    return all(hasattr(instance, member) for member in get_protocol_members(shape))


def class_satisfies(shape: type[Any], concrete_type: type[Any]) -> bool:
    """Check a concrete provider class against a contract shape at registration time.

    Only members visible on the class are checked for protocols. Data members
    assigned in ``__init__`` are checked later, on the produced instance.
    """
    if not is_protocol(shape):
        return issubclass(concrete_type, shape)
    if shape in getattr(concrete_type, "__mro__", ()):
        return True
    for member in get_protocol_members(shape):
        protocol_member = inspect.getattr_static(shape, member, None)
        if not callable(protocol_member):
            continue
        if not callable(getattr(concrete_type, member, None)):
            return False
    return True


def _is_runtime_checkable(shape: type[Any]) -> bool:
    return bool(getattr(shape, "_is_runtime_protocol", False))
