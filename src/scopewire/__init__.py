"""Minimal dependency injection container.

Register contracts (classes, protocols, strings or ``Contract`` tokens) against
factories with an explicit dependency list and a lifetime, then resolve object
graphs from a container or from scopes created from it.
"""

from scopewire.container import Container, Scope
from scopewire.contracts import Contract
from scopewire.exceptions import (
    CircularDependencyError,
    ContractViolationError,
    DisposalError,
    InvalidRegistrationError,
    ProviderFailedError,
    ScopeDisposedError,
    ScopewireError,
    UnregisteredDependencyError,
)
from scopewire.lock_mode import LockMode
from scopewire.providers import Lifetime, ServiceDescriptor

__all__ = [
    "CircularDependencyError",
    "Container",
    "Contract",
    "ContractViolationError",
    "DisposalError",
    "InvalidRegistrationError",
    "Lifetime",
    "LockMode",
    "ProviderFailedError",
    "Scope",
    "ScopeDisposedError",
    "ScopewireError",
    "ServiceDescriptor",
    "UnregisteredDependencyError",
]
