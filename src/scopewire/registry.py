from __future__ import annotations

import logging
import threading
from typing import NamedTuple

from scopewire.contracts import is_valid_identifier
from scopewire.exceptions import InvalidRegistrationError, describe_contract
from scopewire.providers import ContractId, ServiceDescriptor

logger = logging.getLogger(__name__)


class Lookup(NamedTuple):
    """A descriptor found by ``Registry.lookup`` together with the registry that holds it."""

    descriptor: ServiceDescriptor
    registry: Registry


class Registry:
    """Store service descriptors indexed by contract.

    Contracts are unique within one registry. Replacing an existing
    registration is an explicit operation (``replace=True``); a registry
    created with a ``parent`` falls back to it on lookup, so a scope can
    override a few contracts and inherit the rest.
    """

    def __init__(self, parent: Registry | None = None) -> None:
        self._parent = parent
        self._descriptors: dict[ContractId, ServiceDescriptor] = {}
        self._lock = threading.Lock()

    @property
    def parent(self) -> Registry | None:
        """The registry consulted when a contract is not registered locally."""
        return self._parent

    def register(self, descriptor: ServiceDescriptor, *, replace: bool = False) -> None:
        """Store ``descriptor`` under its contract.

        Args:
            descriptor: Descriptor to store.
            replace: Allow overwriting a descriptor already registered in this
                registry. Parent registrations never need this flag; a local
                registration shadows them.

        Raises:
            InvalidRegistrationError: If the contract is already registered
                locally and ``replace`` is false.

        """
        contract = descriptor.contract
        with self._lock:
            previous = self._descriptors.get(contract)
            if previous is not None and not replace:
                msg = (
                    f"Contract {describe_contract(contract)} is already registered. "
                    "Pass replace=True to overwrite it."
                )
                raise InvalidRegistrationError(msg)
            self._descriptors[contract] = descriptor

        if previous is not None:
            logger.info(
                "Replaced registration of %s (%s -> %s)",
                describe_contract(contract),
                previous.lifetime.value,
                descriptor.lifetime.value,
            )
        else:
            logger.debug("Registered %s as %s", describe_contract(contract), descriptor.lifetime.value)

    def unregister(self, contract: ContractId) -> ServiceDescriptor | None:
        """Remove a local registration and return it, if present."""
        if not is_valid_identifier(contract):
            return None
        with self._lock:
            return self._descriptors.pop(contract, None)

    def lookup(self, contract: ContractId) -> Lookup | None:
        """Find the descriptor for ``contract`` here or in the parent chain."""
        if not is_valid_identifier(contract):
            return None
        registry: Registry | None = self
        while registry is not None:
            descriptor = registry._descriptors.get(contract)  # noqa: SLF001
            if descriptor is not None:
                return Lookup(descriptor, registry)
            registry = registry._parent  # noqa: SLF001
        return None

    def is_registered(self, contract: ContractId) -> bool:
        """Return true when ``contract`` resolves here or in a parent."""
        return self.lookup(contract) is not None

    def contracts(self) -> list[ContractId]:
        """Return the contracts registered locally, in registration order."""
        return list(self._descriptors)

    def __contains__(self, contract: object) -> bool:
        return self.is_registered(contract)

    def __len__(self) -> int:
        return len(self._descriptors)
