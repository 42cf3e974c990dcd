from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from typing import Any, Final, TypeVar

from scopewire.exceptions import DisposalError, describe_contract
from scopewire.lock_mode import LockMode
from scopewire.providers import ContractId, Lifetime, ServiceDescriptor

logger = logging.getLogger(__name__)

OwnerT = TypeVar("OwnerT")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final[Any] = _Missing()
"""Returned by ``LifecycleManager.get_cached`` when nothing is cached."""


@dataclass(slots=True)
class _CacheEntry:
    descriptor: ServiceDescriptor
    instance: Any


class LifecycleManager:
    """Own the instance cache of one container.

    Cached reads take no lock. First-time construction of a contract goes
    through ``construction_lock`` and callers re-check the cache once the lock
    is held, so exactly one factory invocation wins per contract.

    Instances are remembered in creation order and disposed in reverse.
    """

    def __init__(self, lock_mode: LockMode = LockMode.THREAD) -> None:
        self._lock_mode = lock_mode
        self._entries: dict[ContractId, _CacheEntry] = {}
        self._creation_order: list[_CacheEntry] = []
        self._construction_locks: dict[ContractId, threading.RLock] = {}
        self._construction_locks_lock = threading.Lock()

    @property
    def lock_mode(self) -> LockMode:
        return self._lock_mode

    @staticmethod
    def cache_owner(
        descriptor: ServiceDescriptor,
        *,
        requester: OwnerT,
        registrant: OwnerT,
    ) -> OwnerT | None:
        """Select the container whose cache holds instances of ``descriptor``.

        Args:
            descriptor: Descriptor being resolved.
            requester: Container on which the resolve call was made.
            registrant: Container whose registry holds ``descriptor``.

        Returns:
            ``registrant`` for singletons, ``requester`` for scoped services and
            ``None`` for transient services.

        """
        if descriptor.lifetime is Lifetime.SINGLETON:
            return registrant
        if descriptor.lifetime is Lifetime.SCOPED:
            return requester
        return None

    def get_cached(self, descriptor: ServiceDescriptor) -> Any:
        """Return the cached instance for ``descriptor`` or ``MISSING``.

        An instance cached from a descriptor that has since been replaced is
        not returned.
        """
        entry = self._entries.get(descriptor.contract)
        if entry is None or entry.descriptor is not descriptor:
            return MISSING
        return entry.instance

    def store(self, descriptor: ServiceDescriptor, instance: Any) -> None:
        """Cache ``instance`` when the descriptor's lifetime requires it."""
        if not descriptor.is_cached:
            return
        entry = _CacheEntry(descriptor=descriptor, instance=instance)
        self._entries[descriptor.contract] = entry
        self._creation_order.append(entry)
        logger.debug(
            "Cached %s instance of %s",
            descriptor.lifetime.value,
            describe_contract(descriptor.contract),
        )

    def construction_lock(self, contract: ContractId) -> Any:
        """Return the context manager serializing first-time construction of ``contract``."""
        if self._lock_mode is LockMode.NONE:
            return nullcontext()
        lock = self._construction_locks.get(contract)
        if lock is None:
            with self._construction_locks_lock:
                lock = self._construction_locks.setdefault(contract, threading.RLock())
        return lock

    @contextmanager
    def constructing(self, descriptor: ServiceDescriptor) -> Iterator[Any]:
        """Hold the construction lock and yield the instance cached meanwhile, or ``MISSING``."""
        with self.construction_lock(descriptor.contract):
            yield self.get_cached(descriptor)

    def dispose(self) -> None:
        """Run disposal hooks in reverse creation order and clear the cache.

        Every hook runs even when an earlier one raises.

        Raises:
            DisposalError: If any hook raised.

        """
        entries = list(reversed(self._creation_order))
        self._creation_order.clear()
        self._entries.clear()
        self._construction_locks.clear()

        failures: list[tuple[ContractId, BaseException]] = []
        for entry in entries:
            hook = entry.descriptor.dispose
            if hook is None:
                continue
            contract = entry.descriptor.contract
            try:
                hook(entry.instance)
            except Exception as error:  # noqa: BLE001
                logger.debug("Disposal hook of %s raised %r", describe_contract(contract), error)
                failures.append((contract, error))
            else:
                logger.debug("Disposed %s", describe_contract(contract))

        if failures:
            raise DisposalError(failures) from failures[0][1]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, contract: object) -> bool:
        return contract in self._entries
