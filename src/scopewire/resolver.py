from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from scopewire.contracts import instance_satisfies, shape_of
from scopewire.exceptions import (
    ContractViolationError,
    ProviderFailedError,
    UnregisteredDependencyError,
    describe_contract,
)
from scopewire.lifecycle import MISSING, LifecycleManager
from scopewire.providers import ContractId, Lifetime, ServiceDescriptor

if TYPE_CHECKING:
    from scopewire.container import Container
    from scopewire.resolution_context import ResolutionContext

logger = logging.getLogger(__name__)


class Resolver:
    """Materialize contracts into instances.

    The resolver holds no state of its own: registrations live in each
    container's ``Registry``, cached instances in each container's
    ``LifecycleManager`` and the cycle-detection stack in the
    ``ResolutionContext`` passed down the recursion.
    """

    __slots__ = ()

    def resolve(
        self,
        contract: ContractId,
        context: ResolutionContext,
        requester: Container,
    ) -> Any:
        """Resolve ``contract`` on behalf of ``requester``.

        Args:
            contract: Contract to materialize.
            context: Stack of contracts under construction for this call.
            requester: Container the resolve call was made on. Scoped
                instances are cached here.

        Raises:
            CircularDependencyError: If ``contract`` is already being constructed.
            UnregisteredDependencyError: If no registration exists for ``contract``.
            ProviderFailedError: If a factory raised or produced an unusable instance.

        """
        context.check(contract)

        found = requester.registry.lookup(contract)
        if found is None:
            raise UnregisteredDependencyError(contract, context.path)
        descriptor = found.descriptor
        registrant = requester.owner_of(found.registry)

        cache_owner = LifecycleManager.cache_owner(
            descriptor,
            requester=requester,
            registrant=registrant,
        )
        if cache_owner is not None:
            cached = cache_owner.lifecycle.get_cached(descriptor)
            if cached is not MISSING:
                return cached

        # Singletons are wired from the container that registered them so they
        # never capture instances cached on a shorter-lived scope.
        builder = registrant if descriptor.lifetime is Lifetime.SINGLETON else requester
        with context.entering(contract):
            dependencies = [
                self.resolve(dependency, context, builder) for dependency in descriptor.dependencies
            ]

        if cache_owner is None:
            return self._invoke(descriptor, dependencies)

        with cache_owner.lifecycle.constructing(descriptor) as cached:
            if cached is not MISSING:
                return cached
            instance = self._invoke(descriptor, dependencies)
            cache_owner.lifecycle.store(descriptor, instance)
        return instance

    def _invoke(self, descriptor: ServiceDescriptor, dependencies: list[Any]) -> Any:
        contract = descriptor.contract
        try:
            instance = descriptor.factory(*dependencies)
        except Exception as error:
            raise ProviderFailedError(contract, error) from error

        if instance is None:
            raise ProviderFailedError(contract, None, "factory returned None")

        shape = shape_of(contract)
        if shape is not None and not instance_satisfies(shape, instance):
            raise ContractViolationError(contract, instance, shape)

        logger.debug(
            "Constructed %s for %s",
            type(instance).__qualname__,
            describe_contract(contract),
        )
        return instance
