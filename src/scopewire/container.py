from __future__ import annotations

import logging
from collections.abc import Iterable
from types import TracebackType
from typing import Any, Literal, TypeVar, cast, overload

from typing_extensions import Self

from scopewire.contracts import Contract
from scopewire.defaults import DEFAULT_LIFETIME, DEFAULT_LOCK_MODE
from scopewire.exceptions import InvalidRegistrationError, ScopeDisposedError
from scopewire.lifecycle import LifecycleManager
from scopewire.lock_mode import LockMode
from scopewire.providers import (
    ContractId,
    DisposeHook,
    Factory,
    Lifetime,
    ProviderDependenciesExtractor,
    ServiceDescriptor,
)
from scopewire.registry import Registry
from scopewire.resolution_context import ResolutionContext
from scopewire.resolver import Resolver
from scopewire.validators import RegistrationValidator

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Container:
    """Register contracts against providers and resolve object graphs.

    A container owns a ``Registry`` of service descriptors and a cache of the
    singleton and scoped instances it has built. There is no process-wide
    container: create one at application start and pass it (or scopes created
    from it) to the code that needs it.

    .. code-block:: python

        container = Container()
        container.register(Logger, Logger, lifetime=Lifetime.SINGLETON)
        container.register(Repository, Repository, [Logger], Lifetime.SCOPED)
        container.register(Service, Service, [Repository, Logger])

        with container.create_scope() as scope:
            service = scope.resolve(Service)

    """

    def __init__(
        self,
        *,
        default_lifetime: Lifetime = DEFAULT_LIFETIME,
        lock_mode: LockMode = DEFAULT_LOCK_MODE,
    ) -> None:
        """Initialize an empty root container.

        Args:
            default_lifetime: Lifetime used by registrations that omit ``lifetime``.
            lock_mode: Construction locking strategy, inherited by scopes.

        """
        self._init_container(
            parent=None,
            default_lifetime=default_lifetime,
            lock_mode=lock_mode,
        )

    def _init_container(
        self,
        *,
        parent: Container | None,
        default_lifetime: Lifetime,
        lock_mode: LockMode,
    ) -> None:
        self._parent = parent
        self._default_lifetime = default_lifetime
        self._registry = Registry(parent=parent.registry if parent is not None else None)
        self._lifecycle = LifecycleManager(lock_mode)
        self._resolver = Resolver()
        self._validator = RegistrationValidator()
        self._dependencies_extractor = ProviderDependenciesExtractor()
        self._disposed = False

    @property
    def parent(self) -> Container | None:
        """The container this one falls back to, ``None`` for a root container."""
        return self._parent

    @property
    def root(self) -> Container:
        """The outermost container of the parent chain."""
        container = self
        while container._parent is not None:
            container = container._parent
        return container

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def lifecycle(self) -> LifecycleManager:
        return self._lifecycle

    @property
    def default_lifetime(self) -> Lifetime:
        return self._default_lifetime

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # region Registration Methods
    def register(
        self,
        contract: ContractId,
        factory: Factory,
        dependencies: Iterable[ContractId] = (),
        lifetime: Lifetime | None = None,
        *,
        dispose: DisposeHook | None = None,
        replace: bool = False,
    ) -> None:
        """Register a factory for a contract.

        Args:
            contract: Contract identifier: a class, protocol, string or ``Contract``.
            factory: Callable invoked with the resolved ``dependencies``,
                positionally, in declared order.
            dependencies: Contracts to resolve before calling ``factory``.
            lifetime: Instance reuse policy. Defaults to the container's
                ``default_lifetime``.
            dispose: Optional hook called with each cached instance when the
                container or scope caching it is disposed.
            replace: Overwrite an existing registration of ``contract`` in this
                container. Without it a duplicate registration is an error.

        Raises:
            InvalidRegistrationError: If any argument is malformed, a class
                ``factory`` does not satisfy the contract shape, or the
                contract is already registered and ``replace`` is false.

        Examples:
            .. code-block:: python

                container.register("clock", time.monotonic)
                container.register(Mailer, SmtpMailer, ["smtp.host"], Lifetime.SINGLETON)

        """
        self._ensure_active()
        resolved_lifetime = self._default_lifetime if lifetime is None else lifetime

        self._validator.validate_contract(contract)
        self._validator.validate_factory(contract, factory)
        self._validator.validate_class_factory(contract, factory)
        validated_dependencies = self._validator.validate_dependencies(contract, dependencies)
        self._validator.validate_lifetime(contract, resolved_lifetime)
        self._validator.validate_dispose(contract, dispose)
        self._validator.validate_arity(contract, factory, len(validated_dependencies))

        self._registry.register(
            ServiceDescriptor(
                contract=contract,
                factory=factory,
                dependencies=validated_dependencies,
                lifetime=resolved_lifetime,
                dispose=dispose,
            ),
            replace=replace,
        )

    def add_instance(
        self,
        instance: object,
        *,
        provides: ContractId | Literal["infer"] = "infer",
        replace: bool = False,
    ) -> None:
        """Register a pre-built instance as a singleton.

        The container does not own the instance: no disposal hook is attached.

        Args:
            instance: Value returned on every resolution.
            provides: Contract to bind. ``"infer"`` binds ``type(instance)``.
            replace: Overwrite an existing registration.

        Raises:
            InvalidRegistrationError: If ``instance`` is ``None`` or does not
                satisfy the contract shape.

        """
        if instance is None:
            msg = "add_instance() requires an instance, got None."
            raise InvalidRegistrationError(msg)
        contract = type(instance) if provides == "infer" else provides
        self._validator.validate_contract(contract)
        self._validator.validate_instance_type(contract, instance)

        def _provide_instance() -> object:
            return instance

        self.register(contract, _provide_instance, (), Lifetime.SINGLETON, replace=replace)

    def add_concrete(
        self,
        concrete_type: type[Any],
        *,
        provides: ContractId | Literal["infer"] = "infer",
        lifetime: Lifetime | None = None,
        dependencies: Iterable[ContractId] | Literal["infer"] = "infer",
        dispose: DisposeHook | None = None,
        replace: bool = False,
    ) -> None:
        """Register a class, wiring its constructor from type annotations.

        With ``dependencies="infer"`` each annotated ``__init__`` parameter
        becomes a dependency on the annotated type. Pass an explicit sequence to
        bind parameters positionally instead.

        Args:
            concrete_type: Concrete class to instantiate.
            provides: Contract produced by this class. ``"infer"`` uses
                ``concrete_type`` itself.
            lifetime: Instance reuse policy, defaults to ``default_lifetime``.
            dependencies: ``"infer"`` or explicit contracts passed positionally.
            dispose: Optional disposal hook.
            replace: Overwrite an existing registration.

        Raises:
            InvalidRegistrationError: If ``concrete_type`` is not an
                instantiable class, does not satisfy the contract shape, or has
                required parameters without annotations.

        Examples:
            .. code-block:: python

                class ReportService:
                    def __init__(self, repository: Repository, clock: Clock) -> None: ...

                container.add_concrete(ReportService)
                container.add_concrete(SqlRepository, provides=Repository, lifetime=Lifetime.SCOPED)

        """
        contract = concrete_type if provides == "infer" else provides
        self._validator.validate_contract(contract)
        self._validator.validate_concrete_type(contract, concrete_type)

        if dependencies == "infer":
            inferred = self._dependencies_extractor.extract_from_concrete_type(concrete_type)
            factory = self._dependencies_extractor.build_concrete_factory(concrete_type, inferred)
            contracts: Iterable[ContractId] = [dependency.provides for dependency in inferred]
        else:
            factory = concrete_type
            contracts = cast("Iterable[ContractId]", dependencies)

        self.register(
            contract,
            factory,
            contracts,
            lifetime,
            dispose=dispose,
            replace=replace,
        )

    def unregister(self, contract: ContractId) -> bool:
        """Remove the local registration of ``contract``.

        Cached instances are kept until the container is disposed. Parent
        registrations become visible again from a scope.

        Returns:
            ``True`` if a registration was removed.

        """
        self._ensure_active()
        removed = self._registry.unregister(contract) is not None
        if removed:
            logger.debug("Unregistered %r", contract)
        return removed

    def is_registered(self, contract: ContractId) -> bool:
        """Return true when ``contract`` is registered here or in a parent container."""
        return self._registry.is_registered(contract)

    # endregion Registration Methods

    # region Resolution Methods
    @overload
    def resolve(self, contract: type[T]) -> T: ...

    @overload
    def resolve(self, contract: Contract[T]) -> T: ...

    @overload
    def resolve(self, contract: Any) -> Any: ...

    def resolve(self, contract: Any) -> Any:
        """Resolve a contract, building and wiring its dependencies as needed.

        Each call uses its own resolution stack, so concurrent calls never see
        each other's in-flight contracts.

        Raises:
            UnregisteredDependencyError: If ``contract`` or one of its
                dependencies is not registered.
            CircularDependencyError: If the dependency graph contains a cycle.
            ProviderFailedError: If a factory raised, returned ``None`` or
                produced an instance that does not satisfy the contract.
            ScopeDisposedError: If this container or one of its parents was
                disposed.

        """
        self._ensure_active()
        return self._resolver.resolve(contract, ResolutionContext(), self)

    def owner_of(self, registry: Registry) -> Container:
        """Return the container in this container's parent chain owning ``registry``."""
        container: Container | None = self
        while container is not None:
            if container._registry is registry:
                return container
            container = container._parent
        msg = "Registry does not belong to this container's parent chain."
        raise ValueError(msg)

    # endregion Resolution Methods

    # region Scope Methods
    def create_scope(self) -> Scope:
        """Create a child scope.

        The scope resolves registrations of this container, may override them
        with its own, shares this container's singletons and keeps its own
        scoped instances.
        """
        self._ensure_active()
        return Scope(self)

    def dispose(self) -> None:
        """Dispose instances cached by this container in reverse creation order.

        Disposing twice is a no-op. Parent caches are never touched.

        Raises:
            DisposalError: If one or more disposal hooks raised. The container
                is disposed regardless.

        """
        if self._disposed:
            return
        self._disposed = True
        logger.debug("Disposing %s with %d cached instance(s)", type(self).__name__, len(self._lifecycle))
        self._lifecycle.dispose()

    def _ensure_active(self) -> None:
        container: Container | None = self
        while container is not None:
            if container._disposed:
                msg = f"{type(container).__name__} has been disposed and cannot be used."
                raise ScopeDisposedError(msg)
            container = container._parent

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose()

    # endregion Scope Methods

    def __contains__(self, contract: object) -> bool:
        return self.is_registered(contract)


class Scope(Container):
    """A child container with its own scoped instance cache.

    Lookups fall back to the parent container, so a scope can resolve global
    services while overriding specific ones locally. Singletons registered on
    the parent are cached on the parent and shared by every scope.
    """

    def __init__(self, parent: Container) -> None:
        self._init_container(
            parent=parent,
            default_lifetime=parent.default_lifetime,
            lock_mode=parent.lifecycle.lock_mode,
        )

    @property
    def depth(self) -> int:
        """Number of containers above this scope."""
        depth = 0
        container = self.parent
        while container is not None:
            depth += 1
            container = container.parent
        return depth

    def __repr__(self) -> str:
        return f"Scope(depth={self.depth}, cached={len(self.lifecycle)})"
