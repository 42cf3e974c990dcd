from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from inspect import Parameter
from typing import Any, TypeAlias, get_type_hints

from scopewire.exceptions import InvalidRegistrationError

ContractId: TypeAlias = Any
"""A hashable token identifying a contract: a class, protocol, string or ``Contract``."""

Factory: TypeAlias = Callable[..., Any]
"""A callable receiving resolved dependencies positionally and returning an instance."""

DisposeHook: TypeAlias = Callable[[Any], object]
"""A callable receiving a cached instance when its owning container is disposed."""

_IMPLICIT_FIRST_PARAMETER_NAMES = {"self", "cls"}


class Lifetime(str, Enum):
    """Defines the lifetime of a service in the container."""

    TRANSIENT = "transient"
    """A new instance is created every time the service is requested."""

    SINGLETON = "singleton"
    """A single instance is created and shared for the lifetime of the container."""

    SCOPED = "scoped"
    """Instance is shared within a scope, different instances across scopes."""


@dataclass(frozen=True, slots=True)
class ServiceDescriptor:
    """Describe how a single contract is produced and cached.

    Descriptors are immutable. Replacing a registration stores a new
    descriptor; instances cached from the previous one are left alone.
    """

    contract: ContractId
    """The contract this descriptor produces."""
    factory: Factory
    """Called with the resolved dependencies, positionally, in declared order."""
    dependencies: tuple[ContractId, ...] = ()
    """Contracts resolved before the factory is invoked."""
    lifetime: Lifetime = Lifetime.TRANSIENT
    """Instance reuse policy."""
    dispose: DisposeHook | None = field(default=None, compare=False)
    """Optional hook run on the cached instance when its container is disposed."""

    @property
    def is_cached(self) -> bool:
        """Return true when produced instances are kept in an instance cache."""
        return self.lifetime is not Lifetime.TRANSIENT


@dataclass(frozen=True, slots=True)
class ProviderDependency:
    """A constructor parameter bound to the contract that supplies it."""

    provides: ContractId
    parameter: Parameter


@dataclass(slots=True)
class ProviderDependenciesExtractor:
    """Extracts dependencies from concrete classes registered with ``add_concrete``."""

    def extract_from_concrete_type(self, concrete_type: type[Any]) -> list[ProviderDependency]:
        """Infer dependencies from ``__init__`` type annotations.

        Every required parameter must be annotated and becomes a dependency on
        its annotation. Parameters with defaults are left to their defaults.

        Raises:
            InvalidRegistrationError: If a required parameter has no usable
                annotation.

        """
        provider_name = concrete_type.__qualname__
        parameters = self._constructor_parameters(concrete_type)
        annotations, annotation_error = self._resolved_type_hints(concrete_type.__init__)
        dependencies: list[ProviderDependency] = []

        for parameter in parameters:
            if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
                continue
            if parameter.default is not Parameter.empty:
                continue
            annotation = annotations.get(parameter.name, parameter.annotation)
            if annotation is Parameter.empty or isinstance(annotation, str):
                msg = (
                    f"Unable to infer dependency for required parameter '{parameter.name}' "
                    f"in provider '{provider_name}'. Add a type annotation or pass explicit dependencies."
                )
                if annotation_error is not None:
                    msg = f"{msg} Original annotation error: {annotation_error}"
                    raise InvalidRegistrationError(msg) from annotation_error
                raise InvalidRegistrationError(msg)
            dependencies.append(ProviderDependency(provides=annotation, parameter=parameter))

        return dependencies

    def build_concrete_factory(
        self,
        concrete_type: type[Any],
        dependencies: list[ProviderDependency],
    ) -> Factory:
        """Return a factory calling ``concrete_type`` with dependencies mapped to their parameters."""
        positional = [
            dependency.parameter.name
            for dependency in dependencies
            if dependency.parameter.kind is Parameter.POSITIONAL_ONLY
        ]
        names = [dependency.parameter.name for dependency in dependencies]

        def _factory(*resolved: Any) -> Any:
            arguments = dict(zip(names, resolved))
            args = [arguments.pop(name) for name in positional]
            return concrete_type(*args, **arguments)

        _factory.__qualname__ = f"{concrete_type.__qualname__}.__init__"
        return _factory

    def _constructor_parameters(self, concrete_type: type[Any]) -> tuple[Parameter, ...]:
        try:
            parameters = tuple(inspect.signature(concrete_type.__init__).parameters.values())
        except (TypeError, ValueError):
            return ()
        if parameters and parameters[0].name in _IMPLICIT_FIRST_PARAMETER_NAMES:
            return parameters[1:]
        return parameters

    def _resolved_type_hints(
        self,
        provider: Callable[..., Any],
    ) -> tuple[dict[str, Any], Exception | None]:
        try:
            return get_type_hints(provider, include_extras=True), None
        except (NameError, TypeError) as error:
            return {}, error
