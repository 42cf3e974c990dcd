from __future__ import annotations

import inspect
from collections.abc import Iterable
from typing import Any

from scopewire.contracts import class_satisfies, is_valid_identifier, shape_of
from scopewire.exceptions import InvalidRegistrationError, describe_contract
from scopewire.providers import ContractId, Lifetime


class RegistrationValidator:
    """Validates registration arguments before descriptors are created."""

    def validate_contract(self, contract: object) -> None:
        """Validate that ``contract`` is usable as a registry key."""
        if not is_valid_identifier(contract):
            msg = f"Contract identifier must be hashable and not None, got {contract!r}."
            raise InvalidRegistrationError(msg)

    def validate_factory(self, contract: ContractId, factory: object) -> None:
        """Validate that a factory is present and callable."""
        if factory is None:
            msg = f"Registration of {describe_contract(contract)} requires a factory."
            raise InvalidRegistrationError(msg)
        if not callable(factory):
            msg = f"Factory for {describe_contract(contract)} must be callable, got {factory!r}."
            raise InvalidRegistrationError(msg)

    def validate_dependencies(self, contract: ContractId, dependencies: object) -> tuple[ContractId, ...]:
        """Validate the dependency list and return it as a tuple."""
        if isinstance(dependencies, (str, bytes)) or not isinstance(dependencies, Iterable):
            msg = (
                f"Dependencies of {describe_contract(contract)} must be a sequence of contract "
                f"identifiers, got {dependencies!r}."
            )
            raise InvalidRegistrationError(msg)

        validated = tuple(dependencies)
        for index, dependency in enumerate(validated):
            if not is_valid_identifier(dependency):
                msg = (
                    f"Dependency #{index} of {describe_contract(contract)} is not a valid "
                    f"contract identifier: {dependency!r}."
                )
                raise InvalidRegistrationError(msg)
        return validated

    def validate_arity(self, contract: ContractId, factory: Any, dependency_count: int) -> None:
        """Validate that ``factory`` accepts ``dependency_count`` positional arguments.

        Callables without an introspectable signature (some builtins) are accepted as is.
        """
        try:
            signature = inspect.signature(factory)
        except (TypeError, ValueError):
            return
        try:
            signature.bind(*([None] * dependency_count))
        except TypeError as error:
            msg = (
                f"Factory for {describe_contract(contract)} cannot be called with "
                f"{dependency_count} dependencies: {error}."
            )
            raise InvalidRegistrationError(msg) from error

    def validate_lifetime(self, contract: ContractId, lifetime: object) -> None:
        """Validate that ``lifetime`` is a ``Lifetime`` member."""
        if not isinstance(lifetime, Lifetime):
            msg = f"Lifetime of {describe_contract(contract)} must be a Lifetime, got {lifetime!r}."
            raise InvalidRegistrationError(msg)

    def validate_dispose(self, contract: ContractId, dispose: object) -> None:
        """Validate an optional disposal hook."""
        if dispose is not None and not callable(dispose):
            msg = f"Dispose hook for {describe_contract(contract)} must be callable, got {dispose!r}."
            raise InvalidRegistrationError(msg)

    def validate_concrete_type(self, contract: ContractId, concrete_type: object) -> None:
        """Validate that a concrete provider is instantiable and satisfies the contract shape."""
        if not inspect.isclass(concrete_type):
            msg = f"Concrete provider must be a class, got {concrete_type!r}."
            raise InvalidRegistrationError(msg)

        if inspect.isabstract(concrete_type):
            msg = f"Concrete provider '{concrete_type.__qualname__}' cannot be an abstract class."
            raise InvalidRegistrationError(msg)

        shape = shape_of(contract)
        if shape is not None and not class_satisfies(shape, concrete_type):
            msg = (
                f"Concrete provider '{concrete_type.__qualname__}' does not satisfy "
                f"{describe_contract(contract)}."
            )
            raise InvalidRegistrationError(msg)

    def validate_class_factory(self, contract: ContractId, factory: object) -> None:
        """Validate a class used directly as a factory against the contract shape.

        Other callables are only checked on the instances they produce.
        """
        shape = shape_of(contract)
        if shape is None or not inspect.isclass(factory):
            return
        if not class_satisfies(shape, factory):
            msg = f"Factory class '{factory.__qualname__}' does not satisfy {describe_contract(contract)}."
            raise InvalidRegistrationError(msg)

    def validate_instance_type(self, contract: ContractId, instance: object) -> None:
        """Validate a pre-built instance against the contract shape."""
        shape = shape_of(contract)
        if shape is not None and not class_satisfies(shape, type(instance)):
            msg = (
                f"Instance of {type(instance).__qualname__} does not satisfy "
                f"{describe_contract(contract)}."
            )
            raise InvalidRegistrationError(msg)
