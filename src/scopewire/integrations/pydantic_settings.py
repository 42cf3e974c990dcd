from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from scopewire.exceptions import InvalidRegistrationError
from scopewire.providers import ContractId, Lifetime

try:
    from pydantic_settings import BaseSettings
except ModuleNotFoundError as exc:  # pragma: no cover - exercised in optional import scenarios
    message = (
        "pydantic-settings integration requires pydantic-settings. "
        "Install with 'pip install scopewire[pydantic-settings]'."
    )
    raise ModuleNotFoundError(message) from exc

if TYPE_CHECKING:
    from scopewire.container import Container


def is_settings_subclass(candidate: object) -> bool:
    """Return true when candidate subclasses ``pydantic_settings.BaseSettings``."""
    return isinstance(candidate, type) and issubclass(candidate, BaseSettings)


def add_settings(
    container: Container,
    settings_type: type[BaseSettings],
    *,
    provides: ContractId | Literal["infer"] = "infer",
    replace: bool = False,
    **values: Any,
) -> None:
    """Register a settings class as a lazily built singleton.

    The settings object is constructed on first resolution, reading the
    environment and any ``.env`` file configured on ``settings_type``. Keyword
    ``values`` are passed to the constructor and take precedence over the
    environment.

    Args:
        container: Container to register on.
        settings_type: ``BaseSettings`` subclass to instantiate.
        provides: Contract to bind, ``"infer"`` binds ``settings_type``.
        replace: Overwrite an existing registration.
        **values: Explicit field values.

    Raises:
        InvalidRegistrationError: If ``settings_type`` is not a
            ``BaseSettings`` subclass.

    Examples:
        .. code-block:: python

            class DatabaseSettings(BaseSettings):
                model_config = SettingsConfigDict(env_prefix="DB_")

                url: str = "sqlite://"

            add_settings(container, DatabaseSettings)
            settings = container.resolve(DatabaseSettings)

    """
    if not is_settings_subclass(settings_type):
        msg = f"add_settings() requires a BaseSettings subclass, got {settings_type!r}."
        raise InvalidRegistrationError(msg)

    def _build_settings() -> BaseSettings:
        return settings_type(**values)

    container.register(
        settings_type if provides == "infer" else provides,
        _build_settings,
        (),
        Lifetime.SINGLETON,
        replace=replace,
    )


__all__ = ["add_settings", "is_settings_subclass"]
