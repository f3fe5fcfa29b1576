"""Base class for config types and default-value construction."""

from __future__ import annotations

import dataclasses
from typing import Any, Optional, Type, TypeVar

from karasu_config import descriptor
from karasu_config.codec import Codec, get_codec
from karasu_config.errors import InstantiationError, UnsupportedConfigTypeError

C = TypeVar("C", bound="BaseConfig")


class BaseConfig:
    """
    Optional base class for config types.

    Subclasses are usually dataclasses, but any class whose zero-argument
    constructor yields a usable default works. Override
    :meth:`create_default` when the default needs more than ``cls()``.
    """

    @classmethod
    def create_default(cls: Type[C]) -> C:
        return cls()

    def to_json(self, codec: Optional[Codec] = None) -> str:
        return (codec or get_codec()).encode(self)

    @classmethod
    def from_json(cls: Type[C], text: str, codec: Optional[Codec] = None) -> C:
        return (codec or get_codec()).decode(text, cls)


def new_default(config_type: type) -> Any:
    """
    Build the default value of ``config_type``.

    Uses the descriptor's factory if one was declared, then
    ``create_default()``, then the zero-argument constructor.

    Raises:
        InstantiationError: If construction fails
    """
    declared = descriptor.find(config_type)
    try:
        if declared is not None and declared.factory is not None:
            value = declared.factory()
        elif hasattr(config_type, "create_default"):
            value = config_type.create_default()
        else:
            value = config_type()
    except Exception as exc:
        raise InstantiationError(
            f"Failed to create default config for {config_type.__name__}: {exc}"
        ) from exc
    if value is None:
        raise InstantiationError(f"Default factory for {config_type.__name__} returned None")
    return value


def ensure_supported_base(config_type: type) -> None:
    """
    Reject config base types whose instances cannot be changed in place.

    Raises:
        UnsupportedConfigTypeError: For tuple-based (namedtuple) and frozen dataclass types
    """
    if not isinstance(config_type, type):
        raise UnsupportedConfigTypeError(f"{config_type!r} is not a class")
    if issubclass(config_type, tuple):
        raise UnsupportedConfigTypeError(
            f"{config_type.__name__} is tuple-based. Please use a regular class for the config."
        )
    params = getattr(config_type, "__dataclass_params__", None)
    if dataclasses.is_dataclass(config_type) and params is not None and params.frozen:
        raise UnsupportedConfigTypeError(
            f"{config_type.__name__} is a frozen dataclass. Please use a mutable class for the config."
        )
