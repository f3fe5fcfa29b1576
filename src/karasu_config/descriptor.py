"""
Config descriptors: which file a config type lives in, and under which group.

A descriptor is attached to a type once, when the type is defined::

    @config_file("exampleConfig.json", group_name="KarasuConfigLib")
    @dataclass
    class ExampleConfig(BaseConfig):
        ...

Types that cannot be decorated (e.g. models owned by another package) can be
described with :func:`register_descriptor`. Lookups are by exact type
identity; a subclass does not inherit its parent's descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass
import threading
from typing import Any, Callable, Dict, Optional, TypeVar

from karasu_config.errors import MetadataMissingError

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class ConfigDescriptor:
    """Persistence metadata for one config type."""

    file_name: str
    group_name: str = ""
    description: str = ""
    # Produces the default value; the type's own create_default()/constructor otherwise
    factory: Optional[Callable[[], Any]] = None


_descriptors: Dict[type, ConfigDescriptor] = {}
_descriptors_lock = threading.Lock()


def register_descriptor(config_type: type, descriptor: ConfigDescriptor) -> None:
    """Map ``config_type`` to ``descriptor``, replacing any previous mapping."""
    with _descriptors_lock:
        _descriptors[config_type] = descriptor


def unregister_descriptor(config_type: type) -> None:
    with _descriptors_lock:
        _descriptors.pop(config_type, None)


def config_file(
    file_name: str,
    group_name: str = "",
    description: str = "",
    factory: Optional[Callable[[], Any]] = None,
) -> Callable[[T], T]:
    """Class decorator attaching a :class:`ConfigDescriptor` to a config type."""

    def decorate(cls: T) -> T:
        descriptor = ConfigDescriptor(
            file_name=file_name,
            group_name=group_name,
            description=description,
            factory=factory,
        )
        register_descriptor(cls, descriptor)
        return cls

    return decorate


def find(config_type: type) -> Optional[ConfigDescriptor]:
    """Return the descriptor of ``config_type``, or None."""
    with _descriptors_lock:
        return _descriptors.get(config_type)


def has_descriptor(config_type: type) -> bool:
    return find(config_type) is not None


def resolve(config_type: type) -> ConfigDescriptor:
    """
    Return the descriptor of ``config_type``.

    Raises:
        MetadataMissingError: If the type carries no descriptor
    """
    descriptor = find(config_type)
    if descriptor is None:
        raise MetadataMissingError(
            f"{_type_name(config_type)} has no config descriptor"
        )
    return descriptor


def file_name(config_type: type) -> str:
    """
    Return the file name declared for ``config_type``.

    Raises:
        MetadataMissingError: If there is no descriptor or its file name is empty
    """
    name = resolve(config_type).file_name
    if not name:
        raise MetadataMissingError(
            f"{_type_name(config_type)} declares an empty config file name"
        )
    return name


def group_name(config_type: type) -> Optional[str]:
    """Return the declared group name, or None so callers fall back to the host name."""
    descriptor = find(config_type)
    if descriptor is None or not descriptor.group_name:
        return None
    return descriptor.group_name


def description(config_type: type) -> str:
    return resolve(config_type).description


def _type_name(config_type: Any) -> str:
    return getattr(config_type, "__qualname__", repr(config_type))
