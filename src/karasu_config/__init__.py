"""
karasu-config - file-backed configuration registry

Declare typed config objects, and the registry keeps them synchronized with
pretty-printed JSON files on disk.

Key Features:
- Descriptor-driven file and folder resolution (shared group folders)
- Create-on-miss defaults; corrupt files reported, never silently reset
- Extensible JSON codec (per-type adapters and adapter factories)
- Best-effort batch save/reload with per-file outcomes
- Thread-safe registry and codec

Package Structure:
- descriptor: config type metadata (file name, group, description)
- codec: JSON encoding and decoding
- persistence: folder resolution and file I/O
- registry: the in-memory config registry
- host: application lifecycle adapter
"""

__version__ = "1.0.0"

from .base import BaseConfig, ensure_supported_base, new_default
from .codec import (
    AdapterFactory,
    Codec,
    FunctionAdapter,
    ValueAdapter,
    decode,
    encode,
    get_codec,
    register_type_adapter,
    register_type_adapter_factory,
    reset_codec,
)
from .descriptor import ConfigDescriptor, config_file, register_descriptor
from .errors import (
    ConfigIOError,
    ConfigLibError,
    EncodeError,
    ErrorKind,
    InstantiationError,
    MetadataMissingError,
    ParseError,
    TypeMismatchError,
    UnsupportedConfigTypeError,
)
from .host import ConfigHost, StaticHost
from .persistence import ConfigStore
from .registry import ConfigRegistry
from .results import BatchReport, Outcome, OutcomeStatus
from .settings import LibrarySettings, get_settings, reset_settings, set_settings

__all__ = [
    "AdapterFactory",
    "BaseConfig",
    "BatchReport",
    "Codec",
    "ConfigDescriptor",
    "ConfigHost",
    "ConfigIOError",
    "ConfigLibError",
    "ConfigRegistry",
    "ConfigStore",
    "EncodeError",
    "ErrorKind",
    "FunctionAdapter",
    "InstantiationError",
    "LibrarySettings",
    "MetadataMissingError",
    "Outcome",
    "OutcomeStatus",
    "ParseError",
    "StaticHost",
    "TypeMismatchError",
    "UnsupportedConfigTypeError",
    "ValueAdapter",
    "config_file",
    "decode",
    "encode",
    "ensure_supported_base",
    "get_codec",
    "get_settings",
    "new_default",
    "register_descriptor",
    "register_type_adapter",
    "register_type_adapter_factory",
    "reset_codec",
    "reset_settings",
    "set_settings",
]
