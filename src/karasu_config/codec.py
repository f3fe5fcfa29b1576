"""
JSON codec for config values.

The codec turns config instances into pretty-printed JSON text and back. Any
dataclass, pydantic model or plain class with a zero-argument constructor is
handled structurally; per-type behaviour can be overridden by registering a
:class:`ValueAdapter` for an exact type, or an :class:`AdapterFactory` that
decides per type (e.g. for a whole class hierarchy).

Registration never patches the codec in place. Each call rebuilds an
immutable :class:`_BuiltCodec` snapshot from the current adapter and factory
mappings and swaps it in under the codec lock, so concurrent ``encode`` and
``decode`` calls always see either the old or the new snapshot. Adapter
precedence is reproducible from the mappings alone:

1. exact-type adapters,
2. factories, in key registration order (first non-None adapter wins),
3. structural encoding.
"""

from __future__ import annotations

import collections.abc
from collections.abc import Hashable
import dataclasses
import json
import threading
import types
from datetime import date, datetime
from enum import Enum
from pathlib import PurePath
from typing import (
    Any,
    Callable,
    Dict,
    Literal,
    Mapping,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel, ValidationError

from karasu_config.errors import EncodeError, InstantiationError, ParseError
from karasu_config.settings import get_settings

NoneType = type(None)

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)
_SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


class ValueAdapter:
    """
    Encoder/decoder override for one type.

    ``encode`` returns a JSON-compatible value (dict, list, str, int, float,
    bool or None); ``decode`` receives what ``json.loads`` produced for it.
    Raise :class:`ParseError` (or ``ValueError``/``TypeError``) from
    ``decode`` when the data does not fit.
    """

    def encode(self, value: Any) -> Any:
        raise NotImplementedError

    def decode(self, data: Any) -> Any:
        raise NotImplementedError


class FunctionAdapter(ValueAdapter):
    """Adapter built from a pair of plain functions."""

    def __init__(self, encode: Callable[[Any], Any], decode: Callable[[Any], Any]):
        self._encode = encode
        self._decode = decode

    def encode(self, value: Any) -> Any:
        return self._encode(value)

    def decode(self, data: Any) -> Any:
        return self._decode(data)


class AdapterFactory:
    """Produces adapters on demand; return None to decline a type."""

    def create(self, codec: "_BuiltCodec", target_type: Any) -> Optional[ValueAdapter]:
        raise NotImplementedError


class _BuiltCodec:
    """Immutable snapshot of adapters and factories, plus the structural rules."""

    def __init__(
        self,
        adapters: Mapping[Any, ValueAdapter],
        factories: Tuple[AdapterFactory, ...],
        indent: Optional[int],
    ):
        self._adapters: Dict[Any, ValueAdapter] = dict(adapters)
        self._factories = factories
        self.indent = indent

    # -- text layer -------------------------------------------------------

    def encode(self, value: Any) -> str:
        return json.dumps(self.to_data(value), indent=self.indent, ensure_ascii=False)

    def decode(self, text: str, target_type: Any) -> Any:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Malformed JSON: {exc}") from exc
        return self.from_data(data, target_type)

    # -- adapter lookup ---------------------------------------------------

    def adapter_for(self, target_type: Any) -> Optional[ValueAdapter]:
        if isinstance(target_type, Hashable):
            adapter = self._adapters.get(target_type)
            if adapter is not None:
                return adapter
        for factory in self._factories:
            adapter = factory.create(self, target_type)
            if adapter is not None:
                return adapter
        return None

    # -- encoding ---------------------------------------------------------

    def to_data(self, value: Any) -> Any:
        adapter = self.adapter_for(type(value))
        if adapter is not None:
            return adapter.encode(value)
        if isinstance(value, Enum):
            return self.to_data(value.value)
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, PurePath):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json")
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {
                field.name: self.to_data(getattr(value, field.name))
                for field in dataclasses.fields(value)
            }
        if isinstance(value, collections.abc.Mapping):
            return {self._encode_key(key): self.to_data(item) for key, item in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.to_data(item) for item in value]
        if hasattr(value, "__dict__") and not isinstance(value, type):
            return {
                name: self.to_data(item)
                for name, item in vars(value).items()
                if not name.startswith("_")
            }
        raise EncodeError(f"Cannot encode value of type {type(value).__name__}")

    def _encode_key(self, key: Any) -> str:
        if isinstance(key, Enum):
            key = key.value
        if isinstance(key, (str, int, float, bool)):
            return str(key)
        raise EncodeError(f"Cannot use {type(key).__name__} as a JSON object key")

    # -- decoding ---------------------------------------------------------

    def from_data(self, data: Any, target_type: Any) -> Any:
        if target_type is Any or target_type is object or isinstance(target_type, str):
            return data

        adapter = self.adapter_for(target_type)
        if adapter is not None:
            try:
                return adapter.decode(data)
            except ParseError:
                raise
            except (ValueError, TypeError, KeyError) as exc:
                raise ParseError(
                    f"Adapter for {_name(target_type)} rejected {data!r}: {exc}"
                ) from exc

        origin = get_origin(target_type)
        if origin is not None:
            return self._from_generic(data, target_type, origin, get_args(target_type))

        if target_type is None or target_type is NoneType:
            if data is not None:
                raise ParseError(f"Expected null, got {data!r}")
            return None
        if not isinstance(target_type, type):
            return data
        return self._from_class(data, target_type)

    def _from_generic(self, data: Any, target_type: Any, origin: Any, args: Tuple[Any, ...]) -> Any:
        if origin is Union or origin is types.UnionType:
            if data is None and NoneType in args:
                return None
            errors = []
            for arm in args:
                if arm is NoneType:
                    continue
                try:
                    return self.from_data(data, arm)
                except ParseError as exc:
                    errors.append(str(exc))
            raise ParseError(f"{data!r} matches no member of {target_type}: {'; '.join(errors)}")

        if origin is Literal:
            if data not in args:
                raise ParseError(f"Expected one of {args!r}, got {data!r}")
            return data

        if origin is tuple:
            items = self._expect(data, list, target_type)
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(self.from_data(item, args[0]) for item in items)
            if args and len(args) != len(items):
                raise ParseError(f"Expected {len(args)} items for {target_type}, got {len(items)}")
            if not args:
                return tuple(items)
            return tuple(self.from_data(item, arm) for item, arm in zip(items, args))

        item_type = args[0] if args else Any
        if origin in _SET_ORIGINS:
            items = self._expect(data, list, target_type)
            decoded = {self.from_data(item, item_type) for item in items}
            return frozenset(decoded) if origin is frozenset else decoded
        if origin in _SEQUENCE_ORIGINS:
            items = self._expect(data, list, target_type)
            return [self.from_data(item, item_type) for item in items]
        if origin in _MAPPING_ORIGINS:
            mapping = self._expect(data, dict, target_type)
            key_type, value_type = (args + (Any, Any))[:2] if args else (Any, Any)
            return {
                self._decode_key(key, key_type): self.from_data(item, value_type)
                for key, item in mapping.items()
            }
        if isinstance(origin, type):
            # Parameterized user generics decode as their origin class
            return self._from_class(data, origin)
        return data

    def _from_class(self, data: Any, cls: type) -> Any:
        if issubclass(cls, Enum):
            try:
                return cls(data)
            except ValueError as exc:
                raise ParseError(f"{data!r} is not a valid {cls.__name__}") from exc
        if cls is bool:
            if not isinstance(data, bool):
                raise ParseError(f"Expected bool, got {data!r}")
            return data
        if cls is int:
            if not isinstance(data, int) or isinstance(data, bool):
                raise ParseError(f"Expected int, got {data!r}")
            return data
        if cls is float:
            if not isinstance(data, (int, float)) or isinstance(data, bool):
                raise ParseError(f"Expected float, got {data!r}")
            return float(data)
        if cls is str:
            if not isinstance(data, str):
                raise ParseError(f"Expected string, got {data!r}")
            return data
        if issubclass(cls, PurePath):
            return cls(self._expect(data, str, cls))
        if issubclass(cls, datetime) or issubclass(cls, date):
            try:
                return cls.fromisoformat(self._expect(data, str, cls))
            except ValueError as exc:
                raise ParseError(f"{data!r} is not an ISO {cls.__name__}") from exc
        if issubclass(cls, BaseModel):
            try:
                return cls.model_validate(data)
            except ValidationError as exc:
                raise ParseError(f"Invalid {cls.__name__}: {exc}") from exc
        if dataclasses.is_dataclass(cls):
            return self._from_dataclass(data, cls)
        if cls in (list, tuple, set, frozenset):
            return cls(self._expect(data, list, cls))
        if cls is dict:
            return self._expect(data, dict, cls)
        return self._from_object(data, cls)

    def _from_dataclass(self, data: Any, cls: type) -> Any:
        payload = self._expect(data, dict, cls)
        hints = _type_hints(cls)
        init_values: Dict[str, Any] = {}
        late_values: Dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            if field.name not in payload:
                continue
            value = self.from_data(payload[field.name], hints.get(field.name, Any))
            if field.init:
                init_values[field.name] = value
            else:
                late_values[field.name] = value
        try:
            instance = cls(**init_values)
        except TypeError as exc:
            raise ParseError(f"Cannot build {cls.__name__}: {exc}") from exc
        for name, value in late_values.items():
            object.__setattr__(instance, name, value)
        return instance

    def _from_object(self, data: Any, cls: type) -> Any:
        payload = self._expect(data, dict, cls)
        try:
            instance = cls()
        except Exception as exc:
            raise InstantiationError(
                f"{cls.__name__} needs a zero-argument constructor to be decoded: {exc}"
            ) from exc
        attributes = getattr(instance, "__dict__", None)
        if attributes is None:
            raise ParseError(
                f"{cls.__name__} has no instance attributes; register an adapter for it"
            )
        hints = _type_hints(cls)
        if payload and not hints and not any(not name.startswith("_") for name in attributes):
            raise ParseError(
                f"{cls.__name__} has no fields to decode {sorted(payload)} into; "
                "register an adapter for it"
            )
        for name, raw in payload.items():
            if name.startswith("_") or name not in attributes:
                continue
            current = attributes[name]
            declared = hints.get(name)
            if declared is None:
                declared = Any if current is None else type(current)
            setattr(instance, name, self.from_data(raw, declared))
        return instance

    def _decode_key(self, key: str, key_type: Any) -> Any:
        if key_type is Any or key_type is str:
            return key
        if key_type is int:
            try:
                return int(key)
            except ValueError as exc:
                raise ParseError(f"Expected integer key, got {key!r}") from exc
        if isinstance(key_type, type) and issubclass(key_type, Enum):
            return self._from_class(key, key_type)
        return key

    @staticmethod
    def _expect(data: Any, kind: type, target: Any) -> Any:
        if not isinstance(data, kind):
            raise ParseError(
                f"Expected JSON {_JSON_NAMES[kind]} for {_name(target)}, got {type(data).__name__}"
            )
        return data


_JSON_NAMES = {dict: "object", list: "array", str: "string"}


def _type_hints(cls: type) -> Dict[str, Any]:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable forward references decode as Any
        hints: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def _name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))


class Codec:
    """
    Extensible JSON codec.

    Holds the adapter and factory mappings and the current built snapshot.
    Most callers use the process-wide instance from :func:`get_codec`; a
    registry may be handed its own instance to keep its adapters private.
    """

    def __init__(self, indent: Optional[int] = None):
        self._lock = threading.RLock()
        self._adapters: Dict[Any, ValueAdapter] = {}
        self._factories: Dict[Hashable, AdapterFactory] = {}
        self._indent = get_settings().json_indent if indent is None else indent
        self._built = self._build()

    def _build(self) -> _BuiltCodec:
        return _BuiltCodec(self._adapters, tuple(self._factories.values()), self._indent)

    @property
    def built(self) -> _BuiltCodec:
        return self._built

    def register_adapter(self, target_type: Any, adapter: ValueAdapter) -> None:
        """Use ``adapter`` for values of exactly ``target_type`` from now on."""
        with self._lock:
            self._adapters[target_type] = adapter
            self._built = self._build()

    def register_adapter_factory(self, key: Hashable, factory: AdapterFactory) -> None:
        """Add (or replace, for an existing ``key``) an adapter factory."""
        with self._lock:
            self._factories[key] = factory
            self._built = self._build()

    def encode(self, value: Any) -> str:
        return self._built.encode(value)

    def decode(self, text: str, target_type: Any) -> Any:
        return self._built.decode(text, target_type)

    def to_data(self, value: Any) -> Any:
        return self._built.to_data(value)

    def from_data(self, data: Any, target_type: Any) -> Any:
        return self._built.from_data(data, target_type)


# Global codec instance
_codec: Codec | None = None
_codec_lock = threading.Lock()


def get_codec() -> Codec:
    """Get the process-wide codec, creating it on first use."""
    global _codec
    with _codec_lock:
        if _codec is None:
            _codec = Codec()
        return _codec


def reset_codec() -> None:
    """Discard the process-wide codec and every adapter registered on it."""
    global _codec
    with _codec_lock:
        _codec = None


def register_type_adapter(target_type: Any, adapter: ValueAdapter) -> None:
    get_codec().register_adapter(target_type, adapter)


def register_type_adapter_factory(key: Hashable, factory: AdapterFactory) -> None:
    get_codec().register_adapter_factory(key, factory)


def encode(value: Any) -> str:
    return get_codec().encode(value)


def decode(text: str, target_type: Any) -> Any:
    return get_codec().decode(text, target_type)
