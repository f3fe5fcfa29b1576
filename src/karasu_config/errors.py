"""
Exception types for karasu-config.

Lower layers (descriptor resolution, codec, persistence) raise these; the
registry catches them, logs the cause and reports failure to its caller.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Error categories shared by all library exceptions."""

    METADATA_MISSING = "METADATA_MISSING"
    INSTANTIATION = "INSTANTIATION"
    IO = "IO"
    PARSE = "PARSE"
    ENCODE = "ENCODE"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"


class ConfigLibError(Exception):
    """Base class for every error raised by karasu-config."""

    kind: ErrorKind = ErrorKind.IO


class MetadataMissingError(ConfigLibError, LookupError):
    """A config type has no descriptor, or its descriptor has no file name."""

    kind = ErrorKind.METADATA_MISSING


class InstantiationError(ConfigLibError):
    """The default value of a config type could not be constructed."""

    kind = ErrorKind.INSTANTIATION


class ConfigIOError(ConfigLibError, OSError):
    """Directory creation, read or write failed."""

    kind = ErrorKind.IO


class ParseError(ConfigLibError, ValueError):
    """Text is not valid JSON or does not fit the requested type."""

    kind = ErrorKind.PARSE


class EncodeError(ConfigLibError, TypeError):
    """A value has no JSON representation."""

    kind = ErrorKind.ENCODE


class TypeMismatchError(ConfigLibError, TypeError):
    """A cached entry is not an instance of the type the caller asked for."""

    kind = ErrorKind.TYPE_MISMATCH

    def __init__(self, file_name: str, expected: type, actual: type):
        super().__init__(
            f"Config {file_name} is a {actual.__name__}, not a {expected.__name__}"
        )
        self.file_name = file_name
        self.expected = expected
        self.actual = actual


class UnsupportedConfigTypeError(ConfigLibError, TypeError):
    """A config base type cannot be mutated in place (frozen or tuple-based)."""

    kind = ErrorKind.UNSUPPORTED_TYPE
