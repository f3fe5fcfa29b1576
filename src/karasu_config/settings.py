"""Library settings with environment variable overrides."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import os

ENV_PREFIX = "KARASU_CONFIG_"


@dataclass
class LibrarySettings:
    """
    Process-wide settings for karasu-config.

    Values start from the defaults below and are then overridden by
    ``KARASU_CONFIG_<FIELD>`` environment variables, e.g.
    ``KARASU_CONFIG_JSON_INDENT=4`` or ``KARASU_CONFIG_ATOMIC_WRITES=false``.
    """

    log_level: str = "INFO"
    log_file: Optional[str] = None
    json_indent: int = 2
    encoding: str = "utf-8"
    atomic_writes: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "LibrarySettings":
        settings = cls()
        settings._load_from_env(os.environ if environ is None else environ)
        return settings

    def _load_from_env(self, environ: Dict[str, str]) -> None:
        for field in fields(self):
            env_var = f"{ENV_PREFIX}{field.name.upper()}"
            if env_var not in environ:
                continue
            raw = environ[env_var]
            current = getattr(self, field.name)
            if isinstance(current, bool):
                value: Any = _coerce_bool(raw)
            elif isinstance(current, int):
                value = _coerce_int(raw)
            elif current is None:
                # Optional string fields: empty means unset
                value = raw.strip() or None
            else:
                value = raw.strip()
            if isinstance(current, (bool, int)) and type(value) is not type(current):
                raise ValueError(f"Invalid value {raw!r} for {env_var}")
            setattr(self, field.name, value)


def _coerce_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return value


def _coerce_int(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


# Global settings instance
_settings: LibrarySettings | None = None


def get_settings() -> LibrarySettings:
    """Get the global settings instance, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = LibrarySettings.from_env()
    return _settings


def set_settings(settings: LibrarySettings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Drop the global settings so the next access re-reads the environment."""
    global _settings
    _settings = None
