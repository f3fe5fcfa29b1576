"""
Config file persistence.

Config files live next to the host's own data folder, in a folder named after
the config type's group (or the host itself when the type declares no group)::

    <data_root>/..
        <group_name or host_name>/
            exampleConfig.json

so several hosts that declare the same group share one folder. List
documents are stored flat in the host's own data folder instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

from karasu_config import descriptor
from karasu_config.base import new_default
from karasu_config.codec import Codec, get_codec
from karasu_config.errors import ConfigIOError, InstantiationError
from karasu_config.settings import LibrarySettings, get_settings
from karasu_config.utils.file_writer import write_text_atomic, write_text_direct
from karasu_config.utils.logger import log_error, log_file_operation, log_warning


class ConfigStore:
    """Resolves config file locations and reads and writes them."""

    def __init__(
        self,
        host_name: str,
        data_root: str | Path,
        codec: Optional[Codec] = None,
        settings: Optional[LibrarySettings] = None,
    ):
        self.host_name = host_name
        self.data_root = Path(data_root)
        self._codec = codec
        self._settings = settings

    @property
    def codec(self) -> Codec:
        return self._codec or get_codec()

    @property
    def settings(self) -> LibrarySettings:
        return self._settings or get_settings()

    # -- locations --------------------------------------------------------

    def folder_name(self, config_type: Optional[type]) -> str:
        if config_type is not None:
            group = descriptor.group_name(config_type)
            if group:
                return group
        return self.host_name

    def folder_for(self, config_type: Optional[type]) -> Path:
        return self.data_root.parent / self.folder_name(config_type)

    def config_path(self, file_name: str, config_type: Optional[type]) -> Path:
        return self.folder_for(config_type) / file_name

    def list_path(self, file_name: str) -> Path:
        return self.data_root / file_name

    @staticmethod
    def exists(path: Path) -> bool:
        return path.is_file()

    # -- raw I/O ----------------------------------------------------------

    def ensure_dir(self, path: Path) -> bool:
        """Create ``path`` and its parents; log and return False on failure."""
        try:
            path.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as exc:
            log_error("persistence", f"Failed to create directory {path}", exception=exc)
            return False

    def read_text(self, path: Path) -> str:
        """
        Read a config file.

        Raises:
            ConfigIOError: If the file cannot be read
        """
        try:
            text = path.read_text(encoding=self.settings.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            log_file_operation("read", path, False, str(exc))
            raise ConfigIOError(f"Failed to read {path}: {exc}") from exc
        log_file_operation("read", path, True)
        return text

    def write_text_or_raise(self, path: Path, text: str) -> None:
        """
        Write a config file, replacing it atomically when enabled in settings.

        Raises:
            ConfigIOError: If the directory or file cannot be written
        """
        settings = self.settings
        writer = write_text_atomic if settings.atomic_writes else write_text_direct
        try:
            writer(path, text, encoding=settings.encoding)
        except OSError as exc:
            log_file_operation("write", path, False, str(exc))
            raise ConfigIOError(f"Failed to write {path}: {exc}") from exc
        log_file_operation("write", path, True)

    def write_text(self, path: Path, text: str) -> bool:
        try:
            self.write_text_or_raise(path, text)
            return True
        except ConfigIOError:
            return False

    # -- documents --------------------------------------------------------

    def load_or_create(
        self,
        path: Path,
        config_type: type,
        default_factory: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """
        Decode the config at ``path``, or create it from the default value.

        A missing file is self-healing: the default is built, written and
        returned. An existing file that cannot be read or parsed is an error;
        it is never replaced by a fresh default.

        Raises:
            ConfigIOError: If the file or its folder cannot be read or written
            ParseError: If the existing file does not decode as ``config_type``
            InstantiationError: If the default value cannot be built
        """
        if not self.ensure_dir(path.parent):
            raise ConfigIOError(f"Config folder {path.parent} is not available")

        if not self.exists(path):
            log_warning("persistence", "Config file not found, creating a new one", str(path))
            value = self._build_default(config_type, default_factory)
            self.write_text_or_raise(path, self.codec.encode(value))
            return value

        return self.codec.decode(self.read_text(path), config_type)

    @staticmethod
    def _build_default(
        config_type: type, default_factory: Optional[Callable[[], Any]]
    ) -> Any:
        if default_factory is None:
            return new_default(config_type)
        try:
            return default_factory()
        except Exception as exc:
            raise InstantiationError(
                f"Default factory for {config_type.__name__} failed: {exc}"
            ) from exc
