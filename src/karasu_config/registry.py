"""
In-memory registry of live config instances.

The registry maps a file name to the config instance loaded from (or created
at) that file. Lookups hand out the cached instance itself; mutate it and
call :meth:`ConfigRegistry.save` to persist the change.

Failures of the layers below (I/O, parsing, default construction) are logged
and reported as ``None``/``False``/failed outcomes, leaving the registry in
its last known good state. Two caller errors propagate instead:
``MetadataMissingError`` from :meth:`ConfigRegistry.get_by_type` and
``TypeMismatchError`` from :meth:`ConfigRegistry.get` and
:meth:`ConfigRegistry.register`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from collections.abc import Hashable
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, TypeVar

from karasu_config import descriptor
from karasu_config.base import BaseConfig
from karasu_config.codec import AdapterFactory, Codec, ValueAdapter
from karasu_config.errors import ConfigLibError, TypeMismatchError
from karasu_config.persistence import ConfigStore
from karasu_config.results import BatchReport, Outcome, OutcomeStatus
from karasu_config.utils.logger import log_error, log_info, log_warning

T = TypeVar("T")

MODULE = "registry"


class ConfigRegistry:
    """
    File-backed config registry for one host.

    Args:
        host_name: Name of the owning host; the config folder for types
            without a group name
        data_root: The host's own data folder. Config folders are resolved
            next to it, list documents inside it.
        base_type: Item type used by :meth:`load_list` when none is given
        codec: Codec to use instead of the process-wide one
        store: Persistence store to use instead of one built from the above
    """

    def __init__(
        self,
        host_name: str,
        data_root: str | Path,
        base_type: type = BaseConfig,
        codec: Optional[Codec] = None,
        store: Optional[ConfigStore] = None,
    ):
        self.host_name = host_name
        self.data_root = Path(data_root)
        self.base_type = base_type
        self.store = store or ConfigStore(host_name, self.data_root, codec=codec)
        self._configs: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._configs)

    def __contains__(self, file_name: object) -> bool:
        return self.contains(file_name)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"ConfigRegistry(host={self.host_name!r}, files={self.file_names()})"

    def contains(self, file_name: str) -> bool:
        with self._lock:
            return file_name in self._configs

    def file_names(self) -> List[str]:
        with self._lock:
            return list(self._configs)

    # -- registration and lookup -----------------------------------------

    def register(
        self,
        file_name: str,
        config_type: Type[T],
        default_factory: Optional[Callable[[], T]] = None,
    ) -> Optional[T]:
        """
        Load ``file_name`` as ``config_type`` (creating it if missing) and cache it.

        A name that is already tracked returns the cached instance without
        touching the disk; use :meth:`reload` to pick up external edits.

        Returns:
            The cached instance, or None if loading failed

        Raises:
            TypeMismatchError: If the tracked instance is not a ``config_type``
        """
        with self._lock:
            cached = self._configs.get(file_name)
            if cached is not None:
                return self._checked(file_name, cached, config_type)
            path = self.store.config_path(file_name, config_type)
            try:
                config = self.store.load_or_create(path, config_type, default_factory)
            except ConfigLibError as exc:
                log_error(MODULE, f"Failed to add config {file_name}", str(path), exc)
                return None
            self._configs[file_name] = config
            log_info(MODULE, f"Registered config {file_name}", str(path))
            return config

    def get(self, file_name: str, config_type: Type[T]) -> Optional[T]:
        """
        Return the cached config for ``file_name``, registering it on a miss.

        Raises:
            TypeMismatchError: If the cached instance is not a ``config_type``
        """
        with self._lock:
            config = self._configs.get(file_name)
            if config is None:
                return self.register(file_name, config_type)
            return self._checked(file_name, config, config_type)

    def _checked(self, file_name: str, config: Any, config_type: Type[T]) -> T:
        if not isinstance(config, config_type):
            log_warning(
                MODULE,
                f"Config {file_name} is not an instance of {config_type.__name__}",
            )
            raise TypeMismatchError(file_name, config_type, type(config))
        return config

    def get_by_type(self, config_type: Type[T]) -> Optional[T]:
        """
        Return the config stored under the file name declared by ``config_type``.

        Raises:
            MetadataMissingError: If the type declares no file name
            TypeMismatchError: If that file is cached as another type
        """
        return self.get(descriptor.file_name(config_type), config_type)

    def get_all_of_type(self, config_type: Type[T]) -> List[T]:
        """Every cached config that is an instance of ``config_type`` or a subclass."""
        with self._lock:
            return [config for config in self._configs.values() if isinstance(config, config_type)]

    def description(self, file_name: str) -> str:
        with self._lock:
            config = self._configs.get(file_name)
        if config is None or not descriptor.has_descriptor(type(config)):
            return ""
        return descriptor.description(type(config))

    def config_file(self, file_name: str) -> Optional[Path]:
        """Resolved on-disk path of a tracked config, or None."""
        with self._lock:
            config = self._configs.get(file_name)
            if config is None:
                return None
            return self.store.config_path(file_name, type(config))

    # -- saving -----------------------------------------------------------

    def save(self, file_name: str) -> bool:
        """Write the cached instance of ``file_name`` to disk."""
        with self._lock:
            return self._save(file_name).ok

    def save_all(self) -> BatchReport:
        """Write every cached config; one failure does not stop the others."""
        report = BatchReport()
        with self._lock:
            for file_name in list(self._configs):
                report.record(self._save(file_name))
        log_info(MODULE, f"Saved configs: {report}")
        return report

    def _save(self, file_name: str) -> Outcome:
        config = self._configs.get(file_name)
        if config is None:
            log_warning(MODULE, f"Config {file_name} not found in registry, cannot save")
            return Outcome(file_name, OutcomeStatus.FAILED, KeyError(file_name))
        path = self.store.config_path(file_name, type(config))
        try:
            self.store.write_text_or_raise(path, self.store.codec.encode(config))
        except ConfigLibError as exc:
            log_error(MODULE, f"Failed to save config {file_name}", str(path), exc)
            return Outcome(file_name, OutcomeStatus.FAILED, exc)
        log_info(MODULE, "Config saved", str(path))
        return Outcome(file_name, OutcomeStatus.SAVED)

    # -- reloading --------------------------------------------------------

    def reload(self, file_name: str, config_type: type) -> bool:
        """
        Re-read ``file_name`` from disk and replace the cached instance.

        A deleted file returns False but keeps the cached entry; eviction is
        :meth:`reload_all`'s job. A corrupt file returns False and keeps the
        previous value. Names that are not tracked are not loaded; use
        :meth:`register` for those.
        """
        with self._lock:
            return self._reload(file_name, config_type).ok

    def _reload(self, file_name: str, config_type: type) -> Outcome:
        if file_name not in self._configs:
            log_warning(MODULE, f"Config {file_name} is not registered, cannot reload")
            return Outcome(file_name, OutcomeStatus.FAILED, KeyError(file_name))
        path = self.store.config_path(file_name, config_type)
        if not self.store.exists(path):
            log_warning(MODULE, f"Config file does not exist: {file_name}", str(path))
            return Outcome(
                file_name,
                OutcomeStatus.FAILED,
                FileNotFoundError(str(path)),
            )
        try:
            config = self.store.codec.decode(self.store.read_text(path), config_type)
        except ConfigLibError as exc:
            log_error(MODULE, f"Error reloading config {file_name}", str(path), exc)
            return Outcome(file_name, OutcomeStatus.FAILED, exc)
        self._configs[file_name] = config
        log_info(MODULE, f"Successfully reloaded config: {file_name}")
        return Outcome(file_name, OutcomeStatus.RELOADED)

    def reload_all(self) -> BatchReport:
        """
        Reload every tracked config from disk.

        Entries whose file no longer exists are evicted once the scan is
        complete. ``report.success_count`` is the number of reloaded entries
        and ``report.removed`` lists the evicted ones.
        """
        report = BatchReport()
        with self._lock:
            to_remove: List[str] = []
            for file_name, config in list(self._configs.items()):
                config_type = type(config)
                path = self.store.config_path(file_name, config_type)
                if not self.store.exists(path):
                    log_warning(MODULE, f"Config file does not exist, removing from registry: {file_name}")
                    to_remove.append(file_name)
                    continue
                report.record(self._reload(file_name, config_type))

            for file_name in to_remove:
                del self._configs[file_name]
                report.record(Outcome(file_name, OutcomeStatus.REMOVED))

        log_info(
            MODULE,
            f"Reloaded {report.success_count} configs, removed {len(report.removed)} missing configs",
        )
        return report

    def load_all(self) -> BatchReport:
        """
        Bring every tracked config in line with disk.

        Missing files are recreated from the type's default value; existing
        files are re-read and replace the cached instance.
        """
        report = BatchReport()
        with self._lock:
            for file_name, config in list(self._configs.items()):
                config_type = type(config)
                path = self.store.config_path(file_name, config_type)
                created = not self.store.exists(path)
                try:
                    loaded = self.store.load_or_create(path, config_type)
                except ConfigLibError as exc:
                    log_error(MODULE, f"Failed to load config {file_name}", str(path), exc)
                    report.record(Outcome(file_name, OutcomeStatus.FAILED, exc))
                    continue
                self._configs[file_name] = loaded
                status = OutcomeStatus.CREATED if created else OutcomeStatus.RELOADED
                report.record(Outcome(file_name, status))
        log_info(MODULE, f"Loaded configs: {report}")
        return report

    # -- list documents ---------------------------------------------------

    def save_list(self, items: Optional[Sequence[Any]], file_name: str) -> bool:
        """Write ``items`` as one JSON array at ``<data_root>/<file_name>``."""
        if items is None:
            log_warning(MODULE, "Config list is None, cannot save")
            return False
        path = self.store.list_path(file_name)
        try:
            if not self.store.ensure_dir(path.parent):
                return False
            self.store.write_text_or_raise(path, self.store.codec.encode(list(items)))
        except ConfigLibError as exc:
            log_error(MODULE, "Failed to save config list", str(path), exc)
            return False
        log_info(MODULE, "Config list saved", str(path))
        return True

    def load_list(self, file_name: str, item_type: Optional[type] = None) -> List[Any]:
        """
        Read the JSON array at ``<data_root>/<file_name>``.

        A missing file is created holding an empty array. A file that cannot
        be read or parsed is logged and left untouched, and an empty list is
        returned. Without an item type, a registry on the bare
        :class:`BaseConfig` returns the items as plain JSON values.
        """
        item_type = item_type or self.base_type
        if item_type is BaseConfig:
            item_type = Any
        path = self.store.list_path(file_name)
        if not self.store.exists(path):
            log_warning(
                MODULE,
                f"Config list file not found, creating a new one with empty list: {file_name}",
            )
            empty: List[Any] = []
            self.save_list(empty, file_name)
            return empty
        try:
            items = self.store.codec.decode(self.store.read_text(path), List[item_type])  # type: ignore[valid-type]
        except ConfigLibError as exc:
            log_error(MODULE, "Failed to load config list", str(path), exc)
            return []
        return items if items is not None else []

    # -- codec ------------------------------------------------------------

    def register_adapter(self, target_type: Any, adapter: ValueAdapter) -> None:
        self.store.codec.register_adapter(target_type, adapter)

    def register_adapter_factory(self, key: Hashable, factory: AdapterFactory) -> None:
        self.store.codec.register_adapter_factory(key, factory)
