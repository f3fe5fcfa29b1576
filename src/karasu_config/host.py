"""
Host adapter: the application side of the registry lifecycle.

A host supplies its name and data folder, declares its default config types,
and calls :meth:`ConfigHost.on_enable` at startup and
:meth:`ConfigHost.on_disable` at shutdown.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from karasu_config import descriptor
from karasu_config.base import BaseConfig, ensure_supported_base
from karasu_config.codec import Codec
from karasu_config.registry import ConfigRegistry
from karasu_config.results import BatchReport
from karasu_config.utils.logger import log_info


class ConfigHost(ABC):
    """
    Base class for applications that keep their settings in a registry.

    Subclasses list their config types in :meth:`default_configs`; every type
    must carry a descriptor with a file name.
    """

    #: Base type of this host's configs; also the item type of list documents
    base_config: type = BaseConfig

    def __init__(self, name: str, data_folder: str | Path, codec: Optional[Codec] = None):
        self.name = name
        self.data_folder = Path(data_folder)
        self.registry = ConfigRegistry(
            name, self.data_folder, base_type=self.base_config, codec=codec
        )

    @abstractmethod
    def default_configs(self) -> Sequence[type]:
        """Config types registered when the host starts."""

    def on_enable(self) -> BatchReport:
        """
        Register the default config types, then load every tracked config.

        Raises:
            UnsupportedConfigTypeError: If ``base_config`` cannot be mutated in place
            MetadataMissingError: If a default config type declares no file name
        """
        ensure_supported_base(self.base_config)
        self.initialize_default_configs()
        return self.registry.load_all()

    def on_disable(self) -> BatchReport:
        """Save every tracked config."""
        return self.registry.save_all()

    def initialize_default_configs(self) -> List[type]:
        config_types = list(self.default_configs() or [])
        for config_type in config_types:
            self.registry.register(descriptor.file_name(config_type), config_type)
        log_info("host", f"Initialized {len(config_types)} default config files", self.name)
        return config_types

    def config_folder(self, config_type: Optional[type] = None) -> Path:
        """Folder holding the files of ``config_type`` (or of ungrouped types)."""
        return self.registry.store.folder_for(config_type)


class StaticHost(ConfigHost):
    """Host whose default config types are fixed at construction time."""

    def __init__(
        self,
        name: str,
        data_folder: str | Path,
        default_configs: Sequence[type] = (),
        base_config: Optional[type] = None,
        codec: Optional[Codec] = None,
    ):
        if base_config is not None:
            self.base_config = base_config
        self._default_configs = list(default_configs)
        super().__init__(name, data_folder, codec=codec)

    def default_configs(self) -> Sequence[type]:
        return self._default_configs
