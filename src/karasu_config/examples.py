"""Reference config types and host."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from karasu_config.base import BaseConfig
from karasu_config.descriptor import config_file
from karasu_config.host import ConfigHost

PLUGIN_NAME = "KarasuConfigLib"


@config_file("exampleConfig.json", group_name=PLUGIN_NAME, description="Example settings")
@dataclass
class ExampleConfig(BaseConfig):
    exampleString: str = "defaultString"
    exampleInt: int = 42
    exampleBoolean: bool = True


@config_file("exampleConfig.json", group_name=PLUGIN_NAME)
@dataclass
class ExampleBaseConfig(BaseConfig):
    exampleString: str = "defaultString"
    exampleInt: int = 42
    exampleBoolean: bool = True


@config_file("testConfig.json", group_name=PLUGIN_NAME)
@dataclass
class TestConfig(ExampleBaseConfig):
    foo: str = "bar"


class KarasuConfigLib(ConfigHost):
    base_config = ExampleConfig

    def __init__(self, data_folder: str | Path):
        super().__init__(PLUGIN_NAME, data_folder)

    def default_configs(self) -> List[type]:
        return [ExampleConfig, TestConfig]
