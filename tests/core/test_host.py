"""End-to-end tests driving the registry through a host."""

import json

import pytest

from karasu_config import examples
from karasu_config.errors import MetadataMissingError, UnsupportedConfigTypeError
from karasu_config.host import StaticHost
from karasu_config.results import OutcomeStatus
from tests.fixtures.config_types import (
    FrozenConfig,
    PointConfig,
    ServerConfig,
    UndescribedConfig,
)


@pytest.fixture
def host(plugins_dir):
    return examples.KarasuConfigLib(plugins_dir / examples.PLUGIN_NAME)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_enable_writes_default_file(host, plugins_dir):
    report = host.on_enable()

    path = plugins_dir / "KarasuConfigLib" / "exampleConfig.json"
    assert _read(path) == {
        "exampleString": "defaultString",
        "exampleInt": 42,
        "exampleBoolean": True,
    }
    assert report.ok
    assert set(report.outcomes) == {"exampleConfig.json", "testConfig.json"}


def test_edit_and_save_round_trips(host, plugins_dir):
    host.on_enable()
    config = host.registry.get("exampleConfig.json", examples.ExampleConfig)
    config.exampleInt = 99

    assert host.registry.save("exampleConfig.json")

    text = (plugins_dir / "KarasuConfigLib" / "exampleConfig.json").read_text(encoding="utf-8")
    decoded = examples.ExampleConfig.from_json(text)
    assert decoded.exampleInt == 99
    assert decoded.exampleString == "defaultString"
    assert decoded.exampleBoolean is True


def test_get_all_of_type_includes_subclasses(registry):
    base = registry.register("base.json", examples.ExampleBaseConfig)
    derived = registry.register("testConfig.json", examples.TestConfig)

    assert registry.get_all_of_type(examples.ExampleBaseConfig) == [base, derived]
    assert registry.get_all_of_type(examples.TestConfig) == [derived]


def test_profiles_list_scenario(host, plugins_dir):
    profiles_file = plugins_dir / "KarasuConfigLib" / "profiles.json"

    profiles = host.registry.load_list("profiles.json", examples.ExampleConfig)
    assert profiles == []
    assert _read(profiles_file) == []

    profiles.append(examples.ExampleConfig(exampleString="night"))
    assert host.registry.save_list(profiles, "profiles.json")
    assert host.registry.load_list("profiles.json") == [
        examples.ExampleConfig(exampleString="night")
    ]


def test_disable_saves_changes(host, plugins_dir):
    host.on_enable()
    host.registry.get("testConfig.json", examples.TestConfig).foo = "baz"

    report = host.on_disable()

    assert report.outcomes["testConfig.json"].status is OutcomeStatus.SAVED
    assert _read(plugins_dir / "KarasuConfigLib" / "testConfig.json")["foo"] == "baz"


def test_enable_reads_existing_files(host, plugins_dir):
    folder = plugins_dir / "KarasuConfigLib"
    folder.mkdir(parents=True)
    (folder / "exampleConfig.json").write_text('{"exampleInt": 7}', encoding="utf-8")

    report = host.on_enable()

    assert report.outcomes["exampleConfig.json"].status is OutcomeStatus.RELOADED
    assert report.outcomes["testConfig.json"].status is OutcomeStatus.RELOADED
    assert (folder / "testConfig.json").is_file()
    assert host.registry.get("exampleConfig.json", examples.ExampleConfig).exampleInt == 7


def test_config_folder(host, plugins_dir):
    assert host.config_folder(examples.ExampleConfig) == plugins_dir / "KarasuConfigLib"
    assert host.config_folder() == plugins_dir / "KarasuConfigLib"


class TestStaticHost:
    def test_default_configs_use_host_folder(self, plugins_dir):
        host = StaticHost("Other", plugins_dir / "Other", [ServerConfig])
        host.on_enable()
        assert (plugins_dir / "Other" / "server.json").is_file()

    def test_default_config_without_descriptor(self, plugins_dir):
        host = StaticHost("Other", plugins_dir / "Other", [UndescribedConfig])
        with pytest.raises(MetadataMissingError):
            host.on_enable()

    @pytest.mark.parametrize("base_config", [FrozenConfig, PointConfig])
    def test_immutable_base_types_are_rejected(self, plugins_dir, base_config):
        host = StaticHost("Other", plugins_dir / "Other", [], base_config=base_config)
        with pytest.raises(UnsupportedConfigTypeError):
            host.on_enable()

    def test_two_hosts_share_a_group_folder(self, plugins_dir):
        first = StaticHost("First", plugins_dir / "First", [examples.ExampleConfig])
        second = StaticHost("Second", plugins_dir / "Second", [examples.ExampleConfig])
        first.on_enable()
        first.registry.get("exampleConfig.json", examples.ExampleConfig).exampleInt = 5
        first.on_disable()

        second.on_enable()
        assert second.registry.get("exampleConfig.json", examples.ExampleConfig).exampleInt == 5
