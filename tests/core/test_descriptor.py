"""Tests for config descriptors and their lookup rules."""

from dataclasses import dataclass

import pytest

from karasu_config import descriptor
from karasu_config.base import BaseConfig
from karasu_config.descriptor import ConfigDescriptor, config_file, register_descriptor
from karasu_config.errors import MetadataMissingError
from tests.fixtures.config_types import (
    EmptyNameConfig,
    ServerConfig,
    SharedConfig,
    UndescribedConfig,
)


class TestResolve:
    def test_decorated_type_resolves(self):
        found = descriptor.resolve(ServerConfig)
        assert found == ConfigDescriptor(file_name="server.json", description="Server settings")

    def test_missing_descriptor_raises(self):
        with pytest.raises(MetadataMissingError):
            descriptor.resolve(UndescribedConfig)

    def test_descriptor_is_not_inherited(self):
        @dataclass
        class ChildOfServer(ServerConfig):
            extra: int = 0

        assert not descriptor.has_descriptor(ChildOfServer)
        with pytest.raises(MetadataMissingError):
            descriptor.file_name(ChildOfServer)


class TestFileName:
    def test_returns_declared_name(self):
        assert descriptor.file_name(SharedConfig) == "shared.json"

    def test_empty_name_is_metadata_missing(self):
        # The descriptor exists, so resolve() succeeds...
        assert descriptor.resolve(EmptyNameConfig).file_name == ""
        # ...but there is no file to map it to.
        with pytest.raises(MetadataMissingError):
            descriptor.file_name(EmptyNameConfig)


class TestGroupNameAndDescription:
    def test_group_name_present(self):
        assert descriptor.group_name(SharedConfig) == "SharedGroup"

    def test_group_name_absent_or_empty_is_none(self):
        assert descriptor.group_name(ServerConfig) is None
        assert descriptor.group_name(UndescribedConfig) is None

    def test_description_defaults_to_empty(self):
        assert descriptor.description(ServerConfig) == "Server settings"
        assert descriptor.description(SharedConfig) == ""

    def test_description_requires_descriptor(self):
        with pytest.raises(MetadataMissingError):
            descriptor.description(UndescribedConfig)


def test_register_descriptor_for_undecorated_type():
    class External(BaseConfig):
        pass

    register_descriptor(External, ConfigDescriptor("external.json", group_name="Ext"))
    try:
        assert descriptor.file_name(External) == "external.json"
        assert descriptor.group_name(External) == "Ext"
    finally:
        descriptor.unregister_descriptor(External)
    assert not descriptor.has_descriptor(External)


def test_decorator_returns_the_class_unchanged():
    @config_file("same.json")
    class Same(BaseConfig):
        pass

    try:
        assert Same.__name__ == "Same"
        assert issubclass(Same, BaseConfig)
    finally:
        descriptor.unregister_descriptor(Same)


def test_descriptor_is_immutable():
    found = descriptor.resolve(ServerConfig)
    with pytest.raises(Exception):
        found.file_name = "other.json"  # type: ignore[misc]
