from dataclasses import dataclass
from typing import Any

import click
import pytest
from click.testing import CliRunner

from zowekit import extenders
from zowekit.errors import PluginError
from zowekit.plugins import load_plugins


@dataclass
class FakeEntryPoint:
    name: str
    target: Any

    def load(self) -> Any:
        if isinstance(self.target, Exception):
            raise self.target
        return self.target


class FtpPlugin:
    @staticmethod
    def register(registrar, context) -> None:
        @click.command("zftp")
        def zftp():
            """Work with z/OS over FTP."""
            click.echo("zftp called")

        registrar.add_command(zftp)
        registrar.add_profile_type("zftp", version="2.1.0")


class SameCommandPlugin:
    @staticmethod
    def register(registrar, context) -> None:
        registrar.add_command(click.Command("zftp"))


class BrokenPlugin:
    @staticmethod
    def register(registrar, context) -> None:
        raise ValueError("missing settings")


@pytest.fixture
def entry_points(monkeypatch):
    def install(*eps):
        monkeypatch.setattr("zowekit.plugins.loader.iter_entry_points", lambda: list(eps))

    return install


def test_load_plugins_collects_commands_and_profile_types(entry_points) -> None:
    entry_points(FakeEntryPoint("zftp-plugin", FtpPlugin))

    registry = load_plugins()

    assert [name for name, _ in registry.items()] == ["zftp"]
    loaded = registry.plugins["zftp-plugin"]
    assert loaded.commands == ["zftp"]
    assert loaded.profile_types == ["zftp"]
    entry = extenders.read_extenders_json()["profileTypes"]["zftp"]
    assert entry == {"from": ["zftp-plugin"], "version": "2.1.0"}


def test_install_adds_commands_to_group(entry_points) -> None:
    entry_points(FakeEntryPoint("zftp-plugin", FtpPlugin))
    group = click.Group("root")

    load_plugins().install(group)
    result = CliRunner().invoke(group, ["zftp"])

    assert result.exit_code == 0
    assert result.output == "zftp called\n"


def test_install_refuses_built_in_names(entry_points) -> None:
    entry_points(FakeEntryPoint("zftp-plugin", FtpPlugin))
    group = click.Group("root", commands=[click.Command("zftp")])

    with pytest.raises(PluginError, match="tried to replace built-in command zftp"):
        load_plugins().install(group)


def test_duplicate_command_is_rejected(entry_points) -> None:
    entry_points(FakeEntryPoint("first", FtpPlugin), FakeEntryPoint("second", SameCommandPlugin))

    with pytest.raises(PluginError, match="already registered by first"):
        load_plugins()


def test_register_failure_becomes_plugin_error(entry_points) -> None:
    entry_points(FakeEntryPoint("broken", BrokenPlugin))

    with pytest.raises(PluginError, match="Plugin broken failed to register: missing settings"):
        load_plugins()


def test_load_failure_becomes_plugin_error(entry_points) -> None:
    entry_points(FakeEntryPoint("missing", ImportError("No module named 'zftp'")))

    with pytest.raises(PluginError, match="Failed to load plugin missing"):
        load_plugins()


def test_entry_point_without_register_is_skipped(entry_points) -> None:
    entry_points(FakeEntryPoint("plain", object()))

    registry = load_plugins()

    assert registry.plugins == {}
    assert list(registry.items()) == []
