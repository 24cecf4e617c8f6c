"""Runtime plugin loading for the zowekit CLI."""

from dataclasses import dataclass, field
from typing import Dict, ItemsView, List, Optional

import click

from zowekit import extenders
from zowekit.config import Config, get_config
from zowekit.errors import PluginError
from zowekit.logging import get_logger
from zowekit.plugins import PluginContext, iter_entry_points

logger = get_logger(__name__)


@dataclass
class RegisteredCommand:
    name: str
    source: str
    command: click.Command


@dataclass
class LoadedPlugin:
    name: str
    commands: List[str] = field(default_factory=list)
    profile_types: List[str] = field(default_factory=list)


class Registry:
    """
    Collects what plugins contribute.

    Commands are installed on a click group with ``install``; profile types
    are recorded in extenders.json right away, with the plugin as source.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._commands: Dict[str, RegisteredCommand] = {}
        self.plugins: Dict[str, LoadedPlugin] = {}
        self._current: Optional[LoadedPlugin] = None

    @property
    def config(self) -> Config:
        return self._config

    def begin(self, plugin_name: str) -> LoadedPlugin:
        self._current = self.plugins.setdefault(plugin_name, LoadedPlugin(name=plugin_name))
        return self._current

    def _source(self) -> str:
        return self._current.name if self._current else "unknown"

    def add_command(self, command: click.Command) -> None:
        name = command.name
        if not name:
            raise PluginError(f"Plugin {self._source()} registered a command without a name")
        if name in self._commands:
            raise PluginError(
                f"Plugin command {name} already registered by {self._commands[name].source}",
                metadata={"command": name, "plugin": self._source()},
            )
        self._commands[name] = RegisteredCommand(name=name, source=self._source(), command=command)
        if self._current:
            self._current.commands.append(name)

    def add_profile_type(self, profile_type: str, version: Optional[str] = None) -> None:
        extenders.add_profile_type(
            profile_type, self._source(), version=version, path=self._config.extenders_file
        )
        if self._current:
            self._current.profile_types.append(profile_type)

    def items(self) -> ItemsView[str, RegisteredCommand]:
        return self._commands.items()

    def install(self, group: click.Group) -> None:
        """Attach plugin commands to ``group``; built-in names cannot be replaced."""
        for name, registered in self._commands.items():
            if name in group.commands:
                raise PluginError(
                    f"Plugin {registered.source} tried to replace built-in command {name}",
                    metadata={"command": name, "plugin": registered.source},
                )
            group.add_command(registered.command, name)


def load_plugins(config: Optional[Config] = None) -> Registry:
    config = config or get_config()
    registry = Registry(config)
    context = PluginContext(config=config)
    for entry_point in iter_entry_points():
        try:
            plugin = entry_point.load()
        except Exception as exc:
            raise PluginError(f"Failed to load plugin {entry_point.name}: {exc}") from exc
        register = getattr(plugin, "register", None)
        if callable(register):
            registry.begin(entry_point.name)
            try:
                register(registry, context)
            except PluginError:
                raise
            except Exception as exc:
                raise PluginError(f"Plugin {entry_point.name} failed to register: {exc}") from exc
            logger.debug("plugin_loaded", extra={"plugin": entry_point.name})
    return registry
