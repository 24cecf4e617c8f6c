"""Plugin loading utilities for zowekit."""

from dataclasses import dataclass
from importlib import metadata
from typing import Iterable, Optional, Protocol

import click

from zowekit.config import Config

ENTRY_POINT_GROUP = "zowekit.plugins"


@dataclass(frozen=True)
class PluginContext:
    config: Config


class PluginRegistrar(Protocol):  # pragma: no cover
    def add_command(self, command: click.Command) -> None:
        ...

    def add_profile_type(self, profile_type: str, version: Optional[str] = None) -> None:
        ...


class ZowekitPlugin(Protocol):  # pragma: no cover
    def register(self, registrar: PluginRegistrar, context: PluginContext) -> None:
        ...


def iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=ENTRY_POINT_GROUP)


from zowekit.plugins.loader import Registry, load_plugins  # noqa: E402

__all__ = [
    "ENTRY_POINT_GROUP",
    "PluginContext",
    "PluginRegistrar",
    "Registry",
    "ZowekitPlugin",
    "iter_entry_points",
    "load_plugins",
]
