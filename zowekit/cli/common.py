"""
Helpers shared by the CLI command modules: session/client construction,
output in text or JSON, and uniform error reporting.
"""

import functools
import json
import sys
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

import click
from rich.console import Console
from rich.table import Table

from zowekit.config import load_config
from zowekit.logging import get_logger
from zowekit.rest.client import ZosmfRestClient
from zowekit.rest.session import Session

logger = get_logger(__name__)

console = Console()


class AliasedGroup(click.Group):
    """
    A click group whose subcommands may be reached by alias.

    Aliases are registered with ``add_alias`` and resolved in ``get_command``.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.aliases: Dict[str, str] = {}

    def add_alias(self, alias: str, command_name: str) -> None:
        self.aliases[alias] = command_name

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        command = super().get_command(ctx, cmd_name)
        if command is None and cmd_name in self.aliases:
            command = super().get_command(ctx, self.aliases[cmd_name])
        return command

    def resolve_command(self, ctx: click.Context, args: list):
        _, command, remaining = super().resolve_command(ctx, args)
        return (command.name if command else None), command, remaining


def get_client(ctx: click.Context) -> ZosmfRestClient:
    """Create a z/OSMF client from the profile, environment and root options."""
    obj = ctx.find_root().obj or {}
    session = Session.from_config(
        load_config(),
        profile=obj.get("PROFILE"),
        overrides=obj.get("OVERRIDES"),
    )
    return ZosmfRestClient(session, transport=obj.get("TRANSPORT"))


def is_json(ctx: click.Context) -> bool:
    return bool((ctx.find_root().obj or {}).get("JSON"))


def emit(ctx: click.Context, payload: Any, text: Optional[str] = None) -> None:
    """Print ``payload`` as JSON with --json, otherwise print ``text``."""
    if is_json(ctx):
        click.echo(json.dumps(payload, indent=2, default=str))
    elif text is not None:
        click.echo(text)


def print_table(title: str, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    count = 0
    for row in rows:
        table.add_row(*("" if value is None else str(value) for value in row))
        count += 1
    if not count:
        console.print(f"[yellow]No {title.lower()} found[/yellow]")
        return
    console.print(table)


def handle_errors(func: Callable) -> Callable:
    """
    Report failures as ``✗ Error: ...`` on stderr with exit status 1.

    click's own exceptions (usage errors, --help exits) pass through.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (click.exceptions.Exit, click.exceptions.Abort, click.ClickException):
            raise
        except Exception as e:
            logger.debug("command_failed", exc_info=True, extra={"command": func.__name__})
            click.echo(f"✗ Error: {e}", err=True)
            sys.exit(1)

    return wrapper
