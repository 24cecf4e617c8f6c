"""
Zowekit CLI

Click-based command-line interface for z/OSMF.
Provides commands for z/OS files, jobs, TSO, console, provisioning,
workflows and events, plus commands contributed by plugins.
"""

from typing import Optional

import click

from zowekit import __version__
from zowekit.cli.common import AliasedGroup
from zowekit.errors import PluginError
from zowekit.logging import get_logger, init_cli_logging, json_logging_from_env
from zowekit.plugins import Registry, load_plugins

logger = get_logger(__name__)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group("zowekit", cls=AliasedGroup)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--profile", "-p", "profile_name", help="zosmf profile to connect with")
@click.option("--host", "-H", help="z/OSMF host name")
@click.option("--port", "-P", type=int, help="z/OSMF port")
@click.option("--user", "-u", help="User name")
@click.option("--password", help="Password")
@click.option("--reject-unauthorized/--no-reject-unauthorized", default=None,
              help="Reject self-signed certificates")
@click.pass_context
def cli(ctx, verbose, json_output, profile_name, host, port, user, password, reject_unauthorized):
    """Zowekit - work with z/OS through z/OSMF."""
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose
    ctx.obj["JSON"] = json_output
    ctx.obj["PROFILE"] = profile_name
    overrides = {
        "host": host,
        "port": port,
        "user": user,
        "password": password,
        "reject_unauthorized": reject_unauthorized,
    }
    ctx.obj["OVERRIDES"] = {k: v for k, v in overrides.items() if v is not None}
    ctx.obj.setdefault("PLUGINS", PLUGINS)

    if verbose:
        init_cli_logging(level="DEBUG", json_output=json_logging_from_env())


@cli.command()
def version():
    """Show version information."""
    click.echo(f"zowekit v{__version__}")


from zowekit.cli.config_cmd import config, docs, plugins  # noqa: E402
from zowekit.cli.events import events  # noqa: E402
from zowekit.cli.files import files  # noqa: E402
from zowekit.cli.jobs import jobs  # noqa: E402
from zowekit.cli.provisioning import provisioning  # noqa: E402
from zowekit.cli.tso import console, tso  # noqa: E402
from zowekit.cli.workflows import workflows  # noqa: E402

for _group, _alias in (
    (files, "files"),
    (jobs, "jobs"),
    (tso, "tso"),
    (console, "console"),
    (provisioning, "pv"),
    (workflows, "wf"),
    (events, None),
    (config, None),
    (plugins, None),
    (docs, None),
):
    cli.add_command(_group)
    if _alias:
        cli.add_alias(_alias, _group.name)


def install_plugins(group: click.Group) -> Optional[Registry]:
    """
    Load entry-point plugins and attach their commands to ``group``.

    A broken plugin must not make the built-in commands unusable, so load
    failures are logged and no plugin commands are installed.
    """
    try:
        registry = load_plugins()
        registry.install(group)
    except PluginError as e:
        logger.warning(f"Plugins not loaded: {e}", extra={"error": str(e)})
        return None
    return registry


PLUGINS = install_plugins(cli)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
