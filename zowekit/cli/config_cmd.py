"""config, plugins and docs commands."""

import json
from pathlib import Path

import click

from zowekit.cli.common import emit, handle_errors, is_json, print_table
from zowekit.config import get_config
from zowekit.profiles import list_profiles, set_profile_property


def _coerce_value(value: str):
    """Numbers and the literals true/false become JSON scalars; anything else stays text."""
    try:
        parsed = json.loads(value)
    except ValueError:
        return value
    if isinstance(parsed, (bool, int, float)):
        return parsed
    return value


@click.group("config")
def config():
    """Show and change team configuration profiles."""
    pass


@config.command("list")
@click.pass_context
@handle_errors
def config_list(ctx):
    """List the profiles of the team configuration."""
    profiles = list_profiles()
    if is_json(ctx):
        emit(ctx, profiles)
        return
    print_table(
        "Profiles",
        ["Name", "Type", "Default", "Properties"],
        ((name, p["type"], "yes" if p["default"] else "", ", ".join(p["properties"])) for name, p in profiles.items()),
    )


@config.command("set")
@click.argument("profile_name")
@click.argument("key")
@click.argument("value")
@click.pass_context
@handle_errors
def config_set(ctx, profile_name, key, value):
    """Set a profile property, e.g. ``config set lpar1 port 443``."""
    secure = set_profile_property(profile_name, key, _coerce_value(value))
    emit(
        ctx,
        {"success": True, "profile": profile_name, "property": key, "secure": secure},
        f"✓ Set {key} on profile {profile_name}",
    )


@click.group("plugins")
def plugins():
    """Inspect installed plugins."""
    pass


@plugins.command("list")
@click.pass_context
@handle_errors
def plugins_list(ctx):
    """List the loaded plugins with their commands and profile types."""
    registry = ctx.find_root().obj.get("PLUGINS")
    loaded = list(registry.plugins.values()) if registry else []
    if is_json(ctx):
        emit(ctx, [
            {"name": p.name, "commands": p.commands, "profileTypes": p.profile_types} for p in loaded
        ])
        return
    print_table(
        "Plugins",
        ["Name", "Commands", "Profile types"],
        ((p.name, ", ".join(p.commands), ", ".join(p.profile_types)) for p in loaded),
    )


@click.group("docs")
def docs():
    """Generate documentation."""
    pass


@docs.command("generate")
@click.option(
    "--output-dir", "-o", type=click.Path(file_okay=False), help="Output directory (default: <cli home>/web-help/cmd_docs)"
)
@click.pass_context
@handle_errors
def docs_generate(ctx, output_dir):
    """Write HTML help pages for every command."""
    from zowekit.docs import generate_help_pages

    target = Path(output_dir) if output_dir else get_config().cli_home / "web-help" / "cmd_docs"
    root = ctx.find_root()
    count = generate_help_pages(root.command, target, root_name=root.info_name or "zowekit")
    emit(
        ctx,
        {"success": True, "pages": count, "outputDir": str(target)},
        f"✓ Generated documentation pages for {count} commands and groups in {target}",
    )
