"""zos-tso and zos-console commands."""

import click

from zowekit.cli.common import emit, get_client, handle_errors
from zowekit.zosconsole import Console
from zowekit.zostso import StartTsoParams, Tso


@click.group("zos-tso")
def tso():
    """Interact with TSO."""
    pass


@tso.group("issue")
def tso_issue():
    """Issue TSO commands."""
    pass


@tso_issue.command("command")
@click.argument("command_text")
@click.option("--account", "-a", required=True, help="TSO account number")
@click.option("--logon-procedure", "-l", default="IZUFPROC", show_default=True, help="Logon procedure")
@click.option("--region-size", "--rs", type=int, default=4096, show_default=True, help="Region size")
@click.pass_context
@handle_errors
def tso_issue_command(ctx, command_text, account, logon_procedure, region_size):
    """Run a TSO command in a new address space and print its output."""
    params = StartTsoParams(proc=logon_procedure, rsize=region_size)
    with get_client(ctx) as client:
        response = Tso(client).issue_command(account, command_text, params)
    emit(
        ctx,
        {
            "success": response.success,
            "commandResponse": response.command_response,
            "servletKey": response.start_response.servlet_key,
        },
        response.command_response,
    )


@click.group("zos-console")
def console():
    """Issue z/OS console commands."""
    pass


@console.group("issue")
def console_issue():
    """Issue console commands."""
    pass


@console_issue.command("command")
@click.argument("command_text")
@click.option("--console-name", "--cn", default="defcn", show_default=True, help="EMCS console name")
@click.option("--system-name", "--sn", help="System to route the command to")
@click.option("--solicited-keyword", "--sk", help="Keyword expected in the solicited response")
@click.pass_context
@handle_errors
def console_issue_command(ctx, command_text, console_name, system_name, solicited_keyword):
    """Issue an MVS console command and print the response."""
    with get_client(ctx) as client:
        response = Console(client).issue_command(
            command_text, console_name=console_name, system=system_name, sol_key=solicited_keyword
        )
    emit(
        ctx,
        {
            "success": response.success,
            "commandResponse": response.command_response,
            "responseKey": response.response_key,
            "keywordDetected": response.keyword_detected,
        },
        response.command_response,
    )
