"""events commands: list applications, emit and watch events."""

import threading
import time

import click

from zowekit.cli.common import emit, handle_errors
from zowekit.events import EventOperator, ZOWE_APP_NAME


@click.group("events")
def events():
    """Emit and watch CLI events shared between processes."""
    pass


@events.command("apps")
@click.pass_context
@handle_errors
def list_apps(ctx):
    """List the application names that may own events."""
    apps = [ZOWE_APP_NAME] + EventOperator.get_list_of_apps()
    emit(ctx, apps, "\n".join(apps))


@events.command("emit")
@click.argument("event_name")
@click.option("--app", "-a", "app_name", default=ZOWE_APP_NAME, show_default=True, help="Application name")
@click.option("--user", "-u", is_flag=True, help="Emit on the per-user channel")
@click.pass_context
@handle_errors
def emit_event(ctx, event_name, app_name, user):
    """Emit an event so that watching processes are notified."""
    try:
        if app_name == ZOWE_APP_NAME:
            EventOperator.get_zowe_processor().emit_zowe_event(event_name)
        else:
            EventOperator.get_emitter(app_name).emit_event(event_name, user=user)
    finally:
        EventOperator.delete_processor(app_name)
    emit(ctx, {"success": True, "app": app_name, "event": event_name}, f"✓ Emitted {event_name} for {app_name}")


@events.command("watch")
@click.argument("event_name")
@click.option("--app", "-a", "app_name", default=ZOWE_APP_NAME, show_default=True, help="Application name")
@click.option("--user", "-u", is_flag=True, help="Watch the per-user channel")
@click.option("--count", "-c", type=int, default=1, show_default=True, help="Stop after this many events")
@click.option("--timeout", "-t", type=float, help="Stop after this many seconds")
@click.pass_context
@handle_errors
def watch_event(ctx, event_name, app_name, user, count, timeout):
    """Wait for an event and print a line each time it fires."""
    received = []
    done = threading.Event()

    def on_event():
        received.append(time.time())
        click.echo(f"Event {event_name} received ({len(received)})")
        if count and len(received) >= count:
            done.set()

    watcher = EventOperator.get_watcher(app_name)
    try:
        if user:
            watcher.subscribe_user(event_name, on_event)
        else:
            watcher.subscribe_shared(event_name, on_event)
        done.wait(timeout)
    finally:
        EventOperator.delete_watcher(app_name)
    if not done.is_set() and not received:
        emit(ctx, {"success": False, "received": 0}, f"No {event_name} event within {timeout} seconds")
        ctx.exit(1)
    emit(ctx, {"success": True, "received": len(received)}, None)
