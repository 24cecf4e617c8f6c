"""
Zowekit Event Utilities

Helpers shared by the event processor and operator: application lookup,
event classification, channel file locations, subscriptions and watchers.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from zowekit.config import Config, get_config
from zowekit.events.types import (
    Event,
    EventCallback,
    EventType,
    ZOWE_APP_NAME,
    ZoweSharedEvents,
    ZoweUserEvents,
)
from zowekit.events.watcher import FileWatcher
from zowekit.extenders import list_profile_types
from zowekit.logging import get_logger, log_extra

if TYPE_CHECKING:  # pragma: no cover
    from zowekit.events.processor import EventProcessor

logger = get_logger(__name__)


def get_list_of_apps(config: Optional[Config] = None) -> List[str]:
    """Application names allowed to own event channels: the registered profile types."""
    cfg = config or get_config()
    return list_profile_types(cfg.extenders_file)


def is_user_event(event_name: str) -> bool:
    return event_name in {e.value for e in ZoweUserEvents}


def is_shared_event(event_name: str) -> bool:
    return event_name in {e.value for e in ZoweSharedEvents}


def is_zowe_event(event_name: str) -> bool:
    return is_user_event(event_name) or is_shared_event(event_name)


def resolve_event_type(event_name: str, *, user: bool = False) -> EventType:
    """Zowe events have a fixed type; custom events are shared unless ``user`` is set."""
    if is_user_event(event_name):
        return EventType.ZOWE_USER
    if is_shared_event(event_name):
        return EventType.ZOWE_SHARED
    return EventType.CUSTOM_USER if user else EventType.CUSTOM_SHARED


def get_event_dir(event_type: EventType, app_name: str, config: Optional[Config] = None) -> Path:
    """Directory holding the channel files of ``app_name`` for ``event_type``."""
    cfg = config or get_config()
    if event_type in (EventType.ZOWE_USER, EventType.CUSTOM_USER):
        root = cfg.user_events_dir
    else:
        root = cfg.shared_events_dir
    if event_type in (EventType.ZOWE_USER, EventType.ZOWE_SHARED):
        app_name = ZOWE_APP_NAME
    return root / app_name


def ensure_event_file(path: Path) -> None:
    """Create the channel directory and an empty channel file if missing."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.touch()


def create_event(
    event_name: str,
    app_name: str,
    event_type: EventType,
    config: Optional[Config] = None,
) -> Event:
    directory = get_event_dir(event_type, app_name, config)
    return Event(
        event_name=event_name,
        event_type=event_type,
        app_name=app_name,
        event_file_path=directory / event_name,
    )


def write_event(event: Event) -> None:
    """
    Write the event record to its channel file.

    The record is written to a temporary file and moved into place so
    watchers never observe a partially written file.
    """
    ensure_event_file(event.event_file_path)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{event.event_name}.",
        dir=str(event.event_file_path.parent),
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(event.dumps())
        os.replace(tmp_name, event.event_file_path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


@dataclass
class EventDisposable:
    """Handle returned by a subscription; ``close()`` unsubscribes."""
    processor: "EventProcessor"
    event_name: str

    def close(self) -> None:
        self.processor.unsubscribe(self.event_name)


def create_subscription(processor: "EventProcessor", event_name: str, event_type: EventType) -> EventDisposable:
    """Register ``event_name`` on ``processor`` and make sure its channel file exists."""
    event = processor.subscribed_events.get(event_name)
    if event is None:
        event = create_event(event_name, processor.app_name, event_type, processor.config)
        processor.subscribed_events[event_name] = event
    ensure_event_file(event.event_file_path)
    existing_time = Event.read_time(event.event_file_path)
    if existing_time is not None:
        processor.event_times.setdefault(event_name, existing_time)
    return EventDisposable(processor=processor, event_name=event_name)


def create_event_watcher(
    processor: "EventProcessor",
    event_name: str,
    callbacks: Sequence[EventCallback],
) -> FileWatcher:
    """
    Start a watch handle on the channel file of ``event_name``.

    Changes whose eventTime matches the one the processor last recorded
    are its own emissions and are dropped.
    """
    event = processor.subscribed_events[event_name]
    watcher = FileWatcher(event.event_file_path, interval=processor.config.event_poll_interval)

    def on_change(kind: str, path: Path) -> None:
        event_time = Event.read_time(path)
        if event_time is None:
            return
        if not processor.record_event_time(event_name, event_time):
            logger.debug(
                "event_ignored",
                extra=log_extra(app_name=processor.app_name, event_name=event_name, event_time=event_time),
            )
            return
        processor.dispatch(event_name, callbacks)

    watcher.on("change", on_change)
    event.subscriptions.append(watcher)
    return watcher.start()


def normalize_callbacks(callbacks: Union[EventCallback, Sequence[EventCallback]]) -> List[EventCallback]:
    if callable(callbacks):
        return [callbacks]
    return list(callbacks)


def close_watchers(event: Event) -> None:
    """Close every watch handle attached to ``event``."""
    for subscription in event.subscriptions:
        subscription.remove_all_listeners("change").close()
    event.subscriptions.clear()
