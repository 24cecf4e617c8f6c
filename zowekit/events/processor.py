"""
Zowekit Event Processor

Emits and watches named events for one application. Each event is a small
JSON file; emitting rewrites the file and every process watching it runs its
callbacks.
"""

import logging
import threading
from typing import Dict, Optional, Sequence, Union

from zowekit.config import Config, get_config
from zowekit.errors import EventError, ProcessorPermissionError
from zowekit.events.types import (
    Event,
    EventCallback,
    EventType,
    ProcessorType,
    ZOWE_APP_NAME,
    utc_timestamp,
)
from zowekit.events.utils import (
    EventDisposable,
    close_watchers,
    create_event,
    create_event_watcher,
    create_subscription,
    is_zowe_event,
    normalize_callbacks,
    resolve_event_type,
    write_event,
)
from zowekit.logging import get_logger, log_extra


class EventProcessor:
    """
    Event emitter and/or watcher for a single application.

    Attributes:
        app_name: Application owning the custom event channels
        process_type: Role the processor was created for
        subscribed_events: Events this processor watches, keyed by name
        event_times: Last eventTime seen or written per event name

    Example:
        processor = EventProcessor("zftp", ProcessorType.BOTH)
        disposable = processor.subscribe_shared("onProfileSaved", lambda: print("saved"))
        processor.emit_event("onProfileSaved")
        disposable.close()
    """

    def __init__(
        self,
        app_name: str,
        process_type: ProcessorType,
        logger: Optional[logging.Logger] = None,
        config: Optional[Config] = None,
    ) -> None:
        self.app_name = app_name
        self.process_type = ProcessorType(process_type)
        self.logger = logger or get_logger(__name__)
        self.config = config or get_config()
        self.subscribed_events: Dict[str, Event] = {}
        self.event_times: Dict[str, str] = {}
        self._lock = threading.RLock()

    def _require(self, allowed: bool, operation: str) -> None:
        if not allowed:
            raise ProcessorPermissionError(
                f"Processor does not have correct permissions: {operation}",
                metadata={"app_name": self.app_name, "process_type": self.process_type.value},
            )

    # Watching
    def subscribe_shared(
        self,
        event_name: str,
        callbacks: Union[EventCallback, Sequence[EventCallback]],
    ) -> EventDisposable:
        """
        Watch an event shared by every user of the CLI home.

        Returns:
            Disposable whose ``close()`` stops watching the event
        """
        self._require(self.process_type.can_watch, "subscribe_shared")
        return self._subscribe(event_name, callbacks, resolve_event_type(event_name, user=False))

    def subscribe_user(
        self,
        event_name: str,
        callbacks: Union[EventCallback, Sequence[EventCallback]],
    ) -> EventDisposable:
        """Watch an event scoped to the current user."""
        self._require(self.process_type.can_watch, "subscribe_user")
        return self._subscribe(event_name, callbacks, resolve_event_type(event_name, user=True))

    def _subscribe(
        self,
        event_name: str,
        callbacks: Union[EventCallback, Sequence[EventCallback]],
        event_type: EventType,
    ) -> EventDisposable:
        with self._lock:
            disposable = create_subscription(self, event_name, event_type)
            create_event_watcher(self, event_name, normalize_callbacks(callbacks))
        self.logger.debug(
            "event_subscribed",
            extra=log_extra(app_name=self.app_name, event_name=event_name, event_type=event_type.value),
        )
        return disposable

    def unsubscribe(self, event_name: str) -> None:
        """Stop watching ``event_name`` and close its watch handles."""
        self._require(self.process_type.can_watch, "unsubscribe")
        with self._lock:
            event = self.subscribed_events.pop(event_name, None)
            self.event_times.pop(event_name, None)
        if event is not None:
            close_watchers(event)
            self.logger.debug(
                "event_unsubscribed",
                extra=log_extra(app_name=self.app_name, event_name=event_name),
            )

    # Emitting
    def emit_event(self, event_name: str, *, user: bool = False) -> None:
        """
        Emit a custom event of this application.

        Args:
            event_name: Custom event name
            user: Emit on the per-user channel instead of the shared one
        """
        self._require(self.process_type.can_emit, "emit_event")
        if is_zowe_event(event_name):
            raise ProcessorPermissionError(
                f"Processor not allowed to emit Zowe events: {event_name}",
                metadata={"app_name": self.app_name},
            )
        self._emit(event_name, resolve_event_type(event_name, user=user))

    def emit_zowe_event(self, event_name: str) -> None:
        """Emit one of the built-in Zowe events. Only the Zowe processor may do so."""
        self._require(self.process_type.can_emit, "emit_zowe_event")
        if self.app_name != ZOWE_APP_NAME:
            raise ProcessorPermissionError(
                f"Processor not allowed to emit Zowe events: {event_name}",
                metadata={"app_name": self.app_name},
            )
        if not is_zowe_event(event_name):
            raise EventError(f"Invalid Zowe event: {event_name}")
        self._emit(event_name, resolve_event_type(event_name))

    def _emit(self, event_name: str, event_type: EventType) -> None:
        with self._lock:
            subscribed = self.subscribed_events.get(event_name)
            if subscribed is not None and subscribed.event_type == event_type:
                event = subscribed
            else:
                event = create_event(event_name, self.app_name, event_type, self.config)
            event.event_time = utc_timestamp()
            # recorded before writing so our own watcher skips it
            if event is subscribed or subscribed is None:
                self.event_times[event_name] = event.event_time
        try:
            write_event(event)
        except OSError as exc:
            raise EventError(
                f"Unable to write event {event_name}: {exc}",
                metadata={"path": str(event.event_file_path)},
            ) from exc
        self.logger.info(
            "event_emitted",
            extra=log_extra(app_name=self.app_name, event_name=event_name, event_type=event_type.value),
        )

    # Hooks used by the watch handles
    def record_event_time(self, event_name: str, event_time: str) -> bool:
        """Store ``event_time``; returns False if it was already the latest known time."""
        with self._lock:
            if self.event_times.get(event_name) == event_time:
                return False
            self.event_times[event_name] = event_time
            return True

    def dispatch(self, event_name: str, callbacks: Sequence[EventCallback]) -> None:
        called = 0
        for callback in callbacks:
            try:
                callback()
                called += 1
            except Exception as e:
                self.logger.error(
                    f"Error in event callback: {e}",
                    extra=log_extra(app_name=self.app_name, event_name=event_name, error=str(e)),
                )
        self.logger.debug(
            "event_dispatched",
            extra=log_extra(app_name=self.app_name, event_name=event_name, callbacks_called=called),
        )

    def close(self) -> None:
        """Close every watch handle of every subscription."""
        with self._lock:
            events = list(self.subscribed_events.values())
            self.subscribed_events.clear()
            self.event_times.clear()
        for event in events:
            close_watchers(event)
