"""
Zowekit Events

Named event channels shared between processes through small files:
- EventProcessor: emits and/or watches events for one application
- EventOperator: process-local registry of processors per application
"""

from zowekit.events.operator import EventOperator
from zowekit.events.processor import EventProcessor
from zowekit.events.types import (
    Event,
    EventType,
    ProcessorType,
    ZOWE_APP_NAME,
    ZoweSharedEvents,
    ZoweUserEvents,
)
from zowekit.events.utils import EventDisposable
from zowekit.events.watcher import FileWatcher

__all__ = [
    "Event",
    "EventDisposable",
    "EventOperator",
    "EventProcessor",
    "EventType",
    "FileWatcher",
    "ProcessorType",
    "ZOWE_APP_NAME",
    "ZoweSharedEvents",
    "ZoweUserEvents",
]
