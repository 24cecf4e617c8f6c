"""
Zowekit Event Types

Processor roles, event categories, the built-in Zowe event names and the
Event record written to an event channel file.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol

ZOWE_APP_NAME = "Zowe"


class ProcessorType(str, Enum):
    """Roles an event processor can play."""
    EMITTER = "emitter"
    WATCHER = "watcher"
    BOTH = "both"

    @property
    def can_emit(self) -> bool:
        return self in (ProcessorType.EMITTER, ProcessorType.BOTH)

    @property
    def can_watch(self) -> bool:
        return self in (ProcessorType.WATCHER, ProcessorType.BOTH)


class EventType(str, Enum):
    """Where an event channel lives and who may emit it."""
    ZOWE_USER = "ZoweUserEvent"
    ZOWE_SHARED = "ZoweSharedEvent"
    CUSTOM_USER = "CustomUserEvent"
    CUSTOM_SHARED = "CustomSharedEvent"


class ZoweUserEvents(str, Enum):
    """Built-in events scoped to the current user."""
    ON_VAULT_CHANGED = "onVaultChanged"


class ZoweSharedEvents(str, Enum):
    """Built-in events shared by everyone using the CLI home."""
    ON_CREDENTIAL_MANAGER_CHANGED = "onCredentialManagerChanged"


EventCallback = Callable[[], Any]


class Disposable(Protocol):  # pragma: no cover
    def close(self) -> None:
        ...


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with microsecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


@dataclass
class Event:
    """
    A single named event channel.

    The serialised form (without subscriptions) is what emitters write to
    ``event_file_path`` and what watchers read back.
    """
    event_name: str
    event_type: EventType
    app_name: str
    event_file_path: Path
    event_time: str = field(default_factory=utc_timestamp)
    subscriptions: List[Any] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "eventTime": self.event_time,
            "eventName": self.event_name,
            "eventType": self.event_type.value,
            "appName": self.app_name,
        }

    def dumps(self) -> str:
        return json.dumps(self.to_json(), indent=2)

    @staticmethod
    def read_time(path: Path) -> Optional[str]:
        """Return the eventTime stored in an event file, or None if unreadable."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        return data.get("eventTime")
