"""
Zowekit Event Operator

Process-local registry of event processors keyed by application name.
"""

import logging
import threading
from typing import Dict, List, Optional

from zowekit.errors import ApplicationNotFoundError
from zowekit.events.processor import EventProcessor
from zowekit.events.types import ProcessorType, ZOWE_APP_NAME
from zowekit.events.utils import get_list_of_apps
from zowekit.logging import get_logger, log_extra

logger = get_logger(__name__)


class EventOperator:
    """
    Hands out one EventProcessor per application.

    Asking twice for the same application returns the same processor. If the
    second request asks for a different role, the processor is widened to
    ProcessorType.BOTH so it keeps serving both callers.

    Example:
        watcher = EventOperator.get_watcher("zftp")
        watcher.subscribe_shared("onProfileSaved", refresh)
        ...
        EventOperator.delete_watcher("zftp")
    """

    _instances: Dict[str, EventProcessor] = {}
    _lock = threading.RLock()

    @staticmethod
    def get_list_of_apps() -> List[str]:
        """Application names registered in extenders.json."""
        return get_list_of_apps()

    @classmethod
    def _create_processor(
        cls,
        app_name: str,
        process_type: ProcessorType,
        logger_: Optional[logging.Logger] = None,
    ) -> EventProcessor:
        if app_name != ZOWE_APP_NAME:
            apps = cls.get_list_of_apps()
            if app_name not in apps:
                listing = "\n- ".join(apps)
                raise ApplicationNotFoundError(
                    f"Application name not found: {app_name}. "
                    f"Please use an application name from the list:\n- {listing}",
                    metadata={"app_name": app_name},
                )

        with cls._lock:
            processor = cls._instances.get(app_name)
            if processor is None:
                processor = EventProcessor(app_name, process_type, logger_)
                cls._instances[app_name] = processor
                logger.debug(
                    "event_processor_created",
                    extra=log_extra(app_name=app_name, process_type=process_type.value),
                )
            else:
                if processor.process_type != process_type:
                    processor.process_type = ProcessorType.BOTH
                if logger_ is not None:
                    processor.logger = logger_
        return processor

    @classmethod
    def get_zowe_processor(cls) -> EventProcessor:
        """Processor of the built-in Zowe events (emits and watches)."""
        return cls._create_processor(ZOWE_APP_NAME, ProcessorType.BOTH, get_logger("zowekit.events.zowe"))

    @classmethod
    def get_processor(cls, app_name: str, logger_: Optional[logging.Logger] = None) -> EventProcessor:
        """Processor that can both emit and watch."""
        return cls._create_processor(app_name, ProcessorType.BOTH, logger_)

    @classmethod
    def get_watcher(cls, app_name: str = ZOWE_APP_NAME, logger_: Optional[logging.Logger] = None) -> EventProcessor:
        """Watcher-only processor, for the Zowe events unless ``app_name`` is given."""
        return cls._create_processor(app_name, ProcessorType.WATCHER, logger_)

    @classmethod
    def get_emitter(cls, app_name: str, logger_: Optional[logging.Logger] = None) -> EventProcessor:
        """Emitter-only processor."""
        return cls._create_processor(app_name, ProcessorType.EMITTER, logger_)

    @classmethod
    def delete_emitter(cls, app_name: str) -> None:
        cls._destroy_processor(app_name)

    @classmethod
    def delete_watcher(cls, app_name: str) -> None:
        cls._destroy_processor(app_name)

    @classmethod
    def delete_processor(cls, app_name: str) -> None:
        cls._destroy_processor(app_name)

    @classmethod
    def _destroy_processor(cls, app_name: str) -> None:
        with cls._lock:
            processor = cls._instances.pop(app_name, None)
        if processor is not None:
            processor.close()
            logger.debug("event_processor_destroyed", extra=log_extra(app_name=app_name))

    @classmethod
    def has_processor(cls, app_name: str) -> bool:
        with cls._lock:
            return app_name in cls._instances

    @classmethod
    def _reset_for_tests(cls) -> None:
        """Destroy every processor (tests only)."""
        with cls._lock:
            names = list(cls._instances)
        for name in names:
            cls._destroy_processor(name)
