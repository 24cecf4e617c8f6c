"""
Zowekit API Base

Defines the base class every z/OSMF API wrapper inherits from.
This provides a consistent interface for the REST client and logging.
"""

from typing import Any, Dict, Optional

from zowekit.errors import expect_defined
from zowekit.logging import get_logger
from zowekit.rest.client import ZosmfRestClient


class ZosmfApi:
    """
    Base class for z/OSMF API wrappers.

    Each wrapper receives a ZosmfRestClient bound to one session; a missing
    client is rejected up front with ``Expect Error: Required object must be
    defined``.

    Example:
        class Ping(ZosmfApi):
            def info(self) -> dict:
                self.logger.debug("ping", extra=self.log_extra())
                return self.client.get_info()
    """

    def __init__(self, client: Optional[ZosmfRestClient]) -> None:
        self.client: ZosmfRestClient = expect_defined(client)
        self.logger = get_logger(f"zowekit.{self.__class__.__name__}")

    def log_extra(self, **extra: Any) -> Dict[str, Any]:
        """Build a structured-logging extra dict tagged with the z/OSMF host."""
        payload: Dict[str, Any] = {"host": self.client.session.host}
        payload.update({k: v for k, v in extra.items() if v is not None})
        return payload
