"""Response envelope shared by every z/OS files operation."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ZosFilesResponse:
    """
    Result of a z/OS files operation.

    Attributes:
        success: Whether the operation completed
        command_response: Human readable summary printed by the CLI
        api_response: Parsed z/OSMF payload (or operation specific data)
    """

    success: bool
    command_response: str
    api_response: Any = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "commandResponse": self.command_response,
            "apiResponse": self.api_response,
            **({"errorMessage": self.error_message} if self.error_message else {}),
        }
