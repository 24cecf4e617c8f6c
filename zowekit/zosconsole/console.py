"""z/OS operator console commands through /zosmf/restconsoles."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from zowekit.base import ZosmfApi
from zowekit.errors import expect_non_blank

RESOURCE = "/zosmf/restconsoles/consoles"
DEFAULT_CONSOLE_NAME = "defcn"

MISSING_COMMAND = "Specify the console command to issue."
MISSING_RESPONSE_KEY = "Specify the command response key."


def normalize_response(text: Optional[str]) -> str:
    """Console output uses carriage returns as line breaks."""
    return (text or "").replace("\r\n", "\n").replace("\r", "\n")


@dataclass
class ConsoleResponse:
    success: bool
    command_response: str
    response_key: Optional[str] = None
    keyword_detected: bool = False
    zosmf_response: Dict[str, Any] = field(default_factory=dict)


class Console(ZosmfApi):
    """
    Issue MVS console commands.

    Example:
        print(Console(client).issue_command("D IPLINFO").command_response)
    """

    def _endpoint(self, console_name: Optional[str]) -> str:
        return f"{RESOURCE}/{console_name or DEFAULT_CONSOLE_NAME}"

    def issue_command(
        self,
        command: str,
        console_name: str = DEFAULT_CONSOLE_NAME,
        system: Optional[str] = None,
        sol_key: Optional[str] = None,
    ) -> ConsoleResponse:
        """Issue a command; ``sol_key`` asks z/OSMF to watch for a keyword in the solicited reply."""
        expect_non_blank(command, MISSING_COMMAND)
        body: Dict[str, Any] = {"cmd": command}
        if system:
            body["system"] = system
        if sol_key:
            body["sol-key"] = sol_key
        self.logger.info("console_command", extra=self.log_extra(console=console_name, system=system))
        data = self.client.put_expect_json(self._endpoint(console_name), json_body=body) or {}
        return ConsoleResponse(
            success=True,
            command_response=normalize_response(data.get("cmd-response")),
            response_key=data.get("cmd-response-key"),
            keyword_detected=str(data.get("sol-key-detected", "")).lower() == "true",
            zosmf_response=data,
        )

    def get_response(self, response_key: str, console_name: str = DEFAULT_CONSOLE_NAME) -> ConsoleResponse:
        """Collect further solicited messages for an earlier command."""
        expect_non_blank(response_key, MISSING_RESPONSE_KEY)
        data = self.client.get_expect_json(f"{self._endpoint(console_name)}/solmsgs/{response_key}") or {}
        return ConsoleResponse(
            success=True,
            command_response=normalize_response(data.get("cmd-response")),
            response_key=response_key,
            keyword_detected=str(data.get("sol-key-detected", "")).lower() == "true",
            zosmf_response=data,
        )
