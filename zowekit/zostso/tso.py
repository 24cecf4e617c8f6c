"""
TSO address space management through /zosmf/tsoApp.

A TSO conversation is: start an address space (returns a servlet key),
send input, receive until a ``TSO PROMPT`` arrives, then stop it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from zowekit.base import ZosmfApi
from zowekit.errors import ZoweError, expect_non_blank

RESOURCE = "/zosmf/tsoApp/tso"
TSO_MESSAGE = "TSO MESSAGE"
TSO_PROMPT = "TSO PROMPT"
TSO_RESPONSE = "TSO RESPONSE"
TSO_VERSION = "0100"
MAX_RECEIVES = 100

MISSING_ACCOUNT = "Specify the TSO account number."
MISSING_SERVLET_KEY = "Specify the servlet key of the TSO address space."
MISSING_COMMAND = "Specify the TSO command to issue."


@dataclass
class StartTsoParams:
    proc: str = "IZUFPROC"
    chset: str = "697"
    cpage: str = "1047"
    rows: int = 24
    cols: int = 80
    rsize: int = 4096

    def to_params(self, account: str) -> Dict[str, Any]:
        return {
            "acct": account,
            "proc": self.proc,
            "chset": self.chset,
            "cpage": self.cpage,
            "rows": self.rows,
            "cols": self.cols,
            "rsize": self.rsize,
        }


@dataclass
class TsoResponse:
    """One z/OSMF TSO payload reduced to its messages and prompt flag."""

    servlet_key: Optional[str]
    messages: List[str] = field(default_factory=list)
    prompt: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_zosmf(cls, data: Optional[Dict[str, Any]]) -> "TsoResponse":
        data = data or {}
        messages: List[str] = []
        prompt = False
        for entry in data.get("tsoData") or []:
            if TSO_MESSAGE in entry:
                messages.append(entry[TSO_MESSAGE].get("DATA", ""))
            elif TSO_PROMPT in entry:
                prompt = True
        return cls(servlet_key=data.get("servletKey"), messages=messages, prompt=prompt, raw=data)

    @property
    def text(self) -> str:
        return "\n".join(self.messages)


@dataclass
class IssueResponse:
    success: bool
    command_response: str
    start_response: TsoResponse
    zosmf_responses: List[TsoResponse] = field(default_factory=list)
    stop_response: Optional[Dict[str, Any]] = None


class Tso(ZosmfApi):
    """
    TSO address space operations.

    Example:
        response = Tso(client).issue_command("ACCT#", "TIME")
        print(response.command_response)
    """

    def start(self, account: str, params: Optional[StartTsoParams] = None) -> TsoResponse:
        expect_non_blank(account, MISSING_ACCOUNT)
        params = params or StartTsoParams()
        data = self.client.post_expect_json(RESOURCE, params=params.to_params(account))
        response = TsoResponse.from_zosmf(data)
        if not response.servlet_key:
            raise ZoweError("z/OSMF did not return a servlet key for the TSO address space", metadata={"response": data})
        self.logger.info("tso_started", extra=self.log_extra(servlet_key=response.servlet_key))
        return response

    def send(self, servlet_key: str, data: str) -> TsoResponse:
        expect_non_blank(servlet_key, MISSING_SERVLET_KEY)
        body = {TSO_RESPONSE: {"VERSION": TSO_VERSION, "DATA": data}}
        return TsoResponse.from_zosmf(self.client.put_expect_json(f"{RESOURCE}/{servlet_key}", json_body=body))

    def receive(self, servlet_key: str) -> TsoResponse:
        expect_non_blank(servlet_key, MISSING_SERVLET_KEY)
        return TsoResponse.from_zosmf(self.client.get_expect_json(f"{RESOURCE}/{servlet_key}"))

    def stop(self, servlet_key: str) -> Dict[str, Any]:
        expect_non_blank(servlet_key, MISSING_SERVLET_KEY)
        data = self.client.delete_expect_json(f"{RESOURCE}/{servlet_key}") or {}
        self.logger.info("tso_stopped", extra=self.log_extra(servlet_key=servlet_key))
        return data

    def _receive_until_prompt(self, servlet_key: str, first: TsoResponse) -> List[TsoResponse]:
        responses = [first]
        current = first
        receives = 0
        while not current.prompt:
            if receives >= MAX_RECEIVES:
                raise ZoweError(
                    f"No TSO prompt received after {MAX_RECEIVES} attempts",
                    metadata={"servlet_key": servlet_key},
                )
            current = self.receive(servlet_key)
            responses.append(current)
            receives += 1
        return responses

    def issue_command(
        self,
        account: str,
        command: str,
        params: Optional[StartTsoParams] = None,
    ) -> IssueResponse:
        """
        Run one command in a fresh address space and return its output.

        The address space is always stopped, also when the command fails.
        """
        expect_non_blank(account, MISSING_ACCOUNT)
        expect_non_blank(command, MISSING_COMMAND)
        start = self.start(account, params)
        key = start.servlet_key
        try:
            self._receive_until_prompt(key, start)
            responses = self._receive_until_prompt(key, self.send(key, command))
        finally:
            stop = self.stop(key)
        output = "\n".join(r.text for r in responses if r.messages)
        return IssueResponse(
            success=True,
            command_response=output,
            start_response=start,
            zosmf_responses=responses,
            stop_response=stop,
        )
