import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

# Ensure repository root is on sys.path so the in-tree package imports cleanly.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from zowekit.config import _reset_config_for_tests  # noqa: E402
from zowekit.events import EventOperator  # noqa: E402
from zowekit.rest.client import ZosmfRestClient  # noqa: E402
from zowekit.rest.session import Session  # noqa: E402

HOST = "lpar1.example.com"

_CLEARED_ENV = (
    "ZOWEKIT_PROFILE",
    "ZOWEKIT_HOST",
    "ZOWEKIT_PORT",
    "ZOWEKIT_USER",
    "ZOWEKIT_PASSWORD",
    "ZOWEKIT_PROTOCOL",
    "ZOWEKIT_BASE_PATH",
    "ZOWEKIT_REJECT_UNAUTHORIZED",
    "ZOWEKIT_RESPONSE_TIMEOUT",
    "ZOWEKIT_LOG_LEVEL",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "NO_PROXY",
    "http_proxy",
    "https_proxy",
    "no_proxy",
)


@pytest.fixture(autouse=True)
def zowe_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI and user homes at a temporary directory for every test."""
    home = tmp_path / "zowe-home"
    for name in _CLEARED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ZOWEKIT_CLI_HOME", str(home / "cli"))
    monkeypatch.setenv("ZOWEKIT_USER_HOME", str(home / "user"))
    monkeypatch.setenv("ZOWEKIT_EVENT_POLL_INTERVAL", "0.05")
    monkeypatch.setenv("ZOWEKIT_JOB_POLL_INTERVAL", "0")
    monkeypatch.setenv("ZOWEKIT_JOB_WAIT_ATTEMPTS", "5")
    _reset_config_for_tests()
    yield home
    EventOperator._reset_for_tests()
    _reset_config_for_tests()


Handler = Callable[[httpx.Request], httpx.Response]


class MockZosmf:
    """
    Tiny z/OSMF double served through httpx.MockTransport.

    Routes are keyed by method and decoded URL path. Registering the same
    route several times queues the responses; the last one keeps answering.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Handler]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        text: Optional[str] = None,
        content: Optional[bytes] = None,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        handler: Optional[Handler] = None,
    ) -> "MockZosmf":
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if json_body is not None:
                    return httpx.Response(status, json=json_body, headers=headers)
                if content is not None:
                    return httpx.Response(status, content=content, headers=headers)
                return httpx.Response(status, text=text or "", headers=headers)
        self.routes.setdefault((method.upper(), path), []).append(handler)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handlers = self.routes.get((request.method, request.url.path))
        if not handlers:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        handler = handlers.pop(0) if len(handlers) > 1 else handlers[0]
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last(self, method: Optional[str] = None, path: Optional[str] = None) -> httpx.Request:
        for request in reversed(self.requests):
            if method and request.method != method:
                continue
            if path and request.url.path != path:
                continue
            return request
        raise AssertionError(f"no request recorded for {method} {path}")

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def zosmf() -> MockZosmf:
    return MockZosmf()


@pytest.fixture
def session() -> Session:
    return Session(host=HOST, port=443, user="ibmuser", password="secret")


@pytest.fixture
def client(session: Session, zosmf: MockZosmf) -> ZosmfRestClient:
    rest = ZosmfRestClient(session, transport=zosmf.transport)
    yield rest
    rest.close()


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Connection settings for CLI tests."""
    monkeypatch.setenv("ZOWEKIT_HOST", HOST)
    monkeypatch.setenv("ZOWEKIT_USER", "ibmuser")
    monkeypatch.setenv("ZOWEKIT_PASSWORD", "secret")
    _reset_config_for_tests()
