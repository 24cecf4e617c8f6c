"""
Zowekit z/OSMF REST Client

HTTP client wrapper for the z/OSMF REST API.
Handles authentication, the CSRF header, proxies and error translation.
"""

import json
from typing import IO, Any, Dict, Optional

import httpx

from zowekit.errors import RestClientError, ZosmfNotFoundError
from zowekit.logging import get_logger
from zowekit.rest.proxy import proxy_url_for
from zowekit.rest.session import Session

logger = get_logger(__name__)

CSRF_HEADER = "X-CSRF-ZOSMF-HEADER"
RESPONSE_TIMEOUT_HEADER = "X-IBM-Response-Timeout"
FILES_PREFIX = "/zosmf/restfiles"


class ZosmfRestClient:
    """
    HTTP client for z/OSMF.

    Example:
        session = Session(host="lpar1.example.com", user="ibmuser", password="secret")
        with ZosmfRestClient(session) as client:
            info = client.get_expect_json("/zosmf/info")
    """

    def __init__(self, session: Session, *, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.session = session
        self.transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "ZosmfRestClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {CSRF_HEADER: "true"}
            auth = None
            cookies = None
            if self.session.token_type and self.session.token_value:
                cookies = {self.session.token_type: self.session.token_value}
            elif self.session.user and self.session.password:
                auth = httpx.BasicAuth(self.session.user, self.session.password)
            kwargs: Dict[str, Any] = {
                "base_url": self.session.base_url,
                "timeout": self.session.request_timeout,
                "headers": headers,
                "auth": auth,
                "cookies": cookies,
                "verify": self.session.reject_unauthorized,
            }
            if self.transport is not None:
                kwargs["transport"] = self.transport
            else:
                proxy = proxy_url_for(self.session)
                if proxy:
                    kwargs["proxy"] = proxy
            self._client = httpx.Client(**kwargs)
        return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def _headers(self, path: str, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged: Dict[str, str] = {}
        if self.session.response_timeout and path.startswith(FILES_PREFIX):
            merged[RESPONSE_TIMEOUT_HEADER] = str(self.session.response_timeout)
        if headers:
            merged.update(headers)
        return merged

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """
        Send a request and return the response.

        Raises:
            ZosmfNotFoundError: On 404
            RestClientError: On any other non-success status or transport failure
        """
        kwargs: Dict[str, Any] = {"headers": self._headers(path, headers)}
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}
        if json_body is not None:
            kwargs["json"] = json_body
        if content is not None:
            kwargs["content"] = content
        try:
            resp = self._get_client().request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise RestClientError(
                f"Unable to reach z/OSMF at {self.session.base_url}: {exc}",
                metadata={"method": method, "path": path},
            ) from exc
        logger.debug(
            "zosmf_request",
            extra={"method": method, "path": path, "status_code": resp.status_code},
        )
        self._raise_for_status(resp, method, path)
        return resp

    @staticmethod
    def _raise_for_status(resp: httpx.Response, method: str, path: str) -> None:
        if resp.is_success:
            return
        detail = resp.text
        rc = reason = category = None
        details: list = []
        try:
            data = resp.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            detail = data.get("message") or detail
            rc = data.get("rc", data.get("returnCode"))
            reason = data.get("reason", data.get("reasonCode"))
            category = data.get("category")
            details = data.get("details") or []
        message = f"{resp.status_code} {resp.reason_phrase}: {detail}"
        if details:
            message += "\n" + "\n".join(str(d) for d in details)
        error_cls = ZosmfNotFoundError if resp.status_code == 404 else RestClientError
        raise error_cls(
            message,
            status_code=resp.status_code,
            rc=rc,
            reason=reason,
            error_category=category,
            details=details,
            metadata={"method": method, "path": path},
        )

    @staticmethod
    def _maybe_json(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        ctype = resp.headers.get("content-type", "")
        if "application/json" in ctype:
            return resp.json()
        try:
            return json.loads(resp.text)
        except ValueError:
            return resp.text

    # GET
    def get_expect_json(self, path: str, *, params: Optional[Dict[str, Any]] = None,
                        headers: Optional[Dict[str, str]] = None) -> Any:
        return self._maybe_json(self.request("GET", path, params=params, headers=headers))

    def get_expect_text(self, path: str, *, params: Optional[Dict[str, Any]] = None,
                        headers: Optional[Dict[str, str]] = None) -> str:
        return self.request("GET", path, params=params, headers=headers).text

    def get_expect_bytes(self, path: str, *, params: Optional[Dict[str, Any]] = None,
                         headers: Optional[Dict[str, str]] = None) -> bytes:
        return self.request("GET", path, params=params, headers=headers).content

    def stream_to(self, path: str, handle: IO[bytes], *, headers: Optional[Dict[str, str]] = None) -> httpx.Headers:
        """Stream a GET response body into ``handle``; returns the response headers."""
        try:
            with self._get_client().stream("GET", path, headers=self._headers(path, headers)) as resp:
                if not resp.is_success:
                    resp.read()
                    self._raise_for_status(resp, "GET", path)
                for chunk in resp.iter_bytes():
                    handle.write(chunk)
                return resp.headers
        except httpx.HTTPError as exc:
            raise RestClientError(
                f"Unable to reach z/OSMF at {self.session.base_url}: {exc}",
                metadata={"method": "GET", "path": path},
            ) from exc

    # PUT
    def put_expect_json(self, path: str, *, json_body: Any = None, content: Optional[bytes] = None,
                        headers: Optional[Dict[str, str]] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._maybe_json(
            self.request("PUT", path, json_body=json_body, content=content, headers=headers, params=params)
        )

    def put_expect_text(self, path: str, *, json_body: Any = None, content: Optional[bytes] = None,
                        headers: Optional[Dict[str, str]] = None) -> str:
        return self.request("PUT", path, json_body=json_body, content=content, headers=headers).text

    # POST
    def post_expect_json(self, path: str, *, json_body: Any = None, params: Optional[Dict[str, Any]] = None,
                         headers: Optional[Dict[str, str]] = None) -> Any:
        return self._maybe_json(self.request("POST", path, json_body=json_body, params=params, headers=headers))

    def post_expect_text(self, path: str, *, json_body: Any = None, params: Optional[Dict[str, Any]] = None,
                         headers: Optional[Dict[str, str]] = None) -> str:
        return self.request("POST", path, json_body=json_body, params=params, headers=headers).text

    # DELETE
    def delete_expect_text(self, path: str, *, headers: Optional[Dict[str, str]] = None,
                           params: Optional[Dict[str, Any]] = None) -> str:
        return self.request("DELETE", path, headers=headers, params=params).text

    def delete_expect_json(self, path: str, *, headers: Optional[Dict[str, str]] = None,
                           params: Optional[Dict[str, Any]] = None) -> Any:
        return self._maybe_json(self.request("DELETE", path, headers=headers, params=params))

    # Health Check
    def get_info(self) -> Dict[str, Any]:
        """Return the z/OSMF information document (/zosmf/info)."""
        return self.get_expect_json("/zosmf/info") or {}
