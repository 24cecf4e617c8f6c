import base64
import json
from pathlib import Path

import httpx
import pytest

from zowekit.config import load_config
from zowekit.errors import ConfigError, RestClientError, ZosmfNotFoundError
from zowekit.rest.client import CSRF_HEADER, RESPONSE_TIMEOUT_HEADER, ZosmfRestClient
from zowekit.rest.proxy import ProxyVariables, get_system_proxy_variables, matches_no_proxy, proxy_url_for
from zowekit.rest.session import Session


def test_client_sends_csrf_header_and_basic_auth(client: ZosmfRestClient, zosmf) -> None:
    zosmf.add("GET", "/zosmf/info", json_body={"zosmf_version": "27"})

    info = client.get_info()

    assert info == {"zosmf_version": "27"}
    request = zosmf.last("GET", "/zosmf/info")
    assert request.headers[CSRF_HEADER] == "true"
    expected = base64.b64encode(b"ibmuser:secret").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.url.host == "lpar1.example.com"


def test_token_session_uses_cookie_instead_of_basic_auth(zosmf) -> None:
    zosmf.add("GET", "/zosmf/info", json_body={})
    session = Session(host="h", token_type="LtpaToken2", token_value="abc")

    with ZosmfRestClient(session, transport=zosmf.transport) as client:
        client.get_info()

    request = zosmf.last()
    assert "Authorization" not in request.headers
    assert "LtpaToken2=abc" in request.headers["Cookie"]


def test_not_found_raises_zosmf_not_found_error(client: ZosmfRestClient, zosmf) -> None:
    zosmf.add(
        "GET",
        "/zosmf/restfiles/ds/IBMUSER.NOPE",
        status=404,
        json_body={"rc": 4, "reason": 8, "category": 1, "message": "Data set not found", "details": ["ENOENT"]},
    )

    with pytest.raises(ZosmfNotFoundError) as excinfo:
        client.get_expect_text("/zosmf/restfiles/ds/IBMUSER.NOPE")

    err = excinfo.value
    assert err.status_code == 404
    assert err.rc == 4
    assert err.reason == 8
    assert "Data set not found" in str(err)
    assert "ENOENT" in str(err)


def test_server_error_raises_rest_client_error(client: ZosmfRestClient, zosmf) -> None:
    zosmf.add("PUT", "/zosmf/restjobs/jobs", status=500, text="boom")

    with pytest.raises(RestClientError) as excinfo:
        client.put_expect_json("/zosmf/restjobs/jobs", json_body={})

    assert not isinstance(excinfo.value, ZosmfNotFoundError)
    assert excinfo.value.status_code == 500
    assert "boom" in str(excinfo.value)


def test_transport_failure_is_wrapped(session: Session) -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with ZosmfRestClient(session, transport=httpx.MockTransport(fail)) as client:
        with pytest.raises(RestClientError, match="Unable to reach z/OSMF"):
            client.get_info()


def test_response_timeout_header_only_for_files(zosmf) -> None:
    zosmf.add("GET", "/zosmf/restfiles/ds", json_body={"items": []})
    zosmf.add("GET", "/zosmf/restjobs/jobs", json_body=[])
    session = Session(host="h", user="u", password="p", response_timeout=600)

    with ZosmfRestClient(session, transport=zosmf.transport) as client:
        client.get_expect_json("/zosmf/restfiles/ds")
        client.get_expect_json("/zosmf/restjobs/jobs")

    assert zosmf.last(path="/zosmf/restfiles/ds").headers[RESPONSE_TIMEOUT_HEADER] == "600"
    assert RESPONSE_TIMEOUT_HEADER not in zosmf.last(path="/zosmf/restjobs/jobs").headers


def test_none_params_are_dropped(client: ZosmfRestClient, zosmf) -> None:
    zosmf.add("GET", "/zosmf/restjobs/jobs", json_body=[])

    client.get_expect_json("/zosmf/restjobs/jobs", params={"owner": "IBMUSER", "prefix": None})

    request = zosmf.last()
    assert request.url.params.get("owner") == "IBMUSER"
    assert "prefix" not in request.url.params


def test_stream_to_writes_body(client: ZosmfRestClient, zosmf, tmp_path: Path) -> None:
    zosmf.add("GET", "/zosmf/restfiles/fs/u/ibmuser/a.bin", content=b"\x00\x01\x02", headers={"ETag": "E1"})
    target = tmp_path / "a.bin"

    with open(target, "wb") as handle:
        headers = client.stream_to("/zosmf/restfiles/fs/u/ibmuser/a.bin", handle)

    assert target.read_bytes() == b"\x00\x01\x02"
    assert headers.get("etag") == "E1"


def test_base_path_is_part_of_base_url() -> None:
    session = Session(host="h", port=1443, protocol="HTTP", base_path="gateway/zosmf/")

    assert session.base_url == "http://h:1443/gateway/zosmf"


def test_session_rejects_unknown_protocol() -> None:
    with pytest.raises(ValueError):
        Session(host="h", protocol="ftp")


def test_session_from_profile_and_overrides(zowe_home: Path) -> None:
    config_file = zowe_home / "cli" / "zowe.config.json"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps({
        "profiles": {
            "lpar1": {"type": "zosmf", "properties": {"host": "lpar1", "port": 10443}},
            "base": {"type": "base", "properties": {"user": "ibmuser", "rejectUnauthorized": False}},
        },
        "defaults": {"zosmf": "lpar1", "base": "base"},
    }))

    session = Session.from_config(load_config(), overrides={"port": 443, "password": "pw"})

    assert session.host == "lpar1"
    assert session.port == 443
    assert session.user == "ibmuser"
    assert session.password == "pw"
    assert session.reject_unauthorized is False


def test_session_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZOWEKIT_HOST", "envhost")
    monkeypatch.setenv("ZOWEKIT_PORT", "8443")
    monkeypatch.setenv("ZOWEKIT_REJECT_UNAUTHORIZED", "false")

    session = Session.from_config(load_config())

    assert (session.host, session.port, session.reject_unauthorized) == ("envhost", 8443, False)


def test_session_without_host_is_a_config_error() -> None:
    with pytest.raises(ConfigError, match="No z/OSMF host configured"):
        Session.from_config(load_config())


def test_proxy_variables_from_environment_either_case() -> None:
    variables = get_system_proxy_variables({"https_proxy": "http://proxy:3128", "NO_PROXY": "localhost, .corp"})

    assert variables.https_proxy == "http://proxy:3128"
    assert variables.http_proxy is None
    assert variables.no_proxy == ["localhost", ".corp"]


def test_no_proxy_matching() -> None:
    assert matches_no_proxy("lpar1.corp", [".corp"])
    assert matches_no_proxy("corp", [".corp"])
    assert matches_no_proxy("anything", ["*"])
    assert not matches_no_proxy("lpar1.example.com", ["example.com"])


def test_proxy_url_for_session() -> None:
    variables = ProxyVariables(http_proxy="http://p80", https_proxy="http://p443", no_proxy=["skip.me"])

    assert proxy_url_for(Session(host="h"), variables) == "http://p443"
    assert proxy_url_for(Session(host="h", protocol="http"), variables) == "http://p80"
    assert proxy_url_for(Session(host="skip.me"), variables) is None
