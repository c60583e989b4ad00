from __future__ import annotations

# pylint: disable=redefined-outer-name

from typing import Any

import aiohttp
import pytest
from yarl import URL

from subarulink._transport import HttpTransport, decode_response
from subarulink.config import SubaruConfig
from subarulink.exceptions import SubaruTransportError


class _FakeCookieJar:
    def __init__(self) -> None:
        self.cleared_domains: list[str] = []

    def clear(self) -> None:
        raise AssertionError("whole cookie jar must not be cleared")

    def clear_domain(self, domain: str) -> None:
        self.cleared_domains.append(domain)


class _FailingHttpSession:
    def __init__(self) -> None:
        self.cookie_jar = _FakeCookieJar()

    def request(self, *_args: Any, **_kwargs: Any) -> Any:
        raise aiohttp.ClientConnectionError("connection refused")


@pytest.fixture
def config() -> SubaruConfig:
    return SubaruConfig(username="user@example.com", password="secret", device_id="device-1", country="CAN")


def test_decode_response_returns_body() -> None:
    assert decode_response(200, '{"success": true, "data": {"a": 1}}', "/x.json") == {
        "success": True,
        "data": {"a": 1},
    }


def test_decode_response_accepts_service_type_body() -> None:
    assert decode_response(200, '{"serviceType": "lock"}', "/x.json") == {"serviceType": "lock"}


def test_decode_response_rejects_error_status() -> None:
    with pytest.raises(SubaruTransportError) as excinfo:
        decode_response(503, "Service Unavailable", "/vehicleStatus.json")

    assert excinfo.value.status_code == 503
    assert excinfo.value.endpoint == "/vehicleStatus.json"
    assert excinfo.value.is_server_error is True


def test_decode_response_client_error_is_not_server_error() -> None:
    with pytest.raises(SubaruTransportError) as excinfo:
        decode_response(401, "", "/login.json")

    assert excinfo.value.is_server_error is False


def test_decode_response_rejects_invalid_json() -> None:
    with pytest.raises(SubaruTransportError, match="Invalid JSON"):
        decode_response(200, "<html>maintenance</html>", "/login.json")


@pytest.mark.parametrize("text", ['{"data": {}}', "[1, 2]"])
def test_decode_response_rejects_unexpected_shape(text: str) -> None:
    with pytest.raises(SubaruTransportError, match="Unexpected response"):
        decode_response(200, text, "/login.json")


@pytest.mark.asyncio
async def test_request_builds_url_and_decodes(monkeypatch: pytest.MonkeyPatch, config: SubaruConfig) -> None:
    seen: dict[str, Any] = {}

    async def fake_send(_self: Any, method: str, url: str, **kwargs: Any) -> tuple[int, str]:
        seen.update(method=method, url=url, **kwargs)
        return 200, '{"success": true}'

    monkeypatch.setattr("subarulink._transport.HttpTransport._send", fake_send)
    transport = HttpTransport(config, _FailingHttpSession())  # type: ignore[arg-type]

    body = await transport.request("GET", "/validateSession.json", params={"_": "1"})

    assert body == {"success": True}
    assert seen["method"] == "GET"
    assert seen["url"] == "https://mobileapi.ca.prod.subarucs.com/g2v30/validateSession.json"
    assert seen["params"] == {"_": "1"}


@pytest.mark.asyncio
async def test_request_wraps_client_errors(config: SubaruConfig) -> None:
    transport = HttpTransport(config, _FailingHttpSession())  # type: ignore[arg-type]

    with pytest.raises(SubaruTransportError, match="connection refused") as excinfo:
        await transport.request("POST", "/login.json", data={"password": "secret"})

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, aiohttp.ClientConnectionError)


def test_reset_clears_only_starlink_cookies(config: SubaruConfig) -> None:
    http_session = _FailingHttpSession()
    transport = HttpTransport(config, http_session)  # type: ignore[arg-type]

    transport.reset()

    assert http_session.cookie_jar.cleared_domains == ["mobileapi.ca.prod.subarucs.com"]


@pytest.mark.asyncio
async def test_reset_keeps_cookies_of_other_hosts(config: SubaruConfig) -> None:
    jar = aiohttp.CookieJar()
    jar.update_cookies({"JSESSIONID": "starlink"}, response_url=URL("https://mobileapi.ca.prod.subarucs.com/g2v30"))
    jar.update_cookies({"session": "other"}, response_url=URL("https://example.com/"))
    async with aiohttp.ClientSession(cookie_jar=jar) as http_session:
        transport = HttpTransport(config, http_session)

        transport.reset()

        assert len(jar.filter_cookies(URL("https://mobileapi.ca.prod.subarucs.com/g2v30"))) == 0
        assert jar.filter_cookies(URL("https://example.com/"))["session"].value == "other"
