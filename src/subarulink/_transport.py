"""HTTP transport for the STARLINK mobile API.

One :class:`HttpTransport` exists per account session.  The API keeps a
single "selected vehicle" and one set of auth cookies per session, so
every request goes through one coarse lock: outbound requests are
serialized account-wide while callers' business logic is not.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from subarulink._constants import API_MOBILE_APP, API_SERVER, USER_AGENT
from subarulink._redact import redact_for_log
from subarulink.config import SubaruConfig
from subarulink.exceptions import SubaruTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the session and endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> dict[str, Any]:
        ...

    def reset(self) -> None:
        ...


def decode_response(status: int, text: str, endpoint: str) -> dict[str, Any]:
    """Validate an HTTP response and return its JSON body.

    Raises
    ------
    SubaruTransportError
        On a non-2xx status, a body that is not a JSON object, or a JSON
        object carrying neither ``success`` nor ``serviceType``.
    """
    if not 200 <= status <= 299:
        raise SubaruTransportError(
            f"HTTP {status} from {endpoint}: {text[:200]}",
            status_code=status,
            endpoint=endpoint,
        )

    try:
        body = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SubaruTransportError(
            f"Invalid JSON from {endpoint}: {text[:200]}",
            status_code=status,
            endpoint=endpoint,
        ) from exc

    if not isinstance(body, dict) or ("success" not in body and "serviceType" not in body):
        raise SubaruTransportError(
            f"Unexpected response from {endpoint}: {text[:200]}",
            status_code=status,
            endpoint=endpoint,
        )
    return body


class HttpTransport:
    """aiohttp transport bound to one regional STARLINK host."""

    def __init__(self, config: SubaruConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._lock = asyncio.Lock()
        self._headers: dict[str, str] = {
            "User-Agent": USER_AGENT,
            "Origin": "file://",
            "X-Requested-With": API_MOBILE_APP[config.country],
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "Accept": "*/*",
        }

    def reset(self) -> None:
        """Drop the STARLINK host's cookies; the next request starts a fresh server session.

        Cookies for other hosts are kept, so a caller-supplied session can be shared.
        """
        host = API_SERVER[self._config.country]
        _logger.debug("Resetting HTTP session cookies for %s", host)
        self._http.cookie_jar.clear_domain(host)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> dict[str, Any]:
        """Send a request and return the validated JSON body.

        ``data`` is sent form-encoded, ``json_body`` as JSON; at most one
        of them should be given.
        """
        url = f"{self._config.base_url}{endpoint}"
        _logger.debug(
            "%s %s params=%s data=%s json=%s",
            method,
            endpoint,
            redact_for_log(params),
            redact_for_log(data),
            redact_for_log(json_body),
        )

        async with self._lock:
            status, text = await self._send(method, url, params=params, data=data, json_body=json_body)

        _logger.debug("HTTP %s from %s: %s", status, endpoint, text[:200])
        return decode_response(status, text, endpoint)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> tuple[int, str]:
        """Perform the raw HTTP exchange; returns ``(status, body_text)``."""
        kwargs: dict[str, Any] = {"headers": self._headers}
        if params:
            kwargs["params"] = dict(params)
        if data:
            kwargs["data"] = dict(data)
        elif json_body is not None:
            kwargs["json"] = json_body

        try:
            async with self._http.request(method, url, **kwargs) as resp:
                return resp.status, await resp.text()
        except aiohttp.ClientError as exc:
            raise SubaruTransportError(f"Request to {url} failed: {exc}") from exc
