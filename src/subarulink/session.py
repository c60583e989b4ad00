"""Session lifecycle for the STARLINK account.

The API tracks one login and one *selected vehicle* per server session.
:class:`SessionManager` owns that state, re-validates it before
privileged calls and switches the selected vehicle as needed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from subarulink._api.login import (
    build_login_form,
    build_send_verification_form,
    build_verify_form,
    is_valid_auth_code,
    parse_contact_methods,
    parse_login_response,
)
from subarulink._constants import (
    API_2FA_AUTH_VERIFY,
    API_2FA_CONTACT,
    API_2FA_SEND_VERIFICATION,
    API_ERROR_VEHICLE_SETUP,
    API_LOGIN,
    API_SELECT_VEHICLE,
    API_VALIDATE_SESSION,
)
from subarulink._transport import Transport
from subarulink.config import SubaruConfig
from subarulink.exceptions import IncompleteCredentials, SubaruApiError, SubaruError

_logger = logging.getLogger(__name__)


class SessionState(BaseModel):
    """Snapshot of the server session as the client knows it.

    Parameters
    ----------
    authenticated : bool
        A login succeeded and has not been invalidated since.
    registered : bool
        The server reports this device id as trusted (two-factor done).
    login_time : float or None
        Monotonic timestamp of the last successful login.
    current_vin : str or None
        Vehicle currently selected on the server session.
    vins : list of str
        VINs returned by the last login.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    authenticated: bool = False
    registered: bool = False
    login_time: float | None = None
    current_vin: str | None = None
    vins: list[str] = Field(default_factory=list)


class SessionManager:
    """Authenticate, validate and steer the server session.

    Parameters
    ----------
    config : SubaruConfig
        Credentials and timing configuration.
    transport : Transport
        HTTP transport shared by the whole account.
    clock : callable
        Monotonic clock; replaceable in tests.
    """

    def __init__(
        self,
        config: SubaruConfig,
        transport: Transport,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._transport = transport
        self._clock = clock
        self._state = SessionState()
        self._contact_methods: dict[str, str] = {}
        self._auth_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def authenticated(self) -> bool:
        return self._state.authenticated

    @property
    def device_registered(self) -> bool:
        return self._state.registered

    @property
    def contact_methods(self) -> dict[str, str]:
        """Two-factor contact methods offered by the server (``{method: masked_contact}``)."""
        return dict(self._contact_methods)

    def get_age(self) -> float:
        """Minutes since the last successful login (``inf`` if never logged in)."""
        if self._state.login_time is None:
            return float("inf")
        return (self._clock() - self._state.login_time) / 60.0

    def reset(self) -> None:
        """Discard the server session; credentials are kept."""
        _logger.debug("Resetting session state")
        self._transport.reset()
        self._state = SessionState()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def authenticate(self, vin: str = "") -> SessionState:
        """Log in, optionally preselecting *vin*."""
        async with self._auth_lock:
            return await self._login(vin)

    async def _login(self, vin: str = "") -> SessionState:
        config = self._config
        if not (config.username and config.password and config.device_id):
            raise IncompleteCredentials("Connection requires email, password and device id.")

        _logger.debug("Logging in")
        response = await self._transport.request("POST", API_LOGIN, data=build_login_form(config, vin))
        result = parse_login_response(response)
        self._state = SessionState(
            authenticated=True,
            registered=result.registered,
            login_time=self._clock(),
            current_vin=None,
            vins=result.vins,
        )
        _logger.debug("Login succeeded (registered=%s, %d vehicles)", result.registered, len(result.vins))
        return self._state

    async def ensure_valid(self, vin: str) -> None:
        """Make sure the session is authenticated and *vin* is selected.

        Concurrent callers are serialized so that an expired session
        triggers a single re-login.
        """
        async with self._auth_lock:
            if not self._state.authenticated:
                await self._login(vin)
                await self.select_vehicle(vin)
                return

            response = await self._transport.request("GET", API_VALIDATE_SESSION)
            if response.get("success"):
                if vin != self._state.current_vin:
                    await self.select_vehicle(vin)
                return

            _logger.info("Session no longer valid, re-authenticating")
            self.reset()
            await self._login(vin)
            await self.select_vehicle(vin)

    async def select_vehicle(self, vin: str) -> dict[str, Any]:
        """Make *vin* the selected vehicle of the server session.

        Returns the vehicle's ``data`` object, or ``{}`` when the server
        reports the vehicle as not set up (the session is reset).
        """
        params = {"vin": vin, "_": str(int(time.time()))}
        response = await self.get(API_SELECT_VEHICLE, params)
        if response.get("success"):
            self._state = self._state.model_copy(update={"current_vin": vin})
            data = response.get("data")
            return data if isinstance(data, dict) else {}

        code = str(response.get("errorCode") or "")
        self.reset()
        if code == API_ERROR_VEHICLE_SETUP:
            _logger.warning("Vehicle setup incomplete on the server; session reset")
            return {}
        raise SubaruApiError(f"Failed to switch vehicle: {code}", code=code, endpoint=API_SELECT_VEHICLE)

    async def connect(self) -> list[dict[str, Any]]:
        """Log in and return the raw vehicle records of the account.

        Every vehicle is selected once to read its metadata.  When the
        device is not yet registered the two-factor contact methods are
        loaded as well.
        """
        state = await self.authenticate()
        vehicles: list[dict[str, Any]] = []
        for vin in state.vins:
            data = await self.select_vehicle(vin)
            if data:
                vehicles.append(data)
        if not self._state.registered:
            await self.fetch_contact_methods()
        return vehicles

    # ------------------------------------------------------------------
    # Two-factor enrollment
    # ------------------------------------------------------------------

    async def fetch_contact_methods(self) -> dict[str, str]:
        response = await self.post(API_2FA_CONTACT)
        self._contact_methods = parse_contact_methods(response)
        _logger.debug("Two-factor contact methods: %s", sorted(self._contact_methods))
        return self.contact_methods

    async def request_auth_code(self, contact_method: str) -> bool:
        """Ask the server to send a verification code via *contact_method*."""
        if contact_method not in self._contact_methods:
            return False
        response = await self._transport.request(
            "POST",
            API_2FA_SEND_VERIFICATION,
            data=build_send_verification_form(contact_method),
        )
        return bool(response.get("success"))

    async def submit_auth_code(self, code: str, make_permanent: bool = True) -> bool:
        """Submit a 6-digit verification code and wait for device registration.

        Returns ``False`` if the code is malformed or rejected.

        Raises
        ------
        SubaruApiError
            If the device is still unregistered after
            ``registration_poll_attempts`` logins.
        """
        if not is_valid_auth_code(code):
            return False

        response = await self._transport.request(
            "POST",
            API_2FA_AUTH_VERIFY,
            data=build_verify_form(self._config, code, make_permanent=make_permanent),
        )
        if not response.get("success"):
            return False

        for _attempt in range(self._config.registration_poll_attempts):
            if self._state.registered:
                return True
            await asyncio.sleep(self._config.registration_poll_interval)
            await self.authenticate()
        if self._state.registered:
            return True
        raise SubaruApiError("Device registration did not complete", endpoint=API_2FA_AUTH_VERIFY)

    # ------------------------------------------------------------------
    # Privileged requests
    # ------------------------------------------------------------------

    def _require_authenticated(self, endpoint: str) -> None:
        if not self._state.authenticated:
            raise SubaruError(f"Not authenticated; cannot call {endpoint}")

    async def get(self, endpoint: str, params: Mapping[str, str] | None = None) -> dict[str, Any]:
        self._require_authenticated(endpoint)
        return await self._transport.request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> dict[str, Any]:
        self._require_authenticated(endpoint)
        return await self._transport.request("POST", endpoint, params=params, json_body=json_body)
