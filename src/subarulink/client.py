"""High-level async client for the Subaru STARLINK API."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

import aiohttp

from subarulink._cache import VehicleCacheEntry, VehicleDataCache
from subarulink._client import commands as _commands
from subarulink._client import reads as _reads
from subarulink._constants import ALL_DOORS, PIN_LENGTH
from subarulink._locks import VehicleLockRegistry
from subarulink._redact import redact_raw_data
from subarulink._transport import HttpTransport
from subarulink.config import MIN_FETCH_INTERVAL, MIN_UPDATE_INTERVAL, SubaruConfig
from subarulink.exceptions import InvalidPIN, PINLockoutProtect, SubaruError
from subarulink.models.command import CommandResult
from subarulink.models.vehicle import ApiGen, VehicleData, VehicleInfo, status_payload_heuristic
from subarulink.session import SessionManager

_logger = logging.getLogger(__name__)


class SubaruClient:
    """Async client for the Subaru STARLINK API.

    Usage::

        async with SubaruClient(config) as client:
            await client.connect()
            for vin in client.get_vehicles():
                await client.lock(vin)
    """

    def __init__(
        self,
        config: SubaruConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        self._session: SessionManager | None = None
        self._cache = VehicleDataCache()
        self._locks = VehicleLockRegistry()
        self._pin = config.pin
        self._pin_lockout = False
        self._fetch_interval = config.fetch_interval
        self._update_interval = config.update_interval

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SubaruClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        self._session = SessionManager(self._config, self._transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._session = None

    # ------------------------------------------------------------------
    # Connection and two-factor enrollment
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        """Log in and load the account's vehicles.

        Returns ``True`` when at least one vehicle was found.
        """
        vehicles = await self._require_session().connect()
        for raw in vehicles:
            info = VehicleInfo.model_validate(raw)
            if not info.vin:
                continue
            self._cache.register(info, raw)
            _logger.debug("Found vehicle %s (%s %s)", info.name, info.model_year, info.model_name)
        return bool(self._cache.vins())

    @property
    def device_registered(self) -> bool:
        return self._require_session().device_registered

    @property
    def contact_methods(self) -> dict[str, str]:
        return self._require_session().contact_methods

    async def request_auth_code(self, contact_method: str) -> bool:
        return await self._require_session().request_auth_code(contact_method)

    async def submit_auth_code(self, code: str, make_permanent: bool = True) -> bool:
        return await self._require_session().submit_auth_code(code, make_permanent)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_session(self) -> SessionManager:
        if self._session is None:
            raise SubaruError("Client not initialized. Use 'async with SubaruClient(...) as client:'")
        return self._session

    def _vehicle(self, vin: str) -> VehicleCacheEntry:
        entry = self._cache.get(vin)
        if entry is None:
            raise SubaruError(f"Invalid VIN: {vin}")
        return entry

    def _check_pin_lockout(self) -> None:
        if self._pin_lockout:
            raise PINLockoutProtect("Remote command cancelled to prevent account lockout")

    def _require_pin(self) -> str:
        if not self._pin:
            raise ValueError("No PIN available (set config.pin or call update_saved_pin)")
        return self._pin

    # ------------------------------------------------------------------
    # Vehicle metadata
    # ------------------------------------------------------------------

    def get_vehicles(self) -> list[str]:
        return self._cache.vins()

    def get_vehicle_info(self, vin: str) -> VehicleInfo:
        return self._vehicle(vin).info

    def vin_to_name(self, vin: str) -> str:
        return self._vehicle(vin).info.name

    def get_model_year(self, vin: str) -> str:
        return self._vehicle(vin).info.model_year

    def get_model_name(self, vin: str) -> str:
        return self._vehicle(vin).info.model_name

    def get_api_gen(self, vin: str) -> ApiGen | None:
        return self._vehicle(vin).info.api_gen

    def get_ev_status(self, vin: str) -> bool:
        return self._vehicle(vin).info.is_ev

    def get_remote_status(self, vin: str) -> bool:
        return self._vehicle(vin).info.has_remote

    def get_res_status(self, vin: str) -> bool:
        return self._vehicle(vin).info.has_res

    def get_safety_status(self, vin: str) -> bool:
        return self._vehicle(vin).info.has_safety

    def get_subscription_status(self, vin: str) -> bool:
        return self._vehicle(vin).info.has_active_subscription

    def has_tpms(self, vin: str) -> bool:
        return self._vehicle(vin).info.has_tpms

    def has_sunroof(self, vin: str) -> bool:
        return self._vehicle(vin).info.has_sunroof

    async def has_power_windows(self, vin: str) -> bool:
        """Heuristic; may fetch vehicle data.  See :func:`status_payload_heuristic`."""
        data = await self.get_data(vin)
        return status_payload_heuristic(data.info, data.status)["power_windows"]

    async def has_lock_status(self, vin: str) -> bool:
        """Heuristic; may fetch vehicle data.  See :func:`status_payload_heuristic`."""
        data = await self.get_data(vin)
        return status_payload_heuristic(data.info, data.status)["lock_status"]

    # ------------------------------------------------------------------
    # PIN management
    # ------------------------------------------------------------------

    def is_pin_required(self) -> bool:
        """Whether any vehicle on the account has remote services."""
        return any(self._vehicle(vin).info.has_remote for vin in self._cache.vins())

    def invalid_pin_entered(self) -> bool:
        return self._pin_lockout

    def update_saved_pin(self, new_pin: str) -> bool:
        """Store a new PIN; clears the lockout when the PIN actually changed.

        Raises
        ------
        InvalidPIN
            If *new_pin* is not a 4-digit string.  The lockout is unchanged.
        """
        if len(new_pin) != PIN_LENGTH or not new_pin.isdigit():
            raise InvalidPIN(f"PIN must be {PIN_LENGTH} digits")
        if new_pin == self._pin:
            return False
        self._pin = new_pin
        self._pin_lockout = False
        return True

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    async def fetch(self, vin: str, force: bool = False) -> VehicleData:
        return await _reads.fetch(self, vin, force)

    async def update(self, vin: str, force: bool = False) -> VehicleData:
        return await _reads.update(self, vin, force)

    async def get_data(self, vin: str) -> VehicleData:
        """Return cached data, fetching first if nothing was fetched yet."""
        if not self._vehicle(vin).status:
            return await self.fetch(vin)
        return self._cache.snapshot(vin)

    def get_raw_data(self, vin: str, redact: bool = False) -> dict[str, Any]:
        """Raw API responses cached for *vin*, keyed by endpoint name."""
        raw = self._vehicle(vin).raw
        return redact_raw_data(raw) if redact else dict(raw)

    def get_last_fetch_time(self, vin: str) -> datetime | None:
        return self._vehicle(vin).last_fetch

    def get_last_update_time(self, vin: str) -> datetime | None:
        return self._vehicle(vin).last_update

    def get_fetch_interval(self) -> int:
        return self._fetch_interval

    def set_fetch_interval(self, value: int) -> bool:
        if value < MIN_FETCH_INTERVAL:
            return False
        self._fetch_interval = value
        return True

    def get_update_interval(self) -> int:
        return self._update_interval

    def set_update_interval(self, value: int) -> bool:
        if value < MIN_UPDATE_INTERVAL:
            return False
        self._update_interval = value
        return True

    # ------------------------------------------------------------------
    # Remote commands
    # ------------------------------------------------------------------

    async def lock(self, vin: str) -> CommandResult:
        return await _commands.lock(self, vin)

    async def unlock(self, vin: str, door: str = ALL_DOORS) -> CommandResult:
        return await _commands.unlock(self, vin, door)

    async def lights(self, vin: str) -> CommandResult:
        return await _commands.lights(self, vin)

    async def lights_stop(self, vin: str) -> CommandResult:
        return await _commands.lights_stop(self, vin)

    async def horn(self, vin: str) -> CommandResult:
        return await _commands.horn(self, vin)

    async def horn_stop(self, vin: str) -> CommandResult:
        return await _commands.horn_stop(self, vin)

    async def remote_start(self, vin: str, preset_name: str) -> CommandResult:
        return await _commands.remote_start(self, vin, preset_name)

    async def remote_stop(self, vin: str) -> CommandResult:
        return await _commands.remote_stop(self, vin)

    async def charge_start(self, vin: str) -> CommandResult:
        return await _commands.charge_start(self, vin)

    # ------------------------------------------------------------------
    # Climate presets
    # ------------------------------------------------------------------

    async def list_climate_preset_names(self, vin: str) -> list[str]:
        return await _reads.list_climate_preset_names(self, vin)

    async def get_climate_preset_by_name(self, vin: str, preset_name: str) -> dict[str, Any] | None:
        return await _reads.get_climate_preset_by_name(self, vin, preset_name)

    async def get_user_climate_preset_data(self, vin: str) -> list[dict[str, Any]]:
        return await _reads.get_user_climate_preset_data(self, vin)

    async def update_user_climate_presets(self, vin: str, preset_data: Sequence[Mapping[str, Any]]) -> bool:
        return await _reads.update_user_climate_presets(self, vin, preset_data)

    async def delete_climate_preset_by_name(self, vin: str, preset_name: str) -> bool:
        return await _reads.delete_climate_preset_by_name(self, vin, preset_name)
