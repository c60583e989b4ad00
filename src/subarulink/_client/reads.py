"""Internal read operations for :class:`subarulink.client.SubaruClient`.

These functions keep `client.py` small without changing the public API.
Functions prefixed ``load_`` or ``_`` expect the caller to hold the
vehicle lock.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from subarulink._api import climate as _climate_api
from subarulink._api.remote import remote_query
from subarulink._api.status import parse_condition, parse_health, parse_location, parse_vehicle_status
from subarulink._cache import VehicleCacheEntry, is_stale
from subarulink._client.policy import remote_command, require_api_gen
from subarulink._constants import API_VEHICLE_STATUS
from subarulink.exceptions import SubaruTransportError, VehicleNotSupported
from subarulink.models.command import RemoteCommand, RemoteQuery, command_endpoints, query_endpoint
from subarulink.models.vehicle import ApiGen, VehicleData, status_payload_heuristic

if TYPE_CHECKING:
    from subarulink.client import SubaruClient

_logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Status
# ------------------------------------------------------------------


async def fetch(client: SubaruClient, vin: str, force: bool = False) -> VehicleData:
    """Refresh cached status when stale (or forced) and return a snapshot."""
    entry = client._vehicle(vin)
    async with client._locks.hold(entry.vin):
        if force or not entry.status or is_stale(entry.last_fetch, client.get_fetch_interval()):
            if await _fetch_status(client, entry):
                client._cache.mark_fetched(entry.vin)
        else:
            _logger.debug("Using cached data for %s", entry.vin)
        return client._cache.snapshot(entry.vin)


async def _fetch_status(client: SubaruClient, entry: VehicleCacheEntry) -> bool:
    """Pull status, condition, health, location and presets.

    Nothing is merged into the cache unless every request succeeded.
    Returns ``False`` (cache untouched) on an unsuccessful status
    response or a 5xx transport error.
    """
    session = client._require_session()
    info = entry.info
    vin = entry.vin
    raw: dict[str, Any] = {}

    try:
        await session.ensure_valid(vin)
        response = await session.get(API_VEHICLE_STATUS)
        raw["vehicleStatus"] = response
        if not response.get("success") or not isinstance(response.get("data"), dict):
            _logger.warning("Vehicle status for %s was not successful", vin)
            _store_raw(client, vin, raw)
            return False

        status = parse_vehicle_status(response, has_tpms=info.has_tpms)
        health: dict[str, Any] = {}
        api_gen = info.api_gen
        tries = client._config.remote_query_tries

        if info.has_remote and api_gen in (ApiGen.G2, ApiGen.G3):
            assert api_gen is not None  # noqa: S101
            condition_endpoint = query_endpoint(RemoteQuery.CONDITION, api_gen)
            condition_resp = await remote_query(session, vin, condition_endpoint, tries=tries)
            raw["condition"] = condition_resp
            capabilities = status_payload_heuristic(info, {**entry.status, **status})
            status.update(
                parse_condition(
                    condition_resp,
                    has_power_windows=capabilities["power_windows"],
                    has_sunroof=info.has_sunroof,
                    is_ev=info.is_ev,
                )
            )

            health_endpoint = query_endpoint(RemoteQuery.HEALTH, api_gen)
            health_resp = await remote_query(session, vin, health_endpoint, tries=tries)
            raw["health"] = health_resp
            health = parse_health(health_resp, info.features)

            location = await _locate(client, entry, hard_poll=False, raw=raw)
            if location is not None:
                status.update(location)

        presets: list[dict[str, Any]] | None = None
        if info.has_res or info.is_ev:
            presets, preset_raw = await _climate_api.fetch_presets(session, is_ev=info.is_ev)
            raw.update(preset_raw)
    except SubaruTransportError as exc:
        if not exc.is_server_error:
            raise
        _logger.warning("Vehicle data refresh for %s failed with HTTP %s; keeping cached data", vin, exc.status_code)
        return False

    client._cache.merge_status(vin, status)
    if health:
        client._cache.merge_health(vin, health)
    if presets is not None:
        client._cache.set_climate(vin, presets)
    _store_raw(client, vin, raw)
    return True


def _store_raw(client: SubaruClient, vin: str, raw: Mapping[str, dict[str, Any]]) -> None:
    for key, response in raw.items():
        client._cache.store_raw(vin, key, response)


# ------------------------------------------------------------------
# Location
# ------------------------------------------------------------------


async def update(client: SubaruClient, vin: str, force: bool = False) -> VehicleData:
    """Request a live location when stale (or forced) and return a snapshot."""
    entry = client._vehicle(vin)
    if not entry.info.has_remote:
        raise VehicleNotSupported("Active STARLINK Security Plus subscription required.")

    async with client._locks.hold(entry.vin):
        if force or is_stale(entry.last_update, client.get_update_interval()):
            raw: dict[str, Any] = {}
            location = await _locate(client, entry, hard_poll=True, raw=raw)
            _store_raw(client, entry.vin, raw)
            if location is not None:
                client._cache.merge_status(entry.vin, location)
                client._cache.mark_updated(entry.vin)
        else:
            _logger.debug("Location for %s is recent, not updating", entry.vin)
        return client._cache.snapshot(entry.vin)


async def _locate(
    client: SubaruClient,
    entry: VehicleCacheEntry,
    *,
    hard_poll: bool,
    raw: dict[str, Any],
) -> dict[str, Any] | None:
    """Return parsed location data, or ``None`` if none was obtained.

    ``hard_poll`` sends the PIN-protected locate command so the vehicle
    reports a fresh position; otherwise the last known position is read.
    """
    session = client._require_session()
    api_gen = require_api_gen(entry)
    tries = client._config.remote_query_tries

    if hard_poll:
        submit_endpoint, poll_endpoint = command_endpoints(RemoteCommand.LOCATE, api_gen)
        result = await remote_command(
            client,
            vin=entry.vin,
            command=RemoteCommand.LOCATE,
            api_gen=api_gen,
            submit_endpoint=submit_endpoint,
            poll_endpoint=poll_endpoint,
            body={"delay": 0, "vin": entry.vin},
        )
        if not result.success:
            return None
        located = _location_result(result.data)
        if located is not None:
            return parse_location(located)
        _logger.debug("Locate command returned no position, reading last known location")

    response = await remote_query(session, entry.vin, query_endpoint(RemoteQuery.LOCATE, api_gen), tries=tries)
    raw["locate"] = response
    located = _location_result(response)
    return parse_location(located) if located is not None else None


def _location_result(response: Mapping[str, Any]) -> dict[str, Any] | None:
    data = response.get("data")
    if not response.get("success") or not isinstance(data, dict):
        return None
    result = data.get("result")
    return result if isinstance(result, dict) else None


# ------------------------------------------------------------------
# Climate presets
# ------------------------------------------------------------------


def _require_climate_capable(entry: VehicleCacheEntry) -> None:
    if not (entry.info.has_res or entry.info.is_ev):
        raise VehicleNotSupported(
            "Active STARLINK Security Plus subscription and remote start capable vehicle required."
        )


async def load_climate(
    client: SubaruClient,
    entry: VehicleCacheEntry,
    *,
    refresh: bool = False,
) -> list[dict[str, Any]]:
    """Return the vehicle's presets, fetching them if never loaded."""
    _require_climate_capable(entry)
    if entry.climate is None or refresh:
        session = client._require_session()
        await session.ensure_valid(entry.vin)
        presets, raw = await _climate_api.fetch_presets(session, is_ev=entry.info.is_ev)
        client._cache.set_climate(entry.vin, presets)
        _store_raw(client, entry.vin, raw)
    return list(entry.climate or [])


async def list_climate_preset_names(client: SubaruClient, vin: str) -> list[str]:
    entry = client._vehicle(vin)
    async with client._locks.hold(entry.vin):
        presets = await load_climate(client, entry)
    return [str(p.get(_climate_api.PRESET_NAME, "")) for p in presets]


async def get_climate_preset_by_name(client: SubaruClient, vin: str, preset_name: str) -> dict[str, Any] | None:
    entry = client._vehicle(vin)
    async with client._locks.hold(entry.vin):
        presets = await load_climate(client, entry)
    return next((dict(p) for p in presets if p.get(_climate_api.PRESET_NAME) == preset_name), None)


async def get_user_climate_preset_data(client: SubaruClient, vin: str) -> list[dict[str, Any]]:
    entry = client._vehicle(vin)
    async with client._locks.hold(entry.vin):
        presets = await load_climate(client, entry)
    return [dict(p) for p in presets if p.get(_climate_api.PRESET_TYPE) == _climate_api.PRESET_TYPE_USER]


async def update_user_climate_presets(
    client: SubaruClient,
    vin: str,
    preset_data: Sequence[Mapping[str, Any]],
) -> bool:
    """Replace the user presets.

    Raises
    ------
    VehicleNotSupported
        If the vehicle cannot remote start.
    ValueError
        On more than four presets or an invalid option value.
    """
    entry = client._vehicle(vin)
    _require_climate_capable(entry)
    if len(preset_data) > _climate_api.MAX_PRESETS:
        raise ValueError(f"Maximum of {_climate_api.MAX_PRESETS} climate presets allowed")
    validated = [_climate_api.validate_preset(p, is_ev=entry.info.is_ev) for p in preset_data]

    async with client._locks.hold(entry.vin):
        session = client._require_session()
        await session.ensure_valid(entry.vin)
        if not await _climate_api.save_user_presets(session, validated):
            _logger.warning("Saving climate presets for %s was not successful", entry.vin)
            return False
        await load_climate(client, entry, refresh=True)
    return True


async def delete_climate_preset_by_name(client: SubaruClient, vin: str, preset_name: str) -> bool:
    user_presets = await get_user_climate_preset_data(client, vin)
    remaining = [p for p in user_presets if p.get(_climate_api.PRESET_NAME) != preset_name]
    if len(remaining) == len(user_presets):
        raise ValueError(f"User preset {preset_name!r} not found")
    return await update_user_climate_presets(client, vin, remaining)
