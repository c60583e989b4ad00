"""Internal remote-command operations for :class:`subarulink.client.SubaruClient`.

These functions keep `client.py` small without changing the public API.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from subarulink._api.climate import save_quick_start
from subarulink._cache import VehicleCacheEntry
from subarulink._client.policy import remote_command, require_api_gen
from subarulink._client.reads import load_climate
from subarulink._constants import VALID_DOORS, WHICH_DOOR
from subarulink.exceptions import RemoteServiceFailure, VehicleNotSupported
from subarulink.models.command import CommandResult, RemoteCommand, command_endpoints

if TYPE_CHECKING:
    from subarulink.client import SubaruClient

_logger = logging.getLogger(__name__)


def _require_remote(entry: VehicleCacheEntry) -> None:
    if not entry.info.has_remote:
        raise VehicleNotSupported("Active STARLINK Security Plus subscription required.")
    require_api_gen(entry)


async def _actuate_locked(
    client: SubaruClient,
    entry: VehicleCacheEntry,
    command: RemoteCommand,
    payload: Mapping[str, Any] | None = None,
    poll_endpoint: str | None = None,
) -> CommandResult:
    _require_remote(entry)
    api_gen = require_api_gen(entry)
    submit_endpoint, default_poll = command_endpoints(command, api_gen)
    body: dict[str, Any] = {"delay": 0, "vin": entry.vin}
    if payload:
        body.update(payload)
    return await remote_command(
        client,
        vin=entry.vin,
        command=command,
        api_gen=api_gen,
        submit_endpoint=submit_endpoint,
        poll_endpoint=poll_endpoint or default_poll,
        body=body,
    )


async def actuate(
    client: SubaruClient,
    vin: str,
    command: RemoteCommand,
    payload: Mapping[str, Any] | None = None,
    poll_endpoint: str | None = None,
) -> CommandResult:
    """Dispatch *command* to *vin* under the vehicle lock.

    Raises
    ------
    VehicleNotSupported
        Without a network call, when the vehicle lacks an active remote
        services subscription or its generation is unknown.
    """
    entry = client._vehicle(vin)
    _require_remote(entry)
    async with client._locks.hold(entry.vin):
        return await _actuate_locked(client, entry, command, payload, poll_endpoint)


async def lock(client: SubaruClient, vin: str) -> CommandResult:
    return await actuate(client, vin, RemoteCommand.LOCK, {"forceKeyInCar": False})


async def unlock(client: SubaruClient, vin: str, door: str) -> CommandResult:
    if door not in VALID_DOORS:
        raise ValueError(f"Invalid door {door!r}; expected one of {VALID_DOORS}")
    return await actuate(client, vin, RemoteCommand.UNLOCK, {WHICH_DOOR: door})


async def lights(client: SubaruClient, vin: str) -> CommandResult:
    return await actuate(client, vin, RemoteCommand.LIGHTS)


async def lights_stop(client: SubaruClient, vin: str) -> CommandResult:
    return await actuate(client, vin, RemoteCommand.LIGHTS_STOP)


async def horn(client: SubaruClient, vin: str) -> CommandResult:
    return await actuate(client, vin, RemoteCommand.HORN)


async def horn_stop(client: SubaruClient, vin: str) -> CommandResult:
    return await actuate(client, vin, RemoteCommand.HORN_STOP)


def _require_remote_start(entry: VehicleCacheEntry) -> None:
    _require_remote(entry)
    if not (entry.info.has_res or entry.info.is_ev):
        raise VehicleNotSupported("Remote start not supported for this vehicle")


async def remote_stop(client: SubaruClient, vin: str) -> CommandResult:
    _require_remote_start(client._vehicle(vin))
    return await actuate(client, vin, RemoteCommand.REMOTE_STOP)


async def remote_start(client: SubaruClient, vin: str, preset_name: str) -> CommandResult:
    """Start the engine (or climate control on EVs) with a named preset.

    The preset is first saved as the quick-start setting, then the start
    command is sent with the preset as payload.
    """
    entry = client._vehicle(vin)
    _require_remote_start(entry)
    client._check_pin_lockout()
    client._require_pin()
    session = client._require_session()

    async with client._locks.hold(entry.vin):
        presets = await load_climate(client, entry)
        preset = next((p for p in presets if p.get("name") == preset_name), None)
        if preset is None:
            raise ValueError(f"Climate preset {preset_name!r} not found")

        await session.ensure_valid(entry.vin)
        if not await save_quick_start(session, preset):
            raise RemoteServiceFailure("Failed to save climate preset settings")
        return await _actuate_locked(client, entry, RemoteCommand.REMOTE_START, preset)


async def charge_start(client: SubaruClient, vin: str) -> CommandResult:
    if not client._vehicle(vin).info.is_ev:
        raise VehicleNotSupported("PHEV charging not supported for this vehicle")
    return await actuate(client, vin, RemoteCommand.CHARGE_START)
