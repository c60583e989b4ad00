"""Remote command enums, endpoint routing and outcome types.

A remote command goes through one or more submit/poll rounds.  Each round
produces exactly one :data:`CommandOutcome`:

* :class:`Accepted` -- the vehicle executed the command.
* :class:`Retryable` -- transient server condition; resubmit.
* :class:`Denied` -- the PIN was rejected; never resubmit.
* :class:`Failed` -- the vehicle reported failure, or polling timed out.

The retry policy turns the outcome into a :class:`CommandResult` or an
exception.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from subarulink._constants import (
    API_CONDITION,
    API_EV_CHARGE_NOW,
    API_G1_HORN_LIGHTS_STATUS,
    API_G1_LOCATE_STATUS,
    API_G1_LOCATE_UPDATE,
    API_G2_LOCATE_STATUS,
    API_G2_LOCATE_UPDATE,
    API_G2_REMOTE_ENGINE_START,
    API_G2_REMOTE_ENGINE_STOP,
    API_GEN_PLACEHOLDER,
    API_HORN_LIGHTS,
    API_HORN_LIGHTS_STOP,
    API_LIGHTS,
    API_LIGHTS_STOP,
    API_LOCATE,
    API_LOCK,
    API_REMOTE_SVC_STATUS,
    API_UNLOCK,
    API_VEHICLE_HEALTH,
)
from subarulink.models.vehicle import ApiGen

# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


class RemoteCommand(enum.StrEnum):
    """Remote services that need the PIN and go through the poller."""

    LOCK = "lock"
    UNLOCK = "unlock"
    LIGHTS = "lights"
    LIGHTS_STOP = "lightsStop"
    HORN = "hornLights"
    HORN_STOP = "hornLightsStop"
    REMOTE_START = "engineStart"
    REMOTE_STOP = "engineStop"
    CHARGE_START = "phevChargeNow"
    LOCATE = "vehicleLocate"


class RemoteQuery(enum.StrEnum):
    """PIN-less remote reads."""

    CONDITION = "condition"
    HEALTH = "health"
    LOCATE = "locate"


_SUBMIT_ENDPOINTS: dict[RemoteCommand, str] = {
    RemoteCommand.LOCK: API_LOCK,
    RemoteCommand.UNLOCK: API_UNLOCK,
    RemoteCommand.LIGHTS: API_LIGHTS,
    RemoteCommand.LIGHTS_STOP: API_LIGHTS_STOP,
    RemoteCommand.HORN: API_HORN_LIGHTS,
    RemoteCommand.HORN_STOP: API_HORN_LIGHTS_STOP,
    RemoteCommand.REMOTE_START: API_G2_REMOTE_ENGINE_START,
    RemoteCommand.REMOTE_STOP: API_G2_REMOTE_ENGINE_STOP,
    RemoteCommand.CHARGE_START: API_EV_CHARGE_NOW,
}

_HORN_LIGHTS_COMMANDS: frozenset[RemoteCommand] = frozenset(
    {RemoteCommand.LIGHTS, RemoteCommand.LIGHTS_STOP, RemoteCommand.HORN, RemoteCommand.HORN_STOP}
)

_QUERY_ENDPOINTS: dict[RemoteQuery, str] = {
    RemoteQuery.CONDITION: API_CONDITION,
    RemoteQuery.HEALTH: API_VEHICLE_HEALTH,
    RemoteQuery.LOCATE: API_LOCATE,
}


def resolve_endpoint(template: str, api_gen: ApiGen) -> str:
    """Substitute the generation segment of an endpoint template."""
    return template.replace(API_GEN_PLACEHOLDER, api_gen.endpoint_gen)


def command_endpoints(command: RemoteCommand, api_gen: ApiGen) -> tuple[str, str]:
    """Return ``(submit_endpoint, poll_endpoint)`` for *command* on a vehicle generation.

    g3 vehicles use the g2 endpoints.  On g1, horn and lights commands
    report progress through their own status endpoint.
    """
    if command is RemoteCommand.LOCATE:
        if api_gen is ApiGen.G1:
            return API_G1_LOCATE_UPDATE, API_G1_LOCATE_STATUS
        return API_G2_LOCATE_UPDATE, API_G2_LOCATE_STATUS

    submit = resolve_endpoint(_SUBMIT_ENDPOINTS[command], api_gen)
    if api_gen is ApiGen.G1 and command in _HORN_LIGHTS_COMMANDS:
        return submit, API_G1_HORN_LIGHTS_STATUS
    return submit, resolve_endpoint(API_REMOTE_SVC_STATUS, api_gen)


def query_endpoint(query: RemoteQuery, api_gen: ApiGen) -> str:
    return resolve_endpoint(_QUERY_ENDPOINTS[query], api_gen)


# ------------------------------------------------------------------
# Submit/poll state
# ------------------------------------------------------------------


@dataclass(frozen=True)
class PendingCommand:
    """A submission the server accepted; consumed by the status poller."""

    vin: str
    command: RemoteCommand
    api_gen: ApiGen
    poll_endpoint: str
    request_id: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Accepted:
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Retryable:
    reason: str
    code: str = ""
    collision: bool = False


@dataclass(frozen=True)
class Denied:
    reason: str
    code: str = ""


@dataclass(frozen=True)
class Failed:
    data: dict[str, Any] = field(default_factory=dict)
    timed_out: bool = False


CommandOutcome = Accepted | Retryable | Denied | Failed


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------


class CommandResult(BaseModel):
    """Result of a remote command as returned to callers."""

    model_config = ConfigDict(frozen=True)

    success: bool
    data: dict[str, Any] = Field(default_factory=dict)
