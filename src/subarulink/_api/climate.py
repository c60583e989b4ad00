"""Remote engine start (climate) presets.

Endpoints:
  - /service/g2/climatePresetSettings/fetch.json (vendor presets)
  - /service/g2/remoteEngineStartSettings/fetch.json (user presets)
  - /service/g2/remoteEngineStartSettings/save.json
  - /service/g2/remoteEngineQuickStartSettings/save.json

Vendor presets arrive as a list of JSON strings tagged with a
``vehicleType`` (``"gas"`` or ``"phev"``); user presets as a single JSON
string holding a list.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from subarulink._constants import (
    API_G2_FETCH_RES_SUBARU_PRESETS,
    API_G2_FETCH_RES_USER_PRESETS,
    API_G2_SAVE_RES_QUICK_START_SETTINGS,
    API_G2_SAVE_RES_SETTINGS,
)
from subarulink.session import SessionManager

_logger = logging.getLogger(__name__)

MAX_PRESETS = 4

TEMP_F = "climateZoneFrontTemp"
TEMP_F_MIN, TEMP_F_MAX = 60, 85
TEMP_C = "climateZoneFrontTempCelsius"
TEMP_C_MIN, TEMP_C_MAX = 15, 30
RUNTIME = "runTimeMinutes"
MODE = "climateZoneFrontAirMode"
HEAT_SEAT_LEFT = "heatedSeatFrontLeft"
HEAT_SEAT_RIGHT = "heatedSeatFrontRight"
REAR_DEFROST = "heatedRearWindowActive"
FAN_SPEED = "climateZoneFrontAirVolume"
RECIRCULATE = "outerAirCirculation"
REAR_AC = "airConditionOn"
PRESET_NAME = "name"
PRESET_TYPE = "presetType"
PRESET_TYPE_USER = "userPreset"
CAN_EDIT = "canEdit"
DISABLED = "disabled"
START_CONFIGURATION = "startConfiguration"
START_CONFIGURATION_EV = "START_CLIMATE_CONTROL_ONLY_ALLOW_KEY_IN_IGNITION"
START_CONFIGURATION_RES = "START_ENGINE_ALLOW_KEY_IN_IGNITION"
VEHICLE_TYPE = "vehicleType"

_SEAT_LEVELS = ("OFF", "LOW", "MEDIUM", "HIGH")

VALID_CLIMATE_OPTIONS: dict[str, tuple[str, ...]] = {
    TEMP_C: tuple(str(t) for t in range(TEMP_C_MIN, TEMP_C_MAX + 1)),
    TEMP_F: tuple(str(t) for t in range(TEMP_F_MIN, TEMP_F_MAX + 1)),
    FAN_SPEED: ("AUTO", "LOW", "MEDIUM", "HIGH"),
    HEAT_SEAT_LEFT: _SEAT_LEVELS,
    HEAT_SEAT_RIGHT: _SEAT_LEVELS,
    MODE: ("DEFROST", "FEET_DEFROST", "FACE", "FEET", "SPLIT", "AUTO"),
    RECIRCULATE: ("outsideAir", "recirculation"),
    REAR_AC: ("false", "true"),
    REAR_DEFROST: ("false", "true"),
    RUNTIME: ("5", "10"),
    PRESET_TYPE: (PRESET_TYPE_USER,),
    START_CONFIGURATION: (START_CONFIGURATION_EV, START_CONFIGURATION_RES),
}

_START_CONFIG_COMMON: dict[str, str] = {
    CAN_EDIT: "true",
    DISABLED: "false",
    PRESET_TYPE: PRESET_TYPE_USER,
}
START_CONFIG_CONSTS_EV: dict[str, str] = {**_START_CONFIG_COMMON, START_CONFIGURATION: START_CONFIGURATION_EV}
START_CONFIG_CONSTS_RES: dict[str, str] = {**_START_CONFIG_COMMON, START_CONFIGURATION: START_CONFIGURATION_RES}


def validate_preset(preset: Mapping[str, Any], *, is_ev: bool) -> dict[str, Any]:
    """Validate a user preset and return it with the start-configuration constants applied.

    Raises
    ------
    ValueError
        If the preset has no name or an option holds a value outside
        :data:`VALID_CLIMATE_OPTIONS`.
    """
    name = preset.get(PRESET_NAME)
    if not isinstance(name, str) or not name:
        raise ValueError("Climate preset requires a non-empty 'name'")

    for key, value in preset.items():
        valid = VALID_CLIMATE_OPTIONS.get(key)
        if valid is None:
            continue
        if str(value) not in valid:
            raise ValueError(f"Invalid value for {key}: {value!r}")

    constants = START_CONFIG_CONSTS_EV if is_ev else START_CONFIG_CONSTS_RES
    return {**preset, **constants}


def parse_vendor_presets(response: Mapping[str, Any], *, is_ev: bool) -> list[dict[str, Any]]:
    """Keep the vendor presets matching the vehicle's powertrain."""
    wanted = "phev" if is_ev else "gas"
    presets: list[dict[str, Any]] = []
    for item in response.get("data") or []:
        preset = json.loads(item) if isinstance(item, str) else item
        if isinstance(preset, dict) and preset.get(VEHICLE_TYPE) == wanted:
            presets.append(preset)
    return presets


def parse_user_presets(response: Mapping[str, Any]) -> list[dict[str, Any]]:
    data = response.get("data")
    if not isinstance(data, str) or not data:
        return []
    parsed = json.loads(data)
    if not isinstance(parsed, list):
        return []
    return [preset for preset in parsed if isinstance(preset, dict)]


async def fetch_presets(session: SessionManager, *, is_ev: bool) -> tuple[list[dict[str, Any]], dict[str, Any]]:
    """Fetch vendor and user presets.

    Returns the combined preset list and the raw responses keyed by the
    endpoint they came from.
    """
    vendor_resp = await session.post(API_G2_FETCH_RES_SUBARU_PRESETS)
    user_resp = await session.post(API_G2_FETCH_RES_USER_PRESETS)
    presets = parse_vendor_presets(vendor_resp, is_ev=is_ev) + parse_user_presets(user_resp)
    _logger.debug("Loaded %d climate presets", len(presets))
    raw = {
        "climatePresetSettings": vendor_resp,
        "remoteEngineStartSettings": user_resp,
    }
    return presets, raw


async def save_user_presets(session: SessionManager, presets: Sequence[Mapping[str, Any]]) -> bool:
    response = await session.post(API_G2_SAVE_RES_SETTINGS, json_body=[dict(p) for p in presets])
    return bool(response.get("success"))


async def save_quick_start(session: SessionManager, preset: Mapping[str, Any]) -> bool:
    response = await session.post(API_G2_SAVE_RES_QUICK_START_SETTINGS, json_body=dict(preset))
    return bool(response.get("success"))
