"""Vehicle status, condition, health and location parsing.

Endpoints:
  - /vehicleStatus.json
  - /service/g2/condition/execute.json
  - /vehicleHealth.json
  - locate / vehicleLocate results

Parsers return flat dicts keyed by the upper-case field names below; the
client merges them into the cached status.  Values equal to the API's
"not available" sentinels are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from subarulink._constants import (
    API_AVG_FUEL_CONSUMPTION,
    API_DIST_TO_EMPTY,
    API_DOOR_BOOT_POSITION,
    API_DOOR_ENGINE_HOOD_POSITION,
    API_DOOR_FRONT_LEFT_POSITION,
    API_DOOR_FRONT_RIGHT_POSITION,
    API_DOOR_REAR_LEFT_POSITION,
    API_DOOR_REAR_RIGHT_POSITION,
    API_EV_DISTANCE_TO_EMPTY,
    API_HEALTH_FEATURE,
    API_HEALTH_ONDATES,
    API_HEALTH_TROUBLE,
    API_LAST_UPDATED_DATE,
    API_ODOMETER,
    API_TIMESTAMP,
    API_TIRE_PRESSURE_FL,
    API_TIRE_PRESSURE_FR,
    API_TIRE_PRESSURE_RL,
    API_TIRE_PRESSURE_RR,
    API_WINDOW_FRONT_LEFT_STATUS,
    API_WINDOW_FRONT_RIGHT_STATUS,
    API_WINDOW_REAR_LEFT_STATUS,
    API_WINDOW_REAR_RIGHT_STATUS,
    API_WINDOW_SUNROOF_STATUS,
    BAD_AVG_FUEL_CONSUMPTION,
    BAD_DISTANCE_TO_EMPTY_FUEL,
    BAD_LATITUDE,
    BAD_LONGITUDE,
    BAD_TIRE_PRESSURE,
)

_logger = logging.getLogger(__name__)

ODOMETER = "ODOMETER"
TIMESTAMP = "TIMESTAMP"
AVG_FUEL_CONSUMPTION = "AVG_FUEL_CONSUMPTION"
DIST_TO_EMPTY = "DISTANCE_TO_EMPTY_FUEL"
TIRE_PRESSURE_FL = "TIRE_PRESSURE_FL"
TIRE_PRESSURE_FR = "TIRE_PRESSURE_FR"
TIRE_PRESSURE_RL = "TIRE_PRESSURE_RL"
TIRE_PRESSURE_RR = "TIRE_PRESSURE_RR"
LAST_UPDATED_DATE = "LAST_UPDATED_DATE"
WINDOW_SUNROOF_STATUS = "WINDOW_SUNROOF_STATUS"
EV_DISTANCE_TO_EMPTY = "EV_DISTANCE_TO_EMPTY"
LATITUDE = "LATITUDE"
LONGITUDE = "LONGITUDE"
LOCATION_VALID = "LOCATION_VALID"
LOCATION_TIMESTAMP = "LOCATION_TIMESTAMP"
HEADING = "HEADING"
LOCATION_NAME = "LOCATION_NAME"
HEALTH_TROUBLE = "HEALTH_TROUBLE"
HEALTH_FEATURES = "HEALTH_FEATURES"
HEALTH_ONDATE = "HEALTH_ONDATE"

_TIRE_FIELDS: tuple[tuple[str, str], ...] = (
    (TIRE_PRESSURE_FL, API_TIRE_PRESSURE_FL),
    (TIRE_PRESSURE_FR, API_TIRE_PRESSURE_FR),
    (TIRE_PRESSURE_RL, API_TIRE_PRESSURE_RL),
    (TIRE_PRESSURE_RR, API_TIRE_PRESSURE_RR),
)

_DOOR_FIELDS: tuple[tuple[str, str], ...] = (
    ("DOOR_BOOT_POSITION", API_DOOR_BOOT_POSITION),
    ("DOOR_ENGINE_HOOD_POSITION", API_DOOR_ENGINE_HOOD_POSITION),
    ("DOOR_FRONT_LEFT_POSITION", API_DOOR_FRONT_LEFT_POSITION),
    ("DOOR_FRONT_RIGHT_POSITION", API_DOOR_FRONT_RIGHT_POSITION),
    ("DOOR_REAR_LEFT_POSITION", API_DOOR_REAR_LEFT_POSITION),
    ("DOOR_REAR_RIGHT_POSITION", API_DOOR_REAR_RIGHT_POSITION),
)

_WINDOW_FIELDS: tuple[tuple[str, str], ...] = (
    ("WINDOW_FRONT_LEFT_STATUS", API_WINDOW_FRONT_LEFT_STATUS),
    ("WINDOW_FRONT_RIGHT_STATUS", API_WINDOW_FRONT_RIGHT_STATUS),
    ("WINDOW_REAR_LEFT_STATUS", API_WINDOW_REAR_LEFT_STATUS),
    ("WINDOW_REAR_RIGHT_STATUS", API_WINDOW_REAR_RIGHT_STATUS),
)


def safe_float(value: Any) -> float | None:
    """Convert numbers and numeric strings to float; ``None`` otherwise."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def safe_int(value: Any) -> int | None:
    number = safe_float(value)
    return None if number is None else int(number)


def _is_sentinel(value: Any, sentinel: str) -> bool:
    return value is not None and str(value) == sentinel


def _data(response: Mapping[str, Any]) -> dict[str, Any]:
    data = response.get("data")
    return data if isinstance(data, dict) else {}


def parse_vehicle_status(response: Mapping[str, Any], *, has_tpms: bool) -> dict[str, Any]:
    """Parse ``/vehicleStatus.json``.

    Tire pressures are only read for TPMS-equipped vehicles and are
    rounded to 0.1 psi.
    """
    data = _data(response)
    status: dict[str, Any] = {}

    odometer = safe_int(data.get(API_ODOMETER))
    if odometer is not None:
        status[ODOMETER] = odometer

    if data.get(API_TIMESTAMP) is not None:
        status[TIMESTAMP] = str(data[API_TIMESTAMP])

    avg_fuel = data.get(API_AVG_FUEL_CONSUMPTION)
    if not _is_sentinel(avg_fuel, BAD_AVG_FUEL_CONSUMPTION):
        value = safe_float(avg_fuel)
        if value is not None:
            status[AVG_FUEL_CONSUMPTION] = value

    dist = data.get(API_DIST_TO_EMPTY)
    if not _is_sentinel(dist, BAD_DISTANCE_TO_EMPTY_FUEL):
        value = safe_float(dist)
        if value is not None:
            status[DIST_TO_EMPTY] = value

    if has_tpms:
        for key, api_key in _TIRE_FIELDS:
            raw = data.get(api_key)
            if _is_sentinel(raw, BAD_TIRE_PRESSURE):
                continue
            pressure = safe_float(raw)
            if pressure is not None:
                status[key] = round(pressure, 1)

    return status


def parse_condition(
    response: Mapping[str, Any],
    *,
    has_power_windows: bool,
    has_sunroof: bool,
    is_ev: bool,
) -> dict[str, Any]:
    """Parse a condition query: doors, windows, sunroof and EV range."""
    data = _data(response).get("result")
    if not isinstance(data, dict):
        return {}
    keep: dict[str, Any] = {}

    for key, api_key in _DOOR_FIELDS:
        if data.get(api_key) is not None:
            keep[key] = str(data[api_key])

    if data.get(API_LAST_UPDATED_DATE) is not None:
        keep[TIMESTAMP] = str(data[API_LAST_UPDATED_DATE])
        keep[LAST_UPDATED_DATE] = str(data[API_LAST_UPDATED_DATE])

    if has_power_windows:
        for key, api_key in _WINDOW_FIELDS:
            if data.get(api_key) is not None:
                keep[key] = str(data[api_key])

    if has_sunroof and data.get(API_WINDOW_SUNROOF_STATUS) is not None:
        keep[WINDOW_SUNROOF_STATUS] = str(data[API_WINDOW_SUNROOF_STATUS])

    if is_ev:
        ev_range = safe_int(data.get(API_EV_DISTANCE_TO_EMPTY))
        if ev_range is not None:
            keep[EV_DISTANCE_TO_EMPTY] = ev_range

    return keep


def parse_health(response: Mapping[str, Any], features: list[str]) -> dict[str, Any]:
    """Parse ``/vehicleHealth.json`` into MIL items for the vehicle's own features.

    Each item reports whether it is in trouble and, if so, the most recent
    date the indicator came on.
    """
    items = _data(response).get("vehicleHealthItems") or []
    result: dict[str, Any] = {HEALTH_TROUBLE: False, HEALTH_FEATURES: {}}

    for item in items:
        if not isinstance(item, dict):
            continue
        feature = item.get(API_HEALTH_FEATURE)
        if feature not in features:
            continue
        mil: dict[str, Any] = {HEALTH_TROUBLE: False, HEALTH_ONDATE: None}
        if item.get(API_HEALTH_TROUBLE):
            mil[HEALTH_TROUBLE] = True
            on_dates = sorted((str(d) for d in item.get(API_HEALTH_ONDATES) or []), reverse=True)
            mil[HEALTH_ONDATE] = on_dates[0] if on_dates else None
            result[HEALTH_TROUBLE] = True
        result[HEALTH_FEATURES][feature] = mil

    return result


def parse_location(result: Mapping[str, Any]) -> dict[str, Any]:
    """Parse a locate ``result`` object.

    Coordinates equal to the ``(180, 90)`` sentinel are reported as
    invalid and not copied.
    """
    location: dict[str, Any] = {LOCATION_VALID: False}

    longitude = safe_float(result.get("longitude"))
    latitude = safe_float(result.get("latitude"))
    if longitude is not None and latitude is not None:
        if longitude != BAD_LONGITUDE and latitude != BAD_LATITUDE:
            location[LONGITUDE] = longitude
            location[LATITUDE] = latitude
            location[LOCATION_VALID] = True
            if result.get("locationTimestamp") is not None:
                location[LOCATION_TIMESTAMP] = str(result["locationTimestamp"])
        else:
            _logger.debug("Ignoring sentinel vehicle location")

    heading = result.get("heading")
    if heading is not None:
        location[HEADING] = str(heading)

    if result.get("locationName") is not None:
        location[LOCATION_NAME] = str(result["locationName"])

    return location
