"""Internal per-vehicle cache with staleness timers."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from subarulink.models.vehicle import VehicleData, VehicleInfo


def _is_meaningful(value: Any) -> bool:
    """Return True if the value should overwrite cached data."""
    if value is None:
        return False
    if value == "":
        return False
    if value == []:
        return False
    return bool(value != {})


def _merge_dict(target: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    """Merge incoming into target, keeping cached values for empty fields."""
    for key, value in incoming.items():
        if isinstance(value, dict):
            if not value:
                continue
            existing = target.get(key)
            if isinstance(existing, dict):
                _merge_dict(existing, value)
            else:
                target[key] = copy.deepcopy(value)
        else:
            if _is_meaningful(value):
                target[key] = value
    return target


def utcnow() -> datetime:
    return datetime.now(UTC)


def is_stale(last: datetime | None, interval: float, now: datetime | None = None) -> bool:
    """Whether more than *interval* seconds passed since *last* (never-set counts as stale)."""
    if last is None:
        return True
    now = now or utcnow()
    return (now - last).total_seconds() > interval


@dataclass
class VehicleCacheEntry:
    """Cached metadata, status and timers for a single vehicle."""

    vin: str
    info: VehicleInfo
    last_fetch: datetime | None = None
    last_update: datetime | None = None
    status: dict[str, Any] = field(default_factory=dict)
    health: dict[str, Any] = field(default_factory=dict)
    climate: list[dict[str, Any]] | None = None
    raw: dict[str, Any] = field(default_factory=dict)


class VehicleDataCache:
    """Per-vehicle entries keyed by upper-case VIN."""

    def __init__(self) -> None:
        self._vehicles: dict[str, VehicleCacheEntry] = {}

    def __contains__(self, vin: object) -> bool:
        return isinstance(vin, str) and vin.upper() in self._vehicles

    def vins(self) -> list[str]:
        return list(self._vehicles)

    def register(self, info: VehicleInfo, raw: dict[str, Any] | None = None) -> VehicleCacheEntry:
        """Add (or replace the metadata of) a vehicle."""
        vin = info.vin.upper()
        entry = self._vehicles.get(vin)
        if entry is None:
            entry = VehicleCacheEntry(vin=vin, info=info)
            self._vehicles[vin] = entry
        else:
            entry.info = info
        if raw is not None:
            entry.raw["switchVehicle"] = copy.deepcopy(raw)
        return entry

    def get(self, vin: str) -> VehicleCacheEntry | None:
        return self._vehicles.get(vin.upper())

    def merge_status(self, vin: str, data: dict[str, Any]) -> dict[str, Any]:
        entry = self._vehicles[vin.upper()]
        _merge_dict(entry.status, data)
        return copy.deepcopy(entry.status)

    def merge_health(self, vin: str, data: dict[str, Any]) -> dict[str, Any]:
        entry = self._vehicles[vin.upper()]
        _merge_dict(entry.health, data)
        return copy.deepcopy(entry.health)

    def set_climate(self, vin: str, presets: list[dict[str, Any]]) -> None:
        self._vehicles[vin.upper()].climate = copy.deepcopy(presets)

    def store_raw(self, vin: str, key: str, response: dict[str, Any]) -> None:
        self._vehicles[vin.upper()].raw[key] = copy.deepcopy(response)

    def mark_fetched(self, vin: str, when: datetime | None = None) -> None:
        self._vehicles[vin.upper()].last_fetch = when or utcnow()

    def mark_updated(self, vin: str, when: datetime | None = None) -> None:
        self._vehicles[vin.upper()].last_update = when or utcnow()

    def snapshot(self, vin: str) -> VehicleData:
        """Return an immutable copy of the cached data for *vin*."""
        entry = self._vehicles[vin.upper()]
        return VehicleData(
            vin=entry.vin,
            info=entry.info,
            status=copy.deepcopy(entry.status),
            health=copy.deepcopy(entry.health),
            climate=copy.deepcopy(entry.climate),
            last_fetch=entry.last_fetch,
            last_update=entry.last_update,
        )
