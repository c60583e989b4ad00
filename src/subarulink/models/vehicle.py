"""Vehicle metadata model."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from subarulink._constants import (
    API_FEATURE_ACTIVE,
    API_FEATURE_G1_TELEMATICS,
    API_FEATURE_G2_TELEMATICS,
    API_FEATURE_G3_TELEMATICS,
    API_FEATURE_LOCK_STATUS,
    API_FEATURE_MOONROOF_LIST,
    API_FEATURE_PHEV,
    API_FEATURE_REMOTE,
    API_FEATURE_REMOTE_START,
    API_FEATURE_SAFETY,
    API_FEATURE_TPMS,
    API_FEATURE_WINDOWS_LIST,
)


class ApiGen(enum.StrEnum):
    """Telematics generation reported in a vehicle's feature list."""

    G1 = "g1"
    G2 = "g2"
    G3 = "g3"

    @property
    def endpoint_gen(self) -> str:
        """Generation segment used in endpoint paths; g3 reuses g2 endpoints."""
        return "g1" if self is ApiGen.G1 else "g2"


_GEN_FEATURES: tuple[tuple[str, ApiGen], ...] = (
    (API_FEATURE_G1_TELEMATICS, ApiGen.G1),
    (API_FEATURE_G2_TELEMATICS, ApiGen.G2),
    (API_FEATURE_G3_TELEMATICS, ApiGen.G3),
)


class VehicleInfo(BaseModel):
    """A vehicle associated with the account.

    Built from the ``data`` object returned by ``/selectVehicle.json``.
    Capability flags are derived from ``features`` and
    ``subscriptionFeatures``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    vin: str = Field(default="", validation_alias=AliasChoices("vin"))
    """Vehicle Identification Number."""
    name: str = Field(default="", validation_alias=AliasChoices("nickname", "name"))
    """User-assigned vehicle nickname."""
    model_name: str = Field(default="", validation_alias=AliasChoices("modelName", "model_name"))
    """Model name (e.g. ``"Outback"``)."""
    model_year: str = Field(default="", validation_alias=AliasChoices("modelYear", "model_year"))
    """Model year as reported by the API."""
    features: list[str] = Field(default_factory=list)
    """Vehicle hardware feature codes."""
    subscription_features: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("subscriptionFeatures", "subscription_features"),
    )
    """STARLINK services the subscription includes (``REMOTE``, ``SAFETY``...)."""
    subscription_status: str = Field(
        default="",
        validation_alias=AliasChoices("subscriptionStatus", "subscription_status"),
    )
    """Subscription status (``"ACTIVE"`` when current)."""

    @field_validator("features", "subscription_features", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("model_year", mode="before")
    @classmethod
    def _year_as_str(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @property
    def api_gen(self) -> ApiGen | None:
        """Telematics generation, or ``None`` when the feature list names none."""
        for feature, gen in _GEN_FEATURES:
            if feature in self.features:
                return gen
        return None

    @property
    def has_active_subscription(self) -> bool:
        return self.subscription_status == API_FEATURE_ACTIVE

    @property
    def has_remote(self) -> bool:
        """Remote services (lock, unlock, locate...) are available."""
        return API_FEATURE_REMOTE in self.subscription_features and self.has_active_subscription

    @property
    def has_res(self) -> bool:
        """Remote engine start is available."""
        return API_FEATURE_REMOTE_START in self.features and self.has_remote

    @property
    def has_safety(self) -> bool:
        return API_FEATURE_SAFETY in self.subscription_features and self.has_active_subscription

    @property
    def is_ev(self) -> bool:
        return API_FEATURE_PHEV in self.features

    @property
    def has_tpms(self) -> bool:
        return API_FEATURE_TPMS in self.features

    @property
    def has_sunroof(self) -> bool:
        return any(feature in API_FEATURE_MOONROOF_LIST for feature in self.features)

    @property
    def has_power_windows_feature(self) -> bool:
        return any(feature in API_FEATURE_WINDOWS_LIST for feature in self.features)

    @property
    def has_lock_status_feature(self) -> bool:
        return API_FEATURE_LOCK_STATUS in self.features


class VehicleData(BaseModel):
    """Snapshot of everything cached for one vehicle.

    Returned by :meth:`subarulink.SubaruClient.fetch`, ``update`` and
    ``get_data``; later refreshes never mutate an existing snapshot.
    """

    model_config = ConfigDict(frozen=True)

    vin: str
    info: VehicleInfo
    status: dict[str, Any] = Field(default_factory=dict)
    health: dict[str, Any] = Field(default_factory=dict)
    climate: list[dict[str, Any]] | None = None
    last_fetch: datetime | None = None
    last_update: datetime | None = None


def status_payload_heuristic(info: VehicleInfo, status: Mapping[str, Any]) -> dict[str, bool]:
    """Infer window and lock-status support for a vehicle.

    Feature flags are incomplete: a sunroof implies power windows, and
    g2/g3 vehicles often report door locks and windows without announcing
    the feature.  For those, a non-empty status payload is taken as
    support.  This is a heuristic and may be wrong for unusual trims.
    """
    gen = info.api_gen
    reports_status = bool(status)
    power_windows = info.has_power_windows_feature or info.has_sunroof or (gen is ApiGen.G2 and reports_status)
    lock_status = info.has_lock_status_feature or (gen in (ApiGen.G2, ApiGen.G3) and reports_status)
    return {"power_windows": power_windows, "lock_status": lock_status}
