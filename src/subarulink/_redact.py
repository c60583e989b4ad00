"""Helpers for safe debug logging.

subarulink handles account credentials, the STARLINK PIN and personal
vehicle data (VIN, position, owner details).  This module redacts those
fields before they reach DEBUG logs or diagnostics dumps.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "pin",
        "loginusername",
        "deviceid",
        "verificationcode",
        "cookie",
        "authorization",
        # Personal / vehicle identifying data
        "cachedstatecode",
        "customer",
        "email",
        "firstname",
        "lastname",
        "latitude",
        "licenseplate",
        "licenseplatestate",
        "longitude",
        "nickname",
        "odometer",
        "odometervalue",
        "odometervaluekilometers",
        "oemcustid",
        "phone",
        "preferreddealer",
        "sessioncustomer",
        "timezone",
        "useroemcustid",
        "vehiclegeoposition",
        "vehiclekey",
        "vehiclemileage",
        "vehiclename",
        "vhsid",
        "vin",
        "zip",
    }
)


def _is_sensitive(key: Any) -> bool:
    return str(key).lower() in _SENSITIVE_VALUE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Long strings are truncated to *max_string* characters.
    """
    if _depth > 20:
        return "<max-depth>"

    if isinstance(value, str):
        if max_string and len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(k): "<redacted>" if _is_sensitive(k) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)


def redact_raw_data(data: Mapping[str, Any]) -> dict[str, Any]:
    """Redact a raw API dump for sharing, keeping strings at full length."""
    return redact_for_log(data, max_string=0)
