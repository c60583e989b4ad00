"""Login and two-factor enrollment payloads.

Endpoints:
  - /login.json
  - /twoStepAuthContacts.json
  - /twoStepAuthSendVerification.json
  - /twoStepAuthVerify.json

All four take form-encoded bodies and answer with the usual
``{"success": ..., "errorCode": ..., "data": ...}`` envelope.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from subarulink._constants import API_LOGIN, AUTH_CODE_LENGTH, LOGIN_REJECTED_CODES
from subarulink._redact import redact_for_log
from subarulink.config import SubaruConfig
from subarulink.exceptions import InvalidCredentials, SubaruApiError

_logger = logging.getLogger(__name__)


class LoginResult(BaseModel):
    """Fields of a successful login used by the session manager."""

    model_config = ConfigDict(frozen=True)

    registered: bool = False
    vins: list[str] = Field(default_factory=list)


def build_login_form(config: SubaruConfig, vin: str = "") -> dict[str, str]:
    """Build the form body for ``/login.json``.

    Parameters
    ----------
    config : SubaruConfig
        Client configuration carrying the credentials.
    vin : str
        Vehicle to preselect; may be empty.
    """
    return {
        "env": "cloudprod",
        "loginUsername": config.username,
        "password": config.password,
        "deviceId": config.device_id,
        "passwordToken": "",
        "selectedVin": vin,
        "pushToken": "",
        "deviceType": "android",
    }


def parse_login_response(response: dict[str, Any]) -> LoginResult:
    """Parse a ``/login.json`` response.

    Raises
    ------
    InvalidCredentials
        If the server rejected the username or password.
    SubaruApiError
        For any other unsuccessful response.
    """
    if response.get("success"):
        data = response.get("data") or {}
        vehicles = data.get("vehicles") or []
        return LoginResult(
            registered=bool(data.get("deviceRegistered", False)),
            vins=[str(vehicle["vin"]) for vehicle in vehicles if isinstance(vehicle, dict) and vehicle.get("vin")],
        )

    code = str(response.get("errorCode") or "")
    _logger.debug("Login rejected: %s", redact_for_log(response))
    if code in LOGIN_REJECTED_CODES:
        raise InvalidCredentials(f"{API_LOGIN} failed: {code}", code=code, endpoint=API_LOGIN)
    if code:
        raise SubaruApiError(f"{API_LOGIN} failed: {code}", code=code, endpoint=API_LOGIN)
    raise SubaruApiError(f"{API_LOGIN} failed: unexpected response format", endpoint=API_LOGIN)


def parse_contact_methods(response: dict[str, Any]) -> dict[str, str]:
    """Extract ``{method: masked_contact}`` from ``/twoStepAuthContacts.json``."""
    data = response.get("data")
    if not isinstance(data, dict):
        return {}
    return {str(method): str(contact) for method, contact in data.items()}


def build_send_verification_form(contact_method: str) -> dict[str, str]:
    return {"contactMethod": contact_method, "languagePreference": "EN"}


def is_valid_auth_code(code: str) -> bool:
    return len(code) == AUTH_CODE_LENGTH and code.isdigit()


def build_verify_form(config: SubaruConfig, code: str, *, make_permanent: bool = True) -> dict[str, str]:
    form = {
        "deviceId": config.device_id,
        "deviceName": config.device_name,
        "verificationCode": code,
    }
    if make_permanent:
        form["rememberDevice"] = "on"
    return form
