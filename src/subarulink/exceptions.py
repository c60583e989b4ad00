"""Custom exception hierarchy for subarulink."""

from __future__ import annotations

from typing import Any


class SubaruError(Exception):
    """Base exception for all subarulink errors."""


class SubaruConfigError(SubaruError):
    """Invalid or missing configuration."""


class IncompleteCredentials(SubaruConfigError):
    """Username, password or device id missing; raised before any request is made."""


class SubaruTransportError(SubaruError):
    """HTTP-level failure (network, non-2xx, invalid JSON, unexpected body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

    @property
    def is_server_error(self) -> bool:
        """Whether the failure is a 5xx response."""
        return self.status_code is not None and self.status_code >= 500


class SubaruApiError(SubaruError):
    """API returned an error code (application-level error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class InvalidCredentials(SubaruApiError):
    """Login rejected by the server."""


class InvalidPIN(SubaruApiError):
    """Remote command rejected because the stored PIN is wrong.

    Raising this sets the client's PIN lockout flag.  Further commands fail
    with :class:`PINLockoutProtect` until a different PIN is saved with
    :meth:`subarulink.SubaruClient.update_saved_pin`.
    """


class RemoteServiceFailure(SubaruApiError):
    """Remote command was not executed by the vehicle.

    ``response`` holds the last payload received from the server.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
        response: dict[str, Any] | None = None,
    ) -> None:
        self.response = response or {}
        super().__init__(message, code=code, endpoint=endpoint)


class PINLockoutProtect(SubaruError):
    """Remote command cancelled because the stored PIN was previously rejected.

    Resubmitting a rejected PIN is what gets a STARLINK account locked, so
    no request is made while the lockout flag is set.
    """


class VehicleNotSupported(SubaruError):
    """Vehicle or subscription lacks the capability required by the call."""
