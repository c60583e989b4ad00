"""subarulink - Async Python client for the Subaru STARLINK API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("subarulink")
except PackageNotFoundError:
    __version__ = "0+local"
from subarulink._constants import ALL_DOORS, DRIVERS_DOOR, TAILGATE_DOOR, VALID_DOORS
from subarulink.client import SubaruClient
from subarulink.config import MIN_FETCH_INTERVAL, MIN_UPDATE_INTERVAL, SubaruConfig
from subarulink.exceptions import (
    IncompleteCredentials,
    InvalidCredentials,
    InvalidPIN,
    PINLockoutProtect,
    RemoteServiceFailure,
    SubaruApiError,
    SubaruConfigError,
    SubaruError,
    SubaruTransportError,
    VehicleNotSupported,
)
from subarulink.models import (
    ApiGen,
    CommandResult,
    RemoteCommand,
    RemoteQuery,
    VehicleData,
    VehicleInfo,
)

__all__ = [
    "__version__",
    "ALL_DOORS",
    "ApiGen",
    "CommandResult",
    "DRIVERS_DOOR",
    "IncompleteCredentials",
    "InvalidCredentials",
    "InvalidPIN",
    "MIN_FETCH_INTERVAL",
    "MIN_UPDATE_INTERVAL",
    "PINLockoutProtect",
    "RemoteCommand",
    "RemoteQuery",
    "RemoteServiceFailure",
    "SubaruApiError",
    "SubaruClient",
    "SubaruConfig",
    "SubaruConfigError",
    "SubaruError",
    "SubaruTransportError",
    "TAILGATE_DOOR",
    "VALID_DOORS",
    "VehicleData",
    "VehicleInfo",
    "VehicleNotSupported",
]
