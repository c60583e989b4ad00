"""Client configuration for subarulink."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from subarulink._constants import API_SERVER, API_VERSION
from subarulink.exceptions import SubaruConfigError

#: Smallest accepted ``fetch_interval`` in seconds.
MIN_FETCH_INTERVAL = 60
#: Smallest accepted ``update_interval`` in seconds.
MIN_UPDATE_INTERVAL = 300


@dataclasses.dataclass(frozen=True)
class SubaruConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        STARLINK account email.
    password : str
        STARLINK account password.
    device_id : str
        Identifier this client registers as a trusted device.  Keep it stable
        between runs, otherwise two-factor enrollment is needed every time.
    pin : str
        4-digit STARLINK PIN required by remote commands.
    device_name : str
        Name shown in the account's list of trusted devices.
    country : str
        ``"USA"`` or ``"CAN"``; selects the regional API host.
    fetch_interval : int
        Seconds a cached vehicle status stays fresh (minimum 60).
    update_interval : int
        Seconds a live location stays fresh (minimum 300).
    max_session_age_mins : float
        Session age after which a remote command forces a fresh login.
    poll_attempts : int
        Maximum number of status polls per remote command.
    poll_interval : float
        Seconds between status polls.
    poll_timeout : float or None
        Optional wall-clock limit for the polling phase, in seconds.
    already_started_delay : float
        Seconds to wait after the server reports a colliding command.
    command_retries : int
        Upper bound on resubmissions of a retryable remote command.
    remote_query_tries : int
        Attempts for PIN-less remote queries (condition, health, locate).
    registration_poll_interval : float
        Seconds between logins while waiting for device registration.
    registration_poll_attempts : int
        Logins attempted before giving up on device registration.
    """

    username: str
    password: str
    device_id: str
    pin: str = ""
    device_name: str = "subarulink"
    country: str = "USA"
    fetch_interval: int = 300
    update_interval: int = 7200
    max_session_age_mins: float = 30
    poll_attempts: int = 20
    poll_interval: float = 1.0
    poll_timeout: float | None = None
    already_started_delay: float = 10.0
    command_retries: int = 5
    remote_query_tries: int = 2
    registration_poll_interval: float = 3.0
    registration_poll_attempts: int = 20

    def __post_init__(self) -> None:
        if self.country not in API_SERVER:
            raise SubaruConfigError(f"Unsupported country {self.country!r}; expected one of {sorted(API_SERVER)}")
        if self.fetch_interval < MIN_FETCH_INTERVAL:
            raise SubaruConfigError(f"fetch_interval must be at least {MIN_FETCH_INTERVAL} seconds")
        if self.update_interval < MIN_UPDATE_INTERVAL:
            raise SubaruConfigError(f"update_interval must be at least {MIN_UPDATE_INTERVAL} seconds")

    @property
    def base_url(self) -> str:
        """Regional API base URL including the version segment."""
        return f"https://{API_SERVER[self.country]}{API_VERSION}"

    @classmethod
    def from_env(cls, **overrides: Any) -> SubaruConfig:
        """Create configuration from environment variables.

        Reads ``SUBARU_USERNAME``, ``SUBARU_PASSWORD``, ``SUBARU_DEVICE_ID``
        and the optional ``SUBARU_*`` variables below. Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SUBARU_USERNAME": "username",
            "SUBARU_PASSWORD": "password",
            "SUBARU_DEVICE_ID": "device_id",
            "SUBARU_PIN": "pin",
            "SUBARU_DEVICE_NAME": "device_name",
            "SUBARU_COUNTRY": "country",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric values, handle separately
        _ENV_NUMERIC_MAP = {
            "SUBARU_FETCH_INTERVAL": ("fetch_interval", int),
            "SUBARU_UPDATE_INTERVAL": ("update_interval", int),
            "SUBARU_MAX_SESSION_AGE_MINS": ("max_session_age_mins", float),
        }
        for env_key, (field_name, convert) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = convert(val)

        config_kwargs.update(overrides)
        for required in ("username", "password", "device_id"):
            config_kwargs.setdefault(required, "")

        return cls(**config_kwargs)
