"""Retry and PIN-lockout policy for remote commands."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from subarulink._api.remote import execute_command
from subarulink._cache import VehicleCacheEntry
from subarulink.exceptions import InvalidPIN, RemoteServiceFailure, VehicleNotSupported
from subarulink.models.command import Accepted, CommandResult, Denied, Failed, RemoteCommand, Retryable
from subarulink.models.vehicle import ApiGen

if TYPE_CHECKING:
    from subarulink.client import SubaruClient

_logger = logging.getLogger(__name__)


async def remote_command(
    client: SubaruClient,
    *,
    vin: str,
    command: RemoteCommand,
    api_gen: ApiGen,
    submit_endpoint: str,
    poll_endpoint: str,
    body: Mapping[str, Any],
) -> CommandResult:
    """Run a remote command under the retry and PIN-lockout policy.

    The caller must hold the vehicle lock.

    Raises
    ------
    PINLockoutProtect
        A PIN was rejected earlier; nothing is sent.
    ValueError
        No PIN is configured; nothing is sent.
    InvalidPIN
        The server rejected the PIN.  The lockout flag is now set.
    RemoteServiceFailure
        The vehicle reported failure, or retries ran out.
    """
    client._check_pin_lockout()
    pin = client._require_pin()
    session = client._require_session()
    config = client._config

    consecutive_collisions = 0
    for attempt in range(1, config.command_retries + 1):
        client._check_pin_lockout()
        if session.authenticated and session.get_age() > config.max_session_age_mins:
            _logger.info("Session older than %s minutes, starting a new one", config.max_session_age_mins)
            session.reset()
        await session.ensure_valid(vin)

        outcome = await execute_command(
            session,
            config,
            vin=vin,
            command=command,
            api_gen=api_gen,
            submit_endpoint=submit_endpoint,
            poll_endpoint=poll_endpoint,
            body=body,
            pin=pin,
        )

        if isinstance(outcome, Accepted):
            _logger.debug("%s succeeded", command.name)
            return CommandResult(success=True, data=outcome.data)

        if isinstance(outcome, Denied):
            client._pin_lockout = True
            _logger.warning("PIN rejected (%s); further remote commands are blocked", outcome.code)
            raise InvalidPIN(f"Invalid PIN: {outcome.code}", code=outcome.code, endpoint=submit_endpoint)

        if isinstance(outcome, Failed):
            if outcome.timed_out:
                _logger.info("%s did not complete before polling gave up", command.name)
                return CommandResult(success=False, data={})
            code = str(outcome.data.get("errorCode") or "")
            raise RemoteServiceFailure(
                f"{command.name} failed: {code or 'vehicle reported failure'}",
                code=code,
                endpoint=submit_endpoint,
                response=outcome.data,
            )

        assert isinstance(outcome, Retryable)  # noqa: S101
        if outcome.collision:
            consecutive_collisions += 1
            if consecutive_collisions >= 2:
                _logger.info("%s still reported as already running; treating as done", command.name)
                return CommandResult(success=True, data={})
        else:
            consecutive_collisions = 0
        _logger.info(
            "%s: %s (attempt %d/%d), retrying",
            command.name,
            outcome.reason,
            attempt,
            config.command_retries,
        )

    raise RemoteServiceFailure(
        f"{command.name} failed after {config.command_retries} attempts",
        endpoint=submit_endpoint,
    )


def require_api_gen(entry: VehicleCacheEntry) -> ApiGen:
    api_gen = entry.info.api_gen
    if api_gen is None:
        raise VehicleNotSupported(f"Unknown telematics generation for {entry.vin}")
    return api_gen
