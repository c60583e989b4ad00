"""Remote service submission and status polling.

Endpoints:
  - /service/{g1,g2}/<service>/execute.json (submit)
  - /service/{g1,g2}/remoteService/status.json (poll, default)
  - generation-specific locate and horn/lights status endpoints

A submitted command goes ``SUBMITTED -> POLLING -> SUCCEEDED | FAILED |
TIMED_OUT``.  Each submit/poll round yields one
:data:`~subarulink.models.command.CommandOutcome`; deciding whether to
resubmit is left to the caller's retry policy.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Mapping
from typing import Any

from subarulink._constants import (
    ALREADY_STARTED_CODES,
    API_REMOTE_SERVICE_STATE,
    API_SERVICE_REQ_ID,
    API_SERVICE_STATE_FAILED,
    API_SERVICE_STATE_SUCCESS,
    INVALID_PIN_CODES,
    SOFT_FAILURE_CODES,
)
from subarulink._redact import redact_for_log
from subarulink.config import SubaruConfig
from subarulink.exceptions import SubaruApiError, SubaruTransportError
from subarulink.models.command import (
    Accepted,
    CommandOutcome,
    Denied,
    Failed,
    PendingCommand,
    RemoteCommand,
    Retryable,
)
from subarulink.models.vehicle import ApiGen
from subarulink.session import SessionManager

_logger = logging.getLogger(__name__)


class ErrorClass(enum.Enum):
    """How the retry policy treats an API ``errorCode``."""

    RETRYABLE = "retryable"
    """Transient server failure; resubmit."""
    COLLISION = "collision"
    """Another command is still running on the vehicle; wait, then resubmit."""
    LOCKOUT = "lockout"
    """The PIN was rejected; resubmitting risks locking the account."""
    FATAL = "fatal"
    """Anything else; surfaces to the caller."""


def classify_error_code(code: str | None) -> ErrorClass:
    """Map a raw API ``errorCode`` to its :class:`ErrorClass`."""
    if code in SOFT_FAILURE_CODES:
        return ErrorClass.RETRYABLE
    if code in ALREADY_STARTED_CODES:
        return ErrorClass.COLLISION
    if code in INVALID_PIN_CODES:
        return ErrorClass.LOCKOUT
    return ErrorClass.FATAL


def _error_code(response: Mapping[str, Any]) -> str:
    return str(response.get("errorCode") or "")


async def submit_command(
    session: SessionManager,
    config: SubaruConfig,
    *,
    vin: str,
    command: RemoteCommand,
    api_gen: ApiGen,
    submit_endpoint: str,
    poll_endpoint: str,
    body: Mapping[str, Any],
    pin: str,
) -> PendingCommand | CommandOutcome:
    """Submit a remote command.

    Returns a :class:`PendingCommand` when the server accepted the
    request, otherwise the outcome of the round.  An already-started
    collision sleeps ``config.already_started_delay`` before returning.
    """
    payload = {"pin": pin, **body}
    response = await session.post(submit_endpoint, json_body=payload)
    code = _error_code(response)

    if code:
        error_class = classify_error_code(code)
        if error_class is ErrorClass.RETRYABLE:
            _logger.info("%s on %s: server could not parse request, will retry", command.name, submit_endpoint)
            return Retryable(reason="soft failure", code=code)
        if error_class is ErrorClass.COLLISION:
            _logger.info(
                "%s on %s: a command is already running, waiting %.1fs",
                command.name,
                submit_endpoint,
                config.already_started_delay,
            )
            await asyncio.sleep(config.already_started_delay)
            return Retryable(reason="service already started", code=code, collision=True)
        if error_class is ErrorClass.LOCKOUT:
            return Denied(reason="invalid PIN", code=code)

    data = response.get("data")
    request_id = data.get(API_SERVICE_REQ_ID) if isinstance(data, dict) else None
    if response.get("success") and request_id:
        return PendingCommand(
            vin=vin,
            command=command,
            api_gen=api_gen,
            poll_endpoint=poll_endpoint,
            request_id=str(request_id),
            payload=dict(body),
        )

    _logger.debug("%s submission not accepted: %s", command.name, redact_for_log(response))
    return Failed(data=response)


async def wait_request_status(
    session: SessionManager,
    pending: PendingCommand,
    *,
    attempts: int = 20,
    interval: float = 1.0,
    timeout: float | None = None,
) -> CommandOutcome:
    """Poll a submitted command until the vehicle reports a terminal state.

    Parameters
    ----------
    session : SessionManager
        Session re-validated before every poll.
    pending : PendingCommand
        The accepted submission.
    attempts : int
        Maximum number of polls.
    interval : float
        Seconds between polls.
    timeout : float or None
        Optional wall-clock limit for the whole polling phase.

    Returns
    -------
    CommandOutcome
        ``Accepted`` on ``SUCCESS``, ``Failed`` on ``FAILED``, ``Denied`` on
        an invalid-PIN error code, ``Failed(timed_out=True)`` when attempts
        or time run out.

    Raises
    ------
    SubaruApiError
        On an error code that is neither an invalid PIN nor a collision.
    SubaruTransportError
        On transport failures other than 5xx responses.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout if timeout is not None else None
    params = {API_SERVICE_REQ_ID: pending.request_id}

    for attempt in range(1, attempts + 1):
        if deadline is not None and attempt > 1 and loop.time() >= deadline:
            break

        response: dict[str, Any] | None
        try:
            await session.ensure_valid(pending.vin)
            response = await session.post(pending.poll_endpoint, params)
        except SubaruTransportError as exc:
            if not exc.is_server_error:
                raise
            _logger.info(
                "Status poll for %s got HTTP %s (attempt %d/%d), continuing",
                pending.command.name,
                exc.status_code,
                attempt,
                attempts,
            )
            response = None

        if response is not None:
            code = _error_code(response)
            if code:
                error_class = classify_error_code(code)
                if error_class is ErrorClass.LOCKOUT:
                    return Denied(reason="invalid PIN", code=code)
                if error_class is not ErrorClass.COLLISION:
                    raise SubaruApiError(
                        f"{pending.poll_endpoint} failed: {code}",
                        code=code,
                        endpoint=pending.poll_endpoint,
                    )

            data = response.get("data")
            if response.get("success") and isinstance(data, dict):
                state = data.get(API_REMOTE_SERVICE_STATE)
                if state == API_SERVICE_STATE_SUCCESS:
                    return Accepted(data=response)
                if state == API_SERVICE_STATE_FAILED:
                    return Failed(data=response)
                _logger.debug("%s still %s (attempt %d/%d)", pending.command.name, state, attempt, attempts)

        if attempt < attempts:
            await asyncio.sleep(interval)

    _logger.info("Status poll for %s timed out", pending.command.name)
    return Failed(data={}, timed_out=True)


async def execute_command(
    session: SessionManager,
    config: SubaruConfig,
    *,
    vin: str,
    command: RemoteCommand,
    api_gen: ApiGen,
    submit_endpoint: str,
    poll_endpoint: str,
    body: Mapping[str, Any],
    pin: str,
) -> CommandOutcome:
    """Run one submit/poll round and return its outcome."""
    submitted = await submit_command(
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
    if not isinstance(submitted, PendingCommand):
        return submitted
    return await wait_request_status(
        session,
        submitted,
        attempts=config.poll_attempts,
        interval=config.poll_interval,
        timeout=config.poll_timeout,
    )


async def remote_query(
    session: SessionManager,
    vin: str,
    endpoint: str,
    *,
    tries: int = 2,
) -> dict[str, Any]:
    """PIN-less remote read (condition, health, last known location).

    Retries on the soft ``403`` failure only.

    Raises
    ------
    SubaruApiError
        When the query did not succeed.
    """
    response: dict[str, Any] = {}
    for attempt in range(1, tries + 1):
        await session.ensure_valid(vin)
        response = await session.post(endpoint)
        if response.get("success"):
            return response
        if classify_error_code(_error_code(response)) is not ErrorClass.RETRYABLE:
            break
        _logger.info("Remote query %s soft failure (attempt %d/%d)", endpoint, attempt, tries)

    code = _error_code(response)
    raise SubaruApiError(f"Remote query {endpoint} failed: {code or 'unknown error'}", code=code, endpoint=endpoint)
