"""Data models for STARLINK API responses and remote commands."""

from subarulink.models.command import (
    Accepted,
    CommandOutcome,
    CommandResult,
    Denied,
    Failed,
    PendingCommand,
    RemoteCommand,
    RemoteQuery,
    Retryable,
    command_endpoints,
    query_endpoint,
)
from subarulink.models.vehicle import ApiGen, VehicleData, VehicleInfo, status_payload_heuristic

__all__ = [
    "Accepted",
    "ApiGen",
    "CommandOutcome",
    "CommandResult",
    "Denied",
    "Failed",
    "PendingCommand",
    "RemoteCommand",
    "RemoteQuery",
    "Retryable",
    "VehicleData",
    "VehicleInfo",
    "command_endpoints",
    "query_endpoint",
    "status_payload_heuristic",
]
