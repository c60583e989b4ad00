"""Tests for vehicle metadata parsing and remote command routing."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from subarulink.models.command import (
    CommandResult,
    RemoteCommand,
    RemoteQuery,
    command_endpoints,
    query_endpoint,
    resolve_endpoint,
)
from subarulink.models.vehicle import ApiGen, VehicleInfo, status_payload_heuristic


def _info(**overrides: Any) -> VehicleInfo:
    raw: dict[str, Any] = {
        "vin": "4S4BTAAC0M3000001",
        "nickname": "Outback",
        "modelName": "Outback",
        "modelYear": 2021,
        "features": ["g2", "RES"],
        "subscriptionFeatures": ["REMOTE", "SAFETY"],
        "subscriptionStatus": "ACTIVE",
    }
    raw.update(overrides)
    return VehicleInfo.model_validate(raw)


# ------------------------------------------------------------------
# VehicleInfo
# ------------------------------------------------------------------


class TestVehicleInfo:
    def test_aliases(self) -> None:
        info = _info()
        assert info.name == "Outback"
        assert info.model_name == "Outback"
        assert info.model_year == "2021"

    def test_unknown_fields_ignored(self) -> None:
        info = _info(vehicleGeoPosition={"latitude": 1.0}, licensePlate="ABC123")
        assert not hasattr(info, "licensePlate")

    def test_null_feature_lists(self) -> None:
        info = _info(features=None, subscriptionFeatures=None)
        assert info.features == []
        assert info.api_gen is None
        assert info.has_remote is False

    @pytest.mark.parametrize(
        ("features", "expected"),
        [
            (["g1"], ApiGen.G1),
            (["g2"], ApiGen.G2),
            (["g3"], ApiGen.G3),
            (["RES"], None),
        ],
    )
    def test_api_gen(self, features: list[str], expected: ApiGen | None) -> None:
        assert _info(features=features).api_gen is expected

    def test_remote_requires_active_subscription(self) -> None:
        info = _info(subscriptionStatus="EXPIRED")
        assert info.has_remote is False
        assert info.has_res is False
        assert info.has_safety is False

    def test_res_requires_remote(self) -> None:
        assert _info().has_res is True
        assert _info(subscriptionFeatures=["SAFETY"]).has_res is False

    def test_hardware_features(self) -> None:
        info = _info(features=["g2", "PHEV", "TPMS_MIL", "MOONSTAT", "DOOR_LU_STAT"])
        assert info.is_ev is True
        assert info.has_tpms is True
        assert info.has_sunroof is True
        assert info.has_lock_status_feature is True
        assert info.has_power_windows_feature is False


class TestStatusPayloadHeuristic:
    def test_g2_with_status_payload(self) -> None:
        result = status_payload_heuristic(_info(), {"ODOMETER": 1})
        assert result == {"power_windows": True, "lock_status": True}

    def test_g2_without_status_payload(self) -> None:
        result = status_payload_heuristic(_info(), {})
        assert result == {"power_windows": False, "lock_status": False}

    def test_g3_reports_locks_but_not_windows(self) -> None:
        result = status_payload_heuristic(_info(features=["g3"]), {"ODOMETER": 1})
        assert result == {"power_windows": False, "lock_status": True}

    def test_sunroof_implies_power_windows(self) -> None:
        result = status_payload_heuristic(_info(features=["g1", "PANPM-DG2G"]), {})
        assert result["power_windows"] is True
        assert result["lock_status"] is False

    def test_explicit_features(self) -> None:
        result = status_payload_heuristic(_info(features=["g1", "WDWSTAT", "DOOR_LU_STAT"]), {})
        assert result == {"power_windows": True, "lock_status": True}


# ------------------------------------------------------------------
# Endpoint routing
# ------------------------------------------------------------------


class TestEndpointRouting:
    def test_resolve_endpoint(self) -> None:
        assert resolve_endpoint("/service/api_gen/lock/execute.json", ApiGen.G1) == "/service/g1/lock/execute.json"
        assert resolve_endpoint("/service/api_gen/lock/execute.json", ApiGen.G3) == "/service/g2/lock/execute.json"

    def test_lock_on_g2(self) -> None:
        assert command_endpoints(RemoteCommand.LOCK, ApiGen.G2) == (
            "/service/g2/lock/execute.json",
            "/service/g2/remoteService/status.json",
        )

    def test_g3_uses_g2_endpoints(self) -> None:
        assert command_endpoints(RemoteCommand.UNLOCK, ApiGen.G3) == command_endpoints(RemoteCommand.UNLOCK, ApiGen.G2)

    @pytest.mark.parametrize(
        "command",
        [RemoteCommand.HORN, RemoteCommand.HORN_STOP, RemoteCommand.LIGHTS, RemoteCommand.LIGHTS_STOP],
    )
    def test_g1_horn_and_lights_poll_their_own_status(self, command: RemoteCommand) -> None:
        _submit, poll = command_endpoints(command, ApiGen.G1)
        assert poll == "/service/g1/hornLights/status.json"

    def test_g1_lock_polls_remote_service_status(self) -> None:
        assert command_endpoints(RemoteCommand.LOCK, ApiGen.G1)[1] == "/service/g1/remoteService/status.json"

    def test_locate(self) -> None:
        assert command_endpoints(RemoteCommand.LOCATE, ApiGen.G1) == (
            "/service/g1/vehicleLocate/execute.json",
            "/service/g1/vehicleLocate/status.json",
        )
        assert command_endpoints(RemoteCommand.LOCATE, ApiGen.G2) == (
            "/service/g2/vehicleStatus/execute.json",
            "/service/g2/vehicleStatus/locationStatus.json",
        )

    def test_remote_start_and_charge(self) -> None:
        assert command_endpoints(RemoteCommand.REMOTE_START, ApiGen.G2)[0] == "/service/g2/engineStart/execute.json"
        assert command_endpoints(RemoteCommand.CHARGE_START, ApiGen.G2)[0] == "/service/g2/phevChargeNow/execute.json"

    def test_queries(self) -> None:
        assert query_endpoint(RemoteQuery.CONDITION, ApiGen.G2) == "/service/g2/condition/execute.json"
        assert query_endpoint(RemoteQuery.LOCATE, ApiGen.G3) == "/service/g2/locate/execute.json"
        assert query_endpoint(RemoteQuery.HEALTH, ApiGen.G2) == "/vehicleHealth.json"


def test_command_result_is_frozen() -> None:
    result = CommandResult(success=True)
    assert result.data == {}
    with pytest.raises(ValidationError):
        result.success = False  # type: ignore[misc]
