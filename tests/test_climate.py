from __future__ import annotations

import json

import pytest

from subarulink._api.climate import (
    START_CONFIG_CONSTS_EV,
    START_CONFIG_CONSTS_RES,
    parse_user_presets,
    parse_vendor_presets,
    validate_preset,
)


def _preset(**overrides: str) -> dict[str, str]:
    preset = {
        "name": "Morning",
        "runTimeMinutes": "10",
        "climateZoneFrontTemp": "70",
        "climateZoneFrontAirMode": "AUTO",
        "climateZoneFrontAirVolume": "AUTO",
        "heatedSeatFrontLeft": "LOW",
        "heatedSeatFrontRight": "OFF",
        "heatedRearWindowActive": "true",
        "outerAirCirculation": "outsideAir",
        "airConditionOn": "false",
    }
    preset.update(overrides)
    return preset


def test_validate_preset_applies_res_constants() -> None:
    validated = validate_preset(_preset(), is_ev=False)

    assert validated["name"] == "Morning"
    for key, value in START_CONFIG_CONSTS_RES.items():
        assert validated[key] == value


def test_validate_preset_applies_ev_constants() -> None:
    validated = validate_preset(_preset(), is_ev=True)

    assert validated["startConfiguration"] == START_CONFIG_CONSTS_EV["startConfiguration"]


def test_validate_preset_accepts_numeric_values() -> None:
    preset = {"name": "Numbers", "climateZoneFrontTemp": 85, "runTimeMinutes": 5}

    assert validate_preset(preset, is_ev=False)["climateZoneFrontTemp"] == 85


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("climateZoneFrontTemp", "59"),
        ("climateZoneFrontTemp", "86"),
        ("climateZoneFrontTempCelsius", "31"),
        ("runTimeMinutes", "15"),
        ("heatedSeatFrontLeft", "LOW_COOL"),
        ("climateZoneFrontAirMode", "DEFOG"),
    ],
)
def test_validate_preset_rejects_out_of_range(key: str, value: str) -> None:
    with pytest.raises(ValueError, match=key):
        validate_preset(_preset(**{key: value}), is_ev=False)


def test_validate_preset_requires_name() -> None:
    with pytest.raises(ValueError, match="name"):
        validate_preset(_preset(name=""), is_ev=False)


def test_parse_vendor_presets_filters_powertrain() -> None:
    response = {
        "success": True,
        "data": [
            json.dumps({"name": "Auto", "vehicleType": "gas"}),
            json.dumps({"name": "Full Cool", "vehicleType": "phev"}),
            {"name": "Full Heat", "vehicleType": "gas"},
        ],
    }

    assert [p["name"] for p in parse_vendor_presets(response, is_ev=False)] == ["Auto", "Full Heat"]
    assert [p["name"] for p in parse_vendor_presets(response, is_ev=True)] == ["Full Cool"]


def test_parse_vendor_presets_empty() -> None:
    assert parse_vendor_presets({"success": True, "data": None}, is_ev=False) == []


def test_parse_user_presets() -> None:
    response = {"success": True, "data": json.dumps([_preset(), "junk"])}

    assert parse_user_presets(response) == [_preset()]
    assert parse_user_presets({"success": True, "data": None}) == []
    assert parse_user_presets({"success": True, "data": "{}"}) == []
