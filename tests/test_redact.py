from __future__ import annotations

from subarulink._redact import redact_for_log, redact_raw_data


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "success": True,
        "loginUsername": "user@example.com",
        "password": "pw",
        "pin": "1234",
        "deviceId": "device-1",
        "data": {"vin": "4S4BTAAC0M3000001", "nickname": "Outback", "modelName": "Outback"},
        "vehicles": [{"latitude": 45.0, "longitude": -122.0, "heading": 90}],
    }

    redacted = redact_for_log(payload)
    assert redacted["success"] is True
    assert redacted["loginUsername"] == "<redacted>"
    assert redacted["password"] == "<redacted>"
    assert redacted["pin"] == "<redacted>"
    assert redacted["deviceId"] == "<redacted>"
    assert redacted["data"]["vin"] == "<redacted>"
    assert redacted["data"]["nickname"] == "<redacted>"
    assert redacted["data"]["modelName"] == "Outback"
    assert redacted["vehicles"][0]["latitude"] == "<redacted>"
    assert redacted["vehicles"][0]["heading"] == 90


def test_redact_for_log_leaves_input_untouched() -> None:
    payload = {"pin": "1234"}

    redact_for_log(payload)

    assert payload == {"pin": "1234"}


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_raw_data_keeps_full_strings() -> None:
    long_value = "y" * 2000

    redacted = redact_raw_data({"vehicleStatus": {"data": {"eventDateStr": long_value, "odometerValue": 1}}})

    assert redacted["vehicleStatus"]["data"]["eventDateStr"] == long_value
    assert redacted["vehicleStatus"]["data"]["odometerValue"] == "<redacted>"
