#!/usr/bin/env python3
"""Live STARLINK client verification tool.

This script performs a read-only end-to-end session using subarulink and
reports which parts of the library worked against the real service.

Credentials are read from the environment (see ``SubaruConfig.from_env``):
- SUBARU_USERNAME
- SUBARU_PASSWORD
- SUBARU_DEVICE_ID
- SUBARU_PIN (only needed with ``--lights``)

Default behavior:
1) login and vehicle discovery,
2) two-factor enrollment if the device is not yet trusted,
3) fetch on the first (or given) VIN,
4) print a check report.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))


def _maybe_reexec_with_project_venv() -> None:
    candidate_env = (_repo / ".venv").resolve()
    candidate_python = candidate_env / "bin" / "python"
    if not candidate_python.exists():
        return

    current_prefix = Path(sys.prefix).resolve()
    if current_prefix == candidate_env:
        return
    if os.environ.get("SUBARULINK_TEST_CLIENT_REEXEC") == "1":
        return

    env = dict(os.environ)
    env["SUBARULINK_TEST_CLIENT_REEXEC"] = "1"
    os.execve(str(candidate_python), [str(candidate_python), *sys.argv], env)


_maybe_reexec_with_project_venv()

from subarulink import SubaruClient, SubaruConfig, SubaruError  # noqa: E402


@dataclass(frozen=True)
class CheckResult:
    name: str
    ok: bool
    detail: str


def _print_results(results: list[CheckResult]) -> None:
    width = max((len(result.name) for result in results), default=20)
    print("\nCheck report")
    print("-" * (width + 24))
    for result in results:
        status = "OK" if result.ok else "FAIL"
        print(f"{result.name:<{width}}  {status:<4}  {result.detail}")

    failures = [result for result in results if not result.ok]
    print("-" * (width + 24))
    print(f"Summary: {len(results) - len(failures)} OK, {len(failures)} FAIL")


async def _enroll_device(client: SubaruClient) -> CheckResult:
    methods = client.contact_methods
    if not methods:
        return CheckResult("2fa.contacts", False, "device not registered and no contact methods offered")

    print("This device is not registered. Choose where to send a verification code:")
    for index, (method, contact) in enumerate(sorted(methods.items()), start=1):
        print(f"  {index}) {method}: {contact}")
    choice = input("> ").strip()
    names = sorted(methods)
    method = names[int(choice) - 1] if choice.isdigit() and 0 < int(choice) <= len(names) else choice

    if not await client.request_auth_code(method):
        return CheckResult("2fa.request", False, f"could not request a code via {method!r}")
    code = input("Verification code: ").strip()
    if not await client.submit_auth_code(code):
        return CheckResult("2fa.verify", False, "code rejected")
    return CheckResult("2fa.verify", True, "device registered")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run live subarulink checks")
    parser.add_argument(
        "--vin",
        default=None,
        help="Target VIN. If omitted, the first VIN of the account is used.",
    )
    parser.add_argument(
        "--json-raw",
        action="store_true",
        help="Print the redacted raw API responses cached for the vehicle.",
    )
    parser.add_argument(
        "--lights",
        action="store_true",
        help="Also flash the lights (a harmless PIN-protected command).",
    )
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging (payloads are redacted).")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    config = SubaruConfig.from_env()
    results: list[CheckResult] = []

    async with SubaruClient(config) as client:
        if not await client.connect():
            print("No vehicles returned by account")
            return 2
        results.append(CheckResult("connect", True, f"{len(client.get_vehicles())} vehicle(s)"))

        if not client.device_registered:
            enrollment = await _enroll_device(client)
            results.append(enrollment)
            if not enrollment.ok:
                _print_results(results)
                return 1

        vin = args.vin or client.get_vehicles()[0]
        results.append(
            CheckResult(
                "vehicle",
                True,
                f"{client.get_model_year(vin)} {client.get_model_name(vin)} "
                f"api_gen={client.get_api_gen(vin)} remote={client.get_remote_status(vin)} "
                f"res={client.get_res_status(vin)} ev={client.get_ev_status(vin)}",
            )
        )

        try:
            data = await client.fetch(vin, force=True)
            results.append(CheckResult("fetch", bool(data.status), f"{len(data.status)} status fields"))
        except SubaruError as exc:
            results.append(CheckResult("fetch", False, f"{type(exc).__name__}: {exc}"))

        if args.lights:
            try:
                result = await client.lights(vin)
                results.append(CheckResult("lights", result.success, "command completed"))
                await client.lights_stop(vin)
            except SubaruError as exc:
                results.append(CheckResult("lights", False, f"{type(exc).__name__}: {exc}"))

        if args.json_raw:
            print(json.dumps(client.get_raw_data(vin, redact=True), indent=2, ensure_ascii=False, sort_keys=True))

    _print_results(results)
    return 0 if all(result.ok for result in results) else 1


def main() -> int:
    args = _parse_args()
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
