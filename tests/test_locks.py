from __future__ import annotations

import asyncio

import pytest

from subarulink._locks import VehicleLockRegistry


@pytest.mark.asyncio
async def test_same_vehicle_is_serialized() -> None:
    registry = VehicleLockRegistry()
    order: list[str] = []
    release = asyncio.Event()

    async def first() -> None:
        async with registry.hold("VIN1"):
            order.append("first-start")
            await release.wait()
            order.append("first-end")

    async def second() -> None:
        async with registry.hold("VIN1"):
            order.append("second")

    tasks = [asyncio.create_task(first()), asyncio.create_task(second())]
    await asyncio.sleep(0)
    assert registry.locked("VIN1") is True
    assert order == ["first-start"]

    release.set()
    await asyncio.gather(*tasks)

    assert order == ["first-start", "first-end", "second"]
    assert registry.locked("VIN1") is False


@pytest.mark.asyncio
async def test_different_vehicles_run_in_parallel() -> None:
    registry = VehicleLockRegistry()
    both_inside = asyncio.Event()
    inside: set[str] = set()

    async def hold(vin: str) -> None:
        async with registry.hold(vin):
            inside.add(vin)
            if len(inside) == 2:
                both_inside.set()
            await asyncio.wait_for(both_inside.wait(), timeout=1.0)

    await asyncio.gather(hold("VIN1"), hold("VIN2"))

    assert inside == {"VIN1", "VIN2"}


def test_unknown_vin_is_not_locked() -> None:
    assert VehicleLockRegistry().locked("VIN1") is False


def test_lock_is_reused_per_vin() -> None:
    registry = VehicleLockRegistry()

    assert registry.get("VIN1") is registry.get("VIN1")
    assert registry.get("VIN1") is not registry.get("VIN2")
