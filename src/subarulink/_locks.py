"""Per-vehicle asyncio locks."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator


class VehicleLockRegistry:
    """Hand out one :class:`asyncio.Lock` per VIN.

    Operations on the same vehicle run one at a time; different vehicles
    proceed in parallel.  Locks are created on first use and never
    removed, the account's vehicle list being small and fixed.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, vin: str) -> asyncio.Lock:
        lock = self._locks.get(vin)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[vin] = lock
        return lock

    def locked(self, vin: str) -> bool:
        lock = self._locks.get(vin)
        return lock is not None and lock.locked()

    @contextlib.asynccontextmanager
    async def hold(self, vin: str) -> AsyncIterator[None]:
        """Hold the lock for *vin* for the duration of the ``async with`` block."""
        async with self.get(vin):
            yield
