"""Fixed delay between GitHub API calls to stay under rate limits."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import attrs

SleepFunc = Callable[[float], Awaitable[None]]


@attrs.define(frozen=True)
class Throttle:
    """Sleeps a fixed number of milliseconds per call; a zero delay never sleeps."""

    milliseconds: float
    sleep: SleepFunc = asyncio.sleep

    async def __call__(self) -> None:
        if self.milliseconds > 0:
            await self.sleep(self.milliseconds / 1000)
