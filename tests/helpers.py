"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: scripted network calls and a sleep
recorder cover every pipeline scenario without real I/O or real delays.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from resultflow.response import SimpleResponse


@dataclass
class ScriptedCall:
    """Async network call returning a scripted sequence of responses/exceptions.

    When the script runs out, the last item is repeated.
    """

    script: list[SimpleResponse[Any] | BaseException] = field(default_factory=list)
    calls: int = 0

    async def __call__(self) -> SimpleResponse[Any]:
        self.calls += 1
        idx = min(self.calls, len(self.script)) - 1
        item = self.script[idx]
        if isinstance(item, BaseException):
            raise item
        return item


@dataclass
class RecordingSleep:
    """Sleep double that records requested delays and returns immediately."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


@dataclass
class BlockingSleep:
    """Sleep double that blocks until cancelled, signalling both transitions."""

    started: asyncio.Event = field(default_factory=asyncio.Event)
    cancelled: asyncio.Event = field(default_factory=asyncio.Event)

    async def __call__(self, delay: float) -> None:
        _ = delay
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled.set()
            raise


def ok(payload: Any) -> SimpleResponse[Any]:
    return SimpleResponse.ok(payload)


def failed(error: Any = None) -> SimpleResponse[Any]:
    return SimpleResponse.failed(error)
