from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from typing import Any

import pytest

from settle import ProbeResult


class ScriptedProbe:
    """Async probe replaying a script of states, payloads and exceptions.

    Each script entry is either a state string (payload becomes
    ``{"state": state, "n": index}``), a ProbeResult, or an exception to
    raise. Once the script runs out the last entry repeats.
    """

    def __init__(self, script: Iterable[Any], latency: float = 0.0) -> None:
        self.script = list(script)
        self.latency = latency
        self.calls: list[str] = []
        self.times: list[float] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, identifier: str) -> ProbeResult[dict]:
        index = len(self.calls)
        self.calls.append(identifier)
        self.times.append(time.monotonic())
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.latency:
                await asyncio.sleep(self.latency)
            entry = self.script[min(index, len(self.script) - 1)]
            if isinstance(entry, BaseException):
                raise entry
            if isinstance(entry, ProbeResult):
                return entry
            return ProbeResult(state=entry, payload={"state": entry, "n": index})
        finally:
            self.in_flight -= 1

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def scripted():
    return ScriptedProbe
