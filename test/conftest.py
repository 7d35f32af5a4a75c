from __future__ import annotations

import heapq
import itertools
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

import numpy as np
import pytest

from core.scheduling import Scheduler
from daq.base_gateway import DeviceGateway, ResponseCallback
from shared.models import DeviceResponse


class _ManualHandle:
    def __init__(self, due: float) -> None:
        self.due = due
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler; time only moves when a test calls `advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self.now + max(0.0, float(delay_ms)))
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle, callback))
        return handle

    def pending(self) -> List[float]:
        """Due times of timers that are neither cancelled nor fired."""
        return sorted(h.due for _, _, h, _ in self._queue if not h.cancelled and not h.fired)

    def advance(self, ms: float) -> None:
        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now = due
            if handle.cancelled:
                continue
            handle.fired = True
            callback()
        self.now = target


@dataclass
class PendingRequest:
    kind: str
    channel: int
    body: bytes
    on_done: ResponseCallback = field(repr=False)
    answered: bool = False

    def respond(self, status: int = 200, body: bytes = b"") -> None:
        assert not self.answered, "request already answered"
        self.answered = True
        self.on_done(DeviceResponse(status, body))


class ScriptedGateway(DeviceGateway):
    """Records every request; tests decide when and how each is answered."""

    def __init__(self) -> None:
        self.requests: List[PendingRequest] = []
        self.closed = False

    def post_settings(self, channel: int, body: bytes, on_done: ResponseCallback) -> None:
        self.requests.append(PendingRequest("settings", channel, bytes(body), on_done))

    def fetch_samples(self, channel: int, on_done: ResponseCallback) -> None:
        self.requests.append(PendingRequest("samples", channel, b"", on_done))

    def close(self) -> None:
        self.closed = True

    def of_kind(self, kind: str) -> List[PendingRequest]:
        return [r for r in self.requests if r.kind == kind]

    def pending(self, kind: Optional[str] = None) -> List[PendingRequest]:
        return [r for r in self.requests if not r.answered and (kind is None or r.kind == kind)]

    def last(self, kind: str) -> PendingRequest:
        return self.of_kind(kind)[-1]


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def gateway() -> ScriptedGateway:
    return ScriptedGateway()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
