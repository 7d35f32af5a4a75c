"""Timer scheduling contract for the single-threaded event loop.

Everything in the core runs on one thread and only yields while waiting on a
timer or a device response. The GUI supplies a QTimer-backed scheduler
(:mod:`gui.qt_scheduler`); tests drive a virtual clock.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run `callback` once after `delay_ms` milliseconds."""
        raise NotImplementedError


__all__ = ["Scheduler", "TimerHandle"]
