from __future__ import annotations

from typing import Callable, Optional, Set

from PySide6 import QtCore

from core.scheduling import Scheduler


class _QtTimerHandle:
    def __init__(self, owner: "QtScheduler", timer: QtCore.QTimer) -> None:
        self._owner = owner
        self._timer = timer

    def cancel(self) -> None:
        self._owner._release(self._timer)


class QtScheduler(Scheduler):
    """Single-shot QTimers on the GUI thread's event loop."""

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        self._parent = parent
        self._timers: Set[QtCore.QTimer] = set()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _QtTimerHandle:
        timer = QtCore.QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(timer, callback))
        self._timers.add(timer)
        timer.start(max(0, int(round(delay_ms))))
        return _QtTimerHandle(self, timer)

    @property
    def pending(self) -> int:
        return len(self._timers)

    def _fire(self, timer: QtCore.QTimer, callback: Callable[[], None]) -> None:
        if timer not in self._timers:
            return
        self._release(timer)
        callback()

    def _release(self, timer: QtCore.QTimer) -> None:
        if timer in self._timers:
            self._timers.discard(timer)
            timer.stop()
            timer.deleteLater()

    def cancel_all(self) -> None:
        for timer in list(self._timers):
            self._release(timer)


__all__ = ["QtScheduler"]
