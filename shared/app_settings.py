from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Dict, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppSettings:
    device_url: str = "http://192.168.0.100"
    channels: Tuple[int, ...] = (1,)
    poll_interval_ms: int = 200
    initial_jitter_ms: int = 1000
    request_timeout_ms: int = 0
    default_vdiv_v: float = 1.0
    default_tdiv_s: float = 0.001
    simulate: bool = False

    def __post_init__(self) -> None:
        channels = tuple(int(ch) for ch in self.channels)
        if not channels:
            raise ValueError("at least one channel is required")
        if any(ch < 1 for ch in channels):
            raise ValueError("channel numbers start at 1")
        if len(set(channels)) != len(channels):
            raise ValueError("channel numbers must be unique")
        object.__setattr__(self, "channels", channels)
        if self.poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if self.initial_jitter_ms < 0:
            raise ValueError("initial_jitter_ms must be non-negative")
        if self.request_timeout_ms < 0:
            raise ValueError("request_timeout_ms must be non-negative")
        if self.default_vdiv_v <= 0 or self.default_tdiv_s <= 0:
            raise ValueError("default scales must be positive")
        object.__setattr__(self, "device_url", self.device_url.rstrip("/"))


class AppSettingsStore:
    """Thread-safe holder of the current AppSettings.

    Subscribers are called after every `update`; the runtime uses this to
    retime its channel controllers while they run.
    """

    def __init__(self, initial: AppSettings | None = None) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[int, Callable[[AppSettings], None]] = {}
        self._next_token = 0
        self._settings = initial if initial is not None else AppSettings()

    def get(self) -> AppSettings:
        with self._lock:
            return self._settings

    def update(self, **kwargs) -> AppSettings:
        with self._lock:
            new_settings = replace(self._settings, **kwargs)
            self._settings = new_settings
            callbacks = list(self._subscribers.values())
        for callback in callbacks:
            try:
                callback(new_settings)
            except Exception as exc:
                logger.debug("App settings subscriber callback failed: %s", exc)
                continue
        return new_settings

    def subscribe(self, callback: Callable[[AppSettings], None], *, replay: bool = True) -> Callable[[], None]:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
            snapshot = self._settings
        if replay:
            callback(snapshot)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe


__all__ = ["AppSettings", "AppSettingsStore"]
