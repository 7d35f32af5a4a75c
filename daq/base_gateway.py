"""
Device gateway contract.

A gateway performs the two exchanges a channel needs:

    POST /ch{N}/pr    push (or, with an empty body, pull) acquisition settings
    GET  /ch{N}       read the current sample buffer

Calls return immediately; the outcome is delivered later to `on_done` on the
event-loop thread as a `DeviceResponse`. Transport failures are reported as a
response with status 0, never raised.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from shared.models import DeviceResponse

ResponseCallback = Callable[[DeviceResponse], None]


def settings_path(channel: int) -> str:
    return f"/ch{channel}/pr"


def samples_path(channel: int) -> str:
    return f"/ch{channel}"


class DeviceGateway(ABC):
    """Asynchronous access to one acquisition device."""

    @abstractmethod
    def post_settings(self, channel: int, body: bytes, on_done: ResponseCallback) -> None:
        raise NotImplementedError

    @abstractmethod
    def fetch_samples(self, channel: int, on_done: ResponseCallback) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release transport resources; outstanding callbacks may be dropped."""


__all__ = ["DeviceGateway", "ResponseCallback", "settings_path", "samples_path"]
