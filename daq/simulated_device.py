# daq/simulated_device.py
"""
In-process emulation of the acquisition firmware's channel resources.

Each channel answers the same two requests as the real instrument:

    POST /ch{N}/pr   update sr/tl/tf from form fields, reply with the
                     current parameters as JSON
    GET  /ch{N}      reply with the latest sample buffer, one byte per sample

The sample buffer is a synthetic sine around mid-scale. With the trigger
enabled the waveform is phase-aligned so the buffer starts on a crossing of
the trigger level with the selected edge; otherwise it free-runs.
"""
from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional
from urllib.parse import parse_qsl

import numpy as np

from core.scheduling import Scheduler
from shared.models import DeviceResponse, TRIGGER_ENABLED_FLAG, TRIGGER_RISING_FLAG

from .base_gateway import DeviceGateway, ResponseCallback

logger = logging.getLogger(__name__)

ADC_FREE_RUNNING_RATE = 9616
SAMPLE_SIZE = 100
DEFAULT_TRIGGER_LEVEL = 128
MID_SCALE = 128.0

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def atoi(text: str) -> int:
    """C `atoi`: leading integer of `text`, 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


@dataclass
class ChannelResource:
    """Firmware-side state of one channel."""

    sampling_rate: int
    trigger_flags: int = 0
    trigger_level: int = DEFAULT_TRIGGER_LEVEL

    def params_json(self) -> bytes:
        return json.dumps(
            {"sr": self.sampling_rate, "tf": self.trigger_flags, "tl": self.trigger_level},
            separators=(",", ":"),
        ).encode("ascii")

    def update_from_form(self, body: bytes) -> None:
        fields = dict(parse_qsl(body.decode("latin-1"), keep_blank_values=True))
        if fields.get("sr"):
            self.sampling_rate = atoi(fields["sr"])
        if fields.get("tl"):
            self.trigger_level = atoi(fields["tl"])
        if fields.get("tf"):
            self.trigger_flags = atoi(fields["tf"])


class SimulatedDevice(DeviceGateway):
    """DeviceGateway backed by emulated channel resources."""

    def __init__(
        self,
        channels: Iterable[int] = (1, 2),
        *,
        scheduler: Optional[Scheduler] = None,
        latency_ms: float = 5.0,
        signal_hz: float = 50.0,
        amplitude: float = 100.0,
        noise_level: float = 2.0,
        sample_size: int = SAMPLE_SIZE,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        numbers = list(channels)
        if not numbers:
            raise ValueError("at least one channel is required")
        if sample_size <= 0:
            raise ValueError("sample_size must be positive")
        rate = ADC_FREE_RUNNING_RATE // len(numbers)
        self._resources: Dict[int, ChannelResource] = {n: ChannelResource(sampling_rate=rate) for n in numbers}
        self._scheduler = scheduler
        self._latency_ms = latency_ms
        self._signal_hz = signal_hz
        self._amplitude = amplitude
        self._noise_level = noise_level
        self._sample_size = sample_size
        self._rng = rng if rng is not None else np.random.default_rng()
        self._phase: Dict[int, float] = {n: 0.0 for n in numbers}
        self._fail_remaining = 0
        self._fail_status = 503
        self._closed = False
        self.request_count = 0

    # ---- Inspection / failure injection -----------------------------------

    def resource(self, channel: int) -> ChannelResource:
        return self._resources[channel]

    def fail_next(self, count: int = 1, status: int = 503) -> None:
        """Answer the next `count` requests with `status` (0 = transport failure)."""
        self._fail_remaining = max(0, int(count))
        self._fail_status = int(status)

    # ---- DeviceGateway -----------------------------------------------------

    def post_settings(self, channel: int, body: bytes, on_done: ResponseCallback) -> None:
        self._deliver(on_done, lambda: self._handle_settings(channel, body))

    def fetch_samples(self, channel: int, on_done: ResponseCallback) -> None:
        self._deliver(on_done, lambda: self._handle_samples(channel))

    def close(self) -> None:
        self._closed = True

    # ---- Request handling --------------------------------------------------

    def _handle_settings(self, channel: int, body: bytes) -> DeviceResponse:
        resource = self._resources.get(channel)
        if resource is None:
            return DeviceResponse(404)
        if body:
            resource.update_from_form(body)
        return DeviceResponse(200, resource.params_json())

    def _handle_samples(self, channel: int) -> DeviceResponse:
        resource = self._resources.get(channel)
        if resource is None:
            return DeviceResponse(404)
        return DeviceResponse(200, self._synthesize(channel, resource).tobytes())

    def _synthesize(self, channel: int, resource: ChannelResource) -> np.ndarray:
        rate = max(resource.sampling_rate, 1)
        omega = 2.0 * math.pi * self._signal_hz / rate
        if resource.trigger_flags & TRIGGER_ENABLED_FLAG:
            ratio = (resource.trigger_level - MID_SCALE) / self._amplitude
            start = math.asin(min(1.0, max(-1.0, ratio)))
            if not resource.trigger_flags & TRIGGER_RISING_FLAG:
                start = math.pi - start
        else:
            start = self._phase[channel]
            self._phase[channel] = (start + omega * self._sample_size * 1.37) % (2.0 * math.pi)

        n = np.arange(self._sample_size, dtype=np.float64)
        wave = MID_SCALE + self._amplitude * np.sin(start + omega * n)
        if self._noise_level > 0:
            wave += self._rng.normal(0.0, self._noise_level, self._sample_size)
        return np.clip(np.rint(wave), 0, 255).astype(np.uint8)

    def _deliver(self, on_done: ResponseCallback, handler) -> None:
        if self._closed:
            return
        self.request_count += 1
        if self._fail_remaining > 0:
            self._fail_remaining -= 1
            status = self._fail_status
            handler = lambda: DeviceResponse(status)  # noqa: E731

        def complete() -> None:
            if not self._closed:
                on_done(handler())

        if self._scheduler is None:
            complete()
        else:
            self._scheduler.call_later(self._latency_ms, complete)


__all__ = ["SimulatedDevice", "ChannelResource", "atoi"]
