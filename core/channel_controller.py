"""ChannelController - per-channel acquisition and settings state machine.

A controller binds one channel number to its control panel, a device gateway,
a scheduler and the trace renderer. It runs two independent activities:

- settings synchronization, triggered at start-up and on every "apply";
- sample polling, a self-rescheduling request loop.

The first settings exchange sends an empty body so the device reports its
own defaults (bootstrap pull). Only after the device has confirmed settings
once are edited control values pushed. A confirmed push is followed by an
immediate poll instead of waiting for the next timer.

Completion callbacks are closures carrying the request's generation number.
A response whose generation is no longer current is dropped, so overlapping
requests can never apply out-of-order data.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

import numpy as np

from daq.base_gateway import DeviceGateway
from shared.models import (
    ChannelStyle,
    DeviceResponse,
    DeviceSettings,
    TriggerSettings,
    decode_samples,
    decode_settings_payload,
    encode_settings_form,
)

from .controls import ChannelControls, is_numeric
from .scheduling import Scheduler, TimerHandle
from .trace_renderer import TraceRenderer

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 200
DEFAULT_INITIAL_JITTER_MS = 1000


class ChannelPhase(str, Enum):
    BOOTSTRAPPING = "bootstrapping"
    SYNCED = "synced"


@dataclass
class ChannelState:
    """Everything known about one acquisition lane."""

    number: int
    sampling_rate: float = 0.0
    tdiv: float = 0.001
    vdiv: float = 1.0
    trigger: TriggerSettings = field(default_factory=TriggerSettings)
    trigger_level: float = 0.0
    style: ChannelStyle = field(default_factory=ChannelStyle)
    settings_known: bool = False
    _samples: np.ndarray = field(default_factory=lambda: decode_samples(b""), repr=False)

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("channel number must be >= 1")

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    @property
    def sampling_size(self) -> int:
        return int(self._samples.size)

    def replace_samples(self, samples: np.ndarray) -> None:
        arr = np.array(samples, dtype=np.uint8, copy=True)
        arr.setflags(write=False)
        self._samples = arr

    def apply_device_settings(self, settings: DeviceSettings) -> None:
        self.sampling_rate = settings.sampling_rate
        self.trigger = settings.trigger
        self.trigger_level = settings.trigger_level
        self.settings_known = True


class ChannelController:
    """Owns one channel's lifecycle: settings sync, polling, rendering."""

    def __init__(
        self,
        number: int,
        controls: ChannelControls,
        gateway: DeviceGateway,
        scheduler: Scheduler,
        renderer: TraceRenderer,
        *,
        poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
        initial_jitter_ms: float = DEFAULT_INITIAL_JITTER_MS,
        default_vdiv: float = 1.0,
        default_tdiv: float = 0.001,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self._controls = controls
        self._gateway = gateway
        self._scheduler = scheduler
        self._renderer = renderer
        self._poll_interval_ms = poll_interval_ms
        self._initial_jitter_ms = initial_jitter_ms
        self._rng = rng if rng is not None else np.random.default_rng()

        self.state = ChannelState(
            number=number,
            vdiv=controls.volts_per_division() or default_vdiv,
            tdiv=controls.time_per_division() or default_tdiv,
            style=controls.style(),
        )
        text = controls.sampling_rate_text()
        if is_numeric(text):
            self.state.sampling_rate = float(text)

        self._poll_handle: Optional[TimerHandle] = None
        self._poll_generation = 0
        self._settings_generation = 0
        self._started = False
        self._stopped = False
        self._stats: Dict[str, int] = {
            "polls_ok": 0,
            "polls_failed": 0,
            "settings_ok": 0,
            "settings_failed": 0,
            "stale_dropped": 0,
        }

        controls.on_apply(self.apply)
        controls.on_scale_change(self.on_scale_changed)
        controls.on_style_change(self.on_style_changed)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def number(self) -> int:
        return self.state.number

    @property
    def phase(self) -> ChannelPhase:
        return ChannelPhase.SYNCED if self.state.settings_known else ChannelPhase.BOOTSTRAPPING

    @property
    def poll_pending(self) -> bool:
        return self._poll_handle is not None

    @property
    def poll_interval_ms(self) -> float:
        return self._poll_interval_ms

    def set_poll_interval(self, interval_ms: float) -> None:
        """Takes effect from the next reschedule; an in-flight cycle is not shortened."""
        if interval_ms <= 0:
            raise ValueError("poll interval must be positive")
        self._poll_interval_ms = interval_ms

    def stats(self) -> Dict[str, int]:
        return dict(self._stats)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Pull device settings and schedule the first (jittered) poll."""
        if self._started:
            return
        self._started = True
        self.sync_settings()
        jitter = float(self._rng.uniform(0.0, self._initial_jitter_ms)) if self._initial_jitter_ms > 0 else 0.0
        self._schedule_poll(jitter)

    def stop(self) -> None:
        self._stopped = True
        if self._poll_handle is not None:
            self._poll_handle.cancel()
            self._poll_handle = None

    # -------------------------------------------------------------------------
    # Settings synchronization
    # -------------------------------------------------------------------------

    def sync_settings(self) -> None:
        if self._stopped:
            return
        pushed = self.state.settings_known
        if pushed:
            body = encode_settings_form(
                self._controls.sampling_rate_text(),
                self._controls.trigger(),
                self._controls.trigger_level_text(),
            )
        else:
            body = b""

        self._settings_generation += 1
        generation = self._settings_generation
        self._gateway.post_settings(
            self.number,
            body,
            lambda response: self._on_settings_response(generation, response, pushed),
        )

    def apply(self) -> bool:
        """Push the edited settings.

        Returns False when the sampling rate or trigger level field is not a
        number. The request is sent regardless.
        """
        self.sync_settings()
        valid = True
        for name, text in (
            ("sampling rate", self._controls.sampling_rate_text()),
            ("trigger level", self._controls.trigger_level_text()),
        ):
            if not is_numeric(text):
                logger.warning("Channel %d: %s %r is not a number", self.number, name, text)
                valid = False
        return valid

    def _on_settings_response(self, generation: int, response: DeviceResponse, pushed: bool = False) -> None:
        if self._stopped:
            return
        if generation != self._settings_generation:
            self._stats["stale_dropped"] += 1
            logger.debug("Channel %d: dropping stale settings response %d", self.number, generation)
            return
        if not response.ok:
            self._stats["settings_failed"] += 1
            logger.warning("Channel %d: settings exchange failed (status %d)", self.number, response.status)
            return
        try:
            settings = decode_settings_payload(response.body)
        except ValueError as exc:
            self._stats["settings_failed"] += 1
            logger.warning("Channel %d: %s", self.number, exc)
            return

        self._controls.set_sampling_rate(settings.sampling_rate)
        self._controls.set_trigger_level(settings.trigger_level)
        self._controls.set_trigger(settings.trigger)

        rate_changed = settings.sampling_rate != self.state.sampling_rate
        self.state.apply_device_settings(settings)
        self._stats["settings_ok"] += 1
        logger.debug("Channel %d: settings confirmed %s", self.number, settings)
        if rate_changed:
            self._render()
        if pushed and self._started:
            # Redraw from a buffer acquired under the confirmed settings.
            self.poll_now()

    # -------------------------------------------------------------------------
    # Sample polling
    # -------------------------------------------------------------------------

    def poll_now(self) -> None:
        """Start a poll immediately, superseding any pending or in-flight one."""
        if self._poll_handle is not None:
            self._poll_handle.cancel()
            self._poll_handle = None
        self._poll()

    def _schedule_poll(self, delay_ms: float) -> None:
        if self._stopped:
            return
        if self._poll_handle is not None:
            self._poll_handle.cancel()
        self._poll_handle = self._scheduler.call_later(delay_ms, self._on_poll_timer)

    def _on_poll_timer(self) -> None:
        self._poll_handle = None
        self._poll()

    def _poll(self) -> None:
        if self._stopped:
            return
        self._poll_generation += 1
        generation = self._poll_generation
        self._gateway.fetch_samples(
            self.number,
            lambda response: self._on_samples_response(generation, response),
        )

    def _on_samples_response(self, generation: int, response: DeviceResponse) -> None:
        if self._stopped:
            return
        if generation != self._poll_generation:
            self._stats["stale_dropped"] += 1
            logger.debug("Channel %d: dropping stale sample response %d", self.number, generation)
            return
        try:
            if response.ok:
                self.state.replace_samples(decode_samples(response.body))
                self._stats["polls_ok"] += 1
                self._render()
            else:
                self._stats["polls_failed"] += 1
                logger.debug("Channel %d: sample poll failed (status %d)", self.number, response.status)
        finally:
            self._schedule_poll(self._poll_interval_ms)

    # -------------------------------------------------------------------------
    # Scale / style edits
    # -------------------------------------------------------------------------

    def on_scale_changed(self) -> None:
        vdiv = self._controls.volts_per_division()
        tdiv = self._controls.time_per_division()
        if vdiv is None and tdiv is None:
            logger.debug("Channel %d: ignoring unusable scale edit", self.number)
            return
        if vdiv is not None:
            self.state.vdiv = vdiv
        if tdiv is not None:
            self.state.tdiv = tdiv
        self._render()

    def on_style_changed(self) -> None:
        self._render()

    def _render(self) -> None:
        self.state.style = self._controls.style()
        self._renderer.render(self.state)


__all__ = [
    "ChannelController",
    "ChannelPhase",
    "ChannelState",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_INITIAL_JITTER_MS",
]
