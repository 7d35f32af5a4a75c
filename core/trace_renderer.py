from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from shared.models import StrokeStyle

from .coordinates import trace_points
from .surface import DisplaySurface

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .channel_controller import ChannelState

logger = logging.getLogger(__name__)

_EMPTY = np.zeros(0, dtype=np.int64)


class TraceRenderer:
    """
    Draws channel waveforms onto a shared surface.

    Each channel gets one trace primitive the first time it is rendered;
    later renders restyle it and swap in a fresh point list.
    """

    ROLE = "waveform"

    def __init__(self, surface: DisplaySurface) -> None:
        self._surface = surface

    @property
    def surface(self) -> DisplaySurface:
        return self._surface

    def render(self, channel: "ChannelState") -> None:
        trace = self._surface.ensure_trace(channel.number, self.ROLE)
        trace.set_style(StrokeStyle.from_channel_style(channel.style))

        if channel.sampling_size < 2:
            trace.set_points(_EMPTY, _EMPTY)
            return
        if channel.sampling_rate <= 0 or channel.tdiv <= 0 or channel.vdiv <= 0:
            logger.debug(
                "Channel %d has an unusable scale (sr=%s tdiv=%s vdiv=%s); clearing trace",
                channel.number, channel.sampling_rate, channel.tdiv, channel.vdiv,
            )
            trace.set_points(_EMPTY, _EMPTY)
            return

        xs, ys = trace_points(channel.samples, channel.sampling_rate, channel.tdiv, channel.vdiv)
        trace.set_points(xs, ys)


__all__ = ["TraceRenderer"]
