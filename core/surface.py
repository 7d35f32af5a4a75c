"""Drawing surface contract and an in-memory vector implementation.

Coordinates are display units (0..SURFACE_UNITS on both axes, origin at the
top-left). Grid lines are supplied once as immutable `LinePrimitive`s; each
channel owns one `TracePrimitive` that is created on demand and then only
mutated in place.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from shared.models import StrokeStyle

from .coordinates import SURFACE_UNITS


def percent_to_units(percent: float) -> float:
    return percent * SURFACE_UNITS / 100.0


@dataclass(frozen=True)
class LinePrimitive:
    """Static straight segment; coordinates in display units."""

    x1: float
    y1: float
    x2: float
    y2: float
    role: str


class TracePrimitive(ABC):
    """Persistent polyline owned by one channel."""

    role: str = "waveform"

    @abstractmethod
    def set_style(self, style: StrokeStyle) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_points(self, xs: np.ndarray, ys: np.ndarray) -> None:
        """Replace the whole point list in a single step."""
        raise NotImplementedError


class DisplaySurface(ABC):
    """Abstract drawing surface shared by every channel."""

    def __init__(self) -> None:
        self._grid: Optional[Tuple[LinePrimitive, ...]] = None
        self._traces: Dict[int, TracePrimitive] = {}

    # ---- Grid --------------------------------------------------------------

    @property
    def has_grid(self) -> bool:
        return self._grid is not None

    @property
    def grid_lines(self) -> Tuple[LinePrimitive, ...]:
        return self._grid or ()

    def set_grid(self, lines: Iterable[LinePrimitive]) -> None:
        if self._grid is not None:
            raise RuntimeError("grid already drawn on this surface")
        self._grid = tuple(lines)
        for line in self._grid:
            self._add_line(line)

    @abstractmethod
    def _add_line(self, line: LinePrimitive) -> None:
        raise NotImplementedError

    # ---- Traces ------------------------------------------------------------

    def trace(self, channel: int) -> Optional[TracePrimitive]:
        return self._traces.get(channel)

    def ensure_trace(self, channel: int, role: str = "waveform") -> TracePrimitive:
        trace = self._traces.get(channel)
        if trace is None:
            trace = self._create_trace(channel, role)
            trace.role = role
            self._traces[channel] = trace
        return trace

    @property
    def trace_channels(self) -> Sequence[int]:
        return tuple(self._traces)

    @abstractmethod
    def _create_trace(self, channel: int, role: str) -> TracePrimitive:
        raise NotImplementedError


class VectorTrace(TracePrimitive):
    def __init__(self, role: str = "waveform") -> None:
        self.role = role
        self.style: Optional[StrokeStyle] = None
        self.points: Tuple[Tuple[int, int], ...] = ()

    def set_style(self, style: StrokeStyle) -> None:
        self.style = style

    def set_points(self, xs: np.ndarray, ys: np.ndarray) -> None:
        self.points = tuple(zip((int(x) for x in xs), (int(y) for y in ys)))

    def points_attribute(self) -> str:
        """Points in the `x,y x,y ` form of an SVG polyline."""
        return "".join(f"{x},{y} " for x, y in self.points)


class VectorSurface(DisplaySurface):
    """Headless surface that records primitives for inspection."""

    def __init__(self) -> None:
        super().__init__()
        self.lines: list[LinePrimitive] = []

    def _add_line(self, line: LinePrimitive) -> None:
        self.lines.append(line)

    def _create_trace(self, channel: int, role: str) -> VectorTrace:
        return VectorTrace(role)


__all__ = [
    "percent_to_units",
    "LinePrimitive",
    "TracePrimitive",
    "DisplaySurface",
    "VectorTrace",
    "VectorSurface",
]
