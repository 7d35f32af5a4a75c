"""Core acquisition and rendering logic (no Qt imports)."""

from .channel_controller import ChannelController, ChannelPhase, ChannelState
from .controls import ChannelControls, InMemoryControls
from .coordinates import sample_index_to_x, sample_to_y, trace_points
from .graticule import GraticuleRenderer, graticule_lines
from .runtime import ScopeRuntime
from .scheduling import Scheduler, TimerHandle
from .surface import DisplaySurface, LinePrimitive, TracePrimitive, VectorSurface, VectorTrace
from .trace_renderer import TraceRenderer

__all__ = [
    "ChannelController",
    "ChannelPhase",
    "ChannelState",
    "ChannelControls",
    "InMemoryControls",
    "sample_to_y",
    "sample_index_to_x",
    "trace_points",
    "GraticuleRenderer",
    "graticule_lines",
    "ScopeRuntime",
    "Scheduler",
    "TimerHandle",
    "DisplaySurface",
    "LinePrimitive",
    "TracePrimitive",
    "VectorSurface",
    "VectorTrace",
    "TraceRenderer",
]
