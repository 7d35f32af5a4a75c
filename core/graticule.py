from __future__ import annotations

import logging
from typing import List

from .surface import DisplaySurface, LinePrimitive, percent_to_units

logger = logging.getLogger(__name__)

MAJOR_STEP_PCT = 12.5
MINOR_STEP_PCT = 2.5
TICK_HALF_LENGTH_PCT = 1.0
CENTER_PCT = 50.0


def graticule_lines() -> List[LinePrimitive]:
    """Fixed set of grid primitives.

    Major divisions span the whole surface at every 12.5% except the centre
    and the frame edges. Minor ticks sit every 2.5% as short segments across
    the centre lines, skipping positions already covered by a major line.
    """
    full = percent_to_units(100.0)
    lines: List[LinePrimitive] = []

    major_count = int(100.0 / MAJOR_STEP_PCT)
    for k in range(1, major_count):
        pct = k * MAJOR_STEP_PCT
        if pct == CENTER_PCT:
            continue
        pos = percent_to_units(pct)
        lines.append(LinePrimitive(pos, 0.0, pos, full, "grid"))
        lines.append(LinePrimitive(0.0, pos, full, pos, "grid"))

    tick_lo = percent_to_units(CENTER_PCT - TICK_HALF_LENGTH_PCT)
    tick_hi = percent_to_units(CENTER_PCT + TICK_HALF_LENGTH_PCT)
    minor_per_major = int(MAJOR_STEP_PCT / MINOR_STEP_PCT)
    minor_count = int(100.0 / MINOR_STEP_PCT)
    for k in range(1, minor_count):
        if k % minor_per_major == 0:
            continue
        pos = percent_to_units(k * MINOR_STEP_PCT)
        lines.append(LinePrimitive(pos, tick_lo, pos, tick_hi, "mark"))
        lines.append(LinePrimitive(tick_lo, pos, tick_hi, pos, "mark"))

    return lines


class GraticuleRenderer:
    """Draws the static background grid onto a surface exactly once."""

    def __init__(self, surface: DisplaySurface) -> None:
        self._surface = surface

    def draw_grid(self) -> None:
        if self._surface.has_grid:
            logger.debug("Grid already present; skipping redraw")
            return
        lines = graticule_lines()
        self._surface.set_grid(lines)
        logger.debug("Drew %d grid primitives", len(lines))


__all__ = ["GraticuleRenderer", "graticule_lines"]
