from __future__ import annotations

from typing import Dict, Optional

import numpy as np
import pyqtgraph as pg
from PySide6 import QtCore, QtWidgets

from core.coordinates import CENTER, SURFACE_UNITS
from core.surface import DisplaySurface, LinePrimitive, TracePrimitive
from shared.models import StrokeStyle

BACKGROUND = "#101810"
AXIS_COLOR = (170, 190, 170, 200)

ROLE_PENS: Dict[str, dict] = {
    "grid": {"color": (110, 130, 110, 160), "width": 1, "style": QtCore.Qt.PenStyle.DotLine},
    "mark": {"color": (150, 170, 150, 200), "width": 1},
}


class CurveTrace(TracePrimitive):
    """Trace primitive backed by a pyqtgraph PlotCurveItem."""

    def __init__(self, curve: pg.PlotCurveItem, role: str = "waveform") -> None:
        self.role = role
        self.curve = curve

    def set_style(self, style: StrokeStyle) -> None:
        pen = pg.mkPen(style.color, width=style.width)
        if style.dash:
            pen.setDashPattern(list(style.dash))
        self.curve.setPen(pen)

    def set_points(self, xs: np.ndarray, ys: np.ndarray) -> None:
        self.curve.setData(np.asarray(xs, dtype=float), np.asarray(ys, dtype=float))


class ScopeSurface(DisplaySurface):
    """
    Fixed 500 x 500 unit canvas:
      • y grows downward, centre at (250, 250)
      • no mouse panning/zooming, no axes
      • centre crosshair drawn as part of the frame
    """

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__()
        self.widget = pg.PlotWidget(parent)
        self.widget.setBackground(BACKGROUND)
        self.widget.setMinimumSize(400, 400)
        plot_item = self.widget.getPlotItem()
        plot_item.hideAxis("left")
        plot_item.hideAxis("bottom")
        plot_item.hideButtons()
        plot_item.setMenuEnabled(False)
        view = plot_item.getViewBox()
        view.setMouseEnabled(x=False, y=False)
        view.invertY(True)
        view.setAspectLocked(True)
        self.widget.setXRange(0, SURFACE_UNITS, padding=0)
        self.widget.setYRange(0, SURFACE_UNITS, padding=0)
        self._plot_item = plot_item

        axis_pen = pg.mkPen(AXIS_COLOR, width=1)
        self._plot_item.addItem(pg.InfiniteLine(pos=CENTER, angle=90, pen=axis_pen, movable=False))
        self._plot_item.addItem(pg.InfiniteLine(pos=CENTER, angle=0, pen=axis_pen, movable=False))

    def _add_line(self, line: LinePrimitive) -> None:
        opts = ROLE_PENS.get(line.role, ROLE_PENS["grid"])
        pen = pg.mkPen(opts["color"], width=opts["width"])
        if "style" in opts:
            pen.setStyle(opts["style"])
        item = pg.PlotCurveItem([line.x1, line.x2], [line.y1, line.y2], pen=pen)
        item.setZValue(-10)
        self._plot_item.addItem(item)

    def _create_trace(self, channel: int, role: str) -> CurveTrace:
        curve = pg.PlotCurveItem()
        curve.setZValue(channel)
        self._plot_item.addItem(curve)
        return CurveTrace(curve, role)


__all__ = ["ScopeSurface", "CurveTrace"]
