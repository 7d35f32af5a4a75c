"""ChannelPanel - per-channel control widgets.

The panel holds the acquisition fields (sampling rate, trigger enable/edge,
trigger level), the display scale (volts/division and time/division, each a
value plus unit) and the trace style (color, line style), plus an Apply
button.

`PanelControls` adapts a panel to :class:`core.controls.ChannelControls` so the
headless ChannelController can read and write it.
"""
from __future__ import annotations

from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from core.controls import TIME_UNITS, VOLT_UNITS, ChannelControls, scaled_value
from shared.models import ChannelStyle, LineStyle, TriggerEdge, TriggerSettings


class ChannelPanel(QtWidgets.QWidget):
    """Encapsulates one channel's settings UI (Group Box)."""

    applyClicked = QtCore.Signal()
    scaleChanged = QtCore.Signal()
    styleChanged = QtCore.Signal()

    def __init__(
        self,
        number: int,
        *,
        color: str = "#00ff00",
        vdiv: str = "1",
        tdiv: str = "1",
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.number = number
        self._color = QtGui.QColor(color)
        self._setup_ui(vdiv, tdiv)
        self._connect_signals()

    def _setup_ui(self, vdiv: str, tdiv: str) -> None:
        self.group = QtWidgets.QGroupBox(f"Channel {self.number}")
        layout = QtWidgets.QGridLayout(self.group)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setVerticalSpacing(4)
        layout.setHorizontalSpacing(6)

        main_layout = QtWidgets.QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(self.group)

        row = 0
        layout.addWidget(QtWidgets.QLabel("Sampling rate"), row, 0)
        self.sampling_rate = QtWidgets.QLineEdit()
        self.sampling_rate.setMaximumWidth(100)
        layout.addWidget(self.sampling_rate, row, 1, 1, 2)
        row += 1

        self.trigger_on = QtWidgets.QCheckBox("Trigger")
        layout.addWidget(self.trigger_on, row, 0)
        self.trigger_up = QtWidgets.QRadioButton("Rising")
        self.trigger_down = QtWidgets.QRadioButton("Falling")
        self.trigger_edge_group = QtWidgets.QButtonGroup(self)
        self.trigger_edge_group.addButton(self.trigger_up)
        self.trigger_edge_group.addButton(self.trigger_down)
        self.trigger_down.setChecked(True)
        layout.addWidget(self.trigger_up, row, 1)
        layout.addWidget(self.trigger_down, row, 2)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Trigger level"), row, 0)
        self.trigger_level = QtWidgets.QLineEdit()
        self.trigger_level.setMaximumWidth(100)
        layout.addWidget(self.trigger_level, row, 1, 1, 2)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Volts/div"), row, 0)
        self.vdiv = QtWidgets.QLineEdit(vdiv)
        self.vdiv.setMaximumWidth(80)
        self.vdiv_unit = QtWidgets.QComboBox()
        self.vdiv_unit.addItems(list(VOLT_UNITS))
        layout.addWidget(self.vdiv, row, 1)
        layout.addWidget(self.vdiv_unit, row, 2)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Time/div"), row, 0)
        self.tdiv = QtWidgets.QLineEdit(tdiv)
        self.tdiv.setMaximumWidth(80)
        self.tdiv_unit = QtWidgets.QComboBox()
        self.tdiv_unit.addItems(list(TIME_UNITS))
        self.tdiv_unit.setCurrentText("mS")
        layout.addWidget(self.tdiv, row, 1)
        layout.addWidget(self.tdiv_unit, row, 2)
        row += 1

        layout.addWidget(QtWidgets.QLabel("Style"), row, 0)
        self.color_button = QtWidgets.QPushButton()
        self.color_button.setMaximumWidth(40)
        self._update_color_swatch()
        self.line_style = QtWidgets.QComboBox()
        self.line_style.addItems([style.value for style in LineStyle])
        layout.addWidget(self.color_button, row, 1)
        layout.addWidget(self.line_style, row, 2)
        row += 1

        self.apply_button = QtWidgets.QPushButton("Apply")
        layout.addWidget(self.apply_button, row, 0, 1, 3)

    def _connect_signals(self) -> None:
        self.apply_button.clicked.connect(lambda _checked=False: self.applyClicked.emit())
        self.vdiv.editingFinished.connect(self.scaleChanged.emit)
        self.vdiv_unit.currentIndexChanged.connect(lambda _idx: self.scaleChanged.emit())
        self.tdiv.editingFinished.connect(self.scaleChanged.emit)
        self.tdiv_unit.currentIndexChanged.connect(lambda _idx: self.scaleChanged.emit())
        self.line_style.currentIndexChanged.connect(lambda _idx: self.styleChanged.emit())
        self.color_button.clicked.connect(lambda _checked=False: self._choose_color())

    # ---- Color -------------------------------------------------------------

    @property
    def color_name(self) -> str:
        return self._color.name()

    def set_color(self, color: QtGui.QColor | str) -> None:
        color = QtGui.QColor(color)
        if not color.isValid():
            return
        self._color = color
        self._update_color_swatch()
        self.styleChanged.emit()

    def _choose_color(self) -> None:
        color = QtWidgets.QColorDialog.getColor(self._color, self, f"Channel {self.number} color")
        if color.isValid():
            self.set_color(color)

    def _update_color_swatch(self) -> None:
        self.color_button.setStyleSheet(f"background-color: {self._color.name()};")


class PanelControls(ChannelControls):
    """ChannelControls view of a ChannelPanel."""

    def __init__(self, panel: ChannelPanel) -> None:
        super().__init__()
        self._panel = panel
        panel.applyClicked.connect(self._notify_apply)
        panel.scaleChanged.connect(self._notify_scale)
        panel.styleChanged.connect(self._notify_style)

    @property
    def panel(self) -> ChannelPanel:
        return self._panel

    def sampling_rate_text(self) -> str:
        return self._panel.sampling_rate.text()

    def set_sampling_rate(self, value: float) -> None:
        self._panel.sampling_rate.setText(str(value))

    def trigger_level_text(self) -> str:
        return self._panel.trigger_level.text()

    def set_trigger_level(self, value: float) -> None:
        self._panel.trigger_level.setText(str(value))

    def trigger(self) -> TriggerSettings:
        edge = TriggerEdge.RISING if self._panel.trigger_up.isChecked() else TriggerEdge.FALLING
        return TriggerSettings(enabled=self._panel.trigger_on.isChecked(), edge=edge)

    def set_trigger(self, trigger: TriggerSettings) -> None:
        self._panel.trigger_on.setChecked(trigger.enabled)
        if trigger.edge is TriggerEdge.RISING:
            self._panel.trigger_up.setChecked(True)
        else:
            self._panel.trigger_down.setChecked(True)

    def volts_per_division(self) -> Optional[float]:
        return scaled_value(self._panel.vdiv.text(), self._panel.vdiv_unit.currentText(), VOLT_UNITS)

    def time_per_division(self) -> Optional[float]:
        return scaled_value(self._panel.tdiv.text(), self._panel.tdiv_unit.currentText(), TIME_UNITS)

    def style(self) -> ChannelStyle:
        return ChannelStyle(
            color=self._panel.color_name,
            line_style=LineStyle.parse(self._panel.line_style.currentText()),
        )


__all__ = ["ChannelPanel", "PanelControls"]
