"""Bound control surface for one channel.

The controller reads the edited values from here and writes the device's
confirmed settings back. Implementations only store and report values; the
Qt widget panel lives in :mod:`gui.channel_panel`.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from shared.models import ChannelStyle, LineStyle, TriggerSettings

VOLT_UNITS: Dict[str, float] = {"V": 1.0, "mV": 1e-3}
TIME_UNITS: Dict[str, float] = {"S": 1.0, "mS": 1e-3, "uS": 1e-6}

ControlListener = Callable[[], None]


def scaled_value(text: str, unit: str, units: Dict[str, float]) -> Optional[float]:
    """Combine a value field and its unit selector; None if not usable."""
    try:
        value = float(str(text).strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value * units.get(unit, 1.0)


def is_numeric(text: str) -> bool:
    try:
        float(str(text).strip())
    except ValueError:
        return False
    return True


class ChannelControls(ABC):
    """Abstract control panel bound to one channel."""

    def __init__(self) -> None:
        self._apply_listeners: List[ControlListener] = []
        self._scale_listeners: List[ControlListener] = []
        self._style_listeners: List[ControlListener] = []

    # ---- Acquisition fields ------------------------------------------------

    @abstractmethod
    def sampling_rate_text(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def set_sampling_rate(self, value: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def trigger_level_text(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def set_trigger_level(self, value: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def trigger(self) -> TriggerSettings:
        raise NotImplementedError

    @abstractmethod
    def set_trigger(self, trigger: TriggerSettings) -> None:
        raise NotImplementedError

    # ---- Scale and style ---------------------------------------------------

    @abstractmethod
    def volts_per_division(self) -> Optional[float]:
        """Volts/division in volts, or None when the field is not usable."""
        raise NotImplementedError

    @abstractmethod
    def time_per_division(self) -> Optional[float]:
        """Time/division in seconds, or None when the field is not usable."""
        raise NotImplementedError

    @abstractmethod
    def style(self) -> ChannelStyle:
        raise NotImplementedError

    # ---- Notifications -----------------------------------------------------

    def on_apply(self, callback: ControlListener) -> None:
        self._apply_listeners.append(callback)

    def on_scale_change(self, callback: ControlListener) -> None:
        self._scale_listeners.append(callback)

    def on_style_change(self, callback: ControlListener) -> None:
        self._style_listeners.append(callback)

    def _notify(self, listeners: List[ControlListener]) -> None:
        for callback in list(listeners):
            callback()

    def _notify_apply(self) -> None:
        self._notify(self._apply_listeners)

    def _notify_scale(self) -> None:
        self._notify(self._scale_listeners)

    def _notify_style(self) -> None:
        self._notify(self._style_listeners)


class InMemoryControls(ChannelControls):
    """Plain-attribute control panel for headless operation and tests."""

    def __init__(
        self,
        *,
        sampling_rate: str = "",
        trigger_level: str = "",
        trigger: TriggerSettings = TriggerSettings(),
        vdiv: str = "1",
        vdiv_unit: str = "V",
        tdiv: str = "1",
        tdiv_unit: str = "mS",
        color: str = "#00ff00",
        line_style: str = "solid",
    ) -> None:
        super().__init__()
        self.sampling_rate = sampling_rate
        self.trigger_level = trigger_level
        self.trigger_settings = trigger
        self.vdiv = vdiv
        self.vdiv_unit = vdiv_unit
        self.tdiv = tdiv
        self.tdiv_unit = tdiv_unit
        self.color = color
        self.line_style = line_style

    def sampling_rate_text(self) -> str:
        return self.sampling_rate

    def set_sampling_rate(self, value: float) -> None:
        self.sampling_rate = str(value)

    def trigger_level_text(self) -> str:
        return self.trigger_level

    def set_trigger_level(self, value: float) -> None:
        self.trigger_level = str(value)

    def trigger(self) -> TriggerSettings:
        return self.trigger_settings

    def set_trigger(self, trigger: TriggerSettings) -> None:
        self.trigger_settings = trigger

    def volts_per_division(self) -> Optional[float]:
        return scaled_value(self.vdiv, self.vdiv_unit, VOLT_UNITS)

    def time_per_division(self) -> Optional[float]:
        return scaled_value(self.tdiv, self.tdiv_unit, TIME_UNITS)

    def style(self) -> ChannelStyle:
        return ChannelStyle(color=self.color, line_style=LineStyle.parse(self.line_style))

    # Simulated user interaction

    def click_apply(self) -> None:
        self._notify_apply()

    def edit_scale(self, *, vdiv: str | None = None, vdiv_unit: str | None = None,
                   tdiv: str | None = None, tdiv_unit: str | None = None) -> None:
        if vdiv is not None:
            self.vdiv = vdiv
        if vdiv_unit is not None:
            self.vdiv_unit = vdiv_unit
        if tdiv is not None:
            self.tdiv = tdiv
        if tdiv_unit is not None:
            self.tdiv_unit = tdiv_unit
        self._notify_scale()

    def edit_style(self, *, color: str | None = None, line_style: str | None = None) -> None:
        if color is not None:
            self.color = color
        if line_style is not None:
            self.line_style = line_style
        self._notify_style()


__all__ = [
    "ChannelControls",
    "InMemoryControls",
    "VOLT_UNITS",
    "TIME_UNITS",
    "scaled_value",
    "is_numeric",
]
