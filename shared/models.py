from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

import numpy as np


def _freeze_array(array: np.ndarray, *, dtype: Any = None) -> np.ndarray:
    """Return a read-only, C-contiguous 1D copy of `array`."""
    arr = np.array(array, dtype=dtype, copy=True, order="C")
    if arr.ndim != 1:
        raise ValueError(f"array must be 1D, got {arr.ndim}D")
    arr.setflags(write=False)
    return arr


# ----------------------------
# Trigger settings
# ----------------------------

TRIGGER_ENABLED_FLAG = 0x01
TRIGGER_RISING_FLAG = 0x02


class TriggerEdge(str, Enum):
    RISING = "rising"
    FALLING = "falling"


@dataclass(frozen=True)
class TriggerSettings:
    """Trigger condition as shown in the control panel.

    The device packs this into a bit field (bit 0 = enabled, bit 1 = rising
    edge); conversion happens only in `to_flags` / `from_flags`.
    """

    enabled: bool = False
    edge: TriggerEdge = TriggerEdge.FALLING

    def to_flags(self) -> int:
        flags = 0
        if self.enabled:
            flags |= TRIGGER_ENABLED_FLAG
        if self.edge is TriggerEdge.RISING:
            flags |= TRIGGER_RISING_FLAG
        return flags

    @classmethod
    def from_flags(cls, flags: int) -> "TriggerSettings":
        flags = int(flags)
        edge = TriggerEdge.RISING if flags & TRIGGER_RISING_FLAG else TriggerEdge.FALLING
        return cls(enabled=bool(flags & TRIGGER_ENABLED_FLAG), edge=edge)


# ----------------------------
# Presentation
# ----------------------------

class LineStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"
    BOLD = "bold"

    @classmethod
    def parse(cls, value: str) -> "LineStyle":
        """Unknown selector values fall back to a plain solid line."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.SOLID


@dataclass(frozen=True)
class ChannelStyle:
    color: str = "#00ff00"
    line_style: LineStyle = LineStyle.SOLID


@dataclass(frozen=True)
class StrokeStyle:
    """Resolved stroke attributes for a trace primitive."""

    color: str
    width: float = 1.0
    dash: tuple[float, ...] | None = None

    @classmethod
    def from_channel_style(cls, style: ChannelStyle) -> "StrokeStyle":
        if style.line_style is LineStyle.DASHED:
            return cls(color=style.color, width=1.0, dash=(4.0, 4.0))
        if style.line_style is LineStyle.BOLD:
            return cls(color=style.color, width=4.0)
        return cls(color=style.color)


# ----------------------------
# Device wire format
# ----------------------------

SUCCESS_STATUSES = frozenset({200, 304})
TRANSPORT_FAILURE = 0


@dataclass(frozen=True)
class DeviceResponse:
    """Completed exchange with the device.

    `status` is the HTTP status, or 0 when the request never completed at the
    transport level.
    """

    status: int
    body: bytes = b""

    def __post_init__(self) -> None:
        if self.status < 0:
            raise ValueError("status must be non-negative")
        object.__setattr__(self, "body", bytes(self.body))

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS_STATUSES

    @classmethod
    def transport_failure(cls) -> "DeviceResponse":
        return cls(status=TRANSPORT_FAILURE)


@dataclass(frozen=True)
class DeviceSettings:
    """Acquisition settings as reported by the device."""

    sampling_rate: float
    trigger: TriggerSettings = field(default_factory=TriggerSettings)
    trigger_level: float = 0.0


def encode_settings_form(sampling_rate: str, trigger: TriggerSettings, trigger_level: str) -> bytes:
    """Build the `sr=..&tf=..&tl=..` body of a settings push.

    Field text is passed through untouched; the device decides what to make
    of a malformed number.
    """
    return f"sr={sampling_rate}&tf={trigger.to_flags()}&tl={trigger_level}".encode("latin-1", "replace")


def decode_settings_payload(body: bytes) -> DeviceSettings:
    """Parse the JSON `{sr, tl, tf}` object returned by `/ch{N}/pr`.

    Raises ValueError for anything that is not such an object.
    """
    try:
        payload = json.loads(body.decode("latin-1"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"settings payload is not JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ValueError("settings payload must be a JSON object")
    try:
        return DeviceSettings(
            sampling_rate=_as_number(payload["sr"]),
            trigger=TriggerSettings.from_flags(int(payload.get("tf", 0))),
            trigger_level=_as_number(payload.get("tl", 0)),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"settings payload missing or invalid field: {exc}") from exc


def decode_samples(body: bytes) -> np.ndarray:
    """Decode a sample buffer: one sample per byte, low 8 bits significant."""
    raw = np.frombuffer(bytes(body), dtype=np.uint8)
    return _freeze_array(raw & 0xFF, dtype=np.uint8)


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    number = float(value)
    return int(number) if number.is_integer() else number


__all__ = [
    "TriggerEdge",
    "TriggerSettings",
    "LineStyle",
    "ChannelStyle",
    "StrokeStyle",
    "DeviceResponse",
    "DeviceSettings",
    "SUCCESS_STATUSES",
    "TRANSPORT_FAILURE",
    "encode_settings_form",
    "decode_settings_payload",
    "decode_samples",
]
