"""
Shared data structures available to both the headless core and the GUI.
"""

from .app_settings import AppSettings, AppSettingsStore
from .models import (
    ChannelStyle,
    DeviceResponse,
    DeviceSettings,
    LineStyle,
    StrokeStyle,
    TriggerEdge,
    TriggerSettings,
)

__all__ = [
    "AppSettings",
    "AppSettingsStore",
    "ChannelStyle",
    "DeviceResponse",
    "DeviceSettings",
    "LineStyle",
    "StrokeStyle",
    "TriggerEdge",
    "TriggerSettings",
]
