__all__ = ["MainWindow", "ChannelPanel", "PanelControls", "QtScheduler", "ScopeSurface"]

from .main_window import MainWindow
from .channel_panel import ChannelPanel, PanelControls
from .qt_scheduler import QtScheduler
from .scope_surface import ScopeSurface
