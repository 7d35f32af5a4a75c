from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from core.runtime import ScopeRuntime
from daq.base_gateway import DeviceGateway
from shared.app_settings import AppSettingsStore

from .channel_panel import ChannelPanel, PanelControls
from .qt_scheduler import QtScheduler
from .scope_surface import ScopeSurface

CHANNEL_COLORS = ("#00ff00", "#ffd700", "#00bfff", "#ff6347")


class MainWindow(QtWidgets.QMainWindow):
    """Scope display on the left, one control panel per channel on the right."""

    def __init__(
        self,
        app_settings_store: Optional[AppSettingsStore] = None,
        *,
        gateway: Optional[DeviceGateway] = None,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self.setWindowTitle("WebScope")

        self._settings_store = app_settings_store if app_settings_store is not None else AppSettingsStore()
        settings = self._settings_store.get()

        self.scheduler = QtScheduler(self)
        self.surface = ScopeSurface(self)
        if gateway is None:
            gateway = self._make_gateway()
        self.runtime = ScopeRuntime(
            self.surface,
            gateway,
            self.scheduler,
            app_settings_store=self._settings_store,
        )

        self._panels: Dict[int, ChannelPanel] = {}
        self._controls: Dict[int, PanelControls] = {}

        central = QtWidgets.QWidget(self)
        layout = QtWidgets.QHBoxLayout(central)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.addWidget(self.surface.widget, 1)

        side = QtWidgets.QVBoxLayout()
        side.setSpacing(6)
        for index, number in enumerate(settings.channels):
            panel = ChannelPanel(
                number,
                color=CHANNEL_COLORS[index % len(CHANNEL_COLORS)],
                vdiv=f"{settings.default_vdiv_v:g}",
                tdiv=f"{settings.default_tdiv_s * 1000:g}",
                parent=central,
            )
            controls = PanelControls(panel)
            self._panels[number] = panel
            self._controls[number] = controls
            self.runtime.bind_channel(number, controls)
            side.addWidget(panel)
        side.addStretch(1)
        layout.addLayout(side)
        self.setCentralWidget(central)

        toolbar = self.addToolBar("Acquisition")
        toolbar.setMovable(False)
        toolbar.addWidget(QtWidgets.QLabel("Poll interval "))
        self.poll_interval_spin = QtWidgets.QSpinBox()
        self.poll_interval_spin.setRange(20, 10_000)
        self.poll_interval_spin.setSingleStep(50)
        self.poll_interval_spin.setSuffix(" ms")
        self.poll_interval_spin.setValue(settings.poll_interval_ms)
        self.poll_interval_spin.valueChanged.connect(self._on_poll_interval_changed)
        toolbar.addWidget(self.poll_interval_spin)

        source = "simulated device" if settings.simulate else settings.device_url
        self.statusBar().showMessage(f"Connected to {source}")

        quit_action = QtGui.QAction("Quit", self)
        quit_action.setShortcut(QtGui.QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        self.addAction(quit_action)

        # Start once the event loop is running so the window is on screen first.
        QtCore.QTimer.singleShot(0, self.runtime.start)

    def _make_gateway(self) -> DeviceGateway:
        settings = self._settings_store.get()
        if settings.simulate:
            from daq.simulated_device import SimulatedDevice

            return SimulatedDevice(settings.channels, scheduler=self.scheduler)
        from daq.http_gateway import HttpGateway

        return HttpGateway(settings.device_url, timeout_ms=settings.request_timeout_ms, parent=self)

    def _on_poll_interval_changed(self, value: int) -> None:
        try:
            self._settings_store.update(poll_interval_ms=int(value))
        except ValueError as exc:
            self._logger.warning("Rejected poll interval %s: %s", value, exc)

    def panel(self, number: int) -> Optional[ChannelPanel]:
        return self._panels.get(number)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        try:
            self.runtime.shutdown()
        except Exception as e:
            self._logger.debug("Exception during runtime shutdown on close: %s", e)
        self.scheduler.cancel_all()
        super().closeEvent(event)


__all__ = ["MainWindow"]
