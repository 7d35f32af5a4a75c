"""Qt adapters, exercised on the offscreen platform."""
from __future__ import annotations

import os

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")
pytest.importorskip("pyqtgraph")

from core.graticule import GraticuleRenderer  # noqa: E402
from gui.channel_panel import ChannelPanel, PanelControls  # noqa: E402
from gui.scope_surface import ScopeSurface  # noqa: E402
from shared.models import LineStyle, StrokeStyle, TriggerEdge, TriggerSettings  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def controls(qapp):
    return PanelControls(ChannelPanel(1, color="#ff8800", vdiv="2", tdiv="5"))


def test_panel_fields_round_trip(controls):
    controls.set_sampling_rate(4808)
    controls.set_trigger_level(1.5)
    controls.set_trigger(TriggerSettings(enabled=True, edge=TriggerEdge.RISING))

    assert controls.sampling_rate_text() == "4808"
    assert controls.trigger_level_text() == "1.5"
    assert controls.trigger() == TriggerSettings(enabled=True, edge=TriggerEdge.RISING)

    controls.set_trigger(TriggerSettings(enabled=False, edge=TriggerEdge.FALLING))
    assert controls.trigger() == TriggerSettings()


def test_scale_combines_value_and_unit(controls):
    assert controls.volts_per_division() == pytest.approx(2.0)
    assert controls.time_per_division() == pytest.approx(0.005)

    controls.panel.vdiv_unit.setCurrentText("mV")
    controls.panel.tdiv.setText("x")
    assert controls.volts_per_division() == pytest.approx(0.002)
    assert controls.time_per_division() is None


def test_panel_signals_reach_listeners(controls):
    seen = []
    controls.on_apply(lambda: seen.append("apply"))
    controls.on_scale_change(lambda: seen.append("scale"))
    controls.on_style_change(lambda: seen.append("style"))

    controls.panel.apply_button.click()
    controls.panel.tdiv_unit.setCurrentText("uS")
    controls.panel.line_style.setCurrentText("dashed")
    controls.panel.set_color("#0000ff")

    assert seen == ["apply", "scale", "style", "style"]
    assert controls.style().color == "#0000ff"
    assert controls.style().line_style is LineStyle.DASHED


def test_scope_surface_holds_grid_and_traces(qapp):
    surface = ScopeSurface()
    GraticuleRenderer(surface).draw_grid()
    assert len(surface.grid_lines) == 76

    trace = surface.ensure_trace(1)
    trace.set_style(StrokeStyle("#00ff00", dash=(4.0, 4.0)))
    trace.set_points(np.array([0, 6, 13]), np.array([250, 94, -61]))
    xs, ys = trace.curve.getData()
    assert xs.tolist() == [0.0, 6.0, 13.0]
    assert ys.tolist() == [250.0, 94.0, -61.0]
    assert surface.ensure_trace(1) is trace


def test_main_window_builds_one_panel_per_channel(qapp):
    from daq.simulated_device import SimulatedDevice
    from gui.main_window import MainWindow
    from shared.app_settings import AppSettingsStore

    store = AppSettingsStore()
    store.update(channels=(1, 2), simulate=True)
    window = MainWindow(store)
    try:
        assert window.panel(1) is not None
        assert window.panel(2) is not None
        assert window.panel(3) is None
        assert isinstance(window.runtime.gateway, SimulatedDevice)
        assert [c.number for c in window.runtime.controllers] == [1, 2]
    finally:
        window.close()


def test_http_gateway_normalizes_base_url(qapp):
    from daq.http_gateway import HttpGateway

    gateway = HttpGateway("http://192.168.0.100/")
    assert gateway.base_url == "http://192.168.0.100"
    gateway.close()
    gateway.fetch_samples(1, lambda response: pytest.fail("closed gateway answered"))


def test_poll_interval_box_retimes_channels(qapp):
    from gui.main_window import MainWindow
    from shared.app_settings import AppSettings, AppSettingsStore

    store = AppSettingsStore(AppSettings(channels=(1, 2), simulate=True))
    window = MainWindow(store)
    try:
        assert window.poll_interval_spin.value() == 200
        window.poll_interval_spin.setValue(750)
        assert store.get().poll_interval_ms == 750
        assert [c.poll_interval_ms for c in window.runtime.controllers] == [750, 750]
    finally:
        window.close()
