from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

import numpy as np

from daq.base_gateway import DeviceGateway
from shared.app_settings import AppSettings, AppSettingsStore

from .channel_controller import ChannelController
from .controls import ChannelControls
from .graticule import GraticuleRenderer
from .scheduling import Scheduler
from .surface import DisplaySurface
from .trace_renderer import TraceRenderer


class ScopeRuntime:
    """
    Headless orchestrator: one surface, one gateway, many channels.

    The GUI builds the Qt-backed surface, scheduler and gateway and hands
    them in; tests use the in-memory equivalents.
    """

    def __init__(
        self,
        surface: DisplaySurface,
        gateway: DeviceGateway,
        scheduler: Scheduler,
        *,
        app_settings_store: Optional[AppSettingsStore] = None,
        logger: Optional[logging.Logger] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.app_settings_store = app_settings_store if app_settings_store is not None else AppSettingsStore()
        self.logger = logger or logging.getLogger(__name__)
        self.surface = surface
        self.gateway = gateway
        self.scheduler = scheduler
        self.graticule = GraticuleRenderer(surface)
        self.trace_renderer = TraceRenderer(surface)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._controllers: Dict[int, ChannelController] = {}
        self._running = False
        self._settings_unsub: Optional[Callable[[], None]] = self.app_settings_store.subscribe(
            self._on_app_settings, replay=False
        )

    @property
    def settings(self) -> AppSettings:
        return self.app_settings_store.get()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def controllers(self) -> List[ChannelController]:
        return list(self._controllers.values())

    def controller(self, number: int) -> Optional[ChannelController]:
        return self._controllers.get(number)

    def bind_channel(self, number: int, controls: ChannelControls) -> ChannelController:
        """Create the controller for `number`; starts it if the runtime runs."""
        if number in self._controllers:
            raise ValueError(f"channel {number} is already bound")
        settings = self.settings
        controller = ChannelController(
            number,
            controls,
            self.gateway,
            self.scheduler,
            self.trace_renderer,
            poll_interval_ms=settings.poll_interval_ms,
            initial_jitter_ms=settings.initial_jitter_ms,
            default_vdiv=settings.default_vdiv_v,
            default_tdiv=settings.default_tdiv_s,
            rng=self._rng,
        )
        self._controllers[number] = controller
        self.logger.info("Bound channel %d", number)
        if self._running:
            controller.start()
        return controller

    def _on_app_settings(self, settings: AppSettings) -> None:
        for controller in self._controllers.values():
            if controller.poll_interval_ms != settings.poll_interval_ms:
                controller.set_poll_interval(settings.poll_interval_ms)
                self.logger.info("Channel %d now polls every %d ms", controller.number, settings.poll_interval_ms)

    def start(self) -> None:
        if self._running:
            return
        self.graticule.draw_grid()
        self._running = True
        for controller in self._controllers.values():
            controller.start()

    def shutdown(self) -> None:
        if self._settings_unsub is not None:
            self._settings_unsub()
            self._settings_unsub = None
        for controller in self._controllers.values():
            controller.stop()
        self._running = False
        try:
            self.gateway.close()
        except Exception as exc:
            self.logger.debug("Gateway close failed: %s", exc)


__all__ = ["ScopeRuntime"]
