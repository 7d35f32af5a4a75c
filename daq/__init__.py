"""Device gateways: the HTTP instrument client and an in-process simulator.

Drivers subclass :class:`daq.base_gateway.DeviceGateway`.
"""

from .base_gateway import DeviceGateway, ResponseCallback, samples_path, settings_path

__all__ = ["DeviceGateway", "ResponseCallback", "samples_path", "settings_path"]
