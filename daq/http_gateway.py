"""QtNetwork-backed gateway to a real instrument.

Requests are issued on the Qt event loop; each reply's `finished` signal is
translated into a `DeviceResponse` for the caller's callback.
"""
from __future__ import annotations

import logging
from typing import Optional, Set

from PySide6 import QtCore, QtNetwork

from shared.models import DeviceResponse

from .base_gateway import DeviceGateway, ResponseCallback, samples_path, settings_path

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpGateway(DeviceGateway):
    """Talks to the instrument's HTTP server at `base_url`."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_ms: int = 0,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_ms = int(timeout_ms)
        self._manager = QtNetwork.QNetworkAccessManager(parent)
        self._pending: Set[QtNetwork.QNetworkReply] = set()
        self._closed = False

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(self, path: str) -> QtNetwork.QNetworkRequest:
        request = QtNetwork.QNetworkRequest(QtCore.QUrl(self._base_url + path))
        if self._timeout_ms > 0:
            request.setTransferTimeout(self._timeout_ms)
        return request

    def post_settings(self, channel: int, body: bytes, on_done: ResponseCallback) -> None:
        if self._closed:
            return
        request = self._request(settings_path(channel))
        request.setHeader(QtNetwork.QNetworkRequest.KnownHeaders.ContentTypeHeader, FORM_CONTENT_TYPE)
        reply = self._manager.post(request, QtCore.QByteArray(body))
        self._track(reply, on_done)

    def fetch_samples(self, channel: int, on_done: ResponseCallback) -> None:
        if self._closed:
            return
        reply = self._manager.get(self._request(samples_path(channel)))
        self._track(reply, on_done)

    def close(self) -> None:
        self._closed = True
        for reply in list(self._pending):
            reply.abort()
        self._pending.clear()

    def _track(self, reply: QtNetwork.QNetworkReply, on_done: ResponseCallback) -> None:
        self._pending.add(reply)
        reply.finished.connect(lambda: self._finish(reply, on_done))

    def _finish(self, reply: QtNetwork.QNetworkReply, on_done: ResponseCallback) -> None:
        self._pending.discard(reply)
        status = reply.attribute(QtNetwork.QNetworkRequest.Attribute.HttpStatusCodeAttribute)
        body = bytes(reply.readAll().data())
        if reply.error() != QtNetwork.QNetworkReply.NetworkError.NoError:
            logger.debug("%s: %s", reply.url().toString(), reply.errorString())
        reply.deleteLater()
        if self._closed:
            return
        if status is None:
            on_done(DeviceResponse.transport_failure())
        else:
            on_done(DeviceResponse(int(status), body))


__all__ = ["HttpGateway"]
