from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets")
pytest.importorskip("pyqtgraph")

from webscope.main import build_parser, main, settings_from_args  # noqa: E402


def test_defaults_match_app_settings():
    args = build_parser().parse_args([])
    settings = settings_from_args(args).get()
    assert settings.device_url == "http://192.168.0.100"
    assert settings.channels == (1,)
    assert settings.poll_interval_ms == 200
    assert not settings.simulate


def test_flags_flow_into_settings():
    args = build_parser().parse_args(
        ["--url", "http://scope.lan/", "--channels", "1,3", "--poll-ms", "500", "--timeout-ms", "2000", "--simulate"]
    )
    settings = settings_from_args(args).get()
    assert settings.device_url == "http://scope.lan"
    assert settings.channels == (1, 3)
    assert settings.poll_interval_ms == 500
    assert settings.request_timeout_ms == 2000
    assert settings.simulate


def test_bad_channel_list_is_a_usage_error():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--channels", "one,two"])


def test_invalid_settings_exit_before_gui():
    assert main(["--channels", "0"]) == 2
