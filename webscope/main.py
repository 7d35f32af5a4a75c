import argparse
import logging
import sys
from typing import Optional, Sequence

import pyqtgraph as pg
from PySide6.QtWidgets import QApplication

from shared.app_settings import AppSettings, AppSettingsStore

# Antialiased traces; must be set before any PyQtGraph widgets are created.
pg.setConfigOptions(antialias=True)


def _channel_list(text: str) -> tuple:
    try:
        return tuple(int(part) for part in text.split(",") if part.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid channel list {text!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    defaults = AppSettings()
    parser = argparse.ArgumentParser(prog="webscope", description="Waveform viewer for an HTTP oscilloscope.")
    parser.add_argument("--url", default=defaults.device_url, help="base URL of the instrument")
    parser.add_argument("--channels", type=_channel_list, default=defaults.channels,
                        help="comma-separated channel numbers (default: %(default)s)")
    parser.add_argument("--poll-ms", type=int, default=defaults.poll_interval_ms,
                        help="delay between sample polls in milliseconds")
    parser.add_argument("--timeout-ms", type=int, default=defaults.request_timeout_ms,
                        help="HTTP transfer timeout in milliseconds (0 = none)")
    parser.add_argument("--simulate", action="store_true", help="use the built-in simulated device")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def settings_from_args(args: argparse.Namespace) -> AppSettingsStore:
    store = AppSettingsStore()
    store.update(
        device_url=args.url,
        channels=tuple(args.channels),
        poll_interval_ms=args.poll_ms,
        request_timeout_ms=args.timeout_ms,
        simulate=args.simulate,
    )
    return store


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        store = settings_from_args(args)
    except ValueError as exc:
        logging.getLogger(__name__).error("Invalid settings: %s", exc)
        return 2

    from gui.main_window import MainWindow

    app = QApplication(sys.argv[:1])
    app.setApplicationName("WebScope")
    window = MainWindow(store)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
