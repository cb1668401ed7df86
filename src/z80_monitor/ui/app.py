# z80_monitor/ui/app.py
"""
アプリケーションのエントリポイント。
設定を読み込み、メインウィンドウを起動します。
"""
import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from z80_monitor.config.loader import ConfigLoader
from z80_monitor.config.models import MonitorConfig
from .main_window import MainWindow


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="z80-monitor", description="Z80 debugger and visualizer")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_known_args(argv)


# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv=None):
    args, qt_args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = ConfigLoader().load_from_file(args.config) if args.config else MonitorConfig()

    app = QApplication([sys.argv[0]] + qt_args)
    main_win = MainWindow(config)
    main_win.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
