# tests/conftest.py
import os

# Qt のテストはディスプレイなしで実行します
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
