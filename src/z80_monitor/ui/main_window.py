# z80_monitor/ui/main_window.py
"""
メインウィンドウの実装。

ビューモデルが返す描画ツリーを Qt ウィジェットに変換して表示するホストです。
ボタンやセレクタの操作はコマンドとしてビューモデルに送られ、
処理が終わるたびにツリー全体から中央ウィジェットを作り直します。
"""
import logging
from typing import Any, Optional

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import (
    QApplication, QComboBox, QGridLayout, QHBoxLayout, QLabel, QMainWindow,
    QPlainTextEdit, QPushButton, QScrollArea, QVBoxLayout, QWidget,
)

from z80_monitor.config.models import MonitorConfig
from z80_monitor.loader.programs import ProgramRegistry
from z80_monitor.ui.fonts import monospace_family, monospace_font
from z80_monitor.ui.model import Model
from z80_monitor.ui.vdom import Node

logger = logging.getLogger(__name__)

# 子要素を横に並べるコンテナ
_HORIZONTAL_IDS = {"buttons"}
_HORIZONTAL_CLASSES = {"register-8", "register-16"}


# @intent:responsibility アプリケーションのメインウィンドウ。描画ツリーの解釈とコマンドの中継を行います。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[MonitorConfig] = None,
                 registry: Optional[ProgramRegistry] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Z80 Monitor")
        self.setGeometry(100, 100, 900, 700)

        self._set_dark_theme()
        self.model = Model(config, link=self.dispatch, registry=registry)
        self.tree: Optional[Node] = None
        self._rerender()

    # @intent:responsibility コマンドをビューモデルに送り、必要なら再描画します。
    def dispatch(self, msg: Any) -> None:
        if self.model.handle_message(msg):
            self._rerender()

    # @intent:rationale setCentralWidget は古いウィジェットを deleteLater で破棄するため、
    #                  シグナル発行中のウィジェットを置き換えても安全です。
    def _rerender(self) -> None:
        self.tree = self.model.render()
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._build(self.tree))
        self.setCentralWidget(scroll)

    def content_widget(self) -> QWidget:
        return self.centralWidget().widget()

    # --- Node -> QWidget ---

    def _build(self, node: Node) -> QWidget:
        builder = getattr(self, f"_build_{node.tag}", None)
        if builder is not None:
            widget = builder(node)
        elif node.children:
            widget = self._build_container(node)
        else:
            widget = self._build_text(node)
        if node.id:
            widget.setObjectName(node.id)
        return widget

    def _build_container(self, node: Node) -> QWidget:
        widget = QWidget()
        horizontal = node.id in _HORIZONTAL_IDS or node.attr("class") in _HORIZONTAL_CLASSES
        layout = QHBoxLayout(widget) if horizontal else QVBoxLayout(widget)
        layout.setContentsMargins(2, 2, 2, 2)
        for child in node.children:
            layout.addWidget(self._build(child))
        if horizontal:
            layout.addStretch()
        if node.text:
            layout.addWidget(QLabel(node.text))
        return widget

    def _build_text(self, node: Node) -> QWidget:
        label = QLabel(node.text or "")
        if node.tag == "strong":
            label.setFont(monospace_font(bold=True))
        elif node.tag == "code":
            label.setFont(monospace_font())
        if node.attr("class") == "operand-error":
            label.setStyleSheet("color: #FF6060;")
        return label

    def _build_table(self, node: Node) -> QWidget:
        widget = QWidget()
        grid = QGridLayout(widget)
        grid.setContentsMargins(2, 2, 2, 2)
        for row, tr in enumerate(node.children):
            column = 0
            for td in tr.children:
                span = td.attr("colspan", 1)
                grid.addWidget(self._build_container(td), row, column, 1, span)
                column += span
        return widget

    def _build_textarea(self, node: Node) -> QWidget:
        edit = QPlainTextEdit(node.text or "")
        edit.setReadOnly(True)
        edit.setEnabled(not node.attr("disabled", False))
        edit.setMaximumHeight(100)
        return edit

    def _build_pre(self, node: Node) -> QWidget:
        edit = QPlainTextEdit(node.text or "")
        edit.setReadOnly(True)
        edit.setFont(monospace_font())
        edit.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        edit.setMinimumHeight(300)
        return edit

    def _build_button(self, node: Node) -> QWidget:
        button = QPushButton(node.text or "")
        message = node.attr("message")
        button.clicked.connect(lambda checked=False, msg=message: self.dispatch(msg))
        return button

    def _build_select(self, node: Node) -> QWidget:
        combo = QComboBox()
        combo.addItems(list(node.attr("options", ())))
        combo.setEnabled(not node.attr("disabled", False))
        on_change = node.attr("on_change")
        if on_change is not None:
            # activated はユーザー操作でのみ発行されます
            combo.activated.connect(on_change)
        return combo

    def _build_br(self, node: Node) -> QWidget:
        spacer = QWidget()
        spacer.setFixedHeight(2)
        return spacer

    # @intent:responsibility ダークテーマを適用します。
    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        dark_palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
        QApplication.setPalette(dark_palette)

        self.setStyleSheet(f"""
            QWidget {{ font-family: '{monospace_family()}', monospace; font-size: 10pt; }}
            QMainWindow {{ background-color: #1D1D1D; }}
            QPlainTextEdit {{ background-color: #121212; color: #BBBBBB; }}
            QPushButton {{ padding: 4px 12px; }}
        """)
