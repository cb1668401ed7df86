"""
UIフォント管理モジュール。

メモリダンプやレジスタ表示に使う等幅フォントを、プラットフォームごとに選択します。
"""
from functools import lru_cache

from PySide6.QtGui import QFont, QFontDatabase

# 優先順位: Consolas (Windows) -> Menlo / Monaco (Mac) -> DejaVu Sans Mono (Linux)
PREFERRED_FAMILIES = ("Consolas", "Menlo", "Monaco", "DejaVu Sans Mono", "Courier New")


# @intent:responsibility 利用可能な最適な等幅フォントファミリー名を返します。結果はキャッシュされます。
@lru_cache(maxsize=1)
def monospace_family() -> str:
    available = set(QFontDatabase.families())
    for family in PREFERRED_FAMILIES:
        if family in available:
            return family
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()


def monospace_font(size: int = 10, bold: bool = False) -> QFont:
    font = QFont(monospace_family(), size)
    font.setBold(bold)
    return font
