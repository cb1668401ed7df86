# z80_monitor/core/errors.py
"""
オペランド表示まわりの例外定義。

いずれも表示できないオペランドを表し、表示側はそのパネルだけをエラー表示にします。
黙って別のロケーションに置き換えることはしません。
"""


class OperandGapError(NotImplementedError):
    """オペランドのデコードまたは解決が未対応であることを示す基底クラス。"""


class UnmodeledOperandError(OperandGapError):
    """デコード表が扱わないオペランド（16ビット即値間接など）に遭遇しました。"""


class IndirectResolutionError(OperandGapError):
    """16ビットの間接読み出しなど、解決できないロケーションが渡されました。"""


class UnmappedAddressError(OperandGapError):
    """間接ロケーションの参照先がメモリの範囲外です。"""
