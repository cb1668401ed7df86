# z80_monitor/arch/z80/state.py
"""
Z80 CPU固有の状態定義。

このモジュールは、Z80 CPUのレジスタ、フラグ、および停止状態を保持するデータ構造を定義します。
"""
from dataclasses import dataclass

from z80_monitor.arch.z80.ops import Reg8, Reg16

# Z80フラグビットマスク
# @intent:constant Z80フラグレジスタ内の各フラグビットの位置を定義します。
S_FLAG = 0b10000000  # Sign (符号)
Z_FLAG = 0b01000000  # Zero (ゼロ)
H_FLAG = 0b00010000  # Half Carry (ハーフキャリー)
PV_FLAG = 0b00000100 # Parity/Overflow (パリティ/オーバーフロー)
N_FLAG = 0b00000010  # Add/Subtract (加減算)
C_FLAG = 0b00000001  # Carry (キャリー)


# @intent:utility_function Fレジスタの1ビットを読み書きするプロパティを生成します。
def _flag(mask: int) -> property:
    def getter(self) -> bool:
        return (self.f & mask) != 0

    def setter(self, value: bool) -> None:
        if value:
            self.f |= mask
        else:
            self.f &= ~mask & 0xFF

    return property(getter, setter)


# @intent:utility_function 2つの8ビットレジスタを連結した16ビットペアのプロパティを生成します。
def _pair(high: str, low: str) -> property:
    def getter(self) -> int:
        return (getattr(self, high) << 8) | getattr(self, low)

    def setter(self, value: int) -> None:
        setattr(self, high, (value >> 8) & 0xFF)
        setattr(self, low, value & 0xFF)

    return property(getter, setter)


# @intent:responsibility Z80 CPUのレジスタファイルと停止状態を保持します。
@dataclass
class Z80Registers:
    """
    Z80 CPUのレジスタ状態を保持するデータクラス。
    全てのフィールドのデフォルト値が電源投入時の値です。
    """
    a: int = 0x00
    f: int = 0x00  # Flag register
    b: int = 0x00
    c: int = 0x00
    d: int = 0x00
    e: int = 0x00
    h: int = 0x00
    l: int = 0x00

    sp: int = 0x0000  # Stack Pointer
    pc: int = 0x0000  # Program Counter

    halted: bool = False  # HALT命令で停止中

    flag_s = _flag(S_FLAG)
    flag_z = _flag(Z_FLAG)
    flag_h = _flag(H_FLAG)
    flag_pv = _flag(PV_FLAG)
    flag_n = _flag(N_FLAG)
    flag_c = _flag(C_FLAG)

    # 16-bit register pairs
    af = _pair("a", "f")
    bc = _pair("b", "c")
    de = _pair("d", "e")
    hl = _pair("h", "l")

    # @intent:accessor Reg8 列挙子でレジスタを読み書きします。UIが属性名を知らなくても済むようにします。
    def get_reg8(self, reg: Reg8) -> int:
        return getattr(self, reg.value.lower())

    def set_reg8(self, reg: Reg8, value: int) -> None:
        setattr(self, reg.value.lower(), value & 0xFF)

    def get_reg16(self, reg: Reg16) -> int:
        return getattr(self, reg.value.lower())

    def set_reg16(self, reg: Reg16, value: int) -> None:
        setattr(self, reg.value.lower(), value & 0xFFFF)
