# z80_monitor/core/snapshot.py
"""
マシン状態の不変スナップショット

このモジュールは、表示のためにレジスタ、メモリ全体、キャプチャ済み出力を
ある一時点で複製した読み取り専用のデータ構造を定義します。
"""
from dataclasses import dataclass, replace

from z80_monitor.arch.z80.state import Z80Registers


# @intent:responsibility ある一時点におけるレジスタ、メモリ、出力を不変に記録します。
@dataclass(frozen=True)
class MachineSnapshot:
    """
    表示コンポーネントに渡す読み取り専用のビュー。
    registers はコピーなので、書き換えてもエンジンには影響しません。
    """
    registers: Z80Registers
    memory: bytes
    output: bytes

    # @intent:rationale 呼び出し側が保持するレジスタオブジェクトと共有しないよう、生成時に複製します。
    def __post_init__(self):
        object.__setattr__(self, "registers", replace(self.registers))
        object.__setattr__(self, "memory", bytes(self.memory))
        object.__setattr__(self, "output", bytes(self.output))

    def read8(self, address: int) -> int:
        if not 0 <= address < len(self.memory):
            raise IndexError(f"Address {address:#06x} out of bounds for memory of size {len(self.memory)}.")
        return self.memory[address]

    @property
    def pc(self) -> int:
        return self.registers.pc
