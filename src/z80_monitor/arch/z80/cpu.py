# z80_monitor/arch/z80/cpu.py
"""
Z80 CPUエミュレーションの中心モジュール。

このモジュールはZ80 CPUの具体的な実装を提供します。
CPUは自身のバス（RAMとI/Oポート）を所有し、電源投入時の状態から開始します。
"""
import logging
from dataclasses import replace
from typing import Optional

from z80_monitor.arch.z80.instructions import decode_opcode, execute_instruction
from z80_monitor.arch.z80.ops import DecodedInstruction
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.transport.bus import RAM, Bus, Device

logger = logging.getLogger(__name__)


class EngineError(Exception):
    """CPUエンジンが報告するエラーの基底クラス。"""


class UnsupportedOpcodeError(EngineError):
    """PCの位置の命令をデコードできなかった場合に送出されます。"""

    def __init__(self, address: int, opcode: Optional[int]):
        self.address = address
        self.opcode = opcode
        detail = f"{opcode:#04x}" if opcode is not None else "unmapped memory"
        super().__init__(f"Unsupported opcode {detail} at {address:#06x}")


class ProgramLoadError(EngineError, ValueError):
    """プログラムがメモリに収まらない場合に送出されます。"""


# @intent:responsibility Z80 CPUの具体的なエミュレーションロジックを提供します。
class Z80:
    """
    Z80 CPUをエミュレートするクラス。
    フェッチ、デコード、PC更新、実行の順に1命令ずつ処理します。
    """
    # @intent:pre-condition memory_sizeは1から0x10000の範囲である必要があります。
    def __init__(self, memory_size: int = 0x10000, load_address: int = 0x0000):
        if not 0 < memory_size <= 0x10000:
            raise ValueError(f"Memory size {memory_size} must be between 1 and 0x10000.")
        self._ram = RAM(memory_size)
        self._bus = Bus()
        self._bus.register_device(0x0000, memory_size - 1, self._ram)
        self._state = Z80Registers()
        self._load_address = load_address

    # @intent:responsibility 現在のレジスタのコピーを返します。呼び出し側の変更はCPUに影響しません。
    @property
    def registers(self) -> Z80Registers:
        return replace(self._state)

    @property
    def memory(self) -> bytes:
        return self._ram.dump()

    @property
    def halted(self) -> bool:
        return self._state.halted

    @property
    def load_address(self) -> int:
        return self._load_address

    @property
    def bus(self) -> Bus:
        return self._bus

    # @intent:responsibility 指定したI/Oポートに出力先デバイスを接続します。
    def install_output(self, port: int, sink: Device) -> None:
        self._bus.register_io_device(port, sink)

    # @intent:responsibility プログラムをロードアドレスに書き込みます。
    def load(self, program: bytes) -> None:
        try:
            self._ram.load(self._load_address, bytes(program))
        except IndexError as e:
            raise ProgramLoadError(str(e)) from e
        logger.debug("Loaded %d bytes at %#06x", len(program), self._load_address)

    # @intent:responsibility 指定アドレスの命令を、状態を変更せずにデコードします。
    def parse_opcode(self, address: int) -> Optional[DecodedInstruction]:
        return decode_opcode(self._bus, address)

    # @intent:responsibility CPUを1命令進めます。HALT状態では何もしません。
    # @intent:post-condition 実行中にEngineErrorを送出した場合、PCとSPを含むレジスタは実行前のままです。
    #                       ただしフォールト以前に完了したメモリ書き込みは残ります（16ビット書き込みの片側など）。
    def step(self) -> None:
        if self._state.halted:
            return

        pc = self._state.pc
        decoded = decode_opcode(self._bus, pc)
        if decoded is None:
            opcode = self._bus.peek(pc) if pc < self._ram.get_size() else None
            raise UnsupportedOpcodeError(pc, opcode)

        # PCを命令長分進めてから、レジスタの複製に対して実行します
        state = replace(self._state)
        state.pc = (pc + decoded.length) & 0xFFFF
        try:
            execute_instruction(decoded.op, state, self._bus)
        except IndexError as e:
            raise EngineError(f"{decoded.op} at {pc:#06x}: {e}") from e
        self._state = state

    # @intent:responsibility HALTするまで実行します。上限はありません。
    def run(self) -> None:
        while not self._state.halted:
            self.step()
