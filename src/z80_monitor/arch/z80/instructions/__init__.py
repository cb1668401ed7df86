"""
Z80命令セット実装パッケージ。
"""
from typing import Optional

from z80_monitor.transport.bus import Bus
from z80_monitor.arch.z80.ops import DecodedInstruction, Op
from z80_monitor.arch.z80.state import Z80Registers
from .maps import DECODE_MAP, EXECUTE_MAP


# @intent:responsibility 指定アドレスの命令をデコードします。
# @intent:pre-condition `pc`はデコードするオペコードの先頭アドレスを指している必要があります。
def decode_opcode(bus: Bus, pc: int) -> Optional[DecodedInstruction]:
    """
    `pc` から始まる命令をデコードし、DecodedInstructionを返します。
    未対応のオペコード、またはメモリ範囲外の場合はNoneを返します。
    """
    try:
        opcode = bus.peek(pc & 0xFFFF)
        decoder = DECODE_MAP.get(opcode)
        if decoder is None:
            return None
        return decoder(opcode, bus, pc)
    except IndexError:
        return None


# @intent:responsibility デコードされたZ80命令を実行し、CPUの状態を変更します。
def execute_instruction(op: Op, state: Z80Registers, bus: Bus) -> None:
    executor = EXECUTE_MAP.get(type(op))
    if executor is None:
        raise NotImplementedError(f"No executor for {type(op).__name__}")
    executor(state, bus, op)
