"""
Z80 データ転送命令（8/16ビットLD、PUSH/POP）の実装。
"""
from z80_monitor.arch.z80.ops import (
    DecodedInstruction, Ld8, Ld16, Push, Pop, Reg16,
    Direct16, Immediate8, Immediate16, Indirect8, Absolute8, Absolute16,
)
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.transport.bus import Bus
from .base import (
    ACCUMULATOR, QQ_CODES, SS_CODES,
    fetch8, fetch16, register_operand, read8, write8, read16, write16, push16, pop16,
)

# --- Decoding Functions ---

# @intent:responsibility LD ss,nn 形式の命令をデコードします。
def decode_ld_ss_nn(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    ss = SS_CODES[(opcode >> 4) & 0b11]
    nn = fetch16(bus, pc + 1)
    return DecodedInstruction(Ld16(Direct16(ss), Immediate16(nn)), 3)


# @intent:responsibility LD r,n 形式の命令をデコードします。
def decode_ld_r_n(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    dst = register_operand(opcode >> 3)
    return DecodedInstruction(Ld8(dst, Immediate8(fetch8(bus, pc + 1))), 2)


# @intent:responsibility LD r,r' 形式の命令をデコードします。0x76 (HALT) は含みません。
def decode_ld_r_r_prime(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    return DecodedInstruction(Ld8(register_operand(opcode >> 3), register_operand(opcode)), 1)


def decode_ld_indirect_a(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """LD (BC),A / LD (DE),A"""
    pair = Reg16.BC if opcode == 0x02 else Reg16.DE
    return DecodedInstruction(Ld8(Indirect8(pair), ACCUMULATOR), 1)


def decode_ld_a_indirect(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """LD A,(BC) / LD A,(DE)"""
    pair = Reg16.BC if opcode == 0x0A else Reg16.DE
    return DecodedInstruction(Ld8(ACCUMULATOR, Indirect8(pair)), 1)


def decode_ld_nn_a(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """LD (nn),A"""
    return DecodedInstruction(Ld8(Absolute8(fetch16(bus, pc + 1)), ACCUMULATOR), 3)


def decode_ld_a_nn(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """LD A,(nn)"""
    return DecodedInstruction(Ld8(ACCUMULATOR, Absolute8(fetch16(bus, pc + 1))), 3)


def decode_ld_nn_hl(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """LD (nn),HL"""
    return DecodedInstruction(Ld16(Absolute16(fetch16(bus, pc + 1)), Direct16(Reg16.HL)), 3)


def decode_ld_hl_nn(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """LD HL,(nn)"""
    return DecodedInstruction(Ld16(Direct16(Reg16.HL), Absolute16(fetch16(bus, pc + 1))), 3)


def decode_ld_sp_hl(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """LD SP,HL"""
    return DecodedInstruction(Ld16(Direct16(Reg16.SP), Direct16(Reg16.HL)), 1)


def decode_push_pop(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """PUSH qq / POP qq"""
    pair = Direct16(QQ_CODES[(opcode >> 4) & 0b11])
    is_push = (opcode & 0x0F) == 0x05
    return DecodedInstruction(Push(pair) if is_push else Pop(pair), 1)


# --- Execution Functions ---

def execute_ld8(state: Z80Registers, bus: Bus, op: Ld8) -> None:
    write8(state, bus, op.dst, read8(state, bus, op.src))


def execute_ld16(state: Z80Registers, bus: Bus, op: Ld16) -> None:
    write16(state, bus, op.dst, read16(state, bus, op.src))


def execute_push(state: Z80Registers, bus: Bus, op: Push) -> None:
    push16(state, bus, read16(state, bus, op.loc))


def execute_pop(state: Z80Registers, bus: Bus, op: Pop) -> None:
    write16(state, bus, op.loc, pop16(state, bus))
