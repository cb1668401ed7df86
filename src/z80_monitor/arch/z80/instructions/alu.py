"""
Z80 算術論理演算 (ALU) 命令の実装。
"""
from z80_monitor.arch.z80.ops import (
    DecodedInstruction, Direct16, Immediate8, Reg16,
    Add8, Adc, Sub8, Sbc, And, Or, Xor, Cp, Inc, Dec, Inc16, Dec16, Add16,
    Cpl, Neg, Ccf, Scf, Daa, Rlca, Rla, Rrca, Rra,
)
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.arch.z80.alu import (
    RL, RLC, RR, RRC,
    update_flags_add8, update_flags_sub8, update_flags_logic8,
    update_flags_inc_dec8, update_flags_add16, rotate_accumulator, decimal_adjust,
)
from z80_monitor.transport.bus import Bus
from .base import ACCUMULATOR, SS_CODES, fetch8, register_operand, read8, write8, read16, write16

# 0x80-0xBF / 0xC6-0xFE のビット5-3による演算種別
_ALU_OPS = {
    0b000: lambda src: Add8(ACCUMULATOR, src),
    0b001: lambda src: Adc(ACCUMULATOR, src),
    0b010: lambda src: Sub8(ACCUMULATOR, src),
    0b011: lambda src: Sbc(ACCUMULATOR, src),
    0b100: And,
    0b101: Xor,
    0b110: Or,
    0b111: Cp,
}

_IMPLIED_OPS = {
    0x07: Rlca, 0x0F: Rrca, 0x17: Rla, 0x1F: Rra,
    0x27: Daa, 0x2F: Cpl, 0x37: Scf, 0x3F: Ccf,
}

# --- Decoding Functions ---

# @intent:responsibility ADD/ADC/SUB/SBC/AND/XOR/OR/CP r 形式の命令をデコードします。
def decode_alu_r(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    make = _ALU_OPS[(opcode >> 3) & 0b111]
    return DecodedInstruction(make(register_operand(opcode)), 1)


# @intent:responsibility ADD/ADC/SUB/SBC/AND/XOR/OR/CP n 形式の命令をデコードします。
def decode_alu_n(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    make = _ALU_OPS[(opcode >> 3) & 0b111]
    return DecodedInstruction(make(Immediate8(fetch8(bus, pc + 1))), 2)


# @intent:responsibility INC r / DEC r 形式の命令をデコードします。
def decode_inc_dec8(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    loc = register_operand(opcode >> 3)
    is_inc = (opcode & 1) == 0
    return DecodedInstruction(Inc(loc) if is_inc else Dec(loc), 1)


# @intent:responsibility INC ss / DEC ss 形式の命令をデコードします。
def decode_inc_dec16(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    loc = Direct16(SS_CODES[(opcode >> 4) & 0b11])
    is_inc = (opcode & 0x0F) == 0x03
    return DecodedInstruction(Inc16(loc) if is_inc else Dec16(loc), 1)


# @intent:responsibility ADD HL,ss 形式の命令をデコードします。
def decode_add_hl_ss(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    src = Direct16(SS_CODES[(opcode >> 4) & 0b11])
    return DecodedInstruction(Add16(Direct16(Reg16.HL), src), 1)


# @intent:responsibility オペランドを持たないアキュムレータ/フラグ命令をデコードします。
def decode_implied(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    return DecodedInstruction(_IMPLIED_OPS[opcode](), 1)


# --- Execution Functions ---

def execute_add8(state: Z80Registers, bus: Bus, op: Add8) -> None:
    a = read8(state, bus, op.dst)
    val = read8(state, bus, op.src)
    result = a + val
    update_flags_add8(state, a, val, result)
    write8(state, bus, op.dst, result)


def execute_adc(state: Z80Registers, bus: Bus, op: Adc) -> None:
    a = read8(state, bus, op.dst)
    val = read8(state, bus, op.src)
    carry = 1 if state.flag_c else 0
    result = a + val + carry
    update_flags_add8(state, a, val, result, carry_in=carry)
    write8(state, bus, op.dst, result)


def execute_sub8(state: Z80Registers, bus: Bus, op: Sub8) -> None:
    a = read8(state, bus, op.dst)
    val = read8(state, bus, op.src)
    result = a - val
    update_flags_sub8(state, a, val, result)
    write8(state, bus, op.dst, result)


def execute_sbc(state: Z80Registers, bus: Bus, op: Sbc) -> None:
    a = read8(state, bus, op.dst)
    val = read8(state, bus, op.src)
    borrow = 1 if state.flag_c else 0
    result = a - val - borrow
    update_flags_sub8(state, a, val, result, borrow_in=borrow)
    write8(state, bus, op.dst, result)


def execute_and(state: Z80Registers, bus: Bus, op: And) -> None:
    state.a &= read8(state, bus, op.src)
    update_flags_logic8(state, state.a, h_flag=True)


def execute_xor(state: Z80Registers, bus: Bus, op: Xor) -> None:
    state.a ^= read8(state, bus, op.src)
    update_flags_logic8(state, state.a)


def execute_or(state: Z80Registers, bus: Bus, op: Or) -> None:
    state.a |= read8(state, bus, op.src)
    update_flags_logic8(state, state.a)


def execute_cp(state: Z80Registers, bus: Bus, op: Cp) -> None:
    val = read8(state, bus, op.src)
    update_flags_sub8(state, state.a, val, state.a - val)
    # CP does not store the result


def execute_inc(state: Z80Registers, bus: Bus, op: Inc) -> None:
    val = read8(state, bus, op.loc)
    update_flags_inc_dec8(state, val, val + 1, is_inc=True)
    write8(state, bus, op.loc, val + 1)


def execute_dec(state: Z80Registers, bus: Bus, op: Dec) -> None:
    val = read8(state, bus, op.loc)
    update_flags_inc_dec8(state, val, val - 1, is_inc=False)
    write8(state, bus, op.loc, val - 1)


# 16ビットのINC/DECはフラグに影響しません
def execute_inc16(state: Z80Registers, bus: Bus, op: Inc16) -> None:
    write16(state, bus, op.loc, read16(state, bus, op.loc) + 1)


def execute_dec16(state: Z80Registers, bus: Bus, op: Dec16) -> None:
    write16(state, bus, op.loc, read16(state, bus, op.loc) - 1)


def execute_add16(state: Z80Registers, bus: Bus, op: Add16) -> None:
    base_val = read16(state, bus, op.dst)
    val = read16(state, bus, op.src)
    result = base_val + val
    update_flags_add16(state, base_val, val, result)
    write16(state, bus, op.dst, result)


def execute_cpl(state: Z80Registers, bus: Bus, op: Cpl) -> None:
    state.a = ~state.a & 0xFF
    state.flag_h = True
    state.flag_n = True


def execute_neg(state: Z80Registers, bus: Bus, op: Neg) -> None:
    a = state.a
    result = 0 - a
    update_flags_sub8(state, 0, a, result)
    state.a = result & 0xFF


def execute_ccf(state: Z80Registers, bus: Bus, op: Ccf) -> None:
    state.flag_h = state.flag_c
    state.flag_c = not state.flag_c
    state.flag_n = False


def execute_scf(state: Z80Registers, bus: Bus, op: Scf) -> None:
    state.flag_c = True
    state.flag_h = False
    state.flag_n = False


def execute_daa(state: Z80Registers, bus: Bus, op: Daa) -> None:
    decimal_adjust(state)


def execute_rlca(state: Z80Registers, bus: Bus, op: Rlca) -> None:
    rotate_accumulator(state, RLC)


def execute_rla(state: Z80Registers, bus: Bus, op: Rla) -> None:
    rotate_accumulator(state, RL)


def execute_rrca(state: Z80Registers, bus: Bus, op: Rrca) -> None:
    rotate_accumulator(state, RRC)


def execute_rra(state: Z80Registers, bus: Bus, op: Rra) -> None:
    rotate_accumulator(state, RR)
