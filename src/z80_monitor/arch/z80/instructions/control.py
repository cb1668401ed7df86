"""
Z80 制御命令（分岐、ビット操作、I/O、システム制御）の実装。

CB/ED プレフィックス命令のデコードもここで扱います。
未対応の命令（IX/IY、EX/EXX、割り込み関連など）に対しては None を返します。
"""
from typing import Optional

from z80_monitor.arch.z80.ops import (
    DecodedInstruction, Direct8, Direct16, Immediate8, Immediate16, Absolute16, Reg8, Reg16,
    Nop, Halt, Jp, Jr, Djnz, Call, Ret, In, Out, Neg, Rld, Rrd, Ld16,
    Rlc, Rrc, Rl, Rr, Sla, Sra, Srl, Bit, Set, Res,
)
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.arch.z80.alu import (
    RLC, RRC, RL, RR, SLA, SRA, SRL,
    calculate_parity, rotate_shift8, update_flags_logic8,
)
from z80_monitor.transport.bus import Bus
from .base import (
    ACCUMULATOR, CONDITION_CODES, SS_CODES,
    condition_met, fetch8, fetch16, register_operand, signed8,
    read8, write8, read16, write16, push16, pop16,
)

# CBプレフィックス 0x00-0x3F のローテート/シフト (0x30-0x37 の SLL は未対応)
_CB_SHIFTS = {0: Rlc, 1: Rrc, 2: Rl, 3: Rr, 4: Sla, 5: Sra, 7: Srl}
_CB_BITS = {1: Bit, 2: Res, 3: Set}

_SHIFT_KINDS = {Rlc: RLC, Rrc: RRC, Rl: RL, Rr: RR, Sla: SLA, Sra: SRA, Srl: SRL}

# --- Decoding Functions ---

def decode_nop(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    return DecodedInstruction(Nop(), 1)


def decode_halt(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    return DecodedInstruction(Halt(), 1)


# @intent:responsibility DJNZ e をデコードします。
def decode_djnz(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    return DecodedInstruction(Djnz(signed8(fetch8(bus, pc + 1))), 2)


# @intent:responsibility JR e / JR cc,e をデコードします。cc は NZ/Z/NC/C のみです。
def decode_jr(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    cond = None if opcode == 0x18 else CONDITION_CODES[(opcode >> 3) & 0b11]
    return DecodedInstruction(Jr(cond, signed8(fetch8(bus, pc + 1))), 2)


# @intent:responsibility JP nn / JP cc,nn をデコードします。
def decode_jp(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    cond = None if opcode == 0xC3 else CONDITION_CODES[(opcode >> 3) & 0b111]
    return DecodedInstruction(Jp(cond, Immediate16(fetch16(bus, pc + 1))), 3)


def decode_jp_hl(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """JP (HL)。ジャンプ先はHLの値そのものです。"""
    return DecodedInstruction(Jp(None, Direct16(Reg16.HL)), 1)


# @intent:responsibility CALL nn / CALL cc,nn をデコードします。
def decode_call(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    cond = None if opcode == 0xCD else CONDITION_CODES[(opcode >> 3) & 0b111]
    return DecodedInstruction(Call(cond, fetch16(bus, pc + 1)), 3)


# @intent:responsibility RET / RET cc をデコードします。
def decode_ret(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    cond = None if opcode == 0xC9 else CONDITION_CODES[(opcode >> 3) & 0b111]
    return DecodedInstruction(Ret(cond), 1)


def decode_out_n_a(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """OUT (n),A"""
    return DecodedInstruction(Out(Immediate8(fetch8(bus, pc + 1)), ACCUMULATOR), 2)


def decode_in_a_n(opcode: int, bus: Bus, pc: int) -> DecodedInstruction:
    """IN A,(n)"""
    return DecodedInstruction(In(Immediate8(fetch8(bus, pc + 1)), ACCUMULATOR), 2)


# @intent:responsibility CBプレフィックス命令（ローテート/シフト、BIT/RES/SET）をデコードします。
def decode_cb(opcode: int, bus: Bus, pc: int) -> Optional[DecodedInstruction]:
    sub = fetch8(bus, pc + 1)
    loc = register_operand(sub)
    group = sub >> 6
    if group == 0:
        op_type = _CB_SHIFTS.get((sub >> 3) & 0b111)
        if op_type is None:
            return None
        return DecodedInstruction(op_type(loc), 2)
    return DecodedInstruction(_CB_BITS[group]((sub >> 3) & 0b111, loc), 2)


# @intent:responsibility EDプレフィックス命令のうち対応しているものをデコードします。
def decode_ed(opcode: int, bus: Bus, pc: int) -> Optional[DecodedInstruction]:
    sub = fetch8(bus, pc + 1)
    if sub == 0x44:
        return DecodedInstruction(Neg(), 2)
    if sub == 0x67:
        return DecodedInstruction(Rrd(), 2)
    if sub == 0x6F:
        return DecodedInstruction(Rld(), 2)
    if 0x40 <= sub <= 0x7F:
        code = (sub >> 3) & 0b111
        low = sub & 0x0F
        if (sub & 0b111) == 0 and code != 0b110:
            return DecodedInstruction(In(Direct8(Reg8.C), register_operand(code)), 2)
        if (sub & 0b111) == 1 and code != 0b110:
            return DecodedInstruction(Out(Direct8(Reg8.C), register_operand(code)), 2)
        pair = Direct16(SS_CODES[(sub >> 4) & 0b11])
        if low == 0x03:
            return DecodedInstruction(Ld16(Absolute16(fetch16(bus, pc + 2)), pair), 4)
        if low == 0x0B:
            return DecodedInstruction(Ld16(pair, Absolute16(fetch16(bus, pc + 2))), 4)
    return None


# --- Execution Functions ---

def execute_nop(state: Z80Registers, bus: Bus, op: Nop) -> None:
    pass


def execute_halt(state: Z80Registers, bus: Bus, op: Halt) -> None:
    state.halted = True


# 相対ジャンプは、PCが命令長だけ進んだ後の値を基準にします
def execute_jr(state: Z80Registers, bus: Bus, op: Jr) -> None:
    if condition_met(state, op.cond):
        state.pc = (state.pc + op.offset) & 0xFFFF


def execute_djnz(state: Z80Registers, bus: Bus, op: Djnz) -> None:
    state.b = (state.b - 1) & 0xFF
    if state.b != 0:
        state.pc = (state.pc + op.offset) & 0xFFFF


def execute_jp(state: Z80Registers, bus: Bus, op: Jp) -> None:
    if condition_met(state, op.cond):
        state.pc = read16(state, bus, op.target)


def execute_call(state: Z80Registers, bus: Bus, op: Call) -> None:
    if condition_met(state, op.cond):
        push16(state, bus, state.pc)
        state.pc = op.address


def execute_ret(state: Z80Registers, bus: Bus, op: Ret) -> None:
    if condition_met(state, op.cond):
        state.pc = pop16(state, bus)


# @intent:responsibility IN命令を実行します。IN r,(C) 形式ではフラグも更新します。
def execute_in(state: Z80Registers, bus: Bus, op: In) -> None:
    port = read8(state, bus, op.port)
    value = bus.read_io(port)
    write8(state, bus, op.dst, value)
    if isinstance(op.port, Direct8):
        carry = state.flag_c
        update_flags_logic8(state, value)
        state.flag_c = carry


def execute_out(state: Z80Registers, bus: Bus, op: Out) -> None:
    bus.write_io(read8(state, bus, op.port), read8(state, bus, op.src))


def execute_rotate_shift(state: Z80Registers, bus: Bus, op) -> None:
    """RLC/RRC/RL/RR/SLA/SRA/SRL を実行します。"""
    val = read8(state, bus, op.loc)
    write8(state, bus, op.loc, rotate_shift8(state, val, _SHIFT_KINDS[type(op)]))


def execute_bit(state: Z80Registers, bus: Bus, op: Bit) -> None:
    is_zero = (read8(state, bus, op.loc) & (1 << op.bit)) == 0
    state.flag_z = is_zero
    state.flag_pv = is_zero
    state.flag_s = op.bit == 7 and not is_zero
    state.flag_h = True
    state.flag_n = False


def execute_set(state: Z80Registers, bus: Bus, op: Set) -> None:
    write8(state, bus, op.loc, read8(state, bus, op.loc) | (1 << op.bit))


def execute_res(state: Z80Registers, bus: Bus, op: Res) -> None:
    write8(state, bus, op.loc, read8(state, bus, op.loc) & ~(1 << op.bit))


def _update_flags_digit_rotate(state: Z80Registers) -> None:
    state.flag_s = (state.a & 0x80) != 0
    state.flag_z = state.a == 0
    state.flag_h = False
    state.flag_pv = calculate_parity(state.a)
    state.flag_n = False


# @intent:responsibility RLD: Aの下位4ビットと(HL)の4ビットを左方向に循環させます。
def execute_rld(state: Z80Registers, bus: Bus, op: Rld) -> None:
    address = state.hl
    mem = bus.read(address)
    bus.write(address, ((mem << 4) | (state.a & 0x0F)) & 0xFF)
    state.a = (state.a & 0xF0) | (mem >> 4)
    _update_flags_digit_rotate(state)


# @intent:responsibility RRD: Aの下位4ビットと(HL)の4ビットを右方向に循環させます。
def execute_rrd(state: Z80Registers, bus: Bus, op: Rrd) -> None:
    address = state.hl
    mem = bus.read(address)
    bus.write(address, ((state.a & 0x0F) << 4) | (mem >> 4))
    state.a = (state.a & 0xF0) | (mem & 0x0F)
    _update_flags_digit_rotate(state)
