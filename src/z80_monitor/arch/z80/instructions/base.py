"""
Z80命令セット実装のための共通ヘルパー関数と定数。
"""
from typing import Optional

from z80_monitor.arch.z80.ops import (
    Condition, Reg8, Reg16,
    Direct8, Indirect8, Immediate8, Absolute8, Location8,
    Direct16, Indirect16, Immediate16, Absolute16, Location16,
)
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.transport.bus import Bus

# オペコード中の3ビットのレジスタコード
REGISTER_CODES = {
    0b000: Direct8(Reg8.B), 0b001: Direct8(Reg8.C), 0b010: Direct8(Reg8.D), 0b011: Direct8(Reg8.E),
    0b100: Direct8(Reg8.H), 0b101: Direct8(Reg8.L), 0b110: Indirect8(Reg16.HL), 0b111: Direct8(Reg8.A),
}

# 16ビット演算で使用されるレジスタペア (ss)
SS_CODES = {0b00: Reg16.BC, 0b01: Reg16.DE, 0b10: Reg16.HL, 0b11: Reg16.SP}

# PUSH/POPで使用されるレジスタペア (qq)
QQ_CODES = {0b00: Reg16.BC, 0b01: Reg16.DE, 0b10: Reg16.HL, 0b11: Reg16.AF}

CONDITION_CODES = {
    0: Condition.NZ, 1: Condition.Z, 2: Condition.NC, 3: Condition.C,
    4: Condition.PO, 5: Condition.PE, 6: Condition.P, 7: Condition.M,
}

ACCUMULATOR = Direct8(Reg8.A)


class InvalidOperandError(ValueError):
    """オペランドの種類が操作（書き込みなど）と矛盾している場合に送出されます。"""


# @intent:utility_function 指定されたコードに対応する8ビットオペランドを返します。
def register_operand(code: int) -> Location8:
    return REGISTER_CODES[code & 0b111]


# @intent:utility_function デコード用に1バイト読み出します。16ビットで折り返します。
def fetch8(bus: Bus, address: int) -> int:
    return bus.peek(address & 0xFFFF)


# @intent:utility_function リトルエンディアンで16ビット値を読み出します。
def fetch16(bus: Bus, address: int) -> int:
    return fetch8(bus, address) | (fetch8(bus, address + 1) << 8)


def signed8(value: int) -> int:
    return value - 256 if value >= 128 else value


def read8(state: Z80Registers, bus: Bus, loc: Location8) -> int:
    if isinstance(loc, Direct8):
        return state.get_reg8(loc.reg)
    if isinstance(loc, Indirect8):
        return bus.read(state.get_reg16(loc.reg))
    if isinstance(loc, Immediate8):
        return loc.value
    if isinstance(loc, Absolute8):
        return bus.read(loc.address)
    raise InvalidOperandError(f"Not an 8-bit operand: {loc!r}")


def write8(state: Z80Registers, bus: Bus, loc: Location8, value: int) -> None:
    value &= 0xFF
    if isinstance(loc, Direct8):
        state.set_reg8(loc.reg, value)
    elif isinstance(loc, Indirect8):
        bus.write(state.get_reg16(loc.reg), value)
    elif isinstance(loc, Absolute8):
        bus.write(loc.address, value)
    else:
        raise InvalidOperandError(f"Cannot write to 8-bit operand {loc}")


def _read_word(bus: Bus, address: int) -> int:
    return bus.read(address & 0xFFFF) | (bus.read((address + 1) & 0xFFFF) << 8)


def _write_word(bus: Bus, address: int, value: int) -> None:
    bus.write(address & 0xFFFF, value & 0xFF)
    bus.write((address + 1) & 0xFFFF, (value >> 8) & 0xFF)


def read16(state: Z80Registers, bus: Bus, loc: Location16) -> int:
    if isinstance(loc, Direct16):
        return state.get_reg16(loc.reg)
    if isinstance(loc, Indirect16):
        return _read_word(bus, state.get_reg16(loc.reg))
    if isinstance(loc, Immediate16):
        return loc.value
    if isinstance(loc, Absolute16):
        return _read_word(bus, loc.address)
    raise InvalidOperandError(f"Not a 16-bit operand: {loc!r}")


def write16(state: Z80Registers, bus: Bus, loc: Location16, value: int) -> None:
    value &= 0xFFFF
    if isinstance(loc, Direct16):
        state.set_reg16(loc.reg, value)
    elif isinstance(loc, Indirect16):
        _write_word(bus, state.get_reg16(loc.reg), value)
    elif isinstance(loc, Absolute16):
        _write_word(bus, loc.address, value)
    else:
        raise InvalidOperandError(f"Cannot write to 16-bit operand {loc}")


# @intent:utility_function スタックに16ビット値を積みます (上位バイトが先)。
def push16(state: Z80Registers, bus: Bus, value: int) -> None:
    state.sp = (state.sp - 1) & 0xFFFF
    bus.write(state.sp, (value >> 8) & 0xFF)
    state.sp = (state.sp - 1) & 0xFFFF
    bus.write(state.sp, value & 0xFF)


def pop16(state: Z80Registers, bus: Bus) -> int:
    low = bus.read(state.sp)
    state.sp = (state.sp + 1) & 0xFFFF
    high = bus.read(state.sp)
    state.sp = (state.sp + 1) & 0xFFFF
    return (high << 8) | low


# @intent:utility_function 条件コードを現在のフラグで評価します。条件なし(None)は常に成立します。
def condition_met(state: Z80Registers, cond: Optional[Condition]) -> bool:
    if cond is None:
        return True
    return {
        Condition.NZ: not state.flag_z,
        Condition.Z: state.flag_z,
        Condition.NC: not state.flag_c,
        Condition.C: state.flag_c,
        Condition.PO: not state.flag_pv,
        Condition.PE: state.flag_pv,
        Condition.P: not state.flag_s,
        Condition.M: state.flag_s,
    }[cond]
