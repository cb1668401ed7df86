# z80_monitor/core/operands.py
"""
オペランド・ロケーションのデコード表。

デコード済みの命令から、その命令が書き込む場所 (destination) と
読み出す場所 (source) を求める純粋関数を提供します。
レジスタやメモリの値は参照せず、命令の形だけから決まります。
"""
from typing import Callable, Dict, NamedTuple, Optional, Union

from z80_monitor.arch.z80 import ops
from z80_monitor.arch.z80.ops import DecodedInstruction, Op, Reg8, Reg16
from z80_monitor.core.errors import UnmodeledOperandError
from z80_monitor.core.location import (
    PROGRAM_COUNTER, Location,
    Reg8Location, Reg8IndirectLocation, Immediate8Location, Immediate8IndirectLocation,
    Reg16Location, Reg16IndirectLocation, Immediate16Location,
)


# @intent:data_structure 1命令ぶんの (書き込み先, 読み出し元)。どちらもNoneになり得ます。
class OperandLocations(NamedTuple):
    destination: Optional[Location]
    source: Optional[Location]


ACCUMULATOR = Reg8Location(Reg8.A)
REG_B = Reg8Location(Reg8.B)
HL_INDIRECT = Reg8IndirectLocation(Reg16.HL)
STACK_TOP = Reg16IndirectLocation(Reg16.SP)

NO_OPERANDS = OperandLocations(None, None)


# @intent:utility_function エンジンの8ビットオペランドをLocationに変換します。
def location8(operand: ops.Location8) -> Location:
    if isinstance(operand, ops.Direct8):
        return Reg8Location(operand.reg)
    if isinstance(operand, ops.Indirect8):
        return Reg8IndirectLocation(operand.reg)
    if isinstance(operand, ops.Immediate8):
        return Immediate8Location(operand.value)
    if isinstance(operand, ops.Absolute8):
        return Immediate8IndirectLocation(operand.address)
    raise UnmodeledOperandError(f"No 8-bit location for operand {operand!r}")


# @intent:utility_function エンジンの16ビットオペランドをLocationに変換します。
# @intent:rationale 16ビット即値間接 (nn) は表示側で扱わないため、明示的に失敗させます。
def location16(operand: ops.Location16) -> Location:
    if isinstance(operand, ops.Direct16):
        return Reg16Location(operand.reg)
    if isinstance(operand, ops.Indirect16):
        return Reg16IndirectLocation(operand.reg)
    if isinstance(operand, ops.Immediate16):
        return Immediate16Location(operand.value)
    raise UnmodeledOperandError(f"16-bit immediate-indirect operand {operand} is not modeled")


def _binary8(op) -> OperandLocations:
    return OperandLocations(location8(op.dst), location8(op.src))


def _binary16(op) -> OperandLocations:
    return OperandLocations(location16(op.dst), location16(op.src))


def _in_place8(op) -> OperandLocations:
    loc = location8(op.loc)
    return OperandLocations(loc, loc)


def _in_place16(op) -> OperandLocations:
    loc = location16(op.loc)
    return OperandLocations(loc, loc)


def _accumulator(op) -> OperandLocations:
    return OperandLocations(ACCUMULATOR, location8(op.src))


def _flags_only(op) -> OperandLocations:
    return OperandLocations(None, location8(op.src if hasattr(op, "src") else op.loc))


def _write_only(op) -> OperandLocations:
    return OperandLocations(location8(op.loc), None)


def _on_accumulator(op) -> OperandLocations:
    return OperandLocations(ACCUMULATOR, ACCUMULATOR)


def _nothing(op) -> OperandLocations:
    return NO_OPERANDS


# 条件の有無によってロケーションの組は変わりません
_RULES: Dict[type, Callable[[Op], OperandLocations]] = {
    ops.Ld8: _binary8,
    ops.Add8: _binary8,
    ops.Adc: _binary8,
    ops.Sub8: _binary8,
    ops.Sbc: _binary8,
    ops.Ld16: _binary16,
    ops.Add16: _binary16,
    **{t: _in_place8 for t in (ops.Inc, ops.Dec, ops.Rlc, ops.Rl, ops.Rrc, ops.Rr, ops.Sla, ops.Sra, ops.Srl)},
    ops.Inc16: _in_place16,
    ops.Dec16: _in_place16,
    ops.And: _accumulator,
    ops.Or: _accumulator,
    ops.Xor: _accumulator,
    ops.Cp: _flags_only,
    ops.Bit: _flags_only,
    ops.Set: _write_only,
    ops.Res: _write_only,
    **{t: _on_accumulator for t in (ops.Cpl, ops.Neg, ops.Rlca, ops.Rla, ops.Rrca, ops.Rra)},
    ops.Rld: lambda op: OperandLocations(ACCUMULATOR, HL_INDIRECT),
    ops.Rrd: lambda op: OperandLocations(ACCUMULATOR, HL_INDIRECT),
    ops.In: lambda op: OperandLocations(location8(op.dst), None),
    ops.Out: lambda op: OperandLocations(None, location8(op.src)),
    ops.Jp: lambda op: OperandLocations(PROGRAM_COUNTER, location16(op.target)),
    ops.Jr: lambda op: OperandLocations(PROGRAM_COUNTER, Immediate8Location(op.offset & 0xFF)),
    ops.Call: lambda op: OperandLocations(PROGRAM_COUNTER, Immediate16Location(op.address)),
    ops.Ret: lambda op: OperandLocations(PROGRAM_COUNTER, STACK_TOP),
    ops.Djnz: lambda op: OperandLocations(REG_B, REG_B),
    ops.Push: lambda op: OperandLocations(STACK_TOP, location16(op.loc)),
    ops.Pop: lambda op: OperandLocations(location16(op.loc), STACK_TOP),
    **{t: _nothing for t in (ops.Nop, ops.Halt, ops.Daa, ops.Ccf, ops.Scf)},
}


def _concrete_ops(base: type = Op):
    for sub in base.__subclasses__():
        if not sub.__name__.startswith("_"):
            yield sub
        yield from _concrete_ops(sub)


# @intent:invariant 全ての具象Op型に規則が存在すること。インポート時に検証します。
def _check_exhaustive() -> None:
    known = set(_concrete_ops()) | set(ops.ALL_OPS)
    missing = sorted(t.__name__ for t in known if t not in _RULES)
    if missing:
        raise ImportError(f"Operand decode table has no rule for: {', '.join(missing)}")


_check_exhaustive()


# @intent:responsibility 命令が書き込む場所と読み出す場所を返します。
# @intent:pre-condition 16ビット即値間接オペランドを含む命令では UnmodeledOperandError を送出します。
def decode_operands(instruction: Union[Op, DecodedInstruction]) -> OperandLocations:
    """
    命令の形だけから (destination, source) を決定します。

    エンジンの状態は参照しません。即値は値のまま Immediate ロケーションとして運ばれます。
    """
    op = instruction.op if isinstance(instruction, DecodedInstruction) else instruction
    rule = _RULES.get(type(op))
    if rule is None:
        raise UnmodeledOperandError(f"No operand rule for {type(op).__name__}")
    return rule(op)
