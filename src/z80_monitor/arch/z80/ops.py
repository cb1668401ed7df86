# z80_monitor/arch/z80/ops.py
"""
Z80 命令の構造化表現。

デコーダはメモリ上のバイト列をここで定義する Op のインスタンスに変換し、
実行器と UI はこの構造を参照します。全ての型は不変です。
"""
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, NamedTuple, Optional, Tuple, Union


# @intent:data_structure 8ビットレジスタ。値はニーモニック上の表記です。
class Reg8(Enum):
    A = "A"
    F = "F"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    H = "H"
    L = "L"


# @intent:data_structure 16ビットレジスタ（ペアおよびSP）。
class Reg16(Enum):
    AF = "AF"
    BC = "BC"
    DE = "DE"
    HL = "HL"
    SP = "SP"


# @intent:data_structure 条件付き分岐の条件コード。
class Condition(Enum):
    NZ = "NZ"
    Z = "Z"
    NC = "NC"
    C = "C"
    PO = "PO"
    PE = "PE"
    P = "P"
    M = "M"


# --- Operand locations ---

@dataclass(frozen=True)
class Direct8:
    """8ビットレジスタ r"""
    reg: Reg8

    def __str__(self) -> str:
        return self.reg.value


@dataclass(frozen=True)
class Indirect8:
    """16ビットレジスタが指すメモリの1バイト (rr)"""
    reg: Reg16

    def __str__(self) -> str:
        return f"({self.reg.value})"


@dataclass(frozen=True)
class Immediate8:
    """命令に埋め込まれた8ビット即値 n"""
    value: int

    def __str__(self) -> str:
        return f"${self.value:02X}"


@dataclass(frozen=True)
class Absolute8:
    """命令に埋め込まれたアドレスのメモリ1バイト (nn)"""
    address: int

    def __str__(self) -> str:
        return f"(${self.address:04X})"


@dataclass(frozen=True)
class Direct16:
    reg: Reg16

    def __str__(self) -> str:
        return self.reg.value


@dataclass(frozen=True)
class Indirect16:
    reg: Reg16

    def __str__(self) -> str:
        return f"({self.reg.value})"


@dataclass(frozen=True)
class Immediate16:
    value: int

    def __str__(self) -> str:
        return f"${self.value:04X}"


@dataclass(frozen=True)
class Absolute16:
    address: int

    def __str__(self) -> str:
        return f"(${self.address:04X})"


Location8 = Union[Direct8, Indirect8, Immediate8, Absolute8]
Location16 = Union[Direct16, Indirect16, Immediate16, Absolute16]


def _port(port: Location8) -> str:
    if isinstance(port, Immediate8):
        return f"(${port.value:02X})"
    return f"({port})"


def _condition(cond: Optional[Condition]) -> Tuple[str, ...]:
    return (cond.value,) if cond is not None else ()


# --- Operations ---

# @intent:responsibility 全ての命令の基底クラス。str() でアセンブリ表記を返します。
@dataclass(frozen=True)
class Op:
    MNEMONIC: ClassVar[str] = "???"

    def operands(self) -> Tuple[str, ...]:
        return ()

    def __str__(self) -> str:
        parts = self.operands()
        if not parts:
            return self.MNEMONIC
        return f"{self.MNEMONIC} {','.join(parts)}"


@dataclass(frozen=True)
class _Binary8(Op):
    dst: Location8
    src: Location8

    def operands(self) -> Tuple[str, ...]:
        return (str(self.dst), str(self.src))


class Ld8(_Binary8):
    MNEMONIC = "LD"


class Add8(_Binary8):
    MNEMONIC = "ADD"


class Adc(_Binary8):
    MNEMONIC = "ADC"


class Sub8(_Binary8):
    MNEMONIC = "SUB"


class Sbc(_Binary8):
    MNEMONIC = "SBC"


@dataclass(frozen=True)
class _Binary16(Op):
    dst: Location16
    src: Location16

    def operands(self) -> Tuple[str, ...]:
        return (str(self.dst), str(self.src))


class Ld16(_Binary16):
    MNEMONIC = "LD"


class Add16(_Binary16):
    MNEMONIC = "ADD"


@dataclass(frozen=True)
class _Unary8(Op):
    loc: Location8

    def operands(self) -> Tuple[str, ...]:
        return (str(self.loc),)


class Inc(_Unary8):
    MNEMONIC = "INC"


class Dec(_Unary8):
    MNEMONIC = "DEC"


class Rlc(_Unary8):
    MNEMONIC = "RLC"


class Rl(_Unary8):
    MNEMONIC = "RL"


class Rrc(_Unary8):
    MNEMONIC = "RRC"


class Rr(_Unary8):
    MNEMONIC = "RR"


class Sla(_Unary8):
    MNEMONIC = "SLA"


class Sra(_Unary8):
    MNEMONIC = "SRA"


class Srl(_Unary8):
    MNEMONIC = "SRL"


@dataclass(frozen=True)
class _Unary16(Op):
    loc: Location16

    def operands(self) -> Tuple[str, ...]:
        return (str(self.loc),)


class Inc16(_Unary16):
    MNEMONIC = "INC"


class Dec16(_Unary16):
    MNEMONIC = "DEC"


class Push(_Unary16):
    MNEMONIC = "PUSH"


class Pop(_Unary16):
    MNEMONIC = "POP"


# アキュムレータ暗黙の演算 (AND/OR/XOR/CP)
@dataclass(frozen=True)
class _Accumulator(Op):
    src: Location8

    def operands(self) -> Tuple[str, ...]:
        return (str(self.src),)


class And(_Accumulator):
    MNEMONIC = "AND"


class Or(_Accumulator):
    MNEMONIC = "OR"


class Xor(_Accumulator):
    MNEMONIC = "XOR"


class Cp(_Accumulator):
    MNEMONIC = "CP"


class Nop(Op):
    MNEMONIC = "NOP"


class Halt(Op):
    MNEMONIC = "HALT"


class Daa(Op):
    MNEMONIC = "DAA"


class Cpl(Op):
    MNEMONIC = "CPL"


class Neg(Op):
    MNEMONIC = "NEG"


class Ccf(Op):
    MNEMONIC = "CCF"


class Scf(Op):
    MNEMONIC = "SCF"


class Rlca(Op):
    MNEMONIC = "RLCA"


class Rla(Op):
    MNEMONIC = "RLA"


class Rrca(Op):
    MNEMONIC = "RRCA"


class Rra(Op):
    MNEMONIC = "RRA"


class Rld(Op):
    MNEMONIC = "RLD"


class Rrd(Op):
    MNEMONIC = "RRD"


@dataclass(frozen=True)
class _BitOp(Op):
    bit: int
    loc: Location8

    def operands(self) -> Tuple[str, ...]:
        return (str(self.bit), str(self.loc))


class Bit(_BitOp):
    MNEMONIC = "BIT"


class Set(_BitOp):
    MNEMONIC = "SET"


class Res(_BitOp):
    MNEMONIC = "RES"


@dataclass(frozen=True)
class In(Op):
    MNEMONIC = "IN"
    port: Location8
    dst: Location8

    def operands(self) -> Tuple[str, ...]:
        return (str(self.dst), _port(self.port))


@dataclass(frozen=True)
class Out(Op):
    MNEMONIC = "OUT"
    port: Location8
    src: Location8

    def operands(self) -> Tuple[str, ...]:
        return (_port(self.port), str(self.src))


@dataclass(frozen=True)
class Jp(Op):
    MNEMONIC = "JP"
    cond: Optional[Condition]
    target: Location16

    def operands(self) -> Tuple[str, ...]:
        return _condition(self.cond) + (str(self.target),)


@dataclass(frozen=True)
class Jr(Op):
    MNEMONIC = "JR"
    cond: Optional[Condition]
    offset: int  # 符号付き (-128..127)

    def operands(self) -> Tuple[str, ...]:
        return _condition(self.cond) + (f"{self.offset:+d}",)


@dataclass(frozen=True)
class Djnz(Op):
    MNEMONIC = "DJNZ"
    offset: int

    def operands(self) -> Tuple[str, ...]:
        return (f"{self.offset:+d}",)


@dataclass(frozen=True)
class Call(Op):
    MNEMONIC = "CALL"
    cond: Optional[Condition]
    address: int

    def operands(self) -> Tuple[str, ...]:
        return _condition(self.cond) + (f"${self.address:04X}",)


@dataclass(frozen=True)
class Ret(Op):
    MNEMONIC = "RET"
    cond: Optional[Condition]

    def operands(self) -> Tuple[str, ...]:
        return _condition(self.cond)


# @intent:constant 命令セットを構成する全ての具象Op型。網羅性チェックに使用します。
ALL_OPS: Tuple[type, ...] = (
    Ld8, Add8, Adc, Sub8, Sbc, Ld16, Add16,
    Inc, Dec, Rlc, Rl, Rrc, Rr, Sla, Sra, Srl,
    Inc16, Dec16, Push, Pop,
    And, Or, Xor, Cp,
    Nop, Halt, Daa, Cpl, Neg, Ccf, Scf, Rlca, Rla, Rrca, Rra, Rld, Rrd,
    Bit, Set, Res, In, Out,
    Jp, Jr, Djnz, Call, Ret,
)


# @intent:data_structure デコード結果。命令とその消費バイト数。
class DecodedInstruction(NamedTuple):
    op: Op
    length: int
