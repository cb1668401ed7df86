# z80_monitor/core/location.py
"""
オペランドの「場所」を表す閉じたタグ付き共用体。

値ではなく、オペランドがどこに存在するか（レジスタ、メモリ、命令中の即値）を表します。
全ての型は不変で、デコードのたびに新しく生成されます。
"""
from dataclasses import dataclass
from typing import Union, get_args

from z80_monitor.arch.z80.ops import Reg8, Reg16


@dataclass(frozen=True)
class Reg8Location:
    reg: Reg8


@dataclass(frozen=True)
class Reg8IndirectLocation:
    """16ビットレジスタが指すメモリの1バイト。"""
    reg: Reg16


@dataclass(frozen=True)
class Immediate8Location:
    value: int


@dataclass(frozen=True)
class Immediate8IndirectLocation:
    """命令に埋め込まれたアドレスのメモリの1バイト。"""
    address: int


@dataclass(frozen=True)
class Reg16Location:
    reg: Reg16


@dataclass(frozen=True)
class Reg16IndirectLocation:
    """16ビットレジスタが指すメモリのワード。表示側では解決できません。"""
    reg: Reg16


@dataclass(frozen=True)
class Immediate16Location:
    value: int


@dataclass(frozen=True)
class ProgramCounterLocation:
    pass


PROGRAM_COUNTER = ProgramCounterLocation()

Location = Union[
    Reg8Location,
    Reg8IndirectLocation,
    Immediate8Location,
    Immediate8IndirectLocation,
    Reg16Location,
    Reg16IndirectLocation,
    Immediate16Location,
    ProgramCounterLocation,
]

# @intent:constant isinstance による網羅チェック用。
LOCATION_TYPES = get_args(Location)
