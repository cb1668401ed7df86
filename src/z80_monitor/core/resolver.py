# z80_monitor/core/resolver.py
"""
ロケーションの解決。

Location をスナップショットに対して評価し、表示用の値に変換します。
スナップショットは変更しません。
"""
from typing import NamedTuple, Optional

from z80_monitor.core.errors import IndirectResolutionError, UnmappedAddressError
from z80_monitor.core.location import (
    Location,
    Reg8Location, Reg8IndirectLocation, Immediate8Location, Immediate8IndirectLocation,
    Reg16Location, Reg16IndirectLocation, Immediate16Location, ProgramCounterLocation,
)
from z80_monitor.core.snapshot import MachineSnapshot


# @intent:data_structure 解決結果。間接参照の場合は pointer に参照先アドレスが入ります。
class ResolvedLocation(NamedTuple):
    label: Optional[str]   # レジスタ名。即値の場合はNone
    value: int             # 表示する値
    width: int             # 8 または 16
    pointer: Optional[int] = None


# @intent:utility_function 間接参照先の1バイトを読みます。範囲外なら UnmappedAddressError を送出します。
def _read_pointer(snapshot: MachineSnapshot, address: int) -> int:
    try:
        return snapshot.read8(address)
    except IndexError as e:
        raise UnmappedAddressError(str(e)) from e


# @intent:responsibility Locationをスナップショットに対して解決します。
# @intent:pre-condition Reg16IndirectLocation は解決できず IndirectResolutionError を送出します。
# @intent:pre-condition メモリ範囲外を指す8ビット間接ロケーションは UnmappedAddressError を送出します。
def resolve_location(location: Location, snapshot: MachineSnapshot) -> ResolvedLocation:
    regs = snapshot.registers

    if isinstance(location, Reg8Location):
        return ResolvedLocation(location.reg.value, regs.get_reg8(location.reg), 8)

    if isinstance(location, Reg8IndirectLocation):
        address = regs.get_reg16(location.reg)
        return ResolvedLocation(location.reg.value, _read_pointer(snapshot, address), 8, pointer=address)

    if isinstance(location, Immediate8Location):
        return ResolvedLocation(None, location.value & 0xFF, 8)

    if isinstance(location, Immediate8IndirectLocation):
        return ResolvedLocation(None, _read_pointer(snapshot, location.address), 8, pointer=location.address)

    if isinstance(location, Reg16Location):
        return ResolvedLocation(location.reg.value, regs.get_reg16(location.reg), 16)

    if isinstance(location, Reg16IndirectLocation):
        raise IndirectResolutionError(f"16-bit indirect read through ({location.reg.value}) is not supported")

    if isinstance(location, Immediate16Location):
        return ResolvedLocation(None, location.value & 0xFFFF, 16)

    if isinstance(location, ProgramCounterLocation):
        return ResolvedLocation("PC", regs.pc, 16)

    raise TypeError(f"Not a location: {location!r}")
