# tests/core/test_resolver.py
"""
z80_monitor.core.resolverモジュールの単体テスト。
"""
import pytest

from z80_monitor.arch.z80.ops import Reg8, Reg16
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.core.errors import IndirectResolutionError, OperandGapError, UnmappedAddressError
from z80_monitor.core.location import (
    PROGRAM_COUNTER,
    Reg8Location, Reg8IndirectLocation, Immediate8Location, Immediate8IndirectLocation,
    Reg16Location, Reg16IndirectLocation, Immediate16Location,
)
from z80_monitor.core.resolver import ResolvedLocation, resolve_location
from z80_monitor.core.snapshot import MachineSnapshot


@pytest.fixture
def snapshot():
    regs = Z80Registers(a=0x12, b=0x34, h=0x00, l=0x10, pc=0x0042, sp=0x0200)
    memory = bytearray(0x10000)
    memory[0x0010] = 0xAB
    memory[0x8000] = 0xCD
    return MachineSnapshot(registers=regs, memory=bytes(memory), output=b"")


class TestResolveLocation:
    # @intent:test_case_reg8 Reg8はメモリの内容に関係なくレジスタ値を返すことを検証します。
    def test_reg8_independent_of_memory(self, snapshot):
        other = MachineSnapshot(registers=snapshot.registers, memory=b"\xFF" * 0x10000, output=b"")
        expected = ResolvedLocation("A", 0x12, 8)
        assert resolve_location(Reg8Location(Reg8.A), snapshot) == expected
        assert resolve_location(Reg8Location(Reg8.A), other) == expected

    def test_reg8_indirect_reads_one_byte(self, snapshot):
        resolved = resolve_location(Reg8IndirectLocation(Reg16.HL), snapshot)
        assert resolved == ResolvedLocation("HL", 0xAB, 8, pointer=0x0010)

    def test_immediates_are_literals(self, snapshot):
        assert resolve_location(Immediate8Location(0x7F), snapshot) == ResolvedLocation(None, 0x7F, 8)
        assert resolve_location(Immediate16Location(0x1234), snapshot) == ResolvedLocation(None, 0x1234, 16)

    def test_immediate8_indirect_reads_memory(self, snapshot):
        resolved = resolve_location(Immediate8IndirectLocation(0x8000), snapshot)
        assert resolved == ResolvedLocation(None, 0xCD, 8, pointer=0x8000)

    def test_reg16_and_program_counter(self, snapshot):
        assert resolve_location(Reg16Location(Reg16.SP), snapshot) == ResolvedLocation("SP", 0x0200, 16)
        assert resolve_location(PROGRAM_COUNTER, snapshot) == ResolvedLocation("PC", 0x0042, 16)

    # @intent:test_case_gap 16ビット間接読み出しは切り詰めずに明示的に失敗することを検証します。
    def test_reg16_indirect_fails(self, snapshot):
        with pytest.raises(IndirectResolutionError, match=r"\(SP\)") as excinfo:
            resolve_location(Reg16IndirectLocation(Reg16.SP), snapshot)
        assert isinstance(excinfo.value, OperandGapError)

    def test_does_not_mutate_snapshot(self, snapshot):
        before = (snapshot.registers, snapshot.memory)
        resolve_location(Reg8IndirectLocation(Reg16.HL), snapshot)
        assert (snapshot.registers, snapshot.memory) == before

    def test_rejects_non_location(self, snapshot):
        with pytest.raises(TypeError):
            resolve_location("A", snapshot)

    # @intent:test_case_unmapped メモリ範囲外を指す間接ロケーションは、アドレスを示す型付きエラーになることを検証します。
    @pytest.mark.parametrize("location", [
        Reg8IndirectLocation(Reg16.HL),
        Immediate8IndirectLocation(0x8000),
    ])
    def test_pointer_outside_memory(self, location):
        small = MachineSnapshot(registers=Z80Registers(h=0x80, l=0x00), memory=bytes(0x100), output=b"")
        with pytest.raises(UnmappedAddressError, match="0x8000") as excinfo:
            resolve_location(location, small)
        assert isinstance(excinfo.value, OperandGapError)

    def test_last_byte_is_readable(self):
        memory = bytes(0xFF) + b"\x5A"
        small = MachineSnapshot(registers=Z80Registers(h=0x00, l=0xFF), memory=memory, output=b"")
        assert resolve_location(Reg8IndirectLocation(Reg16.HL), small).value == 0x5A
