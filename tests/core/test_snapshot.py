# tests/core/test_snapshot.py
"""
z80_monitor.core.snapshotモジュールの単体テスト。
"""
import dataclasses

import pytest

from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.core.snapshot import MachineSnapshot


class TestMachineSnapshot:
    # @intent:test_case_immutable スナップショットが不変であることを検証します。
    def test_is_frozen(self):
        snap = MachineSnapshot(registers=Z80Registers(), memory=b"\x00", output=b"")
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.memory = b"\x01"

    def test_copies_registers_and_buffers(self):
        regs = Z80Registers(a=0x01)
        memory = bytearray(b"\x00\x01")
        snap = MachineSnapshot(registers=regs, memory=memory, output=bytearray(b"x"))
        regs.a = 0x02
        memory[0] = 0xFF
        assert snap.registers.a == 0x01
        assert snap.memory == b"\x00\x01"
        assert isinstance(snap.output, bytes)

    def test_read8_bounds(self):
        snap = MachineSnapshot(registers=Z80Registers(), memory=b"\x10\x20", output=b"")
        assert snap.read8(1) == 0x20
        with pytest.raises(IndexError, match="out of bounds"):
            snap.read8(2)
