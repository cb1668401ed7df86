# tests/arch/z80/test_state.py
"""
z80_monitor.arch.z80.stateモジュールの単体テスト。
"""
from z80_monitor.arch.z80.ops import Reg8, Reg16
from z80_monitor.arch.z80.state import Z80Registers, Z_FLAG, C_FLAG


class TestZ80Registers:
    def test_defaults_are_zero(self):
        regs = Z80Registers()
        assert (regs.a, regs.f, regs.bc, regs.de, regs.hl, regs.sp, regs.pc) == (0, 0, 0, 0, 0, 0, 0)
        assert regs.halted is False

    # @intent:test_case_pair 16ビットペアの読み書きが上位/下位レジスタに反映されることを検証します。
    def test_register_pairs(self):
        regs = Z80Registers()
        regs.hl = 0x1234
        assert (regs.h, regs.l) == (0x12, 0x34)
        regs.b, regs.c = 0xAB, 0xCD
        assert regs.bc == 0xABCD

    def test_flags_map_to_f(self):
        regs = Z80Registers()
        regs.flag_z = True
        regs.flag_c = True
        assert regs.f == Z_FLAG | C_FLAG
        regs.flag_z = False
        assert regs.f == C_FLAG
        assert regs.af == C_FLAG

    def test_enum_accessors(self):
        regs = Z80Registers()
        regs.set_reg8(Reg8.A, 0x1FF)
        assert regs.get_reg8(Reg8.A) == 0xFF
        regs.set_reg16(Reg16.SP, 0x12345)
        assert regs.get_reg16(Reg16.SP) == 0x2345
        regs.set_reg16(Reg16.DE, 0xBEEF)
        assert regs.get_reg8(Reg8.D) == 0xBE
