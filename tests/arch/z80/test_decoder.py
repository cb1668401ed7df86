# tests/arch/z80/test_decoder.py
"""
Z80命令デコーダの単体テスト。
バイト列が正しい構造化命令と命令長に変換されることを検証します。
"""
import pytest

from z80_monitor.arch.z80.cpu import Z80
from z80_monitor.arch.z80.instructions import decode_opcode
from z80_monitor.arch.z80.instructions.maps import EXECUTE_MAP
from z80_monitor.arch.z80.ops import (
    ALL_OPS, Condition, DecodedInstruction, Reg8, Reg16,
    Direct8, Indirect8, Immediate8, Absolute8, Direct16, Immediate16, Absolute16,
    Nop, Halt, Ld8, Ld16, Add8, Adc, Sub8, Sbc, And, Xor, Or, Cp, Inc, Dec, Inc16, Dec16, Add16,
    Push, Pop, Jr, Djnz, Jp, Call, Ret, In, Out, Rlc, Srl, Bit, Set, Res, Neg, Rld, Rlca, Daa,
)
from z80_monitor.transport.bus import Bus, RAM

A = Direct8(Reg8.A)
B = Direct8(Reg8.B)
HL_MEM = Indirect8(Reg16.HL)


def decode(*code):
    z80 = Z80()
    z80.load(bytes(code))
    return z80.parse_opcode(0x0000)


# @intent:test_suite 各命令グループのデコード結果を検証します。

class TestLoadDecoding:
    @pytest.mark.parametrize("code, expected", [
        ((0x3E, 0x12), DecodedInstruction(Ld8(A, Immediate8(0x12)), 2)),
        ((0x78,), DecodedInstruction(Ld8(A, B), 1)),
        ((0x7E,), DecodedInstruction(Ld8(A, HL_MEM), 1)),
        ((0x36, 0x34), DecodedInstruction(Ld8(HL_MEM, Immediate8(0x34)), 2)),
        ((0x12,), DecodedInstruction(Ld8(Indirect8(Reg16.DE), A), 1)),
        ((0x32, 0x00, 0x80), DecodedInstruction(Ld8(Absolute8(0x8000), A), 3)),
        ((0x21, 0x34, 0x12), DecodedInstruction(Ld16(Direct16(Reg16.HL), Immediate16(0x1234)), 3)),
        ((0x22, 0x00, 0x80), DecodedInstruction(Ld16(Absolute16(0x8000), Direct16(Reg16.HL)), 3)),
        ((0xF9,), DecodedInstruction(Ld16(Direct16(Reg16.SP), Direct16(Reg16.HL)), 1)),
        ((0xC5,), DecodedInstruction(Push(Direct16(Reg16.BC)), 1)),
        ((0xF1,), DecodedInstruction(Pop(Direct16(Reg16.AF)), 1)),
    ])
    def test_load_group(self, code, expected):
        assert decode(*code) == expected


class TestAluDecoding:
    @pytest.mark.parametrize("code, expected", [
        ((0x80,), Add8(A, B)),
        ((0x8E,), Adc(A, HL_MEM)),
        ((0x96,), Sub8(A, HL_MEM)),
        ((0x9F,), Sbc(A, A)),
        ((0xA1,), And(Direct8(Reg8.C))),
        ((0xAF,), Xor(A)),
        ((0xB2,), Or(Direct8(Reg8.D))),
        ((0xBB,), Cp(Direct8(Reg8.E))),
        ((0x04,), Inc(B)),
        ((0x35,), Dec(HL_MEM)),
        ((0x23,), Inc16(Direct16(Reg16.HL))),
        ((0x0B,), Dec16(Direct16(Reg16.BC))),
        ((0x39,), Add16(Direct16(Reg16.HL), Direct16(Reg16.SP))),
        ((0x07,), Rlca()),
        ((0x27,), Daa()),
    ])
    def test_register_forms(self, code, expected):
        assert decode(*code) == DecodedInstruction(expected, 1)

    def test_immediate_form(self):
        assert decode(0xFE, 0x00) == DecodedInstruction(Cp(Immediate8(0x00)), 2)
        assert decode(0xC6, 0x30) == DecodedInstruction(Add8(A, Immediate8(0x30)), 2)


class TestControlDecoding:
    @pytest.mark.parametrize("code, expected", [
        ((0x00,), DecodedInstruction(Nop(), 1)),
        ((0x76,), DecodedInstruction(Halt(), 1)),
        ((0x18, 0xF6), DecodedInstruction(Jr(None, -10), 2)),
        ((0x28, 0x05), DecodedInstruction(Jr(Condition.Z, 5), 2)),
        ((0x10, 0xF9), DecodedInstruction(Djnz(-7), 2)),
        ((0xC3, 0x00, 0x10), DecodedInstruction(Jp(None, Immediate16(0x1000)), 3)),
        ((0xCA, 0x00, 0x10), DecodedInstruction(Jp(Condition.Z, Immediate16(0x1000)), 3)),
        ((0xE9,), DecodedInstruction(Jp(None, Direct16(Reg16.HL)), 1)),
        ((0xCD, 0x0D, 0x00), DecodedInstruction(Call(None, 0x000D), 3)),
        ((0xC4, 0x00, 0x20), DecodedInstruction(Call(Condition.NZ, 0x2000), 3)),
        ((0xC9,), DecodedInstruction(Ret(None), 1)),
        ((0xC8,), DecodedInstruction(Ret(Condition.Z), 1)),
        ((0xD3, 0x00), DecodedInstruction(Out(Immediate8(0x00), A), 2)),
        ((0xDB, 0x10), DecodedInstruction(In(Immediate8(0x10), A), 2)),
    ])
    def test_control_group(self, code, expected):
        assert decode(*code) == expected

    @pytest.mark.parametrize("code, expected", [
        ((0xCB, 0x00), Rlc(B)),
        ((0xCB, 0x3F), Srl(A)),
        ((0xCB, 0x47), Bit(0, A)),
        ((0xCB, 0xF8), Set(7, B)),
        ((0xCB, 0x86), Res(0, HL_MEM)),
        ((0xED, 0x44), Neg()),
        ((0xED, 0x6F), Rld()),
        ((0xED, 0x78), In(Direct8(Reg8.C), A)),
        ((0xED, 0x41), Out(Direct8(Reg8.C), B)),
    ])
    def test_prefixed(self, code, expected):
        assert decode(*code) == DecodedInstruction(expected, 2)

    def test_ed_absolute_word_loads(self):
        assert decode(0xED, 0x43, 0x00, 0x90) == DecodedInstruction(
            Ld16(Absolute16(0x9000), Direct16(Reg16.BC)), 4)
        assert decode(0xED, 0x7B, 0x00, 0x90) == DecodedInstruction(
            Ld16(Direct16(Reg16.SP), Absolute16(0x9000)), 4)

    # @intent:test_case_unsupported 未対応の命令はNoneになることを検証します。
    @pytest.mark.parametrize("code", [
        (0x08,), (0xD9,), (0xDD, 0x21, 0x00, 0x00), (0xFD, 0x21, 0x00, 0x00),
        (0xF3,), (0xFB,), (0xC7,), (0xCB, 0x30), (0xED, 0x00),
    ])
    def test_unsupported(self, code):
        assert decode(*code) is None


class TestDecoderProperties:
    # @intent:test_case_total デコードできる全ての命令に実行関数が存在することを検証します。
    def test_every_decoded_op_is_executable(self):
        for first in range(0x100):
            for second in (0x00, 0x47, 0x6F, 0xFF):
                bus = Bus()
                ram = RAM(0x10000)
                bus.register_device(0x0000, 0xFFFF, ram)
                ram.load(0, bytes([first, second, 0x00, 0x00]))
                decoded = decode_opcode(bus, 0)
                if decoded is not None:
                    assert type(decoded.op) in EXECUTE_MAP
                    assert type(decoded.op) in ALL_OPS

    def test_truncated_instruction_at_end_of_memory(self):
        z80 = Z80(memory_size=2)
        z80.load(b"\x00\x21")
        assert z80.parse_opcode(1) is None

    def test_parse_opcode_does_not_mutate(self):
        z80 = Z80()
        z80.load(b"\x3E\x12")
        before = (z80.registers, z80.memory)
        z80.parse_opcode(0)
        assert (z80.registers, z80.memory) == before


class TestAssemblyText:
    @pytest.mark.parametrize("op, text", [
        (Nop(), "NOP"),
        (Ld8(A, Immediate8(0x12)), "LD A,$12"),
        (Ld8(A, HL_MEM), "LD A,(HL)"),
        (Ld16(Absolute16(0x8000), Direct16(Reg16.HL)), "LD ($8000),HL"),
        (Jr(Condition.Z, 5), "JR Z,+5"),
        (Djnz(-7), "DJNZ -7"),
        (Out(Immediate8(0x00), A), "OUT ($00),A"),
        (In(Direct8(Reg8.C), B), "IN B,(C)"),
        (Bit(7, HL_MEM), "BIT 7,(HL)"),
        (Call(None, 0x000D), "CALL $000D"),
        (Ret(Condition.NC), "RET NC"),
    ])
    def test_str(self, op, text):
        assert str(op) == text
