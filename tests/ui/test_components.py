# tests/ui/test_components.py
"""
z80_monitor.ui.componentsモジュールの単体テスト。
表示コンポーネントが渡された値だけから描画ツリーを作ることを検証します。
"""
import pytest

from z80_monitor.arch.z80.ops import Direct8, Immediate8, Ld8, Reg8
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.core.resolver import ResolvedLocation
from z80_monitor.loader.programs import ExampleProgram, ProgramRegistry
from z80_monitor.ui.commands import ShowMemory
from z80_monitor.ui.components import (
    ProgramSelect, ProgramSelectProps,
    format_memory, literal8, literal16, location_view, memory_ui, opcode_view,
    register8, register16, registers_table,
)


class TestLeafComponents:
    def test_register8(self):
        node = register8("A", 0x0F)
        assert node.attr("class") == "register-8"
        assert [child.tag for child in node.children] == ["strong", "code"]
        assert node.text_content() == "A:0f"

    def test_register16(self):
        assert register16("HL", 0x1234).text_content() == "HL:1234"

    def test_literals(self):
        assert literal8(0xAB).text == "ab"
        assert literal16(0x00FF).text == "00ff"

    def test_opcode_view(self):
        assert opcode_view(None).text == "No instruction found"
        assert opcode_view(Ld8(Direct8(Reg8.A), Immediate8(0x12))).text == "LD A,$12"

    # @intent:test_case_layout レジスタペアの16ビット行と8ビット行、最後にPCとSPが並ぶことを検証します。
    def test_registers_table(self):
        regs = Z80Registers(a=0x12, f=0x40, pc=0x0100, sp=0xFFFE)
        rows = registers_table(regs).children
        assert len(rows) == 10
        assert rows[0].text_content() == "AF:1240"
        assert rows[0].children[0].attr("colspan") == 2
        assert rows[1].text_content() == "A:12F:40"
        assert rows[6].text_content() == "HL:0000"
        assert rows[8].text_content() == "PC:0100"
        assert rows[9].text_content() == "SP:fffe"


class TestLocationView:
    def test_register_indirect_shows_pointer_then_byte(self):
        node = location_view(ResolvedLocation("HL", 0xAB, 8, pointer=0x0010))
        assert [child.tag for child in node.children] == ["div", "br", "code"]
        assert node.text_content() == "HL:0010ab"

    def test_immediate_indirect(self):
        node = location_view(ResolvedLocation(None, 0xCD, 8, pointer=0x8000))
        assert node.text_content() == "8000cd"

    @pytest.mark.parametrize("resolved, text", [
        (ResolvedLocation("A", 0x12, 8), "A:12"),
        (ResolvedLocation("SP", 0x0200, 16), "SP:0200"),
        (ResolvedLocation(None, 0x7F, 8), "7f"),
        (ResolvedLocation(None, 0x1234, 16), "1234"),
    ])
    def test_direct_values(self, resolved, text):
        assert location_view(resolved).text_content() == text


class TestMemory:
    # @intent:test_case_dump 10バイトごとに広い間隔、20バイトごとに改行されることを検証します。
    def test_format_memory(self):
        lines = format_memory(bytes(range(25))).split("\n")
        assert lines[0] == "00 01 02 03 04 05 06 07 08 09   0a 0b 0c 0d 0e 0f 10 11 12 13"
        assert lines[1] == "14 15 16 17 18 "

    def test_memory_ui_hidden(self):
        node = memory_ui(False, bytes(4))
        buttons = node.find_all("button")
        assert [b.text for b in buttons] == ["Show Memory"]
        assert buttons[0].attr("message") == ShowMemory(True)
        assert node.find_all("pre") == ()

    def test_memory_ui_shown(self):
        node = memory_ui(True, bytes(4))
        assert node.find_all("button")[0].text == "Hide Memory"
        assert node.find_all("button")[0].attr("message") == ShowMemory(False)
        assert node.find_all("pre")[0].text == "00 00 00 00 "


class TestProgramSelect:
    @pytest.fixture
    def registry(self):
        return ProgramRegistry([ExampleProgram("One", b"\x01"), ExampleProgram("Two", b"\x02\x02")])

    def test_render_options(self, registry):
        node = ProgramSelect(ProgramSelectProps(registry=registry)).render()
        assert node.tag == "select"
        assert node.attr("options") == ("Load a program", "One", "Two")
        assert node.attr("disabled") is False

    def test_disabled(self, registry):
        node = ProgramSelect(ProgramSelectProps(registry=registry, disabled=True)).render()
        assert node.attr("disabled") is True

    # @intent:test_case_emit 選択した位置のプログラムの機械語が通知されることを検証します。
    def test_selection_emits_binary(self, registry):
        emitted = []
        select = ProgramSelect(ProgramSelectProps(registry=registry, on_change=emitted.append))
        select.render().attr("on_change")(2)
        assert emitted == [b"\x02\x02"]

    def test_placeholder_emits_nothing(self, registry):
        emitted = []
        select = ProgramSelect(ProgramSelectProps(registry=registry, on_change=emitted.append))
        select.render().attr("on_change")(0)
        assert emitted == []

    def test_handle_message(self, registry):
        emitted = []
        select = ProgramSelect(ProgramSelectProps(registry=registry, on_change=emitted.append))
        assert select.handle_message(0) is True
        assert select.handle_message(None) is False
        assert select.handle_message(5) is False
        assert emitted == [b"\x01"]

    def test_props_changed(self, registry):
        select = ProgramSelect(ProgramSelectProps(registry=registry))
        assert select.props_changed(ProgramSelectProps(registry=registry, disabled=True)) is True
        assert select.render().attr("disabled") is True
