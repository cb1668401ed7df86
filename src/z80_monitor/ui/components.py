# z80_monitor/ui/components.py
"""
表示コンポーネント。

レジスタ、リテラル、命令などを描画するステートレスな関数群と、
サンプルプログラムを選択する ProgramSelect を提供します。
どれも渡された値以外の状態を保持しません。
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from z80_monitor.arch.z80.ops import Op, Reg8, Reg16
from z80_monitor.arch.z80.state import Z80Registers
from z80_monitor.core.resolver import ResolvedLocation
from z80_monitor.loader.programs import ProgramRegistry

from .commands import ShowMemory
from .component import Component
from .vdom import Node, fragment, h

logger = logging.getLogger(__name__)

PLACEHOLDER = "Load a program"
NO_INSTRUCTION = "No instruction found"

_REGISTER_PAIRS = (
    (Reg16.AF, Reg8.A, Reg8.F),
    (Reg16.BC, Reg8.B, Reg8.C),
    (Reg16.DE, Reg8.D, Reg8.E),
    (Reg16.HL, Reg8.H, Reg8.L),
)


# --- Leaf components ---

def register8(label: str, value: int) -> Node:
    return h("div", h("strong", text=f"{label}:"), h("code", text=f"{value & 0xFF:02x}"), class_="register-8")


def register16(label: str, value: int) -> Node:
    return h("div", h("strong", text=f"{label}:"), h("code", text=f"{value & 0xFFFF:04x}"), class_="register-16")


def literal8(value: int) -> Node:
    return h("code", text=f"{value & 0xFF:02x}")


def literal16(value: int) -> Node:
    return h("code", text=f"{value & 0xFFFF:04x}")


def opcode_view(op: Optional[Op]) -> Node:
    return h("div", text=str(op) if op is not None else NO_INSTRUCTION, class_="opcode")


def _cell(node: Node, colspan: int = 1) -> Node:
    return h("td", node, colspan=colspan if colspan > 1 else None)


# @intent:responsibility レジスタペアを16ビット行と8ビット行の組で並べ、最後にPCとSPを表示します。
def registers_table(registers: Z80Registers) -> Node:
    rows = []
    for pair, high, low in _REGISTER_PAIRS:
        rows.append(h("tr", _cell(register16(pair.value, registers.get_reg16(pair)), colspan=2)))
        rows.append(h("tr",
                      _cell(register8(high.value, registers.get_reg8(high))),
                      _cell(register8(low.value, registers.get_reg8(low)))))
    rows.append(h("tr", _cell(register16("PC", registers.pc), colspan=2)))
    rows.append(h("tr", _cell(register16("SP", registers.sp), colspan=2)))
    return h("table", *rows)


# @intent:responsibility 解決済みロケーションを表示します。
# @intent:rationale 間接参照では、1行目にポインタ、2行目に参照先のバイトを表示します。
def location_view(resolved: ResolvedLocation) -> Node:
    if resolved.pointer is not None:
        pointer = (register16(resolved.label, resolved.pointer)
                   if resolved.label is not None else literal16(resolved.pointer))
        return fragment(pointer, h("br"), literal8(resolved.value))

    if resolved.label is not None:
        if resolved.width == 16:
            return fragment(register16(resolved.label, resolved.value))
        return fragment(register8(resolved.label, resolved.value))

    if resolved.width == 16:
        return fragment(literal16(resolved.value))
    return fragment(literal8(resolved.value))


def operand_error(message: str) -> Node:
    return h("div", text=message, class_="operand-error")


# @intent:utility_function メモリをダンプ文字列にします。10バイトごとに広い間隔、20バイトごとに改行します。
def format_memory(memory: bytes) -> str:
    parts = []
    for index, byte in enumerate(memory):
        parts.append(f"{byte:02x}")
        position = index + 1
        if position % 20 == 0:
            parts.append("\n")
        elif position % 10 == 0:
            parts.append("   ")
        else:
            parts.append(" ")
    return "".join(parts)


def memory_view(memory: bytes) -> Node:
    return h("pre", text=format_memory(memory), class_="memory-dump")


def memory_ui(show_memory: bool, memory: bytes) -> Node:
    if show_memory:
        return fragment(button("Hide Memory", ShowMemory(False)), memory_view(memory))
    return fragment(button("Show Memory", ShowMemory(True)))


def output_view(text: str) -> Node:
    return h("textarea", text=text, disabled=True)


# ボタンの message 属性がクリック時にホストへ送られます
def button(label: str, message) -> Node:
    return h("button", text=label, message=message)


# --- Program selector ---

@dataclass
class ProgramSelectProps:
    registry: ProgramRegistry
    disabled: bool = False
    on_change: Optional[Callable[[bytes], None]] = None


# @intent:responsibility サンプルプログラムの一覧を表示し、選択されたプログラムの機械語を上位へ通知します。
class ProgramSelect(Component):
    """
    メッセージはレジストリ上の位置 (Optional[int]) です。
    先頭のプレースホルダが選ばれた場合は None になり、何も通知しません。
    """
    props: ProgramSelectProps

    def handle_message(self, msg: Optional[int]) -> bool:
        program = self.props.registry.get(msg)
        if program is None or self.props.on_change is None:
            return False
        logger.debug("Program selected: %s (%d bytes)", program.name, len(program.binary))
        self.props.on_change(program.binary)
        return True

    def _on_select(self, selected_index: int) -> None:
        # 先頭はプレースホルダなので、レジストリ上の位置は1つずれます
        self.link(selected_index - 1 if selected_index > 0 else None)

    def render(self) -> Node:
        options = (PLACEHOLDER,) + tuple(self.props.registry.names())
        return h("select",
                 options=options,
                 disabled=self.props.disabled,
                 on_change=self._on_select,
                 class_="program-select")
