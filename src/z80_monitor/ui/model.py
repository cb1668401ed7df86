# z80_monitor/ui/model.py
"""
ビューモデル。

マシンラッパーとUI専用のフラグを保持し、コマンドを受けて状態を更新する
reduce() と、状態から描画ツリー全体を導出する render_view() を提供します。
状態の書き手は reduce() だけです。
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from z80_monitor.arch.z80.cpu import EngineError
from z80_monitor.config.models import MonitorConfig
from z80_monitor.core.errors import OperandGapError
from z80_monitor.core.location import Location
from z80_monitor.core.machine import Machine
from z80_monitor.core.operands import OperandLocations, decode_operands
from z80_monitor.core.resolver import resolve_location
from z80_monitor.core.snapshot import MachineSnapshot
from z80_monitor.loader.programs import ProgramRegistry, load_registry

from .commands import Command, LoadProgram, Reset, Run, ShowMemory, Step
from .component import Component, Link
from .components import (
    ProgramSelect, ProgramSelectProps,
    button, location_view, memory_ui, opcode_view, operand_error, output_view, registers_table,
)
from .vdom import EMPTY, Node, h

logger = logging.getLogger(__name__)


# @intent:data_structure UI専用のフラグ。reduce() だけが新しい値を作ります。
@dataclass(frozen=True)
class UIState:
    show_memory: bool = False
    loaded: bool = False
    status: Optional[str] = None  # 直近のエンジンエラーやRunの打ち切り通知


@dataclass(frozen=True)
class ViewState:
    machine: Machine
    ui: UIState = field(default_factory=UIState)

    @classmethod
    def initial(cls, config: Optional[MonitorConfig] = None) -> "ViewState":
        return cls(Machine(config))


def _with_status(state: ViewState, status: Optional[str], **flags) -> ViewState:
    return replace(state, ui=replace(state.ui, status=status, **flags))


def _engine_failure(state: ViewState, command: Command, error: EngineError) -> ViewState:
    logger.error("%s failed: %s", type(command).__name__, error)
    return _with_status(state, str(error))


# @intent:responsibility コマンドを適用して次の状態を返します。
# @intent:rationale エンジンのエラーは解釈せず status に格納して表示します。
def reduce(state: ViewState, command: Command) -> ViewState:
    logger.debug("Applying %r", command)

    if isinstance(command, ShowMemory):
        return replace(state, ui=replace(state.ui, show_memory=command.show))

    if isinstance(command, Reset):
        # show_memory 以外は電源投入時に戻します
        return ViewState(state.machine.reset(), UIState(show_memory=state.ui.show_memory))

    if isinstance(command, LoadProgram):
        if state.ui.loaded:
            logger.warning("Ignoring program load: a program is already loaded, reset first")
            return state
        try:
            state.machine.load(command.binary)
        except EngineError as e:
            return _engine_failure(state, command, e)
        return _with_status(state, None, loaded=True)

    if isinstance(command, Step):
        try:
            state.machine.step()
        except EngineError as e:
            return _engine_failure(state, command, e)
        return _with_status(state, None)

    if isinstance(command, Run):
        try:
            result = state.machine.run()
        except EngineError as e:
            return _engine_failure(state, command, e)
        if result.halted:
            return _with_status(state, None)
        message = f"Run stopped after {result.steps} steps without reaching HALT"
        logger.warning("%s", message)
        return _with_status(state, message)

    raise TypeError(f"Unknown command: {command!r}")


def _operand_panel(node_id: str, location: Optional[Location], snapshot: MachineSnapshot) -> Node:
    if location is None:
        return h("div", id=node_id)
    try:
        resolved = resolve_location(location, snapshot)
    except OperandGapError as e:
        logger.error("Cannot display %s operand: %s", node_id, e)
        return h("div", operand_error(str(e)), id=node_id)
    return h("div", location_view(resolved), id=node_id)


# @intent:responsibility 現在の状態から描画ツリー全体を導出します。状態は変更しません。
def render_view(state: ViewState, registry: ProgramRegistry, link: Link) -> Node:
    machine = state.machine
    snapshot = machine.snapshot()
    decoded = machine.instruction()

    gap: Optional[str] = None
    operands = OperandLocations(None, None)
    if decoded is not None:
        try:
            operands = decode_operands(decoded)
        except OperandGapError as e:
            logger.error("Cannot decode operands of %s: %s", decoded.op, e)
            gap = str(e)

    if gap is not None:
        destination = h("div", operand_error(gap), id="destination")
        source = h("div", operand_error(gap), id="source")
    else:
        destination = _operand_panel("destination", operands.destination, snapshot)
        source = _operand_panel("source", operands.source, snapshot)

    selector = ProgramSelect(ProgramSelectProps(
        registry=registry,
        disabled=state.ui.loaded,
        on_change=lambda binary: link(LoadProgram(binary)),
    ))

    status = h("div", text=state.ui.status, id="status") if state.ui.status else EMPTY

    return h("content",
             h("div",
               h("div", output_view(machine.output()), id="output"),
               h("div", opcode_view(decoded.op if decoded is not None else None), id="opcode"),
               destination,
               source,
               status,
               h("div", registers_table(snapshot.registers), id="registers"),
               id="monitor"),
             h("div",
               button("Step", Step()),
               button("Run", Run()),
               button("Reset", Reset()),
               selector.render(),
               id="buttons"),
             h("div", memory_ui(state.ui.show_memory, snapshot.memory), id="memory"))


# @intent:responsibility ホストのライフサイクルに reduce() と render_view() を接続する最上位コンポーネント。
class Model(Component):
    def __init__(self, props: Optional[MonitorConfig] = None, link: Optional[Link] = None,
                 registry: Optional[ProgramRegistry] = None):
        super().__init__(props or MonitorConfig(), link)
        self.registry = registry if registry is not None else load_registry(self.props.programs)
        self.state = ViewState.initial(self.props)

    # @intent:rationale 実行中のマシンは作り直さず、新しい設定は次の Reset から有効になります。
    def props_changed(self, props: MonitorConfig) -> bool:
        self.props = props
        return False

    def handle_message(self, msg: Command) -> bool:
        self.state = reduce(self.state, msg)
        if isinstance(msg, Reset) and self.state.machine.config is not self.props:
            logger.info("Applying new configuration on reset")
            self.state = replace(self.state, machine=Machine(self.props))
        return True

    def render(self) -> Node:
        return render_view(self.state, self.registry, self.link)
