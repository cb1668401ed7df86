# z80_monitor/core/machine.py
"""
マシンラッパー。

1つのZ80エンジンと、出力ポートに接続したキャプチャデバイスを所有します。
リセットはラッパーごと作り直すことで行います。
"""
import logging
from typing import Callable, NamedTuple, Optional

from z80_monitor.arch.z80.cpu import Z80
from z80_monitor.arch.z80.ops import DecodedInstruction
from z80_monitor.config.models import MonitorConfig
from z80_monitor.core.snapshot import MachineSnapshot
from z80_monitor.transport.bus import OutputCapture

logger = logging.getLogger(__name__)


class RunResult(NamedTuple):
    steps: int
    halted: bool


# @intent:utility_function キャプチャ済みバイト列を表示用文字列にします。UTF-8として不正なら16進表記にします。
def format_output(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return "[" + ", ".join(f"{b:x}" for b in data) + "]"


# @intent:responsibility エンジンとその出力キャプチャを1つにまとめ、UIに必要な操作を提供します。
class Machine:
    def __init__(self, config: Optional[MonitorConfig] = None):
        self._config = config or MonitorConfig()
        self._z80 = Z80(memory_size=self._config.memory_size, load_address=self._config.load_address)
        self._output = OutputCapture()
        self._z80.install_output(self._config.output_port, self._output)

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def z80(self) -> Z80:
        return self._z80

    @property
    def halted(self) -> bool:
        return self._z80.halted

    # @intent:responsibility 同じ設定で新しいエンジンと出力キャプチャを持つラッパーを返します。
    def reset(self) -> "Machine":
        return Machine(self._config)

    def step(self) -> None:
        self._z80.step()

    # @intent:responsibility HALT、ステップ上限、または中断要求のいずれかまで命令を実行します。
    # @intent:rationale エンジンの無制限な run() は呼びません。中断判定は命令の合間に行います。
    def run(self, max_steps: Optional[int] = None, should_stop: Optional[Callable[[], bool]] = None) -> RunResult:
        budget = self._config.run_step_budget if max_steps is None else max_steps
        steps = 0
        while not self._z80.halted and steps < budget:
            if should_stop is not None and should_stop():
                logger.info("Run cancelled after %d steps", steps)
                break
            self._z80.step()
            steps += 1
        return RunResult(steps, self._z80.halted)

    def load(self, program: bytes) -> None:
        self._z80.load(program)

    def output_bytes(self) -> bytes:
        return self._output.result()

    def output(self) -> str:
        return format_output(self._output.result())

    # @intent:responsibility 現在のPC位置の命令を、状態を変えずにデコードします。
    def instruction(self) -> Optional[DecodedInstruction]:
        return self._z80.parse_opcode(self._z80.registers.pc)

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(
            registers=self._z80.registers,
            memory=self._z80.memory,
            output=self._output.result(),
        )
