# z80_monitor/ui/commands.py
"""
ビューモデルを変更する唯一の経路であるコマンドの定義。
"""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Step:
    pass


@dataclass(frozen=True)
class Run:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class ShowMemory:
    show: bool


@dataclass(frozen=True)
class LoadProgram:
    binary: bytes


Command = Union[Step, Run, Reset, ShowMemory, LoadProgram]
