# z80_monitor/loader/programs.py
"""
サンプルプログラムのレジストリ。

YAMLファイルに列挙された (名前, 機械語) の組を順序付きで保持し、
位置で参照できるようにします。
"""
import logging
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Sequence, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PATH = Path(__file__).with_name("programs.yaml")


class ExampleProgram(NamedTuple):
    name: str
    binary: bytes


# @intent:responsibility サンプルプログラムの順序付きリストを提供します。
class ProgramRegistry:
    def __init__(self, programs: Sequence[ExampleProgram]):
        self._programs: List[ExampleProgram] = list(programs)

    # @intent:rationale 範囲外の位置（プレースホルダを含む）は例外ではなくNoneとして扱います。
    def get(self, index: Optional[int]) -> Optional[ExampleProgram]:
        if index is None or not 0 <= index < len(self._programs):
            return None
        return self._programs[index]

    def __getitem__(self, index: int) -> ExampleProgram:
        return self._programs[index]

    def __len__(self) -> int:
        return len(self._programs)

    def __iter__(self) -> Iterator[ExampleProgram]:
        return iter(self._programs)

    def names(self) -> List[str]:
        return [program.name for program in self._programs]


def _parse_hex(name: str, text: str) -> bytes:
    try:
        return bytes.fromhex(str(text))
    except ValueError as e:
        raise ValueError(f"Program '{name}' has invalid hex data: {e}") from e


# @intent:responsibility YAMLファイルからレジストリを読み込みます。パス省略時は同梱のファイルを使います。
def load_registry(path: Optional[Union[str, Path]] = None) -> ProgramRegistry:
    path = Path(path) if path is not None else DEFAULT_REGISTRY_PATH
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("programs") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValueError(f"{path}: expected a 'programs' list")

    programs = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) or "name" not in entry or "hex" not in entry:
            raise ValueError(f"{path}: program #{position} must have 'name' and 'hex'")
        name = str(entry["name"])
        programs.append(ExampleProgram(name, _parse_hex(name, entry["hex"])))

    logger.debug("Loaded %d example programs from %s", len(programs), path)
    return ProgramRegistry(programs)
