from dataclasses import dataclass
from typing import Optional


@dataclass
class MonitorConfig:
    memory_size: int = 0x10000
    load_address: int = 0x0000
    output_port: int = 0x00  # OUT命令の出力をキャプチャするポート
    run_step_budget: int = 1_000_000  # Run 1回あたりの最大実行命令数
    programs: Optional[str] = None  # サンプルプログラム一覧のYAML。Noneなら同梱のもの
