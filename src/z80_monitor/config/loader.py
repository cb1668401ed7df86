import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import MonitorConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    def load_from_file(self, path: str) -> MonitorConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        config = self._parse_config(data or {}, base_dir=Path(path).parent)
        logger.debug("Loaded configuration from %s: %s", path, config)
        return config

    def _parse_config(self, data: Dict[str, Any], base_dir: Optional[Path] = None) -> MonitorConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        defaults = MonitorConfig()
        memory_size = self._parse_int(data.get("memory_size", defaults.memory_size))
        load_address = self._parse_int(data.get("load_address", defaults.load_address))
        output_port = self._parse_int(data.get("output_port", defaults.output_port))
        run_step_budget = self._parse_int(data.get("run_step_budget", defaults.run_step_budget))

        if not 0 < memory_size <= 0x10000:
            raise ValueError(f"memory_size {memory_size:#x} must be between 1 and 0x10000")
        if not 0 <= load_address < memory_size:
            raise ValueError(f"load_address {load_address:#06x} is outside memory of size {memory_size:#x}")
        if not 0 <= output_port <= 0xFF:
            raise ValueError(f"output_port {output_port} is not an 8-bit port number")
        if run_step_budget <= 0:
            raise ValueError(f"run_step_budget must be positive, got {run_step_budget}")

        # 相対パスは設定ファイルの位置を基準に解決します
        programs = data.get("programs")
        if programs is not None:
            programs_path = Path(str(programs))
            if base_dir is not None and not programs_path.is_absolute():
                programs_path = base_dir / programs_path
            programs = str(programs_path)

        return MonitorConfig(
            memory_size=memory_size,
            load_address=load_address,
            output_port=output_port,
            run_step_budget=run_step_budget,
            programs=programs,
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
