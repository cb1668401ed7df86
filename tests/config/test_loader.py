# tests/config/test_loader.py
"""
z80_monitor.config.loaderモジュールの単体テスト。
"""
import pytest

from z80_monitor.config.loader import ConfigLoader
from z80_monitor.config.models import MonitorConfig


class TestConfigLoader:
    @pytest.fixture
    def loader(self):
        return ConfigLoader()

    def test_defaults_for_empty_file(self, loader, tmp_path):
        path = tmp_path / "monitor.yaml"
        path.write_text("", encoding="utf-8")
        assert loader.load_from_file(str(path)) == MonitorConfig()

    # @intent:test_case_hex 0xで始まる文字列を16進数として解釈することを検証します。
    def test_hex_strings(self, loader, tmp_path):
        path = tmp_path / "monitor.yaml"
        path.write_text(
            "memory_size: '0x8000'\n"
            "load_address: '0x0100'\n"
            "output_port: 1\n"
            "run_step_budget: '5000'\n",
            encoding="utf-8",
        )
        config = loader.load_from_file(str(path))
        assert config.memory_size == 0x8000
        assert config.load_address == 0x0100
        assert config.output_port == 1
        assert config.run_step_budget == 5000

    def test_programs_path_relative_to_config(self, loader, tmp_path):
        path = tmp_path / "monitor.yaml"
        path.write_text("programs: extra/programs.yaml\n", encoding="utf-8")
        config = loader.load_from_file(str(path))
        assert config.programs == str(tmp_path / "extra" / "programs.yaml")

    def test_unknown_keys_are_ignored(self, loader):
        assert loader._parse_config({"architecture": "Z80"}) == MonitorConfig()

    @pytest.mark.parametrize("data, message", [
        ({"memory_size": 0}, "memory_size"),
        ({"memory_size": "0x20000"}, "memory_size"),
        ({"memory_size": 0x100, "load_address": 0x100}, "load_address"),
        ({"output_port": 0x100}, "output_port"),
        ({"run_step_budget": 0}, "run_step_budget"),
        ({"load_address": "zero"}, "invalid literal"),
        ({"load_address": [1]}, "Invalid integer format"),
        ({"output_port": True}, "Invalid integer format"),
    ])
    def test_invalid_values(self, loader, data, message):
        with pytest.raises(ValueError, match=message):
            loader._parse_config(data)

    def test_non_mapping(self, loader):
        with pytest.raises(ValueError, match="must be a mapping"):
            loader._parse_config(["memory_size"])
