# tests/loader/test_programs.py
"""
z80_monitor.loader.programsモジュールの単体テスト。
"""
import pytest

from z80_monitor.loader.programs import ExampleProgram, ProgramRegistry, load_registry


class TestBundledRegistry:
    @pytest.fixture
    def registry(self):
        return load_registry()

    def test_order_and_names(self, registry):
        assert registry.names() == ["Hello World", "Countdown", "Fibonacci", "Stack Shuffle"]
        assert len(registry) == 4

    def test_first_program_bytes(self, registry):
        assert registry[0].binary.startswith(b"\x21\x0E\x00")
        assert registry[0].binary.endswith(b"Hello, World!\n\x00")

    def test_get_out_of_range(self, registry):
        assert registry.get(None) is None
        assert registry.get(-1) is None
        assert registry.get(len(registry)) is None
        assert registry.get(1).name == "Countdown"


class TestLoadRegistry:
    def test_custom_file(self, tmp_path):
        path = tmp_path / "programs.yaml"
        path.write_text("programs:\n  - name: Tiny\n    hex: '3E 01 76'\n", encoding="utf-8")
        registry = load_registry(path)
        assert list(registry) == [ExampleProgram("Tiny", b"\x3E\x01\x76")]

    def test_missing_list(self, tmp_path):
        path = tmp_path / "programs.yaml"
        path.write_text("something: else\n", encoding="utf-8")
        with pytest.raises(ValueError, match="'programs' list"):
            load_registry(path)

    def test_missing_fields(self, tmp_path):
        path = tmp_path / "programs.yaml"
        path.write_text("programs:\n  - name: NoHex\n", encoding="utf-8")
        with pytest.raises(ValueError, match="must have 'name' and 'hex'"):
            load_registry(path)

    def test_invalid_hex(self, tmp_path):
        path = tmp_path / "programs.yaml"
        path.write_text("programs:\n  - name: Bad\n    hex: 'ZZ'\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Program 'Bad' has invalid hex data"):
            load_registry(path)

    def test_registry_from_sequence(self):
        registry = ProgramRegistry([ExampleProgram("x", b"\x00")])
        assert registry.names() == ["x"]
