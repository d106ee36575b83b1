"""Unit tests for interpreter resolution."""

from pathlib import Path

from pycontext_mcp.context.interpreter import InterpreterResolver
from pycontext_mcp.context.paths import PathTools


class TestResolveFromVenv:
    """Tests for InterpreterResolver.resolve_from_venv()."""

    def test_posix_interpreter(self, tmp_path: Path, make_executable):
        venv = tmp_path / ".venv"
        python = make_executable(venv / "bin" / "python")

        assert InterpreterResolver().resolve_from_venv(venv) == python

    def test_windows_interpreter(self, tmp_path: Path, make_executable):
        venv = tmp_path / ".venv"
        python = make_executable(venv / "Scripts" / "python.exe")

        assert InterpreterResolver().resolve_from_venv(venv) == python

    def test_posix_preferred_when_both_exist(self, tmp_path: Path, make_executable):
        venv = tmp_path / "venv"
        posix = make_executable(venv / "bin" / "python")
        make_executable(venv / "Scripts" / "python.exe")

        assert InterpreterResolver().resolve_from_venv(venv) == posix

    def test_missing_interpreter_returns_none(self, tmp_path: Path):
        venv = tmp_path / ".venv"
        (venv / "bin").mkdir(parents=True)

        assert InterpreterResolver().resolve_from_venv(venv) is None

    def test_missing_interpreter_permissive_fallback(self, tmp_path: Path):
        venv = tmp_path / ".venv"
        venv.mkdir()

        result = InterpreterResolver().resolve_from_venv(venv, require_exists=False)
        assert result == venv / "bin" / "python"
        assert not result.exists()


class TestResolveSystemInterpreter:
    """Tests for InterpreterResolver.resolve_system_interpreter()."""

    def _resolver(self, fake_bin) -> InterpreterResolver:
        return InterpreterResolver(PathTools(search_path=fake_bin.search_path))

    def test_preferred_command_wins(self, fake_bin):
        fake_bin.add("python3.12", "python3", "python")
        result = self._resolver(fake_bin).resolve_system_interpreter("python3.12")
        assert result == fake_bin.path / "python3.12"

    def test_falls_back_to_python3(self, fake_bin):
        fake_bin.add("python3", "python")
        result = self._resolver(fake_bin).resolve_system_interpreter("python3.12")
        assert result == fake_bin.path / "python3"

    def test_falls_back_to_python(self, fake_bin):
        fake_bin.add("python", "py")
        result = self._resolver(fake_bin).resolve_system_interpreter("python3")
        assert result == fake_bin.path / "python"

    def test_falls_back_to_py(self, fake_bin):
        fake_bin.add("py")
        result = self._resolver(fake_bin).resolve_system_interpreter("python3")
        assert result == fake_bin.path / "py"

    def test_none_when_nothing_resolves(self, fake_bin):
        assert self._resolver(fake_bin).resolve_system_interpreter("python3") is None

    def test_preferred_python3_is_idempotent(self, fake_bin):
        fake_bin.add("python3", "python")
        resolver = self._resolver(fake_bin)

        first = resolver.resolve_system_interpreter("python3")
        second = resolver.resolve_system_interpreter("python3")

        assert first == fake_bin.path / "python3"
        assert first == second

    def test_empty_preference_uses_fallback_chain(self, fake_bin):
        fake_bin.add("python")
        assert self._resolver(fake_bin).resolve_system_interpreter(None) == (
            fake_bin.path / "python"
        )

    def test_duplicate_candidates_are_looked_up_once(self):
        class CountingPaths(PathTools):
            def __init__(self) -> None:
                super().__init__(search_path="")
                self.lookups: list[str] = []

            def which(self, command: str) -> Path | None:
                self.lookups.append(command)
                return None

        paths = CountingPaths()
        InterpreterResolver(paths).resolve_system_interpreter("python3")
        assert paths.lookups == ["python3", "python", "py"]
