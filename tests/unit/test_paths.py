"""Unit tests for filesystem predicates and executable lookup."""

import os
from pathlib import Path

from pycontext_mcp.context.paths import PathTools


class TestFileExists:
    """Tests for PathTools.file_exists()."""

    def test_existing_file(self, tmp_path: Path):
        target = tmp_path / "requirements.txt"
        target.write_text("requests\n")
        assert PathTools().file_exists(target) is True

    def test_missing_file(self, tmp_path: Path):
        assert PathTools().file_exists(tmp_path / "missing.txt") is False

    def test_directory_is_not_a_file(self, tmp_path: Path):
        assert PathTools().file_exists(tmp_path) is False

    def test_accepts_strings(self, tmp_path: Path):
        target = tmp_path / "setup.py"
        target.touch()
        assert PathTools().file_exists(str(target)) is True


class TestDirectoryExists:
    """Tests for PathTools.directory_exists()."""

    def test_existing_directory(self, tmp_path: Path):
        assert PathTools().directory_exists(tmp_path) is True

    def test_file_is_not_a_directory(self, tmp_path: Path):
        target = tmp_path / ".venv"
        target.write_text("not a directory")
        assert PathTools().directory_exists(target) is False

    def test_missing_directory(self, tmp_path: Path):
        assert PathTools().directory_exists(tmp_path / "nope") is False


class TestParentOf:
    """Tests for PathTools.parent_of()."""

    def test_parent_of_nested_path(self, tmp_path: Path):
        assert PathTools().parent_of(tmp_path / "a") == tmp_path

    def test_parent_of_root_is_root(self):
        root = Path(os.path.abspath(os.sep))
        assert PathTools().parent_of(root) == root


class TestJoinPath:
    """Tests for PathTools.join_path()."""

    def test_join_segments(self, tmp_path: Path):
        joined = PathTools().join_path(tmp_path, ".venv", "bin", "python")
        assert joined == tmp_path / ".venv" / "bin" / "python"

    def test_join_keeps_parent_references(self, tmp_path: Path):
        joined = PathTools().join_path(tmp_path, "..", "venv")
        assert ".." in joined.parts

    def test_join_does_not_double_separators_at_root(self):
        root = os.path.abspath(os.sep)
        joined = PathTools().join_path(root, ".venv")
        assert str(joined) == root.rstrip(os.sep) + os.sep + ".venv"


class TestWhich:
    """Tests for PathTools.which()."""

    def test_which_finds_executable_on_search_path(self, fake_bin):
        fake_bin.add("black")
        found = PathTools(search_path=fake_bin.search_path).which("black")
        assert found == fake_bin.path / "black"

    def test_which_returns_none_when_missing(self, fake_bin):
        assert PathTools(search_path=fake_bin.search_path).which("pylint") is None

    def test_which_ignores_non_executable_files(self, fake_bin):
        (fake_bin.path / "mypy").write_text("")
        (fake_bin.path / "mypy").chmod(0o644)
        assert PathTools(search_path=fake_bin.search_path).which("mypy") is None

    def test_which_empty_command(self, fake_bin):
        assert PathTools(search_path=fake_bin.search_path).which("") is None
