"""Tests for the local file collaborator and script discovery."""

import pytest

from luaguard.exceptions import FileAccessError, SecurityError
from luaguard.file_ops import LocalFileAccess, expand_paths, iter_scripts, read_text_file


class TestLocalFileAccess:
    def test_read_write_relative(self, tmp_path):
        files = LocalFileAccess(tmp_path)
        files.write("src/Main.lua", "print(1)")
        assert (tmp_path / "src" / "Main.lua").read_text(encoding="utf-8") == "print(1)"
        assert files.read("src/Main.lua") == "print(1)"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalFileAccess(tmp_path).read("nope.lua")

    def test_traversal_rejected(self, tmp_path):
        root = tmp_path / "project"
        root.mkdir()
        files = LocalFileAccess(root)
        with pytest.raises(SecurityError):
            files.write("../outside.lua", "x")
        with pytest.raises(SecurityError):
            files.read(str(tmp_path / "elsewhere.lua"))
        assert not (tmp_path / "outside.lua").exists()

    def test_symlink_escape_rejected(self, tmp_path):
        root = tmp_path / "project"
        root.mkdir()
        outside = tmp_path / "secret.lua"
        outside.write_text("x", encoding="utf-8")
        (root / "link.lua").symlink_to(outside)
        with pytest.raises(SecurityError):
            LocalFileAccess(root).read("link.lua")

    def test_size_limit(self, tmp_path):
        (tmp_path / "big.lua").write_text("x" * 100, encoding="utf-8")
        with pytest.raises(FileAccessError, match="exceeds limit"):
            LocalFileAccess(tmp_path, max_file_size_bytes=10).read("big.lua")

    def test_undecodable_file(self, tmp_path):
        (tmp_path / "bin.lua").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(FileAccessError, match="Encoding error"):
            LocalFileAccess(tmp_path).read("bin.lua")

    def test_line_endings_preserved(self, tmp_path):
        files = LocalFileAccess(tmp_path)
        files.write("a.lua", "a\r\nb")
        assert (tmp_path / "a.lua").read_bytes() == b"a\r\nb"


class TestScriptDiscovery:
    def test_iter_scripts(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "b.luau").write_text("", encoding="utf-8")
        (tmp_path / "a.lua").write_text("", encoding="utf-8")
        (tmp_path / "readme.md").write_text("", encoding="utf-8")
        (tmp_path / ".luaguard").mkdir()
        (tmp_path / ".luaguard" / "c.lua").write_text("", encoding="utf-8")

        found = [p.relative_to(tmp_path).as_posix() for p in iter_scripts(tmp_path, (".lua", ".luau"))]
        assert found == ["a.lua", "src/b.luau"]

    def test_expand_paths_keeps_explicit_files(self, tmp_path):
        note = tmp_path / "note.txt"
        note.write_text("", encoding="utf-8")
        assert expand_paths([note], (".lua",)) == [note]

    def test_read_text_file_missing(self, tmp_path):
        with pytest.raises(FileAccessError):
            read_text_file(tmp_path / "missing.lua")
