"""
File access for luaguard.

The mutation orchestrator only needs something with ``read`` and
``write``; :class:`LocalFileAccess` is the filesystem implementation used
by the CLI. Paths are confined to a project root and reads are size
limited.
"""

from collections.abc import Generator, Iterable
from pathlib import Path
from typing import Optional, Protocol

from .exceptions import FileAccessError, SecurityError

# Default maximum file size in bytes (10MB)
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Directories never descended into when collecting scripts
SKIPPED_DIRECTORIES = {".git", ".luaguard", "node_modules", "Packages", "DevPackages"}


class FileAccess(Protocol):
    """The file collaborator the orchestrator writes through.

    ``read`` raises ``FileNotFoundError`` for a missing file. Any other
    failure of ``read`` or ``write`` raises ``OSError`` or a
    ``LuaguardError``.
    """

    def read(self, path: str) -> str: ...

    def write(self, path: str, content: str) -> None: ...


class LocalFileAccess:
    """Reads and writes files under a project root.

    Args:
        root: Directory every path must resolve inside of
        max_file_size_bytes: Largest file ``read`` accepts, in bytes
        encoding: Text encoding
    """

    def __init__(
        self,
        root: Path,
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE,
        encoding: str = "utf-8",
    ):
        self.root = Path(root).resolve()
        self.max_file_size_bytes = max_file_size_bytes
        self.encoding = encoding

    def resolve(self, path: str) -> Path:
        """
        Resolve ``path`` against the root.

        Raises:
            SecurityError: If the resolved path (symlinks followed) leaves the root
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        try:
            resolved = candidate.resolve()
        except (OSError, RuntimeError) as e:
            raise FileAccessError(candidate, f"Cannot resolve path: {e}")

        try:
            resolved.relative_to(self.root)
        except ValueError:
            raise SecurityError(
                "Path traversal detected: path is outside root directory",
                filepath=resolved,
            )
        return resolved

    def read(self, path: str) -> str:
        """
        Read a file as text.

        Raises:
            FileNotFoundError: If the file does not exist
            FileAccessError: If the file is too large, undecodable or unreadable
            SecurityError: If the path leaves the root
        """
        filepath = self.resolve(path)
        if not filepath.exists():
            raise FileNotFoundError(str(filepath))

        try:
            size = filepath.stat().st_size
        except OSError as e:
            raise FileAccessError(filepath, f"Cannot stat file: {e}")
        if size > self.max_file_size_bytes:
            size_mb = size / (1024 * 1024)
            limit_mb = self.max_file_size_bytes / (1024 * 1024)
            raise FileAccessError(
                filepath, f"File size ({size_mb:.2f}MB) exceeds limit ({limit_mb:.2f}MB)"
            )

        try:
            with open(filepath, encoding=self.encoding, newline="") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise FileAccessError(filepath, f"Encoding error: {e}")
        except OSError as e:
            raise FileAccessError(filepath, f"OS error: {e}")

    def write(self, path: str, content: str) -> None:
        """
        Write text to a file, creating parent directories.

        Raises:
            FileAccessError: If the file cannot be written
            SecurityError: If the path leaves the root
        """
        filepath = self.resolve(path)
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            with open(filepath, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
        except OSError as e:
            raise FileAccessError(filepath, f"Write failed: {e}")


def iter_scripts(
    root_dir: Path,
    extensions: Iterable[str],
    follow_symlinks: bool = False,
) -> Generator[Path, None, None]:
    """
    Yield files under ``root_dir`` whose suffix is in ``extensions``, sorted.

    Raises:
        FileAccessError: If the directory cannot be listed
    """
    suffixes = tuple(ext.lower() for ext in extensions)
    try:
        for path in sorted(Path(root_dir).rglob("*")):
            if any(part in SKIPPED_DIRECTORIES for part in path.relative_to(root_dir).parts):
                continue
            if path.is_symlink() and not follow_symlinks:
                continue
            if path.is_dir():
                continue
            if path.name.lower().endswith(suffixes):
                yield path
    except OSError as e:
        raise FileAccessError(Path(root_dir), f"Directory scan failed: {e}")


def expand_paths(paths: Iterable[Path], extensions: Iterable[str]) -> list:
    """Expand directories to the scripts they contain; keep files as given."""
    extensions = tuple(extensions)
    result: list = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            result.extend(iter_scripts(path, extensions))
        else:
            result.append(path)
    return result


def read_text_file(filepath: Path, max_file_size: Optional[int] = None) -> str:
    """Read a file outside any project root (used for CLI inputs)."""
    filepath = Path(filepath)
    try:
        if max_file_size is not None and filepath.stat().st_size > max_file_size:
            raise FileAccessError(filepath, "File exceeds size limit")
        return filepath.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise FileAccessError(filepath, f"Encoding error: {e}")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")
