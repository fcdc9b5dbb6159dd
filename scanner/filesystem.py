"""Read-only file system access used by the resolver and builder."""

from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Union


PathLike = Union[str, Path]


class FileSystem(Protocol):
    """The only file operations bundling needs: existence checks and reads."""

    def exists(self, path: Path) -> bool:
        ...

    def read_text(self, path: Path) -> str:
        ...


class LocalFileSystem:
    """The real file system, read as UTF-8."""

    def exists(self, path: Path) -> bool:
        """Return True if ``path`` is an existing regular file."""
        try:
            return Path(path).is_file()
        except OSError:
            return False

    def read_text(self, path: Path) -> str:
        """
        Read a source file.

        A leading byte-order mark is dropped so it does not end up in the
        middle of the bundle.

        Raises:
            OSError: If the file cannot be opened.
            UnicodeDecodeError: If the file is not valid UTF-8.
        """
        return Path(path).read_text(encoding="utf-8-sig")


class MemoryFileSystem:
    """
    An in-memory file system keyed by path.

    Useful for tests and for bundling sources that never touched disk.
    """

    def __init__(self, files: Optional[Mapping[PathLike, str]] = None):
        self._files: Dict[Path, str] = {}
        for path, content in (files or {}).items():
            self.add(path, content)

    def add(self, path: PathLike, content: str) -> None:
        """Add or replace a file."""
        self._files[Path(path)] = content

    def exists(self, path: Path) -> bool:
        return Path(path) in self._files

    def read_text(self, path: Path) -> str:
        try:
            return self._files[Path(path)]
        except KeyError:
            raise FileNotFoundError(f"No such file: '{path}'") from None
