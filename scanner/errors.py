"""Exception hierarchy for scanning, resolving and bundling."""

from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple


class BundleError(Exception):
    """Base class for every error that aborts a bundling run."""


class ConfigError(BundleError):
    """Raised when the bundler configuration is missing or invalid."""


class ScanError(BundleError):
    """
    Raised when source text cannot be scanned safely.

    Carries the offset of the offending construct so the author can locate
    the malformed source. ``line`` and ``column`` are 1-based and are only
    known once the source text has been attached.
    """

    def __init__(
        self,
        reason: str,
        offset: int,
        source: Optional[str] = None,
        path: Optional[Path] = None,
    ):
        self.reason = reason
        self.offset = offset
        self.path = path
        self.line: Optional[int] = None
        self.column: Optional[int] = None
        if source is not None:
            self.line = source.count("\n", 0, offset) + 1
            self.column = offset - (source.rfind("\n", 0, offset) + 1) + 1
        super().__init__(self._format())

    def with_path(self, path: Path) -> "ScanError":
        """Return a copy of this error that names the file it came from."""
        error = ScanError(self.reason, self.offset, path=path)
        error.line, error.column = self.line, self.column
        error.args = (error._format(),)
        return error

    def _format(self) -> str:
        location = f"offset {self.offset}"
        if self.line is not None:
            location = f"line {self.line}, column {self.column} (offset {self.offset})"
        if self.path is not None:
            location = f"{self.path}: {location}"
        return f"{location}: {self.reason}"


class LoadError(BundleError):
    """Base class for failures while building the module tree."""


class SourceReadError(LoadError):
    """Raised when a module source file cannot be read or decoded."""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"cannot read {path}: {cause}")


class ModuleNotFound(LoadError):
    """Raised when no search root holds a file for a declared module."""

    def __init__(
        self,
        name: str,
        searched_roots: Sequence[Path],
        candidates: Iterable[Path] = (),
    ):
        self.name = name
        self.searched_roots: Tuple[Path, ...] = tuple(searched_roots)
        self.candidates: Tuple[Path, ...] = tuple(candidates)
        roots = ", ".join(str(root) for root in self.searched_roots) or "<none>"
        super().__init__(f"module '{name}' not found in search roots: {roots}")


class CyclicModuleReference(LoadError):
    """
    Raised when a module declaration leads back to one of its ancestors.

    ``cycle`` lists the file paths from the repeated ancestor down to the
    declaring file, ending with the ancestor again.
    """

    def __init__(self, cycle: Sequence[Path]):
        self.cycle: Tuple[Path, ...] = tuple(cycle)
        chain = " -> ".join(str(path) for path in self.cycle)
        super().__init__(f"cyclic module reference: {chain}")
