"""Path resolution for mapping module names to source files."""

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

from .errors import ModuleNotFound
from .filesystem import FileSystem, LocalFileSystem


logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "rs"
DEFAULT_DIR_ENTRY = "mod"


class Resolution(NamedTuple):
    """
    Where a module's source was found.

    ``module_dir`` is the directory, relative to the search roots, that holds
    the module's own submodules. A file module (``a.rs``) may also keep them
    in a directory named after it (``a/b.rs``); that directory is
    ``nested_dir``, and is None for ``mod.rs`` modules.
    """

    path: Path
    module_dir: PurePosixPath
    root: Path
    nested_dir: Optional[PurePosixPath] = None


def unique_roots(roots: Iterable[Path]) -> Tuple[Path, ...]:
    """Drop repeated roots, keeping the first occurrence of each."""
    seen: List[Path] = []
    for root in roots:
        root = Path(root)
        if root not in seen:
            seen.append(root)
    return tuple(seen)


class ModuleResolver:
    """
    Finds module source files under an ordered list of search roots.

    For every root, in order, two layouts are tried:

    1. ``<root>/<module_dir>/<name>.rs``
    2. ``<root>/<module_dir>/<name>/mod.rs``

    When the declaring module is a file module, the same two layouts are
    then tried under its ``nested_dir`` as well. The first existing file
    wins; a module present under several roots is taken from the earliest
    one without complaint.
    """

    def __init__(
        self,
        roots: Iterable[Path],
        fs: Optional[FileSystem] = None,
        extension: str = DEFAULT_EXTENSION,
        dir_entry: str = DEFAULT_DIR_ENTRY,
    ):
        self._roots = unique_roots(roots)
        self.fs = fs if fs is not None else LocalFileSystem()
        self.extension = extension.lstrip(".")
        self.dir_entry = dir_entry

    @property
    def roots(self) -> Tuple[Path, ...]:
        """Return the search roots in precedence order."""
        return self._roots

    def iter_candidates(
        self,
        name: str,
        module_dir: PurePosixPath = PurePosixPath(),
        nested_dir: Optional[PurePosixPath] = None,
    ) -> Iterator[Resolution]:
        """Yield the Resolution each candidate would give, in search order."""
        name = _strip_raw(name)
        directories = [module_dir]
        if nested_dir is not None and nested_dir != module_dir:
            directories.append(nested_dir)
        for directory in directories:
            for root in self._roots:
                base = root.joinpath(*directory.parts)
                yield Resolution(base / f"{name}.{self.extension}", directory, root, directory / name)
                yield Resolution(base / name / f"{self.dir_entry}.{self.extension}", directory / name, root)

    def candidates(
        self,
        name: str,
        module_dir: PurePosixPath = PurePosixPath(),
        nested_dir: Optional[PurePosixPath] = None,
    ) -> List[Path]:
        """
        List every path that would be tried for ``name``.

        Args:
            name: Module name as written in the declaration.
            module_dir: Directory of the declaring module, relative to the roots.
            nested_dir: Directory named after the declaring file module, if any.

        Returns:
            Candidate paths in search order.
        """
        return [resolution.path for resolution in self.iter_candidates(name, module_dir, nested_dir)]

    def resolve(
        self,
        name: str,
        module_dir: PurePosixPath = PurePosixPath(),
        nested_dir: Optional[PurePosixPath] = None,
    ) -> Resolution:
        """
        Resolve a module name to its source file.

        Args:
            name: Module name as written in the declaration.
            module_dir: Directory of the declaring module, relative to the roots.
            nested_dir: Directory named after the declaring file module, if any.

        Returns:
            The first matching Resolution.

        Raises:
            ModuleNotFound: If no candidate exists under any root.
        """
        tried: List[Path] = []
        for resolution in self.iter_candidates(name, module_dir, nested_dir):
            tried.append(resolution.path)
            if self.fs.exists(resolution.path):
                logger.debug("Resolved module '%s' to %s", name, resolution.path)
                return resolution
        logger.debug("Module '%s' not found, tried: %s", name, ", ".join(str(p) for p in tried))
        raise ModuleNotFound(_strip_raw(name), self._roots, tried)


def _strip_raw(name: str) -> str:
    """Turn a raw identifier like ``r#match`` into its file name ``match``."""
    return name[2:] if name.startswith("r#") else name

