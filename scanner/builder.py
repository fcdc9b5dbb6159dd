"""Module tree builder that drives scanning and resolution."""

import logging
from pathlib import Path, PurePosixPath
from typing import List, Optional

from modtree.model import ModuleNode
from .errors import CyclicModuleReference, ScanError, SourceReadError
from .filesystem import FileSystem
from .lexer import iter_unresolved
from .resolver import ModuleResolver, Resolution


logger = logging.getLogger(__name__)


def build_tree(
    entry: str,
    resolver: ModuleResolver,
    fs: Optional[FileSystem] = None,
) -> ModuleNode:
    """
    Load the entry module and every module it declares, recursively.

    Every ``mod name;`` found in a file (including inside inline
    ``mod x { ... }`` bodies) is resolved and loaded as a child node. A file
    reached through two unrelated declarations is loaded twice, once for
    each place it gets inlined.

    Args:
        entry: Name of the entry module (e.g. ``main``), resolved against the
            first matching search root.
        resolver: Resolver holding the search roots.
        fs: File system to read from (default: the resolver's).

    Returns:
        The root ModuleNode of the bundle tree.

    Raises:
        ModuleNotFound: If the entry or any declared module has no file.
        CyclicModuleReference: If a module declares one of its own ancestors.
        SourceReadError: If a file cannot be read.
        ScanError: If a file cannot be scanned.
    """
    if fs is None:
        fs = resolver.fs

    # The crate root's submodules live beside it.
    resolution = resolver.resolve(entry)._replace(nested_dir=None)
    stack: List[Path] = [resolution.path]
    tree = _build_node(entry, resolution, resolver, fs, stack)
    logger.info("Built module tree for '%s': %d module(s)", entry, len(tree))
    return tree


def _build_node(
    name: str,
    resolution: Resolution,
    resolver: ModuleResolver,
    fs: FileSystem,
    stack: List[Path],
) -> ModuleNode:
    """Read one module file and recursively build its children."""
    path = resolution.path
    logger.info("Loading module '%s' from %s", name, path)

    try:
        source = fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, e) from e

    try:
        declarations = list(iter_unresolved(source))
    except ScanError as e:
        raise e.with_path(path) from None

    children = []
    for declaration in declarations:
        module_dir = resolution.module_dir.joinpath(*declaration.namespace)
        nested_dir = None
        if resolution.nested_dir is not None:
            nested_dir = resolution.nested_dir.joinpath(*declaration.namespace)
        logger.debug("%s: found 'mod %s;' at offset %d", path, declaration.qualified_name, declaration.span[0])
        child_resolution = resolver.resolve(declaration.name, module_dir, nested_dir)

        if child_resolution.path in stack:
            start = stack.index(child_resolution.path)
            raise CyclicModuleReference(stack[start:] + [child_resolution.path])

        stack.append(child_resolution.path)
        try:
            child = _build_node(declaration.name, child_resolution, resolver, fs, stack)
        finally:
            stack.pop()
        children.append((declaration, child))

    return ModuleNode(
        name=name,
        file_path=path,
        raw_source=source,
        module_dir=PurePosixPath(resolution.module_dir),
        children=tuple(children),
    )
