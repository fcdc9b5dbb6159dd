"""Tree data model for modules discovered while bundling."""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class ModuleDeclaration:
    """
    A ``mod`` item found in source text.

    ``span`` covers the whole item, from the first attribute or visibility
    token through the terminating ``;`` (or the closing ``}`` of an inline
    body). ``visibility_prefix`` is the raw text between the start of the
    span and the ``mod`` keyword. ``body_span`` is set only for inline
    modules and covers the text between the braces.
    """

    name: str
    visibility_prefix: str
    span: Tuple[int, int]
    body_span: Optional[Tuple[int, int]] = None
    namespace: Tuple[str, ...] = ()

    @property
    def is_inline(self) -> bool:
        """Return True if the module body is already written out in place."""
        return self.body_span is not None

    @property
    def file_name(self) -> str:
        """Return the name used to look the module up on disk."""
        return self.name[2:] if self.name.startswith("r#") else self.name

    @property
    def qualified_name(self) -> str:
        """Return the module path relative to the declaring file, e.g. ``a::b``."""
        return "::".join(self.namespace + (self.name,))


@dataclass(frozen=True)
class ModuleNode:
    """
    A loaded module file and the modules it pulls in.

    ``children`` pairs every unresolved declaration of ``raw_source`` (at any
    inline depth) with the node loaded for it, in source order.
    """

    name: str
    file_path: Path
    raw_source: str
    module_dir: PurePosixPath = PurePosixPath()
    children: Tuple[Tuple[ModuleDeclaration, "ModuleNode"], ...] = ()

    def iter_nodes(self) -> Iterator["ModuleNode"]:
        """Iterate over this node and all descendants, depth first."""
        yield self
        for _, child in self.children:
            yield from child.iter_nodes()

    def depth(self) -> int:
        """Return the number of levels below this node."""
        return max((child.depth() + 1 for _, child in self.children), default=0)

    def __len__(self) -> int:
        """Return the number of nodes in the tree rooted here."""
        return sum(1 for _ in self.iter_nodes())

    def __repr__(self) -> str:
        return f"ModuleNode(name={self.name!r}, file_path={str(self.file_path)!r}, children={len(self.children)})"
