"""ASCII tree-style exporter for module trees."""

from pathlib import Path
from typing import List, Optional, Tuple

from modtree.model import ModuleDeclaration, ModuleNode


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    tree: ModuleNode,
    base: Optional[Path] = None,
    style: str = "tree",
) -> str:
    """
    Convert a module tree to an ASCII tree representation.

    Each line shows the module path as declared (``a::b`` when the
    declaration sits inside an inline module), its visibility prefix and the
    file it was loaded from.

    Args:
        tree: Root of the module tree.
        base: Optional base path for relative path display.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).

    Returns:
        ASCII tree string.
    """
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    lines: List[str] = [f"{tree.name} ({_get_display_path(tree.file_path, base)})"]
    _render_children(tree, base, "", chars, lines)
    return "\n".join(lines)


def _render_children(
    node: ModuleNode,
    base: Optional[Path],
    prefix: str,
    chars: Tuple[str, str, str, str],
    lines: List[str],
) -> None:
    """
    Recursively render the children of a node.

    Args:
        node: Node whose children are rendered.
        base: Base path for display.
        prefix: Current line prefix for indentation.
        chars: Character set (branch, last, vertical, space).
        lines: Output lines list (modified in place).
    """
    branch, last, vertical, space = chars

    for index, (declaration, child) in enumerate(node.children):
        is_last = index == len(node.children) - 1
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{_describe(declaration, child, base)}")
        _render_children(child, base, prefix + (space if is_last else vertical), chars, lines)


def _describe(declaration: ModuleDeclaration, child: ModuleNode, base: Optional[Path]) -> str:
    visibility = " ".join(declaration.visibility_prefix.split())
    label = f"{visibility} {declaration.qualified_name}" if visibility else declaration.qualified_name
    return f"{label} ({_get_display_path(child.file_path, base)})"


def _get_display_path(path: Path, base: Optional[Path]) -> str:
    """Get the display path for a module file."""
    if base is not None:
        try:
            return str(Path(path).relative_to(base)).replace("\\", "/")
        except ValueError:
            pass
    return str(path).replace("\\", "/")
