"""JSON exporter for module trees (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from modtree.model import ModuleNode


def to_json(
    tree: ModuleNode,
    base: Optional[Path] = None,
    indent: int = 2,
) -> str:
    """
    Convert a module tree to JSON format.

    Args:
        tree: Root of the module tree.
        base: Optional base path for relative path display.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the tree.
    """
    return json.dumps(_node_to_dict(tree, base), indent=indent)


def _node_to_dict(node: ModuleNode, base: Optional[Path]) -> Dict[str, Any]:
    children = []
    for declaration, child in node.children:
        children.append({
            "declaration": {
                "name": declaration.name,
                "namespace": list(declaration.namespace),
                "visibility": declaration.visibility_prefix.strip(),
                "span": list(declaration.span),
            },
            "module": _node_to_dict(child, base),
        })

    return {
        "name": node.name,
        "path": _get_path_str(node.file_path, base),
        "module_dir": node.module_dir.as_posix(),
        "children": children,
    }


def _get_path_str(path: Path, base: Optional[Path]) -> str:
    """Get the string representation of a path."""
    if base is not None:
        try:
            return str(Path(path).relative_to(base)).replace("\\", "/")
        except ValueError:
            pass
    return str(path).replace("\\", "/")
