"""Source exporter: turns a module tree back into one bundled source file."""

from typing import List, Optional

from modtree.model import ModuleDeclaration, ModuleNode
from scanner.builder import build_tree
from scanner.config import BundleConfig
from scanner.filesystem import FileSystem
from scanner.lexer import ends_in_line_comment, shebang_end


def to_source(tree: ModuleNode) -> str:
    """
    Render a module tree as a single self-contained source text.

    Each ``mod name;`` in a module's text is replaced by
    ``<prefix>mod name { <bundled child> }``. Everything else, including
    already-inline module bodies, is copied through unchanged, except that a
    ``#!`` interpreter line at the top of an inlined file is dropped.

    Args:
        tree: Root of the module tree.

    Returns:
        The bundled source.
    """
    source = tree.raw_source
    parts: List[str] = []
    position = 0

    for declaration, child in tree.children:
        start, end = declaration.span
        parts.append(source[position:start])
        parts.append(_inline_block(declaration, to_source(child)))
        position = end

    parts.append(source[position:])
    return "".join(parts)


def _inline_block(declaration: ModuleDeclaration, body: str) -> str:
    # An interpreter line is only valid at the very top of the bundle.
    body = body[shebang_end(body):]
    # A trailing `// comment` would swallow the closing brace.
    if ends_in_line_comment(body):
        body += "\n"
    return f"{declaration.visibility_prefix}mod {declaration.name} {{ {body} }}"


def bundle(config: BundleConfig, fs: Optional[FileSystem] = None) -> str:
    """Build the module tree described by ``config`` and render it as source."""
    resolver = config.resolver(fs)
    return to_source(build_tree(config.entry, resolver))
