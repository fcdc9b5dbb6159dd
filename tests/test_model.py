"""Tests for the module tree data model."""

import pytest
from dataclasses import FrozenInstanceError
from pathlib import Path

from modtree.model import ModuleDeclaration, ModuleNode


def leaf(name):
    return ModuleNode(name=name, file_path=Path(f"{name}.rs"), raw_source="")


class TestModuleDeclaration:
    """Tests for ModuleDeclaration."""

    def test_unresolved(self):
        """Test a declaration without a body."""
        declaration = ModuleDeclaration("game", "pub ", (0, 13))

        assert not declaration.is_inline
        assert declaration.qualified_name == "game"
        assert declaration.file_name == "game"

    def test_inline(self):
        """Test a declaration with a body span."""
        declaration = ModuleDeclaration("a", "", (0, 10), body_span=(7, 9))

        assert declaration.is_inline

    def test_qualified_name(self):
        """Test the module path for a declaration inside inline modules."""
        declaration = ModuleDeclaration("c", "", (0, 6), namespace=("a", "b"))

        assert declaration.qualified_name == "a::b::c"

    def test_immutable(self):
        """Test that declarations cannot be changed."""
        declaration = ModuleDeclaration("a", "", (0, 6))

        with pytest.raises(FrozenInstanceError):
            declaration.name = "b"


class TestModuleNode:
    """Tests for ModuleNode."""

    def test_leaf(self):
        """Test a node without children."""
        node = leaf("main")

        assert len(node) == 1
        assert node.depth() == 0
        assert list(node.iter_nodes()) == [node]

    def test_iter_nodes_depth_first(self):
        """Test traversal order."""
        c = leaf("c")
        b = ModuleNode("b", Path("b.rs"), "mod c;", children=((ModuleDeclaration("c", "", (0, 6)), c),))
        d = leaf("d")
        root = ModuleNode(
            "main",
            Path("main.rs"),
            "mod b; mod d;",
            children=(
                (ModuleDeclaration("b", "", (0, 6)), b),
                (ModuleDeclaration("d", "", (7, 13)), d),
            ),
        )

        assert [node.name for node in root.iter_nodes()] == ["main", "b", "c", "d"]
        assert len(root) == 4
        assert root.depth() == 2

    def test_repr(self):
        """Test the debug representation."""
        assert "main" in repr(leaf("main"))
