"""Module tree model produced by the builder and consumed by exporters."""

from .model import ModuleDeclaration, ModuleNode

__all__ = ["ModuleDeclaration", "ModuleNode"]
