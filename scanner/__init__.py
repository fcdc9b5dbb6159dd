"""Scanner package: lexing, module resolution and module tree building."""

from .errors import (
    BundleError,
    ConfigError,
    CyclicModuleReference,
    LoadError,
    ModuleNotFound,
    ScanError,
    SourceReadError,
)
from .filesystem import LocalFileSystem, MemoryFileSystem
from .lexer import iter_declarations, iter_unresolved, scan
from .resolver import ModuleResolver, Resolution
from .builder import build_tree
from .config import BundleConfig, load_config

__all__ = [
    "BundleError",
    "ConfigError",
    "CyclicModuleReference",
    "LoadError",
    "ModuleNotFound",
    "ScanError",
    "SourceReadError",
    "LocalFileSystem",
    "MemoryFileSystem",
    "iter_declarations",
    "iter_unresolved",
    "scan",
    "ModuleResolver",
    "Resolution",
    "build_tree",
    "BundleConfig",
    "load_config",
]
