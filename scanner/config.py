"""Bundler configuration: search roots, entry module and file layout."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import yaml

from .errors import ConfigError
from .filesystem import FileSystem
from .resolver import DEFAULT_DIR_ENTRY, DEFAULT_EXTENSION, ModuleResolver, unique_roots


DEFAULT_ROOTS = ("src",)
DEFAULT_ENTRY = "main"

# Files picked up from the working directory when no config is given
DEFAULT_CONFIG_FILES = ("rsbundle.yaml", "rsbundle.yml", "rsbundle.toml")

PYPROJECT_TABLE = ("tool", "rsbundle")

KNOWN_KEYS = {"roots", "entry", "extension", "dir_entry", "output"}


@dataclass(frozen=True)
class BundleConfig:
    """
    Settings for one bundling run.

    ``roots`` are searched in order; the first root holding a module wins.
    """

    roots: Tuple[Path, ...] = field(default_factory=lambda: tuple(Path(r) for r in DEFAULT_ROOTS))
    entry: str = DEFAULT_ENTRY
    extension: str = DEFAULT_EXTENSION
    dir_entry: str = DEFAULT_DIR_ENTRY
    output: Optional[Path] = None

    def __post_init__(self):
        object.__setattr__(self, "roots", unique_roots(self.roots))
        if not self.roots:
            raise ConfigError("at least one search root is required")
        if not self.entry:
            raise ConfigError("an entry module name is required")

    def resolver(self, fs: Optional[FileSystem] = None) -> ModuleResolver:
        """Create a resolver for these settings."""
        return ModuleResolver(
            self.roots,
            fs=fs,
            extension=self.extension,
            dir_entry=self.dir_entry,
        )


def load_config(path: Path) -> BundleConfig:
    """
    Load a configuration file.

    Supports YAML (``.yaml``/``.yml``) and TOML (``.toml``). In a
    ``pyproject.toml`` the settings live under ``[tool.rsbundle]``.
    Relative paths are taken relative to the file's directory.

    Args:
        path: Configuration file to read.

    Returns:
        The validated BundleConfig.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(content)
        elif suffix == ".toml":
            data = tomllib.loads(content)
            if path.name == "pyproject.toml":
                for key in PYPROJECT_TABLE:
                    data = data.get(key, {}) if isinstance(data, dict) else {}
        else:
            raise ConfigError(f"unsupported config format: {path.name}")
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot parse config file {path}: {e}") from e

    if data is None:
        data = {}
    return from_mapping(data, base_dir=path.parent)


def from_mapping(data: Any, base_dir: Optional[Path] = None) -> BundleConfig:
    """
    Build a BundleConfig from parsed configuration data.

    Args:
        data: Mapping with any of ``roots``, ``entry``, ``extension``,
            ``dir_entry`` and ``output``.
        base_dir: Directory that relative paths are resolved against.

    Raises:
        ConfigError: If a value has the wrong type or an unknown key is present.
    """
    if not isinstance(data, Mapping):
        raise ConfigError("configuration must be a mapping")

    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"unknown configuration key(s): {', '.join(unknown)}")

    kwargs: Dict[str, Any] = {}

    if "roots" in data:
        roots = data["roots"]
        if isinstance(roots, str):
            roots = [roots]
        if not isinstance(roots, Sequence) or not roots or not all(isinstance(r, str) for r in roots):
            raise ConfigError("'roots' must be a non-empty list of directory paths")
        kwargs["roots"] = tuple(_anchor(Path(r), base_dir) for r in roots)
    elif base_dir is not None:
        kwargs["roots"] = tuple(_anchor(Path(r), base_dir) for r in DEFAULT_ROOTS)

    for key in ("entry", "extension", "dir_entry"):
        if key in data:
            value = data[key]
            if not isinstance(value, str) or not value:
                raise ConfigError(f"'{key}' must be a non-empty string")
            kwargs[key] = value

    if data.get("output") is not None:
        if not isinstance(data["output"], str):
            raise ConfigError("'output' must be a file path")
        kwargs["output"] = _anchor(Path(data["output"]), base_dir)

    return BundleConfig(**kwargs)


def find_default_config(directory: Path) -> Optional[Path]:
    """Return the first default config file present in ``directory``, if any."""
    for name in DEFAULT_CONFIG_FILES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def _anchor(path: Path, base_dir: Optional[Path]) -> Path:
    if base_dir is None or path.is_absolute():
        return path
    return base_dir / path
