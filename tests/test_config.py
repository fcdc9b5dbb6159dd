"""Tests for configuration loading."""

import pytest
from pathlib import Path
import tempfile

from scanner.config import (
    BundleConfig,
    find_default_config,
    from_mapping,
    load_config,
)
from scanner.errors import ConfigError


class TestBundleConfig:
    """Tests for the BundleConfig value object."""

    def test_defaults(self):
        """Test default roots and entry."""
        config = BundleConfig()

        assert config.roots == (Path("src"),)
        assert config.entry == "main"
        assert config.extension == "rs"
        assert config.dir_entry == "mod"
        assert config.output is None

    def test_roots_are_deduplicated(self):
        """Test that repeated roots keep their first position."""
        config = BundleConfig(roots=(Path("a"), Path("b"), Path("a")))

        assert config.roots == (Path("a"), Path("b"))

    def test_empty_roots_rejected(self):
        """Test that at least one root is required."""
        with pytest.raises(ConfigError):
            BundleConfig(roots=())

    def test_resolver_uses_settings(self):
        """Test that the resolver inherits roots and layout."""
        config = BundleConfig(roots=(Path("/x"),), extension="txt", dir_entry="index")

        resolver = config.resolver()

        assert resolver.roots == (Path("/x"),)
        assert resolver.candidates("m") == [Path("/x/m.txt"), Path("/x/m/index.txt")]


class TestFromMapping:
    """Tests for validating parsed settings."""

    def test_relative_paths_are_anchored(self):
        """Test that roots and output are resolved against the base directory."""
        base = Path("/work")

        config = from_mapping(
            {"roots": ["src", "/abs/vendor"], "entry": "lib", "output": "out/bundle.rs"},
            base_dir=base,
        )

        assert config.roots == (base / "src", Path("/abs/vendor"))
        assert config.entry == "lib"
        assert config.output == base / "out" / "bundle.rs"

    def test_single_root_string(self):
        """Test that a single root may be given as a string."""
        config = from_mapping({"roots": "lib"})

        assert config.roots == (Path("lib"),)

    def test_unknown_key(self):
        """Test that typos in keys are reported."""
        with pytest.raises(ConfigError, match="rootz"):
            from_mapping({"rootz": ["src"]})

    @pytest.mark.parametrize("roots", [[], 5, [1, 2], {"a": "b"}])
    def test_bad_roots(self, roots):
        """Test invalid roots values."""
        with pytest.raises(ConfigError):
            from_mapping({"roots": roots})

    def test_bad_entry(self):
        """Test that the entry must be a non-empty string."""
        with pytest.raises(ConfigError):
            from_mapping({"entry": ""})

    def test_not_a_mapping(self):
        """Test that a top-level list is rejected."""
        with pytest.raises(ConfigError):
            from_mapping(["src"])


class TestLoadConfig:
    """Tests for reading configuration files."""

    def test_yaml(self):
        """Test loading a YAML config."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            path = root / "rsbundle.yaml"
            path.write_text("roots:\n  - src\n  - vendor\nentry: main\n")

            config = load_config(path)

            assert config.roots == (root / "src", root / "vendor")
            assert config.entry == "main"

    def test_toml(self):
        """Test loading a TOML config."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            path = root / "rsbundle.toml"
            path.write_text('roots = ["crate"]\nentry = "lib"\noutput = "bundle.rs"\n')

            config = load_config(path)

            assert config.roots == (root / "crate",)
            assert config.entry == "lib"
            assert config.output == root / "bundle.rs"

    def test_pyproject_table(self):
        """Test reading settings from [tool.rsbundle] in pyproject.toml."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            path = root / "pyproject.toml"
            path.write_text(
                '[project]\nname = "x"\n\n[tool.rsbundle]\nentry = "solution"\n'
            )

            config = load_config(path)

            assert config.entry == "solution"
            assert config.roots == (root / "src",)

    def test_empty_yaml_uses_defaults(self):
        """Test that an empty file means default settings."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            path = root / "rsbundle.yml"
            path.write_text("")

            config = load_config(path)

            assert config.roots == (root / "src",)
            assert config.entry == "main"

    def test_invalid_yaml(self):
        """Test that a parse failure becomes a ConfigError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "rsbundle.yaml"
            path.write_text("roots: [src\n")

            with pytest.raises(ConfigError, match="cannot parse"):
                load_config(path)

    def test_invalid_toml(self):
        """Test that a TOML syntax error becomes a ConfigError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "rsbundle.toml"
            path.write_text("roots = [\n")

            with pytest.raises(ConfigError, match="cannot parse"):
                load_config(path)

    def test_unsupported_format(self):
        """Test that unknown extensions are rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "rsbundle.ini"
            path.write_text("[x]\n")

            with pytest.raises(ConfigError, match="unsupported"):
                load_config(path)

    def test_missing_file(self):
        """Test that an unreadable file becomes a ConfigError."""
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(Path("/definitely/not/here.yaml"))

    def test_find_default_config(self):
        """Test discovery of a config file in a directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            assert find_default_config(root) is None

            (root / "rsbundle.toml").write_text("")
            (root / "rsbundle.yaml").write_text("")

            assert find_default_config(root) == root / "rsbundle.yaml"
