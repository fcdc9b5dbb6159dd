#!/usr/bin/env python3
"""
rsbundle CLI

A tool for merging a Rust crate's module files into a single source file,
for platforms that only accept one file per submission.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from scanner.builder import build_tree
from scanner.config import BundleConfig, find_default_config, load_config
from scanner.errors import BundleError
from exporters import to_ascii, to_json, to_source


logger = logging.getLogger("rsbundle")


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rsbundle",
        description="Inline every `mod name;` of a Rust crate into one source file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rsbundle                           # Bundle src/main.rs to stdout
  rsbundle src/main.rs -o bundle.rs  # Bundle a file, write the result
  rsbundle lib -r src vendor         # Entry 'lib', search src/ then vendor/
  rsbundle -c rsbundle.yaml          # Take roots and entry from a config file
  rsbundle -f ascii                  # Show the module tree instead
        """,
    )

    # Positional arguments
    parser.add_argument(
        "entry",
        nargs="?",
        default=None,
        help="Entry module name, or path to the entry .rs file (default: main)",
    )

    parser.add_argument(
        "-r", "--root",
        nargs="+",
        default=None,
        help="Search root directories, in precedence order (default: src)",
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Config file (.yaml, .yml, .toml or pyproject.toml)",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["source", "ascii", "json"],
        default="source",
        help="Output format: bundled source, or the module tree (default: source)",
    )

    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    parser.add_argument(
        "--ext",
        type=str,
        default=None,
        help="Source file extension (default: rs)",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or resolution details (-vv) to stderr",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )

    return parser.parse_args(args)


def configure_logging(verbose: int = 0, quiet: bool = False) -> None:
    """Send log records to stderr at the level picked on the command line."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def resolve_config(parsed) -> BundleConfig:
    """
    Merge the config file (if any) with command line options.

    Command line values win over config file values.
    """
    config_path: Optional[Path] = None
    if parsed.config:
        config_path = Path(parsed.config)
    else:
        config_path = find_default_config(Path.cwd())

    if config_path is not None:
        logger.info("Using config file %s", config_path)
        config = load_config(config_path)
    else:
        config = BundleConfig()

    changes = {}
    if parsed.entry:
        entry_path = Path(parsed.entry)
        if entry_path.suffix and entry_path.is_file():
            # A file path: its directory is the default root, its stem the entry.
            changes["entry"] = entry_path.stem
            changes["extension"] = entry_path.suffix.lstrip(".")
            if not parsed.root:
                changes["roots"] = (entry_path.parent.resolve(),)
        else:
            changes["entry"] = parsed.entry
    if parsed.root:
        changes["roots"] = tuple(Path(root).resolve() for root in parsed.root)
    if parsed.ext:
        changes["extension"] = parsed.ext.lstrip(".")
    if parsed.output:
        changes["output"] = Path(parsed.output)

    return replace(config, **changes) if changes else config


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    configure_logging(parsed.verbose, parsed.quiet)

    # Build the module tree
    try:
        config = resolve_config(parsed)
        missing = [root for root in config.roots if not root.is_dir()]
        for root in missing:
            logger.warning("Search root '%s' is not a directory", root)
        tree = build_tree(config.entry, config.resolver())
    except BundleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Generate output
    base = Path.cwd()
    if parsed.format == "ascii":
        output = to_ascii(tree, base=base, style=parsed.ascii_style)
    elif parsed.format == "json":
        output = to_json(tree, base=base)
    else:  # source (default)
        output = to_source(tree)

    # Write output
    if config.output:
        try:
            config.output.write_text(output, encoding="utf-8")
            logger.info("Output written to: %s", config.output)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        sys.stdout.write(output)
        if output and not output.endswith("\n"):
            sys.stdout.write("\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
