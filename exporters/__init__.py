"""Exporters for converting a module tree to various output formats."""

from .source_exporter import bundle, to_source
from .ascii_exporter import to_ascii
from .json_exporter import to_json

__all__ = ["bundle", "to_source", "to_ascii", "to_json"]
