"""
Deterministic pretty-printer for Edge templates.
"""

from .engine import format_data, format_tree
from .errors import (
    ConfigError,
    EdgeFmtError,
    ForeignFormatterError,
    StructuralParseError,
    SyntaxDiagnostic,
    TreeLoadError,
)
from .options import FormatOptions, load_options

__all__ = [
    "format_tree",
    "format_data",
    "FormatOptions",
    "load_options",
    "EdgeFmtError",
    "StructuralParseError",
    "ForeignFormatterError",
    "SyntaxDiagnostic",
    "TreeLoadError",
    "ConfigError",
]
