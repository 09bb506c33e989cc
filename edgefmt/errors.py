"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from EdgeFmtError.

Programming errors and bugs should NOT inherit from EdgeFmtError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class EdgeFmtError(Exception):
    """
    Base class for all user-facing errors of the formatter.

    These errors indicate problems with the input the user can fix:
    malformed embedded blocks, invalid script/style code, bad options.
    """
    pass


class StructuralParseError(EdgeFmtError):
    """A script/style node does not have the expected `<tag ...>...</tag>` shape."""

    def __init__(self, kind: str, start: int, end: int, snippet: str):
        preview = snippet if len(snippet) <= 60 else snippet[:57] + "..."
        super().__init__(f"Invalid <{kind}> element at {start}:{end}: {preview!r}")
        self.kind = kind
        self.start = start
        self.end = end
        self.snippet = snippet


@dataclass(frozen=True)
class SyntaxDiagnostic:
    """Position of a syntax error reported by a foreign-language formatter (1-based)."""
    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.message} at {self.line}:{self.column}"


class ForeignFormatterError(EdgeFmtError):
    """The style-sheet or script formatter rejected the embedded content."""

    def __init__(self, language: str, message: str, diagnostic: Optional[SyntaxDiagnostic] = None):
        details = f" ({diagnostic})" if diagnostic is not None else ""
        super().__init__(f"{language}: {message}{details}")
        self.language = language
        self.diagnostic = diagnostic


class TreeLoadError(EdgeFmtError):
    """The parser dump could not be turned into a node tree."""
    pass


class ConfigError(EdgeFmtError, ValueError):
    """Invalid formatter options."""
    pass


__all__ = [
    "EdgeFmtError",
    "StructuralParseError",
    "SyntaxDiagnostic",
    "ForeignFormatterError",
    "TreeLoadError",
    "ConfigError",
]
