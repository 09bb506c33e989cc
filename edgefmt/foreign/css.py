"""
Style-sheet formatter: tree-sitter validation plus cssbeautifier.
"""

from __future__ import annotations

import logging

import cssbeautifier
from tree_sitter import Language

from .base import ForeignFormatter
from .comment_style import CSS_COMMENTS, CommentStyle
from .tree_sitter_support import TreeSitterDocument

logger = logging.getLogger(__name__)


class CssDocument(TreeSitterDocument):

    def get_language(self) -> Language:
        import tree_sitter_css as tscss
        return Language(tscss.language())


class CssFormatter(ForeignFormatter):

    name = "css"
    comment_style: CommentStyle = CSS_COMMENTS

    def create_document(self, text: str) -> TreeSitterDocument:
        return CssDocument(text)

    def format(self, source: str, indent_unit: str) -> str:
        """
        Pretty-print a style sheet.

        Args:
            source: Style sheet text (template syntax already hidden)
            indent_unit: One indentation step (a tab or N spaces)

        Returns:
            Formatted text without a trailing newline

        Raises:
            ForeignFormatterError: If the style sheet does not parse
        """
        self.validate(source)

        opts = cssbeautifier.default_options()
        if indent_unit == "\t":
            opts.indent_with_tabs = True
            opts.indent_char = "\t"
            opts.indent_size = 1
        else:
            opts.indent_with_tabs = False
            opts.indent_char = " "
            opts.indent_size = len(indent_unit)
        opts.end_with_newline = False

        logger.debug("css: formatting %d chars", len(source))
        return cssbeautifier.beautify(source, opts).rstrip()


__all__ = ["CssDocument", "CssFormatter"]
