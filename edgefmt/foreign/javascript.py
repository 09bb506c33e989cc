"""
Script formatter: tree-sitter validation plus jsbeautifier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import jsbeautifier
from tree_sitter import Language

from .base import ForeignFormatter
from .comment_style import C_STYLE_COMMENTS, CommentStyle
from .tree_sitter_support import TreeSitterDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BeautifyFlags:
    """Script layout switches passed through to the beautifier."""
    use_tabs: bool = False
    preserve_newlines: bool = True
    max_preserve_newlines: int = 2
    keep_array_indentation: bool = False
    brace_style: str = "collapse"


class JavaScriptDocument(TreeSitterDocument):

    def get_language(self) -> Language:
        import tree_sitter_javascript as tsjs
        return Language(tsjs.language())


class JavaScriptFormatter(ForeignFormatter):

    name = "javascript"
    comment_style: CommentStyle = C_STYLE_COMMENTS

    def create_document(self, text: str) -> TreeSitterDocument:
        return JavaScriptDocument(text)

    def format(self, source: str, indent_size: int, flags: BeautifyFlags) -> str:
        """
        Pretty-print a script.

        Args:
            source: Script text (template syntax already hidden)
            indent_size: Spaces per level; ignored when flags.use_tabs is set
            flags: Beautifier switches

        Returns:
            Formatted text without a trailing newline

        Raises:
            ForeignFormatterError: If the script does not parse
        """
        self.validate(source)

        opts = jsbeautifier.default_options()
        if flags.use_tabs:
            opts.indent_with_tabs = True
            opts.indent_char = "\t"
            opts.indent_size = 1
        else:
            opts.indent_with_tabs = False
            opts.indent_char = " "
            opts.indent_size = indent_size
        opts.preserve_newlines = flags.preserve_newlines
        opts.max_preserve_newlines = flags.max_preserve_newlines
        opts.keep_array_indentation = flags.keep_array_indentation
        opts.brace_style = flags.brace_style
        opts.end_with_newline = False

        logger.debug("javascript: formatting %d chars", len(source))
        return jsbeautifier.beautify(source, opts).rstrip()


__all__ = ["BeautifyFlags", "JavaScriptDocument", "JavaScriptFormatter"]
