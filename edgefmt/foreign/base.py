from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..errors import ForeignFormatterError
from .comment_style import CommentStyle
from .tree_sitter_support import TreeSitterDocument

logger = logging.getLogger(__name__)


class ForeignFormatter(ABC):
    """
    Formatter of one embedded language.

    The text-in/text-out contract: syntax problems surface as
    ForeignFormatterError, never as a silently unchanged result.
    """
    #: Language name used in diagnostics
    name: str = "base"
    #: Comment markers used to hide template directives from the formatter
    comment_style: CommentStyle

    @abstractmethod
    def create_document(self, text: str) -> TreeSitterDocument:
        """Parse `text` with the language grammar."""
        pass

    def validate(self, source: str) -> None:
        """
        Reject source code the grammar cannot parse.

        Raises:
            ForeignFormatterError: With the position of the first syntax error
        """
        diagnostic = self.create_document(source).first_error()
        if diagnostic is not None:
            logger.debug("%s syntax error: %s", self.name, diagnostic)
            raise ForeignFormatterError(self.name, "cannot format embedded code", diagnostic)
