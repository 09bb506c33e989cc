from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommentStyle:
    """Comment style description for an embedded language."""

    multi_line: tuple[str, str]
    """Block comment markers (e.g., ('/*', '*/'))."""

    def wrap(self, text: str) -> str:
        """Wrap text as an inert block comment."""
        opener, closer = self.multi_line
        return f"{opener}{text}{closer}"


# C-family: JavaScript and friends
C_STYLE_COMMENTS = CommentStyle(multi_line=("/*", "*/"))

CSS_COMMENTS = CommentStyle(multi_line=("/*", "*/"))
