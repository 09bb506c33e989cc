"""
Directive scanner for template syntax embedded in script/style code.

Finds `@keyword(args)` directives and the balanced `@end` closing a block.
Argument lists are walked character by character with an explicit nesting
depth (string literals skipped), so deeply nested arguments never trigger
regex backtracking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Collection, Iterator, List, Optional, Tuple

_KEYWORD_RE = re.compile(r"@(!)?([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)")

_QUOTES = ("'", '"', "`")

# Midpoint keywords: belong to the enclosing block, never open one
MIDPOINT_KEYWORDS = frozenset({"else", "elseif"})

# Native CSS at-rules that must never be mistaken for template blocks
CSS_AT_RULES = frozenset({
    "media", "supports", "import", "font-face", "keyframes", "page", "layer",
    "container", "charset", "namespace", "document", "property", "counter-style",
    "font-feature-values", "scope", "starting-style",
})


@dataclass(frozen=True)
class DirectiveMatch:
    """One `@keyword(args)` occurrence."""
    start: int
    end: int              # index right after the keyword or the closing parenthesis
    keyword: str
    self_closing: bool    # `@!name(...)` form
    has_args: bool

    @property
    def is_end(self) -> bool:
        return self.keyword.startswith("end")

    @property
    def is_midpoint(self) -> bool:
        return self.keyword in MIDPOINT_KEYWORDS


def skip_balanced(text: str, pos: int) -> int:
    """
    Walk a parenthesized argument list.

    Args:
        text: Source text
        pos: Index of the opening parenthesis

    Returns:
        Index right after the matching closing parenthesis, or -1 if unbalanced
    """
    if pos >= len(text) or text[pos] != "(":
        return -1

    depth = 0
    i = pos
    length = len(text)
    while i < length:
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_string(text, i)
            if i < 0:
                return -1
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return -1


def _skip_string(text: str, pos: int) -> int:
    quote = text[pos]
    i = pos + 1
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return -1


def match_directive(text: str, pos: int) -> Optional[DirectiveMatch]:
    """
    Match a directive starting at `pos` (which must point at `@`).

    A directive is the sigil, an optional `!`, the keyword and, when a
    parenthesis follows immediately, its balanced argument list. Returns
    None for anything else (e-mail addresses, decorators glued to words,
    unbalanced argument lists).
    """
    if pos > 0 and (text[pos - 1].isalnum() or text[pos - 1] in "_@"):
        return None

    m = _KEYWORD_RE.match(text, pos)
    if not m:
        return None

    end = m.end()
    has_args = False
    if end < len(text) and text[end] == "(":
        close = skip_balanced(text, end)
        if close < 0:
            return None
        end = close
        has_args = True

    return DirectiveMatch(
        start=pos,
        end=end,
        keyword=m.group(2),
        self_closing=bool(m.group(1)),
        has_args=has_args,
    )


def iter_directives(text: str, start: int = 0) -> Iterator[DirectiveMatch]:
    """Yield directives left to right; argument lists are skipped as a whole."""
    pos = text.find("@", start)
    while pos >= 0:
        match = match_directive(text, pos)
        if match is None:
            pos = text.find("@", pos + 1)
            continue
        yield match
        pos = text.find("@", match.end)


def is_block_opener(match: DirectiveMatch, single_line_keywords: Collection[str]) -> bool:
    """Whether the directive opens a block closed by a matching `@end`."""
    if not match.has_args or match.self_closing:
        return False
    if match.is_end or match.is_midpoint:
        return False
    if match.keyword in single_line_keywords:
        return False
    return match.keyword.lower() not in CSS_AT_RULES


def find_block_end(
    text: str,
    opener: DirectiveMatch,
    single_line_keywords: Collection[str],
) -> Optional[int]:
    """
    Locate the end marker closing `opener`.

    Nested openers increase the depth, end markers decrease it.

    Returns:
        Index right after the matching end marker, or None if the block is unterminated
    """
    depth = 1
    for match in iter_directives(text, opener.end):
        if match.is_end:
            depth -= 1
            if depth == 0:
                return match.end
        elif is_block_opener(match, single_line_keywords):
            depth += 1
    return None


def find_blocks(text: str, single_line_keywords: Collection[str]) -> List[Tuple[int, int]]:
    """Outermost, non-overlapping `(start, end)` spans of complete blocks."""
    spans: List[Tuple[int, int]] = []
    pos = 0
    while True:
        opener = next(
            (m for m in iter_directives(text, pos) if is_block_opener(m, single_line_keywords)),
            None,
        )
        if opener is None:
            return spans
        end = find_block_end(text, opener, single_line_keywords)
        if end is None:
            pos = opener.end
            continue
        spans.append((opener.start, end))
        pos = end


def find_single_line(text: str, single_line_keywords: Collection[str]) -> List[DirectiveMatch]:
    """Directives from the single-line allow-list and any `@!name(...)` self-closing form."""
    return [
        m for m in iter_directives(text)
        if m.self_closing or m.keyword in single_line_keywords
    ]


def is_self_contained_block(value: str, single_line_keywords: Collection[str]) -> bool:
    """Whether `value` is one complete block, from its opener through its own end marker."""
    text = value.strip()
    opener = match_directive(text, 0) if text.startswith("@") else None
    if opener is None or not is_block_opener(opener, single_line_keywords):
        return False
    return find_block_end(text, opener, single_line_keywords) == len(text)


__all__ = [
    "DirectiveMatch",
    "MIDPOINT_KEYWORDS",
    "CSS_AT_RULES",
    "skip_balanced",
    "match_directive",
    "iter_directives",
    "is_block_opener",
    "find_block_end",
    "find_blocks",
    "find_single_line",
    "is_self_contained_block",
]
