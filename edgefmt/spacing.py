"""
Spacing rules for interpolations and template comments.

All functions are pure and idempotent: applying a rule to its own output
returns the output unchanged.
"""

from __future__ import annotations

import re
from typing import List

_COMMENT_RE = re.compile(r"\{\{--(.*?)--\}\}", re.DOTALL)
_TRIPLE_RE = re.compile(r"\{\{\{.*?\}\}\}", re.DOTALL)
_DOUBLE_OPEN_RE = re.compile(r"\{\{\s*")
_DOUBLE_CLOSE_RE = re.compile(r"\s*\}\}")
_SAFE_OPEN_RE = re.compile(r"\{\{\{\s*")
_SAFE_CLOSE_RE = re.compile(r"\s*\}\}\}")

# Private-use code points: cannot collide with braces or template text
_TRIPLE_MARK_OPEN = "\ue000"
_TRIPLE_MARK_CLOSE = "\ue001"
_TRIPLE_MARK_RE = re.compile(f"{_TRIPLE_MARK_OPEN}(\\d+){_TRIPLE_MARK_CLOSE}")


def add_comment_spacing(value: str) -> str:
    """
    Ensure one space after `{{--` and before `--}}`.

    Content that already starts (ends) with whitespace, including a line
    break, is left untouched on that side.
    """
    def _space(m: re.Match) -> str:
        body = m.group(1)
        if not body[:1].isspace():
            body = " " + body
        if not body[-1:].isspace():
            body = body + " "
        return "{{--" + body + "--}}"

    return _COMMENT_RE.sub(_space, value)


def reindent_comment(value: str, indent: str, inner_indent: str) -> str:
    """
    Re-indent a (possibly multi-line) template comment.

    The first line is placed at `indent`; every inner line has its original
    leading whitespace replaced by `inner_indent`. A line holding only the
    closing marker goes back to `indent`.
    """
    lines = value.strip().split("\n")
    if len(lines) == 1:
        return f"{indent}{lines[0]}"

    out: List[str] = [f"{indent}{lines[0].rstrip()}"]
    for line in lines[1:]:
        stripped = line.strip()
        if not stripped:
            out.append("")
        elif stripped.startswith("--}}"):
            out.append(f"{indent}{stripped}")
        else:
            out.append(f"{inner_indent}{stripped}")
    return "\n".join(out)


def add_mustache_spacing(value: str) -> str:
    """
    Ensure one space after `{{` and before `}}`.

    Triple-curly spans are hidden behind opaque placeholders first and
    restored verbatim afterwards, so `{{{ }}}` is never altered.
    """
    hidden: List[str] = []

    def _hide(m: re.Match) -> str:
        hidden.append(m.group(0))
        return f"{_TRIPLE_MARK_OPEN}{len(hidden) - 1}{_TRIPLE_MARK_CLOSE}"

    value = _TRIPLE_RE.sub(_hide, value)
    value = _DOUBLE_OPEN_RE.sub("{{ ", value)
    value = _DOUBLE_CLOSE_RE.sub(" }}", value)

    if not hidden:
        return value
    return _TRIPLE_MARK_RE.sub(lambda m: hidden[int(m.group(1))], value)


def add_safe_mustache_spacing(value: str) -> str:
    """Ensure one space after `{{{` and before `}}}`."""
    value = _SAFE_OPEN_RE.sub("{{{ ", value)
    return _SAFE_CLOSE_RE.sub(" }}}", value)


__all__ = [
    "add_comment_spacing",
    "reindent_comment",
    "add_mustache_spacing",
    "add_safe_mustache_spacing",
]
