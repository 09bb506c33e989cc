"""
Static classification of tags, nodes and template directives.
"""

from __future__ import annotations

import enum
import re
from typing import Collection, Optional

from .embedded.scanner import MIDPOINT_KEYWORDS, is_self_contained_block
from .nodes import INTERPOLATION_TYPES, Node, NodeType, TagNode, ClosingTag

# Tags that flow with the surrounding text instead of forcing line breaks
INLINE_TAGS = frozenset({
    "a", "abbr", "acronym", "b", "bdi", "bdo", "big", "br", "button", "cite",
    "code", "data", "dfn", "em", "i", "img", "input", "kbd", "label", "mark",
    "meter", "output", "q", "s", "samp", "select", "small", "span", "strike",
    "strong", "sub", "sup", "textarea", "time", "tt", "u", "var", "wbr",
})

# Childless elements: no closing tag, always rendered with ` />`
VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "keygen",
    "link", "meta", "param", "source", "track", "wbr",
})

# Directives that never open a block. Treated as configuration data:
# FormatOptions.flat_directives overrides this default.
DEFAULT_FLAT_DIRECTIVES = (
    "let",
    "assign",
    "inject",
    "debugger",
    "eval",
    "stack",
    "svg",
    "newError",
    "vite",
    "viteReactRefresh",
    "inertia",
    "inertiaHead",
    "entryPointStyles",
    "entryPointScripts",
    "include",
    "includeIf",
)

_DIRECTIVE_HEAD_RE = re.compile(r"@(!)?([A-Za-z_]\w*)")


def is_inline(tag_name: str) -> bool:
    return tag_name.lower() in INLINE_TAGS


def is_void(tag_name: str) -> bool:
    return tag_name.lower() in VOID_TAGS


# --- Node predicates ---------------------------------------------------------

def is_interpolation(node: Optional[Node]) -> bool:
    return node is not None and node.type in INTERPOLATION_TYPES


def is_text_like(node: Optional[Node]) -> bool:
    """Text or any interpolation: content that flows on the same line."""
    return node is not None and (node.type is NodeType.TEXT or node.type in INTERPOLATION_TYPES)


def is_inline_tag(node: Optional[Node]) -> bool:
    """Opening, void or closing tag of an inline element."""
    if isinstance(node, (TagNode, ClosingTag)):
        return is_inline(node.tag_name)
    return False


def is_inline_compatible(node: Optional[Node]) -> bool:
    return is_text_like(node) or is_inline_tag(node)


# --- Directives --------------------------------------------------------------

class DirectiveKind(enum.Enum):
    """Effect of a control-block tag on the indentation of following siblings."""
    END = "end"            # closes a block: printed one level up, level decremented
    MIDPOINT = "midpoint"  # @else / @elseif: printed one level up, level unchanged
    FLAT = "flat"          # no effect
    OPENER = "opener"      # opens a block: level incremented


def classify_directive(value: str, flat_directives: Collection[str] = DEFAULT_FLAT_DIRECTIVES) -> DirectiveKind:
    """
    Classify a control-block tag by its leading keyword.

    Args:
        value: Raw directive text (`@if(x)`, `@end`, `@!component(...)`, ...)
        flat_directives: Keywords that never open a block

    Returns:
        Directive kind
    """
    text = value.strip()
    m = _DIRECTIVE_HEAD_RE.match(text)
    if not m:
        return DirectiveKind.FLAT

    self_closing, keyword = bool(m.group(1)), m.group(2)
    if keyword.startswith("end"):
        return DirectiveKind.END
    if keyword in MIDPOINT_KEYWORDS:
        return DirectiveKind.MIDPOINT
    if self_closing or keyword in flat_directives or "(" not in text:
        return DirectiveKind.FLAT
    if is_self_contained_block(text, flat_directives):
        return DirectiveKind.FLAT
    return DirectiveKind.OPENER


__all__ = [
    "INLINE_TAGS",
    "VOID_TAGS",
    "DEFAULT_FLAT_DIRECTIVES",
    "is_inline",
    "is_void",
    "is_interpolation",
    "is_text_like",
    "is_inline_tag",
    "is_inline_compatible",
    "DirectiveKind",
    "classify_directive",
]
