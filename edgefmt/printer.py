"""
Printer: the recursive tree walker producing the canonical rendering.

Each node is printed from its (previous, node, next) sibling window. A node
decides its own leading indentation and its own line ending; two neighbours
share a line exactly when both are inline-compatible (text, interpolation
or an inline tag), and the left one then supplies the separating space.
"""

from __future__ import annotations

import logging
import textwrap
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .classify import (
    DirectiveKind,
    classify_directive,
    is_inline,
    is_inline_compatible,
    is_void,
)
from .embedded.extractor import EmbeddedExtractor
from .foreign.css import CssFormatter
from .foreign.javascript import JavaScriptFormatter
from .indent import IndentAdjustment, IndentTracker
from .nodes import (
    ClosingTag,
    Document,
    EmbeddedCode,
    Node,
    NodeType,
    PASSTHROUGH_TYPES,
    TagNode,
    Text,
    UnknownNode,
    ValueNode,
)
from .options import FormatOptions
from .siblings import SiblingWindow, filter_line_breaks, sibling_windows
from .spacing import (
    add_comment_spacing,
    add_mustache_spacing,
    add_safe_mustache_spacing,
    reindent_comment,
)

logger = logging.getLogger(__name__)

# Text starting with one of these hugs the preceding interpolation or tag
CLOSING_PUNCTUATION = frozenset(".,;:!?)]}")


class Printer:
    """
    Stateful walker for one format call.

    Args:
        options: Layout options (defaults when omitted)
        css_formatter: Style-sheet collaborator (cssbeautifier-backed by default)
        js_formatter: Script collaborator (jsbeautifier-backed by default)
    """

    def __init__(
        self,
        options: Optional[FormatOptions] = None,
        *,
        css_formatter=None,
        js_formatter=None,
    ):
        self.options = options or FormatOptions()
        self.tracker = IndentTracker(use_tabs=self.options.use_tabs, tab_width=self.options.tab_width)
        self.css_formatter = css_formatter if css_formatter is not None else CssFormatter()
        self.js_formatter = js_formatter if js_formatter is not None else JavaScriptFormatter()
        self.embedded = EmbeddedExtractor(
            self.options,
            self.tracker,
            css_formatter=self.css_formatter,
            js_formatter=self.js_formatter,
            render_fragment=self._render_fragment,
        )

    # --- entry points ----------------------------------------------------------

    def print_root(self, node: Node) -> str:
        """Print a document, or a lone node with no siblings."""
        if isinstance(node, Document):
            return self.print_document(node)
        self.tracker.reset()
        return self.print_node(SiblingWindow(node=node))

    def print_document(self, document: Document) -> str:
        self.tracker.reset()
        return self.print_sequence(document.children)

    def print_fragment(self, nodes: Sequence[Node], level: int) -> str:
        """Print a node sequence starting at an absolute indentation level."""
        self.tracker.reset(level)
        return self.print_sequence(nodes)

    def print_sequence(self, nodes: Sequence[Node]) -> str:
        # void closing tags are dropped before the windows are built
        kept = [n for n in nodes if not (isinstance(n, ClosingTag) and is_void(n.tag_name))]
        out: List[str] = []
        for window in sibling_windows(filter_line_breaks(kept)):
            out.append(self.print_node(window))
        return "".join(out)

    def print_node(self, window: SiblingWindow) -> str:
        return _HANDLERS[window.node.type](self, window)

    def _render_fragment(self, nodes: Sequence[Node], level: int) -> str:
        # Fresh printer: the fragment never touches this walker's level counter
        nested = Printer(self.options, css_formatter=self.css_formatter, js_formatter=self.js_formatter)
        return nested.print_fragment(nodes, level)

    # --- shared helpers --------------------------------------------------------

    def _lead(self, previous: Optional[Node]) -> str:
        """Indent for a flowing node, empty when it continues the previous node's line."""
        return "" if is_inline_compatible(previous) else self.tracker.indent()

    def _trail(self, next_node: Optional[Node]) -> str:
        """Line ending for an interpolation or inline tag."""
        if not is_inline_compatible(next_node):
            return "\n"
        if isinstance(next_node, Text) and _starts_with_spaced_word(next_node.value):
            return " "
        return ""

    # --- handlers --------------------------------------------------------------

    def _print_document(self, w: SiblingWindow) -> str:
        return self.print_document(w.node)

    def _print_passthrough(self, w: SiblingWindow) -> str:
        node: ValueNode = w.node
        indent = self.tracker.indent()
        first, *rest = node.value.strip().split("\n")

        lines = [first.strip() if node.type is NodeType.PROCESSING_INSTRUCTION else indent + first.strip()]
        if rest:
            for line in textwrap.dedent("\n".join(rest)).split("\n"):
                lines.append(indent + line.rstrip() if line.strip() else "")
        return "\n".join(lines) + "\n"

    def _print_template_comment(self, w: SiblingWindow) -> str:
        indent = self.tracker.indent()
        value = add_comment_spacing(w.node.value.strip())
        return reindent_comment(value, indent, indent + self.tracker.unit) + "\n"

    def _print_tag(self, w: SiblingWindow) -> str:
        node: TagNode = w.node
        void = node.type is NodeType.VOID_TAG or is_void(node.tag_name)
        inline = is_inline(node.tag_name)

        indent = self.tracker.indent(adjust=IndentAdjustment.NONE if void else IndentAdjustment.INCREASE)
        lead = "" if inline and is_inline_compatible(w.previous) else indent
        trail = self._trail(w.next) if inline else "\n"

        return lead + self._layout_tag(node, indent, void) + trail

    def _layout_tag(self, node: TagNode, indent: str, void: bool) -> str:
        items = _tag_items(node)
        close = "/>" if void else ">"

        if not items:
            return f"<{node.tag_name} />" if void else f"<{node.tag_name}>"

        single = " ".join(items)
        explode = (
            len(single) > self.options.print_width
            or any("\n" in item for item in items)
            or (self.options.single_attribute_per_line and len(items) > 1)
        )
        if not explode:
            return f"<{node.tag_name} {single}{' ' if void else ''}{close}"

        inner = indent + self.tracker.unit
        lines = [f"<{node.tag_name}"]
        lines.extend(_rebase(item, inner) for item in items)
        lines.append(f"{indent}{close}")
        return "\n".join(lines)

    def _print_closing_tag(self, w: SiblingWindow) -> str:
        node: ClosingTag = w.node
        if is_void(node.tag_name):
            return ""

        inline = is_inline(node.tag_name)
        indent = self.tracker.indent(self.tracker.level - 1, IndentAdjustment.DECREASE)
        lead = "" if inline and is_inline_compatible(w.previous) else indent
        trail = self._trail(w.next) if inline else "\n"
        return f"{lead}</{node.tag_name}>{trail}"

    def _print_control_block(self, w: SiblingWindow) -> str:
        node: ValueNode = w.node
        kind = classify_directive(node.value, self.options.flat_directives)
        level = self.tracker.level

        if kind is DirectiveKind.END:
            indent = self.tracker.indent(level - 1, IndentAdjustment.DECREASE)
        elif kind is DirectiveKind.MIDPOINT:
            indent = self.tracker.indent(level - 1)
        elif kind is DirectiveKind.OPENER:
            indent = self.tracker.indent(adjust=IndentAdjustment.INCREASE)
        else:
            indent = self.tracker.indent()

        trail = "" if w.next is not None and w.next.type is NodeType.LINEBREAK else "\n"
        return self._directive_lines(node.value, indent) + trail

    def _directive_lines(self, value: str, indent: str) -> str:
        """
        Re-indent a (possibly multi-line) directive: continuation lines keep
        their depth relative to the first line, never shallower than the
        directive itself; the last line closes at the directive's indent.
        """
        lines = value.strip("\n").split("\n")
        if len(lines) == 1:
            return indent + lines[0].strip()

        base = _leading_width(lines[0], self.tracker)
        min_width = self.tracker.width(indent)
        out = [indent + lines[0].strip()]
        for line in lines[1:-1]:
            if not line.strip():
                out.append("")
                continue
            extra = max(0, _leading_width(line, self.tracker) - base - min_width)
            out.append(indent + " " * extra + line.strip())
        out.append(indent + lines[-1].strip())
        return "\n".join(out)

    def _print_mustache(self, w: SiblingWindow) -> str:
        node: ValueNode = w.node
        value = node.value.strip()
        if node.type is NodeType.SAFE_MUSTACHE:
            value = add_safe_mustache_spacing(value)
        else:
            value = add_mustache_spacing(value)
        return self._lead(w.previous) + value + self._trail(w.next)

    def _print_text(self, w: SiblingWindow) -> str:
        node: Text = w.node
        joins_previous = is_inline_compatible(w.previous)
        joins_next = is_inline_compatible(w.next)

        if not node.value.strip():
            if joins_previous and joins_next:
                return " "
            if joins_previous:
                return "\n"
            if joins_next:
                return self.tracker.indent()
            return ""

        indent = self.tracker.indent()
        lines = [line.strip() for line in node.value.strip().split("\n")]
        out = [lines[0] if joins_previous else indent + lines[0]]
        out.extend(indent + line if line else "" for line in lines[1:])

        if not joins_next:
            trail = "\n"
        elif node.value[-1:].isspace():
            trail = " "
        else:
            trail = ""
        return "\n".join(out) + trail

    def _print_line_break(self, w: SiblingWindow) -> str:
        previous = w.previous
        if previous is not None and previous.type in (NodeType.LINEBREAK, NodeType.CONTROL_BLOCK):
            return w.node.value
        return ""

    def _print_embedded(self, w: SiblingWindow) -> str:
        return self.embedded.format(w.node, self.tracker.level) + "\n"

    def _print_embedded_code(self, w: SiblingWindow) -> str:
        node: EmbeddedCode = w.node
        indent = self.tracker.indent()
        lines = [
            indent + self.tracker.at(depth) + line if line else ""
            for depth, line in _relative_depths(node.value, self.tracker)
        ]
        return "\n".join(lines) + "\n"

    def _print_unknown(self, w: SiblingWindow) -> str:
        node: UnknownNode = w.node
        logger.warning("Skipping node of unknown type %r at %d:%d", node.kind, node.start, node.end)
        return ""


# --- helpers -----------------------------------------------------------------

def _starts_with_spaced_word(value: str) -> bool:
    """Text that begins with whitespace followed by a word (not closing punctuation)."""
    stripped = value.lstrip()
    return bool(stripped) and value[:1].isspace() and stripped[0] not in CLOSING_PUNCTUATION


def _leading_width(line: str, tracker: IndentTracker) -> int:
    return tracker.width(line[:len(line) - len(line.lstrip())])


def _relative_depths(value: str, tracker: IndentTracker) -> List[Tuple[int, str]]:
    """
    Stripped lines of a code chunk with their nesting depth.

    Depth is counted from the shallowest line, in steps of the smallest
    indentation increase found in the chunk.
    """
    lines = value.split("\n")
    widths = [_leading_width(line, tracker) if line.strip() else None for line in lines]
    present = [width for width in widths if width is not None]
    base = min(present, default=0)
    step = min((width - base for width in present if width > base), default=1)
    return [
        (0 if width is None else (width - base) // step, line.strip())
        for width, line in zip(widths, lines)
    ]


def _tag_items(node: TagNode) -> List[str]:
    """Tag items in print order: attributes, {{{ }}}, {{ }}, control props, comments."""
    items = [attr.render() for attr in node.attributes]
    items.extend(add_safe_mustache_spacing(p.value.strip()) for p in node.safe_mustaches)
    items.extend(add_mustache_spacing(p.value.strip()) for p in node.mustaches)
    items.extend(p.value.strip() for p in node.tag_props)
    items.extend(add_comment_spacing(p.value.strip()) for p in node.comments)
    return [item for item in items if item]


def _rebase(item: str, indent: str) -> str:
    """Place an item at `indent`; continuation lines keep their relative depth."""
    first, *rest = item.split("\n")
    lines = [indent + first.strip()]
    if rest:
        for line in textwrap.dedent("\n".join(rest)).split("\n"):
            lines.append(indent + line.rstrip() if line.strip() else "")
    return "\n".join(lines)


# --- dispatch ------------------------------------------------------------------

_HANDLERS: Dict[NodeType, Callable[[Printer, SiblingWindow], str]] = {
    NodeType.DOCUMENT: Printer._print_document,
    NodeType.TEXT: Printer._print_text,
    NodeType.LINEBREAK: Printer._print_line_break,
    NodeType.OPENING_TAG: Printer._print_tag,
    NodeType.VOID_TAG: Printer._print_tag,
    NodeType.CLOSING_TAG: Printer._print_closing_tag,
    NodeType.CONTROL_BLOCK: Printer._print_control_block,
    NodeType.MUSTACHE: Printer._print_mustache,
    NodeType.ESCAPED_MUSTACHE: Printer._print_mustache,
    NodeType.SAFE_MUSTACHE: Printer._print_mustache,
    NodeType.TEMPLATE_COMMENT: Printer._print_template_comment,
    NodeType.SCRIPT: Printer._print_embedded,
    NodeType.STYLE: Printer._print_embedded,
    NodeType.EMBEDDED_CODE: Printer._print_embedded_code,
    **{t: Printer._print_passthrough for t in PASSTHROUGH_TYPES},
    NodeType.UNKNOWN: Printer._print_unknown,
}

_missing = [t.name for t in NodeType if t not in _HANDLERS]
if _missing:
    raise TypeError(f"Printer has no handler for node type(s): {', '.join(_missing)}")


__all__ = ["Printer", "CLOSING_PUNCTUATION"]
