"""
Reformatting of <script> and <style> bodies that contain template syntax.

Template spans are hidden behind placeholders, the body goes through the
foreign formatter, then the spans come back: interpolations and single-line
directives verbatim, control blocks re-rendered by a separately scoped
printer at the indentation of the line that held them.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Sequence, Tuple

from ..errors import ForeignFormatterError, StructuralParseError
from ..foreign.comment_style import C_STYLE_COMMENTS, CSS_COMMENTS, CommentStyle
from ..foreign.javascript import BeautifyFlags
from ..indent import IndentTracker
from ..nodes import ControlBlockTag, EmbeddedCode, Node, NodeType, ValueNode
from ..options import FormatOptions
from .placeholders import Extraction, ExtractionCategory, PlaceholderTable
from .scanner import CSS_AT_RULES, find_blocks, find_single_line, iter_directives

logger = logging.getLogger(__name__)

# Renders template nodes at an absolute indentation level
FragmentRenderer = Callable[[Sequence[Node], int], str]

_SELF_CLOSING_RE = re.compile(r"^\s*<(script|style)\b[^>]*/>\s*$", re.IGNORECASE)
_ELEMENT_RE = re.compile(r"^\s*<(script|style)\b([^>]*)>([\s\S]*?)</\1\s*>\s*$", re.IGNORECASE)
_TYPE_ATTR_RE = re.compile(r"""\btype\s*=\s*(["']?)([^"'\s>]*)\1""", re.IGNORECASE)

_SAFE_MUSTACHE_RE = re.compile(r"\{\{\{[\s\S]*?\}\}\}")
_MUSTACHE_RE = re.compile(r"\{\{--[\s\S]*?--\}\}|@?\{\{[\s\S]*?\}\}")

JAVASCRIPT_TYPES = frozenset({
    "",
    "module",
    "text/javascript",
    "application/javascript",
    "text/ecmascript",
    "application/ecmascript",
})

# element kind -> (language name, comment markers)
_LANGUAGES = {
    "script": ("javascript", C_STYLE_COMMENTS),
    "style": ("css", CSS_COMMENTS),
}


def is_javascript(attributes: str) -> bool:
    """Whether a script tag's attribute text declares JavaScript (or nothing)."""
    m = _TYPE_ATTR_RE.search(attributes)
    return m is None or m.group(2).lower() in JAVASCRIPT_TYPES


def split_block(source: str) -> List[Node]:
    """
    Split a control-block span into directive and code nodes.

    Every directive (openers, midpoints, end markers, single-line forms)
    becomes a ControlBlockTag; the code between them (CSS at-rules included)
    becomes EmbeddedCode with blank edge lines dropped and inner
    indentation kept.
    """
    nodes: List[Node] = []
    pos = 0
    for match in iter_directives(source):
        if match.keyword.lower() in CSS_AT_RULES:
            continue
        _append_code(nodes, source[pos:match.start])
        nodes.append(ControlBlockTag(value=source[match.start:match.end]))
        pos = match.end
    _append_code(nodes, source[pos:])
    return nodes


def _append_code(nodes: List[Node], chunk: str) -> None:
    lines = [line.rstrip() for line in chunk.split("\n")]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    if lines:
        nodes.append(EmbeddedCode(value="\n".join(lines)))


def _spans(pattern: re.Pattern, text: str) -> List[Tuple[int, int]]:
    return [m.span() for m in pattern.finditer(text)]


class EmbeddedExtractor:
    """
    Formatter of script and style elements for one printer.

    Args:
        options: Layout options of the format call
        tracker: Indent tracker of the owning printer (unit and level math)
        css_formatter: Object with `format(source, indent_unit) -> str`
        js_formatter: Object with `format(source, indent_size, flags) -> str`
        render_fragment: Renders extracted template nodes at a given level
    """

    def __init__(
        self,
        options: FormatOptions,
        tracker: IndentTracker,
        *,
        css_formatter,
        js_formatter,
        render_fragment: FragmentRenderer,
    ):
        self.options = options
        self.tracker = tracker
        self.css_formatter = css_formatter
        self.js_formatter = js_formatter
        self.render_fragment = render_fragment

    def format(self, node: ValueNode, depth: int) -> str:
        """
        Format one script/style element whose tag sits at `depth`.

        Returns:
            The element without a trailing newline

        Raises:
            StructuralParseError: If the value is not a `<tag ...>...</tag>` element
            ForeignFormatterError: If the foreign formatter rejects the body
                or drops a placeholder
        """
        kind = "script" if node.type is NodeType.SCRIPT else "style"
        tag_indent = self.tracker.at(depth)
        value = node.value

        if _SELF_CLOSING_RE.match(value):
            return tag_indent + value.strip()

        m = _ELEMENT_RE.match(value)
        if not m or m.group(1).lower() != kind:
            raise StructuralParseError(kind, node.start, node.end, value.strip())

        name, attributes, body = m.groups()
        if not body.strip() or (kind == "script" and not is_javascript(attributes)):
            return tag_indent + value.strip()

        content = self._format_body(kind, body.strip(), self.tracker.at(depth + 1))
        return f"{tag_indent}<{name}{attributes}>\n{content}\n{tag_indent}</{name}>"

    # --- pipeline ------------------------------------------------------------

    def _format_body(self, kind: str, body: str, content_indent: str) -> str:
        language, comment_style = _LANGUAGES[kind]
        table, hidden = self.extract(body, comment_style)
        logger.debug("%s: %d template span(s) hidden", language, len(table))

        formatted = self._run_formatter(kind, hidden)
        indented = "\n".join(
            content_indent + line.rstrip() if line.strip() else ""
            for line in formatted.split("\n")
        )
        return self.restore(indented, table, language)

    def extract(self, body: str, comment_style: CommentStyle) -> Tuple[PlaceholderTable, str]:
        """
        Hide template spans of `body` in fixed order: triple mustaches,
        mustaches and comments, control blocks, single-line directives.
        """
        flat = self.options.flat_directives
        table = PlaceholderTable(body, comment_style)

        text = table.substitute(body, _spans(_SAFE_MUSTACHE_RE, body), ExtractionCategory.SAFE_MUSTACHE)
        text = table.substitute(text, _spans(_MUSTACHE_RE, text), ExtractionCategory.MUSTACHE)
        text = table.substitute(text, find_blocks(text, flat), ExtractionCategory.BLOCK)
        text = table.substitute(
            text,
            [(d.start, d.end) for d in find_single_line(text, flat)],
            ExtractionCategory.DIRECTIVE,
        )
        return table, text

    def _run_formatter(self, kind: str, source: str) -> str:
        if kind == "style":
            return self.css_formatter.format(source, self.tracker.unit)
        flags = BeautifyFlags(use_tabs=self.options.use_tabs)
        return self.js_formatter.format(source, self.options.tab_width, flags)

    def restore(self, text: str, table: PlaceholderTable, language: str) -> str:
        """Replay the extraction records by index against the formatted text."""
        for record in table.live_records():
            if record.token not in text:
                raise ForeignFormatterError(
                    language,
                    f"template placeholder #{record.index} ({record.category.value}) "
                    f"was lost during formatting",
                )
            if record.category is ExtractionCategory.BLOCK:
                text = self._restore_block(text, record)
            else:
                text = text.replace(record.token, record.original, 1)
        return text

    def _restore_block(self, text: str, record: Extraction) -> str:
        lines = text.split("\n")
        for i, line in enumerate(lines):
            col = line.find(record.token)
            if col < 0:
                continue

            leading = line[:len(line) - len(line.lstrip())]
            level = self.tracker.level_of(leading)
            rendered = self.render_fragment(split_block(record.original), level).rstrip("\n")

            if line.strip() == record.token:
                lines[i] = rendered
            else:
                lines[i] = line.replace(record.token, rendered.lstrip(), 1)
            break
        return "\n".join(lines)


__all__ = [
    "JAVASCRIPT_TYPES",
    "EmbeddedExtractor",
    "FragmentRenderer",
    "is_javascript",
    "split_block",
]
