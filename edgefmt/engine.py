from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .nodes import Node, from_dict
from .options import FormatOptions
from .printer import Printer

logger = logging.getLogger(__name__)

OptionsLike = Union[FormatOptions, Mapping[str, Any], None]


def _coerce_options(options: OptionsLike) -> FormatOptions:
    if options is None:
        return FormatOptions()
    if isinstance(options, FormatOptions):
        return options
    return FormatOptions.from_dict(options)


def format_tree(
    tree: Node,
    options: OptionsLike = None,
    *,
    css_formatter=None,
    js_formatter=None,
) -> str:
    """
    Pretty-print a parsed template tree.

    Args:
        tree: Document root (or any single node)
        options: FormatOptions or a host-style option mapping
        css_formatter: Style-sheet collaborator override
        js_formatter: Script collaborator override

    Returns:
        Canonical rendering of the tree

    Raises:
        EdgeFmtError: Structural, foreign-formatter or option errors (no partial output)
    """
    opts = _coerce_options(options)
    printer = Printer(opts, css_formatter=css_formatter, js_formatter=js_formatter)
    result = printer.print_root(tree)
    logger.debug("formatted %s into %d chars", tree.type.value, len(result))
    return result


def format_data(
    data: Mapping[str, Any],
    options: OptionsLike = None,
    *,
    css_formatter=None,
    js_formatter=None,
) -> str:
    """Pretty-print a tree given as the parser's dict/JSON dump."""
    return format_tree(from_dict(data), options, css_formatter=css_formatter, js_formatter=js_formatter)


__all__ = ["format_tree", "format_data"]
