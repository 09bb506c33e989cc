"""
Shared test infrastructure for edgefmt.

Modules:
- node_builders: Shorthand constructors for template trees
- formatter_stubs: Deterministic foreign formatters
"""

from .node_builders import (
    attr, close, comment, doc, edge, escaped, lb, lbs, mustache, props, safe, tag, text, void,
)
from .formatter_stubs import DroppingFormatter, FailingFormatter, StubCssFormatter, StubJsFormatter

__all__ = [
    # Node builders
    "attr", "close", "comment", "doc", "edge", "escaped", "lb", "lbs", "mustache", "props",
    "safe", "tag", "text", "void",

    # Formatter stubs
    "StubCssFormatter", "StubJsFormatter", "FailingFormatter", "DroppingFormatter",
]
