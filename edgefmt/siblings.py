"""
Pre-pass over a child sequence: line-break capping and sibling windows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .nodes import Node, NodeType

MAX_CONSECUTIVE_LINE_BREAKS = 2


@dataclass(frozen=True)
class SiblingWindow:
    """A node together with its immediate neighbours in the filtered sequence."""
    node: Node
    previous: Optional[Node] = None
    next: Optional[Node] = None


def filter_line_breaks(nodes: Iterable[Node], limit: int = MAX_CONSECUTIVE_LINE_BREAKS) -> List[Node]:
    """
    Drop line breaks beyond `limit` in every run, and all line breaks
    at the start and the end of the sequence.

    The counter is local to the call, so filtering one sequence never
    affects another.
    """
    result: List[Node] = []
    run = 0
    for node in nodes:
        if node.type is NodeType.LINEBREAK:
            run += 1
            if run > limit or not result:
                continue
        else:
            run = 0
        result.append(node)

    while result and result[-1].type is NodeType.LINEBREAK:
        result.pop()
    return result


def sibling_windows(nodes: Sequence[Node]) -> List[SiblingWindow]:
    """Compute the (previous, node, next) window of every node once."""
    last = len(nodes) - 1
    return [
        SiblingWindow(
            node=node,
            previous=nodes[i - 1] if i > 0 else None,
            next=nodes[i + 1] if i < last else None,
        )
        for i, node in enumerate(nodes)
    ]


__all__ = [
    "MAX_CONSECUTIVE_LINE_BREAKS",
    "SiblingWindow",
    "filter_line_breaks",
    "sibling_windows",
]
