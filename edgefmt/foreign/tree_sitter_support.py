"""
Tree-sitter infrastructure for embedded languages.
Provides grammar loading and syntax error lookup over the parsed tree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from tree_sitter import Language, Node, Parser, Tree

from ..errors import SyntaxDiagnostic


class TreeSitterDocument(ABC):
    """
    Wrapper for a Tree-sitter parsed document.
    """

    def __init__(self, text: str):
        self.text = text
        self.tree: Optional[Tree] = None
        self._text_bytes = text.encode("utf-8")
        self._parse()

    @abstractmethod
    def get_language(self) -> Language:
        """
        Get Language instance for the grammar.

        Returns:
            Language instance
        """
        pass

    def get_parser(self) -> Parser:
        """
        Get parser for the language.

        Returns:
            Parser instance
        """
        return Parser(self.get_language())

    def _parse(self):
        """Parse the document with Tree-sitter."""
        parser = self.get_parser()
        self.tree = parser.parse(self._text_bytes)

    @property
    def root_node(self) -> Node:
        """Get the root node of the parsed tree."""
        if not self.tree:
            raise RuntimeError("Document not parsed")
        return self.tree.root_node

    def walk_tree(self, start_node: Optional[Node] = None) -> Iterator[Node]:
        """
        Walk the tree using TreeCursor for efficient traversal.

        Args:
            start_node: Node to start from (default: root)

        Yields:
            Node objects in depth-first order
        """
        if start_node is None:
            start_node = self.root_node

        cursor = start_node.walk()
        visited_children = False

        while True:
            if not visited_children:
                yield cursor.node

                if not cursor.goto_first_child():
                    visited_children = True
            elif cursor.goto_next_sibling():
                visited_children = False
            elif not cursor.goto_parent():
                break
            else:
                visited_children = True

    def get_node_text(self, node: Node) -> str:
        """Get text content for a node."""
        return self._text_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def first_error(self) -> Optional[SyntaxDiagnostic]:
        """
        Locate the first syntax error in document order.

        Returns:
            Diagnostic for the first ERROR or MISSING node, None for a clean tree
        """
        if not self.root_node.has_error:
            return None

        for node in self.walk_tree():
            if node.is_missing:
                message = f"missing {node.type!r}"
            elif node.is_error:
                snippet = self.get_node_text(node).strip().splitlines()
                message = f"unexpected {snippet[0][:40]!r}" if snippet else "unexpected input"
            else:
                continue
            row, column = node.start_point[0], node.start_point[1]
            return SyntaxDiagnostic(line=row + 1, column=column + 1, message=message)

        return SyntaxDiagnostic(line=1, column=1, message="syntax error")
