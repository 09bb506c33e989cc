"""
Node model of a parsed Edge template.

Immutable node classes mirroring the tree emitted by the external parser,
plus `from_dict` to build that tree from the parser's JSON dump.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple

from .errors import TreeLoadError


class NodeType(enum.Enum):
    """Node kinds; values are the discriminators used by the parser dump."""
    DOCUMENT = "document"
    TEXT = "htmlText"
    LINEBREAK = "linebreak"
    OPENING_TAG = "openingTag"
    VOID_TAG = "voidTag"
    CLOSING_TAG = "closingTag"
    CONTROL_BLOCK = "edgeTag"
    MUSTACHE = "edgeMustache"
    ESCAPED_MUSTACHE = "edgeEscapedMustache"
    SAFE_MUSTACHE = "edgeSafeMustache"
    TEMPLATE_COMMENT = "edgeComment"
    HTML_COMMENT = "htmlComment"
    CONDITIONAL_COMMENT = "htmlConditionalComment"
    CDATA = "cdata"
    DOCTYPE = "dtd"
    PROCESSING_INSTRUCTION = "scriptlet"
    SCRIPT = "scriptElement"
    STYLE = "styleElement"
    # code between directives of a block restored inside script/style; never in parser dumps
    EMBEDDED_CODE = "embeddedCode"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Node:
    """Base class for all nodes of the template tree."""
    node_type: ClassVar[NodeType]

    @property
    def type(self) -> NodeType:
        return self.node_type


@dataclass(frozen=True)
class ValueNode(Node):
    """Node carrying one raw source span."""
    value: str
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Text(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.TEXT


@dataclass(frozen=True)
class LineBreak(ValueNode):
    value: str = "\n"
    node_type: ClassVar[NodeType] = NodeType.LINEBREAK


@dataclass(frozen=True)
class ControlBlockTag(ValueNode):
    """Template directive (`@if(...)`, `@else`, `@end`, `@include(...)`, ...)."""
    node_type: ClassVar[NodeType] = NodeType.CONTROL_BLOCK


@dataclass(frozen=True)
class Mustache(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.MUSTACHE


@dataclass(frozen=True)
class EscapedMustache(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.ESCAPED_MUSTACHE


@dataclass(frozen=True)
class SafeMustache(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.SAFE_MUSTACHE


@dataclass(frozen=True)
class TemplateComment(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.TEMPLATE_COMMENT


@dataclass(frozen=True)
class HtmlComment(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.HTML_COMMENT


@dataclass(frozen=True)
class ConditionalComment(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.CONDITIONAL_COMMENT


@dataclass(frozen=True)
class Cdata(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.CDATA


@dataclass(frozen=True)
class Doctype(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.DOCTYPE


@dataclass(frozen=True)
class ProcessingInstruction(ValueNode):
    node_type: ClassVar[NodeType] = NodeType.PROCESSING_INSTRUCTION


@dataclass(frozen=True)
class ScriptElement(ValueNode):
    """Whole `<script ...>...</script>` span as one opaque string."""
    node_type: ClassVar[NodeType] = NodeType.SCRIPT


@dataclass(frozen=True)
class StyleElement(ValueNode):
    """Whole `<style ...>...</style>` span as one opaque string."""
    node_type: ClassVar[NodeType] = NodeType.STYLE


@dataclass(frozen=True)
class EmbeddedCode(ValueNode):
    """Script or style lines between two directives; `value` keeps their original indentation."""
    node_type: ClassVar[NodeType] = NodeType.EMBEDDED_CODE


@dataclass(frozen=True)
class Attribute:
    name: str
    value: Optional[str] = None

    def render(self) -> str:
        return self.name if self.value is None else f"{self.name}={self.value}"


@dataclass(frozen=True)
class Prop:
    """Template construct used inside a tag: `{{ }}`, `{{{ }}}`, `@if(..)..@end`, `{{-- --}}`."""
    value: str


@dataclass(frozen=True)
class TagNode(Node):
    tag_name: str
    attributes: Tuple[Attribute, ...] = ()
    safe_mustaches: Tuple[Prop, ...] = ()
    mustaches: Tuple[Prop, ...] = ()
    tag_props: Tuple[Prop, ...] = ()
    comments: Tuple[Prop, ...] = ()
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class OpeningTag(TagNode):
    node_type: ClassVar[NodeType] = NodeType.OPENING_TAG


@dataclass(frozen=True)
class VoidTag(TagNode):
    node_type: ClassVar[NodeType] = NodeType.VOID_TAG


@dataclass(frozen=True)
class ClosingTag(Node):
    tag_name: str
    start: int = 0
    end: int = 0
    node_type: ClassVar[NodeType] = NodeType.CLOSING_TAG


@dataclass(frozen=True)
class Document(Node):
    children: Tuple[Node, ...] = ()
    start: int = 0
    end: int = 0
    node_type: ClassVar[NodeType] = NodeType.DOCUMENT


@dataclass(frozen=True)
class UnknownNode(Node):
    """Node of a type this printer does not know; `kind` keeps the raw discriminator."""
    kind: str
    start: int = 0
    end: int = 0
    node_type: ClassVar[NodeType] = NodeType.UNKNOWN


# Interpolation family
INTERPOLATION_TYPES = frozenset({
    NodeType.MUSTACHE,
    NodeType.ESCAPED_MUSTACHE,
    NodeType.SAFE_MUSTACHE,
})

# Raw values printed as-is, line by line
PASSTHROUGH_TYPES = frozenset({
    NodeType.DOCTYPE,
    NodeType.HTML_COMMENT,
    NodeType.CONDITIONAL_COMMENT,
    NodeType.CDATA,
    NodeType.PROCESSING_INSTRUCTION,
})


# --- Loading from the parser dump -------------------------------------------

_VALUE_NODES: Dict[NodeType, type] = {
    NodeType.TEXT: Text,
    NodeType.LINEBREAK: LineBreak,
    NodeType.CONTROL_BLOCK: ControlBlockTag,
    NodeType.MUSTACHE: Mustache,
    NodeType.ESCAPED_MUSTACHE: EscapedMustache,
    NodeType.SAFE_MUSTACHE: SafeMustache,
    NodeType.TEMPLATE_COMMENT: TemplateComment,
    NodeType.HTML_COMMENT: HtmlComment,
    NodeType.CONDITIONAL_COMMENT: ConditionalComment,
    NodeType.CDATA: Cdata,
    NodeType.DOCTYPE: Doctype,
    NodeType.PROCESSING_INSTRUCTION: ProcessingInstruction,
    NodeType.SCRIPT: ScriptElement,
    NodeType.STYLE: StyleElement,
}

_KNOWN_TYPES = {
    t.value: t for t in NodeType if t not in (NodeType.UNKNOWN, NodeType.EMBEDDED_CODE)
}


def from_dict(data: Mapping[str, Any]) -> Node:
    """
    Build a typed node tree from the parser's dict/JSON representation.

    Args:
        data: Mapping with a `type` discriminator (and `children` for documents)

    Returns:
        Root node of the tree

    Raises:
        TreeLoadError: If the structure is malformed
    """
    return _load_node(data, "$")


def _load_node(data: Any, path: str) -> Node:
    if not isinstance(data, Mapping):
        raise TreeLoadError(f"{path}: expected an object, got {type(data).__name__}")

    raw_type = data.get("type")
    if not isinstance(raw_type, str):
        raise TreeLoadError(f"{path}: missing node type")

    start = _int_field(data, "start", path)
    end = _int_field(data, "end", path)

    node_type = _KNOWN_TYPES.get(raw_type)
    if node_type is None:
        return UnknownNode(kind=raw_type, start=start, end=end)

    if node_type is NodeType.DOCUMENT:
        children = data.get("children")
        if children is None:
            children = []
        if not isinstance(children, list):
            raise TreeLoadError(f"{path}.children: expected a list")
        return Document(
            children=tuple(_load_node(child, f"{path}.children[{i}]") for i, child in enumerate(children)),
            start=start,
            end=end,
        )

    if node_type is NodeType.CLOSING_TAG:
        return ClosingTag(tag_name=_str_field(data, "tagName", path), start=start, end=end)

    if node_type in (NodeType.OPENING_TAG, NodeType.VOID_TAG):
        cls = OpeningTag if node_type is NodeType.OPENING_TAG else VoidTag
        return cls(
            tag_name=_str_field(data, "tagName", path),
            attributes=tuple(
                _load_attribute(item, f"{path}.attributes[{i}]")
                for i, item in enumerate(_list_field(data, "attributes", path))
            ),
            safe_mustaches=_load_props(data, "edgeSafeMustaches", path),
            # Older parser releases put plain mustaches under `edgeProps`
            mustaches=_load_props(data, "edgeProps", path) + _load_props(data, "edgeMustaches", path),
            tag_props=_load_props(data, "edgeTagProps", path),
            comments=_load_props(data, "comments", path),
            start=start,
            end=end,
        )

    value_cls: Callable[..., Node] = _VALUE_NODES[node_type]
    if node_type is NodeType.LINEBREAK and data.get("value") is None:
        return LineBreak(start=start, end=end)
    return value_cls(value=_str_field(data, "value", path), start=start, end=end)


def _load_attribute(data: Any, path: str) -> Attribute:
    if not isinstance(data, Mapping):
        raise TreeLoadError(f"{path}: expected an object")
    value = data.get("attributeValue")
    if value is not None and not isinstance(value, str):
        raise TreeLoadError(f"{path}.attributeValue: expected a string")
    return Attribute(name=_str_field(data, "attributeName", path), value=value or None)


def _load_props(data: Mapping[str, Any], key: str, path: str) -> Tuple[Prop, ...]:
    props = []
    for i, item in enumerate(_list_field(data, key, path)):
        if not isinstance(item, Mapping):
            raise TreeLoadError(f"{path}.{key}[{i}]: expected an object")
        props.append(Prop(value=_str_field(item, "value", f"{path}.{key}[{i}]")))
    return tuple(props)


def _list_field(data: Mapping[str, Any], key: str, path: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TreeLoadError(f"{path}.{key}: expected a list")
    return value


def _str_field(data: Mapping[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise TreeLoadError(f"{path}.{key}: expected a string")
    return value


def _int_field(data: Mapping[str, Any], key: str, path: str) -> int:
    value = data.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TreeLoadError(f"{path}.{key}: expected an integer offset")
    return value


__all__ = [
    "NodeType",
    "Node",
    "ValueNode",
    "Text",
    "LineBreak",
    "ControlBlockTag",
    "Mustache",
    "EscapedMustache",
    "SafeMustache",
    "TemplateComment",
    "HtmlComment",
    "ConditionalComment",
    "Cdata",
    "Doctype",
    "ProcessingInstruction",
    "ScriptElement",
    "StyleElement",
    "EmbeddedCode",
    "Attribute",
    "Prop",
    "TagNode",
    "OpeningTag",
    "VoidTag",
    "ClosingTag",
    "Document",
    "UnknownNode",
    "INTERPOLATION_TYPES",
    "PASSTHROUGH_TYPES",
    "from_dict",
]
