"""Serialize a document tree to an HTML string.

Each known node type maps to exactly one HTML fragment. Unknown types
contribute only their children's output.
"""

from __future__ import annotations

from html import escape

from storyfeed.document.models import (
    BlockNode,
    BlockType,
    Document,
    InlineNode,
    InlineType,
    MarkNode,
    MarkType,
    Node,
    TextNode,
)

BLOCK_TAGS: dict[BlockType, str] = {
    BlockType.PARAGRAPH: "p",
    BlockType.BLOCK_QUOTE: "blockquote",
    BlockType.LIST_ITEM: "li",
    BlockType.NUMBERED_LIST: "ol",
    BlockType.BULLETED_LIST: "ul",
    BlockType.HEADING_ONE: "h1",
    BlockType.HEADING_TWO: "h2",
    BlockType.HEADING_THREE: "h3",
}

MARK_TAGS: dict[MarkType, str] = {
    MarkType.BOLD: "strong",
    MarkType.ITALIC: "em",
    MarkType.UNDERLINED: "u",
}


def serialize(document: Document) -> str:
    """Serialize a document to HTML."""
    return _serialize_nodes(document.nodes)


def element(tag: str, attrs: dict[str, str], inner: str = "", *, void: bool = False) -> str:
    """Render one element. Attribute values are escaped; empty ones dropped."""
    rendered = "".join(
        f' {name}="{escape(value, quote=True)}"' for name, value in attrs.items() if value
    )
    if void:
        return f"<{tag}{rendered}>"
    return f"<{tag}{rendered}>{inner}</{tag}>"


def _serialize_nodes(nodes: tuple[Node, ...]) -> str:
    return "".join(_serialize_node(node) for node in nodes)


def _serialize_node(node: Node) -> str:
    if isinstance(node, TextNode):
        return escape(node.text, quote=False)
    if isinstance(node, BlockNode):
        return _serialize_block(node)
    if isinstance(node, MarkNode):
        inner = _serialize_nodes(node.nodes)
        tag = MARK_TAGS.get(node.mark_type)
        return element(tag, {}, inner) if tag else inner
    if isinstance(node, InlineNode):
        inner = _serialize_nodes(node.nodes)
        if node.inline_type == InlineType.LINK:
            return element("a", {"href": _attr(node.data.get("href"))}, inner)
        return inner
    raise TypeError(f"Not a document node: {node!r}")


def _serialize_block(node: BlockNode) -> str:
    if node.block_type == BlockType.IMAGE:
        return element("img", {"src": _attr(node.data.get("src"))}, void=True)

    inner = _serialize_nodes(node.nodes)
    tag = BLOCK_TAGS.get(node.block_type)
    if tag is None:
        return inner
    attrs: dict[str, str] = {}
    if node.block_type == BlockType.PARAGRAPH:
        attrs["class"] = _attr(node.data.get("className"))
    return element(tag, attrs, inner)


def _attr(value: object) -> str:
    return "" if value is None else str(value)
