"""Decode stored editor JSON into a document tree.

The editor has written two generations of its value format. Older
documents tag nodes with ``kind`` and split text into ``ranges``; newer
ones use ``object`` and ``leaves``, and the newest put ``text`` and
``marks`` straight on the text node. All of them decode to the same tree.
"""

from __future__ import annotations

import json
from typing import Any

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
    coerce_type,
)
from storyfeed.errors import DocumentDecodeError

# Deeper trees are rejected before any recursive pass can overflow the stack
MAX_DEPTH = 100


def decode_document(content: str | dict[str, Any] | list[Any] | None) -> Document:
    """Decode stored story content into a Document.

    Args:
        content: JSON string, or an already-parsed value, document or
            node list. Empty content decodes to an empty document.

    Returns:
        The decoded Document.

    Raises:
        DocumentDecodeError: If the content is not JSON or not a tree.
    """
    if content is None or content == "":
        return Document()

    raw: Any = content
    if isinstance(content, str):
        try:
            raw = json.loads(content)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise DocumentDecodeError(f"Story content is not JSON: {exc}") from exc

    if isinstance(raw, dict) and "document" in raw:
        raw = raw["document"]
    if isinstance(raw, dict):
        raw = raw.get("nodes", [])
    if not isinstance(raw, list):
        raise DocumentDecodeError(
            f"Story content has no node list (got {type(raw).__name__})"
        )

    return Document(nodes=_decode_nodes(raw, depth=1))


def _decode_nodes(raw_nodes: list[Any], depth: int) -> tuple[Node, ...]:
    if depth > MAX_DEPTH:
        raise DocumentDecodeError(f"Story content nests deeper than {MAX_DEPTH} levels")
    nodes: list[Node] = []
    for raw in raw_nodes:
        nodes.extend(_decode_node(raw, depth))
    return tuple(nodes)


def _node_kind(raw: dict[str, Any]) -> str:
    kind = raw.get("object") or raw.get("kind")
    if kind:
        return kind
    # Untagged nodes: text has "text"/"leaves", everything else is a block
    if "text" in raw or "leaves" in raw or "ranges" in raw:
        return "text"
    return "block"


def _children(raw: dict[str, Any], depth: int) -> tuple[Node, ...]:
    children = raw.get("nodes") or []
    if not isinstance(children, list):
        raise DocumentDecodeError("Node children must be a list")
    return _decode_nodes(children, depth + 1)


def _data(raw: dict[str, Any]) -> dict[str, Any]:
    data = raw.get("data") or {}
    if not isinstance(data, dict):
        raise DocumentDecodeError("Node data must be an object")
    return dict(data)


def _decode_node(raw: Any, depth: int) -> list[Node]:
    if not isinstance(raw, dict):
        raise DocumentDecodeError(f"Expected a node object, got {type(raw).__name__}")

    kind = _node_kind(raw)
    if kind == "text":
        return _decode_text(raw)
    if kind == "block":
        return [
            BlockNode(
                block_type=coerce_type(str(raw.get("type", "")), BlockType),
                nodes=_children(raw, depth),
                data=_data(raw),
            )
        ]
    if kind == "inline":
        return [
            InlineNode(
                inline_type=coerce_type(str(raw.get("type", "")), InlineType),
                nodes=_children(raw, depth),
                data=_data(raw),
            )
        ]
    # Unknown object kinds keep their children only
    return list(_children(raw, depth))


def _decode_text(raw: dict[str, Any]) -> list[Node]:
    leaves = raw.get("leaves", raw.get("ranges"))
    if leaves is None:
        leaves = [raw]
    if not isinstance(leaves, list):
        raise DocumentDecodeError("Text leaves must be a list")

    runs: list[Node] = []
    for leaf in leaves:
        if not isinstance(leaf, dict):
            raise DocumentDecodeError("Text leaf must be an object")
        text = leaf.get("text", "")
        if not isinstance(text, str):
            raise DocumentDecodeError("Text must be a string")
        marks = leaf.get("marks") or []
        if not isinstance(marks, list):
            raise DocumentDecodeError("Leaf marks must be a list")
        node: Node = TextNode(text=text)
        # First stored mark ends up outermost
        for mark in reversed(marks):
            mark_type = mark.get("type", "") if isinstance(mark, dict) else str(mark)
            node = MarkNode(mark_type=coerce_type(mark_type, MarkType), nodes=(node,))
        runs.append(node)
    return runs
