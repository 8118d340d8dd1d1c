"""Document tree: the in-memory form of stored rich-text story content.

A document is a tree of four node variants. Block, inline and mark nodes
carry a type tag; tags outside the known enums are kept as plain strings
so that rendering can elide the wrapper and keep the children.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class BlockType(StrEnum):
    """Block-level node types produced by the editor."""

    PARAGRAPH = "paragraph"
    BLOCK_QUOTE = "block-quote"
    IMAGE = "image"
    LIST_ITEM = "list-item"
    NUMBERED_LIST = "numbered-list"
    BULLETED_LIST = "bulleted-list"
    HEADING_ONE = "heading-one"
    HEADING_TWO = "heading-two"
    HEADING_THREE = "heading-three"


class MarkType(StrEnum):
    """Inline text formatting marks."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINED = "underlined"


class InlineType(StrEnum):
    """Inline (non-text) node types."""

    LINK = "link"


# Alternate spellings seen in stored documents
TYPE_ALIASES: dict[str, str] = {
    "blockquote": BlockType.BLOCK_QUOTE,
    "heading-1": BlockType.HEADING_ONE,
    "heading-2": BlockType.HEADING_TWO,
    "heading-3": BlockType.HEADING_THREE,
    "underline": MarkType.UNDERLINED,
}


@dataclass(frozen=True)
class TextNode:
    """Leaf holding a run of plain text."""

    text: str


@dataclass(frozen=True)
class MarkNode:
    """Formatting mark wrapping a text run."""

    mark_type: MarkType | str
    nodes: tuple[Node, ...] = ()


@dataclass(frozen=True)
class InlineNode:
    """Inline element such as a link, with its own children."""

    inline_type: InlineType | str
    nodes: tuple[Node, ...] = ()
    data: dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class BlockNode:
    """Block element: either children or block-specific data (image src)."""

    block_type: BlockType | str
    nodes: tuple[Node, ...] = ()
    data: dict[str, Any] = field(default_factory=dict, hash=False)


Node = BlockNode | InlineNode | MarkNode | TextNode


@dataclass(frozen=True)
class Document:
    """Root of a document tree."""

    nodes: tuple[Node, ...] = ()


def coerce_type(raw: Any, enum: type[StrEnum]) -> StrEnum | str:
    """Map a stored type tag to its enum member, or keep the raw tag."""
    if not isinstance(raw, str):
        return str(raw)
    tag = TYPE_ALIASES.get(raw, raw)
    try:
        return enum(tag)
    except ValueError:
        return raw
