"""Rich-content pipeline: stored editor JSON → HTML → sanitized HTML."""

from storyfeed.document.decoder import decode_document
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
from storyfeed.document.render import render_document
from storyfeed.document.sanitizer import DomProvider, HeadlessDomProvider, Sanitizer
from storyfeed.document.serializer import serialize

__all__ = [
    "BlockNode",
    "BlockType",
    "Document",
    "DomProvider",
    "HeadlessDomProvider",
    "InlineNode",
    "InlineType",
    "MarkNode",
    "MarkType",
    "Node",
    "Sanitizer",
    "TextNode",
    "decode_document",
    "render_document",
    "serialize",
]
