"""Render stored story content to safe HTML."""

from __future__ import annotations

import logging
from typing import Any

from storyfeed.document.decoder import decode_document
from storyfeed.document.sanitizer import Sanitizer
from storyfeed.document.serializer import serialize
from storyfeed.errors import DocumentDecodeError

logger = logging.getLogger(__name__)


def render_document(
    content: str | dict[str, Any] | None,
    sanitizer: Sanitizer,
    *,
    story_id: str = "",
) -> str:
    """Decode, serialize and sanitize stored content.

    Content that does not decode renders as an empty string so one bad
    story never takes the page down with it.
    """
    try:
        document = decode_document(content)
    except DocumentDecodeError as exc:
        logger.warning("Rendering story %r as empty: %s", story_id, exc.message)
        return ""
    return sanitizer.sanitize(serialize(document))
