"""HTML sanitizer with a pluggable DOM provider.

The sanitizer never assumes a browser. A ``DomProvider`` turns markup
into an element tree; the default one builds the tree with the
standard-library HTML parser, so sanitizing behaves the same wherever
it runs. Only the tags and attributes the serializer can emit survive.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from html import escape
from html.parser import HTMLParser

from storyfeed.document.serializer import element

ALLOWED_TAGS: dict[str, frozenset[str]] = {
    "p": frozenset({"class"}),
    "blockquote": frozenset(),
    "img": frozenset({"src"}),
    "li": frozenset(),
    "ol": frozenset(),
    "ul": frozenset(),
    "h1": frozenset(),
    "h2": frozenset(),
    "h3": frozenset(),
    "strong": frozenset(),
    "em": frozenset(),
    "u": frozenset(),
    "a": frozenset({"href"}),
}

# Elements removed together with everything inside them
DROP_CONTENT_TAGS = frozenset({
    "script", "style", "iframe", "frame", "frameset", "object", "embed",
    "applet", "noscript", "noembed", "noframes", "template", "textarea",
    "title", "svg", "math", "xmp", "select", "option", "head",
})

VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
})

URL_ATTRIBUTES = frozenset({"href", "src"})
SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):")
_URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")


class DomProvider(ABC):
    """Builds an element tree from an HTML fragment."""

    @abstractmethod
    def parse_fragment(self, html: str) -> ET.Element:
        """Parse ``html`` and return a root element holding its nodes."""


class _TreeBuilder(HTMLParser):
    """Feeds HTMLParser events into an ElementTree, tolerating bad nesting."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = ET.Element("body")
        self._stack: list[ET.Element] = [self.root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        el = self._open(tag, attrs)
        if tag not in VOID_TAGS:
            self._stack.append(el)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return
        # Stray closing tag: ignored

    def handle_data(self, data: str) -> None:
        current = self._stack[-1]
        if len(current):
            last = current[-1]
            last.tail = (last.tail or "") + data
        else:
            current.text = (current.text or "") + data

    def _open(self, tag: str, attrs: list[tuple[str, str | None]]) -> ET.Element:
        return ET.SubElement(
            self._stack[-1], tag, {name: value or "" for name, value in attrs}
        )


class HeadlessDomProvider(DomProvider):
    """DOM provider backed by ``html.parser``; needs no browser."""

    def parse_fragment(self, html: str) -> ET.Element:
        builder = _TreeBuilder()
        builder.feed(html)
        builder.close()
        return builder.root


class Sanitizer:
    """Strips every tag and attribute outside the render allow-list.

    Disallowed elements are unwrapped so their text survives, except for
    script-like elements which are dropped whole. Comments never survive.
    """

    def __init__(self, dom_provider: DomProvider | None = None) -> None:
        self._dom = dom_provider or HeadlessDomProvider()

    def sanitize(self, html: str) -> str:
        """Return ``html`` reduced to allow-listed markup."""
        if not html:
            return ""
        root = self._dom.parse_fragment(html)
        return self._render_children(root)

    def _render_children(self, parent: ET.Element) -> str:
        parts = [escape(parent.text or "", quote=False)]
        for child in parent:
            parts.append(self._render_element(child))
            parts.append(escape(child.tail or "", quote=False))
        return "".join(parts)

    def _render_element(self, el: ET.Element) -> str:
        if not isinstance(el.tag, str):
            # Comment or processing instruction from a foreign provider
            return ""
        tag = el.tag.lower()
        if tag in DROP_CONTENT_TAGS:
            return ""
        allowed = ALLOWED_TAGS.get(tag)
        if allowed is None:
            return self._render_children(el)

        attrs = {
            name: value
            for name, value in el.attrib.items()
            if name.lower() in allowed and _is_safe_attribute(tag, name.lower(), value)
        }
        if tag in VOID_TAGS:
            return element(tag, attrs, void=True)
        return element(tag, attrs, self._render_children(el))


def _is_safe_attribute(tag: str, name: str, value: str) -> bool:
    if name not in URL_ATTRIBUTES:
        return True
    compact = _URL_NOISE_RE.sub("", value).lower()
    match = _SCHEME_RE.match(compact)
    if match is None:
        return True
    if tag == "img" and compact.startswith("data:image/"):
        return True
    return match.group(1) in SAFE_URL_SCHEMES
