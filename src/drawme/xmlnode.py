"""A minimal XML tree with compact serialization."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional, Union
from xml.sax.saxutils import escape

_TEXT_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


class XmlText:
    """A text leaf; the content is escaped once, when the leaf is created."""

    __slots__ = ("escaped",)

    def __init__(self, text: str) -> None:
        self.escaped = escape(text, _TEXT_ENTITIES)

    def serialize(self) -> str:
        return self.escaped

    def __repr__(self) -> str:
        return f"XmlText({self.escaped!r})"


XmlChild = Union["XmlNode", XmlText]


class XmlNode:
    def __init__(self, tag: str, attributes: Optional[Dict[str, str]] = None) -> None:
        self.tag = tag
        self._attributes: Dict[str, str] = {}
        self._children: List[XmlChild] = []
        for key, value in (attributes or {}).items():
            self.set_attribute(key, value)

    def __repr__(self) -> str:
        return f"XmlNode({self.tag!r}, {self._attributes!r}, children={len(self._children)})"

    @property
    def attributes(self) -> Dict[str, str]:
        return dict(self._attributes)

    @property
    def children(self) -> List[XmlChild]:
        return list(self._children)

    def set_attribute(self, key: str, value: object) -> XmlNode:
        # Re-setting a key keeps its original position.
        self._attributes[key] = str(value)
        return self

    def get_attribute(self, key: str) -> Optional[str]:
        return self._attributes.get(key)

    def append_child(self, child: XmlChild) -> XmlNode:
        self._children.append(child)
        return self

    def append_text(self, text: str) -> XmlNode:
        return self.append_child(XmlText(text))

    def prepend_child(self, child: XmlChild) -> XmlNode:
        """Insert ``child`` first. Rebuilds the child list."""
        self._children = [child, *self._children]
        return self

    def iter_elements(self) -> Iterator[XmlNode]:
        yield self
        for child in self._children:
            if isinstance(child, XmlNode):
                yield from child.iter_elements()

    def serialize(self) -> str:
        parts: List[str] = []
        self._write(parts)
        return "".join(parts)

    def _write(self, parts: List[str]) -> None:
        parts.append(f"<{self.tag}")
        for key, value in self._attributes.items():
            parts.append(f' {key}="{escape(value, _ATTRIBUTE_ENTITIES)}"')
        if not self._children:
            parts.append("/>")
            return
        parts.append(">")
        for child in self._children:
            if isinstance(child, XmlText):
                parts.append(child.serialize())
            else:
                child._write(parts)
        parts.append(f"</{self.tag}>")

    def __str__(self) -> str:
        return self.serialize()

    def to_element(self) -> ET.Element:
        """Convert to an ElementTree element, e.g. for pretty printing or querying."""
        return ET.fromstring(self.serialize())


__all__ = ["XmlChild", "XmlNode", "XmlText"]
