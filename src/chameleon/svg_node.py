"""
Parse SVG markup into a mutable node tree and serialize it back.

The tree mirrors the JSON shape svgson produces (`name`, `type`, `value`,
`attributes`, `children`) so a sprite can be rewritten attribute by attribute
and written out again without reordering anything:
- element nodes carry an attribute dict (insertion ordered)
- text and comment nodes carry `attributes=None` and their content in `value`
- namespace declarations are re-emitted on the root element

Traversal and serialization use explicit stacks, so deeply nested documents
do not hit the interpreter's recursion limit.
"""

from __future__ import annotations

import io
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field

__all__ = ["SvgNode", "parse_svg", "stringify"]

XML_NS = "http://www.w3.org/XML/1998/namespace"


class SvgNode(BaseModel):
    name: str = ""
    type: str = "element"
    value: str = ""
    attributes: Optional[Dict[str, str]] = None
    children: List["SvgNode"] = Field(default_factory=list)

    @classmethod
    def text(cls, value: str) -> "SvgNode":
        return cls(type="text", value=value)

    @classmethod
    def comment(cls, value: str) -> "SvgNode":
        return cls(type="comment", value=value)

    def iter(self) -> Iterator["SvgNode"]:
        """Yield this node and its descendants, parents before children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


SvgNode.model_rebuild()


# ---------------------------------------------------------------------- #
# Parsing
# ---------------------------------------------------------------------- #
def _collect_namespaces(text: str) -> Dict[str, str]:
    """Map namespace URI -> prefix as declared in the document."""
    prefixes: Dict[str, str] = {}
    for _event, (prefix, uri) in ET.iterparse(io.StringIO(text), events=("start-ns",)):
        prefixes.setdefault(uri, prefix)
    return prefixes


def _qualify(tag: str, prefixes: Dict[str, str]) -> str:
    """Turn `{uri}local` back into `prefix:local` (or `local` for the default namespace)."""
    if not tag.startswith("{"):
        return tag
    uri, local = tag[1:].split("}", 1)
    if uri == XML_NS:
        return f"xml:{local}"
    prefix = prefixes.get(uri)
    return f"{prefix}:{local}" if prefix else local


def _make_node(el: ET.Element, prefixes: Dict[str, str]) -> SvgNode:
    if el.tag is ET.Comment:
        return SvgNode.comment(el.text or "")
    attributes = {_qualify(k, prefixes): v for k, v in el.attrib.items()}
    return SvgNode(name=_qualify(el.tag, prefixes), attributes=attributes)


def parse_svg(text: str) -> SvgNode:
    """
    Parse SVG markup into an SvgNode tree.

    Parse errors propagate as `xml.etree.ElementTree.ParseError`.
    """
    prefixes = _collect_namespaces(text)
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    root_el = ET.fromstring(text, parser=parser)

    root = _make_node(root_el, prefixes)
    declarations = {
        ("xmlns" if not prefix else f"xmlns:{prefix}"): uri
        for uri, prefix in prefixes.items()
    }
    root.attributes = {**declarations, **(root.attributes or {})}

    stack: List[Tuple[ET.Element, SvgNode]] = [(root_el, root)]
    while stack:
        el, node = stack.pop()
        if el.text:
            node.children.append(SvgNode.text(el.text))
        for child_el in el:
            child = _make_node(child_el, prefixes)
            node.children.append(child)
            if child.type == "element":
                stack.append((child_el, child))
            if child_el.tail:
                node.children.append(SvgNode.text(child_el.tail))
    return root


# ---------------------------------------------------------------------- #
# Serialization
# ---------------------------------------------------------------------- #
def _escape_text(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr(value: str) -> str:
    return (
        _escape_text(value)
        .replace('"', "&quot;")
        .replace("\n", "&#10;")
        .replace("\t", "&#9;")
    )


def stringify(node: SvgNode) -> str:
    """Serialize an SvgNode tree back to markup (no XML declaration)."""
    parts: List[str] = []
    stack: List[Tuple[SvgNode, bool]] = [(node, False)]
    while stack:
        current, closing = stack.pop()
        if closing:
            parts.append(f"</{current.name}>")
            continue
        if current.type == "text":
            parts.append(_escape_text(current.value))
            continue
        if current.type == "comment":
            parts.append(f"<!--{current.value}-->")
            continue

        attrs = "".join(
            f' {key}="{_escape_attr(value)}"'
            for key, value in (current.attributes or {}).items()
        )
        if not current.children:
            parts.append(f"<{current.name}{attrs}/>")
            continue
        parts.append(f"<{current.name}{attrs}>")
        stack.append((current, True))
        stack.extend((child, False) for child in reversed(current.children))
    return "".join(parts)
