"""
Inline CSS from <style> blocks and `style` attributes into SVG presentation
attributes, so fill/stroke values are visible to the variablizer.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import cssutils
from cssutils.css import CSSRule

__all__ = ["inline_styles", "parse_css_declarations", "PRESENTATION_ATTRIBUTES"]

cssutils.log.setLevel(logging.ERROR)

PRESENTATION_ATTRIBUTES = frozenset(
    {
        "clip-path",
        "clip-rule",
        "color",
        "display",
        "fill",
        "fill-opacity",
        "fill-rule",
        "filter",
        "mask",
        "opacity",
        "stop-color",
        "stop-opacity",
        "stroke",
        "stroke-dasharray",
        "stroke-dashoffset",
        "stroke-linecap",
        "stroke-linejoin",
        "stroke-miterlimit",
        "stroke-opacity",
        "stroke-width",
        "vector-effect",
        "visibility",
    }
)

_SELECTOR_RE = re.compile(r"^([a-zA-Z][\w-]*)?(?:([.#])([\w-]+))?$")


@dataclass(frozen=True)
class _Selector:
    tag: Optional[str]
    kind: Optional[str]
    name: Optional[str]

    def matches(self, el: ET.Element) -> bool:
        if self.tag and _local_name(el.tag) != self.tag:
            return False
        if self.kind == "#":
            return el.get("id") == self.name
        if self.kind == ".":
            return self.name in (el.get("class") or "").split()
        return True


@dataclass(frozen=True)
class _Rule:
    selector: _Selector
    specificity: Tuple[int, ...]
    declarations: Tuple[Tuple[str, str], ...]
    order: int


def _local_name(tag: str) -> str:
    if "}" in tag:
        return tag.rsplit("}", 1)[-1]
    return tag


def _declarations(style) -> List[Tuple[str, str]]:
    """(property, value) pairs of a cssutils CSSStyleDeclaration, in order."""
    return [(prop.name.lower(), prop.value) for prop in style.getProperties() if prop.value]


def parse_css_declarations(text: str) -> List[Tuple[str, str]]:
    """Parse the contents of a `style` attribute into (property, value) pairs."""
    return _declarations(cssutils.parseStyle(text))


def _parse_selector(text: str) -> Optional[_Selector]:
    match = _SELECTOR_RE.match(text.strip())
    if not match or not any(match.groups()):
        return None
    tag, kind, name = match.groups()
    return _Selector(tag=tag, kind=kind, name=name)


def _parse_stylesheet(css: str, start: int) -> Tuple[List[_Rule], bool]:
    """
    Return the rules of a stylesheet and whether every rule was understood.
    At-rules and selectors beyond tag/.class/#id are skipped.
    """
    sheet = cssutils.parseString(css)
    fully_supported = True
    rules: List[_Rule] = []
    order = start
    for rule in sheet:
        if rule.type == CSSRule.COMMENT:
            continue
        if rule.type != CSSRule.STYLE_RULE:
            fully_supported = False
            continue
        declarations = tuple(_declarations(rule.style))
        for selector in rule.selectorList:
            parsed = _parse_selector(selector.selectorText)
            if parsed is None:
                fully_supported = False
                continue
            rules.append(_Rule(parsed, tuple(selector.specificity), declarations, order))
            order += 1
    return rules, fully_supported


def _apply_declarations(el: ET.Element, declarations) -> None:
    for key, value in declarations:
        if key in PRESENTATION_ATTRIBUTES:
            el.set(key, value)


def inline_styles(root: ET.Element) -> ET.Element:
    """Inline <style> rules and `style` attributes into attributes, in place."""
    rules: List[_Rule] = []
    style_elements: List[Tuple[ET.Element, bool]] = []
    for el in root.iter():
        if _local_name(el.tag) != "style":
            continue
        parsed, fully_supported = _parse_stylesheet(el.text or "", len(rules))
        rules.extend(parsed)
        style_elements.append((el, fully_supported))

    rules.sort(key=lambda r: (r.specificity, r.order))

    for el in root.iter():
        if _local_name(el.tag) == "style":
            continue
        for rule in rules:
            if rule.selector.matches(el):
                _apply_declarations(el, rule.declarations)

        inline = el.attrib.pop("style", None)
        if inline is None:
            continue
        declarations = parse_css_declarations(inline)
        _apply_declarations(el, declarations)
        remaining = [(k, v) for k, v in declarations if k not in PRESENTATION_ATTRIBUTES]
        if remaining:
            # Keep a trailing ";" so an appended declaration stays separate.
            el.set("style", "; ".join(f"{k}: {v}" for k, v in remaining) + ";")

    _remove_inlined_styles(root, style_elements)
    return root


def _remove_inlined_styles(root: ET.Element, style_elements) -> None:
    removable = {id(el) for el, fully_supported in style_elements if fully_supported}
    if not removable:
        return
    parents: Dict[int, ET.Element] = {}
    for parent in root.iter():
        for child in parent:
            if id(child) in removable:
                parents[id(child)] = parent
    for el, fully_supported in style_elements:
        parent = parents.get(id(el))
        if fully_supported and parent is not None:
            parent.remove(el)
