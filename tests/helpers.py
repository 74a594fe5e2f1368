from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from chameleon import SvgNode

SVG_NS = {"svg": "http://www.w3.org/2000/svg"}

ARROW_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <path d="M0 0L10 10" fill="#000" stroke="#f00" stroke-width="2"/>
  <path d="M5 5L10 10" fill="#000"/>
</svg>
"""

STYLED_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="16px" height="16px">
  <style>.a { fill: #123456; } #b { stroke: red; stroke-width: 3 }</style>
  <rect class="a" width="4" height="4"/>
  <circle id="b" r="2" style="opacity: .5; cursor: pointer"/>
</svg>
"""


def element(name: str, attributes: dict | None = None, *children: SvgNode) -> SvgNode:
    return SvgNode(name=name, attributes=dict(attributes or {}), children=list(children))


def sprite(*symbols: SvgNode) -> SvgNode:
    return element("svg", {"xmlns": "http://www.w3.org/2000/svg"}, *symbols)


def symbol(symbol_id: str, *children: SvgNode) -> SvgNode:
    return element("symbol", {"id": symbol_id, "viewBox": "0 0 24 24"}, *children)


def path(**attributes: str) -> SvgNode:
    attrs = {"d": "M0 0L1 1"}
    attrs.update({key.replace("_", "-"): value for key, value in attributes.items()})
    return element("path", attrs)


def write_icon(directory: Path, name: str, markup: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / name
    target.write_text(markup, encoding="utf-8")
    return target


def parse_svg_file(path: Path) -> ET.Element:
    return ET.fromstring(path.read_text(encoding="utf-8"))


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag
