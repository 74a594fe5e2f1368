"""
Combine a directory of SVG icons into one <symbol> sprite using svg.py.

Each icon is normalized with `inline_styles`, stripped of XML namespaces and
wrapped in a <symbol> whose id is the sanitized file stem, so pages reference
icons as `<use href="sprite.svg#<stem>">`. Ids inside an icon are prefixed
with that symbol id so gradients and clip paths of different icons cannot
collide.
"""

from __future__ import annotations

import hashlib
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional

import structlog
import svg

from .optimizer import PRESENTATION_ATTRIBUTES, inline_styles

__all__ = ["NoSvgFilesError", "SpriteComposer"]

XML_NS = "http://www.w3.org/XML/1998/namespace"
_URL_REF_RE = re.compile(r"""url\(\s*(['"]?)#([^'")\s]+)\1\s*\)""")

logger = structlog.get_logger(__name__)


class NoSvgFilesError(FileNotFoundError):
    """Raised when the icon directory holds no *.svg files."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(
            f"No SVG files found in '{path}'. Make sure you are using the correct path."
        )


class _InlineRaw:
    """Pre-rendered markup for svg.py releases without svg.Raw."""

    def __init__(self, text: str) -> None:
        self.text = text

    def as_str(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


def _strip_ns(name: str) -> str:
    if not name.startswith("{"):
        return name
    uri, local = name[1:].split("}", 1)
    if uri == XML_NS:
        return f"xml:{local}"
    return local


class SpriteComposer:
    """Build the un-variablized sprite document."""

    def __init__(self) -> None:
        self._symbol_ids: Dict[str, str] = {}

    # Public API ---------------------------------------------------------
    def discover(self, source_dir: str | Path) -> List[Path]:
        """Return the *.svg files in `source_dir`, sorted by name."""
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise FileNotFoundError(f"Icon directory not found: {source_dir}")
        files = sorted(p for p in source_dir.glob("*.svg") if p.is_file())
        if not files:
            raise NoSvgFilesError(source_dir)
        logger.debug("discovered icons", path=str(source_dir), count=len(files))
        return files

    def symbol_for(self, path: str | Path) -> svg.Symbol:
        """Parse and normalize one icon file into a <symbol>."""
        path = Path(path)
        root = ET.parse(path).getroot()
        inline_styles(root)

        for el in root.iter():
            if isinstance(el.tag, str):
                el.tag = _strip_ns(el.tag)
            el.attrib = {_strip_ns(k): v for k, v in el.attrib.items()}

        symbol_id = self._symbol_id(path.stem)
        self._namespace_ids(root, symbol_id)

        children = list(root)
        # Presentation attributes on the icon's root apply to everything below it.
        inherited = {k: v for k, v in root.attrib.items() if k in PRESENTATION_ATTRIBUTES}
        if inherited:
            group = ET.Element("g", inherited)
            group.extend(children)
            inner = ET.tostring(group, encoding="unicode")
        else:
            inner = "".join(ET.tostring(child, encoding="unicode") for child in children)

        return svg.Symbol(
            id=symbol_id,
            viewBox=self._view_box(root),
            elements=[self._raw_element(inner)],
        )

    def compose(self, source_dir: str | Path) -> str:
        """Return the sprite markup for every icon in `source_dir`."""
        self._symbol_ids = {}
        symbols = [self.symbol_for(path) for path in self.discover(source_dir)]
        return svg.SVG(elements=symbols).as_str()

    def write(self, source_dir: str | Path, output_file: str | Path) -> int:
        """Compose the sprite, write it to `output_file` and return the icon count."""
        markup = self.compose(source_dir)
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(markup, encoding="utf-8")
        count = len(self._symbol_ids)
        logger.info("wrote basic sprite", file=str(output_file), icons=count)
        return count

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _symbol_id(self, stem: str) -> str:
        """Return a sanitized id for an icon, unique within this sprite."""
        safe = re.sub(r"[^a-zA-Z0-9_-]", "-", stem).strip("-_")
        if not safe:
            safe = "icon"
        candidate = safe
        if candidate in self._symbol_ids.values():
            suffix = hashlib.sha1(stem.encode("utf-8")).hexdigest()[:8]
            candidate = f"{candidate}-{suffix}"
        self._symbol_ids[stem] = candidate
        return candidate

    def _raw_element(self, text: str):
        """Return a svg.Raw (or inline fallback) for a raw SVG fragment."""
        raw_cls = getattr(svg, "Raw", None)
        if raw_cls:
            try:
                return raw_cls(text)
            except TypeError:
                pass
        return _InlineRaw(text)

    def _namespace_ids(self, root: ET.Element, prefix: str) -> None:
        """Prefix ids below `root` and the `url(#...)`/`href="#..."` references to them."""
        renamed = {
            el.get("id"): f"{prefix}_{el.get('id')}"
            for el in root.iter()
            if el is not root and el.get("id")
        }
        if not renamed:
            return

        def _url(match: re.Match) -> str:
            target = match.group(2)
            return f"url({match.group(1)}#{renamed.get(target, target)}{match.group(1)})"

        for el in root.iter():
            if el is not root and el.get("id") in renamed:
                el.set("id", renamed[el.get("id")])
            for key, value in list(el.attrib.items()):
                if key == "id":
                    continue
                if key == "href" and value.startswith("#") and value[1:] in renamed:
                    el.set(key, f"#{renamed[value[1:]]}")
                elif "url(" in value:
                    el.set(key, _URL_REF_RE.sub(_url, value))
            if isinstance(el.tag, str) and el.tag == "style" and el.text:
                el.text = _URL_REF_RE.sub(_url, el.text)

    def _view_box(self, root: ET.Element) -> Optional[str]:
        view_box = root.get("viewBox")
        if view_box:
            return view_box
        try:
            width = float((root.get("width") or "0").replace("px", ""))
            height = float((root.get("height") or "0").replace("px", ""))
        except ValueError:
            return None
        if width <= 0 or height <= 0:
            return None
        return f"0 0 {width:g} {height:g}"
