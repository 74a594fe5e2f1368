from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from chameleon import NoSvgFilesError, SpriteComposer

from .helpers import ARROW_SVG, STYLED_SVG, local_name, parse_svg_file, write_icon


def symbols_of(markup: str) -> list[ET.Element]:
    root = ET.fromstring(markup)
    assert local_name(root.tag) == "svg"
    return [child for child in root if local_name(child.tag) == "symbol"]


def test_discover_returns_sorted_svg_files_only(tmp_path):
    write_icon(tmp_path, "b.svg", ARROW_SVG)
    write_icon(tmp_path, "a.svg", ARROW_SVG)
    write_icon(tmp_path, "notes.txt", "x")

    files = SpriteComposer().discover(tmp_path)

    assert [f.name for f in files] == ["a.svg", "b.svg"]


def test_discover_raises_when_no_svgs_exist(tmp_path):
    write_icon(tmp_path, "readme.md", "# icons")

    with pytest.raises(NoSvgFilesError, match="No SVG files found in") as excinfo:
        SpriteComposer().discover(tmp_path)

    assert excinfo.value.path == tmp_path
    assert str(tmp_path) in str(excinfo.value)
    assert isinstance(excinfo.value, FileNotFoundError)


def test_discover_raises_for_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError, match="Icon directory not found"):
        SpriteComposer().discover(tmp_path / "missing")


def test_compose_wraps_each_icon_in_a_symbol(tmp_path):
    write_icon(tmp_path, "arrow.svg", ARROW_SVG)
    write_icon(tmp_path, "styled.svg", STYLED_SVG)

    symbols = symbols_of(SpriteComposer().compose(tmp_path))

    assert [s.get("id") for s in symbols] == ["arrow", "styled"]
    assert symbols[0].get("viewBox") == "0 0 24 24"
    assert symbols[1].get("viewBox") == "0 0 16 16"
    assert [local_name(el.tag) for el in symbols[0]] == ["path", "path"]
    assert symbols[0][0].get("fill") == "#000"


def test_compose_inlines_icon_styles(tmp_path):
    write_icon(tmp_path, "styled.svg", STYLED_SVG)

    (styled,) = symbols_of(SpriteComposer().compose(tmp_path))

    tags = [local_name(el.tag) for el in styled]
    assert "style" not in tags
    assert styled[0].get("fill") == "#123456"


def test_root_presentation_attributes_are_kept_on_a_group(tmp_path):
    write_icon(
        tmp_path,
        "outline.svg",
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" stroke="currentColor">'
        '<path d="M0 0"/></svg>',
    )

    (outline,) = symbols_of(SpriteComposer().compose(tmp_path))

    group = outline[0]
    assert local_name(group.tag) == "g"
    assert group.get("fill") == "none"
    assert group.get("stroke") == "currentColor"
    assert local_name(group[0].tag) == "path"


def test_symbol_ids_are_sanitized_and_unique(tmp_path):
    write_icon(tmp_path, "my icon.svg", ARROW_SVG)
    write_icon(tmp_path, "my-icon.svg", ARROW_SVG)

    ids = [s.get("id") for s in symbols_of(SpriteComposer().compose(tmp_path))]

    assert ids[0] == "my-icon"
    assert ids[1].startswith("my-icon-")
    assert len(set(ids)) == 2


def test_write_creates_parent_directories(tmp_path):
    write_icon(tmp_path, "arrow.svg", ARROW_SVG)
    target = tmp_path / "out" / "nested" / "sprite.svg"

    count = SpriteComposer().write(tmp_path, target)

    assert count == 1
    assert local_name(parse_svg_file(target).tag) == "svg"


def test_broken_icon_propagates_parse_error(tmp_path):
    write_icon(tmp_path, "broken.svg", "<svg><g></svg>")

    with pytest.raises(ET.ParseError):
        SpriteComposer().compose(tmp_path)


CLIPPED_SVG = """<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 24 24">
  <defs><clipPath id="clip0"><rect width="24" height="24"/></clipPath></defs>
  <g clip-path="url(#clip0)"><path id="shape" d="M0 0L10 10" fill="#000"/></g>
  <use xlink:href="#shape"/>
</svg>
"""


def test_internal_ids_are_namespaced_per_symbol(tmp_path):
    write_icon(tmp_path, "first.svg", CLIPPED_SVG)
    write_icon(tmp_path, "second.svg", CLIPPED_SVG)

    first, second = symbols_of(SpriteComposer().compose(tmp_path))

    ids = [el.get("id") for symbol in (first, second) for el in symbol.iter() if el.get("id")]
    assert ids == ["first", "first_clip0", "first_shape", "second", "second_clip0", "second_shape"]
    for symbol in (first, second):
        prefix = symbol.get("id")
        group = [el for el in symbol.iter() if local_name(el.tag) == "g"][0]
        use = [el for el in symbol.iter() if local_name(el.tag) == "use"][0]
        assert group.get("clip-path") == f"url(#{prefix}_clip0)"
        assert use.get("href") == f"#{prefix}_shape"


def test_references_to_unknown_ids_are_left_alone(tmp_path):
    write_icon(
        tmp_path,
        "external.svg",
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
        '<path id="p" fill="url(#shared-gradient)" d="M0 0"/></svg>',
    )

    (external,) = symbols_of(SpriteComposer().compose(tmp_path))

    assert external[0].get("id") == "external_p"
    assert external[0].get("fill") == "url(#shared-gradient)"
