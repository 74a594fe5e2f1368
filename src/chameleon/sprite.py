from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import structlog

from .composer import SpriteComposer
from .options import SpriteOptions
from .svg_node import parse_svg, stringify
from .variablizer import Variablizer

__all__ = ["ChameleonSprite", "SpriteReport", "create", "variablize_file"]

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SpriteReport:
    output_file: Path
    svg_count: int
    color_count: int
    stroke_width_count: int


class ChameleonSprite:
    """
    Build a variablized sprite: compose the icons found under
    `options.path`, write the basic sprite, then rewrite it in place.
    """

    def __init__(
        self,
        options: Optional[SpriteOptions] = None,
        *,
        composer: Optional[SpriteComposer] = None,
    ) -> None:
        self.options = options or SpriteOptions()
        self.composer = composer or SpriteComposer()

    def create(self, cwd: str | Path | None = None) -> SpriteReport:
        source_dir = self.options.source_dir(cwd)
        output_file = self.options.output_file(cwd)

        logger.info("composing sprite", source=str(source_dir), output=str(output_file))
        svg_count = self.composer.write(source_dir, output_file)

        variablizer = variablize_file(output_file, self.options)
        logger.info(
            "variablized sprite",
            colors=variablizer.color_count,
            stroke_widths=variablizer.stroke_width_count,
        )
        return SpriteReport(
            output_file=output_file,
            svg_count=svg_count,
            color_count=variablizer.color_count,
            stroke_width_count=variablizer.stroke_width_count,
        )


def variablize_file(path: str | Path, options: Optional[SpriteOptions] = None) -> Variablizer:
    """Rewrite an existing sprite file in place and return the spent variablizer."""
    path = Path(path)
    root = parse_svg(path.read_text(encoding="utf-8"))
    variablizer = Variablizer(options)
    variablizer.variablize(root)
    path.write_text(stringify(root), encoding="utf-8")
    return variablizer


def create(
    custom_options: Union[SpriteOptions, Mapping[str, Any], None] = None,
    cwd: str | Path | None = None,
) -> SpriteReport:
    """Merge `custom_options` over the defaults and build the sprite."""
    options = SpriteOptions().merged(custom_options)
    return ChameleonSprite(options).create(cwd)
