"""
chameleon package initialization.
Exports the sprite builder, its options, the composer and the variablizer.
"""

from .composer import NoSvgFilesError, SpriteComposer
from .options import ColorOptions, SpriteOptions, StrokeWidthOptions, load_options
from .sprite import ChameleonSprite, SpriteReport, create, variablize_file
from .svg_node import SvgNode, parse_svg, stringify
from .variablizer import VariableRegistry, Variablizer, valid_value

__all__ = [
    "ChameleonSprite",
    "SpriteReport",
    "create",
    "variablize_file",
    "SpriteOptions",
    "ColorOptions",
    "StrokeWidthOptions",
    "load_options",
    "SpriteComposer",
    "NoSvgFilesError",
    "SvgNode",
    "parse_svg",
    "stringify",
    "Variablizer",
    "VariableRegistry",
    "valid_value",
]
