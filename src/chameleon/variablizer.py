"""
Replace hardcoded fill, stroke and stroke-width values in a sprite with CSS
custom-property references.

Every distinct value inside one icon gets a two-level fallback reference:

    var(--<naming>-<n>, var(--<naming>, <default>))

so a page can override one icon's value (`--<naming>-<n>`), every occurrence
of the value across the sprite (`--<naming>`), or nothing at all. Numbering
restarts for each top-level child of the sprite root.
"""

from __future__ import annotations

from typing import Dict, Optional

from .options import SpriteOptions
from .svg_node import SvgNode

__all__ = ["VariableRegistry", "Variablizer", "valid_value"]

INHERIT_COLOR = "currentColor"
NON_SCALING_STROKE = "non-scaling-stroke"


def valid_value(raw: str) -> bool:
    """False for values that are already references or that are `none`."""
    return "var(" not in raw and raw.strip() != "none"


class VariableRegistry:
    """Raw value -> minted reference, scoped to one icon."""

    def __init__(self, naming: str, *, preserve_original: bool = True) -> None:
        self.naming = naming
        self.preserve_original = preserve_original
        self._refs: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._refs)

    def __contains__(self, raw: object) -> bool:
        return raw in self._refs

    def get(self, raw: str) -> Optional[str]:
        return self._refs.get(raw)

    def resolve(self, raw: str) -> str:
        """Return the reference for `raw`, minting the next numbered one if new."""
        existing = self._refs.get(raw)
        if existing is not None:
            return existing
        default = raw if self.preserve_original else INHERIT_COLOR
        ref = (
            f"var(--{self.naming}-{len(self._refs) + 1}, "
            f"var(--{self.naming}, {default}))"
        )
        self._refs[raw] = ref
        return ref


class Variablizer:
    """
    Rewrite a parsed sprite in place.

    `color_count` and `stroke_width_count` count rewritten attribute sites for
    the most recent `variablize` call.
    """

    def __init__(self, options: Optional[SpriteOptions] = None) -> None:
        self.options = options or SpriteOptions()
        self.color_count = 0
        self.stroke_width_count = 0

    # Public API ---------------------------------------------------------
    def color_registry(self) -> VariableRegistry:
        colors = self.options.colors
        return VariableRegistry(colors.naming, preserve_original=colors.preserve_original)

    def stroke_width_registry(self) -> VariableRegistry:
        # Widths have no inherit sentinel; the fallback is always the raw value.
        return VariableRegistry(self.options.stroke_widths.naming, preserve_original=True)

    def variablize(self, root: SvgNode) -> SvgNode:
        """Rewrite every icon below `root`, each with fresh registries."""
        self.color_count = 0
        self.stroke_width_count = 0
        for symbol in root.children:
            self.rewrite(symbol, self.color_registry(), self.stroke_width_registry())
        return root

    def rewrite(
        self,
        node: SvgNode,
        colors: VariableRegistry,
        stroke_widths: VariableRegistry,
    ) -> None:
        """Apply the attribute policy to `node` and all of its descendants."""
        for current in node.iter():
            if current.attributes is None or current.name == "style":
                continue
            self._rewrite_attributes(current.attributes, colors, stroke_widths)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _rewrite_attributes(
        self,
        attributes: Dict[str, str],
        colors: VariableRegistry,
        stroke_widths: VariableRegistry,
    ) -> None:
        opts = self.options

        if opts.colors.modifiable:
            for key in ("fill", "stroke"):
                if key in attributes and valid_value(attributes[key]):
                    attributes[key] = colors.resolve(attributes[key])
                    self.color_count += 1

        if opts.stroke_widths.modifiable:
            if "stroke-width" in attributes and valid_value(attributes["stroke-width"]):
                attributes["stroke-width"] = stroke_widths.resolve(attributes["stroke-width"])
                self.stroke_width_count += 1

        if opts.stroke_widths.non_scaling and "stroke-width" in attributes:
            effects = attributes.get("vector-effect", "").split()
            if NON_SCALING_STROKE not in effects:
                attributes["vector-effect"] = " ".join(effects + [NON_SCALING_STROKE])

        if opts.transition:
            declaration = f"transition: {opts.transition}"
            style = attributes.get("style", "")
            # Re-running over an already processed sprite must not stack declarations.
            if not style.rstrip().endswith(declaration):
                attributes["style"] = f"{style} {declaration}" if style.strip() else declaration
