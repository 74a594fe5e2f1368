from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator

__all__ = [
    "ColorOptions",
    "StrokeWidthOptions",
    "SpriteOptions",
    "load_options",
]


class ColorOptions(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}

    modifiable: bool = True
    naming: str = "svg-custom-color"
    preserve_original: bool = Field(default=True, alias="preserveOriginal")


class StrokeWidthOptions(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}

    modifiable: bool = True
    naming: str = "svg-custom-stroke-width"
    non_scaling: bool = Field(default=True, alias="nonScaling")


class SpriteOptions(BaseModel):
    """
    Options for one sprite run. Accepts the nested camelCase shape
    (``strokeWidths.nonScaling``) as well as snake_case field names; keys that
    are not listed here are ignored.
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    path: str = ""
    subfolder: str = "chameleon-sprite"
    name: str = "chameleon-sprite"
    colors: ColorOptions = Field(default_factory=ColorOptions)
    stroke_widths: StrokeWidthOptions = Field(
        default_factory=StrokeWidthOptions, alias="strokeWidths"
    )
    transition: Optional[str] = "all .3s ease"

    @field_validator("path", mode="before")
    @classmethod
    def folder_path(cls, v: Any):
        if v is None:
            return ""
        s = str(v)
        if s and not s.endswith("/"):
            s += "/"
        return s

    @field_validator("transition", mode="before")
    @classmethod
    def parse_transition(cls, v: Union[str, bool, None]):
        # `False` and "" both switch the transition step off.
        if v is None or v is False:
            return None
        s = str(v).strip()
        return s or None

    # Public API ---------------------------------------------------------
    def merged(self, custom: Union["SpriteOptions", Mapping[str, Any], None]) -> "SpriteOptions":
        """Return a copy with `custom` deep-merged over the current values."""
        if custom is None:
            return self.model_copy(deep=True)
        if isinstance(custom, SpriteOptions):
            custom = custom.model_dump(by_alias=True, exclude_unset=True)
        base = self.model_dump(by_alias=True)
        return SpriteOptions.model_validate(_merge(base, _aliased(custom)))

    def source_dir(self, cwd: str | Path | None = None) -> Path:
        root = Path(cwd) if cwd is not None else Path.cwd()
        return root / self.path if self.path else root

    def output_dir(self, cwd: str | Path | None = None) -> Path:
        return self.source_dir(cwd) / self.subfolder

    def output_file(self, cwd: str | Path | None = None) -> Path:
        return self.output_dir(cwd) / f"{self.name}.svg"


_SECTION_ALIASES = {
    "stroke_widths": "strokeWidths",
    "preserve_original": "preserveOriginal",
    "non_scaling": "nonScaling",
}


def _aliased(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename snake_case keys to their aliases so merging lines up."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            value = _aliased(value)
        out[_SECTION_ALIASES.get(key, key)] = value
    return out


def _merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge nested option sections; only known sections recurse."""
    for key, value in source.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            target[key] = _merge(dict(current), value)
        else:
            target[key] = value
    return target


def load_options(path: str | Path) -> SpriteOptions:
    """Load options from a JSON file shaped like the nested option mapping."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Options file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Options file '{path}' is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Options file '{path}' must contain a JSON object.")
    return SpriteOptions().merged(data)
