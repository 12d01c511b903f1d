from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

ALIGNMENTS = {"LEFT", "CENTER", "RIGHT", "JUSTIFIED"}
DIRECTIONS = {"LTR", "RTL"}
TABLE_LAYOUTS = {"autofit", "fixed"}
DOCUMENT_TYPES = {"document", "report"}

_STYLE_ALIASES = {
    "font_familly": "font_family",
}


@dataclass(frozen=True)
class Style:
    """Typography settings applied while converting and rendering one section.

    Sizes are half-points, spacing values are twips, ``line_spacing`` is a
    multiplier. ``None`` means the backend default applies.
    """

    title_size: int = 32
    heading_spacing: int = 240
    paragraph_spacing: int = 240
    line_spacing: float = 1.15
    font_family: str | None = None
    direction: str = "LTR"
    heading1_size: int = 32
    heading2_size: int = 28
    heading3_size: int = 24
    heading4_size: int = 20
    heading5_size: int = 18
    paragraph_size: int = 24
    list_item_size: int = 24
    code_block_size: int = 20
    blockquote_size: int = 24
    toc_font_size: int | None = None
    toc_heading1_font_size: int | None = None
    toc_heading2_font_size: int | None = None
    toc_heading3_font_size: int | None = None
    toc_heading4_font_size: int | None = None
    toc_heading5_font_size: int | None = None
    toc_heading1_bold: bool | None = None
    toc_heading2_bold: bool | None = None
    toc_heading3_bold: bool | None = None
    toc_heading4_bold: bool | None = None
    toc_heading5_bold: bool | None = None
    toc_heading1_italic: bool | None = None
    toc_heading2_italic: bool | None = None
    toc_heading3_italic: bool | None = None
    toc_heading4_italic: bool | None = None
    toc_heading5_italic: bool | None = None
    paragraph_alignment: str = "LEFT"
    heading_alignment: str = "LEFT"
    heading1_alignment: str | None = None
    heading2_alignment: str | None = None
    heading3_alignment: str | None = None
    heading4_alignment: str | None = None
    heading5_alignment: str | None = None
    blockquote_alignment: str = "LEFT"
    table_layout: str = "autofit"

    def validate(self) -> None:
        validate_enum("direction", self.direction, DIRECTIONS)
        validate_enum("table_layout", self.table_layout, TABLE_LAYOUTS)
        for name in (
            "paragraph_alignment",
            "heading_alignment",
            "heading1_alignment",
            "heading2_alignment",
            "heading3_alignment",
            "heading4_alignment",
            "heading5_alignment",
            "blockquote_alignment",
        ):
            validate_enum(name, getattr(self, name), ALIGNMENTS)
        if self.line_spacing <= 0:
            raise ValueError(f"line_spacing must be positive, got {self.line_spacing!r}")
        for item in fields(self):
            if not item.name.endswith("_size") and not item.name.endswith("_spacing"):
                continue
            value = getattr(self, item.name)
            if value is None or item.name == "line_spacing":
                continue
            if value < 0:
                raise ValueError(f"{item.name} must be non-negative, got {value!r}")

    def merged(self, overrides: Mapping[str, Any] | None) -> Style:
        if not overrides:
            return self
        known = {item.name for item in fields(self)}
        changes = {
            key: value
            for key, value in overrides.items()
            if key in known and value is not None
        }
        if not changes:
            return self
        return replace(self, **changes)

    def heading_size(self, level: int) -> int:
        if level <= 1:
            return self.heading1_size
        if level >= 5:
            return self.heading5_size
        return getattr(self, f"heading{level}_size")

    def heading_alignment_for(self, level: int) -> str:
        level = min(max(level, 1), 5)
        specific = getattr(self, f"heading{level}_alignment")
        return specific or self.heading_alignment

    def toc_level_style(self, level: int) -> dict[str, object | None]:
        level = min(max(level, 1), 5)
        size = getattr(self, f"toc_heading{level}_font_size")
        if size is None:
            size = self.toc_font_size
        return {
            "font_size": size,
            "bold": getattr(self, f"toc_heading{level}_bold"),
            "italic": getattr(self, f"toc_heading{level}_italic"),
        }

    def to_dict(self) -> dict[str, object | None]:
        return asdict(self)


DEFAULT_STYLE = Style()


def normalize_style_overrides(overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Rename deprecated style keys to their canonical names.

    The canonical key wins when both spellings are present.
    """
    if not overrides:
        return {}
    normalized: dict[str, Any] = {}
    for key, value in overrides.items():
        canonical = _STYLE_ALIASES.get(key, key)
        if canonical != key and canonical in overrides:
            continue
        normalized[canonical] = value
    return normalized


def style_from_dict(data: Mapping[str, Any] | None, base: Style = DEFAULT_STYLE) -> Style:
    return base.merged(normalize_style_overrides(data))


def validate_enum(name: str, value: str | None, allowed: set[str]) -> None:
    if value is None:
        return
    if value not in allowed:
        allowed_list = ", ".join(sorted(allowed))
        raise ValueError(f"{name} must be one of {allowed_list}, got {value!r}")
