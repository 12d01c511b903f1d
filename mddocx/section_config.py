from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from . import config
from .style import ALIGNMENTS, DEFAULT_STYLE, Style, normalize_style_overrides, validate_enum

SECTION_TYPES = {"NEXT_PAGE", "NEXT_COLUMN", "CONTINUOUS", "EVEN_PAGE", "ODD_PAGE"}
ORIENTATIONS = {"PORTRAIT", "LANDSCAPE"}
PAGE_NUMBER_DISPLAYS = {"none", "current", "currentAndTotal", "currentAndSectionTotal"}
PAGE_NUMBER_FORMATS = {"decimal", "upperRoman", "lowerRoman", "upperLetter", "lowerLetter"}
PAGE_NUMBER_SEPARATORS = {"hyphen", "period", "colon", "emDash", "endash"}
SLOT_NAMES = ("default", "first", "even")

_MARGIN_KEYS = ("top", "right", "bottom", "left", "header", "footer", "gutter")
_SIZE_KEYS = ("width", "height", "orientation")
_PAGE_NUMBERING_KEYS = ("start", "format_type", "separator", "display", "alignment")
_CONTENT_KEYS = ("text", "alignment", "page_number_display")

_PAGE_NUMBERING_ALIASES = {
    "formatType": "format_type",
}
_CONTENT_ALIASES = {
    "pageNumberDisplay": "page_number_display",
}
_SECTION_ALIASES = {
    "pageNumbering": "page_numbering",
    "titlePage": "title_page",
}


class SlotState(str, Enum):
    INHERIT = "inherit"
    CLEAR = "clear"
    SET = "set"


@dataclass(frozen=True)
class Slot:
    """One header or footer slot of a partial configuration.

    ``INHERIT`` leaves the inherited slot alone, ``CLEAR`` removes it and
    ``SET`` merges ``value`` over it key by key.
    """

    state: SlotState
    value: Mapping[str, Any] | None = None

    @classmethod
    def set(cls, value: Mapping[str, Any]) -> Slot:
        return cls(SlotState.SET, MappingProxyType(_normalize_keys(value, _CONTENT_ALIASES)))

    @classmethod
    def from_group(cls, group: Mapping[str, Any], name: str) -> Slot:
        if name not in group:
            return INHERIT
        raw = group[name]
        if raw is None:
            return CLEAR
        if isinstance(raw, Slot):
            return raw
        return cls.set(raw)


INHERIT = Slot(SlotState.INHERIT)
CLEAR = Slot(SlotState.CLEAR)


@dataclass(frozen=True)
class HeaderFooterGroup:
    default: Slot = INHERIT
    first: Slot = INHERIT
    even: Slot = INHERIT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> HeaderFooterGroup:
        if data is None:
            return cls()
        return cls(**{name: Slot.from_group(data, name) for name in SLOT_NAMES})

    def slot(self, name: str) -> Slot:
        return getattr(self, name)


@dataclass(frozen=True)
class SectionConfig:
    """Partial section configuration, used for both templates and sections.

    ``None`` scalars and empty mappings mean "not set here".
    """

    style: Mapping[str, Any] = field(default_factory=dict)
    margin: Mapping[str, Any] = field(default_factory=dict)
    size: Mapping[str, Any] = field(default_factory=dict)
    page_numbering: Mapping[str, Any] = field(default_factory=dict)
    headers: HeaderFooterGroup = field(default_factory=HeaderFooterGroup)
    footers: HeaderFooterGroup = field(default_factory=HeaderFooterGroup)
    title_page: bool | None = None
    type: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SectionConfig:
        if not data:
            return cls()
        data = _normalize_keys(data, _SECTION_ALIASES)
        page = data.get("page") or {}
        return cls(
            style=MappingProxyType(normalize_style_overrides(data.get("style"))),
            margin=MappingProxyType(dict(page.get("margin") or {})),
            size=MappingProxyType(dict(page.get("size") or {})),
            page_numbering=MappingProxyType(
                _normalize_keys(data.get("page_numbering") or {}, _PAGE_NUMBERING_ALIASES)
            ),
            headers=HeaderFooterGroup.from_dict(data.get("headers")),
            footers=HeaderFooterGroup.from_dict(data.get("footers")),
            title_page=data.get("title_page"),
            type=data.get("type"),
        )

    def validate(self) -> None:
        validate_enum("type", self.type, SECTION_TYPES)
        validate_enum("orientation", self.size.get("orientation"), ORIENTATIONS)
        validate_enum(
            "page_numbering.display",
            self.page_numbering.get("display"),
            PAGE_NUMBER_DISPLAYS,
        )
        validate_enum(
            "page_numbering.format_type",
            self.page_numbering.get("format_type"),
            PAGE_NUMBER_FORMATS,
        )
        validate_enum(
            "page_numbering.separator",
            self.page_numbering.get("separator"),
            PAGE_NUMBER_SEPARATORS,
        )
        validate_enum(
            "page_numbering.alignment",
            self.page_numbering.get("alignment"),
            ALIGNMENTS,
        )
        for key in _MARGIN_KEYS:
            _validate_non_negative(f"margin.{key}", self.margin.get(key))
        for key in ("width", "height"):
            value = self.size.get(key)
            if value is not None and value <= 0:
                raise ValueError(f"size.{key} must be positive, got {value!r}")
        start = self.page_numbering.get("start")
        if start is not None and (not isinstance(start, int) or start < 0):
            raise ValueError(f"page_numbering.start must be a non-negative integer, got {start!r}")
        for group_name in ("headers", "footers"):
            group: HeaderFooterGroup = getattr(self, group_name)
            for name in SLOT_NAMES:
                slot = group.slot(name)
                if slot.state is not SlotState.SET or slot.value is None:
                    continue
                validate_enum(
                    f"{group_name}.{name}.alignment",
                    slot.value.get("alignment"),
                    ALIGNMENTS,
                )
                validate_enum(
                    f"{group_name}.{name}.page_number_display",
                    slot.value.get("page_number_display"),
                    PAGE_NUMBER_DISPLAYS,
                )
        Style().merged(self.style).validate()


@dataclass(frozen=True)
class PageMargins:
    top: int = config.DEFAULT_PAGE_MARGIN
    right: int = config.DEFAULT_PAGE_MARGIN
    bottom: int = config.DEFAULT_PAGE_MARGIN
    left: int = config.DEFAULT_PAGE_MARGIN
    header: int = 708
    footer: int = 708
    gutter: int = 0

    def to_dict(self) -> dict[str, int]:
        return {key: getattr(self, key) for key in _MARGIN_KEYS}


@dataclass(frozen=True)
class PageSize:
    width: int = config.DEFAULT_PAGE_WIDTH
    height: int = config.DEFAULT_PAGE_HEIGHT
    orientation: str = "PORTRAIT"

    def to_dict(self) -> dict[str, object]:
        return {key: getattr(self, key) for key in _SIZE_KEYS}


@dataclass(frozen=True)
class PageNumbering:
    start: int | None = None
    format_type: str | None = None
    separator: str | None = None
    display: str = "none"
    alignment: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {key: getattr(self, key) for key in _PAGE_NUMBERING_KEYS}


@dataclass(frozen=True)
class HeaderFooterContent:
    text: str | None = None
    alignment: str | None = None
    page_number_display: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {key: getattr(self, key) for key in _CONTENT_KEYS if getattr(self, key) is not None}


@dataclass(frozen=True)
class ResolvedHeaderFooter:
    default: HeaderFooterContent | None = None
    first: HeaderFooterContent | None = None
    even: HeaderFooterContent | None = None
    cleared: frozenset[str] = frozenset()

    def slot(self, name: str) -> HeaderFooterContent | None:
        return getattr(self, name)

    def is_empty(self) -> bool:
        return all(self.slot(name) is None for name in SLOT_NAMES)

    def to_dict(self) -> dict[str, object]:
        return {
            name: self.slot(name).to_dict()
            for name in SLOT_NAMES
            if self.slot(name) is not None
        }


@dataclass(frozen=True)
class ResolvedSectionConfig:
    style: Style
    margin: PageMargins
    size: PageSize
    page_numbering: PageNumbering
    headers: ResolvedHeaderFooter
    footers: ResolvedHeaderFooter
    title_page: bool = False
    type: str = "NEXT_PAGE"

    def properties_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "title_page": self.title_page,
            "page": {
                "margin": self.margin.to_dict(),
                "size": self.size.to_dict(),
                "page_numbers": self.page_numbering.to_dict(),
            },
        }


def resolve_section(
    global_style: Style | Mapping[str, Any] | None,
    template: SectionConfig | None,
    section: SectionConfig | None,
) -> ResolvedSectionConfig:
    """Merge defaults, the global style, the template and one section.

    Precedence from lowest to highest: built-in defaults, global style,
    template, section. Nested objects merge per key. Pure and total for
    well-typed input.
    """
    template = template or SectionConfig()
    section = section or SectionConfig()
    if isinstance(global_style, Style):
        base_style = global_style
    else:
        base_style = DEFAULT_STYLE.merged(normalize_style_overrides(global_style))
    style = base_style.merged(template.style).merged(section.style)
    margin = PageMargins(**_merge_known(_MARGIN_KEYS, template.margin, section.margin))
    size = PageSize(**_merge_known(_SIZE_KEYS, template.size, section.size))
    page_numbering = PageNumbering(
        **_merge_known(_PAGE_NUMBERING_KEYS, template.page_numbering, section.page_numbering)
    )
    return ResolvedSectionConfig(
        style=style,
        margin=margin,
        size=size,
        page_numbering=page_numbering,
        headers=_resolve_group(template.headers, section.headers),
        footers=_resolve_group(template.footers, section.footers),
        title_page=_first_set(section.title_page, template.title_page, False),
        type=_first_set(section.type, template.type, "NEXT_PAGE"),
    )


def _resolve_group(*layers: HeaderFooterGroup) -> ResolvedHeaderFooter:
    resolved: dict[str, HeaderFooterContent | None] = {}
    cleared: set[str] = set()
    for name in SLOT_NAMES:
        current: dict[str, Any] | None = None
        for layer in layers:
            slot = layer.slot(name)
            if slot.state is SlotState.INHERIT:
                continue
            if slot.state is SlotState.CLEAR:
                current = None
                cleared.add(name)
                continue
            merged = dict(current or {})
            merged.update(_merge_known(_CONTENT_KEYS, slot.value or {}))
            current = merged
            cleared.discard(name)
        resolved[name] = HeaderFooterContent(**current) if current is not None else None
    return ResolvedHeaderFooter(cleared=frozenset(cleared), **resolved)


def _merge_known(keys: tuple[str, ...], *layers: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for layer in layers:
        for key in keys:
            value = layer.get(key)
            if value is not None:
                merged[key] = value
    return merged


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _normalize_keys(data: Mapping[str, Any], aliases: Mapping[str, str]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        canonical = aliases.get(key, key)
        if canonical != key and canonical in data:
            continue
        normalized[canonical] = value
    return normalized


def _validate_non_negative(name: str, value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, (int, float)) or value < 0:
        raise ValueError(f"{name} must be a non-negative number, got {value!r}")
