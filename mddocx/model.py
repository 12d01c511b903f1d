from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from .style import Style


@dataclass(frozen=True)
class TextRun:
    value: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    link: str | None = None
    anchor: str | None = None

    kind: ClassVar[str] = "text"

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"type": self.kind, "value": self.value}
        if self.bold:
            data["bold"] = True
        if self.italic:
            data["italic"] = True
        if self.code:
            data["code"] = True
        if self.link is not None:
            data["link"] = self.link
        if self.anchor is not None:
            data["anchor"] = self.anchor
        return data


@dataclass(frozen=True)
class Paragraph:
    children: tuple[TextRun, ...] = ()
    role: str | None = None
    level: int | None = None
    indent_level: int = 0

    kind: ClassVar[str] = "paragraph"

    @property
    def text(self) -> str:
        return "".join(run.value for run in self.children)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "type": self.kind,
            "children": [run.to_dict() for run in self.children],
        }
        if self.role is not None:
            data["role"] = self.role
            data["level"] = self.level
            data["indent_level"] = self.indent_level
        return data


@dataclass(frozen=True)
class Heading:
    level: int
    children: tuple[TextRun, ...] = ()
    anchor_id: str | None = None

    kind: ClassVar[str] = "heading"

    @property
    def text(self) -> str:
        return "".join(run.value for run in self.children)

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.kind,
            "level": self.level,
            "anchor_id": self.anchor_id,
            "children": [run.to_dict() for run in self.children],
        }


@dataclass(frozen=True)
class ListItem:
    children: tuple["Block", ...] = ()

    kind: ClassVar[str] = "listItem"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "children": [child.to_dict() for child in self.children]}


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    children: tuple[ListItem, ...] = ()
    sequence_id: int | None = None
    start: int = 1

    kind: ClassVar[str] = "list"

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "type": self.kind,
            "ordered": self.ordered,
            "children": [item.to_dict() for item in self.children],
        }
        if self.sequence_id is not None:
            data["sequence_id"] = self.sequence_id
            data["start"] = self.start
        return data


@dataclass(frozen=True)
class CodeBlock:
    value: str
    language: str | None = None

    kind: ClassVar[str] = "codeBlock"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "language": self.language, "value": self.value}


@dataclass(frozen=True)
class Blockquote:
    children: tuple["Block", ...] = ()

    kind: ClassVar[str] = "blockquote"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "children": [child.to_dict() for child in self.children]}


@dataclass(frozen=True)
class Image:
    alt: str
    url: str

    kind: ClassVar[str] = "image"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "alt": self.alt, "url": self.url}


@dataclass(frozen=True)
class Table:
    """Plain-text table; cells keep no inline formatting."""

    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    kind: ClassVar[str] = "table"

    @property
    def column_count(self) -> int:
        widest_row = max((len(row) for row in self.rows), default=0)
        return max(len(self.headers), widest_row, 1)

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.kind,
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
            "column_count": self.column_count,
        }


@dataclass(frozen=True)
class Comment:
    value: str

    kind: ClassVar[str] = "comment"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "value": self.value}


@dataclass(frozen=True)
class PageBreak:
    kind: ClassVar[str] = "pageBreak"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind}


@dataclass(frozen=True)
class TocPlaceholder:
    kind: ClassVar[str] = "tocPlaceholder"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind}


Block = Union[
    Paragraph,
    Heading,
    ListBlock,
    CodeBlock,
    Blockquote,
    Image,
    Table,
    Comment,
    PageBreak,
    TocPlaceholder,
]


@dataclass(frozen=True)
class SectionModel:
    children: tuple[Block, ...]
    style: Style

    def to_dict(self) -> dict[str, object]:
        return {"children": [child.to_dict() for child in self.children]}


def iter_blocks(blocks: tuple[Block, ...] | list[Block]):
    """Yield every block depth-first, descending into lists and quotes."""
    for block in blocks:
        yield block
        if isinstance(block, ListBlock):
            for item in block.children:
                yield item
                yield from iter_blocks(item.children)
        elif isinstance(block, Blockquote):
            yield from iter_blocks(block.children)
