from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable

from .markers import MarkerKind, match_paragraph_marker, match_raw_marker
from .model import (
    Block,
    Blockquote,
    CodeBlock,
    Comment,
    Heading,
    Image,
    ListBlock,
    ListItem,
    PageBreak,
    Paragraph,
    SectionModel,
    Table,
    TextRun,
    TocPlaceholder,
)
from .numbering import NumberingRegistry
from .style import Style
from .toc import HeadingRegistry

Token = dict[str, Any]

_BREAK_KINDS = {"linebreak", "softbreak"}


@dataclass(frozen=True)
class _InlineContext:
    bold: bool = False
    italic: bool = False
    link: str | None = None

    def run(self, value: str, code: bool = False) -> TextRun:
        return TextRun(
            value=value,
            bold=self.bold,
            italic=self.italic,
            code=code,
            link=self.link,
        )


class MarkdownConverter:
    """Turn a mistune AST into model blocks for one section.

    The converter never raises on unexpected tokens: unknown block kinds are
    dropped and unknown inline kinds are flattened to plain text.
    """

    def __init__(
        self,
        style: Style,
        numbering: NumberingRegistry,
        headings: HeadingRegistry,
    ) -> None:
        self.style = style
        self.numbering = numbering
        self.headings = headings
        self._handlers: dict[str, Callable[[Token], list[Block]]] = {
            "heading": self._convert_heading,
            "paragraph": self._convert_paragraph,
            "block_text": self._convert_paragraph,
            "list": self._convert_list,
            "block_code": self._convert_code,
            "block_quote": self._convert_blockquote,
            "table": self._convert_table,
            "block_html": self._convert_raw,
        }

    def convert_document(self, tokens: Iterable[Token]) -> SectionModel:
        children: list[Block] = []
        for token in tokens:
            if not isinstance(token, dict):
                continue
            if token.get("type") == "paragraph":
                marker = match_paragraph_marker(_marker_text(token))
                if marker is not None and marker.kind == MarkerKind.TOC:
                    children.append(TocPlaceholder())
                    continue
                if marker is not None and marker.kind == MarkerKind.PAGE_BREAK:
                    children.append(PageBreak())
                    continue
            children.extend(self.convert_node(token))
        return SectionModel(children=tuple(children), style=self.style)

    def convert_node(self, token: Token) -> list[Block]:
        if not isinstance(token, dict):
            return []
        handler = self._handlers.get(token.get("type", ""))
        if handler is None:
            return []
        return handler(token)

    def _convert_heading(self, token: Token) -> list[Block]:
        level = int(_attrs(token).get("level", 1))
        runs = self.convert_inlines(token.get("children") or [])
        text = "".join(run.value for run in runs).replace("\n", " ")
        entry = self.headings.register(text, level)
        return [Heading(level=level, children=runs, anchor_id=entry.anchor_id)]

    def _convert_paragraph(self, token: Token) -> list[Block]:
        children = token.get("children") or []
        image = children[0] if len(children) == 1 else None
        if isinstance(image, dict) and image.get("type") == "image":
            return [
                Image(
                    alt=_flatten_text(image.get("children") or []),
                    url=str(_attrs(image).get("url") or ""),
                )
            ]
        return [Paragraph(children=self.convert_inlines(children))]

    def _convert_list(self, token: Token) -> list[Block]:
        attrs = _attrs(token)
        ordered = bool(attrs.get("ordered", False))
        start = attrs.get("start")
        start = int(start) if start is not None else 1
        sequence_id = self.numbering.allocate(token, start) if ordered else None
        items: list[ListItem] = []
        for item in token.get("children") or []:
            if not isinstance(item, dict) or item.get("type") != "list_item":
                continue
            item_children: list[Block] = []
            for child in item.get("children") or []:
                item_children.extend(self._convert_item_child(child))
            if not item_children:
                item_children.append(Paragraph())
            items.append(ListItem(children=tuple(item_children)))
        return [
            ListBlock(
                ordered=ordered,
                children=tuple(items),
                sequence_id=sequence_id,
                start=start,
            )
        ]

    def _convert_item_child(self, token: Token) -> list[Block]:
        # Item text stays a paragraph so the writer can number it.
        if isinstance(token, dict) and token.get("type") in ("paragraph", "block_text"):
            return [Paragraph(children=self.convert_inlines(token.get("children") or []))]
        return self.convert_node(token)

    def _convert_code(self, token: Token) -> list[Block]:
        info = str(_attrs(token).get("info") or "").strip()
        language = info.split()[0] if info else None
        value = str(token.get("raw") or "")
        if value.endswith("\n"):
            value = value[:-1]
        return [CodeBlock(value=value, language=language)]

    def _convert_blockquote(self, token: Token) -> list[Block]:
        children: list[Block] = []
        for child in token.get("children") or []:
            children.extend(self.convert_node(child))
        return [Blockquote(children=tuple(children))]

    def _convert_table(self, token: Token) -> list[Block]:
        headers: list[str] = []
        rows: list[tuple[str, ...]] = []
        for part in token.get("children") or []:
            if not isinstance(part, dict):
                continue
            kind = part.get("type")
            if kind == "table_head":
                headers = [_cell_text(cell) for cell in part.get("children") or []]
            elif kind == "table_body":
                for row in part.get("children") or []:
                    if isinstance(row, dict):
                        rows.append(tuple(_cell_text(cell) for cell in row.get("children") or []))
        return [Table(headers=tuple(headers), rows=tuple(rows))]

    def _convert_raw(self, token: Token) -> list[Block]:
        marker = match_raw_marker(token.get("raw"))
        if marker is None:
            return []
        if marker.kind == MarkerKind.COMMENT:
            return [Comment(value=marker.body or "")]
        return [PageBreak()]

    def convert_inlines(self, tokens: Iterable[Token]) -> tuple[TextRun, ...]:
        return tuple(self._inline_runs(tokens, _InlineContext()))

    def _inline_runs(self, tokens: Iterable[Token], context: _InlineContext) -> list[TextRun]:
        runs: list[TextRun] = []
        for token in tokens:
            if not isinstance(token, dict):
                continue
            kind = token.get("type")
            children = token.get("children") or []
            if kind == "text":
                runs.append(context.run(str(token.get("raw", ""))))
            elif kind == "emphasis":
                runs.extend(self._inline_runs(children, replace(context, italic=True)))
            elif kind == "strong":
                runs.extend(self._inline_runs(children, replace(context, bold=True)))
            elif kind == "codespan":
                runs.append(context.run(str(token.get("raw", "")), code=True))
            elif kind == "link":
                url = _attrs(token).get("url")
                runs.extend(self._inline_runs(children, replace(context, link=url)))
            elif kind in _BREAK_KINDS:
                runs.append(context.run("\n"))
            elif kind == "image":
                runs.append(context.run(_flatten_text(children)))
            elif "raw" in token:
                runs.append(context.run(str(token["raw"])))
            elif children:
                runs.extend(self._inline_runs(children, context))
        return runs


def _attrs(token: Token) -> dict[str, Any]:
    attrs = token.get("attrs")
    return attrs if isinstance(attrs, dict) else {}


def _marker_text(paragraph: Token) -> str:
    return "".join(
        str(child.get("raw", ""))
        for child in paragraph.get("children") or []
        if isinstance(child, dict) and child.get("type") == "text"
    )


def _flatten_text(tokens: Iterable[Token]) -> str:
    parts: list[str] = []
    for token in tokens:
        if not isinstance(token, dict):
            continue
        kind = token.get("type")
        if kind in _BREAK_KINDS:
            parts.append("\n")
        elif "raw" in token:
            parts.append(str(token["raw"]))
        elif token.get("children"):
            parts.append(_flatten_text(token["children"]))
    return "".join(parts)


def _cell_text(cell: Token) -> str:
    if not isinstance(cell, dict):
        return ""
    return _flatten_text(cell.get("children") or []).strip()
