from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Union

import mistune

from .errors import ParserError

Token = dict[str, Any]
Replacement = Union[str, Callable[..., Any]]

_DELIMITER_CELL = r"[ \t]*:?-+:?[ \t]*"
_PIPE_ROW = r" {0,3}\|[^\n]*\|[ \t]*(?:\n|$)"
_BARE_ROW = r" {0,3}[^\s][^\n]*\|[^\n]*(?:\n|$)"

# Header, delimiter row, then any number of body rows of any width.
PIPE_TABLE_PATTERN = (
    r"^ {0,3}\|[^\n]*\|[ \t]*\n"
    r" {0,3}\|" + _DELIMITER_CELL + r"(?:\|" + _DELIMITER_CELL + r")*\|[ \t]*(?:\n|$)"
    r"(?:" + _PIPE_ROW + r")*"
)
BARE_TABLE_PATTERN = (
    r"^ {0,3}[^\s|][^\n]*\|[^\n]*\n"
    r" {0,3}\|?" + _DELIMITER_CELL + r"(?:\|" + _DELIMITER_CELL + r")+\|?[ \t]*(?:\n|$)"
    r"(?:" + _BARE_ROW + r")*"
)

_CELL_SPLIT = re.compile(r"(?<!\\)\|")


@dataclass(frozen=True)
class TextReplacement:
    find: str | re.Pattern[str]
    replace: Replacement

    def pattern(self) -> re.Pattern[str]:
        if isinstance(self.find, re.Pattern):
            return self.find
        return re.compile(re.escape(self.find))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | TextReplacement) -> TextReplacement:
        if isinstance(data, TextReplacement):
            return data
        return cls(find=data["find"], replace=data["replace"])

    def validate(self) -> None:
        if isinstance(self.find, str) and not self.find:
            raise ValueError("text replacement find must be non-empty")
        if not isinstance(self.find, (str, re.Pattern)):
            raise ValueError(
                f"text replacement find must be a string or pattern, got {self.find!r}"
            )
        if not isinstance(self.replace, str) and not callable(self.replace):
            raise ValueError(
                f"text replacement replace must be a string or callable, got {self.replace!r}"
            )


def ragged_table(md: mistune.Markdown) -> None:
    """mistune plugin for GFM tables that keeps body rows of any width.

    mistune's own table plugin drops the whole table when a body row has
    more or fewer cells than the header.
    """
    md.block.register("table", PIPE_TABLE_PATTERN, _parse_table, before="paragraph")
    md.block.register("nptable", BARE_TABLE_PATTERN, _parse_table, before="paragraph")


_PLUGINS = [ragged_table, "strikethrough"]


def _parse_table(block: Any, m: re.Match[str], state: Any) -> int | None:
    lines = m.group(0).splitlines()
    headers = _split_row(lines[0])
    aligns = [_cell_alignment(cell) for cell in _split_row(lines[1])]
    if len(headers) != len(aligns):
        return None
    rows = [
        {"type": "table_row", "children": _table_cells(_split_row(line), aligns, head=False)}
        for line in lines[2:]
        if line.strip()
    ]
    state.append_token(
        {
            "type": "table",
            "children": [
                {"type": "table_head", "children": _table_cells(headers, aligns, head=True)},
                {"type": "table_body", "children": rows},
            ],
        }
    )
    return m.end()


def _split_row(line: str) -> list[str]:
    text = line.strip()
    if text.startswith("|"):
        text = text[1:]
    if text.endswith("|") and not text.endswith("\\|"):
        text = text[:-1]
    return [cell.strip() for cell in _CELL_SPLIT.split(text)]


def _cell_alignment(cell: str) -> str | None:
    if cell.startswith(":") and cell.endswith(":"):
        return "center"
    if cell.startswith(":"):
        return "left"
    if cell.endswith(":"):
        return "right"
    return None


def _table_cells(cells: list[str], aligns: list[str | None], head: bool) -> list[Token]:
    return [
        {
            "type": "table_cell",
            "text": text,
            "attrs": {"align": aligns[index] if index < len(aligns) else None, "head": head},
        }
        for index, text in enumerate(cells)
    ]


def parse_markdown(text: str) -> list[Token]:
    """Parse markdown into mistune's AST token list.

    Any failure inside the parser is re-raised as ``ParserError``.
    """
    markdown = mistune.create_markdown(renderer="ast", plugins=list(_PLUGINS))
    try:
        tokens = markdown(text)
    except Exception as exc:
        raise ParserError(f"markdown parsing failed: {exc}") from exc
    if not isinstance(tokens, list):
        raise ParserError(
            f"markdown parser returned {type(tokens).__name__}, expected a token list"
        )
    return tokens


def apply_text_replacements(
    tokens: list[Token],
    replacements: Iterable[TextReplacement] | None,
) -> list[Token]:
    """Return a copy of ``tokens`` with find/replace applied to text leaves.

    Code spans and code blocks are left untouched.
    """
    items = list(replacements or ())
    if not items:
        return tokens
    result = copy.deepcopy(tokens)
    for token in _iter_text_tokens(result):
        value = token.get("raw", "")
        for item in items:
            value = item.pattern().sub(_substitution(item.replace), value)
        token["raw"] = value
    return result


def _iter_text_tokens(tokens: list[Token]):
    for token in tokens:
        if not isinstance(token, dict):
            continue
        if token.get("type") == "text":
            yield token
            continue
        children = token.get("children")
        if isinstance(children, list):
            yield from _iter_text_tokens(children)


def _substitution(replace: Replacement) -> Callable[[re.Match[str]], str]:
    if callable(replace):
        def _call(match: re.Match[str]) -> str:
            value = replace(match.group(0), *match.groups())
            return "" if value is None else str(value)

        return _call

    def _literal(match: re.Match[str]) -> str:
        return replace

    return _literal
