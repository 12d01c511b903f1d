"""Literal marker sniffing for raw markup and marker-only paragraphs.

The matching here is deliberately heuristic: raw HTML payloads are searched
for a comment prefix or a page break keyword, and paragraphs are compared
against exact marker tokens after trimming.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from . import config

_COMMENT_PATTERN = re.compile(
    re.escape(config.COMMENT_MARKER) + r"\s*(?P<body>.*?)\s*(?:-->|$)",
    re.DOTALL,
)


class MarkerKind(str, Enum):
    COMMENT = "comment"
    PAGE_BREAK = "page_break"
    TOC = "toc"


@dataclass(frozen=True)
class MarkerMatch:
    kind: MarkerKind
    body: str | None = None


def match_raw_marker(raw: str | None) -> MarkerMatch | None:
    """Classify a raw HTML payload.

    A comment marker wins over a page break keyword. A comment marker with no
    trailing text yields nothing.
    """
    if not raw:
        return None
    if config.COMMENT_MARKER in raw:
        match = _COMMENT_PATTERN.search(raw)
        body = match.group("body").strip() if match else ""
        if body:
            return MarkerMatch(MarkerKind.COMMENT, body)
        return None
    if config.RAW_PAGE_BREAK_MARKER in raw:
        return MarkerMatch(MarkerKind.PAGE_BREAK)
    return None


def match_paragraph_marker(text: str | None) -> MarkerMatch | None:
    if text is None:
        return None
    stripped = text.strip()
    if stripped == config.TOC_MARKER:
        return MarkerMatch(MarkerKind.TOC)
    if stripped == config.PAGE_BREAK_MARKER:
        return MarkerMatch(MarkerKind.PAGE_BREAK)
    return None
