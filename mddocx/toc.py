from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from . import config
from .assembly_log import WarningEntry
from .model import Block, Paragraph, SectionModel, TextRun, TocPlaceholder

logger = logging.getLogger(__name__)

TOC_TITLE_ROLE = "toc_title"
TOC_ENTRY_ROLE = "toc_entry"


class TocState(str, Enum):
    PENDING = "pending"
    INSERTED = "inserted"


@dataclass(frozen=True)
class HeadingEntry:
    text: str
    level: int
    anchor_id: str

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "level": self.level, "anchor_id": self.anchor_id}


@dataclass
class HeadingRegistry:
    """Append-only list of headings seen during one assembly pass."""

    _entries: list[HeadingEntry] = field(default_factory=list)

    def register(self, text: str, level: int) -> HeadingEntry:
        anchor_id = f"{config.HEADING_ANCHOR_PREFIX}{len(self._entries) + 1}"
        entry = HeadingEntry(text=text, level=level, anchor_id=anchor_id)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[HeadingEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class TocResolution:
    sections: tuple[SectionModel, ...]
    warnings: tuple[WarningEntry, ...]
    state: TocState


def build_toc_blocks(
    registry: HeadingRegistry,
    title: str = config.DEFAULT_TOC_TITLE,
) -> tuple[Paragraph, ...]:
    blocks: list[Paragraph] = [
        Paragraph(children=(TextRun(title, bold=True),), role=TOC_TITLE_ROLE)
    ]
    for entry in registry.entries:
        blocks.append(
            Paragraph(
                children=(TextRun(entry.text, anchor=entry.anchor_id),),
                role=TOC_ENTRY_ROLE,
                level=entry.level,
                indent_level=max(entry.level - 1, 0),
            )
        )
    return tuple(blocks)


def resolve_placeholders(
    sections: list[SectionModel] | tuple[SectionModel, ...],
    registry: HeadingRegistry,
    title: str = config.DEFAULT_TOC_TITLE,
) -> TocResolution:
    """Replace the first top-level TOC placeholder with generated entries.

    Later placeholders are dropped with a warning. With no registered
    headings every placeholder is dropped silently and the state stays
    pending.
    """
    state = TocState.PENDING
    warnings: list[WarningEntry] = []
    resolved: list[SectionModel] = []
    toc_blocks = build_toc_blocks(registry, title) if len(registry) else ()
    for section_index, section in enumerate(sections):
        children: list[Block] = []
        changed = False
        for block_index, block in enumerate(section.children):
            if not isinstance(block, TocPlaceholder):
                children.append(block)
                continue
            changed = True
            if not toc_blocks:
                continue
            if state is TocState.PENDING:
                children.extend(toc_blocks)
                state = TocState.INSERTED
                continue
            warning = WarningEntry(
                rule="toc",
                reason="table of contents already inserted; placeholder ignored",
                section_index=section_index,
                block_index=block_index,
            )
            warnings.append(warning)
            logger.warning(
                "ignoring extra table of contents placeholder in section %d at block %d",
                section_index,
                block_index,
            )
        resolved.append(replace(section, children=tuple(children)) if changed else section)
    return TocResolution(sections=tuple(resolved), warnings=tuple(warnings), state=state)
