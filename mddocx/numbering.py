from __future__ import annotations

from dataclasses import dataclass, field

from . import config


@dataclass(frozen=True)
class NumberingLevel:
    level: int
    format: str
    text: str
    start: int
    indent_left: int
    indent_hanging: int

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level,
            "format": self.format,
            "text": self.text,
            "start": self.start,
            "alignment": "LEFT",
            "indent": {"left": self.indent_left, "hanging": self.indent_hanging},
        }


@dataclass(frozen=True)
class NumberingDefinition:
    sequence_id: int
    reference: str
    levels: tuple[NumberingLevel, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "reference": self.reference,
            "levels": [level.to_dict() for level in self.levels],
        }


def numbering_reference(sequence_id: int) -> str:
    return f"{config.NUMBERED_LIST_REFERENCE_PREFIX}{sequence_id}"


def build_numbering_levels(start: int = 1) -> tuple[NumberingLevel, ...]:
    levels: list[NumberingLevel] = []
    for index in range(config.NUMBERING_LEVEL_COUNT):
        levels.append(
            NumberingLevel(
                level=index,
                format="decimal",
                text=f"%{index + 1}.",
                start=start,
                indent_left=config.NUMBERING_INDENT_STEP * (index + 1),
                indent_hanging=config.NUMBERING_HANGING_INDENT,
            )
        )
    return tuple(levels)


@dataclass
class NumberingRegistry:
    """Sequence ids for ordered lists within one assembly pass.

    Ids form a dense run starting at 1. Each section starts allocating right
    after the running maximum of the sections processed before it, so two
    sections never share an id.
    """

    _ids: dict[int, int] = field(default_factory=dict)
    _nodes: list[object] = field(default_factory=list)
    _starts: dict[int, int] = field(default_factory=dict)
    _max_sequence_id: int = 0
    _section_offset: int = 0
    _section_open: bool = False

    @property
    def max_sequence_id(self) -> int:
        return self._max_sequence_id

    @property
    def section_offset(self) -> int:
        return self._section_offset

    def register_section(self) -> int:
        if self._section_open:
            raise RuntimeError("previous section was not ended")
        self._section_open = True
        self._section_offset = self._max_sequence_id
        return self._section_offset

    def allocate(self, list_node: object, start: int = 1) -> int:
        key = id(list_node)
        existing = self._ids.get(key)
        if existing is not None:
            return existing
        self._max_sequence_id += 1
        sequence_id = self._max_sequence_id
        self._ids[key] = sequence_id
        # Holding the node keeps its id() from being reused in this pass.
        self._nodes.append(list_node)
        self._starts[sequence_id] = start
        return sequence_id

    def end_section(self) -> int:
        """Close the open section and return its local maximum."""
        self._section_open = False
        return self._max_sequence_id - self._section_offset

    def numbering_config(self) -> list[NumberingDefinition]:
        return [
            NumberingDefinition(
                sequence_id=sequence_id,
                reference=numbering_reference(sequence_id),
                levels=build_numbering_levels(self._starts.get(sequence_id, 1)),
            )
            for sequence_id in range(1, self._max_sequence_id + 1)
        ]
