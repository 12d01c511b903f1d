from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from . import config


@dataclass(frozen=True)
class WarningEntry:
    rule: str
    reason: str
    section_index: int | None = None
    block_index: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "rule": self.rule,
            "reason": self.reason,
            "section_index": self.section_index,
            "block_index": self.block_index,
        }


@dataclass
class AssemblyLogState:
    source_summary: str
    start_time: datetime
    warnings: list[WarningEntry] = field(default_factory=list)
    section_count: int = 0
    heading_count: int = 0
    max_sequence_id: int = 0
    toc_state: str | None = None
    error: str | None = None
    elapsed_sec: float | None = None


def summarize_source(markdown: str, limit: int = 60) -> str:
    first_line = markdown.strip().splitlines()[0] if markdown.strip() else ""
    if len(first_line) > limit:
        first_line = first_line[: limit - 3] + "..."
    return f"{len(markdown)} chars, first line {first_line!r}"


def write_log(log_state: AssemblyLogState) -> None:
    config.ensure_base_dirs()
    log_path = config.build_log_path(log_state.start_time)
    lines = [
        f"source: {log_state.source_summary}",
        f"elapsed_sec: {log_state.elapsed_sec:.3f}"
        if log_state.elapsed_sec is not None
        else "elapsed_sec: unknown",
        f"sections_count: {log_state.section_count}",
        f"headings_count: {log_state.heading_count}",
        f"max_sequence_id: {log_state.max_sequence_id}",
    ]
    if log_state.toc_state:
        lines.append(f"toc_state: {log_state.toc_state}")
    if log_state.error:
        lines.append(f"error: {log_state.error}")
    lines.append(f"warnings_count: {len(log_state.warnings)}")
    for warning in log_state.warnings:
        parts = [f"rule={warning.rule}", f"reason={warning.reason}"]
        if warning.section_index is not None:
            parts.append(f"section_index={warning.section_index}")
        if warning.block_index is not None:
            parts.append(f"block_index={warning.block_index}")
        lines.append("warning: " + " ".join(parts))
    log_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
