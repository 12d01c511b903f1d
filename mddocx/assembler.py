from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from time import perf_counter
from typing import Any, Mapping

from . import config
from .assembly_log import AssemblyLogState, WarningEntry, summarize_source, write_log
from .converter import MarkdownConverter
from .markdown_ast import TextReplacement, apply_text_replacements, parse_markdown
from .model import Block, SectionModel
from .numbering import NumberingDefinition, NumberingRegistry
from .section_config import (
    HeaderFooterContent,
    ResolvedHeaderFooter,
    ResolvedSectionConfig,
    SectionConfig,
    resolve_section,
)
from .style import DOCUMENT_TYPES, Style, normalize_style_overrides, validate_enum
from .toc import HeadingEntry, HeadingRegistry, TocState, resolve_placeholders

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSection:
    markdown: str
    config: SectionConfig = field(default_factory=SectionConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DocumentSection:
        return cls(markdown=str(data.get("markdown") or ""), config=SectionConfig.from_dict(data))


@dataclass(frozen=True)
class ConversionOptions:
    document_type: str = "document"
    style: Mapping[str, Any] = field(default_factory=dict)
    template: SectionConfig | None = None
    sections: tuple[DocumentSection, ...] = ()
    text_replacements: tuple[TextReplacement, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ConversionOptions:
        if not data:
            return cls()
        template = data.get("template")
        return cls(
            document_type=data.get("document_type") or data.get("documentType") or "document",
            style=normalize_style_overrides(data.get("style")),
            template=SectionConfig.from_dict(template) if template is not None else None,
            sections=tuple(DocumentSection.from_dict(item) for item in data.get("sections") or ()),
            text_replacements=tuple(
                TextReplacement.from_dict(item)
                for item in data.get("text_replacements") or data.get("textReplacements") or ()
            ),
        )

    def validate(self) -> None:
        validate_enum("document_type", self.document_type, DOCUMENT_TYPES)
        self.global_style().validate()
        if self.template is not None:
            self.template.validate()
        for index, section in enumerate(self.sections):
            try:
                section.config.validate()
            except ValueError as exc:
                raise ValueError(f"sections[{index}]: {exc}") from exc
        for item in self.text_replacements:
            item.validate()

    def global_style(self) -> Style:
        return Style().merged(self.style)


@dataclass(frozen=True)
class SectionDescriptor:
    index: int
    config: ResolvedSectionConfig
    children: tuple[Block, ...]
    headers: ResolvedHeaderFooter
    footers: ResolvedHeaderFooter

    @property
    def style(self) -> Style:
        return self.config.style

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"properties": self.config.properties_dict()}
        if not self.headers.is_empty():
            data["headers"] = self.headers.to_dict()
        if not self.footers.is_empty():
            data["footers"] = self.footers.to_dict()
        data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class AssemblyResult:
    document_type: str
    sections: tuple[SectionDescriptor, ...]
    numbering: tuple[NumberingDefinition, ...]
    headings: tuple[HeadingEntry, ...]
    warnings: tuple[WarningEntry, ...]
    toc_state: TocState = TocState.PENDING

    def to_dict(self) -> dict[str, object]:
        return {
            "document_type": self.document_type,
            "sections": [section.to_dict() for section in self.sections],
            "numbering": {"config": [item.to_dict() for item in self.numbering]},
            "headings": [entry.to_dict() for entry in self.headings],
            "warnings": [warning.to_dict() for warning in self.warnings],
        }


class DocumentAssembler:
    """Run one assembly pass per call: parse, convert, number and resolve TOC.

    Registries are created fresh for each call. Sections are processed in the
    order given so numbering offsets and heading order follow the source.
    """

    def __init__(
        self,
        write_log: bool = False,
        toc_title: str = config.DEFAULT_TOC_TITLE,
        log_retention_days: int = config.LOG_RETENTION_DAYS,
    ) -> None:
        self.write_log = write_log
        self.log_retention_days = log_retention_days
        self.toc_title = toc_title
        self._last_log_state: AssemblyLogState | None = None

    @property
    def last_log_state(self) -> AssemblyLogState | None:
        return self._last_log_state

    def assemble(
        self,
        markdown: str,
        options: ConversionOptions | Mapping[str, Any] | None = None,
    ) -> AssemblyResult:
        if not isinstance(options, ConversionOptions):
            options = ConversionOptions.from_dict(options)
        started = perf_counter()
        log_state = AssemblyLogState(
            source_summary=summarize_source(markdown),
            start_time=datetime.now(),
        )
        try:
            result = self._assemble(markdown, options, log_state)
        except Exception as exc:
            log_state.error = str(exc)
            log_state.elapsed_sec = perf_counter() - started
            self._finish(log_state)
            raise
        log_state.elapsed_sec = perf_counter() - started
        self._finish(log_state)
        return result

    def _assemble(
        self,
        markdown: str,
        options: ConversionOptions,
        log_state: AssemblyLogState,
    ) -> AssemblyResult:
        numbering = NumberingRegistry()
        headings = HeadingRegistry()
        global_style = options.global_style()
        sources = options.sections or (DocumentSection(markdown=markdown),)
        resolved_configs: list[ResolvedSectionConfig] = []
        models: list[SectionModel] = []
        for index, source in enumerate(sources):
            resolved = resolve_section(global_style, options.template, source.config)
            tokens = parse_markdown(source.markdown)
            tokens = apply_text_replacements(tokens, options.text_replacements)
            offset = numbering.register_section()
            converter = MarkdownConverter(resolved.style, numbering, headings)
            models.append(converter.convert_document(tokens))
            local_max = numbering.end_section()
            logger.debug(
                "section %d converted: offset=%d local_lists=%d", index, offset, local_max
            )
            resolved_configs.append(resolved)
        resolution = resolve_placeholders(models, headings, self.toc_title)
        descriptors = tuple(
            _build_descriptor(index, resolved, model)
            for index, (resolved, model) in enumerate(zip(resolved_configs, resolution.sections))
        )
        log_state.section_count = len(descriptors)
        log_state.heading_count = len(headings)
        log_state.max_sequence_id = numbering.max_sequence_id
        log_state.toc_state = resolution.state.value
        log_state.warnings.extend(resolution.warnings)
        return AssemblyResult(
            document_type=options.document_type,
            sections=descriptors,
            numbering=tuple(numbering.numbering_config()),
            headings=headings.entries,
            warnings=resolution.warnings,
            toc_state=resolution.state,
        )

    def _finish(self, log_state: AssemblyLogState) -> None:
        self._last_log_state = log_state
        if self.write_log:
            config.cleanup_logs(self.log_retention_days)
            write_log(log_state)


def parse_to_docx_options(
    markdown: str,
    options: ConversionOptions | Mapping[str, Any] | None = None,
) -> AssemblyResult:
    return DocumentAssembler().assemble(markdown, options)


def _build_descriptor(
    index: int,
    resolved: ResolvedSectionConfig,
    model: SectionModel,
) -> SectionDescriptor:
    footers = resolved.footers
    display = resolved.page_numbering.display
    if display != "none" and footers.default is None and "default" not in footers.cleared:
        footers = replace(
            footers,
            default=HeaderFooterContent(
                alignment=resolved.page_numbering.alignment,
                page_number_display=display,
            ),
        )
    return SectionDescriptor(
        index=index,
        config=resolved,
        children=model.children,
        headers=resolved.headers,
        footers=footers,
    )

