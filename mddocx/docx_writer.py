from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping

from docx import Document
from docx.enum.section import WD_ORIENT, WD_SECTION
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK
from docx.image.exceptions import UnrecognizedImageError
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor, Twips
from lxml import etree

from . import config
from .assembler import AssemblyResult, ConversionOptions, DocumentAssembler, SectionDescriptor
from .errors import SerializationError
from .model import (
    Block,
    Blockquote,
    CodeBlock,
    Comment,
    Heading,
    Image,
    ListBlock,
    PageBreak,
    Paragraph,
    Table,
    TextRun,
)
from .numbering import NumberingDefinition
from .section_config import HeaderFooterContent, ResolvedHeaderFooter
from .style import Style
from .toc import TOC_ENTRY_ROLE, TOC_TITLE_ROLE

logger = logging.getLogger(__name__)

_SECTION_STARTS = {
    "NEXT_PAGE": WD_SECTION.NEW_PAGE,
    "NEXT_COLUMN": WD_SECTION.NEW_COLUMN,
    "CONTINUOUS": WD_SECTION.CONTINUOUS,
    "EVEN_PAGE": WD_SECTION.EVEN_PAGE,
    "ODD_PAGE": WD_SECTION.ODD_PAGE,
}
_ALIGNMENTS = {
    "LEFT": WD_ALIGN_PARAGRAPH.LEFT,
    "CENTER": WD_ALIGN_PARAGRAPH.CENTER,
    "RIGHT": WD_ALIGN_PARAGRAPH.RIGHT,
    "JUSTIFIED": WD_ALIGN_PARAGRAPH.JUSTIFY,
}
_PAGE_NUMBER_SEPARATORS = {
    "hyphen": "hyphen",
    "period": "period",
    "colon": "colon",
    "emDash": "emDash",
    "endash": "enDash",
}
_PAGE_NUMBER_FIELDS = {
    "current": ("PAGE",),
    "currentAndTotal": ("PAGE", "NUMPAGES"),
    "currentAndSectionTotal": ("PAGE", "SECTIONPAGES"),
}
# Children of w:sectPr that must follow w:pgNumType.
_PG_NUM_TYPE_SUCCESSORS = (
    "w:cols",
    "w:formProt",
    "w:vAlign",
    "w:noEndnote",
    "w:titlePg",
    "w:textDirection",
    "w:bidi",
    "w:rtlGutter",
    "w:docGrid",
    "w:printerSettings",
    "w:sectPrChange",
)
# Children of w:pPr in schema order.
_PPR_ORDER = (
    "w:pStyle",
    "w:keepNext",
    "w:keepLines",
    "w:pageBreakBefore",
    "w:framePr",
    "w:widowControl",
    "w:numPr",
    "w:suppressLineNumbers",
    "w:pBdr",
    "w:shd",
    "w:tabs",
    "w:suppressAutoHyphens",
    "w:kinsoku",
    "w:wordWrap",
    "w:overflowPunct",
    "w:topLinePunct",
    "w:autoSpaceDE",
    "w:autoSpaceDN",
    "w:bidi",
    "w:adjustRightInd",
    "w:snapToGrid",
    "w:spacing",
    "w:ind",
    "w:contextualSpacing",
    "w:mirrorIndents",
    "w:suppressOverlap",
    "w:jc",
    "w:textDirection",
    "w:textAlignment",
    "w:textboxTightWrap",
    "w:outlineLvl",
    "w:divId",
    "w:cnfStyle",
    "w:rPr",
    "w:sectPr",
    "w:pPrChange",
)

_CODE_FONT = "Courier New"
_LIST_INDENT_TWIPS = 360
_BLOCKQUOTE_INDENT_TWIPS = 720
_MAX_IMAGE_WIDTH = Inches(6)


class DocxWriter:
    """Render an assembly result into a python-docx document."""

    def __init__(self, result: AssemblyResult, image_root: str | Path | None = None) -> None:
        self.result = result
        self.image_root = Path(image_root) if image_root is not None else None
        self._document = None
        self._num_ids: dict[int, int] = {}
        self._bullet_num_id: int | None = None
        self._bookmark_id = 0

    def build(self):
        try:
            return self._build()
        except SerializationError:
            raise
        except Exception as exc:
            raise SerializationError(f"docx rendering failed: {exc}") from exc

    def to_bytes(self) -> bytes:
        document = self.build()
        buffer = BytesIO()
        try:
            document.save(buffer)
        except Exception as exc:
            raise SerializationError(f"docx saving failed: {exc}") from exc
        return buffer.getvalue()

    def save(self, output_path: str | Path) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_bytes())
        return path

    def _build(self):
        document = Document()
        self._document = document
        self._num_ids = {}
        self._bullet_num_id = None
        self._bookmark_id = 0
        self._register_numbering(self.result.numbering)
        for descriptor in self.result.sections:
            if descriptor.index == 0:
                section = document.sections[0]
            else:
                section = document.add_section(_SECTION_STARTS[descriptor.config.type])
            self._configure_section(section, descriptor)
            for block in descriptor.children:
                self._render_block(document, block, descriptor.style)
        logger.debug(
            "rendered %d sections with %d numbering definitions",
            len(self.result.sections),
            len(self._num_ids),
        )
        return document

    def _register_numbering(self, definitions: tuple[NumberingDefinition, ...]) -> None:
        numbering = self._document.part.numbering_part.element
        for definition in definitions:
            abstract_id = self._add_abstract_num(
                numbering,
                [
                    (level.level, level.format, level.text, level.start, level.indent_left)
                    for level in definition.levels
                ],
            )
            self._num_ids[definition.sequence_id] = _add_num(numbering, abstract_id)

    def _bullet_numbering(self) -> int:
        if self._bullet_num_id is None:
            numbering = self._document.part.numbering_part.element
            abstract_id = self._add_abstract_num(
                numbering,
                [
                    (index, "bullet", "•", 1, config.NUMBERING_INDENT_STEP * (index + 1))
                    for index in range(config.NUMBERING_LEVEL_COUNT)
                ],
            )
            self._bullet_num_id = _add_num(numbering, abstract_id)
        return self._bullet_num_id

    def _add_abstract_num(self, numbering, levels: list[tuple[int, str, str, int, int]]) -> int:
        abstract_id = _max_attr(numbering, "w:abstractNum", "w:abstractNumId") + 1
        abstract = etree.Element(qn("w:abstractNum"))
        abstract.set(qn("w:abstractNumId"), str(abstract_id))
        _sub(abstract, "w:multiLevelType", val="multilevel")
        for ilvl, fmt, text, start, indent in levels:
            lvl = _sub(abstract, "w:lvl", ilvl=str(ilvl))
            _sub(lvl, "w:start", val=str(start))
            _sub(lvl, "w:numFmt", val=fmt)
            _sub(lvl, "w:lvlText", val=text)
            _sub(lvl, "w:lvlJc", val="left")
            ppr = _sub(lvl, "w:pPr")
            _sub(ppr, "w:ind", left=str(indent), hanging=str(config.NUMBERING_HANGING_INDENT))
        first_num = numbering.find(qn("w:num"))
        if first_num is not None:
            first_num.addprevious(abstract)
        else:
            numbering.append(abstract)
        return abstract_id

    def _configure_section(self, section, descriptor: SectionDescriptor) -> None:
        resolved = descriptor.config
        section.start_type = _SECTION_STARTS[resolved.type]
        width, height = resolved.size.width, resolved.size.height
        if resolved.size.orientation == "LANDSCAPE":
            section.orientation = WD_ORIENT.LANDSCAPE
            width, height = max(width, height), min(width, height)
        else:
            section.orientation = WD_ORIENT.PORTRAIT
        section.page_width = Twips(width)
        section.page_height = Twips(height)
        margin = resolved.margin
        section.top_margin = Twips(margin.top)
        section.right_margin = Twips(margin.right)
        section.bottom_margin = Twips(margin.bottom)
        section.left_margin = Twips(margin.left)
        section.header_distance = Twips(margin.header)
        section.footer_distance = Twips(margin.footer)
        section.gutter = Twips(margin.gutter)
        section.different_first_page_header_footer = resolved.title_page
        self._apply_page_number_type(section, descriptor)
        self._render_header_footer(section, descriptor.headers, "header", descriptor.index)
        self._render_header_footer(section, descriptor.footers, "footer", descriptor.index)

    def _apply_page_number_type(self, section, descriptor: SectionDescriptor) -> None:
        numbering = descriptor.config.page_numbering
        sect_pr = section._sectPr
        # New sections start as a clone of the previous sectPr.
        existing = sect_pr.find(qn("w:pgNumType"))
        if existing is not None:
            sect_pr.remove(existing)
        if all(
            value is None
            for value in (numbering.start, numbering.format_type, numbering.separator)
        ):
            return
        pg_num_type = etree.Element(qn("w:pgNumType"))
        if numbering.start is not None:
            pg_num_type.set(qn("w:start"), str(numbering.start))
        if numbering.format_type is not None:
            pg_num_type.set(qn("w:fmt"), numbering.format_type)
        if numbering.separator is not None:
            pg_num_type.set(qn("w:chapSep"), _PAGE_NUMBER_SEPARATORS[numbering.separator])
        successor = next(
            (
                child
                for child in sect_pr
                if child.tag in {qn(tag) for tag in _PG_NUM_TYPE_SUCCESSORS}
            ),
            None,
        )
        if successor is not None:
            successor.addprevious(pg_num_type)
        else:
            sect_pr.append(pg_num_type)

    def _render_header_footer(
        self,
        section,
        group: ResolvedHeaderFooter,
        kind: str,
        index: int,
    ) -> None:
        targets = {
            "default": getattr(section, kind),
            "first": getattr(section, f"first_page_{kind}"),
            "even": getattr(section, f"even_page_{kind}"),
        }
        if group.even is not None:
            self._document.settings.odd_and_even_pages_header_footer = True
        for name, target in targets.items():
            content = group.slot(name)
            if content is None:
                # Unlinked and empty so nothing leaks in from the previous section.
                if index > 0:
                    target.is_linked_to_previous = False
                continue
            target.is_linked_to_previous = False
            paragraph = target.paragraphs[0] if target.paragraphs else target.add_paragraph()
            self._fill_header_footer(paragraph, content)

    def _fill_header_footer(self, paragraph, content: HeaderFooterContent) -> None:
        if content.alignment:
            paragraph.alignment = _ALIGNMENTS[content.alignment]
        elif content.page_number_display:
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        if content.text:
            paragraph.add_run(content.text)
        fields = _PAGE_NUMBER_FIELDS.get(content.page_number_display or "none", ())
        for position, instruction in enumerate(fields):
            if position == 0 and content.text:
                paragraph.add_run(" ")
            elif position > 0:
                paragraph.add_run(" / ")
            _add_field(paragraph, instruction)

    def _render_block(self, container, block: Block, style: Style, list_level: int = 0) -> None:
        if isinstance(block, Heading):
            self._render_heading(container, block, style)
        elif isinstance(block, Paragraph):
            self._render_paragraph(container, block, style)
        elif isinstance(block, ListBlock):
            self._render_list(container, block, style, list_level)
        elif isinstance(block, CodeBlock):
            self._render_code(container, block, style)
        elif isinstance(block, Blockquote):
            for child in block.children:
                paragraph_count = len(container.paragraphs)
                self._render_block(container, child, style, list_level)
                for paragraph in container.paragraphs[paragraph_count:]:
                    _quote_paragraph(paragraph, style)
        elif isinstance(block, Image):
            self._render_image(container, block, style)
        elif isinstance(block, Table):
            self._render_table(container, block, style)
        elif isinstance(block, Comment):
            paragraph = container.add_paragraph()
            run = paragraph.add_run(f"Comment: {block.value}")
            run.italic = True
            run.font.color.rgb = RGBColor.from_string("666666")
            self._format_paragraph(paragraph, style, style.paragraph_alignment)
        elif isinstance(block, PageBreak):
            container.add_paragraph().add_run().add_break(WD_BREAK.PAGE)

    def _render_heading(self, container, block: Heading, style: Style) -> None:
        report_title = self.result.document_type == "report" and block.level == 1
        style_name = "Title" if report_title else f"Heading {min(max(block.level, 1), 9)}"
        paragraph = container.add_paragraph(style=style_name)
        size = style.title_size if report_title else style.heading_size(block.level)
        if block.anchor_id:
            self._add_bookmark_start(paragraph, block.anchor_id)
        self._add_runs(paragraph, block.children, style, size=size, bold=True)
        if block.anchor_id:
            self._add_bookmark_end(paragraph)
        paragraph.paragraph_format.space_before = Twips(style.heading_spacing * 2)
        paragraph.paragraph_format.space_after = Twips(style.heading_spacing)
        paragraph.alignment = _ALIGNMENTS.get(style.heading_alignment_for(block.level))
        _apply_direction(paragraph, style)

    def _render_paragraph(
        self,
        container,
        block: Paragraph,
        style: Style,
        size: int | None = None,
    ):
        paragraph = container.add_paragraph()
        if block.role == TOC_TITLE_ROLE:
            self._add_runs(
                paragraph,
                block.children,
                style,
                size=style.toc_font_size or style.heading1_size,
                bold=True,
            )
            self._format_paragraph(paragraph, style, "LEFT")
            return paragraph
        if block.role == TOC_ENTRY_ROLE:
            level_style = style.toc_level_style(block.level or 1)
            self._add_runs(
                paragraph,
                block.children,
                style,
                size=level_style["font_size"] or style.paragraph_size,
                bold=bool(level_style["bold"]),
                italic=bool(level_style["italic"]),
            )
            self._format_paragraph(paragraph, style, "LEFT")
            paragraph.paragraph_format.left_indent = Twips(block.indent_level * _LIST_INDENT_TWIPS)
            return paragraph
        self._add_runs(paragraph, block.children, style, size=size or style.paragraph_size)
        self._format_paragraph(paragraph, style, style.paragraph_alignment)
        return paragraph

    def _render_list(self, container, block: ListBlock, style: Style, level: int) -> None:
        if block.ordered and block.sequence_id in self._num_ids:
            num_id = self._num_ids[block.sequence_id]
        else:
            num_id = self._bullet_numbering()
        ilvl = min(level, config.NUMBERING_LEVEL_COUNT - 1)
        for item in block.children:
            numbered = False
            for child in item.children:
                if isinstance(child, ListBlock):
                    self._render_list(container, child, style, level + 1)
                    continue
                if isinstance(child, Paragraph):
                    paragraph = self._render_paragraph(
                        container, child, style, size=style.list_item_size
                    )
                    if not numbered:
                        _set_numbering(paragraph, num_id, ilvl)
                        numbered = True
                    else:
                        paragraph.paragraph_format.left_indent = Twips(
                            config.NUMBERING_INDENT_STEP * (ilvl + 1)
                        )
                    continue
                self._render_block(container, child, style, level + 1)

    def _render_code(self, container, block: CodeBlock, style: Style) -> None:
        paragraph = container.add_paragraph()
        if block.language:
            label = paragraph.add_run(block.language)
            label.bold = True
            label.font.name = _CODE_FONT
            label.font.size = Pt(style.code_block_size / 2)
            label.font.color.rgb = RGBColor.from_string("666666")
            label.add_break()
        lines = block.value.split("\n")
        for index, line in enumerate(lines):
            stripped = line.lstrip(" ")
            run = paragraph.add_run(" " * (len(line) - len(stripped)) + stripped)
            run.font.name = _CODE_FONT
            run.font.size = Pt(style.code_block_size / 2)
            run.font.color.rgb = RGBColor.from_string("444444")
            if index < len(lines) - 1:
                run.add_break()
        paragraph.paragraph_format.left_indent = Twips(_LIST_INDENT_TWIPS)
        paragraph.paragraph_format.space_before = Twips(style.paragraph_spacing)
        paragraph.paragraph_format.space_after = Twips(style.paragraph_spacing)
        _set_shading(paragraph, "F5F5F5")
        _set_borders(paragraph, ("top", "left", "bottom", "right"), "DDDDDD", size=4)

    def _render_image(self, container, block: Image, style: Style) -> None:
        paragraph = container.add_paragraph()
        path = self._image_path(block.url)
        if path is not None:
            try:
                paragraph.add_run().add_picture(str(path), width=_MAX_IMAGE_WIDTH)
                paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
                return
            except (UnrecognizedImageError, OSError) as exc:
                logger.warning("image %s could not be embedded: %s", block.url, exc)
                paragraph = container.add_paragraph()
        run = paragraph.add_run(f"[Image: {block.alt or block.url}]")
        run.italic = True
        run.font.color.rgb = RGBColor.from_string("666666")
        self._format_paragraph(paragraph, style, "CENTER")

    def _image_path(self, url: str) -> Path | None:
        if not url or "://" in url or url.startswith("data:"):
            return None
        path = Path(url)
        if not path.is_absolute() and self.image_root is not None:
            path = self.image_root / path
        return path if path.is_file() else None

    def _render_table(self, container, block: Table, style: Style) -> None:
        columns = block.column_count
        if not columns:
            return
        header_rows = 1 if block.headers else 0
        table = container.add_table(rows=header_rows + len(block.rows), cols=columns)
        try:
            table.style = "Table Grid"
        except KeyError:
            logger.debug("Table Grid style is not available; using default table style")
        fixed = style.table_layout == "fixed"
        table.autofit = not fixed
        if fixed:
            width = Twips(config.DEFAULT_PAGE_CONTENT_WIDTH // columns)
            for column in table.columns:
                for cell in column.cells:
                    cell.width = width
        shading = "DDDDDD" if self.result.document_type == "report" else "F2F2F2"
        if block.headers:
            for index in range(columns):
                cell = table.rows[0].cells[index]
                text = block.headers[index] if index < len(block.headers) else ""
                run = cell.paragraphs[0].add_run(text)
                run.bold = True
                run.font.size = Pt(style.paragraph_size / 2)
                cell.paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER
                _set_cell_shading(cell, shading)
        for row_index, row in enumerate(block.rows, start=header_rows):
            for index in range(columns):
                text = row[index] if index < len(row) else ""
                cell = table.rows[row_index].cells[index]
                run = cell.paragraphs[0].add_run(text)
                run.font.size = Pt(style.paragraph_size / 2)

    def _add_runs(
        self,
        paragraph,
        runs: tuple[TextRun, ...],
        style: Style,
        size: int | None = None,
        bold: bool = False,
        italic: bool = False,
    ) -> None:
        for text_run in runs:
            target = text_run.anchor or text_run.link
            hyperlink = self._hyperlink(paragraph, text_run) if target else None
            pieces = text_run.value.split("\n")
            for index, piece in enumerate(pieces):
                run = paragraph.add_run(piece)
                run.bold = text_run.bold or bold or None
                run.italic = text_run.italic or italic or None
                if size is not None:
                    run.font.size = Pt(size / 2)
                if text_run.code:
                    run.font.name = _CODE_FONT
                    run.font.color.rgb = RGBColor.from_string("444444")
                    _set_run_shading(run, "F5F5F5")
                elif style.font_family:
                    run.font.name = style.font_family
                if hyperlink is not None:
                    run.font.color.rgb = RGBColor.from_string("0000FF")
                    run.underline = True
                    hyperlink.append(run._r)
                if index < len(pieces) - 1:
                    paragraph.add_run().add_break()

    def _hyperlink(self, paragraph, text_run: TextRun):
        hyperlink = etree.SubElement(paragraph._p, qn("w:hyperlink"))
        if text_run.anchor:
            hyperlink.set(qn("w:anchor"), text_run.anchor)
        elif text_run.link and text_run.link.startswith("#"):
            hyperlink.set(qn("w:anchor"), text_run.link[1:])
        else:
            r_id = paragraph.part.relate_to(text_run.link, RT.HYPERLINK, is_external=True)
            hyperlink.set(qn("r:id"), r_id)
        return hyperlink

    def _add_bookmark_start(self, paragraph, name: str) -> None:
        self._bookmark_id += 1
        _sub(paragraph._p, "w:bookmarkStart", id=str(self._bookmark_id), name=name)

    def _add_bookmark_end(self, paragraph) -> None:
        _sub(paragraph._p, "w:bookmarkEnd", id=str(self._bookmark_id))

    def _format_paragraph(self, paragraph, style: Style, alignment: str | None) -> None:
        paragraph_format = paragraph.paragraph_format
        paragraph_format.space_before = Twips(style.paragraph_spacing)
        paragraph_format.space_after = Twips(style.paragraph_spacing)
        paragraph_format.line_spacing = style.line_spacing
        if alignment:
            paragraph.alignment = _ALIGNMENTS[alignment]
        _apply_direction(paragraph, style)


def convert_markdown_to_docx(
    markdown: str,
    options: ConversionOptions | Mapping[str, Any] | None = None,
    image_root: str | Path | None = None,
    write_log: bool = False,
) -> bytes:
    """Validate options, assemble sections and return the .docx payload."""
    if not isinstance(options, ConversionOptions):
        options = ConversionOptions.from_dict(options)
    options.validate()
    result = DocumentAssembler(write_log=write_log).assemble(markdown, options)
    return DocxWriter(result, image_root=image_root).to_bytes()


def _sub(parent, tag: str, **attrs: str):
    element = etree.SubElement(parent, qn(tag))
    for name, value in attrs.items():
        element.set(qn(f"w:{name}"), value)
    return element


def _max_attr(root, tag: str, attr: str) -> int:
    values = [
        int(element.get(qn(attr)))
        for element in root.findall(qn(tag))
        if (element.get(qn(attr)) or "").isdigit()
    ]
    return max(values, default=0)


def _add_num(numbering, abstract_id: int) -> int:
    num_id = _max_attr(numbering, "w:num", "w:numId") + 1
    num = _sub(numbering, "w:num", numId=str(num_id))
    _sub(num, "w:abstractNumId", val=str(abstract_id))
    return num_id


def _set_numbering(paragraph, num_id: int, ilvl: int) -> None:
    num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
    num_pr.get_or_add_ilvl().val = ilvl
    num_pr.get_or_add_numId().val = num_id


def _add_field(paragraph, instruction: str) -> None:
    begin = paragraph.add_run()
    _sub(begin._r, "w:fldChar", fldCharType="begin")
    instr = paragraph.add_run()
    instr_text = etree.SubElement(instr._r, qn("w:instrText"))
    instr_text.set("{http://www.w3.org/XML/1998/namespace}space", "preserve")
    instr_text.text = f" {instruction} "
    separate = paragraph.add_run()
    _sub(separate._r, "w:fldChar", fldCharType="separate")
    paragraph.add_run("1")
    end = paragraph.add_run()
    _sub(end._r, "w:fldChar", fldCharType="end")


def _insert_ppr_child(paragraph, tag: str):
    ppr = paragraph._p.get_or_add_pPr()
    existing = ppr.find(qn(tag))
    if existing is not None:
        return existing
    element = etree.Element(qn(tag))
    successors = _PPR_ORDER[_PPR_ORDER.index(tag) + 1 :]
    ppr.insert_element_before(element, *successors)
    return element


def _apply_direction(paragraph, style: Style) -> None:
    if style.direction == "RTL":
        _insert_ppr_child(paragraph, "w:bidi")


def _set_shading(paragraph, fill: str) -> None:
    shd = _insert_ppr_child(paragraph, "w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)


def _set_borders(paragraph, sides: tuple[str, ...], color: str, size: int) -> None:
    borders = _insert_ppr_child(paragraph, "w:pBdr")
    for side in sides:
        existing = borders.find(qn(f"w:{side}"))
        if existing is not None:
            borders.remove(existing)
        _sub(borders, f"w:{side}", val="single", sz=str(size), space="4", color=color)


def _quote_paragraph(paragraph, style: Style) -> None:
    paragraph.paragraph_format.left_indent = Twips(_BLOCKQUOTE_INDENT_TWIPS)
    paragraph.alignment = _ALIGNMENTS[style.blockquote_alignment]
    for run in paragraph.runs:
        run.italic = True
        run.font.size = Pt(style.blockquote_size / 2)
    _set_borders(paragraph, ("left",), "AAAAAA", size=12)


def _set_cell_shading(cell, fill: str) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    _sub(tc_pr, "w:shd", val="clear", color="auto", fill=fill)


def _set_run_shading(run, fill: str) -> None:
    r_pr = run._r.get_or_add_rPr()
    _sub(r_pr, "w:shd", val="clear", color="auto", fill=fill)
