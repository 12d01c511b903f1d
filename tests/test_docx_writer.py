import tempfile
import unittest
from io import BytesIO
from pathlib import Path
from unittest import mock

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.oxml.ns import qn

from mddocx.assembler import parse_to_docx_options
from mddocx.docx_writer import DocxWriter, convert_markdown_to_docx
from mddocx.errors import ConversionError, SerializationError


def _open(payload: bytes):
    return Document(BytesIO(payload))


def _sections(*markdowns, **extra):
    return {"sections": [{"markdown": text} for text in markdowns], **extra}


def _paragraph(document, text):
    for paragraph in document.paragraphs:
        if paragraph.text == text:
            return paragraph
    raise AssertionError(f"no paragraph with text {text!r}")


class SectionRenderingTests(unittest.TestCase):
    def test_one_docx_section_per_descriptor(self) -> None:
        document = _open(convert_markdown_to_docx("", _sections("# A\n", "b\n", "c\n")))
        self.assertEqual(len(document.sections), 3)

    def test_template_header_repeats_and_cleared_footer_is_empty(self) -> None:
        options = {
            "template": {
                "headers": {"default": {"text": "Quarterly"}},
                "footers": {"default": {"text": "Confidential"}},
            },
            "sections": [
                {"markdown": "a\n"},
                {"markdown": "b\n", "footers": {"default": None}},
            ],
        }
        document = _open(convert_markdown_to_docx("", options))
        first, second = document.sections
        self.assertEqual(first.header.paragraphs[0].text, "Quarterly")
        self.assertEqual(second.header.paragraphs[0].text, "Quarterly")
        self.assertEqual(first.footer.paragraphs[0].text, "Confidential")
        self.assertFalse(second.footer.is_linked_to_previous)
        self.assertEqual("".join(p.text for p in second.footer.paragraphs), "")

    def test_page_number_field_in_footer(self) -> None:
        options = {"template": {"page_numbering": {"display": "currentAndTotal"}}}
        document = _open(convert_markdown_to_docx("text\n", options))
        xml = document.sections[0].footer.paragraphs[0]._p.xml
        self.assertIn(" PAGE ", xml)
        self.assertIn(" NUMPAGES ", xml)

    def test_page_geometry(self) -> None:
        options = {
            "template": {
                "page": {"size": {"orientation": "LANDSCAPE"}, "margin": {"top": 720}},
                "page_numbering": {"start": 3, "format_type": "lowerRoman"},
                "title_page": True,
            }
        }
        document = _open(convert_markdown_to_docx("text\n", options))
        section = document.sections[0]
        self.assertEqual(section.orientation, WD_ORIENT.LANDSCAPE)
        self.assertGreater(section.page_width, section.page_height)
        self.assertEqual(section.top_margin.twips, 720)
        self.assertTrue(section.different_first_page_header_footer)
        pg_num_type = section._sectPr.find(qn("w:pgNumType"))
        self.assertEqual(pg_num_type.get(qn("w:start")), "3")
        self.assertEqual(pg_num_type.get(qn("w:fmt")), "lowerRoman")

    def test_page_number_type_does_not_leak_into_next_section(self) -> None:
        options = {
            "sections": [
                {"markdown": "a\n", "page_numbering": {"start": 1}},
                {"markdown": "b\n"},
            ]
        }
        document = _open(convert_markdown_to_docx("", options))
        self.assertIsNotNone(document.sections[0]._sectPr.find(qn("w:pgNumType")))
        self.assertIsNone(document.sections[1]._sectPr.find(qn("w:pgNumType")))


class BlockRenderingTests(unittest.TestCase):
    def test_ordered_lists_use_distinct_numbering(self) -> None:
        document = _open(convert_markdown_to_docx("", _sections("1. x\n", "1. y\n")))
        num_ids = []
        for text in ("x", "y"):
            num_pr = _paragraph(document, text)._p.pPr.numPr
            self.assertIsNotNone(num_pr)
            num_ids.append(num_pr.numId.val)
        self.assertNotEqual(num_ids[0], num_ids[1])

    def test_heading_bookmark(self) -> None:
        document = _open(convert_markdown_to_docx("# Intro\n"))
        paragraph = _paragraph(document, "Intro")
        self.assertEqual(paragraph.style.name, "Heading 1")
        bookmark = paragraph._p.find(qn("w:bookmarkStart"))
        self.assertEqual(bookmark.get(qn("w:name")), "heading_1")

    def test_report_title_style(self) -> None:
        document = _open(convert_markdown_to_docx("# Intro\n", {"document_type": "report"}))
        self.assertEqual(_paragraph(document, "Intro").style.name, "Title")

    def test_toc_entries_link_to_headings(self) -> None:
        document = _open(convert_markdown_to_docx("[TOC]\n\n# Intro\n"))
        self.assertEqual(document.paragraphs[0].text, "Table of Contents")
        entry = document.paragraphs[1]
        hyperlink = entry._p.find(qn("w:hyperlink"))
        self.assertEqual(hyperlink.get(qn("w:anchor")), "heading_1")

    def test_external_hyperlink(self) -> None:
        document = _open(convert_markdown_to_docx("see [site](https://example.com)\n"))
        paragraph = document.paragraphs[0]
        hyperlink = paragraph._p.find(qn("w:hyperlink"))
        r_id = hyperlink.get(qn("r:id"))
        self.assertEqual(document.part.rels[r_id].target_ref, "https://example.com")

    def test_table(self) -> None:
        document = _open(convert_markdown_to_docx("| a | b |\n| - | - |\n| 1 | 2 |\n"))
        table = document.tables[0]
        self.assertEqual(len(table.rows), 2)
        self.assertEqual(len(table.columns), 2)
        self.assertEqual(table.cell(0, 0).text, "a")
        self.assertEqual(table.cell(1, 1).text, "2")

    def test_ragged_table_uses_widest_row(self) -> None:
        document = _open(convert_markdown_to_docx("| a | b | c |\n|---|---|---|\n| 1 | 2 |\n"))
        table = document.tables[0]
        self.assertEqual(len(table.columns), 3)
        self.assertEqual(table.cell(1, 1).text, "2")
        self.assertEqual(table.cell(1, 2).text, "")

    def test_image_only_list_item_is_numbered(self) -> None:
        document = _open(convert_markdown_to_docx("1. ![chart](x.png)\n"))
        self.assertIsNotNone(_paragraph(document, "chart")._p.pPr.numPr)

    def test_list_start_zero_is_rendered(self) -> None:
        document = _open(convert_markdown_to_docx("0. zero\n1. one\n"))
        num_id = _paragraph(document, "zero")._p.pPr.numPr.numId.val
        numbering = document.part.numbering_part.element
        num = next(
            item
            for item in numbering.findall(qn("w:num"))
            if item.get(qn("w:numId")) == str(num_id)
        )
        abstract_id = num.find(qn("w:abstractNumId")).get(qn("w:val"))
        abstract = next(
            item
            for item in numbering.findall(qn("w:abstractNum"))
            if item.get(qn("w:abstractNumId")) == abstract_id
        )
        self.assertEqual(abstract.find(qn("w:lvl")).find(qn("w:start")).get(qn("w:val")), "0")

    def test_missing_image_falls_back_to_text(self) -> None:
        document = _open(convert_markdown_to_docx("![diagram](missing.png)\n"))
        self.assertEqual(document.paragraphs[0].text, "[Image: diagram]")

    def test_code_block_and_comment(self) -> None:
        markdown = "```python\nprint(1)\n```\n\n<!-- COMMENT: check this -->\n"
        document = _open(convert_markdown_to_docx(markdown))
        texts = [paragraph.text for paragraph in document.paragraphs]
        self.assertTrue(any("print(1)" in text for text in texts))
        self.assertIn("Comment: check this", texts)


class WriterErrorTests(unittest.TestCase):
    def test_render_failure_is_wrapped(self) -> None:
        result = parse_to_docx_options("text\n")
        with mock.patch.object(DocxWriter, "_render_block", side_effect=RuntimeError("boom")):
            with self.assertRaises(SerializationError) as ctx:
                DocxWriter(result).to_bytes()
        self.assertIsInstance(ctx.exception, ConversionError)
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_invalid_options_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            convert_markdown_to_docx("x", {"document_type": "letter"})

    def test_save(self) -> None:
        result = parse_to_docx_options("# Saved\n")
        with tempfile.TemporaryDirectory() as tmpdir:
            path = DocxWriter(result).save(Path(tmpdir) / "out" / "doc.docx")
            self.assertTrue(path.is_file())
            self.assertEqual(Document(str(path)).paragraphs[0].text, "Saved")


if __name__ == "__main__":
    unittest.main()
