import unittest

from mddocx.model import Heading, PageBreak, Paragraph, SectionModel, TextRun, TocPlaceholder
from mddocx.style import DEFAULT_STYLE
from mddocx.toc import (
    TOC_ENTRY_ROLE,
    TOC_TITLE_ROLE,
    HeadingRegistry,
    TocState,
    resolve_placeholders,
)


def _section(*children) -> SectionModel:
    return SectionModel(children=tuple(children), style=DEFAULT_STYLE)


class HeadingRegistryTests(unittest.TestCase):
    def test_anchor_ids_follow_document_order(self) -> None:
        registry = HeadingRegistry()
        first = registry.register("Intro", 1)
        second = registry.register("Details", 2)
        self.assertEqual(first.anchor_id, "heading_1")
        self.assertEqual(second.anchor_id, "heading_2")
        self.assertEqual(len(registry), 2)
        self.assertEqual([entry.text for entry in registry.entries], ["Intro", "Details"])


class ResolvePlaceholderTests(unittest.TestCase):
    def _registry(self) -> HeadingRegistry:
        registry = HeadingRegistry()
        registry.register("Intro", 1)
        registry.register("Scope", 2)
        registry.register("Deep", 3)
        return registry

    def test_first_placeholder_is_replaced(self) -> None:
        sections = [_section(TocPlaceholder(), Heading(1, (TextRun("Intro"),), "heading_1"))]
        result = resolve_placeholders(sections, self._registry())
        children = result.sections[0].children
        self.assertEqual(result.state, TocState.INSERTED)
        self.assertIsInstance(children[0], Paragraph)
        self.assertEqual(children[0].role, TOC_TITLE_ROLE)
        self.assertEqual(children[0].text, "Table of Contents")
        entries = [child for child in children if getattr(child, "role", None) == TOC_ENTRY_ROLE]
        self.assertEqual([entry.text for entry in entries], ["Intro", "Scope", "Deep"])
        self.assertEqual([entry.indent_level for entry in entries], [0, 1, 2])
        self.assertEqual(entries[1].children[0].anchor, "heading_2")
        self.assertEqual(result.warnings, ())

    def test_only_first_placeholder_across_sections(self) -> None:
        sections = [
            _section(PageBreak(), TocPlaceholder()),
            _section(TocPlaceholder()),
            _section(TocPlaceholder()),
        ]
        with self.assertLogs("mddocx.toc", level="WARNING"):
            result = resolve_placeholders(sections, self._registry())
        titles = [
            child
            for section in result.sections
            for child in section.children
            if getattr(child, "role", None) == TOC_TITLE_ROLE
        ]
        self.assertEqual(len(titles), 1)
        self.assertEqual(len(result.warnings), 2)
        self.assertEqual(result.warnings[0].rule, "toc")
        self.assertEqual(result.warnings[0].section_index, 1)
        self.assertEqual(result.sections[1].children, ())
        self.assertFalse(
            any(
                isinstance(child, TocPlaceholder)
                for section in result.sections
                for child in section.children
            )
        )

    def test_empty_registry_removes_placeholders(self) -> None:
        sections = [_section(TocPlaceholder(), PageBreak(), TocPlaceholder())]
        result = resolve_placeholders(sections, HeadingRegistry())
        self.assertEqual(result.sections[0].children, (PageBreak(),))
        self.assertEqual(result.state, TocState.PENDING)
        self.assertEqual(result.warnings, ())

    def test_custom_title(self) -> None:
        result = resolve_placeholders(
            [_section(TocPlaceholder())], self._registry(), title="Contents"
        )
        self.assertEqual(result.sections[0].children[0].text, "Contents")

    def test_sections_without_placeholder_are_untouched(self) -> None:
        section = _section(PageBreak())
        result = resolve_placeholders([section], self._registry())
        self.assertIs(result.sections[0], section)
        self.assertEqual(result.state, TocState.PENDING)


if __name__ == "__main__":
    unittest.main()
