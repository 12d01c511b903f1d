import unittest

from mddocx.section_config import (
    CLEAR,
    INHERIT,
    HeaderFooterGroup,
    SectionConfig,
    Slot,
    SlotState,
    resolve_section,
)
from mddocx.style import DEFAULT_STYLE


class SlotParsingTests(unittest.TestCase):
    def test_absent_null_and_value(self) -> None:
        group = HeaderFooterGroup.from_dict({"default": None, "first": {"text": "Cover"}})
        self.assertEqual(group.default, CLEAR)
        self.assertEqual(group.first.state, SlotState.SET)
        self.assertEqual(group.first.value["text"], "Cover")
        self.assertEqual(group.even, INHERIT)

    def test_missing_group_inherits_everything(self) -> None:
        group = HeaderFooterGroup.from_dict(None)
        self.assertEqual((group.default, group.first, group.even), (INHERIT, INHERIT, INHERIT))

    def test_slot_value_aliases(self) -> None:
        slot = Slot.set({"pageNumberDisplay": "current"})
        self.assertEqual(slot.value["page_number_display"], "current")

    def test_section_config_from_dict(self) -> None:
        section = SectionConfig.from_dict(
            {
                "style": {"font_familly": "Arial"},
                "page": {"margin": {"top": 720}, "size": {"orientation": "LANDSCAPE"}},
                "pageNumbering": {"start": 1, "formatType": "decimal"},
                "titlePage": True,
                "type": "ODD_PAGE",
            }
        )
        self.assertEqual(dict(section.style), {"font_family": "Arial"})
        self.assertEqual(section.margin["top"], 720)
        self.assertEqual(section.size["orientation"], "LANDSCAPE")
        self.assertEqual(section.page_numbering["format_type"], "decimal")
        self.assertTrue(section.title_page)
        self.assertEqual(section.type, "ODD_PAGE")


class SectionConfigValidationTests(unittest.TestCase):
    def test_valid_config(self) -> None:
        SectionConfig.from_dict(
            {
                "type": "CONTINUOUS",
                "footers": {"default": {"alignment": "CENTER", "page_number_display": "current"}},
                "page_numbering": {"display": "currentAndTotal", "separator": "emDash"},
            }
        ).validate()

    def test_invalid_section_type(self) -> None:
        with self.assertRaises(ValueError):
            SectionConfig.from_dict({"type": "SIDEWAYS"}).validate()

    def test_invalid_page_number_format(self) -> None:
        with self.assertRaises(ValueError):
            SectionConfig.from_dict({"page_numbering": {"format_type": "hex"}}).validate()

    def test_negative_margin(self) -> None:
        with self.assertRaises(ValueError):
            SectionConfig.from_dict({"page": {"margin": {"left": -5}}}).validate()

    def test_invalid_slot_alignment(self) -> None:
        with self.assertRaises(ValueError):
            SectionConfig.from_dict({"headers": {"even": {"alignment": "UP"}}}).validate()

    def test_invalid_style_override(self) -> None:
        with self.assertRaises(ValueError):
            SectionConfig.from_dict({"style": {"direction": "DOWN"}}).validate()


class ResolveSectionTests(unittest.TestCase):
    def test_defaults_without_template_or_section(self) -> None:
        resolved = resolve_section(None, None, None)
        self.assertEqual(resolved.style, DEFAULT_STYLE)
        self.assertEqual(resolved.type, "NEXT_PAGE")
        self.assertFalse(resolved.title_page)
        self.assertEqual(resolved.margin.top, 1440)
        self.assertEqual(resolved.size.orientation, "PORTRAIT")
        self.assertEqual(resolved.page_numbering.display, "none")
        self.assertTrue(resolved.headers.is_empty())
        self.assertTrue(resolved.footers.is_empty())

    def test_style_precedence(self) -> None:
        template = SectionConfig.from_dict({"style": {"paragraph_size": 26, "heading1_size": 40}})
        section = SectionConfig.from_dict({"style": {"paragraph_size": 28}})
        resolved = resolve_section({"paragraph_size": 22, "title_size": 50}, template, section)
        self.assertEqual(resolved.style.paragraph_size, 28)
        self.assertEqual(resolved.style.heading1_size, 40)
        self.assertEqual(resolved.style.title_size, 50)
        self.assertEqual(resolved.style.code_block_size, DEFAULT_STYLE.code_block_size)

    def test_alias_in_global_style(self) -> None:
        resolved = resolve_section({"font_familly": "Georgia"}, None, None)
        self.assertEqual(resolved.style.font_family, "Georgia")

    def test_nested_objects_merge_per_key(self) -> None:
        template = SectionConfig.from_dict(
            {
                "page": {"margin": {"top": 1000, "left": 900}, "size": {"width": 12000}},
                "page_numbering": {"display": "current", "alignment": "RIGHT"},
            }
        )
        section = SectionConfig.from_dict(
            {
                "page": {"margin": {"top": 500}},
                "page_numbering": {"start": 1, "format_type": "decimal"},
            }
        )
        resolved = resolve_section(None, template, section)
        self.assertEqual(resolved.margin.top, 500)
        self.assertEqual(resolved.margin.left, 900)
        self.assertEqual(resolved.margin.bottom, 1440)
        self.assertEqual(resolved.size.width, 12000)
        self.assertEqual(resolved.page_numbering.display, "current")
        self.assertEqual(resolved.page_numbering.alignment, "RIGHT")
        self.assertEqual(resolved.page_numbering.start, 1)
        self.assertEqual(resolved.page_numbering.format_type, "decimal")

    def test_scalars_section_then_template_then_default(self) -> None:
        template = SectionConfig.from_dict({"type": "ODD_PAGE", "title_page": True})
        self.assertEqual(resolve_section(None, template, None).type, "ODD_PAGE")
        section = SectionConfig.from_dict({"type": "CONTINUOUS", "title_page": False})
        resolved = resolve_section(None, template, section)
        self.assertEqual(resolved.type, "CONTINUOUS")
        self.assertFalse(resolved.title_page)

    def test_null_footer_suppresses_template(self) -> None:
        template = SectionConfig.from_dict({"footers": {"default": {"text": "Page"}}})
        section_a = SectionConfig.from_dict({"footers": {"default": None}})
        section_b = SectionConfig.from_dict({})
        resolved_a = resolve_section(None, template, section_a)
        resolved_b = resolve_section(None, template, section_b)
        self.assertIsNone(resolved_a.footers.default)
        self.assertIn("default", resolved_a.footers.cleared)
        self.assertTrue(resolved_a.footers.is_empty())
        self.assertEqual(resolved_b.footers.default.text, "Page")
        self.assertEqual(resolved_b.footers.to_dict(), {"default": {"text": "Page"}})

    def test_value_slot_merges_over_template(self) -> None:
        template = SectionConfig.from_dict(
            {"headers": {"default": {"text": "Report", "alignment": "CENTER"}}}
        )
        section = SectionConfig.from_dict({"headers": {"default": {"alignment": "RIGHT"}}})
        header = resolve_section(None, template, section).headers.default
        self.assertEqual(header.text, "Report")
        self.assertEqual(header.alignment, "RIGHT")

    def test_slots_resolve_independently(self) -> None:
        template = SectionConfig.from_dict(
            {"headers": {"default": {"text": "Body"}, "first": {"text": "Cover"}}}
        )
        section = SectionConfig.from_dict(
            {"headers": {"first": None, "even": {"text": "Even"}}}
        )
        headers = resolve_section(None, template, section).headers
        self.assertEqual(headers.default.text, "Body")
        self.assertIsNone(headers.first)
        self.assertEqual(headers.even.text, "Even")

    def test_value_after_template_clear_stands_alone(self) -> None:
        template = SectionConfig.from_dict({"footers": {"default": None}})
        section = SectionConfig.from_dict({"footers": {"default": {"text": "Mine"}}})
        footers = resolve_section(None, template, section).footers
        self.assertEqual(footers.default.text, "Mine")
        self.assertNotIn("default", footers.cleared)

    def test_resolution_is_deterministic(self) -> None:
        template = SectionConfig.from_dict(
            {"style": {"paragraph_size": 30}, "footers": {"default": {"text": "x"}}}
        )
        section = SectionConfig.from_dict({"page": {"margin": {"top": 10}}})
        self.assertEqual(
            resolve_section(None, template, section),
            resolve_section(None, template, section),
        )

    def test_resolution_does_not_share_input_state(self) -> None:
        raw = {"text": "Page"}
        template = SectionConfig.from_dict({"footers": {"default": raw}})
        resolved = resolve_section(None, template, None)
        raw["text"] = "Changed"
        self.assertEqual(resolved.footers.default.text, "Page")
        self.assertEqual(template.footers.default.value["text"], "Page")

    def test_properties_dict(self) -> None:
        properties = resolve_section(None, None, None).properties_dict()
        self.assertEqual(properties["type"], "NEXT_PAGE")
        self.assertEqual(properties["page"]["margin"]["top"], 1440)
        self.assertEqual(properties["page"]["size"]["orientation"], "PORTRAIT")
        self.assertEqual(properties["page"]["page_numbers"]["display"], "none")


if __name__ == "__main__":
    unittest.main()
