"""
Ordered list tests - renumbering and nesting

Tests that author-written list numbers are rewritten to a canonical "1. ",
that nesting indents survive only under a top-level item, and that a
malformed renumbering pattern is reported instead of aborting.
"""

import pytest

from linemark.config import AppSettings
from linemark.lib.classifier import LineClassifier
from linemark.lib.errors import MalformedPatternError
from linemark.lib.processor import LineProcessor
from linemark.lib.registry import RuleRegistry
from linemark.models import LineRule, LineStyle, Removal


def classifier_make(settings=None):
    settings = settings or AppSettings()
    return LineClassifier(RuleRegistry.registry_markdown(settings), settings)


class TestRenumber:
    """Test the renumbering transform on its own"""

    @pytest.mark.parametrize("text,expected", [
        ("7. item", "1. item"),
        ("12. item", "1. item"),
        ("1. item", "1. item"),
        ("  3. padded  ", "1. padded"),
        ("    3. nested", "    1. nested"),
        ("        4. deeper", "        1. deeper"),
        ("7.", "1. "),
        ("plain text", "plain text"),
        ("7.5 percent", "7.5 percent"),
        ("", ""),
    ])
    def test_renumber(self, text, expected):
        """Leading digits + '. ' become '1. ', indents are restored"""
        assert classifier_make().orderedList_renumber(text) == expected

    def test_custom_replacement(self):
        """The canonical marker comes from settings"""
        settings = AppSettings(ordered_list_pattern=r"^[0-9]+\) ", ordered_list_replacement="1) ")
        assert classifier_make(settings).orderedList_renumber("4) four") == "1) four"


class TestOrderedListClassification:
    """Test ordered list lines through the markdown rule set"""

    def test_any_number_is_ordered_list(self):
        """Arbitrary list numbers classify as ordered list items"""
        processor = LineProcessor(settings=AppSettings())
        lines = processor.process("7. item\n3. item2")

        assert [line.text for line in lines] == ["item", "item2"]
        assert all(line.style is LineStyle.ORDERED_LIST for line in lines)

    def test_existence_rule_keeps_canonical_number(self):
        """With removal 'none' the renumbered text itself is emitted"""
        registry = RuleRegistry(rules=[LineRule("1. ", LineStyle.ORDERED_LIST, Removal.NONE)])
        processor = LineProcessor(registry=registry, settings=AppSettings())

        lines = processor.process("7. item\n3. item2")

        assert [line.text for line in lines] == ["1. item", "1. item2"]
        assert all(line.text.startswith("1. ") for line in lines)

    def test_nested_under_top_level_item(self):
        """An indented item under a top-level item stays nested"""
        processor = LineProcessor(settings=AppSettings())
        lines = processor.process("1. top\n    2. child")

        assert lines[1].text == "child"
        assert lines[1].style is LineStyle.ORDERED_LIST_INDENT_FIRST

    def test_second_level_nesting(self):
        """An eight-space indent under a top-level item is second level"""
        processor = LineProcessor(settings=AppSettings())
        lines = processor.process("1. top\n        5. deep")

        assert lines[1].text == "deep"
        assert lines[1].style is LineStyle.ORDERED_LIST_INDENT_SECOND

    def test_orphan_nested_item_is_top_level(self):
        """An indented item without a parent item loses its nesting"""
        processor = LineProcessor(settings=AppSettings())
        lines = processor.process("Intro\n    2. child")

        assert lines[1].text == "child"
        assert lines[1].style is LineStyle.ORDERED_LIST

    def test_previous_line_is_renumbered_too(self):
        """The parent check sees the previous line after renumbering"""
        processor = LineProcessor(settings=AppSettings())
        lines = processor.process("9. top\n    4. child")

        assert lines[0].style is LineStyle.ORDERED_LIST
        assert lines[1].style is LineStyle.ORDERED_LIST_INDENT_FIRST


class TestMalformedPattern:
    """Test recovery from a pattern that does not compile"""

    def test_malformed_pattern_is_reported(self):
        """The error is recorded and processing continues"""
        settings = AppSettings(ordered_list_pattern="^[0-9+\\. ")
        processor = LineProcessor(settings=settings)

        lines = processor.process("7. item\n1. first")

        assert len(processor.diagnostics) == 1
        assert isinstance(processor.diagnostics[0], MalformedPatternError)
        # Numbers are left as written, so only "1. " lines are list items
        assert lines[0].text == "7. item"
        assert lines[0].style is LineStyle.BODY
        assert lines[1].text == "first"
        assert lines[1].style is LineStyle.ORDERED_LIST

    def test_renumber_without_pattern(self):
        """Renumbering still trims when the pattern is unavailable"""
        classifier = classifier_make(AppSettings(ordered_list_pattern="("))

        assert classifier.ordered_pattern is None
        assert classifier.orderedList_renumber("  7. item ") == "7. item"

    def test_strict_mode_raises(self):
        """Strict mode raises from the constructor"""
        settings = AppSettings(ordered_list_pattern="(", strict_mode=True)

        with pytest.raises(MalformedPatternError, match="does not compile"):
            LineProcessor(settings=settings)
