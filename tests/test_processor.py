"""
Document pipeline tests - whole documents through LineProcessor

Tests line splitting, setext merging, fenced regions, the dangling dash
fix-up and the lookahead view.
"""

import pytest

from linemark.config import AppSettings
from linemark.lib.processor import LaterLines, LineProcessor, process_document
from linemark.lib.registry import RuleRegistry
from linemark.models import LineRule, LineStyle, Removal, Scope


SETEXT_H1 = LineRule("=", LineStyle.H1, Removal.ENTIRE_LINE, scope=Scope.PREVIOUS)
FENCE = LineRule("```", LineStyle.CODEBLOCK, Removal.ENTIRE_LINE, should_trim=False, scope=Scope.UNTIL_CLOSE)


def process(document, rules=None, **registry_options):
    """Process with either the markdown rules or a custom registry"""
    if rules is None:
        processor = LineProcessor(settings=AppSettings())
    else:
        processor = LineProcessor(registry=RuleRegistry(rules=rules, **registry_options), settings=AppSettings())
    return processor.process(document)


def summary(lines):
    return [(line.text, line.style) for line in lines]


class TestSplitting:
    """Test line splitting and empty line handling"""

    def test_plain_lines_map_one_to_one(self):
        """Without rules every non-empty line becomes one trimmed default entry"""
        lines = process("  alpha \nbeta\n\n gamma", rules=[])
        assert summary(lines) == [
            ("alpha", LineStyle.BODY),
            ("beta", LineStyle.BODY),
            ("gamma", LineStyle.BODY),
        ]

    def test_line_endings_normalized(self):
        """CRLF, CR and LF all end a line"""
        lines = process("a\r\nb\rc\nd", rules=[])
        assert [line.text for line in lines] == ["a", "b", "c", "d"]

    def test_unicode_line_separator(self):
        """Unicode line separators end a line too"""
        lines = process("a\u2028b", rules=[])
        assert [line.text for line in lines] == ["a", "b"]

    def test_empty_lines_kept_with_empty_style(self):
        """A configured empty-line style keeps blank lines"""
        lines = process("a\n\nb", rules=[], empty_line_style=LineStyle.BREAK_PARAGRAPH)
        assert summary(lines) == [
            ("a", LineStyle.BODY),
            ("", LineStyle.BREAK_PARAGRAPH),
            ("b", LineStyle.BODY),
        ]

    def test_empty_document(self):
        """An empty document produces no entries"""
        assert process("", rules=[]) == []

    def test_split_keeps_trailing_empty_line(self):
        """A trailing newline yields a trailing empty raw line"""
        processor = LineProcessor(settings=AppSettings())
        assert processor.lines_split("a\r\nb\n") == ["a", "b", ""]


class TestSetextMerge:
    """Test underlines restyling the previous entry"""

    def test_underline_merges_into_previous(self):
        """Title + underline yields a single restyled entry"""
        lines = process("Title\n====", rules=[SETEXT_H1])
        assert summary(lines) == [("Title", LineStyle.H1)]

    def test_markdown_setext_headings(self):
        """The markdown rules support '=' and '-' underlines"""
        lines = process("Main\n====\nSub\n---")
        assert summary(lines) == [("Main", LineStyle.H1), ("Sub", LineStyle.H2)]

    def test_underline_without_previous_entry(self):
        """With nothing emitted yet the underline is kept as an entry"""
        lines = process("====\nText", rules=[SETEXT_H1])
        assert summary(lines) == [("", LineStyle.H1), ("Text", LineStyle.BODY)]

    def test_duplicate_text_restyles_first_match(self):
        """Lookup is by text: the first of two identical lines is restyled"""
        lines = process("Same\nSame\n===", rules=[SETEXT_H1])

        assert len(lines) == 2
        assert lines[0].style is LineStyle.H1
        assert lines[1].style is LineStyle.BODY

    def test_restyle_keeps_text(self):
        """Restyling never changes the previous entry's text"""
        lines = process("# Heading\n===")
        assert summary(lines) == [("Heading", LineStyle.H1)]


class TestFencedRegions:
    """Test until-close regions across lines"""

    def test_unterminated_fence_is_plain(self):
        """A fence that is never closed does not open a region"""
        lines = process("```\ncode", rules=[FENCE])
        assert summary(lines) == [("```", LineStyle.BODY), ("code", LineStyle.BODY)]

    def test_closed_fence(self):
        """Opening line, body and closing line all take the region style"""
        lines = process("```\ncode\n```\nafter", rules=[FENCE])
        assert summary(lines) == [
            ("", LineStyle.CODEBLOCK),
            ("code", LineStyle.CODEBLOCK),
            ("", LineStyle.CODEBLOCK),
            ("after", LineStyle.BODY),
        ]

    def test_markdown_fence_shields_rules(self):
        """Markdown inside a fence is not classified"""
        lines = process("```\n# not a heading\n    - not a bullet\n```\n# Heading")
        assert summary(lines) == [
            ("", LineStyle.CODEBLOCK),
            ("# not a heading", LineStyle.CODEBLOCK),
            ("    - not a bullet", LineStyle.CODEBLOCK),
            ("", LineStyle.CODEBLOCK),
            ("Heading", LineStyle.H1),
        ]

    def test_second_fence_pair(self):
        """A region can open again after it closed"""
        lines = process("```\na\n```\n```\nb\n```", rules=[FENCE])
        assert [line.style for line in lines] == [LineStyle.CODEBLOCK] * 6
        assert [line.text for line in lines] == ["", "a", "", "", "b", ""]


class TestDanglingDash:
    """Test the final-line dash after a bullet"""

    def test_dash_after_bullet_is_bullet(self):
        """A final lone dash after a bullet is an empty bullet, not an underline"""
        lines = process("- item\n-")
        assert summary(lines) == [
            ("item", LineStyle.UNORDERED_LIST),
            ("", LineStyle.UNORDERED_LIST),
        ]

    def test_dash_after_paragraph_is_underline(self):
        """After a paragraph the same dash is a setext underline"""
        lines = process("Para\n-")
        assert summary(lines) == [("Para", LineStyle.H2)]


class TestMarkdownRules:
    """Spot checks of the bundled markdown rule set"""

    @pytest.mark.parametrize("source,text,style", [
        ("# One", "One", LineStyle.H1),
        ("### Three ###", "Three", LineStyle.H3),
        ("###### Six", "Six", LineStyle.H6),
        ("> quote", "quote", LineStyle.BLOCKQUOTE),
        ("- bullet", "bullet", LineStyle.UNORDERED_LIST),
        ("* star", "star", LineStyle.UNORDERED_LIST),
        ("    - nested", "nested", LineStyle.UNORDERED_LIST_INDENT_FIRST),
        ("        - deeper", "deeper", LineStyle.UNORDERED_LIST_INDENT_SECOND),
        ("Just text", "Just text", LineStyle.BODY),
    ])
    def test_single_line(self, source, text, style):
        lines = process(source)

        assert len(lines) == 1
        assert lines[0].text == text
        assert lines[0].style is style

    def test_codeblock_is_not_tokenised(self):
        """Code lines tell the downstream engine not to look for inline spans"""
        lines = process("```\nx = *y*\n```")

        assert lines[1].style.should_tokenise is False
        assert LineStyle.BODY.should_tokenise is True


class TestLaterLines:
    """Test the index-bounded lookahead view"""

    def test_view(self):
        """The view covers the lines after its start index"""
        lines = ["a", "b", "```", "c"]
        positions = {line: index for index, line in enumerate(lines)}

        view = LaterLines(lines, 1, positions)

        assert len(view) == 3
        assert list(view) == ["b", "```", "c"]
        assert view[-1] == "c"
        assert view[0:2] == ["b", "```"]
        assert "```" in view
        assert "a" not in view

    def test_membership_uses_last_position(self):
        """A line repeated later is found even if it also appears earlier"""
        lines = ["```", "x", "```"]
        positions = {line: index for index, line in enumerate(lines)}

        assert "```" in LaterLines(lines, 1, positions)
        assert "```" not in LaterLines(lines, 3, positions)
        assert len(LaterLines(lines, 3, positions)) == 0

    def test_index_out_of_range(self):
        view = LaterLines(["a"], 1, {"a": 0})
        with pytest.raises(IndexError):
            view[0]


class TestProcessDocument:
    """Test the one-shot helper"""

    def test_returns_lines_and_attributes(self):
        lines, attributes = process_document("---\nlang: en\n---\n# Hi", settings=AppSettings())

        assert attributes == {"lang": "en"}
        assert summary(lines) == [("Hi", LineStyle.H1)]

    def test_no_front_matter(self):
        """Without front matter the attributes stay empty and lines map 1:1"""
        lines, attributes = process_document("one\ntwo\nthree", settings=AppSettings())

        assert attributes == {}
        assert len(lines) == 3
