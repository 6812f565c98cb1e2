"""
Line-level data models

Styles, classified lines and the defer-to-previous marker produced by the
line classifier.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class LineStyle(Enum):
    """
    Style tags a classified line can carry

    Each member carries its capabilities as data so that consumers can match
    on the member itself instead of inspecting its type:

        tag: Stable string name (used in rule files and JSON output)
        should_tokenise: Whether the downstream engine should look for inline
                         spans (bold, links, ...) inside the line's text
        previous_tag: For setext underlines, the tag of the style that the
                      *previous* line takes on when this style is found
    """
    YAML = ("yaml", True, None)
    H1 = ("h1", True, None)
    H2 = ("h2", True, None)
    H3 = ("h3", True, None)
    H4 = ("h4", True, None)
    H5 = ("h5", True, None)
    H6 = ("h6", True, None)
    PREVIOUS_H1 = ("previous-h1", True, "h1")
    PREVIOUS_H2 = ("previous-h2", True, "h2")
    BODY = ("body", True, None)
    BLOCKQUOTE = ("blockquote", True, None)
    CODEBLOCK = ("codeblock", False, None)
    UNORDERED_LIST = ("unordered-list", True, None)
    UNORDERED_LIST_INDENT_FIRST = ("unordered-list-indent-first", True, None)
    UNORDERED_LIST_INDENT_SECOND = ("unordered-list-indent-second", True, None)
    ORDERED_LIST = ("ordered-list", True, None)
    ORDERED_LIST_INDENT_FIRST = ("ordered-list-indent-first", True, None)
    ORDERED_LIST_INDENT_SECOND = ("ordered-list-indent-second", True, None)
    REFERENCED_LINK = ("referenced-link", True, None)
    BREAK_PARAGRAPH = ("break-paragraph", True, None)

    def __init__(self, tag: str, should_tokenise: bool, previous_tag: Optional[str]):
        self.tag = tag
        self.should_tokenise = should_tokenise
        self.previous_tag = previous_tag

    @property
    def affects_previous(self) -> Optional["LineStyle"]:
        """Style the previous line takes on when this style is found, if any"""
        if self.previous_tag is None:
            return None
        return LineStyle.style_fromTag(self.previous_tag)

    @classmethod
    def style_fromTag(cls, tag: str) -> "LineStyle":
        """
        Look up a style by its string tag

        Raises:
            ValueError: If no member carries the tag
        """
        for member in cls:
            if member.tag == tag:
                return member
        raise ValueError(f"Unknown line style '{tag}'")

    def __str__(self) -> str:
        return self.tag


@dataclass(frozen=True, eq=False)
class ClassifiedLine:
    """
    A single line after classification

    Attributes:
        text: Line text after rule-driven token stripping
        style: Style tag assigned by the matching rule (or the default style)

    Note:
        Equality and hashing consider ``text`` only. The document pipeline
        relies on this when it locates the entry to restyle for a setext
        underline, so two entries with the same text but different styles
        compare equal.
    """
    text: str
    style: LineStyle

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassifiedLine):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class DeferToPrevious:
    """
    Classifier result asking the pipeline to restyle the previous entry

    Attributes:
        style: Style to apply to the most recently emitted line
        line: Entry to append instead when nothing has been emitted yet
    """
    style: LineStyle
    line: ClassifiedLine
