"""
Rule specification models

Defines line rules and front matter rules, the building blocks of a
RuleRegistry.
"""

from enum import Enum
from dataclasses import dataclass

from .lines import LineStyle


class Removal(Enum):
    """
    Where a matching rule strips its token from the line
    """
    LEADING = "leading"          # exact prefix only
    TRAILING = "trailing"        # exact suffix only (token trimmed first)
    BOTH = "both"                # prefix, then suffix
    ENTIRE_LINE = "entire-line"  # every occurrence, only if nothing is left
    NONE = "none"                # existence check, never strips


class Scope(Enum):
    """
    Which line(s) a matching rule's style applies to
    """
    CURRENT = "current"          # the line itself
    PREVIOUS = "previous"        # the previously emitted line (setext)
    UNTIL_CLOSE = "until-close"  # every line until the token appears again


@dataclass(frozen=True)
class LineRule:
    """
    A token-matching instruction for a single line

    Attributes:
        token: Literal token to look for (e.g. "# ", "```")
        style: Style assigned to the line when the rule matches
        removal: Where the token is stripped from
        should_trim: Trim surrounding whitespace before and after matching
        scope: Which line(s) the style applies to

    Example:
        LineRule(token="# ", style=LineStyle.H1, removal=Removal.BOTH)
    """
    token: str
    style: LineStyle
    removal: Removal = Removal.LEADING
    should_trim: bool = True
    scope: Scope = Scope.CURRENT


@dataclass(frozen=True)
class FrontMatterRule:
    """
    Delimiters and separator of a front matter block

    Attributes:
        open_tag: Line that opens the block (compared after trimming)
        close_tag: Line that closes the block (compared verbatim)
        key_value_separator: Single character splitting keys from values
    """
    open_tag: str
    close_tag: str
    key_value_separator: str = ":"

    def __post_init__(self) -> None:
        if len(self.key_value_separator) != 1:
            raise ValueError(
                f"key_value_separator must be a single character, "
                f"got {self.key_value_separator!r}"
            )
