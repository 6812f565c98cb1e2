"""
Front matter extraction

Removes a leading metadata block such as

    ---
    title: Hello
    author: Jane
    ---

from a document's lines and decodes its key/value pairs.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..models.rules import FrontMatterRule
from .errors import UnterminatedFrontMatterError
from .log import LOG


class FrontMatterExtractor:
    """
    Strips and decodes a front matter block at the start of a document

    The first registered rule whose open tag equals the (trimmed) first
    line is used. Documents that do not open with a registered tag pass
    through untouched.
    """

    def __init__(self, rules: Sequence[FrontMatterRule]):
        """
        Args:
            rules: Recognised front matter delimiters, tried in order
        """
        self.rules = tuple(rules)

    def rule_find(self, first_line: str) -> Optional[FrontMatterRule]:
        """Return the rule whose open tag matches ``first_line``, if any"""
        first_line = first_line.strip()
        for rule in self.rules:
            if first_line == rule.open_tag:
                return rule
        return None

    def keyValue_split(self, line: str, separator: str) -> Optional[Tuple[str, str]]:
        """
        Split a front matter line into (key, value)

        Only the first separator divides key from value. Every further
        separator is dropped and the remaining pieces are joined, so with
        ':' the line "author: A:B" decodes to ("author", "AB").

        Returns:
            (key, value) with surrounding whitespace trimmed, or None when
            the line has no separator
        """
        pieces = line.split(separator)
        if len(pieces) < 2:
            return None
        key = pieces[0]
        value = "".join(pieces[1:])
        return key.strip(), value.strip()

    def extract(self, lines: List[str], attributes: Dict[str, str]) -> List[str]:
        """
        Remove the front matter block from ``lines``

        Args:
            lines: Raw document lines
            attributes: Mapping updated in place with the decoded pairs
                        (later duplicate keys overwrite earlier ones)

        Returns:
            The lines following the block, with blank lines directly after
            the close tag removed. ``lines`` itself when there is no block.

        Raises:
            UnterminatedFrontMatterError: If the input ends before the close
                tag. ``attributes`` is left untouched in that case.
        """
        if not lines:
            return lines

        rule = self.rule_find(lines[0])
        if rule is None:
            return lines

        LOG(f"Front matter opened with '{rule.open_tag}'", level=3)

        decoded: Dict[str, str] = {}
        position = 1
        while True:
            if position >= len(lines):
                raise UnterminatedFrontMatterError(rule.open_tag, rule.close_tag, position - 1)
            line = lines[position]
            position += 1
            if line == rule.close_tag:
                break
            pair = self.keyValue_split(line, rule.key_value_separator)
            if pair is None:
                continue
            key, value = pair
            decoded[key] = value

        # Skip blank lines directly after the block
        while position < len(lines) and not lines[position]:
            position += 1

        attributes.update(decoded)
        LOG(f"Front matter decoded {len(decoded)} attribute(s)", level=2)
        return lines[position:]
