"""
Document pipeline for linemark

Turns a whole document into an ordered list of ClassifiedLine entries:

1. Normalize line endings and split into lines
2. Strip and decode front matter (once per document)
3. Classify each line, applying setext restyling and skip rules

Example:
    >>> processor = LineProcessor()
    >>> lines = processor.process("---\\ntitle: Hi\\n---\\nIntro\\n=====")
    >>> [(line.text, line.style.tag) for line in lines]
    [('Intro', 'h1')]
    >>> processor.front_matter_attributes
    {'title': 'Hi'}
"""

import re
from collections.abc import Sequence
from typing import Dict, List, Mapping, Optional, Tuple

from ..config import appsettings, AppSettings
from ..models.lines import ClassifiedLine, DeferToPrevious, LineStyle
from ..models.state import ProcessingContext
from .classifier import LineClassifier
from .errors import UnterminatedFrontMatterError
from .frontmatter import FrontMatterExtractor
from .registry import RuleRegistry
from .log import LOG


# Every character that ends a line; "\r\n" is folded to "\n" first
NEWLINES = re.compile("[\n\x0b\x0c\r\x85\u2028\u2029]")


class LaterLines(Sequence):
    """
    Read-only view of the lines after a given index

    Wraps the already split line list instead of copying the tail for every
    line. Membership tests use a shared index of each distinct line's last
    position, so checking whether a token appears later is O(1).
    """

    def __init__(self, lines: List[str], start: int, last_positions: Mapping[str, int]):
        self._lines = lines
        self._start = start
        self._last_positions = last_positions

    def __len__(self) -> int:
        return max(0, len(self._lines) - self._start)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("LaterLines index out of range")
        return self._lines[self._start + index]

    def __contains__(self, line: object) -> bool:
        return self._last_positions.get(line, -1) >= self._start  # type: ignore[arg-type]


class LineProcessor:
    """
    Classifies whole documents line by line

    A processor is configured once (registry and settings never change) and
    may process many documents one after the other. Each process() call
    works on a fresh ProcessingContext which stays readable through
    front_matter_attributes and diagnostics until the next call.

    A processor is not safe for concurrent use; give each thread its own.
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        settings: Optional[AppSettings] = None,
    ):
        """
        Initialize processor

        Args:
            registry: Rules to apply (default: RuleRegistry.registry_markdown())
            settings: Application settings (default: appsettings)

        Raises:
            MalformedPatternError: In strict mode, if the ordered list
                                   pattern does not compile
        """
        self.settings = settings or appsettings
        self.registry = registry if registry is not None else RuleRegistry.registry_markdown(self.settings)
        self.extractor = FrontMatterExtractor(self.registry.front_matter_rules)
        self.classifier = LineClassifier(self.registry, self.settings)
        self.bullet_tokens = self.settings.bulletList_tokens()
        self.context = ProcessingContext(diagnostics=list(self.classifier.diagnostics))

    @property
    def front_matter_attributes(self) -> Dict[str, str]:
        """Front matter decoded by the most recent process() call"""
        return self.context.attributes

    @property
    def diagnostics(self) -> List[Exception]:
        """Errors recovered from by the most recent process() call"""
        return self.context.diagnostics

    def lines_split(self, document: str) -> List[str]:
        """
        Split a document into raw lines

        A trailing newline yields a final empty line, as does every blank
        line in between.
        """
        return NEWLINES.split(document.replace("\r\n", "\n"))

    def frontMatter_strip(self, lines: List[str], context: ProcessingContext) -> List[str]:
        """
        Run the front matter extractor, recovering from an unclosed block

        When the block is never closed the error is recorded in the
        context's diagnostics and the document is classified from its first
        line as if it had no front matter.

        Raises:
            UnterminatedFrontMatterError: In strict mode
        """
        try:
            return self.extractor.extract(lines, context.attributes)
        except UnterminatedFrontMatterError as e:
            if self.settings.strict_mode:
                raise
            LOG(f"Warning: {e}", level=1)
            context.diagnostics.append(e)
            return lines

    def danglingDash_pad(self, lines: List[str], index: int) -> str:
        """
        Pad a final line ending in '-' that follows a bullet item

        Without the padding the dash would read as a setext underline and
        turn the bullet into a heading.
        """
        text = lines[index]
        if index == len(lines) - 1 and index > 0 and text.endswith("-"):
            if lines[index - 1].startswith(self.bullet_tokens):
                return text + " "
        return text

    def previous_restyle(self, found: List[ClassifiedLine], style: LineStyle) -> None:
        """
        Apply ``style`` to the most recently emitted entry

        The entry is located with a text-only equality lookup of the last
        entry, so when an earlier entry has the same text it is that earlier
        entry which is restyled.
        """
        last = found[-1]
        position = found.index(last)
        found[position] = ClassifiedLine(last.text, style)

    def process(self, document: str) -> List[ClassifiedLine]:
        """
        Classify every line of ``document``

        Args:
            document: Raw multi-line text

        Returns:
            Classified lines in document order. Front matter attributes are
            read afterwards via front_matter_attributes.

        Raises:
            UnterminatedFrontMatterError: In strict mode only
        """
        context = ProcessingContext(diagnostics=list(self.classifier.diagnostics))
        self.context = context

        lines = self.frontMatter_strip(self.lines_split(document), context)
        LOG(f"Classifying {len(lines)} line(s)", level=2)

        last_positions = {line: index for index, line in enumerate(lines)}
        found: List[ClassifiedLine] = []

        for index, line in enumerate(lines):
            if self.registry.empty_line_style is None and not line:
                continue

            later_lines = LaterLines(lines, index + 1, last_positions)
            text = self.danglingDash_pad(lines, index)
            previous_text = lines[index - 1] if index > 0 else ""

            result = self.classifier.classify(text, later_lines, previous_text, context)
            if result is None:
                continue

            if isinstance(result, DeferToPrevious):
                if found:
                    self.previous_restyle(found, result.style)
                    LOG(f"Line {index}: restyled previous entry as {result.style}", level=3)
                    continue
                result = result.line

            found.append(result)
            LOG(f"Line {index}: {result.style} {result.text!r}", level=3)

        LOG(f"Classified {len(found)} line(s), {len(context.attributes)} attribute(s)", level=2)
        return found


def process_document(
    document: str,
    registry: Optional[RuleRegistry] = None,
    settings: Optional[AppSettings] = None,
) -> Tuple[List[ClassifiedLine], Dict[str, str]]:
    """
    Classify ``document`` with a throwaway processor

    Returns:
        (classified lines, front matter attributes)
    """
    processor = LineProcessor(registry=registry, settings=settings)
    lines = processor.process(document)
    return lines, processor.front_matter_attributes
