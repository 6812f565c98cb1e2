"""
Line classifier for linemark

Classifies one line at a time against a RuleRegistry.

The classifier is the rule-driven state machine at the heart of linemark:
1. Empty lines: empty-line style or nothing
2. Open region: lines inside an until-close region take the region's style
3. Current/until-close rules: first match in registry order wins
4. Previous rules: setext underlines defer to the previous line
5. Fallback: the registry's default style

Ordered list lines are renumbered to a canonical "1. " before matching, so
"7. item" and "3. item" both classify as ordered list entries.

Example:
    >>> classifier = LineClassifier(RuleRegistry.registry_markdown())
    >>> classifier.classify("# Title", [], "", ProcessingContext())
    ClassifiedLine(text='Title', style=<LineStyle.H1: ('h1', True, None)>)
"""

import re
from typing import Container, List, Optional, Union

from ..config import appsettings, AppSettings
from ..models.lines import ClassifiedLine, DeferToPrevious, LineStyle
from ..models.rules import LineRule, Removal, Scope
from ..models.state import ProcessingContext
from .errors import LinemarkError, MalformedPatternError
from .registry import RuleRegistry
from .log import LOG


ClassifierResult = Union[ClassifiedLine, DeferToPrevious]


class LineClassifier:
    """
    Applies a RuleRegistry to single lines

    The classifier keeps no per-document state of its own; the open region
    lives on the ProcessingContext passed to classify().
    """

    def __init__(self, registry: RuleRegistry, settings: Optional[AppSettings] = None):
        """
        Initialize classifier

        Args:
            registry: Rules to classify with
            settings: Settings for list renumbering and strict mode
                      (default: appsettings)

        Attributes:
            current_rules: Rules with current or until-close scope, in order
            previous_rules: Rules with previous scope, in order
            ordered_tokens: The three reserved ordered list tokens
            ordered_pattern: Compiled renumbering pattern, None if it did not compile
            diagnostics: Errors recovered from during construction

        Raises:
            MalformedPatternError: In strict mode, if the renumbering pattern
                                   does not compile
        """
        self.registry = registry
        self.settings = settings or appsettings
        self.current_rules: List[LineRule] = registry.rules_inScope(Scope.CURRENT, Scope.UNTIL_CLOSE)
        self.previous_rules: List[LineRule] = registry.rules_inScope(Scope.PREVIOUS)
        self.ordered_tokens = self.settings.orderedList_tokens()
        self.diagnostics: List[LinemarkError] = []
        self.ordered_pattern = self.pattern_compile(self.settings.ordered_list_pattern)

    def pattern_compile(self, pattern: str) -> Optional[re.Pattern]:
        """
        Compile the ordered list renumbering pattern once

        Returns:
            Compiled pattern, or None when it is malformed and strict mode
            is off (renumbering then leaves list numbers as written)
        """
        try:
            return re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            error = MalformedPatternError(pattern, str(e))
            if self.settings.strict_mode:
                raise error from e
            LOG(f"Warning: {error}", level=1)
            self.diagnostics.append(error)
            return None

    def orderedList_renumber(self, text: str) -> str:
        """
        Rewrite an author-written list number to the canonical marker

        A trailing space is appended before substitution so that a bare
        "7." still matches the "digits + '. '" pattern; it is removed again
        unless the result is exactly the marker. Nesting indents found in
        the input text are put back in front.

        Example:
            "7. item"        -> "1. item"
            "    3. nested"  -> "    1. nested"
            "7."             -> "1. "
        """
        result = text.strip() + " "

        if self.ordered_pattern is not None:
            marker = self.settings.ordered_list_replacement
            result = self.ordered_pattern.sub(lambda match: marker, result)

        if self.settings.indent_second in text:
            result = self.settings.indent_second + result
        elif self.settings.indent_first in text:
            result = self.settings.indent_first + result

        if result != self.settings.ordered_list_replacement:
            result = result[:-1]
        return result

    def orderedList_prepare(self, text: str, previous_text: str) -> str:
        """
        Renumber ``text`` and drop nesting that has no parent item

        A nested item only stays nested when the previous line is a
        top-level ordered item; otherwise its indent is trimmed away.
        """
        top, first, second = self.ordered_tokens
        output = self.orderedList_renumber(text)
        if output.startswith(first) or output.startswith(second):
            line_before = self.orderedList_renumber(previous_text).strip()
            if not line_before.startswith(top):
                output = output.strip()
        return output

    def leadingToken_strip(self, rule: LineRule, text: str) -> str:
        """Strip ``rule.token`` if it is an exact prefix of ``text``"""
        if text.startswith(rule.token):
            return text[len(rule.token):]
        return text

    def trailingToken_strip(self, rule: LineRule, text: str) -> str:
        """Strip the whitespace-trimmed ``rule.token`` if it is an exact suffix"""
        token = rule.token.strip()
        if token and text.endswith(token):
            return text[:-len(token)]
        return text

    def token_remove(self, rule: LineRule, text: str) -> str:
        """
        Apply the rule's removal policy

        Returns:
            The stripped text. Equal to ``text`` when the policy did not
            apply, which the caller treats as "rule does not match".
        """
        if rule.removal is Removal.LEADING:
            return self.leadingToken_strip(rule, text)
        if rule.removal is Removal.TRAILING:
            return self.trailingToken_strip(rule, text)
        if rule.removal is Removal.BOTH:
            return self.trailingToken_strip(rule, self.leadingToken_strip(rule, text))
        if rule.removal is Removal.ENTIRE_LINE:
            remainder = text.replace(rule.token, "")
            return remainder if not remainder else text
        return text

    def result_make(self, text: str, style: LineStyle) -> ClassifierResult:
        """Wrap a match, turning setext styles into a deferral"""
        target = style.affects_previous
        if target is not None:
            return DeferToPrevious(style=target, line=ClassifiedLine(text, style))
        return ClassifiedLine(text, style)

    def classify(
        self,
        text: str,
        later_lines: Container[str],
        previous_text: str,
        context: ProcessingContext,
    ) -> Optional[ClassifierResult]:
        """
        Classify a single line

        Args:
            text: The raw line
            later_lines: Lines after this one; only membership is used, to
                         check that an until-close token is closed later
            previous_text: Raw text of the line before ("" for the first line)
            context: Per-document state; its open region may be toggled

        Returns:
            ClassifiedLine for a normal result, DeferToPrevious when the
            previous entry should be restyled, None when an empty line is
            to be dropped
        """
        if not text:
            if self.registry.empty_line_style is not None:
                return ClassifiedLine("", self.registry.empty_line_style)
            return None

        open_rule = context.open_rule
        if open_rule is not None:
            body = text.strip() if open_rule.should_trim else text
            if body != open_rule.token:
                return ClassifiedLine(body, open_rule.style)

        for rule in self.current_rules:
            if not rule.token:
                continue

            output = text.strip() if rule.should_trim else text
            unprocessed = output

            if rule.token in self.ordered_tokens:
                output = self.orderedList_prepare(output, previous_text)

            if rule.token not in output:
                continue

            output = self.token_remove(rule, output)
            if output == unprocessed:
                continue

            if rule.scope is Scope.UNTIL_CLOSE:
                # Never open a region that nothing later closes
                if context.open_rule is None and rule.token not in later_lines:
                    continue
                context.region_toggle(rule)
                LOG(
                    f"Region '{rule.token}' {'opened' if context.open_rule else 'closed'}",
                    level=3,
                )

            if rule.should_trim:
                output = output.strip()
            return self.result_make(output, rule.style)

        for rule in self.previous_rules:
            if not rule.token:
                continue
            output = text.strip() if rule.should_trim else text
            if output and set(output) <= set(rule.token):
                target = rule.style.affects_previous or rule.style
                return DeferToPrevious(style=target, line=ClassifiedLine("", rule.style))

        return ClassifiedLine(text.strip(), self.registry.default_style)
