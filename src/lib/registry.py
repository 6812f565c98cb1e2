"""
Rule registry for linemark

A RuleRegistry is the immutable configuration a LineProcessor runs with:
the ordered line rules, the default style, the optional empty-line style and
the front matter rules. Registries are built in code, from the bundled
markdown rule set, or from a YAML rule file.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..models.lines import LineStyle
from ..models.rules import LineRule, FrontMatterRule, Removal, Scope
from ..config import appsettings, AppSettings
from .errors import RuleFileError


@dataclass(frozen=True)
class RuleRegistry:
    """
    Immutable, ordered set of classification rules

    Rules are evaluated in the order given; the first match wins. Lists
    passed in are frozen into tuples so the registry cannot change after
    construction.

    Attributes:
        rules: Ordered line rules
        default_style: Style for lines no rule matches
        empty_line_style: Style for empty lines; None drops empty lines
        front_matter_rules: Recognised front matter delimiters
    """
    rules: Tuple[LineRule, ...]
    default_style: LineStyle = LineStyle.BODY
    empty_line_style: Optional[LineStyle] = None
    front_matter_rules: Tuple[FrontMatterRule, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "front_matter_rules", tuple(self.front_matter_rules))

    def rules_inScope(self, *scopes: Scope) -> List[LineRule]:
        """Rules whose scope is one of ``scopes``, in registry order"""
        return [rule for rule in self.rules if rule.scope in scopes]

    @classmethod
    def registry_markdown(
        cls,
        settings: Optional[AppSettings] = None,
        empty_line_style: Optional[LineStyle] = None,
    ) -> "RuleRegistry":
        """
        Build the bundled markdown-flavoured rule set

        Nested list tokens are derived from the configured indent markers,
        so the bullet and ordered list rules line up with the ordered list
        renumbering done by the classifier.

        Args:
            settings: Settings providing the indent markers (default: appsettings)
            empty_line_style: Optional style for empty lines

        Returns:
            RuleRegistry with setext, list, quote, heading and fenced code rules
        """
        settings = settings or appsettings
        bullet_top, bullet_first, bullet_second = settings.bulletList_tokens()
        ordered_top, ordered_first, ordered_second = settings.orderedList_tokens()

        rules = [
            # Setext underlines restyle the previous line
            LineRule("=", LineStyle.PREVIOUS_H1, Removal.ENTIRE_LINE, scope=Scope.PREVIOUS),
            LineRule("-", LineStyle.PREVIOUS_H2, Removal.ENTIRE_LINE, scope=Scope.PREVIOUS),

            LineRule(bullet_second, LineStyle.UNORDERED_LIST_INDENT_SECOND, should_trim=False),
            LineRule(bullet_first, LineStyle.UNORDERED_LIST_INDENT_FIRST, should_trim=False),
            LineRule(bullet_top, LineStyle.UNORDERED_LIST, should_trim=False),
            LineRule(settings.indent_second + "* ", LineStyle.UNORDERED_LIST_INDENT_SECOND, should_trim=False),
            LineRule(settings.indent_first + "* ", LineStyle.UNORDERED_LIST_INDENT_FIRST, should_trim=False),
            LineRule("* ", LineStyle.UNORDERED_LIST),

            LineRule(ordered_second, LineStyle.ORDERED_LIST_INDENT_SECOND, should_trim=False),
            LineRule(ordered_first, LineStyle.ORDERED_LIST_INDENT_FIRST, should_trim=False),
            LineRule(ordered_top, LineStyle.ORDERED_LIST),

            LineRule(">", LineStyle.BLOCKQUOTE),

            LineRule("###### ", LineStyle.H6, Removal.BOTH),
            LineRule("##### ", LineStyle.H5, Removal.BOTH),
            LineRule("#### ", LineStyle.H4, Removal.BOTH),
            LineRule("### ", LineStyle.H3, Removal.BOTH),
            LineRule("## ", LineStyle.H2, Removal.BOTH),
            LineRule("# ", LineStyle.H1, Removal.BOTH),

            LineRule("```", LineStyle.CODEBLOCK, Removal.ENTIRE_LINE, should_trim=False, scope=Scope.UNTIL_CLOSE),
        ]

        return cls(
            rules=tuple(rules),
            default_style=LineStyle.BODY,
            empty_line_style=empty_line_style,
            front_matter_rules=(FrontMatterRule(open_tag="---", close_tag="---", key_value_separator=":"),),
        )

    @classmethod
    def registry_fromDict(cls, config: Dict[str, Any]) -> "RuleRegistry":
        """
        Build a registry from a decoded rule file

        Expected layout:

            default_style: body
            empty_line_style: null
            rules:
              - {token: "# ", style: h1, removal: both}
              - {token: "```", style: codeblock, removal: entire-line,
                 trim: false, scope: until-close}
            front_matter:
              - {open: "---", close: "---", separator: ":"}

        Args:
            config: Mapping as produced by yaml.safe_load

        Returns:
            RuleRegistry

        Raises:
            RuleFileError: If a style, removal or scope name is unknown, or
                           an entry is missing its token
        """
        if not isinstance(config, dict):
            raise RuleFileError(f"Rule file must contain a mapping, got {type(config).__name__}")

        try:
            default_style = LineStyle.style_fromTag(config.get("default_style", "body"))
            empty_tag = config.get("empty_line_style")
            empty_line_style = LineStyle.style_fromTag(empty_tag) if empty_tag else None
            rules = [cls._rule_fromDict(entry) for entry in config.get("rules") or []]
            front_matter = [
                FrontMatterRule(
                    open_tag=str(entry["open"]),
                    close_tag=str(entry.get("close", entry["open"])),
                    key_value_separator=str(entry.get("separator", ":")),
                )
                for entry in config.get("front_matter") or []
            ]
        except KeyError as e:
            raise RuleFileError(f"Rule file entry is missing required key {e}")
        except (ValueError, TypeError) as e:
            raise RuleFileError(f"Invalid rule file: {e}")

        return cls(
            rules=tuple(rules),
            default_style=default_style,
            empty_line_style=empty_line_style,
            front_matter_rules=tuple(front_matter),
        )

    @staticmethod
    def _rule_fromDict(entry: Dict[str, Any]) -> LineRule:
        """Decode one ``rules`` entry; unknown enum names raise ValueError"""
        return LineRule(
            token=str(entry["token"]),
            style=LineStyle.style_fromTag(entry["style"]),
            removal=Removal(entry.get("removal", Removal.LEADING.value)),
            should_trim=bool(entry.get("trim", True)),
            scope=Scope(entry.get("scope", Scope.CURRENT.value)),
        )

    @classmethod
    def registry_fromYAML(cls, path: Union[str, Path]) -> "RuleRegistry":
        """
        Load a registry from a YAML rule file

        Args:
            path: Path to the rule file

        Raises:
            RuleFileError: If the file is missing, unparsable or invalid
        """
        rules_path = Path(path)
        if not rules_path.exists():
            raise RuleFileError(f"Rule file not found: {rules_path}")

        try:
            with open(rules_path, 'r', encoding="utf-8") as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RuleFileError(f"Failed to parse {rules_path.name}: {e}")

        if config is None:
            config = {}
        return cls.registry_fromDict(config)

