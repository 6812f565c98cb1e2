"""
linemark - Rule-driven line classifier for markdown-like documents

Splits a document into lines and tags each one (heading, list item, code
block, quote, ...) using an ordered, configurable set of token rules.
A leading front matter block is decoded into key/value attributes.
"""

__version__ = "1.0.0"

from .lib import (
    RuleRegistry,
    LineProcessor,
    process_document,
    LinemarkError,
    UnterminatedFrontMatterError,
    MalformedPatternError,
    RuleFileError,
    LOG,
    state_connectToLogger,
)
from .models import (
    LineStyle,
    ClassifiedLine,
    DeferToPrevious,
    LineRule,
    FrontMatterRule,
    Removal,
    Scope,
)

__all__ = [
    "RuleRegistry",
    "LineProcessor",
    "process_document",
    "LinemarkError",
    "UnterminatedFrontMatterError",
    "MalformedPatternError",
    "RuleFileError",
    "LOG",
    "state_connectToLogger",
    "LineStyle",
    "ClassifiedLine",
    "DeferToPrevious",
    "LineRule",
    "FrontMatterRule",
    "Removal",
    "Scope",
    "__version__",
]
