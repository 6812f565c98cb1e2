"""
linemark - Rule-driven line classifier for markdown-like documents

Core engine: rule registry, front matter extraction, line classification
and the document pipeline.
"""

__version__ = "1.0.0"

from .registry import RuleRegistry
from .frontmatter import FrontMatterExtractor
from .classifier import LineClassifier
from .processor import LineProcessor, LaterLines, process_document
from .errors import (
    LinemarkError,
    UnterminatedFrontMatterError,
    MalformedPatternError,
    RuleFileError,
)
from .log import LOG, state_connectToLogger

__all__ = [
    "RuleRegistry",
    "FrontMatterExtractor",
    "LineClassifier",
    "LineProcessor",
    "LaterLines",
    "process_document",
    "LinemarkError",
    "UnterminatedFrontMatterError",
    "MalformedPatternError",
    "RuleFileError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
