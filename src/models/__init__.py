"""
Models package for linemark

Contains data structures and type definitions for line classification.
"""

from .state import ProcessingContext, ProgramState, pipeline
from .lines import LineStyle, ClassifiedLine, DeferToPrevious
from .rules import LineRule, FrontMatterRule, Removal, Scope

__all__ = [
    "ProcessingContext",
    "ProgramState",
    "pipeline",
    "LineStyle",
    "ClassifiedLine",
    "DeferToPrevious",
    "LineRule",
    "FrontMatterRule",
    "Removal",
    "Scope",
]
