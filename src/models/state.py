"""
Program state models and pipeline helper

Defines the per-document ProcessingContext used by the line processor, the
ProgramState dataclass for the CLI's functional pipeline, and the
pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .rules import LineRule


@dataclass
class ProcessingContext:
    """
    Mutable state for a single LineProcessor.process() call

    A fresh context is created for every document, so nothing leaks from
    one call into the next. A context must not be shared between
    concurrently processed documents.

    Attributes:
        open_rule: The until-close rule whose region is currently open
                   (at most one region is open at a time)
        attributes: Decoded front matter key/value pairs (last write wins)
        diagnostics: Recovered errors reported while processing
    """
    open_rule: Optional['LineRule'] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    diagnostics: List[Exception] = field(default_factory=list)

    def region_toggle(self, rule: 'LineRule') -> None:
        """Open a region for ``rule``, or close the currently open one"""
        self.open_rule = rule if self.open_rule is None else None


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFile, rulesFile
        - env_check: inputSourceFile, rulesSourceFile, outputTarget, envOK
        - source_process: processedLines, frontMatter, diagnostics
        - results_write: writeResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source document
        outputdir: Base output directory
        verbosity: Logging verbosity level (1-3)
        inputFile: Input document filename (relative to inputdir)
        outputFile: Output JSON filename (relative to outputdir)
        rulesFile: Optional YAML rule file (relative to inputdir)
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input document
        rulesSourceFile: Resolved path to the rule file, if any
        outputTarget: Resolved path of the JSON output
        processedLines: Classified lines from the document
        frontMatter: Decoded front matter attributes
        diagnostics: Messages of recovered processing errors
        writeResult: Summary of what was written (output_file, line_count)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="README.md")
    outputFile: str = field(default="lines.json")
    rulesFile: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    rulesSourceFile: Optional[Path] = field(default=None)
    outputTarget: Path = field(default=Path("/"))
    processedLines: Optional[List[Any]] = field(default=None)  # List[ClassifiedLine] at runtime
    frontMatter: Dict[str, str] = field(default_factory=dict)
    diagnostics: List[str] = field(default_factory=list)
    writeResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, rulesFile, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for output

        Returns:
            ProgramState instance with all known CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Unknown options (e.g. ones injected by chris_plugin) are dropped
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_process,
            results_write,
            results_report
        )

    This is equivalent to:
        results_report(results_write(source_process(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
