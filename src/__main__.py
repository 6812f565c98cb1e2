#!/usr/bin/env python3
"""
linemark - Rule-driven line classifier

Classifies every line of a markdown-like document (headings, list items,
quotes, fenced code, ...) and writes the result, together with the
document's decoded front matter, as JSON.

As with other ChRIS-style tools, the command line is provided by the
chris_plugin framework: positional inputdir and outputdir, options for the
rest.

Usage:
    linemark inputdir/ outputdir/ --inputFile README.md

Examples:
    # Classify with the bundled markdown rules
    linemark docs/ out/ --inputFile guide.md

    # Custom rule set, verbose output
    linemark docs/ out/ --inputFile notes.txt --rulesFile rules.yaml -vv
"""

import sys
import json
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .lib import LineProcessor, RuleRegistry, RuleFileError, LinemarkError, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline


parser = ArgumentParser(
    description="linemark - classify document lines with ordered token rules",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", default="README.md", type=str, help="Input document (relative to inputdir)"
)

parser.add_argument(
    "--outputFile", default="lines.json", type=str, help="JSON output file (relative to outputdir)"
)

parser.add_argument(
    "--rulesFile",
    default=None,
    type=str,
    help="YAML rule file (relative to inputdir). Defaults to the bundled markdown rules",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input document
            - rulesSourceFile: Resolved path to the rule file, if given
            - outputTarget: Path of the JSON output (parent created)
            - envOK: True if environment is valid

    Exits:
        1 if the input document or rule file is not found
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.rulesFile:
        rules_file = state.inputdir / state.rulesFile
        if not rules_file.exists():
            print(f"Error: Rule file not found: {rules_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.rulesSourceFile = rules_file
        LOG(f"Rule file: {rules_file}", level=2)

    state.outputTarget = state.outputdir / state.outputFile
    state.outputTarget.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.outputTarget}", level=2)

    state.envOK = True
    return state


def source_process(inputstate: ProgramState) -> ProgramState:
    """
    Read the input document and classify its lines.

    Returns:
        ProgramState with added fields:
            - processedLines: List[ClassifiedLine]
            - frontMatter: Decoded front matter attributes
            - diagnostics: Messages of recovered errors

    Exits:
        1 if the document or rule file cannot be read, or processing fails
    """
    state = inputstate.copy()

    LOG("Reading source file...", level=1)
    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        registry = None
        if state.rulesSourceFile is not None:
            registry = RuleRegistry.registry_fromYAML(state.rulesSourceFile)
            LOG(f"Loaded {len(registry.rules)} rule(s)", level=2)
        processor = LineProcessor(registry=registry)
        LOG("Classifying lines...", level=1)
        state.processedLines = processor.process(source)
    except RuleFileError as e:
        print(f"Rule file error: {e}", file=sys.stderr)
        sys.exit(1)
    except LinemarkError as e:
        print(f"Processing error: {e}", file=sys.stderr)
        sys.exit(1)

    state.frontMatter = dict(processor.front_matter_attributes)
    state.diagnostics = [str(error) for error in processor.diagnostics]
    LOG(f"Classified {len(state.processedLines)} lines", level=2)
    return state


def results_write(inputstate: ProgramState) -> ProgramState:
    """
    Write classified lines and front matter to the JSON output.

    Returns:
        ProgramState with added field:
            - writeResult: Dict with output_file and line_count

    Exits:
        1 if there is nothing to write or the file cannot be written
    """
    state = inputstate.copy()

    if state.processedLines is None:
        print("Error: No processed lines available", file=sys.stderr)
        sys.exit(1)

    document = {
        "attributes": state.frontMatter,
        "lines": [
            {"text": line.text, "style": line.style.tag, "tokenise": line.style.should_tokenise}
            for line in state.processedLines
        ],
        "diagnostics": state.diagnostics,
    }

    try:
        state.outputTarget.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        print(f"Error writing output file: {e}", file=sys.stderr)
        sys.exit(1)

    state.writeResult = {
        "output_file": str(state.outputTarget),
        "line_count": len(state.processedLines),
    }
    LOG(f"Wrote {state.outputTarget}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if writeResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.writeResult:
        print("Error: Nothing was written", file=sys.stderr)
        sys.exit(1)

    LOG("✓ Classification complete", level=1)
    LOG(f"  Output: {state.writeResult['output_file']}", level=1)
    LOG(f"  Lines: {state.writeResult['line_count']}", level=1)
    if state.frontMatter:
        LOG(f"  Attributes: {', '.join(sorted(state.frontMatter))}", level=1)
    for message in state.diagnostics:
        LOG(f"  Warning: {message}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="linemark - rule-driven line classifier",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - classify a document and write the result as JSON.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. source_process: Read and classify the document
        3. results_write: Write the JSON output
        4. results_report: Display results
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_process, results_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
