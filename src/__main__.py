#!/usr/bin/env python3
"""
docgen - Documentation generator driven by commands in source comments

Builds one markdown (or any text) document from documentation embedded in
source code comments, laid out by a .docgen control document.

The command line is a ChRIS plugin: `main` receives parsed options plus the
input and output directories, so docgen also runs as a ChRIS "ds" plugin.

Philosophy:
    - Docs live next to the code: /* @DOC ... @END */ regions in comments
    - Commands copy from the code: @FUNC_NAME, @FUNC_ARG(0), @NEXT_DECL, ...
    - Layout lives in one control file: @@INSERT_SECTION(api)@@
    - Output-format agnostic: the result is just text

Control document meta-commands:
    @@PROCESS_SOURCES(src/**/*.cpp, include/*.h)@@
    @@INSERT_SECTION(api)@@
    @@NEW_ALIAS(BRIEF, {### @FUNC_NAME})@@
    @@NEW_COMMAND(FIRST_WORD, {return code.split()[0]})@@

Usage:
    docgen inputdir/ outputdir/ [--controlFile .docgen] [--outputFile index.md]

    The generated document is written to outputdir/, plugin commands to
    outputdir/commands/.

Examples:
    # Generate docs/index.md from ./.docgen
    docgen . docs/

    # Verbose output
    docgen . docs/ -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Compiler, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
      _
   __| | ___   ___ __ _  ___ _ __
  / _` |/ _ \ / __/ _` |/ _ \ '_ \
 | (_| | (_) | (_| (_| |  __/ | | |
  \__,_|\___/ \___\__, |\___|_| |_|
                  |___/
  Documentation from source comments
"""

# Define CLI arguments
parser = ArgumentParser(
    description="docgen - Documentation generator driven by commands in source comments",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--controlFile",
    default=appsettings.control_file,
    type=str,
    help="Control document (relative to inputdir)",
)

parser.add_argument(
    "--outputFile",
    default=appsettings.output_file,
    type=str,
    help="Generated document name (relative to outputdir)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Locate the control document and create the output directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - controlSourceFile: Resolved path to the control document
            - docsOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        0 if there is no control document (nothing to generate)
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    control_file = state.inputdir / state.controlFile
    if not control_file.is_file():
        print(f"No {state.controlFile} file found in {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(0)

    state.controlSourceFile = control_file
    LOG(f"Control file: {control_file}", level=2)

    if not state.outputdir.exists():
        state.outputdir.mkdir(parents=True, exist_ok=True)
        LOG(f"Created output directory {state.outputdir}", level=1)
    state.docsOutputdir = state.outputdir

    state.envOK = True
    return state


def control_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the control document.

    Returns:
        ProgramState with added field:
            - controlSource: Control document text

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Generating docs...", level=1)

    try:
        state.controlSource = state.controlSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.controlSource)} characters from {state.controlSourceFile.name}", level=2)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading control file: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def docs_compile(inputstate: ProgramState) -> ProgramState:
    """
    Execute the control document and write the generated document.

    Returns:
        ProgramState with added field:
            - compileResult: Dict containing:
                - status: bool
                - output_file: str (path to generated document)
                - source_count: int (source files processed)
                - section_count: int (named sections filled)
                - diagnostics: List[Diagnostic]

    Exits:
        1 if the output cannot be written
    """

    state = inputstate.copy()

    compiler = Compiler(
        source=state.controlSource or "",
        output_dir=str(state.docsOutputdir),
        input_dir=str(state.inputdir),
        output_file=state.outputFile,
        verbosity=state.verbosity,
    )
    try:
        state.compileResult = compiler.compile()
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Processed {state.compileResult['source_count']} source files", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Summarize the run.

    Exits:
        1 in strict mode when any diagnostic was reported
    """
    state: ProgramState = inputstate.copy()
    result = state.compileResult or {}
    diagnostics = result.get('diagnostics', [])

    LOG(f"\n✓ Wrote {result.get('output_file')}", level=1)
    LOG(f"  Sources:     {result.get('source_count', 0)}", level=1)
    LOG(f"  Sections:    {result.get('section_count', 0)}", level=1)
    LOG(f"  Diagnostics: {len(diagnostics)}", level=1)

    if diagnostics and appsettings.strict_mode:
        print(f"{len(diagnostics)} diagnostics reported (strict mode)", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="docgen - Documentation from source comments",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - generate the document described by the control file.

    Orchestrates the pipeline:
        1. env_check: Locate control file, create output directory
        2. control_read: Read the control document
        3. docs_compile: Run meta-commands, write the document
        4. results_report: Summarize

    Args:
        options: CLI arguments from argparse
            - controlFile: str - Control document name
            - outputFile: str - Generated document name
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing the control document and sources
        outputdir: Directory where the document will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, control_read, docs_compile, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
