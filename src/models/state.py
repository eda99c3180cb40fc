"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the documentation pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as generation progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, controlFile, outputFile
        - env_check: controlSourceFile, docsOutputdir, envOK
        - control_read: controlSource
        - docs_compile: compileResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the control document and sources
        outputdir: Directory receiving the document and plugin commands
        verbosity: Logging verbosity level (1-3)
        controlFile: Control document name (relative to inputdir)
        outputFile: Generated document name (relative to outputdir)
        envOK: Environment validation passed
        controlSourceFile: Resolved path to the control document
        docsOutputdir: Created output directory
        controlSource: Text of the control document
        compileResult: Generation results (output_file, diagnostics, ...)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    controlFile: str = field(default="")
    outputFile: str = field(default="")

    # Pipeline state
    envOK: bool = field(default=False)
    controlSourceFile: Path = field(default=Path("/"))
    docsOutputdir: Path = field(default=Path("/"))
    controlSource: Optional[str] = field(default=None)
    compileResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (controlFile, outputFile, etc.)
            inputdir: Directory containing the control document
            outputdir: Directory for generated output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Drop options that are not state fields (e.g. argparse internals)
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
            control_read,
            docs_compile,
            results_report
        )

    This is equivalent to:
        results_report(docs_compile(control_read(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
