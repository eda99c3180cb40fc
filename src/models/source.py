"""
Source and interpreter data models

Immutable views over the text being documented (SourceUnit, CommentSpan),
the per-command invocation record, and the values the interpreter passes
around while running commands (CommandResult, Diagnostic, work items).
"""

from enum import Enum
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import List, Union


@dataclass(frozen=True)
class SourceUnit:
    """
    One buffer of source text and the name it was read from.

    The name is only consulted by FILE_NAME; synthetic units produced by
    alias expansion inherit the name of the unit that invoked the alias.
    """
    text: str
    name: str = ""

    @property
    def basename(self) -> str:
        """Unit name with any directory path removed"""
        return PurePath(self.name).name if self.name else ""


@dataclass(frozen=True)
class CommentSpan:
    """
    A comment located by the scanner

    Attributes:
        start_offset: Offset of the first opener character
        end_offset: Offset just past the comment. For line comments this is
                    the position of the terminating newline; for an
                    unterminated block comment it is the text length.
        body: Interior text without markers, stripped

    Example:
        For "int x; // @DOC hi\\nint y;":
        CommentSpan(start_offset=7, end_offset=17, body="@DOC hi")
    """
    start_offset: int
    end_offset: int
    body: str


class DiagnosticKind(Enum):
    """Categories of problems reported while generating documentation"""
    ARITY = "arity"            # wrong number of arguments
    INDEX = "index"            # FUNC_ARG index out of range / not an integer
    UNRESOLVED = "unresolved"  # unknown command or section, missing plugin export, alias depth
    PLUGIN = "plugin"          # plugin code raised while loading or running
    SYNTAX = "syntax"          # malformed meta-command


@dataclass
class Diagnostic:
    """A non-fatal problem; the run continues after reporting it"""
    kind: DiagnosticKind
    message: str
    source: str = ""

    def __str__(self) -> str:
        where = f"{self.source}: " if self.source else ""
        return f"{where}{self.message}"


@dataclass
class CommandInvocation:
    """
    A single @NAME(...) found inside a documentation region

    Attributes:
        name: Command name without marker (e.g. "FUNC_ARG")
        arguments: Trimmed argument texts, fresh per invocation
        comment: Comment the command was found in
        source: Unit the comment belongs to
        simplify: Collapse whitespace in the command's output
    """
    name: str
    arguments: List[str]
    comment: CommentSpan
    source: SourceUnit
    simplify: bool = False

    @property
    def following(self) -> str:
        """Source text after the comment"""
        return self.source.text[self.comment.end_offset:]


@dataclass
class CommandResult:
    """Text emitted by a command plus anything worth reporting"""
    text: str = ""
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @classmethod
    def failure(cls, kind: DiagnosticKind, message: str, source: str = "") -> "CommandResult":
        """Result that emits nothing and carries one diagnostic"""
        return cls(text="", diagnostics=[Diagnostic(kind, message, source)])


@dataclass(frozen=True)
class RawText:
    """Work item: text appended to the current section"""
    text: str


@dataclass(frozen=True)
class RecurseIntoUnit:
    """
    Work item: a synthetic unit to run through the scanner next

    With simplify set, everything the unit emits (nested units included)
    is collected and written as one whitespace-simplified block.
    """
    unit: SourceUnit
    simplify: bool = False


WorkItem = Union[RawText, RecurseIntoUnit]
