"""
Models package for docgen

Contains data structures and type definitions for the documentation pipeline.
"""

from .state import ProgramState, pipeline
from .commands import CommandSpec, CommandCategory, SIMPLIFY_PREFIX
from .parser import ParsedArgs, CommandMatch, MetaCommand
from .source import (
    SourceUnit,
    CommentSpan,
    CommandInvocation,
    CommandResult,
    Diagnostic,
    DiagnosticKind,
    RawText,
    RecurseIntoUnit,
    WorkItem,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "CommandSpec",
    "CommandCategory",
    "SIMPLIFY_PREFIX",
    "ParsedArgs",
    "CommandMatch",
    "MetaCommand",
    "SourceUnit",
    "CommentSpan",
    "CommandInvocation",
    "CommandResult",
    "Diagnostic",
    "DiagnosticKind",
    "RawText",
    "RecurseIntoUnit",
    "WorkItem",
]
