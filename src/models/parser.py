"""
Parser-specific data models

Type-safe structures for parser operations and return values.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class ParsedArgs:
    """
    Result of splitting a parenthesized argument list

    Returned by args_parse() when called on text positioned at a '('.

    Attributes:
        args: Top-level comma separated arguments, each stripped
        cursor: Position just past the closing ')', or the text length when
                the list is never closed

    Example:
        For "f(a, (b,c), d) rest" at index 1:
        ParsedArgs(args=["a", "(b,c)", "d"], cursor=14)
    """
    args: List[str]
    cursor: int


@dataclass
class CommandMatch:
    """
    Result of finding an @NAME command inside a comment body

    Returned by command_find() when a marker followed by an uppercase
    letter is located.

    Attributes:
        name: Command name without the marker (e.g. "FUNC_NAME")
        position: Position of the marker in the body
        arguments: Parsed arguments, empty for the bare form
        end: Position just past the command (and its argument list)

    Example:
        For body "@DOC @FUNC_ARG(0) @END" at position 5:
        CommandMatch(name="FUNC_ARG", position=5, arguments=["0"], end=17)
    """
    name: str
    position: int
    arguments: List[str]
    end: int


@dataclass
class MetaCommand:
    """
    A meta-command collected from the control document

    Attributes:
        name: Meta-command name (e.g. "PROCESS_SOURCES")
        arguments: Parsed arguments; empty when no '(' follows the name
        start_line: 1-based line the command starts on
        end_line: 1-based line the command ends on
    """
    name: str
    arguments: List[str]
    start_line: int
    end_line: int
