"""
Command specification and metadata models

Defines the structure and categories of in-comment commands for
lookup, documentation generation, and registry management.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List


class CommandCategory(Enum):
    """
    Categories of built-in commands

    Used for organization and the command listing.
    """
    LAYOUT = "layout"          # @SECTION
    EXTRACTION = "extraction"  # @FUNC_NAME, @NEXT_DECL, ...
    METADATA = "metadata"      # @FILE_NAME
    TRANSFORM = "transform"    # @SIMPLIFY / @S


@dataclass
class CommandSpec:
    """
    Specification for a built-in command

    Attributes:
        name: Command name (without the marker)
        category: Category for organization
        description: Human-readable description
        handler: Execution function (invocation, interpreter) -> CommandResult
        examples: Example usage strings
        aliases: Alternative names for the command
    """
    name: str
    category: CommandCategory
    description: str
    handler: Callable
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)


# Prefix that runs any command through SIMPLIFY
SIMPLIFY_PREFIX = "S_"

