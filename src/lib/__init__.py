"""
docgen - Documentation generator driven by commands in source comments

Extracts documentation from comments and assembles it into one document.
"""

__version__ = "1.0.0"
__author__ = "docgen contributors"

from .parser import Parser, args_parse
from .scanner import comments_scan
from .compiler import Compiler
from .commands import CommandRegistry
from .interpreter import Interpreter
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "args_parse",
    "comments_scan",
    "Compiler",
    "CommandRegistry",
    "Interpreter",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
