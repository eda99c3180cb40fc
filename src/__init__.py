"""
docgen - Documentation generator driven by commands in source comments

A Doxygen-like tool: @DOC ... @END regions inside comments, plus commands
such as @FUNC_NAME or @NEXT_DECL that copy text from the code below them,
are assembled into one document laid out by a .docgen control file.
"""

__version__ = "1.0.0"
__author__ = "docgen contributors"

from .lib import Parser, Compiler, CommandRegistry, Interpreter, LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "CommandRegistry",
    "Interpreter",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
