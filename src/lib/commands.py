"""
Built-in command implementations for docgen

Each extraction command is a pure function of the source text and the
offset where the documenting comment ends; it looks at the raw text after
the comment and never parses the host language. Missing structure (no '('
found, no '#', ...) is not an error: the functions return whatever
best-effort substring is left, possibly empty.

Uses CommandSpec for metadata, mirroring how the registry is listed.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..models.commands import CommandSpec, CommandCategory
from ..models.source import CommandInvocation, CommandResult, DiagnosticKind
from .parser import args_parse, parenBlock_find, identifierChar_is
from .textops import quotes_strip

_DECL_END = re.compile(r'[;={]')
_CLASS_END = re.compile(r'[{:;]')


# ---------------------------------------------------------------------------
# Extraction primitives
# ---------------------------------------------------------------------------

def nextLine_extract(text: str, end_offset: int) -> str:
    """Trimmed text from the comment end to the next newline"""
    newline = text.find('\n', end_offset + 1)
    if newline == -1:
        newline = len(text)
    return text[end_offset:newline].strip()


def funcNameSpan_find(text: str, end_offset: int) -> Tuple[int, int]:
    """
    Locate the identifier naming the next function

    Walks back from the first '(' after the comment over non-identifier
    characters, then over the identifier itself. When that identifier is
    `operator`, the span is extended up to the '(' so the operator token is
    included.

    Returns:
        (start, end) of the name; start == end when nothing was found
    """
    paren = text.find('(', end_offset)
    if paren == -1:
        paren = len(text)

    end = paren
    while end > end_offset and not identifierChar_is(text[end - 1]):
        end -= 1
    start = end
    while start > end_offset and identifierChar_is(text[start - 1]):
        start -= 1

    if text[start:end] == 'operator':
        end = text.find('(', end)
        if end == -1:
            end = len(text)
    return start, end


def funcName_extract(text: str, end_offset: int) -> str:
    """
    Name of the next function

    Example:
        >>> funcName_extract("*/\\nint add(int a, int b)", 2)
        'add'
        >>> funcName_extract(" bool operator==(const X&) const;", 0)
        'operator=='
    """
    start, end = funcNameSpan_find(text, end_offset)
    return text[start:end].strip()


def funcRet_extract(text: str, end_offset: int) -> str:
    """Return type: everything between the comment and the function name"""
    start, _ = funcNameSpan_find(text, end_offset)
    return text[end_offset:start].strip()


def nextDecl_extract(text: str, end_offset: int) -> str:
    """
    Next declaration, normalized to end with ';'

    Example:
        >>> nextDecl_extract(" static int counter = 0;", 0)
        'static int counter;'
    """
    match = _DECL_END.search(text, end_offset)
    end = match.start() if match else len(text)
    return text[end_offset:end].strip() + ';'


def funcArgs_extract(text: str, end_offset: int) -> str:
    """Verbatim text inside the first parenthesized list after the comment"""
    block = parenBlock_find(text, end_offset)
    if block is None:
        return ""
    open_pos, close_pos = block
    return text[open_pos + 1:close_pos].strip()


def funcArgList_extract(text: str, end_offset: int) -> List[str]:
    """Arguments of the next function, split by the argument parser"""
    block = parenBlock_find(text, end_offset)
    if block is None:
        return []
    open_pos, close_pos = block
    return args_parse(text[open_pos:close_pos + 1], 0).args


def className_extract(text: str, end_offset: int) -> str:
    """
    Identifier immediately before the first '{', ':' or ';'

    Example:
        >>> className_extract(" class Widget : public Base {", 0)
        'Widget'
    """
    match = _CLASS_END.search(text, end_offset)
    end = match.start() if match else len(text)
    while end > end_offset and text[end - 1].isspace():
        end -= 1
    start = end
    while start > end_offset and identifierChar_is(text[start - 1]):
        start -= 1
    return text[start:end].strip()


def nextMacro_extract(text: str, end_offset: int) -> str:
    """
    Macro name and parameter list, without the replacement body

    Example:
        >>> nextMacro_extract("\\n#define MAX(a, b) ((a) > (b) ? (a) : (b))", 0)
        '#define MAX(a, b)'
    """
    start = text.find('#', end_offset)
    if start == -1:
        start = len(text)
    end = text.find(')', start)
    if end == -1:
        end = len(text)
    return text[start:end].strip() + ')'


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class CommandRegistry:
    """
    Registry of built-in command specifications and handlers

    Maps command names to CommandSpec objects. Aliases and plugin commands
    are not registered here; the interpreter falls back to them when a name
    is not found.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in commands"""
        self.specs: Dict[str, CommandSpec] = {}
        self.layoutCommands_register()
        self.extractionCommands_register()
        self.metadataCommands_register()
        self.transformCommands_register()

    def register(self, spec: CommandSpec) -> None:
        """Register a command specification"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def get(self, name: str) -> Optional[Any]:
        """
        Get command handler by name

        Returns:
            Handler function or None if not a built-in
        """
        spec = self.specs.get(name)
        return spec.handler if spec else None

    def spec_get(self, name: str) -> Optional[CommandSpec]:
        """Get full command specification by name"""
        return self.specs.get(name)

    def commands_listByCategory(self, category: CommandCategory) -> List[CommandSpec]:
        """Get all commands in a category (aliases collapsed)"""
        seen: List[CommandSpec] = []
        for spec in self.specs.values():
            if spec.category == category and spec not in seen:
                seen.append(spec)
        return seen

    def layoutCommands_register(self) -> None:
        """Register output routing commands"""

        def section_handler(invocation: CommandInvocation, interpreter: Any) -> CommandResult:
            """Handle @SECTION(name) - route output to a named section, or main"""
            name = quotes_strip(invocation.arguments[0]) if invocation.arguments else ""
            interpreter.sections.section_switch(name)
            return CommandResult()

        self.register(CommandSpec(
            name='SECTION',
            category=CommandCategory.LAYOUT,
            description='Route following output to a named section (no argument: main)',
            handler=section_handler,
            examples=['@SECTION(api)', '@SECTION'],
        ))

    def extractionCommands_register(self) -> None:
        """Register commands that copy text following the comment"""

        def make_extractor(extract: Any) -> Any:
            """Factory for handlers around a pure (text, end_offset) extractor"""
            def handler(invocation: CommandInvocation, interpreter: Any) -> CommandResult:
                return CommandResult(text=extract(invocation.source.text, invocation.comment.end_offset))
            return handler

        extraction_specs = [
            ('NEXT_LINE', nextLine_extract, 'Rest of the line after the comment',
             ['// @DOC @NEXT_LINE @END']),
            ('FUNC_NAME', funcName_extract, 'Name of the next function',
             ['/* @DOC ### @FUNC_NAME @END */']),
            ('NEXT_DECL', nextDecl_extract, 'Next declaration, terminated with ;',
             ['/* @DOC `@NEXT_DECL` @END */']),
            ('FUNC_RET', funcRet_extract, 'Return type of the next function',
             ['/* @DOC returns @FUNC_RET @END */']),
            ('FUNC_ARGS', funcArgs_extract, 'Parameter list of the next function',
             ['/* @DOC (@FUNC_ARGS) @END */']),
            ('CLASS_NAME', className_extract, 'Name of the next class or struct',
             ['/* @DOC ## @CLASS_NAME @END */']),
            ('NEXT_MACRO', nextMacro_extract, 'Next macro name and parameters',
             ['/* @DOC `@NEXT_MACRO` @END */']),
        ]

        for name, extract, desc, examples in extraction_specs:
            self.register(CommandSpec(
                name=name,
                category=CommandCategory.EXTRACTION,
                description=desc,
                handler=make_extractor(extract),
                examples=examples,
            ))

        def func_arg_handler(invocation: CommandInvocation, interpreter: Any) -> CommandResult:
            """Handle @FUNC_ARG(i) - one parameter of the next function"""
            where = invocation.source.name
            if len(invocation.arguments) != 1:
                return CommandResult.failure(
                    DiagnosticKind.ARITY, "FUNC_ARG requires 1 argument", where
                )
            try:
                index = int(invocation.arguments[0])
            except ValueError:
                return CommandResult.failure(
                    DiagnosticKind.INDEX,
                    f"FUNC_ARG index '{invocation.arguments[0]}' is not an integer", where
                )

            params = funcArgList_extract(invocation.source.text, invocation.comment.end_offset)
            if index < 0:
                index += len(params)
            if index < 0 or index >= len(params):
                return CommandResult.failure(
                    DiagnosticKind.INDEX, f"Argument {invocation.arguments[0]} not found", where
                )
            return CommandResult(text=params[index])

        self.register(CommandSpec(
            name='FUNC_ARG',
            category=CommandCategory.EXTRACTION,
            description='One parameter of the next function (negative counts from the end)',
            handler=func_arg_handler,
            examples=['@FUNC_ARG(0)', '@FUNC_ARG(-1)'],
        ))

    def metadataCommands_register(self) -> None:
        """Register commands describing the source unit itself"""

        def file_name_handler(invocation: CommandInvocation, interpreter: Any) -> CommandResult:
            """Handle @FILE_NAME - source file name without directories"""
            return CommandResult(text=invocation.source.basename)

        self.register(CommandSpec(
            name='FILE_NAME',
            category=CommandCategory.METADATA,
            description='Name of the source file, without its directory',
            handler=file_name_handler,
            examples=['// @DOC # @FILE_NAME @END'],
        ))

    def transformCommands_register(self) -> None:
        """Register commands that post-process another command's output"""

        def simplify_handler(invocation: CommandInvocation, interpreter: Any) -> Any:
            """Handle @SIMPLIFY(cmd, args...) - run cmd with whitespace collapsed"""
            if not invocation.arguments or not invocation.arguments[0]:
                return CommandResult.failure(
                    DiagnosticKind.ARITY,
                    "Wrong number of arguments in SIMPLIFY",
                    invocation.source.name,
                )
            inner = CommandInvocation(
                name=invocation.arguments[0].strip(),
                arguments=list(invocation.arguments[1:]),
                comment=invocation.comment,
                source=invocation.source,
                simplify=True,
            )
            return interpreter.invocation_dispatch(inner)

        self.register(CommandSpec(
            name='SIMPLIFY',
            category=CommandCategory.TRANSFORM,
            description='Run a command and collapse whitespace in its output',
            handler=simplify_handler,
            examples=['@SIMPLIFY(FUNC_ARGS)', '@S(FUNC_ARG, 0)', '@S_NEXT_DECL'],
            aliases=['S'],
        ))
