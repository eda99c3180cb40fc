"""
Parsers for command syntax

Three pieces of lexing live here, none of which understand the host
programming language:

1. args_parse(): the delimiter-balanced argument splitter shared by
   in-comment commands, FUNC_ARG and control document meta-commands
2. body_tokenize(): walks a comment body and yields literal text and
   @NAME / @NAME(args) commands
3. Parser: splits a control document into verbatim lines and
   @@NAME(args)@@ meta-commands

Example:
    >>> args_parse("f(a, (b,c), d)", 1).args
    ['a', '(b,c)', 'd']
    >>> list(body_tokenize("@DOC hi @FILE_NAME"))
    [CommandMatch(name='DOC', ...), ' hi ', CommandMatch(name='FILE_NAME', ...)]
"""

from typing import Iterator, List, Optional, Union

from ..models.parser import ParsedArgs, CommandMatch, MetaCommand


def args_parse(text: str, index: int) -> ParsedArgs:
    """
    Split a parenthesized argument list on top-level commas

    Depth tracking: a double quote toggles quote state and everything in
    quotes is inert. Outside quotes (), [] and {} have independent counters
    and a comma splits only when all three are zero. The paren counter
    dropping to -1 marks the list's own closing paren.

    Args:
        text: Text containing the argument list
        index: Position of the opening '('

    Returns:
        ParsedArgs with the stripped arguments and the position just past
        the closing ')'. An unclosed list produces a last argument running to
        the end of text and a cursor of len(text).

    Example:
        args_parse('f("a,b", c)', 1)  ->  ParsedArgs(['"a,b"', 'c'], 11)
        args_parse('f()', 1)          ->  ParsedArgs([''], 3)
    """
    args: List[str] = []
    last = index
    paren_depth = 0
    bracket_depth = 0
    brace_depth = 0
    in_quote = False

    for pos in range(index + 1, len(text)):
        char = text[pos]
        if char == '"':
            in_quote = not in_quote
        if in_quote:
            continue

        if char == '(':
            paren_depth += 1
        elif char == ')':
            paren_depth -= 1
        elif char == '[':
            bracket_depth += 1
        elif char == ']':
            bracket_depth -= 1
        elif char == '{':
            brace_depth += 1
        elif char == '}':
            brace_depth -= 1
        elif char == ',' and paren_depth == 0 and bracket_depth == 0 and brace_depth == 0:
            args.append(text[last + 1:pos].strip())
            last = pos

        if paren_depth == -1:
            close = text.find(')', pos)
            if close == -1:
                close = len(text)
            args.append(text[last + 1:close].strip())
            return ParsedArgs(args=args, cursor=close + 1)

    args.append(text[last + 1:].strip())
    return ParsedArgs(args=args, cursor=len(text))


def parenBlock_find(text: str, start: int) -> Optional[tuple]:
    """
    Locate the first '(' at or after start and its matching ')'

    Only parentheses are counted; quotes and other brackets are ignored.

    Returns:
        (open, close) positions; close is len(text) when unbalanced.
        None when there is no '(' at all.
    """
    open_pos = text.find('(', start)
    if open_pos == -1:
        return None

    depth = 0
    pos = open_pos
    while pos < len(text):
        if text[pos] == '(':
            depth += 1
        elif text[pos] == ')':
            depth -= 1
            if depth == 0:
                return open_pos, pos
        pos += 1
    return open_pos, len(text)


def identifierChar_is(char: str) -> bool:
    """ASCII letter, digit or underscore"""
    return char.isascii() and (char.isalnum() or char == '_')


def command_find(body: str, position: int, marker: str = "@") -> Optional[CommandMatch]:
    """
    Recognize a command starting exactly at position

    A command is the marker followed by an uppercase ASCII letter, then any
    identifier characters. A '(' immediately after the name starts the
    argument list.

    Returns:
        CommandMatch, or None if no command starts at position
    """
    name_start = position + len(marker)
    if not body.startswith(marker, position) or name_start >= len(body):
        return None
    first = body[name_start]
    if not (first.isascii() and first.isupper()):
        return None

    end = name_start
    while end < len(body) and identifierChar_is(body[end]):
        end += 1
    name = body[name_start:end]

    arguments: List[str] = []
    if end < len(body) and body[end] == '(':
        parsed = args_parse(body, end)
        arguments = parsed.args
        end = parsed.cursor

    return CommandMatch(name=name, position=position, arguments=arguments, end=end)


def body_tokenize(body: str, marker: str = "@") -> Iterator[Union[str, CommandMatch]]:
    r"""
    Split a comment body into literal text runs and commands

    A backslash directly followed by '(' right after a command is dropped
    so the '(' becomes literal text: "@FUNC_NAME\(" yields the command and
    then "(".

    Yields:
        str for literal text, CommandMatch for commands, in body order
    """
    pos = 0
    text_start = 0
    while pos < len(body):
        match = command_find(body, pos, marker)
        if match is None:
            pos += 1
            continue

        if text_start < pos:
            yield body[text_start:pos]
        yield match

        pos = match.end
        if body.startswith('\\(', pos):
            pos += 1
        text_start = pos

    if text_start < len(body):
        yield body[text_start:]


def metaCommand_parse(command: str, start_line: int = 0, end_line: int = 0) -> MetaCommand:
    """
    Parse the text between meta markers into a name and arguments

    Example:
        metaCommand_parse('INSERT_SECTION(api)')
        -> MetaCommand(name='INSERT_SECTION', arguments=['api'], ...)
    """
    command = command.strip()
    paren = command.find('(')
    if paren == -1:
        return MetaCommand(name=command, arguments=[], start_line=start_line, end_line=end_line)

    name = command[:paren].strip()
    arguments = args_parse(command, paren).args
    return MetaCommand(name=name, arguments=arguments, start_line=start_line, end_line=end_line)


class Parser:
    """
    Parser for the control document

    Lines beginning with the meta marker open a meta-command. When the
    marker appears again on the same line the command ends there (anything
    after the closing marker is dropped). Otherwise the following lines are
    collected until a line that begins with the marker; the rest of that
    line is the end of the command. Every other line is kept verbatim.
    """

    def __init__(self, source: str, marker: str = "@@") -> None:
        """
        Initialize parser with control document text

        Args:
            source: Control document contents
            marker: Meta-command marker
        """
        self.source = source
        self.marker = marker
        self.lines = source.split('\n')
        if self.lines and self.lines[-1] == '':
            self.lines.pop()

    def parse(self) -> List[Union[str, MetaCommand]]:
        """
        Split the control document

        Returns:
            Verbatim lines (without newline) and MetaCommand objects, in
            document order
        """
        items: List[Union[str, MetaCommand]] = []
        marker = self.marker
        line_index = 0

        while line_index < len(self.lines):
            line = self.lines[line_index]
            line_index += 1
            start_line = line_index

            if not line.startswith(marker):
                items.append(line)
                continue

            close = line.find(marker, len(marker))
            if close != -1:
                items.append(metaCommand_parse(line[len(marker):close], start_line, start_line))
                continue

            parts = [line[len(marker):], '\n']
            while line_index < len(self.lines):
                line = self.lines[line_index]
                line_index += 1
                if line.startswith(marker):
                    parts.append(line[len(marker):])
                    break
                parts.append(line + '\n')

            items.append(metaCommand_parse(''.join(parts), start_line, line_index))

        return items
