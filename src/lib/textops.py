"""
Whitespace and wrapper helpers shared by the interpreter and the compiler
"""

import re

_WHITESPACE_RUN = re.compile(r'\s+')

# A newline followed by two or more blank (space/tab only) lines
_BLANK_LINE_RUN = re.compile(r'\n(?:[ \t]*\n){2,}')

_WRAPPER_PAIRS = {'(': ')', '{': '}', '[': ']', '"': '"'}


def whitespace_simplify(text: str) -> str:
    """
    Collapse every whitespace run to a single space and trim the ends.

    Example:
        >>> whitespace_simplify("  a   b\\n\\tc  ")
        'a b c'
    """
    return _WHITESPACE_RUN.sub(' ', text).strip()


def markdown_simplify(text: str) -> str:
    """
    Allow at most one empty line in a row.

    Example:
        >>> markdown_simplify("a\\n\\n\\n\\nb")
        'a\\n\\nb'
    """
    return _BLANK_LINE_RUN.sub('\n\n', text)


def wrapper_strip(text: str) -> str:
    """
    Strip text and remove one enclosing (), {}, [] or "" pair.

    Only the opening character is checked, so "(abc" loses its first and
    last characters just like a balanced pair would.

    Example:
        >>> wrapper_strip(' {hello @FUNC_NAME} ')
        'hello @FUNC_NAME'
    """
    text = text.strip()
    if len(text) >= 2 and text[0] in _WRAPPER_PAIRS:
        return text[1:-1]
    return text


def quotes_strip(text: str) -> str:
    """Remove one pair of surrounding double quotes, if present"""
    text = text.strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text
