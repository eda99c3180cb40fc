"""
Comment scanner

Locates line and block comments in raw source text. There is no
tokenizer for the host language: the scanner only looks for the comment
openers, so whichever opener is met first claims the region and the other
kind of marker inside it is inert.

Example:
    >>> [c.body for c in comments_scan("a /* x // y */ b // z\\n")]
    ['x // y', 'z']
"""

from typing import List, Optional

from ..models.source import CommentSpan


def comments_scan(text: str, settings: Optional[object] = None) -> List[CommentSpan]:
    """
    Find every comment in text, earliest first, non-overlapping

    Args:
        text: Source text to scan
        settings: AppSettings providing the comment markers
                  (defaults to the application settings)

    Returns:
        List of CommentSpan. An unterminated block comment swallows the rest
        of the text and ends at len(text).
    """
    if settings is None:
        from ..config import appsettings
        settings = appsettings

    line_open = settings.line_comment
    block_open = settings.block_comment_open
    block_close = settings.block_comment_close

    comments: List[CommentSpan] = []
    length = len(text)
    index = 0

    while index < length:
        if text.startswith(line_open, index):
            end = text.find('\n', index)
            if end == -1:
                end = length
            body = text[index + len(line_open):end].strip()
            comments.append(CommentSpan(start_offset=index, end_offset=end, body=body))
            index = end
        elif text.startswith(block_open, index):
            close = text.find(block_close, index + len(block_open))
            if close == -1:
                body = text[index + len(block_open):].strip()
                comments.append(CommentSpan(start_offset=index, end_offset=length, body=body))
                index = length
            else:
                end = close + len(block_close)
                body = text[index + len(block_open):close].strip()
                comments.append(CommentSpan(start_offset=index, end_offset=end, body=body))
                index = end
        else:
            index += 1

    return comments


def nextComment_find(text: str, start: int, settings: Optional[object] = None) -> int:
    """
    Position of the next line- or block-comment opener at or after start

    Returns:
        Opener position, or len(text) if there is none
    """
    if settings is None:
        from ..config import appsettings
        settings = appsettings

    candidates = [
        pos for pos in (
            text.find(settings.block_comment_open, start),
            text.find(settings.line_comment, start),
        ) if pos != -1
    ]
    return min(candidates) if candidates else len(text)
