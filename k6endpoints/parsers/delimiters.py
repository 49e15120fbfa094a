"""Balanced delimiter matching.

Regular expressions cannot count nesting depth, so option objects and call
argument lists are bounded with a plain depth counter instead.
"""

from typing import Dict

# Returned when the text ends before the delimiter is closed
NOT_FOUND = -1

DELIMITER_PAIRS: Dict[str, str] = {
    "(": ")",
    "{": "}",
    "[": "]",
}

QUOTES = "'\"`"


def find_matching_delimiter(text: str, start: int) -> int:
    """Find the index of the delimiter closing the one at ``start``.

    Only the pair opened at ``start`` is counted; other bracket kinds are
    ignored.

    Args:
        text: Source text
        start: Index of an opening ``(``, ``{`` or ``[``

    Returns:
        Index of the matching closing delimiter, or NOT_FOUND
    """
    if start < 0 or start >= len(text):
        return NOT_FOUND

    opener = text[start]
    closer = DELIMITER_PAIRS.get(opener)
    if closer is None:
        return NOT_FOUND

    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i

    return NOT_FOUND


def find_closing_quote(text: str, start: int) -> int:
    """Find the index of the quote closing the string literal at ``start``.

    Backslash escapes are skipped. Template literal ``${...}`` parts are not
    treated specially.

    Returns:
        Index of the closing quote, or NOT_FOUND
    """
    if start < 0 or start >= len(text) or text[start] not in QUOTES:
        return NOT_FOUND

    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i
        i += 1

    return NOT_FOUND
