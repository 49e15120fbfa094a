"""Locate HTTP request call sites in spec source text.

Two call shapes are recognized:

- ``request.post('/api/widgets', { data: {...} })`` where the method is the
  called attribute
- ``request.fetch('/api/widgets', { method: 'POST', ... })`` and bare
  ``fetch(...)`` where the method lives in the options object
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config.schema import HTTP_METHODS
from .delimiters import NOT_FOUND, find_matching_delimiter

# Leading URL literal (and the comma after it) inside an argument list
FIRST_ARGUMENT_PATTERN = re.compile(r"""^\s*(['"`]).+?\1\s*,?""", re.DOTALL)

METHOD_FIELD_PATTERN = re.compile(r"""\bmethod\s*:\s*['"`]([A-Za-z]+)['"`]""")

FETCH_PATTERN = re.compile(
    r"""\b(?:[A-Za-z_$][\w$]*\s*\.\s*)?fetch\s*\(\s*(['"`])(?P<url>[^'"`]+)\1""",
    re.IGNORECASE,
)


@dataclass
class CallSite:
    """A recognized request call and its raw, unparsed options."""
    offset: int
    method: str
    url: str
    open_index: int
    close_index: int
    options: str = ""

    @property
    def is_closed(self) -> bool:
        return self.close_index != NOT_FOUND


def build_method_call_pattern(receivers: Sequence[str]) -> re.Pattern:
    """Compile the ``<receiver>.<verb>('<url>'`` pattern for the given receivers."""
    names = "|".join(re.escape(r) for r in receivers) or r"[A-Za-z_$][\w$]*"
    verbs = "|".join(m.lower() for m in HTTP_METHODS)
    return re.compile(
        rf"""(?<![\w$])(?:{names})\s*\.\s*(?P<method>{verbs})\s*\(\s*(['"`])(?P<url>[^'"`]+)\2""",
        re.IGNORECASE,
    )


def split_options(arguments: str) -> str:
    """Return the options object following the URL argument.

    Args:
        arguments: Text between the call's parentheses

    Returns:
        The leading ``{...}`` block after the URL, or an empty string when
        there is none or it is never closed
    """
    rest = FIRST_ARGUMENT_PATTERN.sub("", arguments, count=1).strip()
    if not rest.startswith("{"):
        return ""

    end = find_matching_delimiter(rest, 0)
    if end == NOT_FOUND:
        return ""
    return rest[:end + 1]


def _bound_call(text: str, match: re.Match) -> Tuple[int, int, str]:
    """Bound a matched call's argument list.

    Returns:
        Tuple of (open paren index, close paren index or NOT_FOUND, options text)
    """
    open_index = text.index("(", match.start())
    close_index = find_matching_delimiter(text, open_index)

    options = ""
    if close_index != NOT_FOUND:
        options = split_options(text[open_index + 1:close_index])

    return open_index, close_index, options


def find_method_calls(text: str, receivers: Sequence[str]) -> List[CallSite]:
    """Find ``<receiver>.<verb>(url[, options])`` calls."""
    calls = []
    for match in build_method_call_pattern(receivers).finditer(text):
        open_index, close_index, options = _bound_call(text, match)
        calls.append(CallSite(
            offset=match.start(),
            method=match.group("method").upper(),
            url=match.group("url"),
            open_index=open_index,
            close_index=close_index,
            options=options,
        ))
    return calls


def find_fetch_calls(text: str) -> List[CallSite]:
    """Find ``fetch(url, { method: 'VERB', ... })`` calls.

    A missing method field means GET. Calls using a verb outside the
    supported set are skipped.
    """
    calls = []
    for match in FETCH_PATTERN.finditer(text):
        open_index, close_index, options = _bound_call(text, match)

        method = "GET"
        method_match = METHOD_FIELD_PATTERN.search(options)
        if method_match:
            method = method_match.group(1).upper()
        if method not in HTTP_METHODS:
            continue

        calls.append(CallSite(
            offset=match.start(),
            method=method,
            url=match.group("url"),
            open_index=open_index,
            close_index=close_index,
            options=options,
        ))
    return calls


def find_call_sites(text: str, receivers: Optional[Sequence[str]] = None) -> List[CallSite]:
    """Find all recognized request calls in source order.

    Args:
        text: Spec file content
        receivers: Object names treated as HTTP clients (defaults to ``request``)

    Returns:
        CallSite list ordered by offset
    """
    if receivers is None:
        receivers = ["request"]

    calls = find_method_calls(text, receivers) + find_fetch_calls(text)
    calls.sort(key=lambda c: c.offset)
    return calls
