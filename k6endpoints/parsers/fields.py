"""Recover headers, body, auth and response assertions around a call."""

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from .delimiters import NOT_FOUND, QUOTES, find_closing_quote, find_matching_delimiter

# Searched only inside the headers: {...} block
CONTENT_TYPE_PATTERN = re.compile(
    r"""(?<![\w$-])(['"])content-type\1\s*:\s*['"`](?P<value>[^'"`]+)['"`]""",
    re.IGNORECASE,
)

BEARER_PATTERN = re.compile(
    r"""(?<![\w$-])(['"]?)authorization\1\s*:\s*['"`]\s*Bearer\b""",
    re.IGNORECASE,
)

# key: or 'key': or "key":
KEY_PATTERN = re.compile(r"""(['"]?)(?P<key>[\w$-]+)\1\s*:\s*""")

IDENTIFIER_PATTERN = re.compile(r"""[A-Za-z_$][\w$]*""")

BODY_KEYS = ("data", "body")

# JSON.stringify({...}), buildPayload(...)
CALL_VALUE_PATTERN = re.compile(r"""[A-Za-z_$][\w$.]*\s*\(""")

SCALAR_VALUE_PATTERN = re.compile(r"""[^,\n}]+""")

STATUS_PATTERNS = [
    # expect(response.status()).toBe(201), expect(res.status).toEqual(404)
    re.compile(
        r"""expect\s*\(\s*(?:await\s+)?[\w$.]+\s*\.\s*status\s*(?:\(\s*\))?\s*\)"""
        r"""\s*\.\s*(?:toBe|toEqual|toStrictEqual)\s*\(\s*(?P<status>\d{3})\s*\)""",
        re.IGNORECASE,
    ),
    # expect(response.ok()).toBeTruthy(), expect(res.ok).toBe(true)
    re.compile(
        r"""expect\s*\(\s*(?:await\s+)?[\w$.]+\s*\.\s*ok\s*(?:\(\s*\))?\s*\)"""
        r"""\s*\.\s*(?:toBeTruthy\s*\(\s*\)|toBe\s*\(\s*true\s*\))""",
        re.IGNORECASE,
    ),
]

TEXT_PATTERN = re.compile(
    r"""expect\s*\(\s*(?:await\s+)?(?:[\w$]+\s*\.\s*)*text\s*(?:\(\s*\))?\s*\)"""
    r"""\s*\.\s*toContain\s*\(\s*(['"`])(?P<text>(?:(?!\1).)+)\1\s*\)""",
    re.IGNORECASE,
)

OK_STATUS = 200


@dataclass
class OptionsFields:
    """Fields recovered from a call's options object."""
    content_type: Optional[str] = None
    bearer: bool = False
    body: Optional[str] = None


@dataclass
class ExpectationFields:
    """Assertions recovered from the text following a call."""
    status: Optional[int] = None
    substring: Optional[str] = None


def clean_body_string(value: Optional[str]) -> Optional[str]:
    """Trim and collapse runs of whitespace to single spaces."""
    if not value:
        return None
    cleaned = re.sub(r"\s+", " ", value.strip())
    return cleaned or None


def iter_top_level_keys(options: str) -> Iterator[re.Match]:
    """Yield the keys of the outermost object literal in ``options``.

    Nested brackets and string literals are skipped over, so keys of inner
    objects (such as a ``'X-Body'`` header) and text inside strings are never
    reported. Each match ends where the key's value begins.
    """
    position = 1 if options.startswith("{") else 0
    while position < len(options):
        ch = options[position]

        if ch in "{[(":
            end = find_matching_delimiter(options, position)
            if end == NOT_FOUND:
                return
            position = end + 1
            continue

        if ch in QUOTES:
            key = KEY_PATTERN.match(options, position)
            if key:
                yield key
                position = key.end()
                continue
            end = find_closing_quote(options, position)
            if end == NOT_FOUND:
                return
            position = end + 1
            continue

        identifier = IDENTIFIER_PATTERN.match(options, position)
        if identifier:
            key = KEY_PATTERN.match(options, position)
            if key:
                yield key
                position = key.end()
            else:
                position = identifier.end()
            continue

        position += 1


def find_top_level_value(options: str, names: Sequence[str]) -> int:
    """Return where the value of the first top-level key in ``names`` starts.

    Key names are compared case-insensitively.

    Returns:
        Index of the value, or NOT_FOUND
    """
    wanted = {name.lower() for name in names}
    for key in iter_top_level_keys(options):
        if key.group("key").lower() in wanted:
            return key.end()
    return NOT_FOUND


def extract_headers_block(options: str) -> str:
    """Return the ``headers: {...}`` object literal, or an empty string."""
    start = find_top_level_value(options, ("headers",))
    if start == NOT_FOUND or not options.startswith("{", start):
        return ""

    end = find_matching_delimiter(options, start)
    if end == NOT_FOUND:
        return ""
    return options[start:end + 1]


def extract_body(options: str) -> Optional[str]:
    """Extract the value of the top-level ``data:`` or ``body:`` key.

    Nested objects, arrays and call expressions are bounded by delimiter
    matching and string literals by their closing quote; anything else is
    read up to the next comma, newline or closing brace. A nested value that
    is never closed yields None.
    """
    start = find_top_level_value(options, BODY_KEYS)
    if start == NOT_FOUND or start >= len(options):
        return None

    if options[start] in "{[":
        end = find_matching_delimiter(options, start)
        if end == NOT_FOUND:
            return None
        return clean_body_string(options[start:end + 1])

    if options[start] in QUOTES:
        end = find_closing_quote(options, start)
        if end != NOT_FOUND:
            return clean_body_string(options[start:end + 1])

    call = CALL_VALUE_PATTERN.match(options, start)
    if call:
        end = find_matching_delimiter(options, call.end() - 1)
        if end == NOT_FOUND:
            return None
        return clean_body_string(options[start:end + 1])

    scalar = SCALAR_VALUE_PATTERN.match(options, start)
    if not scalar:
        return None
    return clean_body_string(scalar.group(0))


def extract_options_fields(options: str) -> OptionsFields:
    """Recover content type, bearer auth and body from an options object.

    Content type and auth are read from the ``headers`` block only.

    Args:
        options: Raw options text, possibly empty

    Returns:
        OptionsFields with whatever could be recovered
    """
    fields = OptionsFields()
    if not options:
        return fields

    headers = extract_headers_block(options)
    content_type = CONTENT_TYPE_PATTERN.search(headers)
    if content_type:
        fields.content_type = content_type.group("value").strip()

    fields.bearer = BEARER_PATTERN.search(headers) is not None
    fields.body = extract_body(options)
    return fields


def _first_status(window: str) -> Optional[int]:
    """Return the earliest in-range status assertion in ``window``."""
    found = []
    for pattern in STATUS_PATTERNS:
        for match in pattern.finditer(window):
            status = match.groupdict().get("status")
            code = int(status) if status else OK_STATUS
            if 100 <= code <= 599:
                found.append((match.start(), code))
                break

    if not found:
        return None
    return min(found)[1]


def extract_expectation(window: str) -> ExpectationFields:
    """Recover the first status and text assertions in a trailing window.

    Only text after the call is passed in, so assertions preceding the call
    are never considered.

    Args:
        window: Source text immediately following the call

    Returns:
        ExpectationFields with the earliest matches
    """
    text = TEXT_PATTERN.search(window)
    return ExpectationFields(
        status=_first_status(window),
        substring=text.group("text") if text else None,
    )
