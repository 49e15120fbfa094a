"""
Parse Playwright/Jest spec files into endpoint descriptors.

Spec files are scanned as plain text: test titles are indexed first, then
every recognized request call is bounded, its options are mined for headers,
body and auth, and the text right after it is mined for status and text
assertions. Malformed calls degrade to method + URL instead of being dropped.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from ..config.schema import EndpointBuilder, EndpointDescriptor
from ..config.settings import GeneratorSettings
from .calls import CallSite, find_call_sites
from .fields import extract_expectation, extract_options_fields
from .labels import LabelIndex


class SourceUnreadableError(Exception):
    """Raised when a spec file cannot be read."""
    pass


@dataclass
class SpecParseResult:
    """Endpoints recovered from a single spec file."""
    path: str
    group: Optional[str] = None
    endpoints: List[EndpointDescriptor] = field(default_factory=list)


def resolve_name(method: str, url: str, title: Optional[str] = None) -> str:
    """Pick a display name for an endpoint.

    The enclosing test title wins. Without one, absolute URLs are shortened
    to their last path segment; anything else is named by method and URL.
    """
    if title:
        return title

    parsed = urlparse(url)
    if parsed.scheme and parsed.netloc:
        segments = [s for s in parsed.path.split("/") if s]
        if segments:
            return f"{method} {segments[-1]}"

    return f"{method} {url}"


def build_endpoint(
    source: str,
    call: CallSite,
    labels: LabelIndex,
    window: int,
) -> EndpointDescriptor:
    """Assemble the descriptor for one call site."""
    builder = EndpointBuilder(call.method, call.url)
    builder.set_name(resolve_name(call.method, call.url, labels.nearest_at_or_before(call.offset)))

    options = extract_options_fields(call.options)
    if options.content_type and call.method != "GET":
        builder.set_header("Content-Type", options.content_type)
    if options.bearer:
        builder.set_auth("bearer")
    if options.body:
        builder.set_body(options.body)

    if call.is_closed:
        tail = source[call.close_index + 1:call.close_index + 1 + window]
        expectation = extract_expectation(tail)
        builder.set_expectation(expectation.status, expectation.substring)

    return builder.build()


def parse_spec_source(source: str, settings: Optional[GeneratorSettings] = None) -> SpecParseResult:
    """Parse spec file content.

    Args:
        source: Spec file text
        settings: Generator settings (receivers, assertion window)

    Returns:
        SpecParseResult with endpoints in call order
    """
    settings = settings or GeneratorSettings()
    labels = LabelIndex.from_source(source)

    endpoints = [
        build_endpoint(source, call, labels, settings.window)
        for call in find_call_sites(source, settings.receivers)
    ]

    return SpecParseResult(path="", group=labels.outermost_group, endpoints=endpoints)


def parse_spec_file(path: str, settings: Optional[GeneratorSettings] = None) -> SpecParseResult:
    """Parse a single spec file.

    Args:
        path: Path to the spec file
        settings: Generator settings

    Returns:
        SpecParseResult for the file

    Raises:
        SourceUnreadableError: If the file cannot be read or decoded
    """
    file_path = Path(path)

    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnreadableError(f"Cannot read {path}: {e}")

    result = parse_spec_source(source, settings)
    result.path = str(file_path)
    return result
