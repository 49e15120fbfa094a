"""Parsers for extracting HTTP calls from spec source text."""

from .delimiters import NOT_FOUND, find_matching_delimiter
from .labels import LabelIndex
from .calls import CallSite, find_call_sites
from .fields import extract_expectation, extract_options_fields
from .specs import (
    SourceUnreadableError,
    SpecParseResult,
    parse_spec_file,
    parse_spec_source,
)

__all__ = [
    "NOT_FOUND",
    "find_matching_delimiter",
    "LabelIndex",
    "CallSite",
    "find_call_sites",
    "extract_expectation",
    "extract_options_fields",
    "SourceUnreadableError",
    "SpecParseResult",
    "parse_spec_file",
    "parse_spec_source",
]
