"""Group endpoint descriptors into features and build the manifest."""

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from ..config.schema import EndpointDescriptor
from ..config.settings import GeneratorSettings
from ..parsers.specs import SourceUnreadableError, SpecParseResult, parse_spec_file

SPEC_SUFFIX_PATTERN = re.compile(r"\.(?:spec|test)s?$", re.IGNORECASE)

Manifest = Dict[str, List[EndpointDescriptor]]


@dataclass
class ManifestResult:
    """Results from building a manifest."""
    features: Manifest = field(default_factory=dict)
    files_scanned: int = 0
    files_included: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def endpoint_count(self) -> int:
        return sum(len(endpoints) for endpoints in self.features.values())

    def to_dict(self) -> Dict[str, List[Dict]]:
        """Convert features to the manifest's JSON shape."""
        return {
            key: [endpoint.to_dict() for endpoint in endpoints]
            for key, endpoints in self.features.items()
        }


def humanize(name: str) -> str:
    """Split a camel-case file name into words.

    "WidgetAdmin_v2" -> "Widget Admin v 2"
    """
    name = re.sub(r"([a-z])([A-Z])", r"\1 \2", name)
    name = re.sub(r"([A-Za-z])(\d)", r"\1 \2", name)
    name = name.replace("_", " ")
    return re.sub(r"\s+", " ", name).strip()


def file_feature_name(path: str, suffixes: Sequence[str] = (".ts",), humanized: bool = False) -> str:
    """Derive a feature name from a spec file name.

    "tests/Widgets.spec.ts" -> "Widgets"
    """
    base = Path(path).name
    for suffix in suffixes:
        if base.endswith(suffix):
            base = base[:-len(suffix)]
            break

    base = SPEC_SUFFIX_PATTERN.sub("", base).strip()
    return humanize(base) if humanized else base


def feature_key_for(result: SpecParseResult, settings: GeneratorSettings) -> str:
    """Feature key for a parsed file: its outermost describe title, else its name."""
    if result.group:
        return result.group
    return file_feature_name(result.path, settings.suffixes, settings.humanize_file_names)


class FeatureAggregator:
    """Accumulates endpoints per feature in file-visitation order."""

    def __init__(self, settings: Optional[GeneratorSettings] = None):
        self.settings = settings or GeneratorSettings()
        self.result = ManifestResult()

    def add_file(self, parsed: SpecParseResult) -> "FeatureAggregator":
        """Append a file's endpoints onto its feature.

        Files without endpoints are skipped with a warning.

        Returns:
            self for chaining
        """
        self.result.files_scanned += 1

        if not parsed.endpoints:
            self.result.warnings.append(f"{parsed.path}: no endpoints found")
            return self

        key = feature_key_for(parsed, self.settings)
        self.result.features.setdefault(key, []).extend(parsed.endpoints)
        self.result.files_included += 1
        return self

    def add_failure(self, path: str, error: Exception) -> "FeatureAggregator":
        """Record a file that could not be read."""
        self.result.files_scanned += 1
        self.result.warnings.append(f"Skipped {path}: {error}")
        return self


ParseOutcome = Tuple[str, Union[SpecParseResult, SourceUnreadableError]]


def _parse_one(path: str, settings: GeneratorSettings) -> ParseOutcome:
    try:
        return path, parse_spec_file(path, settings)
    except SourceUnreadableError as e:
        return path, e


def parse_files(files: Sequence[str], settings: GeneratorSettings) -> Iterator[ParseOutcome]:
    """Parse files, possibly concurrently, yielding outcomes in input order."""
    if settings.workers <= 1 or len(files) <= 1:
        for path in files:
            yield _parse_one(path, settings)
        return

    with ThreadPoolExecutor(max_workers=settings.workers) as executor:
        yield from executor.map(lambda p: _parse_one(p, settings), files)


def build_manifest(files: Sequence[str], settings: Optional[GeneratorSettings] = None) -> ManifestResult:
    """Parse spec files and group their endpoints by feature.

    Args:
        files: Spec file paths in visitation order
        settings: Generator settings

    Returns:
        ManifestResult with features, counts and warnings
    """
    settings = settings or GeneratorSettings()
    aggregator = FeatureAggregator(settings)

    if not files:
        aggregator.result.warnings.append("No spec files found")
        return aggregator.result

    for path, outcome in parse_files(files, settings):
        if isinstance(outcome, SourceUnreadableError):
            aggregator.add_failure(path, outcome)
        else:
            aggregator.add_file(outcome)

    return aggregator.result


def format_manifest_summary(result: ManifestResult) -> str:
    """Format a manifest result for display.

    Args:
        result: ManifestResult from build_manifest

    Returns:
        Formatted string for display
    """
    lines = []

    if result.warnings:
        for warning in result.warnings[:5]:
            lines.append(f"Warning: {warning}")
        if len(result.warnings) > 5:
            lines.append(f"... and {len(result.warnings) - 5} more")
        lines.append("")

    lines.append(f"Scanned {result.files_scanned} spec files ({result.files_included} with endpoints)")
    lines.append(f"Found {result.endpoint_count} endpoints across {len(result.features)} features:\n")

    for key, endpoints in result.features.items():
        lines.append(f"  {key} ({len(endpoints)})")
        for endpoint in endpoints:
            lines.append(f"    {endpoint.method} {endpoint.url}")
        lines.append("")

    if not result.features:
        lines.append("  No endpoints found in spec files")

    return "\n".join(lines)
