"""Inference module - discover spec files and group endpoints by feature."""

from .scanner import scan_spec_files
from .features import (
    FeatureAggregator,
    ManifestResult,
    build_manifest,
    feature_key_for,
    format_manifest_summary,
)

__all__ = [
    "scan_spec_files",
    "FeatureAggregator",
    "ManifestResult",
    "build_manifest",
    "feature_key_for",
    "format_manifest_summary",
]
