"""Manifest file generator.

Renders the feature manifest as a k6-compatible ES module, and optionally as
plain JSON and a typed TypeScript module.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

MANIFEST_BASENAME = "endpoints.byFeature"

TS_ENDPOINT_TYPE = [
    "export type Method = 'GET' | 'POST' | 'PUT' | 'PATCH' | 'DELETE';",
    "export type Endpoint = {",
    "  name: string;",
    "  method: Method;",
    "  url: string;",
    "  headers?: Record<string, string>;",
    "  auth?: 'bearer';",
    "  expect?: { status?: number; text?: string };",
    "  body?: string;",
    "};",
]


class DestinationUnwritableError(Exception):
    """Raised when a manifest file cannot be written."""
    pass


class ManifestGenerator:
    """Generator for manifest output files.

    Output is fully determined by the manifest, so repeated runs over the
    same specs produce byte-identical files.
    """

    def __init__(self, features: Dict[str, List[Dict[str, Any]]]):
        """Initialize the generator.

        Args:
            features: Feature key -> endpoint dicts, in manifest order
        """
        self.features = features

    def _dump(self) -> str:
        return json.dumps(self.features, indent=2, ensure_ascii=False)

    def render_js(self) -> str:
        """Render the ES module loaded by the k6 script."""
        return "\n".join([
            "// AUTO-GENERATED - k6 ESM compatible",
            f"const features = {self._dump()};",
            "",
            "export default features;",
            "",
        ])

    def render_json(self) -> str:
        return self._dump() + "\n"

    def render_ts(self) -> str:
        """Render a typed TypeScript module for editors."""
        return "\n".join([
            "// AUTO-GENERATED from Playwright specs",
            *TS_ENDPOINT_TYPE,
            f"export const ENDPOINTS_BY_FEATURE: Record<string, Endpoint[]> = {self._dump()};",
            "",
        ])

    def write(self, out_dir: str, with_json: bool = False, with_ts: bool = False) -> List[str]:
        """Write the manifest files.

        Args:
            out_dir: Output directory, created if missing
            with_json: Also write the .json file
            with_ts: Also write the .ts file

        Returns:
            Paths of the written files

        Raises:
            DestinationUnwritableError: If the directory or a file cannot be written
        """
        outputs = [(f"{MANIFEST_BASENAME}.js", self.render_js())]
        if with_json:
            outputs.append((f"{MANIFEST_BASENAME}.json", self.render_json()))
        if with_ts:
            outputs.append((f"{MANIFEST_BASENAME}.ts", self.render_ts()))

        out_path = Path(out_dir)
        written = []
        try:
            out_path.mkdir(parents=True, exist_ok=True)
            for filename, content in outputs:
                file_path = out_path / filename
                file_path.write_text(content, encoding="utf-8")
                written.append(str(file_path))
        except OSError as e:
            raise DestinationUnwritableError(f"Cannot write manifest to {out_dir}: {e}")

        return written


def write_manifest(
    features: Dict[str, List[Dict[str, Any]]],
    out_dir: str,
    with_json: bool = False,
    with_ts: bool = False,
) -> List[str]:
    """Write manifest files for ``features`` into ``out_dir``.

    Returns:
        Paths of the written files
    """
    return ManifestGenerator(features).write(out_dir, with_json=with_json, with_ts=with_ts)
