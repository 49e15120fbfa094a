"""Spec file discovery."""

import os
from pathlib import Path
from typing import List, Sequence

# Directories to skip
SKIP_DIRS = {
    ".git", "node_modules", "__pycache__", "dist", "build",
    "coverage", "playwright-report", "test-results",
}


def scan_spec_files(path: str, suffixes: Sequence[str] = (".ts",)) -> List[str]:
    """Recursively collect spec files under ``path``.

    Hidden and vendored directories are skipped. The result is sorted so
    repeated runs visit files in the same order.

    Args:
        path: Directory to scan
        suffixes: File suffixes to keep (e.g. ".ts")

    Returns:
        Sorted list of file paths. Empty if ``path`` does not exist.

    Raises:
        NotADirectoryError: If ``path`` exists but is not a directory
    """
    root = Path(path)

    if not root.exists():
        return []

    if not root.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {path}")

    files = []
    for current, dirs, filenames in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS and not d.startswith("."))

        for filename in sorted(filenames):
            if _has_suffix(filename, suffixes) and not filename.endswith(".d.ts"):
                files.append(str(Path(current) / filename))

    return files


def _has_suffix(filename: str, suffixes: Sequence[str]) -> bool:
    """Check if file name ends with one of the suffixes."""
    return any(filename.endswith(suffix) for suffix in suffixes)
