"""CLI entry point for k6 endpoints."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import (
    DestinationUnwritableError,
    SettingsError,
    load_settings,
    write_manifest,
)
from .config.settings import GeneratorSettings, find_settings_file
from .inference import (
    build_manifest,
    feature_key_for,
    format_manifest_summary,
    scan_spec_files,
)
from .inference.features import ManifestResult
from .parsers import SourceUnreadableError, parse_spec_file


def _error(message: str, code: int = 1):
    click.echo(click.style("Error: ", fg="red", bold=True) + message, err=True)
    sys.exit(code)


def _warn(message: str):
    click.echo(click.style("Warning: ", fg="yellow") + message, err=True)


def _resolve_settings(root: Path, config_path: Optional[str], **overrides) -> GeneratorSettings:
    """Load settings from --config, else from a settings file in the root."""
    if not config_path:
        found = find_settings_file(root)
        config_path = str(found) if found else None

    try:
        return load_settings(config_path, **overrides)
    except SettingsError as e:
        _error(str(e))


def _display_path(path: str, root: Path) -> str:
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return path


def _print_feature_table(result: ManifestResult):
    """Print features and endpoint counts as a table."""
    table = Table(title="Endpoints by feature")
    table.add_column("Feature", style="cyan")
    table.add_column("Endpoints", justify="right")
    table.add_column("Methods")

    for key, endpoints in result.features.items():
        methods = sorted({e.method for e in endpoints})
        table.add_row(key, str(len(endpoints)), ", ".join(methods))

    Console().print(table)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="k6endpoints")
@click.pass_context
def cli(ctx):
    """k6 endpoints - Generate a k6 endpoint manifest from Playwright specs.

    Run 'k6endpoints' or 'k6endpoints generate' to write the manifest.
    Run 'k6endpoints inspect FILE' to see what one spec file yields.
    """
    if ctx.invoked_subcommand is not None:
        return

    ctx.invoke(generate)


@cli.command()
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project root; tests and output directories are relative to it",
)
@click.option(
    "--tests-dir",
    "-t",
    default=None,
    help="Directory scanned for spec files (default: tests/endpoint-tests)",
)
@click.option(
    "--out-dir",
    "-o",
    default=None,
    help="Directory manifest files are written to (default: perf/k6/sources)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file (default: k6endpoints.yaml in the root, if present)",
)
@click.option("--with-json", is_flag=True, help="Also write endpoints.byFeature.json")
@click.option("--with-ts", is_flag=True, help="Also write endpoints.byFeature.ts")
@click.option("--all", "write_all", is_flag=True, help="Same as --with-json --with-ts")
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Number of spec files parsed concurrently",
)
@click.option("--humanize", is_flag=True, help="Split camel-case file names into words for feature names")
@click.option("--dry-run", is_flag=True, help="Print a summary instead of writing files")
@click.option("--verbose", "-v", is_flag=True, help="Show a table of generated features")
def generate(
    root: str = ".",
    tests_dir: Optional[str] = None,
    out_dir: Optional[str] = None,
    config_path: Optional[str] = None,
    with_json: bool = False,
    with_ts: bool = False,
    write_all: bool = False,
    workers: Optional[int] = None,
    humanize: bool = False,
    dry_run: bool = False,
    verbose: bool = False,
):
    """Generate the endpoint manifest.

    Scans the tests directory for spec files, extracts every request call
    and writes endpoints grouped by feature.

    \b
    Example:
        k6endpoints generate
        k6endpoints generate --all
        k6endpoints generate -t e2e/api -o perf/sources --with-json
        k6endpoints generate --dry-run
    """
    root_path = Path(root).resolve()
    settings = _resolve_settings(
        root_path,
        config_path,
        tests_dir=tests_dir,
        out_dir=out_dir,
        workers=workers,
        with_json=True if (with_json or write_all) else None,
        with_ts=True if (with_ts or write_all) else None,
        humanize_file_names=True if humanize else None,
    )

    tests_path = root_path / settings.tests_dir
    try:
        files = scan_spec_files(str(tests_path), settings.suffixes)
    except NotADirectoryError as e:
        _error(str(e))

    if not files:
        _warn(f"No {'/'.join(settings.suffixes)} spec files found under {tests_path}")
        return

    result = build_manifest(files, settings)
    if dry_run:
        click.echo(format_manifest_summary(result))
        return

    for warning in result.warnings:
        _warn(warning)

    try:
        written = write_manifest(
            result.to_dict(),
            str(root_path / settings.out_dir),
            with_json=settings.with_json,
            with_ts=settings.with_ts,
        )
    except DestinationUnwritableError as e:
        _error(str(e))

    click.echo(
        click.style("✓ ", fg="green", bold=True)
        + f"Generated {result.endpoint_count} endpoints across {len(result.features)} features"
    )
    for path in written:
        click.echo(f"  - {_display_path(path, root_path)}")

    if verbose:
        click.echo()
        _print_feature_table(result)


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file",
)
def inspect(spec_file: str, config_path: Optional[str]):
    """Print the endpoints extracted from a single spec file as JSON.

    \b
    Example:
        k6endpoints inspect tests/endpoint-tests/widgets.spec.ts
    """
    settings = _resolve_settings(Path.cwd(), config_path)

    try:
        parsed = parse_spec_file(spec_file, settings)
    except SourceUnreadableError as e:
        _error(str(e))

    click.echo(json.dumps(
        {
            "file": parsed.path,
            "feature": feature_key_for(parsed, settings),
            "endpoints": [endpoint.to_dict() for endpoint in parsed.endpoints],
        },
        indent=2,
        ensure_ascii=False,
    ))


main = cli


if __name__ == "__main__":
    cli()
