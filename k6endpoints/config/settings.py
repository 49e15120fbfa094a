"""Generator settings, optionally loaded from a YAML file."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_RECEIVERS = ["request", "apiContext", "api", "client", "agent", "axios"]


class SettingsError(Exception):
    """Raised when a settings file cannot be loaded."""
    pass


class GeneratorSettings(BaseModel):
    """Settings for a manifest generation run."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tests_dir": "tests/endpoint-tests",
                "out_dir": "perf/k6/sources",
                "suffixes": [".ts"],
                "receivers": ["request"],
                "with_json": True,
            }
        }
    )

    tests_dir: str = Field(
        "tests/endpoint-tests",
        description="Directory scanned for spec files, relative to the project root",
    )
    out_dir: str = Field(
        "perf/k6/sources",
        description="Directory the manifest files are written to",
    )
    suffixes: List[str] = Field(
        default_factory=lambda: [".ts"],
        description="File suffixes treated as spec files",
    )
    receivers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_RECEIVERS),
        description="Object names whose .get()/.post()/... calls are HTTP requests",
    )
    window: int = Field(
        600,
        gt=0,
        description="Characters after a call searched for response assertions",
    )
    workers: int = Field(1, ge=1, description="Files parsed concurrently")
    with_json: bool = Field(False, description="Also write endpoints.byFeature.json")
    with_ts: bool = Field(False, description="Also write endpoints.byFeature.ts")
    humanize_file_names: bool = Field(
        False,
        description="Split camel-case file names into words for feature keys",
    )

    @field_validator("suffixes")
    @classmethod
    def _normalize_suffixes(cls, value: List[str]) -> List[str]:
        return [s if s.startswith(".") else f".{s}" for s in value]


def load_settings(path: Optional[str] = None, **overrides: Any) -> GeneratorSettings:
    """Load settings from a YAML file and apply overrides.

    Overrides whose value is None are ignored, so unset CLI options keep the
    file's (or the default) value.

    Args:
        path: Optional path to a YAML settings file
        **overrides: Field values taking precedence over the file

    Returns:
        Validated GeneratorSettings

    Raises:
        SettingsError: If the file cannot be read, parsed or validated
    """
    data: Dict[str, Any] = {}

    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise SettingsError(f"Cannot read settings file {path}: {e}")

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GeneratorSettings(**data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}")


def find_settings_file(root: Path) -> Optional[Path]:
    """Return the project's settings file if one exists in ``root``."""
    for name in ("k6endpoints.yaml", "k6endpoints.yml", ".k6endpoints.yaml"):
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None
