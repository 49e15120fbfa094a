"""Config module - manifest schema, generator settings and output files."""

from .schema import EndpointBuilder, EndpointDescriptor, Expectation
from .settings import GeneratorSettings, SettingsError, load_settings
from .generator import DestinationUnwritableError, ManifestGenerator, write_manifest

__all__ = [
    "EndpointBuilder",
    "EndpointDescriptor",
    "Expectation",
    "GeneratorSettings",
    "SettingsError",
    "load_settings",
    "DestinationUnwritableError",
    "ManifestGenerator",
    "write_manifest",
]
