"""Core layer shared by every other TorLens module.

Sits at the bottom of the import graph and depends only on stdlib and
third-party libraries.

Attributes:
    exceptions: The [TorLensError][torlens.core.exceptions.TorLensError]
        hierarchy.
    Logger: Structured logger whose keyword arguments render as key=value pairs.
        See [Logger][torlens.core.logger.Logger].
    YAML: Safe YAML loading with ``yaml.safe_load()``.
        See [load_yaml()][torlens.core.yaml.load_yaml].
"""

from .exceptions import (
    ConfigurationError,
    ConstructionError,
    FetchError,
    TorLensError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "ConstructionError",
    "FetchError",
    "Logger",
    "StructuredFormatter",
    "TorLensError",
    "format_kv_pairs",
    "load_yaml",
]
