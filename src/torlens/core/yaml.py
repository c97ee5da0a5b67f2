"""YAML configuration loading for TorLens.

Provides safe YAML file loading using ``yaml.safe_load`` to prevent
arbitrary code execution from untrusted YAML content. Used by
[TorLens.from_yaml()][torlens.client.TorLens.from_yaml] and the CLI's
``--config`` flag.

Examples:
    ```python
    from torlens.core.yaml import load_yaml

    config = load_yaml("config/torlens.yaml")
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Load and parse a YAML configuration file.

    Args:
        config_path: Path to the YAML file (absolute or relative).

    Returns:
        Parsed configuration as a dictionary. Returns an empty dict if the
        file exists but contains no data.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file contains invalid YAML syntax or its
            top level is not a mapping.

    Warning:
        This function does not validate the structure of the returned
        dictionary. Callers pass the result to
        [TorLensConfig][torlens.client.TorLensConfig] for schema validation.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top of {config_path}, got {type(data).__name__}"
        )
    return data
