r"""TorLens -- async client for Tor relay and bridge details.

Queries the Onionoo directory service and offers accessors that filter and
rank the returned relays and bridges.

Imports flow strictly downward:

```text
           client  __main__      Query facade and CLI
               \    /
                api              Fetch facade
               /    \
          utils      models      URL + transport / frozen records
               \    /
                core             Exceptions, logging, YAML
```

Note:
    Top-level imports (``from torlens import TorLens``) use lazy loading
    and resolve on first access, so ``import torlens`` does not pull in
    aiohttp or pydantic until something is used.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("torlens")

__all__ = [
    "DEFAULT_API_URL",
    "BridgeRecord",
    "ConfigurationError",
    "ConstructionError",
    "ExitPolicySummary",
    "FetchError",
    "RelayRecord",
    "ResultDocument",
    "TorLens",
    "TorLensConfig",
    "TorLensError",
    "build_advanced_url",
    "build_details_url",
    "fetch_advanced_details",
    "fetch_details",
    "fetch_json",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "DEFAULT_API_URL": ("torlens.api", "DEFAULT_API_URL"),
    "fetch_details": ("torlens.api", "fetch_details"),
    "fetch_advanced_details": ("torlens.api", "fetch_advanced_details"),
    "TorLens": ("torlens.client", "TorLens"),
    "TorLensConfig": ("torlens.client", "TorLensConfig"),
    "TorLensError": ("torlens.core", "TorLensError"),
    "ConfigurationError": ("torlens.core", "ConfigurationError"),
    "ConstructionError": ("torlens.core", "ConstructionError"),
    "FetchError": ("torlens.core", "FetchError"),
    "BridgeRecord": ("torlens.models", "BridgeRecord"),
    "ExitPolicySummary": ("torlens.models", "ExitPolicySummary"),
    "RelayRecord": ("torlens.models", "RelayRecord"),
    "ResultDocument": ("torlens.models", "ResultDocument"),
    "build_advanced_url": ("torlens.utils", "build_advanced_url"),
    "build_details_url": ("torlens.utils", "build_details_url"),
    "fetch_json": ("torlens.utils", "fetch_json"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'torlens' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
