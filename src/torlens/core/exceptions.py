"""TorLens exception hierarchy.

Every failure raised by the library derives from
[TorLensError][torlens.core.exceptions.TorLensError], so callers can catch
the whole family with one clause while still telling configuration
problems apart from network failures.

Exception hierarchy:

```text
TorLensError (base -- never raised directly)
├── ConfigurationError   -- bad YAML, unknown or invalid config keys
├── ConstructionError    -- malformed base URL, raised before any I/O
└── FetchError           -- network failure or non-2xx HTTP status
```

Note:
    A response body that is not valid JSON is not wrapped: the decoder's
    ``json.JSONDecodeError`` reaches the caller unchanged.

See Also:
    [build_details_url][torlens.utils.url.build_details_url]: Raises
        [ConstructionError][torlens.core.exceptions.ConstructionError].
    [fetch_json][torlens.utils.http.fetch_json]: Raises
        [FetchError][torlens.core.exceptions.FetchError].
"""

from __future__ import annotations


class TorLensError(Exception):
    """Base exception for all TorLens errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(TorLensError):
    """Invalid or missing configuration (YAML file, config mapping, CLI flags).

    See Also:
        [TorLens.from_dict()][torlens.client.TorLens.from_dict]: Wraps
            validation failures in this exception.
        [load_yaml()][torlens.core.yaml.load_yaml]: YAML loading function
            whose syntax errors are reported through this exception.
    """


# ---------------------------------------------------------------------------
# URL construction
# ---------------------------------------------------------------------------


class ConstructionError(TorLensError):
    """A query URL could not be built from the configured base URL.

    Raised synchronously, before any network access takes place.
    """


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class FetchError(TorLensError):
    """The directory service could not be reached or answered with a non-2xx status.

    Attributes:
        status: Numeric HTTP status code, or ``None`` when the failure
            happened below HTTP (DNS, connection reset, timeout).
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
