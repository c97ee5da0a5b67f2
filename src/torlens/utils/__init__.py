"""URL building and HTTP transport.

The utils layer depends only on [torlens.core][torlens.core] and provides
the two leaves of the request path used by [torlens.api][torlens.api].

Attributes:
    url: ``details`` endpoint construction from a search term or a
        parameter map.
    http: Single-shot aiohttp GET with JSON decoding and uniform
        [FetchError][torlens.core.exceptions.FetchError] reporting.
"""

from .http import fetch_json
from .url import build_advanced_url, build_details_url, details_endpoint


__all__ = [
    "build_advanced_url",
    "build_details_url",
    "details_endpoint",
    "fetch_json",
]
