"""Query URL construction for the Onionoo ``details`` resource.

Both builders share one rule for the base URL: it must be an absolute
``http`` or ``https`` URL with a host. Anything else raises
[ConstructionError][torlens.core.exceptions.ConstructionError] before a
request is ever attempted. Query values are percent-encoded with standard
``application/x-www-form-urlencoded`` rules (space becomes ``+``).

Examples:
    ```python
    build_details_url("https://onionoo.torproject.org", "moria1")
    # 'https://onionoo.torproject.org/details?search=moria1'

    build_advanced_url("https://onionoo.torproject.org", {"flag": "Exit", "limit": "5"})
    # 'https://onionoo.torproject.org/details?flag=Exit&limit=5'
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlencode, urlsplit

from torlens.core.exceptions import ConstructionError


if TYPE_CHECKING:
    from collections.abc import Mapping


DETAILS_PATH = "/details"
_ALLOWED_SCHEMES = ("http", "https")


def details_endpoint(base_url: str) -> str:
    """Return ``{base_url}/details`` after checking that *base_url* is usable.

    A single trailing slash on *base_url* is dropped so that
    ``https://host/`` and ``https://host`` resolve to the same endpoint.

    Raises:
        ConstructionError: If *base_url* is not an absolute HTTP(S) URL.
    """
    try:
        parts = urlsplit(base_url)
        hostname = parts.hostname
    except (TypeError, ValueError, AttributeError) as e:
        raise ConstructionError(f"Invalid base URL {base_url!r}: {e}") from e

    if parts.scheme not in _ALLOWED_SCHEMES or not hostname:
        raise ConstructionError(
            f"Invalid base URL {base_url!r}: expected an absolute http(s) URL with a host"
        )

    base = base_url[:-1] if base_url.endswith("/") else base_url
    return base + DETAILS_PATH


def build_details_url(base_url: str, search_term: str | None = None) -> str:
    """Build a details URL, optionally narrowed by a free-text search term.

    Args:
        base_url: Directory service root, e.g. ``https://onionoo.torproject.org``.
        search_term: Nickname, fingerprint, address or other term understood
            by the service's ``search`` parameter. ``None`` or an empty
            string yields the bare endpoint, which returns every record.

    Returns:
        The full request URL.

    Raises:
        ConstructionError: If *base_url* is malformed.
    """
    url = details_endpoint(base_url)
    if search_term:
        url += "?" + urlencode({"search": search_term})
    return url


def build_advanced_url(base_url: str, params: Mapping[str, str]) -> str:
    """Build a details URL carrying arbitrary query parameters.

    Every entry of *params* becomes one query parameter, in the mapping's
    iteration order. Keys and values are forwarded verbatim; no parameter
    names are validated.

    Args:
        base_url: Directory service root.
        params: Query parameters, e.g. ``{"type": "relay", "running": "true"}``.

    Returns:
        The full request URL.

    Raises:
        ConstructionError: If *base_url* is malformed.
    """
    url = details_endpoint(base_url)
    if params:
        url += "?" + urlencode(list(params.items()))
    return url
