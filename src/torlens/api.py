"""Fetch facade for the Onionoo ``details`` resource.

Composes the URL builders in [torlens.utils.url][torlens.utils.url] with
[fetch_json][torlens.utils.http.fetch_json] and parses the payload into a
[ResultDocument][torlens.models.document.ResultDocument]. One call is one
round trip: nothing is cached and concurrent identical calls are not
merged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from torlens.core.logger import Logger
from torlens.models.document import ResultDocument
from torlens.utils.http import fetch_json
from torlens.utils.url import build_advanced_url, build_details_url


if TYPE_CHECKING:
    from collections.abc import Mapping


DEFAULT_API_URL = "https://onionoo.torproject.org"

logger = Logger("torlens.api")


async def _fetch_document(url: str) -> ResultDocument:
    payload = await fetch_json(url)
    document = ResultDocument.from_json(payload)
    logger.debug(
        "details_fetched",
        url=url,
        relays=len(document.relays),
        bridges=len(document.bridges),
    )
    return document


async def fetch_details(
    base_url: str = DEFAULT_API_URL,
    search_term: str | None = None,
) -> ResultDocument:
    """Fetch the details document, optionally narrowed by a search term.

    Args:
        base_url: Directory service root.
        search_term: Value for the ``search`` parameter; omitted when
            ``None`` or empty, in which case every record is returned.

    Raises:
        ConstructionError: If *base_url* is malformed.
        FetchError: On network failure or a non-2xx response.
        json.JSONDecodeError: If the body is not valid JSON.
    """
    return await _fetch_document(build_details_url(base_url, search_term))


async def fetch_advanced_details(
    base_url: str = DEFAULT_API_URL,
    params: Mapping[str, str] | None = None,
) -> ResultDocument:
    """Fetch the details document with arbitrary query parameters.

    Args:
        base_url: Directory service root.
        params: Query parameters forwarded verbatim, e.g.
            ``{"flag": "Exit", "country": "de"}``.

    Raises:
        ConstructionError: If *base_url* is malformed.
        FetchError: On network failure or a non-2xx response.
        json.JSONDecodeError: If the body is not valid JSON.
    """
    return await _fetch_document(build_advanced_url(base_url, params or {}))
