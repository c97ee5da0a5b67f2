"""HTTP transport for TorLens.

Performs a single JSON GET per call and maps every transport or HTTP
failure to [FetchError][torlens.core.exceptions.FetchError].

Note:
    Each call opens and closes its own ``aiohttp.ClientSession``: no
    connection, cookie or response state is shared between calls. There are
    no retries and no timeout override, so aiohttp's default client timeout
    applies. Redirects follow aiohttp's defaults.

See Also:
    [fetch_details][torlens.api.fetch_details]: Fetch facade built on
        [fetch_json][torlens.utils.http.fetch_json].
"""

from __future__ import annotations

import json
import logging
from typing import Any

import aiohttp

from torlens.core.exceptions import FetchError


logger = logging.getLogger("torlens.utils.http")


def _is_success(status: int) -> bool:
    return 200 <= status < 300  # noqa: PLR2004


async def fetch_json(url: str) -> Any:
    """Fetch *url* with one GET request and decode the body as JSON.

    Args:
        url: Fully built request URL.

    Returns:
        The decoded JSON value. No schema validation is applied.

    Raises:
        FetchError: On a non-2xx response (``status`` set to the HTTP code)
            or on a network-level failure such as DNS resolution, connection
            reset or timeout (``status`` is ``None``).
        json.JSONDecodeError: If the body is not valid UTF-8 JSON.
    """
    try:
        async with aiohttp.ClientSession() as session, session.get(url) as resp:
            if not _is_success(resp.status):
                reason = resp.reason or "HTTP error"
                logger.debug("fetch_failed url=%s status=%s", url, resp.status)
                raise FetchError(
                    f"Failed to fetch from API: {reason} (Status: {resp.status})",
                    status=resp.status,
                )
            body = await resp.read()
    except (aiohttp.ClientError, OSError, TimeoutError) as e:
        logger.debug("fetch_failed url=%s error=%s", url, type(e).__name__)
        message = str(e) or type(e).__name__
        raise FetchError(
            f"Failed to fetch from API: {message} (Status: unknown)", status=None
        ) from e

    try:
        data = json.loads(body)
    except UnicodeDecodeError as e:
        raise json.JSONDecodeError(
            f"Body is not valid UTF-8 ({e.reason})", body.decode("utf-8", "replace"), e.start
        ) from e
    logger.debug("fetch_succeeded url=%s bytes=%d", url, len(body))
    return data
