"""
Pytest configuration and shared fixtures for TorLens tests.

Provides:
- A details-document payload with three relays and two bridges
- Mock fixtures for ``aiohttp.ClientSession`` and its responses
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from torlens.models import ResultDocument


# ============================================================================
# Details Document Fixtures
# ============================================================================

FINGERPRINT_MORIA = "9695DFC35FFEB861329B9F1AB04C46397020CE31"
FINGERPRINT_EXIT = "A0F06C2FADF88D3A39AA3072B406F09D7095AC9E"
FINGERPRINT_BARE = "B0A1C2D3E4F5061728394A5B6C7D8E9F0A1B2C3D"
FINGERPRINT_BRIDGE = "1F2E3D4C5B6A79880796A5B4C3D2E1F00F1E2D3C"
FINGERPRINT_BRIDGE_PLAIN = "2A3B4C5D6E7F8091A2B3C4D5E6F708192A3B4C5D"


RAW_DETAILS: dict[str, Any] = {
    "version": "8.0",
    "build_revision": "ab1c2d3",
    "relays_published": "2024-05-01 12:00:00",
    "bridges_published": "2024-05-01 11:52:00",
    "relays": [
        {
            "nickname": "moria1",
            "fingerprint": FINGERPRINT_MORIA,
            "or_addresses": ["128.31.0.39:9201", "[2001:db8::1]:9201"],
            "last_seen": "2024-05-01 12:00:00",
            "first_seen": "2010-01-01 00:00:00",
            "running": True,
            "flags": ["Authority", "Fast", "Guard", "Running", "Stable", "Valid"],
            "country": "us",
            "country_name": "United States of America",
            "as": "AS3",
            "as_name": "Massachusetts Institute of Technology",
            "consensus_weight": 30,
            "verified_host_names": ["moria.csail.mit.edu"],
            "bandwidth_rate": 1_000_000,
            "exit_policy_summary": {"reject": ["1-65535"]},
            "contact": "1024D/EB5A896A28988BF5 arma mit edu",
            "platform": "Tor 0.4.9.0-alpha-dev on Linux",
            "version": "0.4.9.0",
            "version_status": "recommended",
            "recommended_version": True,
        },
        {
            "nickname": "ExitNinja",
            "fingerprint": FINGERPRINT_EXIT,
            "or_addresses": ["185.220.101.4:443"],
            "exit_addresses": ["185.220.101.5"],
            "last_seen": "2024-05-01 12:00:00",
            "first_seen": "2024-04-28 08:00:00",
            "running": True,
            "flags": ["Exit", "Fast", "Running", "Valid"],
            "country": "de",
            "country_name": "Germany",
            "as": "AS7922",
            "as_name": "Comcast Cable Communications, LLC",
            "consensus_weight": 5,
            "unverified_host_names": ["tor-exit.Example.NET"],
            "bandwidth_rate": 250_000,
            "exit_policy_summary": {"accept": ["80-90", "443"]},
            "contact": "abuse@example.net",
            "platform": "Tor 0.4.8.16 on FreeBSD",
            "version": "0.4.8.16",
            "version_status": "Obsolete",
        },
        {
            "nickname": "bare",
            "fingerprint": FINGERPRINT_BARE,
            "or_addresses": ["203.0.113.7:9001"],
            "last_seen": "2024-05-01 12:00:00",
            "first_seen": "not a timestamp",
            "running": False,
            "flags": ["Valid"],
            "consensus_weight": 10,
        },
    ],
    "bridges": [
        {
            "nickname": "Unnamed",
            "hashed_fingerprint": "ignored",
            "fingerprint": FINGERPRINT_BRIDGE,
            "or_addresses": ["10.0.0.1:443"],
            "last_seen": "2024-05-01 11:00:00",
            "first_seen": "2023-01-01 00:00:00",
            "running": True,
            "flags": ["Fast", "Running", "Stable", "Valid"],
            "transports": ["obfs4", "webtunnel"],
            "bridgedb_distributor": "moat",
        },
        {
            "nickname": "plain",
            "fingerprint": FINGERPRINT_BRIDGE_PLAIN,
            "or_addresses": ["10.0.0.2:9001"],
            "last_seen": "2024-05-01 11:00:00",
            "first_seen": "2023-06-01 00:00:00",
            "running": False,
            "flags": ["Valid"],
        },
    ],
}


@pytest.fixture
def raw_details() -> dict[str, Any]:
    """A deep copy of the raw details payload, safe to mutate per test."""
    return copy.deepcopy(RAW_DETAILS)


@pytest.fixture
def details(raw_details: dict[str, Any]) -> ResultDocument:
    """The raw payload parsed into a ResultDocument."""
    return ResultDocument.from_json(raw_details)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# aiohttp Mock Fixtures
# ============================================================================


def make_response(
    body: bytes | str | Any = b"{}",
    status: int = 200,
    reason: str | None = "OK",
) -> MagicMock:
    """Build a mock aiohttp response usable as ``async with session.get(...)``.

    Non-bytes bodies are JSON-encoded; strings are encoded as UTF-8.
    """
    if isinstance(body, str):
        payload = body.encode()
    elif isinstance(body, bytes):
        payload = body
    else:
        payload = json.dumps(body).encode()

    response = MagicMock()
    response.status = status
    response.reason = reason
    response.read = AsyncMock(return_value=payload)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def make_session(response: MagicMock | None = None, error: Exception | None = None) -> MagicMock:
    """Build a mock ``aiohttp.ClientSession`` returning *response* or raising *error*."""
    session = MagicMock()
    if error is not None:
        session.get = MagicMock(side_effect=error)
    else:
        session.get = MagicMock(return_value=response)
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    return session


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    """Factory for mock aiohttp responses."""
    return make_response


@pytest.fixture
def session_factory() -> Callable[..., MagicMock]:
    """Factory for mock aiohttp sessions."""
    return make_session
