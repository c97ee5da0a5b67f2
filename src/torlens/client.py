"""Query facade over the Onionoo ``details`` resource.

[TorLens][torlens.client.TorLens] wraps the fetch facade in
[torlens.api][torlens.api] with named accessors. Each accessor performs
exactly one request and then one in-memory filter, find or sort over the
returned relays or bridges. The fetched document is never modified.

Accessors use one of two fetch modes:

* **search-by-term** when the service's ``search`` parameter already
  narrows the result (fingerprint, nickname, address, country, AS number);
* **fetch-all** when the filter can only be applied client-side.

Examples:
    ```python
    import asyncio
    from torlens import TorLens

    async def main() -> None:
        lens = TorLens()
        relay = await lens.get_relay_by_fingerprint("9695DFC35FFEB861329B9F1AB04C46397020CE31")
        exits = await lens.get_relays_by_flags(["Exit", "Fast"])
        top = await lens.get_top_relays_by_weight(5)

    asyncio.run(main())
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from torlens import filters
from torlens.api import DEFAULT_API_URL, fetch_advanced_details, fetch_details
from torlens.core.exceptions import ConfigurationError
from torlens.core.yaml import load_yaml


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from torlens.models.bridge import BridgeRecord
    from torlens.models.document import ResultDocument
    from torlens.models.relay import RelayRecord


class TorLensConfig(BaseModel):
    """Client configuration.

    Attributes:
        base_url: Root of the directory service used for every request made
            by the client. An empty value falls back to the public instance.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = Field(default=DEFAULT_API_URL, description="Directory service root URL")

    @field_validator("base_url", mode="before")
    @classmethod
    def _default_when_empty(cls, v: Any) -> Any:
        return v or DEFAULT_API_URL


class TorLens:
    """Client for querying relay and bridge details.

    The client holds nothing but its configuration, so one instance can be
    shared freely between tasks.

    Args:
        config: Client configuration; defaults to the public instance.

    Note:
        A malformed ``base_url`` is accepted at construction time and
        reported as
        [ConstructionError][torlens.core.exceptions.ConstructionError] by
        the first call, before any network access.
    """

    def __init__(self, config: TorLensConfig | None = None) -> None:
        self._config = config or TorLensConfig()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    @property
    def config(self) -> TorLensConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    # -------------------------------------------------------------------------
    # Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Create a client from a configuration mapping.

        Raises:
            ConfigurationError: If the mapping contains unknown keys or
                invalid values.
        """
        try:
            config = TorLensConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid TorLens configuration: {e}") from e
        return cls(config=config)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Self:
        """Create a client from a YAML file such as ``base_url: https://...``.

        See Also:
            [load_yaml()][torlens.core.yaml.load_yaml]: Safe YAML loader.
        """
        return cls.from_dict(load_yaml(config_path))

    # -------------------------------------------------------------------------
    # Generic Search
    # -------------------------------------------------------------------------

    async def search(self, search_term: str | None = None) -> ResultDocument:
        """Fetch the details document for a search term.

        Args:
            search_term: Nickname, fingerprint, IP address or other term. When
                omitted every relay and bridge is returned.
        """
        return await fetch_details(self.base_url, search_term)

    async def advanced_search(self, params: Mapping[str, str]) -> ResultDocument:
        """Fetch the details document with arbitrary query parameters.

        Args:
            params: Parameters forwarded verbatim, e.g.
                ``{"type": "relay", "flag": "Exit", "limit": "20"}``.
        """
        return await fetch_advanced_details(self.base_url, params)

    # -------------------------------------------------------------------------
    # Relay Lookups (search-by-term)
    # -------------------------------------------------------------------------

    async def get_relay_by_fingerprint(self, fingerprint: str) -> RelayRecord | None:
        """Return the relay with exactly this fingerprint, or ``None`` if there is none."""
        details = await self.search(fingerprint)
        return filters.find_by_fingerprint(details.relays, fingerprint)

    async def get_relays_by_nickname(self, nickname: str) -> list[RelayRecord]:
        """Return relays whose nickname contains *nickname*, ignoring case."""
        details = await self.search(nickname)
        return [r for r in details.relays if filters.contains_ci(r.nickname, nickname)]

    async def get_relays_by_or_address(self, or_address: str) -> list[RelayRecord]:
        """Return relays with an OR address (``ip:port``) containing *or_address*."""
        details = await self.search(or_address)
        return [r for r in details.relays if filters.any_contains(r.or_addresses, or_address)]

    async def get_relays_by_exit_address(self, exit_address: str) -> list[RelayRecord]:
        """Return relays with an exit address containing *exit_address*."""
        details = await self.search(exit_address)
        return [r for r in details.relays if filters.any_contains(r.exit_addresses, exit_address)]

    async def get_relays_by_country(self, country_code: str) -> list[RelayRecord]:
        """Return relays located in the given two-letter country code."""
        details = await self.search(country_code)
        code = country_code.lower()
        return [r for r in details.relays if r.country == code]

    async def get_relays_by_as(self, as_number: str) -> list[RelayRecord]:
        """Return relays in an autonomous system, given with or without the ``AS`` prefix."""
        formatted = filters.normalize_as_number(as_number)
        details = await self.search(formatted)
        return [r for r in details.relays if r.as_number == formatted]

    # -------------------------------------------------------------------------
    # Relay Filters (fetch-all)
    # -------------------------------------------------------------------------

    async def get_relays_by_hostname(self, hostname: str) -> list[RelayRecord]:
        """Return relays with a verified or unverified host name containing *hostname*."""
        details = await self.search()
        return [
            r
            for r in details.relays
            if filters.any_contains_ci(r.unverified_host_names, hostname)
            or filters.any_contains_ci(r.verified_host_names, hostname)
        ]

    async def get_relays_by_verified_hostname(self, hostname: str) -> list[RelayRecord]:
        """Return relays with a DNS-verified host name containing *hostname*, ignoring case."""
        details = await self.search()
        return [r for r in details.relays if filters.any_contains_ci(r.verified_host_names, hostname)]

    async def get_relays_by_unverified_hostname(self, hostname: str) -> list[RelayRecord]:
        """Return relays with an unverified host name containing *hostname*, ignoring case."""
        details = await self.search()
        return [
            r for r in details.relays if filters.any_contains_ci(r.unverified_host_names, hostname)
        ]

    async def get_relays_by_as_name(self, as_name: str) -> list[RelayRecord]:
        """Return relays whose AS name contains *as_name*, ignoring case."""
        details = await self.search()
        return [r for r in details.relays if filters.contains_ci(r.as_name, as_name)]

    async def get_relays_by_flags(self, flags: Iterable[str]) -> list[RelayRecord]:
        """Return relays carrying every one of *flags* (logical AND)."""
        wanted = filters.normalize_flags(flags)
        details = await self.search()
        return [r for r in details.relays if filters.has_all_flags(r, wanted)]

    async def get_relays_by_platform(self, platform: str) -> list[RelayRecord]:
        """Return relays whose platform string (e.g. ``Tor 0.4.8.16 on Linux``) contains *platform*."""
        details = await self.search()
        return [r for r in details.relays if filters.contains_ci(r.platform, platform)]

    async def get_relays_by_version(self, version: str) -> list[RelayRecord]:
        """Return relays running exactly Tor *version* (e.g. ``0.4.8.16``)."""
        details = await self.search()
        return [r for r in details.relays if r.version == version]

    async def get_relays_by_version_status(self, status: str) -> list[RelayRecord]:
        """Return relays with the given version status (e.g. ``recommended``), ignoring case."""
        details = await self.search()
        wanted = status.lower()
        return [
            r
            for r in details.relays
            if r.version_status is not None and r.version_status.lower() == wanted
        ]

    async def get_relays_by_min_bandwidth(self, min_bandwidth: int) -> list[RelayRecord]:
        """Return relays whose bandwidth rate (bytes/s, missing counts as 0) is at least *min_bandwidth*."""
        details = await self.search()
        return [r for r in details.relays if (r.bandwidth_rate or 0) >= min_bandwidth]

    async def get_relays_by_contact(self, contact: str) -> list[RelayRecord]:
        """Return relays whose operator contact line contains *contact*, ignoring case."""
        details = await self.search()
        return [r for r in details.relays if filters.contains_ci(r.contact, contact)]

    async def get_relays_by_port(self, port: int) -> list[RelayRecord]:
        """Return relays whose exit policy summary accepts *port*."""
        details = await self.search()
        return [r for r in details.relays if filters.accepts_port(r, port)]

    async def get_top_relays_by_weight(self, limit: int = 10) -> list[RelayRecord]:
        """Return the *limit* relays with the highest consensus weight, heaviest first."""
        details = await self.search()
        return filters.top_by_weight(details.relays, limit)

    async def get_relays_by_min_run_time(self, min_days: float) -> list[RelayRecord]:
        """Return relays first seen at least *min_days* days ago."""
        details = await self.search()
        cutoff = filters.runtime_cutoff(min_days)
        return [r for r in details.relays if filters.first_seen_before(r, cutoff)]

    # -------------------------------------------------------------------------
    # Bridges
    # -------------------------------------------------------------------------

    async def get_all_bridges(self) -> list[BridgeRecord]:
        """Return every bridge in upstream order."""
        details = await self.search()
        return list(details.bridges)

    async def get_bridge_by_fingerprint(self, fingerprint: str) -> BridgeRecord | None:
        """Return the bridge with exactly this (hashed) fingerprint, or ``None``."""
        details = await self.search(fingerprint)
        return filters.find_by_fingerprint(details.bridges, fingerprint)

    async def get_bridges_by_transport(self, transport: str) -> list[BridgeRecord]:
        """Return bridges offering the pluggable transport *transport* (e.g. ``obfs4``)."""
        details = await self.search()
        return [b for b in details.bridges if b.transports and transport in b.transports]
