"""
Relay record model.

A [RelayRecord][torlens.models.relay.RelayRecord] is a snapshot of one
publicly listed relay as returned by the Onionoo ``details`` document. Any
field may be absent in the source document and is then ``None`` (or an
empty list for ``or_addresses`` and ``flags``).

Timestamps (``first_seen``, ``last_seen``, ...) are kept as the strings the
service sent, in the service's ``YYYY-MM-DD hh:mm:ss`` UTC format.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, StrictInt

from .base import BaseData, BaseRecord
from .parsing import FieldSpec


class ExitPolicySummary(BaseData):
    """Compact exit policy: either accepted or rejected ports.

    Each entry is a single port (``"443"``) or an inclusive range
    (``"80-90"``). The service sends one of the two lists, never both.
    """

    accept: list[str] | None = None
    reject: list[str] | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        str_list_fields=frozenset({"accept", "reject"}),
    )


class RelayRecord(BaseRecord):
    """A relay entry from the ``relays`` array of a details document.

    The autonomous-system number is sent as ``as``, a Python keyword, so
    the attribute is named ``as_number`` and aliased to the wire name.
    """

    exit_addresses: list[str] | None = None
    dir_address: str | None = None
    last_changed_address_or_port: str | None = None
    hibernating: bool | None = None

    country: str | None = None
    country_name: str | None = None
    region_name: str | None = None
    city_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    as_number: str | None = Field(default=None, alias="as")
    as_name: str | None = None

    verified_host_names: list[str] | None = None
    unverified_host_names: list[str] | None = None

    consensus_weight: StrictInt | None = None
    consensus_weight_fraction: float | None = None
    guard_probability: float | None = None
    middle_probability: float | None = None
    exit_probability: float | None = None
    bandwidth_rate: StrictInt | None = None
    bandwidth_burst: StrictInt | None = None
    observed_bandwidth: StrictInt | None = None
    measured: bool | None = None

    exit_policy: list[str] | None = None
    exit_policy_summary: ExitPolicySummary | None = None
    exit_policy_v6_summary: ExitPolicySummary | None = None

    contact: str | None = None
    effective_family: list[str] | None = None
    alleged_family: list[str] | None = None
    indirect_family: list[str] | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = BaseRecord._FIELD_SPEC.extend(
        int_fields={
            "consensus_weight",
            "bandwidth_rate",
            "bandwidth_burst",
            "observed_bandwidth",
        },
        bool_fields={"hibernating", "measured"},
        str_fields={
            "dir_address",
            "last_changed_address_or_port",
            "country",
            "country_name",
            "region_name",
            "city_name",
            "as",
            "as_name",
            "contact",
        },
        str_list_fields={
            "exit_addresses",
            "verified_host_names",
            "unverified_host_names",
            "exit_policy",
            "effective_family",
            "alleged_family",
            "indirect_family",
        },
        float_fields={
            "latitude",
            "longitude",
            "consensus_weight_fraction",
            "guard_probability",
            "middle_probability",
            "exit_probability",
        },
    )

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Parse a relay entry, including its nested exit policy summaries.

        Args:
            data: Raw dictionary for one element of ``relays``.

        Returns:
            Validated constructor arguments; an empty dict when *data* is
            not an object.
        """
        result = super().parse(data)
        if not isinstance(data, dict):
            return result
        for key in ("exit_policy_summary", "exit_policy_v6_summary"):
            summary = ExitPolicySummary.parse(data.get(key))
            if summary:
                result[key] = summary
        return result
