"""
Shared base classes for the directory record models.

    [BaseData][torlens.models.base.BaseData]
        Frozen model with declarative field parsing via
        [FieldSpec][torlens.models.parsing.FieldSpec].
    [BaseRecord][torlens.models.base.BaseRecord]
        Fields common to relays and bridges.
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

from .parsing import FieldSpec, parse_fields


class BaseData(BaseModel):
    """Base class for models with declarative field parsing.

    Subclasses declare a ``_FIELD_SPEC`` class variable that maps wire field
    names to their expected types. ``parse()`` uses this spec to coerce raw
    JSON into valid constructor arguments, dropping values that fail type
    checks. Subclasses override ``parse()`` for nested objects.

    Note:
        All ``BaseData`` subclasses use ``frozen=True``: a parsed document is
        never modified afterwards.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec()

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Parse arbitrary data into validated constructor arguments.

        Args:
            data: Raw dictionary decoded from the service.

        Returns:
            A cleaned dictionary containing only valid fields.
        """
        if not isinstance(data, dict):
            return {}
        return parse_fields(data, cls._FIELD_SPEC)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create an instance from a dictionary with strict validation."""
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to wire field names, excluding fields with ``None`` values."""
        return self.model_dump(exclude_none=True, by_alias=True)


class BaseRecord(BaseData):
    """Fields shared by [RelayRecord][torlens.models.relay.RelayRecord] and
    [BridgeRecord][torlens.models.bridge.BridgeRecord].

    Every field is optional. The service always sends ``fingerprint`` and
    ``or_addresses`` for full records, but a ``fields=...`` query trims the
    response to the requested keys, so partial records are kept as sent.
    """

    fingerprint: str | None = None
    or_addresses: list[str] = Field(default_factory=list)
    nickname: str | None = None
    first_seen: str | None = None
    last_seen: str | None = None
    last_restarted: str | None = None
    running: StrictBool = False
    flags: list[str] = Field(default_factory=list)
    advertised_bandwidth: StrictInt | None = None
    platform: str | None = None
    version: str | None = None
    version_status: str | None = None
    recommended_version: StrictBool | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        int_fields=frozenset({"advertised_bandwidth"}),
        bool_fields=frozenset({"running", "recommended_version"}),
        str_fields=frozenset(
            {
                "fingerprint",
                "nickname",
                "first_seen",
                "last_seen",
                "last_restarted",
                "platform",
                "version",
                "version_status",
            }
        ),
        str_list_fields=frozenset({"or_addresses", "flags"}),
    )
