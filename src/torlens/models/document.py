"""
Top-level details document model.

A [ResultDocument][torlens.models.document.ResultDocument] is the whole
response of one ``GET /details`` call: protocol metadata plus the ``relays``
and ``bridges`` arrays, kept in the order the service returned them.

Model hierarchy:

```text
ResultDocument
+-- version, build_revision, next_major_version_scheduled
+-- relays_published, relays_skipped, relays_truncated
+-- relays: list[RelayRecord]
|   +-- exit_policy_summary: ExitPolicySummary
|   +-- exit_policy_v6_summary: ExitPolicySummary
+-- bridges_published, bridges_skipped, bridges_truncated
+-- bridges: list[BridgeRecord]
```
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import Field, StrictInt

from .base import BaseData, BaseRecord
from .bridge import BridgeRecord
from .parsing import FieldSpec
from .relay import RelayRecord


logger = logging.getLogger("torlens.models")


class ResultDocument(BaseData):
    """Parsed ``details`` response.

    Entries of ``relays`` or ``bridges`` that are not JSON objects are
    dropped during ``parse()``. Objects are kept in upstream order even when
    a ``fields=...`` query trimmed them to a few keys.
    """

    version: str | None = None
    build_revision: str | None = None
    next_major_version_scheduled: str | None = None
    relays_published: str | None = None
    relays_skipped: StrictInt | None = None
    relays_truncated: StrictInt | None = None
    relays: list[RelayRecord] = Field(default_factory=list)
    bridges_published: str | None = None
    bridges_skipped: StrictInt | None = None
    bridges_truncated: StrictInt | None = None
    bridges: list[BridgeRecord] = Field(default_factory=list)

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        int_fields=frozenset(
            {
                "relays_skipped",
                "relays_truncated",
                "bridges_skipped",
                "bridges_truncated",
            }
        ),
        str_fields=frozenset(
            {
                "version",
                "build_revision",
                "next_major_version_scheduled",
                "relays_published",
                "bridges_published",
            }
        ),
    )

    @staticmethod
    def _parse_records(key: str, record_cls: type[BaseRecord], raw: Any) -> list[dict[str, Any]]:
        if not isinstance(raw, list):
            return []
        kept = [record_cls.parse(e) for e in raw if isinstance(e, dict)]
        if len(kept) != len(raw):
            logger.debug("records_dropped kind=%s dropped=%d", key, len(raw) - len(kept))
        return kept

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Parse a details document with its relay and bridge arrays.

        Args:
            data: JSON value decoded from the response body.

        Returns:
            Validated dictionary suitable for ``model_validate()``. A value
            that is not a JSON object yields an empty dict, i.e. an empty
            document.
        """
        if not isinstance(data, dict):
            return {}
        result = super().parse(data)
        result["relays"] = cls._parse_records("relays", RelayRecord, data.get("relays"))
        result["bridges"] = cls._parse_records("bridges", BridgeRecord, data.get("bridges"))
        return result

    @classmethod
    def from_json(cls, data: Any) -> ResultDocument:
        """Build a document from a decoded JSON value via ``parse()``."""
        return cls.model_validate(cls.parse(data))
