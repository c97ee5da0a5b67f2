"""Bridge record model.

Bridges are unlisted entry nodes. Onionoo publishes them with hashed
fingerprints and sanitized addresses, and without geolocation, AS or
consensus-weight fields.
"""

from __future__ import annotations

from typing import ClassVar

from .base import BaseRecord
from .parsing import FieldSpec


class BridgeRecord(BaseRecord):
    """A bridge entry from the ``bridges`` array of a details document."""

    transports: list[str] | None = None
    bridgedb_distributor: str | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = BaseRecord._FIELD_SPEC.extend(
        str_fields={"bridgedb_distributor"},
        str_list_fields={"transports"},
    )
