"""Frozen Pydantic models for Onionoo details documents.

Pure data layer: no I/O. Raw JSON from the service goes through each
model's lenient ``parse()`` before validation, so mistyped or missing
optional fields become ``None`` instead of errors.

See Also:
    [torlens.api][torlens.api]: Fetch facade that produces
        [ResultDocument][torlens.models.document.ResultDocument] instances.
"""

from .base import BaseData, BaseRecord
from .bridge import BridgeRecord
from .document import ResultDocument
from .parsing import FieldSpec, parse_fields
from .relay import ExitPolicySummary, RelayRecord


__all__ = [
    "BaseData",
    "BaseRecord",
    "BridgeRecord",
    "ExitPolicySummary",
    "FieldSpec",
    "RelayRecord",
    "ResultDocument",
    "parse_fields",
]
