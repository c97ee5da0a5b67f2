"""
Declarative field parsing for directory records.

Centralizes the type-coercion logic shared by every model in
[torlens.models][torlens.models]. Each model declares a
[FieldSpec][torlens.models.parsing.FieldSpec] describing which wire fields
should be parsed as which types;
[parse_fields][torlens.models.parsing.parse_fields] then applies the spec
to raw dictionaries decoded from the service, dropping invalid values.

Supported field types: ``int``, ``bool``, ``str``, ``float``, ``list[str]``.

Note:
    No exceptions are raised for invalid data. Values that fail type checks
    are excluded from the result dictionary, so a field the service sent
    with the wrong type ends up absent (``None``) on the model.

See Also:
    [torlens.models.base.BaseData][torlens.models.base.BaseData]: Base class
        that uses ``FieldSpec`` and ``parse_fields`` for declarative parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


_SKIP: Any = object()


def _parse_int(value: Any) -> Any:
    return value if isinstance(value, int) and not isinstance(value, bool) else _SKIP


def _parse_bool(value: Any) -> Any:
    return value if isinstance(value, bool) else _SKIP


def _parse_str(value: Any) -> Any:
    return value if isinstance(value, str) else _SKIP


def _parse_float(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return _SKIP


def _parse_str_list(value: Any) -> Any:
    if isinstance(value, list):
        return [s for s in value if isinstance(s, str)]
    return _SKIP


_FIELD_PARSERS: tuple[tuple[str, Callable[[Any], Any]], ...] = (
    ("int_fields", _parse_int),
    ("bool_fields", _parse_bool),
    ("str_fields", _parse_str),
    ("str_list_fields", _parse_str_list),
    ("float_fields", _parse_float),
)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Declarative specification of expected field types for parsing.

    Each attribute is a frozenset of wire field names that should be parsed
    as the corresponding Python type. Fields not listed in any set are
    ignored during parsing.

    Attributes:
        int_fields: Fields expected as ``int`` (``bool`` excluded).
        bool_fields: Fields expected as ``bool``.
        str_fields: Fields expected as ``str``.
        str_list_fields: Fields expected as ``list[str]`` (non-string elements
            filtered). Unlike the scalar parsers, an empty list is kept: an
            empty ``flags`` list is a real value, not an absent one.
        float_fields: Fields expected as ``float`` (``int`` accepted and converted).

    Note:
        Python's ``bool`` is a subclass of ``int``, so ``int_fields`` parsing
        explicitly excludes ``bool`` values.
    """

    int_fields: frozenset[str] = field(default_factory=frozenset)
    bool_fields: frozenset[str] = field(default_factory=frozenset)
    str_fields: frozenset[str] = field(default_factory=frozenset)
    str_list_fields: frozenset[str] = field(default_factory=frozenset)
    float_fields: frozenset[str] = field(default_factory=frozenset)

    def extend(self, **extra: Iterable[str]) -> FieldSpec:
        """Return a new spec with the given names added to the matching sets.

        Used by subclasses that add fields on top of a parent model's spec.

        Example:
            ``BaseRecord._FIELD_SPEC.extend(str_list_fields={"transports"})``
        """
        merged = {}
        for f in fields(self):
            merged[f.name] = getattr(self, f.name) | frozenset(extra.pop(f.name, ()))
        if extra:
            raise TypeError(f"unknown FieldSpec attributes: {sorted(extra)}")
        return FieldSpec(**merged)


def parse_fields(data: dict[str, Any], spec: FieldSpec) -> dict[str, Any]:
    """Parse a dictionary according to a ``FieldSpec``, dropping invalid values.

    Args:
        data: Raw dictionary to parse.
        spec: [FieldSpec][torlens.models.parsing.FieldSpec] type specification.

    Returns:
        A new dictionary containing only valid, type-checked fields.
    """
    dispatch: dict[str, Callable[[Any], Any]] = {}
    for attr_name, parser in _FIELD_PARSERS:
        for name in getattr(spec, attr_name):
            dispatch[name] = parser

    result: dict[str, Any] = {}
    for key, value in data.items():
        handler = dispatch.get(key)
        if handler is not None:
            parsed = handler(value)
            if parsed is not _SKIP:
                result[key] = parsed

    return result


__all__ = ["FieldSpec", "parse_fields"]
