"""Pure matching and ranking helpers used by [TorLens][torlens.client.TorLens].

Every function here is side-effect free and works on already parsed
records, so the filtering rules can be tested without a network. Absent
optional fields never match and never raise.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, TypeVar

from torlens.models.base import BaseRecord


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from torlens.models.relay import RelayRecord


RecordT = TypeVar("RecordT", bound=BaseRecord)

SECONDS_PER_DAY = 86_400
EARLIEST_CUTOFF = datetime.min.replace(tzinfo=UTC)


# -----------------------------------------------------------------------------
# Identity
# -----------------------------------------------------------------------------


def find_by_fingerprint(records: Iterable[RecordT], fingerprint: str) -> RecordT | None:
    """Return the first record whose fingerprint equals *fingerprint*, else ``None``."""
    return next((r for r in records if r.fingerprint == fingerprint), None)


# -----------------------------------------------------------------------------
# Text
# -----------------------------------------------------------------------------


def contains_ci(value: str | None, needle: str) -> bool:
    """Case-insensitive substring test; ``None`` never matches."""
    if value is None:
        return False
    return needle.lower() in value.lower()


def any_contains_ci(values: Iterable[str] | None, needle: str) -> bool:
    """True if any element of *values* contains *needle*, ignoring case."""
    if not values:
        return False
    return any(contains_ci(v, needle) for v in values)


def any_contains(values: Iterable[str] | None, needle: str) -> bool:
    """True if any element of *values* contains *needle* (case-sensitive)."""
    if not values:
        return False
    return any(needle in v for v in values)


def normalize_as_number(as_number: str) -> str:
    """Return *as_number* in the ``AS<digits>`` form the service uses.

    ``"7922"`` and ``"AS7922"`` both become ``"AS7922"``; a lower-case
    ``"as"`` prefix is upper-cased rather than doubled.
    """
    value = as_number.strip()
    if value[:2].upper() == "AS":
        return "AS" + value[2:]
    return "AS" + value


# -----------------------------------------------------------------------------
# Flags
# -----------------------------------------------------------------------------


def normalize_flags(flags: Iterable[str]) -> frozenset[str]:
    return frozenset(flag.upper() for flag in flags)


def has_all_flags(record: BaseRecord, wanted: frozenset[str]) -> bool:
    """True if *record* carries every flag in *wanted* (upper-cased set).

    The record's own flags are upper-cased too, so ``["guard"]`` matches a
    relay flagged ``Guard``.
    """
    return wanted <= normalize_flags(record.flags)


# -----------------------------------------------------------------------------
# Exit policy
# -----------------------------------------------------------------------------


def parse_port_range(token: str) -> tuple[int, int] | None:
    """Parse a ``start-end`` port range token, splitting on the first hyphen.

    Returns:
        The inclusive ``(start, end)`` pair, or ``None`` for tokens without
        a hyphen or with a non-numeric side.
    """
    start, sep, end = token.partition("-")
    if not sep:
        return None
    try:
        return int(start), int(end)
    except ValueError:
        return None


def accepts_port(relay: RelayRecord, port: int) -> bool:
    """True if the relay's accept summary allows *port*.

    A token matches when it equals the port exactly or is a range that
    contains it. Malformed or inverted ranges never match, and relays
    without an accept summary never match.
    """
    summary = relay.exit_policy_summary
    if summary is None or not summary.accept:
        return False

    port_str = str(port)
    for token in summary.accept:
        if token == port_str:
            return True
        bounds = parse_port_range(token)
        if bounds is not None and bounds[0] <= port <= bounds[1]:
            return True
    return False


# -----------------------------------------------------------------------------
# Time
# -----------------------------------------------------------------------------


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a service timestamp (``YYYY-MM-DD hh:mm:ss``) as an aware UTC datetime.

    Naive values are taken as UTC. Missing or unparseable values give ``None``.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def first_seen_before(relay: BaseRecord, cutoff: datetime) -> bool:
    """True if the record was first seen at or before *cutoff*."""
    first_seen = parse_timestamp(relay.first_seen)
    return first_seen is not None and first_seen <= cutoff


def runtime_cutoff(min_days: float, now: datetime | None = None) -> datetime:
    """Return ``now - min_days * 86400 s`` as an aware UTC datetime.

    A *min_days* that puts the cutoff outside the representable date range
    (or is NaN) yields [EARLIEST_CUTOFF][torlens.filters.EARLIEST_CUTOFF],
    which no real timestamp precedes.
    """
    now = now or datetime.now(UTC)
    try:
        return now - timedelta(seconds=min_days * SECONDS_PER_DAY)
    except (OverflowError, ValueError):
        return EARLIEST_CUTOFF


# -----------------------------------------------------------------------------
# Ranking
# -----------------------------------------------------------------------------


def top_by_weight(relays: Sequence[RelayRecord], limit: int = 10) -> list[RelayRecord]:
    """Return the *limit* relays with the highest consensus weight.

    Missing weights count as 0. The input sequence is left untouched; a new
    list is returned. ``limit <= 0`` yields an empty list.
    """
    if limit <= 0:
        return []
    ranked = sorted(relays, key=lambda r: r.consensus_weight or 0, reverse=True)
    return ranked[:limit]
