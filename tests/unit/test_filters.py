"""Unit tests for the pure matching helpers in torlens.filters."""

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from torlens import filters
from torlens.models import ExitPolicySummary, RelayRecord


def make_relay(**fields: Any) -> RelayRecord:
    base: dict[str, Any] = {
        "fingerprint": fields.pop("fingerprint", "F" * 40),
        "or_addresses": ["192.0.2.1:9001"],
    }
    base.update(fields)
    return RelayRecord.model_validate(base)


# =============================================================================
# Identity
# =============================================================================


class TestFindByFingerprint:
    def test_returns_first_match(self) -> None:
        a = make_relay(fingerprint="AAA", nickname="first")
        b = make_relay(fingerprint="AAA", nickname="second")
        assert filters.find_by_fingerprint([a, b], "AAA") is a

    def test_missing_returns_none(self) -> None:
        assert filters.find_by_fingerprint([make_relay(fingerprint="AAA")], "BBB") is None

    def test_match_is_exact(self) -> None:
        assert filters.find_by_fingerprint([make_relay(fingerprint="AAA")], "aaa") is None


# =============================================================================
# Text
# =============================================================================


class TestTextMatching:
    def test_contains_ci(self) -> None:
        assert filters.contains_ci("Tor 0.4.8 on Linux", "linux")
        assert not filters.contains_ci("Tor 0.4.8 on Linux", "windows")

    def test_contains_ci_none_never_matches(self) -> None:
        assert not filters.contains_ci(None, "")

    def test_any_contains_ci(self) -> None:
        assert filters.any_contains_ci(["a.example.NET", "b.org"], "EXAMPLE.net")
        assert not filters.any_contains_ci(None, "x")
        assert not filters.any_contains_ci([], "x")

    def test_any_contains_is_case_sensitive(self) -> None:
        assert filters.any_contains(["[2001:DB8::1]:443"], "2001:DB8")
        assert not filters.any_contains(["[2001:DB8::1]:443"], "2001:db8")

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("7922", "AS7922"), ("AS7922", "AS7922"), ("as7922", "AS7922"), (" 3 ", "AS3")],
    )
    def test_normalize_as_number(self, raw: str, expected: str) -> None:
        assert filters.normalize_as_number(raw) == expected


# =============================================================================
# Flags
# =============================================================================


class TestFlags:
    @pytest.fixture
    def relay(self) -> RelayRecord:
        return make_relay(flags=["Guard", "Fast"])

    @pytest.mark.parametrize("wanted", [["Guard"], ["Guard", "Fast"], ["guard"], []])
    def test_subset_matches(self, relay: RelayRecord, wanted: list[str]) -> None:
        assert filters.has_all_flags(relay, filters.normalize_flags(wanted))

    def test_conjunction_required(self, relay: RelayRecord) -> None:
        assert not filters.has_all_flags(relay, filters.normalize_flags(["Guard", "Exit"]))

    def test_normalize_flags_upper_cases(self) -> None:
        assert filters.normalize_flags(["exit", "Fast"]) == frozenset({"EXIT", "FAST"})


# =============================================================================
# Exit policy
# =============================================================================


class TestParsePortRange:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("80-90", (80, 90)),
            ("1-65535", (1, 65535)),
            ("443", None),
            ("abc-90", None),
            ("80-", None),
            ("-90", None),
            ("80-90-100", None),
        ],
    )
    def test_parse(self, token: str, expected: tuple[int, int] | None) -> None:
        assert filters.parse_port_range(token) == expected


class TestAcceptsPort:
    @pytest.fixture
    def relay(self) -> RelayRecord:
        return make_relay(exit_policy_summary=ExitPolicySummary(accept=["80-90", "443"]))

    @pytest.mark.parametrize("port", [80, 85, 90, 443])
    def test_accepted(self, relay: RelayRecord, port: int) -> None:
        assert filters.accepts_port(relay, port)

    @pytest.mark.parametrize("port", [79, 91, 442, 444])
    def test_not_accepted(self, relay: RelayRecord, port: int) -> None:
        assert not filters.accepts_port(relay, port)

    def test_no_summary_never_matches(self) -> None:
        assert not filters.accepts_port(make_relay(), 80)

    def test_reject_only_summary_never_matches(self) -> None:
        relay = make_relay(exit_policy_summary=ExitPolicySummary(reject=["1-65535"]))
        assert not filters.accepts_port(relay, 80)

    def test_malformed_range_never_matches(self) -> None:
        relay = make_relay(exit_policy_summary=ExitPolicySummary(accept=["abc-90", "x"]))
        assert not filters.accepts_port(relay, 85)

    def test_inverted_range_never_matches(self) -> None:
        relay = make_relay(exit_policy_summary=ExitPolicySummary(accept=["90-80"]))
        assert not filters.accepts_port(relay, 85)


# =============================================================================
# Time
# =============================================================================


class TestTimestamps:
    def test_parse_service_format_as_utc(self) -> None:
        parsed = filters.parse_timestamp("2024-05-01 12:00:00")
        assert parsed == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def test_parse_keeps_explicit_offset(self) -> None:
        parsed = filters.parse_timestamp("2024-05-01T12:00:00+02:00")
        assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "yesterday"])
    def test_parse_invalid(self, value: str | None) -> None:
        assert filters.parse_timestamp(value) is None

    def test_runtime_cutoff(self) -> None:
        now = datetime(2024, 5, 10, tzinfo=UTC)
        assert filters.runtime_cutoff(7, now) == datetime(2024, 5, 3, tzinfo=UTC)
        assert filters.runtime_cutoff(0.5, now) == now - timedelta(hours=12)

    @pytest.mark.parametrize("min_days", [1_000_000, 1e300, -1e300, float("inf"), float("nan")])
    def test_runtime_cutoff_out_of_range_clamps(self, min_days: float) -> None:
        now = datetime(2024, 5, 10, tzinfo=UTC)
        assert filters.runtime_cutoff(min_days, now) == filters.EARLIEST_CUTOFF

    def test_nothing_seen_before_earliest_cutoff(self) -> None:
        relay = make_relay(first_seen="2010-01-01 00:00:00")
        assert not filters.first_seen_before(relay, filters.EARLIEST_CUTOFF)

    def test_first_seen_before_is_inclusive(self) -> None:
        cutoff = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert filters.first_seen_before(make_relay(first_seen="2024-05-01 12:00:00"), cutoff)
        assert not filters.first_seen_before(make_relay(first_seen="2024-05-01 12:00:01"), cutoff)

    def test_first_seen_missing_is_excluded(self) -> None:
        assert not filters.first_seen_before(make_relay(), datetime.now(UTC))


# =============================================================================
# Ranking
# =============================================================================


class TestTopByWeight:
    @pytest.fixture
    def relays(self) -> list[RelayRecord]:
        return [
            make_relay(fingerprint="W5", consensus_weight=5),
            make_relay(fingerprint="W30", consensus_weight=30),
            make_relay(fingerprint="W10", consensus_weight=10),
        ]

    def test_descending_and_limited(self, relays: list[RelayRecord]) -> None:
        top = filters.top_by_weight(relays, 2)
        assert [r.consensus_weight for r in top] == [30, 10]

    def test_input_not_reordered(self, relays: list[RelayRecord]) -> None:
        filters.top_by_weight(relays, 3)
        assert [r.fingerprint for r in relays] == ["W5", "W30", "W10"]

    def test_missing_weight_counts_as_zero(self, relays: list[RelayRecord]) -> None:
        relays.insert(0, make_relay(fingerprint="NONE"))
        top = filters.top_by_weight(relays, 10)
        assert top[-1].fingerprint == "NONE"

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, relays: list[RelayRecord], limit: int) -> None:
        assert filters.top_by_weight(relays, limit) == []

    def test_limit_larger_than_input(self, relays: list[RelayRecord]) -> None:
        assert len(filters.top_by_weight(relays, 100)) == 3
