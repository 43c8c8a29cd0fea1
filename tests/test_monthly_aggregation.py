"""Unit tests for aggregating time spans into monthly records."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from analysis.dto import MonthlyRecord, TimeSpan
from analysis.monthly import aggregate_monthly

pytestmark = pytest.mark.unit


def _span(year: int, month: int, day: int, *, hours: float, ticket_type: str) -> TimeSpan:
    start = datetime(year, month, day, 9, 0, tzinfo=UTC)
    return TimeSpan(start=start, end=start + timedelta(hours=hours), ticket_type=ticket_type)


def test_groups_by_month_in_chronological_order() -> None:
    """Spans are bucketed by start month; output is sorted even across years."""

    spans = [
        _span(2024, 1, 5, hours=1, ticket_type="bug"),
        _span(2023, 12, 20, hours=2, ticket_type="feat"),
        _span(2024, 1, 6, hours=3, ticket_type="feat"),
        _span(2023, 12, 1, hours=0.5, ticket_type="bug"),
    ]

    records = aggregate_monthly(spans)

    assert records == (
        MonthlyRecord(month="December", feature_seconds=7200.0, bug_seconds=1800.0, year=2023),
        MonthlyRecord(month="January", feature_seconds=10800.0, bug_seconds=3600.0, year=2024),
    )


def test_other_ticket_types_open_empty_month() -> None:
    """Time on non-feature, non-bug tickets shows as an empty month."""

    records = aggregate_monthly([_span(2024, 3, 2, hours=4, ticket_type="bau")])

    assert records == (MonthlyRecord(month="March", feature_seconds=0.0, bug_seconds=0.0, year=2024),)


def test_reversed_span_counts_as_zero() -> None:
    """An end before its start does not subtract time."""

    start = datetime(2024, 4, 1, 12, 0, tzinfo=UTC)
    spans = [
        TimeSpan(start=start, end=start - timedelta(hours=1), ticket_type="feat"),
        _span(2024, 4, 2, hours=1, ticket_type="feat"),
    ]

    (record,) = aggregate_monthly(spans)

    assert record.feature_seconds == 3600.0


def test_no_spans_yields_no_records() -> None:
    """An empty input produces an empty report."""

    assert aggregate_monthly([]) == ()
