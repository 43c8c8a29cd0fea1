"""Aggregate booked time spans into per-month feature/bug totals."""

from __future__ import annotations

import calendar
from collections.abc import Iterable

from .dto import MonthlyRecord, TimeSpan

TICKET_TYPE_BUG = "bug"
TICKET_TYPE_FEATURE = "feat"


def month_name(month: int) -> str:
    """Return the English month name for a 1-based month number."""

    return calendar.month_name[month]


def aggregate_monthly(spans: Iterable[TimeSpan]) -> tuple[MonthlyRecord, ...]:
    """Sum span durations per calendar month of the span start.

    Only `bug` and `feat` spans add time; spans on other ticket types still
    open a row for their month so the chart shows the month as empty.

    Args:
        spans: Time spans in any order.

    Returns:
        MonthlyRecord entries in chronological order.
    """

    buckets: dict[tuple[int, int], list[float]] = {}
    for span in spans:
        key = (span.start.year, span.start.month)
        bucket = buckets.setdefault(key, [0.0, 0.0])
        seconds = max((span.end - span.start).total_seconds(), 0.0)
        if span.ticket_type == TICKET_TYPE_FEATURE:
            bucket[0] += seconds
        elif span.ticket_type == TICKET_TYPE_BUG:
            bucket[1] += seconds

    return tuple(
        MonthlyRecord(
            month=month_name(month),
            feature_seconds=feature,
            bug_seconds=bug,
            year=year,
        )
        for (year, month), (feature, bug) in sorted(buckets.items())
    )
