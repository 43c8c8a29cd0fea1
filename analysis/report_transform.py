"""Reshape monthly time reports into bar chart series.

The transform is a pure per-record map: no filtering, sorting or aggregation
happens here. Report order is preserved exactly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from .dto import ChartSeries, MonthlyRecord

SECONDS_PER_HOUR = 3600


def seconds_to_hours(seconds: float) -> float:
    """Convert seconds to hours without rounding."""

    return seconds / SECONDS_PER_HOUR


def bug_percent(feature_seconds: float, bug_seconds: float) -> int:
    """Return the bug share of total time as a whole percentage.

    Halves round up (12.5 -> 13). A month with no booked time reports 0%.

    Args:
        feature_seconds: Seconds spent on feature work.
        bug_seconds: Seconds spent on bug work.

    Returns:
        Integer percentage in the range 0..100.
    """

    total = feature_seconds + bug_seconds
    if total <= 0:
        return 0
    return math.floor(100 * bug_seconds / total + 0.5)


def month_label(record: MonthlyRecord, *, annotate_bug_percent: bool) -> str:
    """Build the display label for a record, optionally with a `(N%)` suffix."""

    if not annotate_bug_percent:
        return record.month
    return f"{record.month} ({bug_percent(record.feature_seconds, record.bug_seconds)}%)"


class ReportTransformer:
    """Convert a decoded monthly report into feature/bug hour series.

    Args:
        annotate_bug_percent: Default for `transform` when the caller does not
            pass an explicit value.
    """

    def __init__(self, *, annotate_bug_percent: bool = False) -> None:
        self.annotate_bug_percent = annotate_bug_percent

    def transform(
        self,
        report: Iterable[MonthlyRecord],
        annotate_bug_percent: bool | None = None,
    ) -> ChartSeries:
        """Map every record to a label plus feature and bug hours.

        Args:
            report: Monthly records in source order.
            annotate_bug_percent: Append the bug percentage to each label. When
                None, the transformer's default applies.

        Returns:
            ChartSeries whose labels and both series match the input length.
        """

        annotate = self.annotate_bug_percent if annotate_bug_percent is None else annotate_bug_percent
        labels: list[str] = []
        feature_hours: list[float] = []
        bug_hours: list[float] = []
        for record in report:
            labels.append(month_label(record, annotate_bug_percent=annotate))
            feature_hours.append(seconds_to_hours(record.feature_seconds))
            bug_hours.append(seconds_to_hours(record.bug_seconds))
        return ChartSeries(labels=tuple(labels), series=(tuple(feature_hours), tuple(bug_hours)))


def transform_report(report: Iterable[MonthlyRecord], *, annotate_bug_percent: bool = False) -> ChartSeries:
    """Module-level shortcut for `ReportTransformer().transform`."""

    return ReportTransformer().transform(report, annotate_bug_percent)
