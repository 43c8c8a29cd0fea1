"""DTO types shared by the report pipeline.

DTOs are plain data containers used to move time reports between the database
layer, the HTTP layer and the chart renderer. They intentionally avoid any
Django/ORM dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class MonthlyRecord:
    """Engineering time booked in a single calendar month.

    Attributes:
        month: Display label for the month (e.g. "January").
        feature_seconds: Seconds spent on feature tickets (>= 0).
        bug_seconds: Seconds spent on bug tickets (>= 0).
        year: Calendar year, when the source supplies one.
    """

    month: str
    feature_seconds: float
    bug_seconds: float
    year: int | None = None


MonthlyReport = tuple[MonthlyRecord, ...]


@dataclass(frozen=True, slots=True)
class ChartSeries:
    """Chart-ready labels plus the feature/bug hour series.

    Attributes:
        labels: One display label per month, in report order.
        series: `(feature_hours, bug_hours)`, each aligned to `labels`.
    """

    labels: tuple[str, ...] = ()
    series: tuple[tuple[float, ...], tuple[float, ...]] = ((), ())

    @property
    def feature_hours(self) -> tuple[float, ...]:
        return self.series[0]

    @property
    def bug_hours(self) -> tuple[float, ...]:
        return self.series[1]

    def as_json(self) -> dict[str, object]:
        """Return the `{labels, series}` shape consumed by bar chart renderers."""

        return {
            "labels": list(self.labels),
            "series": [list(self.series[0]), list(self.series[1])],
        }


@dataclass(frozen=True, slots=True)
class TimeSpan:
    """A single booked time interval with the type of ticket it was booked on.

    Attributes:
        start: Interval start (already converted to the reporting time zone).
        end: Interval end.
        ticket_type: Ticket type code (e.g. "bug", "feat").
    """

    start: datetime
    end: datetime
    ticket_type: str
