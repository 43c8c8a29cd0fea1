"""Unit tests for reshaping monthly reports into chart series."""

from __future__ import annotations

import pytest

from analysis.dto import ChartSeries, MonthlyRecord
from analysis.report_transform import ReportTransformer, bug_percent, transform_report

pytestmark = pytest.mark.unit


def test_annotated_label_and_hours() -> None:
    """One hour of features and half an hour of bugs is 33% bugs."""

    series = transform_report(
        [MonthlyRecord(month="Jan", feature_seconds=3600, bug_seconds=1800)],
        annotate_bug_percent=True,
    )

    assert series.labels == ("Jan (33%)",)
    assert series.series == ((1.0,), (0.5,))


def test_plain_label_without_annotation() -> None:
    """Labels are the bare month name when annotation is off."""

    series = transform_report([MonthlyRecord(month="Jan", feature_seconds=3600, bug_seconds=1800)])

    assert series.labels == ("Jan",)


def test_lengths_match_and_hours_are_unrounded() -> None:
    """Every output sequence matches the input length; hours keep full precision."""

    records = [
        MonthlyRecord(month="March", feature_seconds=1000, bug_seconds=7),
        MonthlyRecord(month="January", feature_seconds=12345.5, bug_seconds=0),
        MonthlyRecord(month="February", feature_seconds=0, bug_seconds=90000),
    ]

    series = ReportTransformer().transform(records, True)

    assert len(series.labels) == len(series.feature_hours) == len(series.bug_hours) == 3
    for record, feature, bug in zip(records, series.feature_hours, series.bug_hours):
        assert feature == pytest.approx(record.feature_seconds / 3600)
        assert bug == pytest.approx(record.bug_seconds / 3600)
    assert [label.split(" ")[0] for label in series.labels] == ["March", "January", "February"]


def test_empty_report() -> None:
    """No records produce empty labels and two empty series."""

    series = transform_report([], annotate_bug_percent=True)

    assert series == ChartSeries()
    assert series.as_json() == {"labels": [], "series": [[], []]}


def test_zero_duration_month_reports_zero_percent() -> None:
    """A month with no feature or bug time is labelled 0% instead of failing."""

    series = transform_report(
        [MonthlyRecord(month="May", feature_seconds=0, bug_seconds=0)],
        annotate_bug_percent=True,
    )

    assert series.labels == ("May (0%)",)
    assert series.series == ((0.0,), (0.0,))


def test_transform_is_idempotent() -> None:
    """Transforming the same report twice gives equal results."""

    records = (
        MonthlyRecord(month="June", feature_seconds=7200, bug_seconds=3600),
        MonthlyRecord(month="July", feature_seconds=100, bug_seconds=300),
    )
    transformer = ReportTransformer(annotate_bug_percent=True)

    assert transformer.transform(records) == transformer.transform(records)


def test_transformer_default_annotation_can_be_overridden() -> None:
    """An explicit argument wins over the transformer default."""

    records = [MonthlyRecord(month="Aug", feature_seconds=1, bug_seconds=1)]
    transformer = ReportTransformer(annotate_bug_percent=True)

    assert transformer.transform(records).labels == ("Aug (50%)",)
    assert transformer.transform(records, False).labels == ("Aug",)


@pytest.mark.parametrize(
    ("feature", "bug", "expected"),
    [
        (7, 1, 13),
        (1, 0, 0),
        (0, 5, 100),
        (2, 1, 33),
        (1, 2, 67),
    ],
)
def test_bug_percent_rounds_half_up(feature: float, bug: float, expected: int) -> None:
    """Bug percentages round to the nearest integer, halves upward."""

    assert bug_percent(feature, bug) == expected
