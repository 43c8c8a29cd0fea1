"""Integration tests for the fetch_times management command."""

from __future__ import annotations

import io
from datetime import UTC, datetime

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from core.ingestion_http import IngestionFetchError
from core.jira_ingestion import JiraFetcher
from core.management.commands.fetch_times import fetch_window
from core.tmetric_ingestion import TMetricFetcher, parse_detailed_csv

pytestmark = pytest.mark.integration


@pytest.fixture
def tracker_settings(settings):
    settings.JIRA_URL = "https://jira.example.com"
    settings.TMETRIC_ACCOUNT_ID = "42"
    return settings


def test_non_positive_days_does_nothing(monkeypatch: pytest.MonkeyPatch) -> None:
    """`--days 0` prints a notice and fetches nothing."""

    def fail(*args, **kwargs):  # type: ignore[no-untyped-def]
        raise AssertionError("fetch must not run")

    monkeypatch.setattr(JiraFetcher, "fetch", fail)
    out = io.StringIO()

    call_command("fetch_times", "--days", "0", stdout=out)

    assert "Not doing anything" in out.getvalue()


def test_fetchers_run_in_order(tracker_settings, monkeypatch: pytest.MonkeyPatch) -> None:
    """JIRA runs before TMetric over the same window."""

    calls: list[tuple[str, datetime, datetime]] = []

    def fake_fetch(self, *, start: datetime, end: datetime) -> int:  # type: ignore[no-untyped-def]
        calls.append((self.name, start, end))
        return 5

    monkeypatch.setattr(JiraFetcher, "fetch", fake_fetch)
    monkeypatch.setattr(TMetricFetcher, "fetch", fake_fetch)
    out = io.StringIO()

    call_command("fetch_times", "--days", "3", stdout=out)

    assert [name for name, _, _ in calls] == ["JIRA", "TMetric"]
    assert calls[0][1:] == calls[1][1:]
    assert "Finished successfully" in out.getvalue()


def test_jira_failure_stops_before_tmetric(tracker_settings, monkeypatch: pytest.MonkeyPatch) -> None:
    """A JIRA error aborts the run so TMetric creates no anonymous tasks."""

    def jira_fails(self, **kwargs):  # type: ignore[no-untyped-def]
        raise IngestionFetchError("HTTP 401 fetching search")

    def tmetric_must_not_run(self, **kwargs):  # type: ignore[no-untyped-def]
        raise AssertionError("TMetric must not run after a JIRA failure")

    monkeypatch.setattr(JiraFetcher, "fetch", jira_fails)
    monkeypatch.setattr(TMetricFetcher, "fetch", tmetric_must_not_run)

    with pytest.raises(CommandError, match="Error fetching from JIRA"):
        call_command("fetch_times", "--days", "1", stdout=io.StringIO())


def test_missing_jira_config_is_an_error(settings) -> None:
    """An enabled source without configuration is rejected up front."""

    settings.JIRA_URL = ""

    with pytest.raises(CommandError, match="JIRA_URL"):
        call_command("fetch_times", "--days", "1", "--no-tmetric", stdout=io.StringIO())


def test_fetch_window_ends_before_midnight() -> None:
    """The window ends at 23:59:59 local time and spans `days` days."""

    start, end = fetch_window(2, now=datetime(2024, 5, 10, 8, 30, tzinfo=UTC))

    assert end == datetime(2024, 5, 10, 23, 59, 59, tzinfo=UTC)
    assert start == datetime(2024, 5, 8, 23, 59, 59, tzinfo=UTC)


def test_malformed_tmetric_export_is_command_error(tracker_settings, monkeypatch: pytest.MonkeyPatch) -> None:
    """A truncated TMetric row surfaces as CommandError."""

    def tmetric_fails(self, **kwargs):  # type: ignore[no-untyped-def]
        return len(parse_detailed_csv(b"User,Task,Time\nben\n", day=kwargs["start"]))

    monkeypatch.setattr(TMetricFetcher, "fetch", tmetric_fails)

    with pytest.raises(CommandError, match="Error fetching from TMetric"):
        call_command("fetch_times", "--days", "1", "--no-jira", stdout=io.StringIO())
