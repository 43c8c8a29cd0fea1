"""Unit tests for selection subscriptions and the report dashboard."""

from __future__ import annotations

import asyncio

import pytest

from analysis.dto import MonthlyRecord
from core.charting.render import ChartJsSink, ChartOptions
from core.client import EmptyReport, NetworkError, ReportResult
from core.selection import ReportDashboard, ReportSelector, Selection, SelectionKind

pytestmark = pytest.mark.unit


class FakeClient:
    """Report client stand-in returning queued results."""

    def __init__(self, *results: ReportResult) -> None:
        self.results = list(results)
        self.calls: list[dict[str, object]] = []

    async def fetch_monthly_report(self, **kwargs: object) -> ReportResult:
        self.calls.append(kwargs)
        return self.results.pop(0)


def test_selector_dispatches_to_subscribers_in_order() -> None:
    """Callbacks run in subscription order with the parsed selection."""

    seen: list[tuple[str, Selection]] = []
    selector = ReportSelector()

    async def first(selection: Selection) -> None:
        seen.append(("first", selection))

    async def second(selection: Selection) -> None:
        seen.append(("second", selection))

    selector.subscribe(first)
    selector.subscribe(second)
    asyncio.run(selector.select("team", "Platform"))

    expected = Selection(kind=SelectionKind.team, value="Platform")
    assert seen == [("first", expected), ("second", expected)]


def test_unsubscribe_stops_dispatch() -> None:
    """A removed callback no longer receives selections."""

    seen: list[Selection] = []
    selector = ReportSelector()

    async def callback(selection: Selection) -> None:
        seen.append(selection)

    unsubscribe = selector.subscribe(callback)
    unsubscribe()
    asyncio.run(selector.select(SelectionKind.user, "3"))

    assert seen == []


def test_dashboard_renders_transformed_report() -> None:
    """A user selection fetches, transforms and renders into the target."""

    client = FakeClient(
        ReportResult(report=(MonthlyRecord(month="Jan", feature_seconds=3600, bug_seconds=1800),)),
    )
    sink = ChartJsSink()
    dashboard = ReportDashboard(
        client,  # type: ignore[arg-type]
        sink,
        options=ChartOptions(width=600, height=500),
        annotate_bug_percent=True,
    )
    selector = ReportSelector()
    dashboard.attach(selector)

    asyncio.run(selector.select(SelectionKind.user, "3"))

    assert client.calls == [{"user_id": "3"}]
    panel = sink.panels["#monthly_chart"]
    assert panel.error is None
    assert panel.options == ChartOptions(width=600, height=500)
    assert panel.data is not None
    assert panel.data["labels"] == ["Jan (33%)"]
    assert panel.data["datasets"][0]["data"] == [1.0]
    assert panel.data["datasets"][1]["data"] == [0.5]


def test_dashboard_shows_error_and_replaces_previous_chart() -> None:
    """A failed fetch replaces the previous chart with a user-visible message."""

    client = FakeClient(
        ReportResult(report=(MonthlyRecord(month="Jan", feature_seconds=1, bug_seconds=1),)),
        ReportResult(error=NetworkError("connection refused")),
        ReportResult(error=EmptyReport("Report contains no months.")),
    )
    sink = ChartJsSink()
    dashboard = ReportDashboard(client, sink)  # type: ignore[arg-type]
    selector = ReportSelector()
    dashboard.attach(selector)

    asyncio.run(selector.select(SelectionKind.team, "Platform"))
    asyncio.run(selector.select(SelectionKind.team, "Mobile"))

    assert client.calls == [{"team": "Platform"}, {"team": "Mobile"}]
    panel = sink.panels["#monthly_chart"]
    assert panel.data is None
    assert panel.error == NetworkError.user_message

    asyncio.run(selector.select(SelectionKind.user, "9"))
    assert sink.panels["#monthly_chart"].error == EmptyReport.user_message
    assert isinstance(dashboard.last_result.error, EmptyReport)  # type: ignore[union-attr]


def test_unknown_selection_kind_is_rejected() -> None:
    """Selections must come from the user or team selector."""

    with pytest.raises(ValueError):
        asyncio.run(ReportSelector().select("project", "x"))


def test_failing_subscriber_does_not_block_later_ones() -> None:
    """Later callbacks still run; the first failure is re-raised afterwards."""

    seen: list[str] = []
    selector = ReportSelector()

    async def broken(selection: Selection) -> None:
        raise RuntimeError("render failed")

    async def healthy(selection: Selection) -> None:
        seen.append(selection.value)

    selector.subscribe(broken)
    selector.subscribe(healthy)

    with pytest.raises(RuntimeError, match="render failed"):
        asyncio.run(selector.select("user", "3"))

    assert seen == ["3"]
