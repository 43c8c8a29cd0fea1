"""Selection subscriptions and the fetch/transform/render pipeline.

A `ReportSelector` stands in for the user and team selector controls: the UI
layer subscribes callbacks, and every selection change is dispatched to them.
`ReportDashboard` is the usual subscriber.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from analysis.report_transform import ReportTransformer
from core.charting.render import ChartOptions, ChartSink
from core.client import ReportClient, ReportResult

logger = logging.getLogger(__name__)


class SelectionKind(str, Enum):
    """Which selector produced a selection."""

    user = "user"
    team = "team"


@dataclass(frozen=True, slots=True)
class Selection:
    """A selected user id or team name, as the raw selector value."""

    kind: SelectionKind
    value: str


SelectionCallback = Callable[[Selection], Awaitable[None]]


class ReportSelector:
    """Dispatch selection changes to subscribed callbacks, in subscription order."""

    def __init__(self) -> None:
        self._callbacks: list[SelectionCallback] = []

    def subscribe(self, callback: SelectionCallback) -> Callable[[], None]:
        """Register a callback; return a function that removes it again."""

        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def select(self, kind: SelectionKind | str, value: str) -> Selection:
        """Announce a selection change to every subscriber and await them.

        A failing callback does not stop the ones after it. Each failure is
        logged, and the first one is re-raised once every callback has run.
        """

        selection = Selection(kind=SelectionKind(kind), value=str(value))
        first_error: Exception | None = None
        for callback in list(self._callbacks):
            try:
                await callback(selection)
            except Exception as exc:
                logger.exception("Selection callback %r failed for %s", callback, selection)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
        return selection


class ReportDashboard:
    """Fetch, transform and render a report whenever the selection changes.

    Args:
        client: Report client used for fetching.
        sink: Chart sink that draws into `target`.
        target: Selector of the element the chart renders into.
        options: Chart size.
        annotate_bug_percent: Add the bug percentage to each month label.
    """

    def __init__(
        self,
        client: ReportClient,
        sink: ChartSink,
        *,
        target: str = "#monthly_chart",
        options: ChartOptions | None = None,
        annotate_bug_percent: bool = False,
    ) -> None:
        self.client = client
        self.sink = sink
        self.target = target
        self.options = options or ChartOptions()
        self.transformer = ReportTransformer(annotate_bug_percent=annotate_bug_percent)
        self.last_result: ReportResult | None = None

    def attach(self, selector: ReportSelector) -> Callable[[], None]:
        """Subscribe to `selector`; return the unsubscribe function."""

        return selector.subscribe(self.on_selection)

    async def on_selection(self, selection: Selection) -> None:
        """Handle one selection change."""

        if selection.kind is SelectionKind.user:
            result = await self.client.fetch_monthly_report(user_id=selection.value)
        else:
            result = await self.client.fetch_monthly_report(team=selection.value)
        self.last_result = result

        if result.error is not None:
            logger.info("Report for %s %r unavailable: %s", selection.kind.value, selection.value, result.error.detail)
            self.sink.show_error(self.target, result.error.user_message)
            return
        self.sink.render(self.target, self.transformer.transform(result.report), self.options)
