"""Render ChartSeries values as Chart.js bar chart payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypedDict

from analysis.dto import ChartSeries

FEATURE_COLOR = "#55dd55"
BUG_COLOR = "#dd5555"


class ChartDataset(TypedDict):
    """A Chart.js dataset payload."""

    label: str
    data: list[float]
    backgroundColor: str


class ChartData(TypedDict):
    """The full Chart.js payload (labels + datasets) for a bar chart."""

    labels: list[str]
    datasets: list[ChartDataset]


@dataclass(frozen=True, slots=True)
class ChartOptions:
    """Size of the rendered chart, in pixels."""

    width: int = 500
    height: int = 300

    def as_json(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class RenderedPanel:
    """The current contents of a chart target.

    Exactly one of `data` and `error` is set.
    """

    target: str
    options: ChartOptions
    data: ChartData | None = None
    error: str | None = None

    def as_json(self) -> dict[str, object]:
        return {
            "target": self.target,
            "options": self.options.as_json(),
            "data": self.data,
            "error": self.error,
        }


def build_bar_chart(series: ChartSeries) -> ChartData:
    """Convert feature/bug hour series into a two-dataset Chart.js payload."""

    return {
        "labels": list(series.labels),
        "datasets": [
            {"label": "Features", "data": list(series.feature_hours), "backgroundColor": FEATURE_COLOR},
            {"label": "Bugs", "data": list(series.bug_hours), "backgroundColor": BUG_COLOR},
        ],
    }


class ChartSink(Protocol):
    """Destination that draws charts into a named target."""

    def render(self, target: str, series: ChartSeries, options: ChartOptions) -> None: ...

    def show_error(self, target: str, message: str) -> None: ...


class ChartJsSink:
    """Chart sink that keeps the latest Chart.js payload for each target.

    Every call replaces what the target held before; nothing is merged.
    """

    def __init__(self) -> None:
        self.panels: dict[str, RenderedPanel] = {}

    def render(self, target: str, series: ChartSeries, options: ChartOptions) -> None:
        self.panels[target] = RenderedPanel(target=target, options=options, data=build_bar_chart(series))

    def show_error(self, target: str, message: str) -> None:
        previous = self.panels.get(target)
        options = previous.options if previous is not None else ChartOptions()
        self.panels[target] = RenderedPanel(target=target, options=options, error=message)
